"""
Update result domain objects for devbase.

Provides the result types passed between the checker, the ref resolver,
the persistence synchronizer and the interactive update command.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .repository import RepoKind, RepositoryHandle


class CheckStatus(Enum):
    """Outcome of checking one repository."""
    FAILED = "failed"
    NO_CHANGE = "no_change"
    AVAILABLE = "available"


@dataclass
class CheckResult:
    """
    Result of checking a single repository for a newer version.

    FAILED means the check could not be done; it never means "up to date".
    """
    repository: RepositoryHandle
    status: CheckStatus
    current_ref: Optional[str] = None
    target_ref: Optional[str] = None
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.status == CheckStatus.AVAILABLE

    @property
    def failed(self) -> bool:
        return self.status == CheckStatus.FAILED

    @property
    def message(self) -> Optional[str]:
        """The "label: old → new" line, only for available updates."""
        if not self.available:
            return None
        return f"{self.repository.label}: {self.current_ref or 'unknown'} → {self.target_ref}"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'name': self.repository.label,
            'kind': self.repository.kind.value,
            'status': self.status.value,
            'current': self.current_ref,
            'target': self.target_ref,
        }
        if self.error:
            result['error'] = self.error
        return result


@dataclass
class UpdatePlan:
    """What an apply is going to do to one repository."""
    repository: RepositoryHandle
    current_ref: Optional[str]
    target_ref: Optional[str]
    forced: bool = False

    @property
    def kind(self) -> RepoKind:
        return self.repository.kind

    def describe(self) -> str:
        target = self.target_ref or "latest"
        suffix = " (forced)" if self.forced else ""
        return f"{self.repository.label}: {self.current_ref or 'unknown'} → {target}{suffix}"


class RefKind(Enum):
    """How a target ref was found on the remote."""
    DIRECT = "direct"
    BRANCH = "branch"
    TAG = "tag"


@dataclass(frozen=True)
class AdoptedRef:
    """A ref that is now checked out in a working tree."""
    ref: str
    kind: RefKind
    revision: str
    previous: Optional[str] = None
    stashed: bool = False

    @property
    def changed(self) -> bool:
        return self.previous is None or self.previous != self.revision


class SyncStatus(Enum):
    """Outcome of synchronizing one durable repository copy."""
    CLONED = "cloned"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass
class SyncOutcome:
    """Result of `PersistenceSynchronizer.sync`."""
    kind: RepoKind
    status: SyncStatus
    path: str
    ref: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class SnoozeState:
    """Debounce deadline as a UNIX epoch timestamp."""
    until: int

    def is_active(self, now: float) -> bool:
        return self.until > now


@dataclass
class UpdateReport:
    """Everything the interactive update produced, for rendering."""
    checks: List[CheckResult] = field(default_factory=list)
    adopted: Dict[str, AdoptedRef] = field(default_factory=dict)
    synced: List[SyncOutcome] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    offline: bool = False
    up_to_date: bool = False
    declined: bool = False
    installed: bool = False

    @property
    def available(self) -> List[CheckResult]:
        return [c for c in self.checks if c.available]
