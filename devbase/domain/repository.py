"""
Repository domain objects for devbase.

devbase manages exactly two repositories:
- core: the provisioning tool itself, released through version tags
- overlay: an organization's customization repo, tracking its default branch
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RepoKind(Enum):
    """Which managed repository a handle refers to."""
    CORE = "core"
    OVERLAY = "overlay"

    @property
    def label(self) -> str:
        """Human-readable name used in update lines."""
        return "devbase-core" if self is RepoKind.CORE else "devbase-custom"

    @property
    def durable_dirname(self) -> str:
        """Directory name of the durable copy under the data dir."""
        return "core" if self is RepoKind.CORE else "custom"


@dataclass(frozen=True)
class RepositoryHandle:
    """
    A managed repository as seen at process start.

    Attributes:
        kind: core or overlay
        local_path: Working tree the handle was discovered at (may be None
                    when nothing was found)
        remote_url: The single canonical remote
        installed_ref: Tag (core) or short commit (overlay) currently installed
    """

    kind: RepoKind
    local_path: Optional[str] = None
    remote_url: Optional[str] = None
    installed_ref: Optional[str] = None

    @property
    def label(self) -> str:
        return self.kind.label
