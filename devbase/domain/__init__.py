"""
Domain layer for devbase.

Contains pure domain objects with no I/O or side effects:
- RepositoryHandle: A managed repository (core or overlay)
- VersionTag: A release/rc/beta tag parsed from its name
- CheckResult / UpdatePlan / AdoptedRef / SyncOutcome: Update results
"""

from .repository import RepoKind, RepositoryHandle
from .version import Channel, VersionTag
from .update import (
    AdoptedRef,
    CheckResult,
    CheckStatus,
    RefKind,
    SnoozeState,
    SyncOutcome,
    SyncStatus,
    UpdatePlan,
    UpdateReport,
)

__all__ = [
    'RepoKind',
    'RepositoryHandle',
    'Channel',
    'VersionTag',
    'AdoptedRef',
    'CheckResult',
    'CheckStatus',
    'RefKind',
    'SnoozeState',
    'SyncOutcome',
    'SyncStatus',
    'UpdatePlan',
    'UpdateReport',
]
