"""
Service layer for devbase.

Contains the update logic that orchestrates domain objects and infrastructure:
- resolve_latest: Channel-priority tag selection
- SnoozeStore: Update-notice debounce
- UpdateChecker: Read-only comparison of installed and available refs
- RefResolver: Branch/tag fallback chain and safe checkout
- PersistenceSynchronizer: Durable copies of core and overlay
- RepositoryService: Discovery of the managed repositories
- UpdateService: check -> confirm -> apply -> install

Services are the primary API for commands to use.
"""

from .version_resolver import resolve_latest, classify_tags
from .snooze_service import SnoozeStore
from .update_checker import UpdateChecker
from .ref_resolver import RefResolver, Resolution, ResolutionState, is_commit_sha
from .persistence_service import PersistenceSynchronizer
from .repository_service import RepositoryService, parse_version_marker
from .update_service import UpdateService

__all__ = [
    'resolve_latest',
    'classify_tags',
    'SnoozeStore',
    'UpdateChecker',
    'RefResolver',
    'Resolution',
    'ResolutionState',
    'is_commit_sha',
    'PersistenceSynchronizer',
    'RepositoryService',
    'parse_version_marker',
    'UpdateService',
]
