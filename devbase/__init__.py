"""
devbase - self-update and version resolution for the devbase workstation tooling.

devbase keeps two repositories current:
- devbase-core: the provisioning tool, released as version tags
- devbase-custom: an organization overlay that tracks its default branch

Quick Start:
    from devbase import load_config, UpdateService

    service = UpdateService(load_config())
    for result in service.check():
        if result.available:
            print(result.message)      # "devbase-core: v1.3.0 → v1.4.0"

    from devbase import resolve_latest
    resolve_latest(["v1.2.0", "v1.3.0-rc.1"]).raw   # "v1.2.0"

Domain Objects:
    RepositoryHandle - A managed repository (core or overlay)
    VersionTag - release / rc / beta tag
    CheckResult, UpdatePlan, AdoptedRef, SyncOutcome - update results

Services:
    UpdateChecker, RefResolver, PersistenceSynchronizer, SnoozeStore,
    RepositoryService, UpdateService
"""

__version__ = "1.0.0"

from .domain import (
    RepoKind,
    RepositoryHandle,
    Channel,
    VersionTag,
    CheckResult,
    CheckStatus,
    UpdatePlan,
    AdoptedRef,
    SyncOutcome,
)

from .services import (
    resolve_latest,
    SnoozeStore,
    UpdateChecker,
    RefResolver,
    PersistenceSynchronizer,
    RepositoryService,
    UpdateService,
)

from .config import load_config

__all__ = [
    "__version__",
    "RepoKind",
    "RepositoryHandle",
    "Channel",
    "VersionTag",
    "CheckResult",
    "CheckStatus",
    "UpdatePlan",
    "AdoptedRef",
    "SyncOutcome",
    "resolve_latest",
    "SnoozeStore",
    "UpdateChecker",
    "RefResolver",
    "PersistenceSynchronizer",
    "RepositoryService",
    "UpdateService",
    "load_config",
]
