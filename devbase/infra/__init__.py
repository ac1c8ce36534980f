"""
Infrastructure layer for devbase.

Contains abstractions for external systems:
- GitClient: Git command execution (remote listing, shallow fetch/clone, checkout)
- ScalarStore: Single-value persisted state (snooze deadline, version marker)
- MiseTrust: Build-tool trust marker handling
- Installer: Full-installation entry point

These provide clean interfaces that can be replaced with fakes for testing.
"""

from .git_client import GitClient, SHORT_SHA_LENGTH, short_sha
from .state_store import ScalarStore, FileScalarStore, MemoryScalarStore
from .tool_trust import MiseTrust
from .installer import Installer, InstallerError

__all__ = [
    'GitClient',
    'SHORT_SHA_LENGTH',
    'short_sha',
    'ScalarStore',
    'FileScalarStore',
    'MemoryScalarStore',
    'MiseTrust',
    'Installer',
    'InstallerError',
]
