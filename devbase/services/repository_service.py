"""
Repository discovery for devbase.

Builds the RepositoryHandle for core and overlay at process start by probing
candidate locations in order:

    core:    core.source_dir (config)  ->  durable copy
    overlay: overlay.source_dir / DEVBASE_CUSTOM_DIR  ->  durable copy

The installed core version comes from the version marker the installer
writes to the config dir; the overlay's installed ref is its short HEAD.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.repository import RepoKind, RepositoryHandle
from ..infra.git_client import GitClient
from ..infra.state_store import ScalarStore

logger = logging.getLogger(__name__)

DEV_VERSION = "0.0.0-dev"


def parse_version_marker(content: Optional[str], field: int = 1) -> Optional[str]:
    """
    Extract the installed tag from the version marker.

    The marker's first line holds whitespace-separated fields, e.g.
    ``2025-06-01T10:15:00 v1.4.0 3f2a9c1``; ``field`` is the zero-based
    position of the tag.

    Returns:
        The tag, or None if the marker is missing or too short
    """
    if not content:
        return None
    lines = content.strip().splitlines()
    if not lines:
        return None
    fields = lines[0].split()
    if field < 0 or field >= len(fields):
        return None
    return fields[field]


class RepositoryService:
    """
    Discovers the managed repositories.

    Example:
        service = RepositoryService(config, marker=FileScalarStore(config_dir / "version"))
        core = service.discover(RepoKind.CORE)
        print(core.installed_ref)
    """

    def __init__(
        self,
        config: Dict[str, Any],
        git_client: Optional[GitClient] = None,
        marker: Optional[ScalarStore] = None,
    ):
        self.config = config
        self.git = git_client or GitClient()
        self.marker = marker

    @property
    def data_dir(self) -> Path:
        return Path(self.config["paths"]["data_dir"]).expanduser()

    def durable_path(self, kind: RepoKind) -> Path:
        return self.data_dir / kind.durable_dirname

    def candidate_paths(self, kind: RepoKind) -> List[str]:
        """Locations probed for a repository, most specific first."""
        section = self.config.get(kind.value, {})
        candidates = []
        source = section.get("source_dir")
        if source:
            candidates.append(str(Path(source).expanduser()))
        candidates.append(str(self.durable_path(kind)))
        return candidates

    def source_location(self, kind: RepoKind) -> Optional[str]:
        """The configured source directory (git checkout or not), if it exists."""
        source = self.config.get(kind.value, {}).get("source_dir")
        if source and Path(source).expanduser().is_dir():
            return str(Path(source).expanduser())
        return None

    def discover(self, kind: RepoKind) -> RepositoryHandle:
        """
        Build the handle for one repository.

        The handle may have no local path or remote when nothing is found;
        the update check then reports FAILED for it.
        """
        local_path = None
        for candidate in self.candidate_paths(kind):
            if self.git.is_git_repo(candidate):
                local_path = candidate
                break

        remote_url = self.config.get(kind.value, {}).get("remote_url") or None
        if not remote_url and local_path:
            remote_url = self.git.remote_url(local_path)

        installed_ref = self.installed_ref(kind, local_path)
        logger.debug(f"Discovered {kind.label}: path={local_path} remote={remote_url} ref={installed_ref}")
        return RepositoryHandle(
            kind=kind,
            local_path=local_path,
            remote_url=remote_url,
            installed_ref=installed_ref,
        )

    def discover_all(self) -> List[RepositoryHandle]:
        """Handles for core and overlay, core first."""
        return [self.discover(RepoKind.CORE), self.discover(RepoKind.OVERLAY)]

    def installed_ref(self, kind: RepoKind, local_path: Optional[str]) -> Optional[str]:
        """Tag (core) or short commit (overlay) currently installed."""
        if kind == RepoKind.OVERLAY:
            return self.git.short_head(local_path) if local_path else None

        if self.marker is not None:
            field = int(self.config.get("update", {}).get("version_marker_field", 1))
            tag = parse_version_marker(self.marker.read(), field)
            if tag:
                return tag

        if local_path:
            return self.git.describe_tag(local_path) or DEV_VERSION
        return None

    def version_info(self) -> List[Dict[str, Any]]:
        """Installed tag, commit and remote for both repositories."""
        info = []
        for handle in self.discover_all():
            path = handle.local_path
            info.append({
                'name': handle.label,
                'kind': handle.kind.value,
                'tag': (self.git.describe_tag(path) if path else None) or (
                    handle.installed_ref if handle.kind == RepoKind.CORE else None),
                'commit': self.git.short_head(path) if path else None,
                'remote': handle.remote_url,
                'path': path,
            })
        return info
