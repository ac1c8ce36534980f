"""
Durable repository copies for devbase.

devbase is often run from a temporary checkout or an unpacked archive. To be
able to check and apply updates in later sessions it keeps its own copies at
fixed locations under the data dir:

    $XDG_DATA_HOME/devbase/core     tag-tracking copy of the core repository
    $XDG_DATA_HOME/devbase/custom   default-branch copy of the overlay

A source that is not a git checkout cannot be synchronized; that is skipped,
not an error.
"""

from pathlib import Path
from typing import Optional
import logging

from ..domain.repository import RepoKind, RepositoryHandle
from ..domain.update import SyncOutcome, SyncStatus
from ..exit_codes import CommandError, RefNotFoundError, SyncError, UnsupportedRefKindError
from ..infra.git_client import GitClient
from .ref_resolver import RefResolver

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_CANDIDATES = ("origin/HEAD", "origin/main")
FALLBACK_CORE_REF = "main"


class PersistenceSynchronizer:
    """
    Keeps the durable copies present and current.

    Example:
        sync = PersistenceSynchronizer(Path("~/.local/share/devbase"))
        outcome = sync.sync(RepoKind.CORE, "/tmp/devbase-core", "v1.4.0")
        print(outcome.status)   # SyncStatus.CLONED on first run
    """

    def __init__(
        self,
        data_dir: Path,
        git_client: Optional[GitClient] = None,
        resolver: Optional[RefResolver] = None,
        timeout: Optional[int] = None,
    ):
        self.data_dir = Path(data_dir).expanduser()
        self.git = git_client or GitClient()
        self.resolver = resolver or RefResolver(self.git, timeout=timeout)
        self.timeout = timeout

    def durable_path(self, kind: RepoKind) -> Path:
        """Fixed location of the durable copy for a repository kind."""
        return self.data_dir / kind.durable_dirname

    def is_present(self, kind: RepoKind) -> bool:
        return self.git.is_git_repo(str(self.durable_path(kind)))

    def sync(
        self,
        kind: RepoKind,
        source_location: Optional[str],
        desired_ref: Optional[str] = None,
    ) -> SyncOutcome:
        """
        Make sure the durable copy of ``kind`` exists and is current.

        Args:
            kind: core or overlay
            source_location: Checkout devbase was invoked from
            desired_ref: Core only; tag or branch to hold the copy at.
                         Defaults to the source's current tag.

        Returns:
            SyncOutcome (CLONED, UPDATED or SKIPPED)

        Raises:
            RefNotFoundError: core desired_ref is neither a branch nor a tag
            UnsupportedRefKindError: core desired_ref is a raw commit id
            SyncError: clone, fetch, checkout or reset failed
        """
        dest = self.durable_path(kind)

        if not self.git.is_git_repo(source_location):
            reason = "source is not a git checkout"
            logger.info(f"Skipping {kind.label} persistence: {reason}")
            return SyncOutcome(kind=kind, status=SyncStatus.SKIPPED, path=str(dest), reason=reason)

        remote_url = self.git.remote_url(source_location)
        if not remote_url:
            if kind == RepoKind.CORE:
                raise SyncError(f"Could not determine {kind.label} remote URL from {source_location}")
            reason = "source has no remote"
            return SyncOutcome(kind=kind, status=SyncStatus.SKIPPED, path=str(dest), reason=reason)

        if kind == RepoKind.CORE:
            return self._sync_core(source_location, remote_url, dest, desired_ref)
        return self._sync_overlay(remote_url, dest)

    # ------------------------------------------------------------------
    # core
    # ------------------------------------------------------------------

    def _sync_core(self, source: str, remote_url: str, dest: Path, desired_ref: Optional[str]) -> SyncOutcome:
        ref = desired_ref or self.git.describe_tag(source) or FALLBACK_CORE_REF
        handle = RepositoryHandle(kind=RepoKind.CORE, local_path=str(dest), remote_url=remote_url)

        if not self.git.is_git_repo(str(dest)):
            logger.info(f"Cloning {handle.label} to {dest}")
            if self.git.clone(remote_url, str(dest), branch=ref, timeout=self.timeout):
                return SyncOutcome(kind=RepoKind.CORE, status=SyncStatus.CLONED, path=str(dest), ref=ref)

            # --branch fails for refs a fresh shallow clone cannot see
            if not self.git.clone(remote_url, str(dest), timeout=self.timeout):
                raise SyncError(f"Could not clone {remote_url} to {dest}")
            self.git.fetch(str(dest), tags=True, timeout=self.timeout)
            self._checkout(handle, ref, dest)
            return SyncOutcome(kind=RepoKind.CORE, status=SyncStatus.CLONED, path=str(dest), ref=ref)

        logger.info(f"Updating {handle.label} at {dest}")
        self._checkout(handle, ref, dest)
        return SyncOutcome(kind=RepoKind.CORE, status=SyncStatus.UPDATED, path=str(dest), ref=ref)

    def _checkout(self, handle: RepositoryHandle, ref: str, dest: Path) -> None:
        try:
            self.resolver.resolve_and_checkout(handle, ref, path=str(dest))
        except (SyncError, RefNotFoundError, UnsupportedRefKindError):
            raise
        except CommandError as e:
            raise SyncError(f"Could not check out {ref} in {dest}: {e}") from e

    # ------------------------------------------------------------------
    # overlay
    # ------------------------------------------------------------------

    def _sync_overlay(self, remote_url: str, dest: Path) -> SyncOutcome:
        if not self.git.is_git_repo(str(dest)):
            logger.info(f"Cloning {RepoKind.OVERLAY.label} to {dest}")
            if not self.git.clone(remote_url, str(dest), timeout=self.timeout):
                raise SyncError(f"Could not clone {remote_url} to {dest}")
            return SyncOutcome(kind=RepoKind.OVERLAY, status=SyncStatus.CLONED, path=str(dest))

        logger.info(f"Updating {RepoKind.OVERLAY.label} at {dest}")
        if not self.git.fetch(str(dest), timeout=self.timeout):
            raise SyncError(f"Could not fetch {remote_url} into {dest}")

        for candidate in DEFAULT_BRANCH_CANDIDATES:
            if self.git.reset_hard(str(dest), candidate):
                return SyncOutcome(kind=RepoKind.OVERLAY, status=SyncStatus.UPDATED,
                                   path=str(dest), ref=candidate)

        raise SyncError(f"Could not reset {dest} to the remote default branch")
