"""
Update checking for devbase.

Compares what is installed with what the remote offers, without touching
any working tree:
- core: list remote tags, pick one with the version resolver
- overlay: look up the remote HEAD commit

A check that cannot reach the remote reports FAILED, which callers must
keep apart from NO_CHANGE.
"""

import logging
from typing import Iterable, List, Optional

from ..domain.repository import RepoKind, RepositoryHandle
from ..domain.update import CheckResult, CheckStatus
from ..exit_codes import CheckFailedError
from ..infra.git_client import GitClient, short_sha
from .version_resolver import resolve_latest

logger = logging.getLogger(__name__)


class UpdateChecker:
    """
    Read-only update check for core and overlay repositories.

    Example:
        checker = UpdateChecker(GitClient(), timeout=5)
        result = checker.check(core_handle)
        if result.available:
            print(result.message)   # "devbase-core: v1.2.0 → v1.3.0"
    """

    def __init__(self, git_client: Optional[GitClient] = None, timeout: Optional[int] = None):
        """
        Args:
            git_client: Client used for remote queries
            timeout: Seconds allowed per remote query (short for advisory checks)
        """
        self.git = git_client or GitClient()
        self.timeout = timeout

    def latest_ref(self, repo: RepositoryHandle) -> Optional[str]:
        """
        The ref an update would adopt, without comparing to what is installed.

        Returns:
            Tag name (core), short commit (overlay) or None when no
            recognized tag exists

        Raises:
            CheckFailedError: if the remote could not be queried
        """
        if not repo.remote_url:
            raise CheckFailedError(f"{repo.label}: no remote configured")

        if repo.kind == RepoKind.CORE:
            tags = self.git.list_remote_tags(repo.remote_url, timeout=self.timeout)
            if tags is None:
                raise CheckFailedError(f"{repo.label}: could not list tags on {repo.remote_url}")
            latest = resolve_latest(tags)
            return latest.raw if latest else None

        head = self.git.remote_head(repo.remote_url, timeout=self.timeout)
        if head is None:
            raise CheckFailedError(f"{repo.label}: could not read HEAD of {repo.remote_url}")
        return short_sha(head)

    def check(self, repo: RepositoryHandle) -> CheckResult:
        """
        Check one repository.

        Returns:
            CheckResult with status FAILED, NO_CHANGE or AVAILABLE
        """
        current = repo.installed_ref
        try:
            target = self.latest_ref(repo)
        except CheckFailedError as e:
            logger.debug(str(e))
            return CheckResult(repository=repo, status=CheckStatus.FAILED,
                               current_ref=current, error=str(e))

        if target is None:
            logger.debug(f"{repo.label}: no recognized version tag on remote")
            return CheckResult(repository=repo, status=CheckStatus.NO_CHANGE, current_ref=current)

        if self._same_ref(repo, current, target):
            return CheckResult(repository=repo, status=CheckStatus.NO_CHANGE,
                               current_ref=current, target_ref=target)

        return CheckResult(repository=repo, status=CheckStatus.AVAILABLE,
                           current_ref=current, target_ref=target)

    def check_all(self, repos: Iterable[RepositoryHandle]) -> List[CheckResult]:
        """
        Check several repositories independently.

        An unexpected error on one repository is reported as FAILED for that
        repository only.
        """
        results = []
        for repo in repos:
            try:
                results.append(self.check(repo))
            except Exception as e:
                logger.warning(f"Update check for {repo.label} failed: {e}")
                results.append(CheckResult(repository=repo, status=CheckStatus.FAILED,
                                           current_ref=repo.installed_ref, error=str(e)))
        return results

    @staticmethod
    def _same_ref(repo: RepositoryHandle, current: Optional[str], target: str) -> bool:
        if not current:
            return False
        if repo.kind == RepoKind.OVERLAY:
            return short_sha(current) == short_sha(target)
        return current == target
