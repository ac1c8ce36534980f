"""
Interactive update orchestration for devbase.

check -> display -> confirm -> apply -> reinstall.

Used by the `devbase check` and `devbase update` commands.
"""

import logging
import shlex
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional

from ..domain.repository import RepoKind, RepositoryHandle
from ..domain.update import CheckResult, CheckStatus, UpdatePlan, UpdateReport
from ..exit_codes import CommandError, ConfigError, SyncError, UnsupportedRefKindError
from ..infra.git_client import GitClient
from ..infra.installer import Installer, InstallerError
from ..infra.state_store import FileScalarStore
from ..infra.tool_trust import MiseTrust
from .persistence_service import PersistenceSynchronizer
from .ref_resolver import REMOTE_DEFAULT_REF, RefResolver, is_commit_sha
from .repository_service import RepositoryService
from .snooze_service import SnoozeStore
from .update_checker import UpdateChecker

logger = logging.getLogger(__name__)

SNOOZE_FILENAME = "update-snooze"
VERSION_FILENAME = "version"


def install_command(config: Dict[str, Any]) -> List[str]:
    """
    The installer argv from ``install.command``.

    A string (e.g. from DEVBASE_INSTALL_COMMAND) is split shell-style.

    Raises:
        ConfigError: if the setting is empty or not a list of strings
    """
    command = config.get("install", {}).get("command")
    if isinstance(command, str):
        command = shlex.split(command)
    if not command or not isinstance(command, list) or not all(isinstance(a, str) for a in command):
        raise ConfigError(f"install.command must be a non-empty list of strings, got: {command!r}")
    return command


class UpdateService:
    """
    Composes checking, resolution, persistence and the installer hand-off.

    Example:
        service = UpdateService(config)
        for message in service.update(confirm=lambda plans: True):
            print(message)
        report = service.last_report
    """

    def __init__(
        self,
        config: Dict[str, Any],
        git_client: Optional[GitClient] = None,
        repositories: Optional[RepositoryService] = None,
        snooze: Optional[SnoozeStore] = None,
        installer: Optional[Installer] = None,
        trust: Optional[MiseTrust] = None,
        advisory: bool = False,
    ):
        """
        Args:
            config: Loaded configuration
            git_client: Shared git client (a short-timeout one for advisory checks)
            advisory: Use the short check timeout
        """
        self.config = config
        update_config = config.get("update", {})
        self.check_timeout = int(update_config.get("check_timeout_seconds", 5))
        self.fetch_timeout = int(update_config.get("fetch_timeout_seconds", 120))

        self.git = git_client or GitClient(timeout=self.fetch_timeout)
        config_dir = Path(config["paths"]["config_dir"]).expanduser()

        self.repositories = repositories or RepositoryService(
            config, self.git, marker=FileScalarStore(config_dir / VERSION_FILENAME)
        )
        self.snooze = snooze or SnoozeStore(FileScalarStore(config_dir / SNOOZE_FILENAME))
        self.installer = installer

        self.checker = UpdateChecker(
            self.git, timeout=self.check_timeout if advisory else self.fetch_timeout
        )
        self.resolver = RefResolver(
            self.git,
            trust=trust or MiseTrust(),
            latest_ref=self.checker.latest_ref,
            timeout=self.fetch_timeout,
        )
        self.synchronizer = PersistenceSynchronizer(
            Path(config["paths"]["data_dir"]),
            self.git,
            resolver=self.resolver,
            timeout=self.fetch_timeout,
        )
        self.last_report: Optional[UpdateReport] = None

    def check(self) -> List[CheckResult]:
        """Check core and overlay; each result is independent of the other."""
        handles = [h for h in self.repositories.discover_all() if self._is_managed(h)]
        return self.checker.check_all(handles)

    def _is_managed(self, handle: RepositoryHandle) -> bool:
        # No overlay configured at all is not a failure
        if handle.kind == RepoKind.OVERLAY:
            return bool(handle.local_path or handle.remote_url)
        return True

    @staticmethod
    def all_failed(results: List[CheckResult]) -> bool:
        return bool(results) and all(r.status == CheckStatus.FAILED for r in results)

    def plan(self, results: List[CheckResult], ref: Optional[str] = None) -> List[UpdatePlan]:
        """
        Turn check results into update plans.

        A forced ``ref`` always yields a core plan, whatever the core check said.
        """
        plans = []
        for result in results:
            if result.repository.kind == RepoKind.CORE and ref:
                plans.append(UpdatePlan(result.repository, result.current_ref, ref, forced=True))
            elif result.available:
                plans.append(UpdatePlan(result.repository, result.current_ref, result.target_ref))
        return plans

    def update(
        self,
        ref: Optional[str] = None,
        confirm: Optional[Callable[[List[UpdatePlan]], bool]] = None,
        interactive: bool = True,
        install: bool = True,
    ) -> Generator[str, None, UpdateReport]:
        """
        Check for updates and apply them.

        Args:
            ref: Force the core repository to this tag or branch
                 (defaults to the ``core.ref`` setting)
            confirm: Asked before applying; skipped when ``ref`` is given or
                     the session is not interactive
            interactive: False for non-interactive sessions
            install: Hand off to the installer after a successful apply

        Yields:
            Progress messages

        Returns:
            UpdateReport

        Raises:
            UnsupportedRefKindError: ref is a raw commit id (before any network access)
            RefNotFoundError: ref is neither a branch nor a tag on the core remote
            SyncError: every planned update failed
        """
        report = UpdateReport()
        self.last_report = report
        ref = ref or self.config.get("core", {}).get("ref") or None
        if ref and is_commit_sha(ref):
            raise UnsupportedRefKindError(ref)

        yield "Checking for updates..."
        report.checks = self.check()
        for result in report.checks:
            if result.failed:
                yield f"Could not check {result.repository.label}: {result.error or 'unreachable'}"

        if self.all_failed(report.checks) and not ref:
            report.offline = True
            yield "Offline: could not reach any update source"
            return report

        plans = self.plan(report.checks, ref)
        if not plans:
            report.up_to_date = True
            yield "devbase is up to date"
            return report

        for plan in plans:
            yield plan.describe()

        forced = any(p.forced for p in plans)
        if not forced and interactive and confirm is not None and not confirm(plans):
            report.declined = True
            yield "Update cancelled"
            return report

        failed = []
        for plan in plans:
            try:
                yield from self._apply(plan, report)
            except SyncError as e:
                failed.append(plan.kind)
                report.errors.append(f"{plan.repository.label}: {e}")
                yield f"{plan.repository.label}: update failed: {e}"

        if len(failed) == len(plans):
            raise SyncError("; ".join(report.errors))

        self.snooze.clear()

        if install and RepoKind.CORE not in failed:
            installer = self.installer or Installer(install_command(self.config))
            core_path = self._core_path()
            yield f"Running installer from {core_path}"
            try:
                code = installer.run(core_path)
            except InstallerError as e:
                raise CommandError(str(e)) from e
            if code != 0:
                raise CommandError(f"Installer exited with code {code}", exit_code=code)
            report.installed = True

        return report

    def _apply(self, plan: UpdatePlan, report: UpdateReport) -> Generator[str, None, None]:
        """Apply one plan: direct checkout of the working copy, then persistence."""
        repo = plan.repository
        durable = str(self.synchronizer.durable_path(repo.kind))
        target = plan.target_ref if repo.kind == RepoKind.CORE else REMOTE_DEFAULT_REF

        if repo.local_path and repo.local_path != durable:
            adopted = self.resolver.resolve_and_checkout(repo, target)
            report.adopted[repo.label] = adopted
            if adopted.changed:
                yield f"{repo.label}: now at {adopted.ref} ({adopted.revision[:7]})"
            else:
                yield f"{repo.label}: already at {adopted.ref} ({adopted.revision[:7]})"
            if adopted.stashed:
                yield f"{repo.label}: local changes were stashed (git stash pop to restore)"

        source = repo.local_path or self.repositories.source_location(repo.kind)
        desired = plan.target_ref if repo.kind == RepoKind.CORE else None
        try:
            outcome = self.synchronizer.sync(repo.kind, source, desired)
        except SyncError as e:
            if repo.label in report.adopted:
                # Working copy already moved; persistence is best-effort
                report.errors.append(str(e))
                yield f"{repo.label}: could not update durable copy: {e}"
                return
            raise
        report.synced.append(outcome)
        yield f"{repo.label}: durable copy {outcome.status.value} at {outcome.path}"

    def _core_path(self) -> str:
        durable = self.synchronizer.durable_path(RepoKind.CORE)
        if self.git.is_git_repo(str(durable)):
            return str(durable)
        core = self.repositories.discover(RepoKind.CORE)
        return core.local_path or str(durable)
