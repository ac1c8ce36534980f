"""
Tests for devbase domain objects.
"""

from devbase.domain import (
    AdoptedRef,
    CheckResult,
    CheckStatus,
    RefKind,
    RepoKind,
    RepositoryHandle,
    SnoozeState,
    UpdatePlan,
    UpdateReport,
)


class TestRepositoryHandle:

    def test_labels(self):
        assert RepositoryHandle(kind=RepoKind.CORE).label == "devbase-core"
        assert RepositoryHandle(kind=RepoKind.OVERLAY).label == "devbase-custom"

    def test_durable_dirnames(self):
        assert RepoKind.CORE.durable_dirname == "core"
        assert RepoKind.OVERLAY.durable_dirname == "custom"


class TestCheckResult:

    def _core(self):
        return RepositoryHandle(kind=RepoKind.CORE, remote_url="u", installed_ref="v1.2.0")

    def test_available_message(self):
        result = CheckResult(self._core(), CheckStatus.AVAILABLE, "v1.2.0", "v1.3.0")
        assert result.available
        assert result.message == "devbase-core: v1.2.0 → v1.3.0"

    def test_unknown_current(self):
        result = CheckResult(self._core(), CheckStatus.AVAILABLE, None, "v1.3.0")
        assert result.message == "devbase-core: unknown → v1.3.0"

    def test_no_message_unless_available(self):
        assert CheckResult(self._core(), CheckStatus.NO_CHANGE, "v1.2.0").message is None
        assert CheckResult(self._core(), CheckStatus.FAILED, "v1.2.0").message is None

    def test_failed_is_not_no_change(self):
        result = CheckResult(self._core(), CheckStatus.FAILED, error="timeout")
        assert result.failed
        assert not result.available
        assert result.status != CheckStatus.NO_CHANGE

    def test_to_dict_includes_error(self):
        result = CheckResult(self._core(), CheckStatus.FAILED, "v1.2.0", error="timeout")
        data = result.to_dict()
        assert data['status'] == 'failed'
        assert data['error'] == 'timeout'
        assert 'error' not in CheckResult(self._core(), CheckStatus.NO_CHANGE).to_dict()


class TestUpdatePlan:

    def test_describe(self):
        repo = RepositoryHandle(kind=RepoKind.CORE)
        assert UpdatePlan(repo, "v1.0.0", "v1.1.0").describe() == "devbase-core: v1.0.0 → v1.1.0"

    def test_describe_forced(self):
        repo = RepositoryHandle(kind=RepoKind.CORE)
        plan = UpdatePlan(repo, "v1.0.0", "feature-x", forced=True)
        assert plan.describe() == "devbase-core: v1.0.0 → feature-x (forced)"
        assert plan.kind == RepoKind.CORE


class TestAdoptedRef:

    def test_changed(self):
        assert AdoptedRef("v1", RefKind.TAG, "b", previous="a").changed
        assert not AdoptedRef("v1", RefKind.TAG, "a", previous="a").changed
        assert AdoptedRef("v1", RefKind.TAG, "a").changed


class TestSnoozeState:

    def test_is_active(self):
        assert SnoozeState(until=100).is_active(99)
        assert not SnoozeState(until=100).is_active(100)


class TestUpdateReport:

    def test_available(self):
        core = RepositoryHandle(kind=RepoKind.CORE)
        overlay = RepositoryHandle(kind=RepoKind.OVERLAY)
        report = UpdateReport(checks=[
            CheckResult(core, CheckStatus.AVAILABLE, "v1", "v2"),
            CheckResult(overlay, CheckStatus.NO_CHANGE, "abc", "abc"),
        ])
        assert [c.repository.kind for c in report.available] == [RepoKind.CORE]
