"""
Tests for GitClient command construction and output parsing.

subprocess.run is patched; no git binary or network is used.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from devbase.infra.git_client import GitClient, short_sha


def completed(stdout="", returncode=0, stderr=""):
    return MagicMock(stdout=stdout, returncode=returncode, stderr=stderr)


@pytest.fixture
def run():
    with patch("devbase.infra.git_client.subprocess.run") as mock_run:
        yield mock_run


class TestShortSha:

    def test_abbreviates(self):
        assert short_sha("3f2a9c1e" + "0" * 32) == "3f2a9c1"

    def test_none(self):
        assert short_sha(None) is None
        assert short_sha("") is None


class TestRun:

    def test_disables_terminal_prompt(self, run):
        run.return_value = completed("x")
        GitClient()._run(["status"])
        assert run.call_args.kwargs["env"]["GIT_TERMINAL_PROMPT"] == "0"

    def test_uses_default_timeout(self, run):
        run.return_value = completed()
        GitClient(timeout=7)._run(["status"])
        assert run.call_args.kwargs["timeout"] == 7

    def test_timeout_override(self, run):
        run.return_value = completed()
        GitClient(timeout=7)._run(["status"], timeout=2)
        assert run.call_args.kwargs["timeout"] == 2

    def test_timeout_is_failure(self, run):
        run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=5)
        assert GitClient()._run(["ls-remote", "u"]) == (None, -1)

    def test_missing_git_is_failure(self, run):
        run.side_effect = FileNotFoundError("git")
        assert GitClient()._run(["status"]) == (None, -1)


class TestRemoteQueries:

    def test_list_remote_tags(self, run):
        run.return_value = completed(
            "aaa\trefs/tags/v1.0.0\n"
            "bbb\trefs/tags/v1.1.0-rc.1\n"
            "ccc\trefs/tags/nightly\n"
        )
        tags = GitClient().list_remote_tags("https://h/devbase-core.git", timeout=5)

        assert tags == ["v1.0.0", "v1.1.0-rc.1", "nightly"]
        args = run.call_args.args[0]
        assert args == ["git", "ls-remote", "--tags", "--refs", "https://h/devbase-core.git"]
        assert run.call_args.kwargs["timeout"] == 5

    def test_list_remote_tags_empty(self, run):
        run.return_value = completed("")
        assert GitClient().list_remote_tags("u") == []

    def test_list_remote_tags_unreachable(self, run):
        run.return_value = completed(returncode=128, stderr="fatal: unable to access")
        assert GitClient().list_remote_tags("u") is None

    def test_list_remote_tags_timeout(self, run):
        run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=5)
        assert GitClient().list_remote_tags("u", timeout=5) is None

    def test_remote_head(self, run):
        run.return_value = completed("abc123\tHEAD\n")
        assert GitClient().remote_head("u") == "abc123"
        assert run.call_args.args[0] == ["git", "ls-remote", "u", "HEAD"]

    def test_remote_head_unreachable(self, run):
        run.return_value = completed(returncode=128)
        assert GitClient().remote_head("u") is None


class TestLocal:

    def test_is_git_repo(self, tmp_path):
        client = GitClient()
        assert not client.is_git_repo(str(tmp_path))
        assert not client.is_git_repo(None)
        (tmp_path / ".git").mkdir()
        assert client.is_git_repo(str(tmp_path))

    def test_verify_revision(self, run):
        run.return_value = completed("deadbeef\n")
        assert GitClient().verify_revision("/r", "refs/tags/v1.0.0") == "deadbeef"
        assert run.call_args.args[0][-1] == "refs/tags/v1.0.0^{commit}"
        assert run.call_args.kwargs["cwd"] == "/r"

    def test_verify_revision_missing(self, run):
        run.return_value = completed(returncode=1)
        assert GitClient().verify_revision("/r", "nope") is None

    def test_stash_clean_tree(self, run):
        run.return_value = completed("")
        assert GitClient().stash("/r") is False
        assert run.call_count == 1

    def test_stash_dirty_tree(self, run):
        run.side_effect = [completed(" M file\n"), completed()]
        assert GitClient().stash("/r") is True
        assert "--include-untracked" in run.call_args.args[0]


class TestMutating:

    def test_shallow_fetch(self, run):
        run.return_value = completed()
        assert GitClient().fetch("/r", "v1.0.0", timeout=30)
        assert run.call_args.args[0] == ["git", "fetch", "--quiet", "--depth=1", "origin", "v1.0.0"]

    def test_fetch_tags(self, run):
        run.return_value = completed()
        GitClient().fetch("/r", tags=True)
        assert run.call_args.args[0] == ["git", "fetch", "--quiet", "--depth=1", "--tags", "origin"]

    def test_fetch_failure(self, run):
        run.return_value = completed(returncode=128)
        assert not GitClient().fetch("/r", "nope")

    def test_clone_with_branch(self, run, tmp_path):
        run.return_value = completed()
        dest = tmp_path / "data" / "core"
        assert GitClient().clone("u", str(dest), branch="v1.0.0")
        assert run.call_args.args[0] == [
            "git", "clone", "--quiet", "--depth=1", "--branch", "v1.0.0", "u", str(dest)
        ]
        assert (tmp_path / "data").is_dir()
