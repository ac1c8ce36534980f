"""
Shared fixtures for devbase tests.

FakeGitClient implements the GitClient capability interface against an
in-memory model of remotes and working trees, so resolution and persistence
logic can be exercised without git or a network.
"""

import hashlib
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest

from devbase.config import get_default_config
from devbase.infra.git_client import SHORT_SHA_LENGTH


def sha(name: str) -> str:
    """Deterministic 40-hex commit id for a name."""
    return hashlib.sha1(name.encode()).hexdigest()


@dataclass
class FakeRemote:
    url: str
    branches: Dict[str, str] = field(default_factory=dict)
    tags: Dict[str, str] = field(default_factory=dict)
    default_branch: str = "main"
    reachable: bool = True

    def add_branch(self, name: str, commit: Optional[str] = None) -> str:
        self.branches[name] = commit or sha(f"{self.url}:{name}")
        return self.branches[name]

    def add_tag(self, name: str, commit: Optional[str] = None) -> str:
        self.tags[name] = commit or sha(f"{self.url}:tag:{name}")
        return self.tags[name]

    @property
    def head(self) -> Optional[str]:
        return self.branches.get(self.default_branch)


@dataclass
class FakeWorkTree:
    remote_url: Optional[str]
    head: Optional[str] = None
    refs: Dict[str, str] = field(default_factory=dict)
    fetch_head: Optional[str] = None
    dirty: bool = False
    stashes: int = 0


class FakeGitClient:
    """In-memory stand-in for devbase.infra.git_client.GitClient."""

    def __init__(self):
        self.remotes: Dict[str, FakeRemote] = {}
        self.trees: Dict[str, FakeWorkTree] = {}
        self.calls: List[tuple] = []
        self.fail_checkout = False
        # Simulate servers that refuse fetching a ref by bare name or --branch clones
        self.direct_fetch_fails = False
        self.branch_clone_fails = False
        # Simulate `git stash` failing on a dirty tree
        self.fail_stash = False

    # -- test helpers ---------------------------------------------------

    def add_remote(self, url: str) -> FakeRemote:
        remote = FakeRemote(url=url)
        remote.add_branch("main")
        self.remotes[url] = remote
        return remote

    def add_tree(self, path, remote_url: Optional[str], head: Optional[str] = None,
                 refs: Optional[Dict[str, str]] = None) -> FakeWorkTree:
        tree = FakeWorkTree(remote_url=remote_url, head=head)
        tree.refs.update(refs or {})
        self.trees[str(path)] = tree
        return tree

    def tree(self, path) -> FakeWorkTree:
        return self.trees[str(path)]

    def network_calls(self) -> List[tuple]:
        network = {"list_remote_tags", "remote_head", "fetch", "clone"}
        return [c for c in self.calls if c[0] in network]

    def _remote(self, url: Optional[str]) -> Optional[FakeRemote]:
        remote = self.remotes.get(url) if url else None
        if remote is None or not remote.reachable:
            return None
        return remote

    # -- local inspection ----------------------------------------------

    def is_git_repo(self, path) -> bool:
        return bool(path) and str(path) in self.trees

    def remote_url(self, path, remote="origin"):
        tree = self.trees.get(str(path))
        return tree.remote_url if tree else None

    def describe_tag(self, path):
        tree = self.trees.get(str(path))
        if not tree:
            return None
        for ref, commit in tree.refs.items():
            if ref.startswith("refs/tags/") and commit == tree.head:
                return ref[len("refs/tags/"):]
        return None

    def head_revision(self, path):
        tree = self.trees.get(str(path))
        return tree.head if tree else None

    def short_head(self, path):
        head = self.head_revision(path)
        return head[:SHORT_SHA_LENGTH] if head else None

    def verify_revision(self, path, revision):
        tree = self.trees.get(str(path))
        if not tree:
            return None
        if revision == "HEAD":
            return tree.head
        if revision == "FETCH_HEAD":
            return tree.fetch_head
        if revision in tree.refs:
            return tree.refs[revision]
        for prefix in ("refs/tags/", "refs/remotes/"):
            if prefix + revision in tree.refs:
                return tree.refs[prefix + revision]
        if revision in (tree.head, tree.fetch_head) or revision in tree.refs.values():
            return revision
        return None

    def has_uncommitted_changes(self, path) -> bool:
        return self.trees[str(path)].dirty

    # -- remote queries ------------------------------------------------

    def list_remote_tags(self, url, timeout=None):
        self.calls.append(("list_remote_tags", url))
        remote = self._remote(url)
        return list(remote.tags) if remote else None

    def remote_head(self, url, timeout=None):
        self.calls.append(("remote_head", url))
        remote = self._remote(url)
        return remote.head if remote else None

    # -- mutating operations -------------------------------------------

    def fetch(self, path, refspec=None, remote="origin", depth=1, tags=False, timeout=None):
        self.calls.append(("fetch", str(path), refspec))
        tree = self.trees.get(str(path))
        source = self._remote(tree.remote_url if tree else None)
        if source is None:
            return False

        if tags:
            for name, commit in source.tags.items():
                tree.refs[f"refs/tags/{name}"] = commit

        if refspec is None:
            tree.refs["refs/remotes/origin/HEAD"] = source.head
            tree.refs[f"refs/remotes/origin/{source.default_branch}"] = source.head
            tree.fetch_head = source.head
            return True

        if refspec == "+refs/heads/*:refs/remotes/origin/*":
            for name, commit in source.branches.items():
                tree.refs[f"refs/remotes/origin/{name}"] = commit
            return True

        if refspec.startswith("+refs/tags/"):
            name = refspec.split(":", 1)[0][len("+refs/tags/"):]
            if name not in source.tags:
                return False
            tree.refs[f"refs/tags/{name}"] = source.tags[name]
            return True

        if refspec == "HEAD":
            tree.fetch_head = source.head
            return True

        # Plain name: only refs a direct fetch can see
        if self.direct_fetch_fails:
            return False
        commit = source.tags.get(refspec) or source.branches.get(refspec)
        if commit is None:
            return False
        tree.fetch_head = commit
        return True

    def clone(self, url, dest, branch=None, depth=1, timeout=None):
        self.calls.append(("clone", url, str(dest), branch))
        source = self._remote(url)
        if source is None:
            return False
        refs = {
            "refs/remotes/origin/HEAD": source.head,
            f"refs/remotes/origin/{source.default_branch}": source.head,
        }
        head = source.head
        if branch and self.branch_clone_fails:
            return False
        if branch:
            if branch in source.branches:
                head = source.branches[branch]
                refs[f"refs/remotes/origin/{branch}"] = head
            elif branch in source.tags:
                head = source.tags[branch]
                refs[f"refs/tags/{branch}"] = head
            else:
                return False
        self.add_tree(dest, url, head=head, refs=refs)
        return True

    def checkout(self, path, revision):
        self.calls.append(("checkout", str(path), revision))
        if self.fail_checkout:
            return False
        commit = self.verify_revision(path, revision)
        if commit is None:
            return False
        self.trees[str(path)].head = commit
        return True

    def reset_hard(self, path, revision):
        self.calls.append(("reset_hard", str(path), revision))
        commit = self.verify_revision(path, revision)
        if commit is None:
            return False
        tree = self.trees[str(path)]
        tree.head = commit
        tree.dirty = False
        return True

    def stash(self, path, message="devbase update"):
        tree = self.trees[str(path)]
        if not tree.dirty or self.fail_stash:
            return False
        tree.dirty = False
        tree.stashes += 1
        return True

    def stash_pop(self, path):
        tree = self.trees[str(path)]
        if not tree.stashes:
            return False
        tree.stashes -= 1
        tree.dirty = True
        return True


class FakeTrust:
    def __init__(self):
        self.trusted: List[str] = []

    def trust(self, repo_path):
        self.trusted.append(str(repo_path))
        return True


class FakeInstaller:
    def __init__(self, exit_code: int = 0):
        self.exit_code = exit_code
        self.runs: List[str] = []

    def run(self, core_path):
        self.runs.append(str(core_path))
        return self.exit_code


CORE_URL = "https://git.example.org/devbase/devbase-core.git"
OVERLAY_URL = "https://git.example.org/acme/devbase-custom.git"


@pytest.fixture
def git():
    return FakeGitClient()


@pytest.fixture
def trust():
    return FakeTrust()


@pytest.fixture
def installer():
    return FakeInstaller()


@pytest.fixture
def config(tmp_path):
    cfg = get_default_config()
    cfg["paths"]["data_dir"] = str(tmp_path / "data" / "devbase")
    cfg["paths"]["config_dir"] = str(tmp_path / "config" / "devbase")
    cfg["overlay"]["source_dir"] = ""
    return cfg
