"""
Ref resolution and checkout for devbase repositories.

A target ref is a name that may be a tag or a branch on the remote. Because
the durable copies are shallow, the name is located through an ordered
fallback chain, stopping at the first step that yields a commit:

    TRY_DIRECT  fetch <ref> by name            -> FETCH_HEAD
    TRY_BRANCH  fetch refs/heads/* shallowly   -> refs/remotes/origin/<ref>
    TRY_TAG     fetch refs/tags/<ref> shallowly -> refs/tags/<ref>
    FAILED      RefNotFoundError

Raw 40-character commit ids are rejected up front: a shallow fetch cannot
reliably materialize an arbitrary commit.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple
import logging

from ..domain.repository import RepoKind, RepositoryHandle
from ..domain.update import AdoptedRef, RefKind
from ..exit_codes import CheckFailedError, RefNotFoundError, SyncError, UnsupportedRefKindError
from ..infra.git_client import GitClient
from ..infra.tool_trust import MiseTrust

logger = logging.getLogger(__name__)

COMMIT_SHA_PATTERN = re.compile(r'^[0-9a-fA-F]{40}$')

# Overlay has no tag model: "latest" is the remote default branch
REMOTE_DEFAULT_REF = "HEAD"


def is_commit_sha(ref: str) -> bool:
    """True for a full 40-character hexadecimal commit id."""
    return bool(COMMIT_SHA_PATTERN.match(ref.strip()))


class ResolutionState(Enum):
    """States of the fallback chain."""
    TRY_DIRECT = "try_direct"
    TRY_BRANCH = "try_branch"
    TRY_TAG = "try_tag"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolution:
    """Where the fallback chain ended."""
    ref: str
    state: ResolutionState
    kind: Optional[RefKind] = None
    revision: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.state == ResolutionState.RESOLVED


class RefResolver:
    """
    Locates a ref on the remote and checks it out safely.

    Example:
        resolver = RefResolver(GitClient())
        adopted = resolver.resolve_and_checkout(core_handle, "v1.4.0")
        print(adopted.kind, adopted.revision)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        trust: Optional[MiseTrust] = None,
        latest_ref: Optional[Callable[[RepositoryHandle], Optional[str]]] = None,
        remote: str = "origin",
        timeout: Optional[int] = None,
    ):
        """
        Args:
            git_client: Client used for fetch/checkout
            trust: Marks the build-tool config trusted after checkout
            latest_ref: Computes a target when none is given
                        (normally ``UpdateChecker.latest_ref``)
            remote: Name of the single canonical remote
            timeout: Seconds allowed per fetch
        """
        self.git = git_client or GitClient()
        self.trust = trust or MiseTrust()
        self.latest_ref = latest_ref
        self.remote = remote
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Fallback steps
    # ------------------------------------------------------------------

    def try_direct(self, path: str, ref: str) -> Optional[str]:
        """Fetch the ref by name; covers tags and branch names alike."""
        if not self.git.fetch(path, ref, remote=self.remote, timeout=self.timeout):
            return None
        return self.git.verify_revision(path, "FETCH_HEAD")

    def try_branch(self, path: str, ref: str) -> Optional[str]:
        """Fetch all branch heads shallowly and look for ``origin/<ref>``."""
        refspec = f"+refs/heads/*:refs/remotes/{self.remote}/*"
        if not self.git.fetch(path, refspec, remote=self.remote, timeout=self.timeout):
            return None
        return self.git.verify_revision(path, f"refs/remotes/{self.remote}/{ref}")

    def try_tag(self, path: str, ref: str) -> Optional[str]:
        """Fetch exactly ``refs/tags/<ref>`` shallowly."""
        refspec = f"+refs/tags/{ref}:refs/tags/{ref}"
        if not self.git.fetch(path, refspec, remote=self.remote, timeout=self.timeout):
            return None
        return self.git.verify_revision(path, f"refs/tags/{ref}")

    def _transitions(self) -> Dict[ResolutionState, Tuple[Callable[[str, str], Optional[str]], RefKind, ResolutionState]]:
        return {
            ResolutionState.TRY_DIRECT: (self.try_direct, RefKind.DIRECT, ResolutionState.TRY_BRANCH),
            ResolutionState.TRY_BRANCH: (self.try_branch, RefKind.BRANCH, ResolutionState.TRY_TAG),
            ResolutionState.TRY_TAG: (self.try_tag, RefKind.TAG, ResolutionState.FAILED),
        }

    def resolve(self, path: str, ref: str) -> Resolution:
        """
        Run the fallback chain for ``ref`` in the working tree at ``path``.

        Only fetches; the working tree is not touched.

        Returns:
            Resolution in state RESOLVED or FAILED
        """
        transitions = self._transitions()
        state = ResolutionState.TRY_DIRECT

        while state in transitions:
            step, kind, next_state = transitions[state]
            revision = step(path, ref)
            if revision:
                logger.debug(f"Resolved {ref} via {state.value} to {revision}")
                return Resolution(ref=ref, state=ResolutionState.RESOLVED, kind=kind, revision=revision)
            logger.debug(f"{state.value} did not resolve {ref}")
            state = next_state

        return Resolution(ref=ref, state=ResolutionState.FAILED)

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _target_for(self, repo: RepositoryHandle) -> str:
        if repo.kind == RepoKind.OVERLAY:
            return REMOTE_DEFAULT_REF
        latest = self.latest_ref(repo) if self.latest_ref else None
        if not latest:
            raise RefNotFoundError("<latest version tag>", repo.remote_url)
        return latest

    def resolve_and_checkout(
        self,
        repo: RepositoryHandle,
        target_ref: Optional[str] = None,
        path: Optional[str] = None,
    ) -> AdoptedRef:
        """
        Move a working tree to ``target_ref``.

        Args:
            repo: Repository handle
            target_ref: Tag or branch; None picks the latest applicable ref
            path: Working tree to operate on (defaults to ``repo.local_path``)

        Returns:
            AdoptedRef describing the new checkout

        Raises:
            UnsupportedRefKindError: target is a raw commit id (no network used)
            CheckFailedError: no usable working tree, or the latest ref could not be computed
            RefNotFoundError: target is neither a branch nor a tag on the remote
            SyncError: checkout failed; the tree is left at its previous ref
        """
        if target_ref is not None and is_commit_sha(target_ref):
            raise UnsupportedRefKindError(target_ref)

        path = path or repo.local_path
        if not self.git.is_git_repo(path):
            raise CheckFailedError(f"{repo.label}: no git checkout at {path}")

        ref = target_ref.strip() if target_ref else self._target_for(repo)

        resolution = self.resolve(path, ref)
        if not resolution.resolved:
            raise RefNotFoundError(ref, repo.remote_url)

        previous = self.git.head_revision(path)
        stashed = self.git.stash(path)
        if stashed:
            logger.info(f"Stashed local changes in {path} (restore with: git stash pop)")

        if not self.git.checkout(path, resolution.revision):
            self._restore(path, previous, stashed)
            raise SyncError(f"Could not check out {ref} in {path}; left at previous revision")

        current = self.git.head_revision(path)
        if current != resolution.revision:
            self._restore(path, previous, stashed)
            raise SyncError(f"Checkout of {ref} in {path} did not complete; left at previous revision")

        self.trust.trust(path)

        return AdoptedRef(
            ref=ref,
            kind=resolution.kind,
            revision=resolution.revision,
            previous=previous,
            stashed=stashed,
        )

    def _restore(self, path: str, previous: Optional[str], stashed: bool) -> None:
        """Put the tree back where it was before a failed checkout."""
        if previous and self.git.head_revision(path) != previous:
            self.git.checkout(path, previous)
        if stashed and not self.git.stash_pop(path):
            logger.warning(f"Local changes remain stashed in {path} (git stash list)")
