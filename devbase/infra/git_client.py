"""
Git client infrastructure for devbase.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to replace with a fake in tests (no real remote needed)
- Consistent in error handling (failures are return values, not exceptions)
- Isolated from the resolution and persistence logic

Network operations are always shallow (depth 1) and bounded by a timeout.
A timeout is reported exactly like any other failure.
"""

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

SHORT_SHA_LENGTH = 7


def short_sha(revision: Optional[str]) -> Optional[str]:
    """Abbreviate a commit id to the length used in update messages."""
    if not revision:
        return None
    return revision[:SHORT_SHA_LENGTH]


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient(timeout=5)
        tags = client.list_remote_tags("https://example.org/devbase-core.git")
        if tags is None:
            print("offline")
    """

    def __init__(self, timeout: int = 120):
        """
        Initialize GitClient.

        Args:
            timeout: Default command timeout in seconds
        """
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments after ``git``
            cwd: Working directory
            timeout: Override the default timeout

        Returns:
            Tuple of (stdout, returncode); returncode is -1 on timeout or
            when git could not be started
        """
        cmd = ["git"] + list(args)
        env = dict(os.environ)
        # Never block on a credential prompt
        env["GIT_TERMINAL_PROMPT"] = "0"

        try:
            logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd})")
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout or self.timeout,
                env=env,
            )
            if result.returncode != 0 and result.stderr:
                logger.debug(f"git {args[0]} failed: {result.stderr.strip()}")
            output = result.stdout
            return output.strip() if output else None, result.returncode

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

    # ------------------------------------------------------------------
    # Local inspection
    # ------------------------------------------------------------------

    def is_git_repo(self, path: Optional[str]) -> bool:
        """Check if path is a git working tree."""
        if not path:
            return False
        return (Path(path) / ".git").exists()

    def remote_url(self, path: str, remote: str = "origin") -> Optional[str]:
        """Get the URL of a remote, or None."""
        output, code = self._run(["remote", "get-url", remote], cwd=path)
        if code == 0 and output:
            return output.strip()
        return None

    def describe_tag(self, path: str) -> Optional[str]:
        """Nearest tag reachable from HEAD (``git describe --tags --abbrev=0``)."""
        output, code = self._run(["describe", "--tags", "--abbrev=0"], cwd=path)
        if code == 0 and output:
            return output.strip()
        return None

    def head_revision(self, path: str) -> Optional[str]:
        """Full commit id of HEAD."""
        return self.verify_revision(path, "HEAD")

    def short_head(self, path: str) -> Optional[str]:
        """Abbreviated commit id of HEAD."""
        output, code = self._run(["rev-parse", f"--short={SHORT_SHA_LENGTH}", "HEAD"], cwd=path)
        if code == 0 and output:
            return output.strip()
        return None

    def verify_revision(self, path: str, revision: str) -> Optional[str]:
        """Resolve a revision to a commit id, or None if it does not exist locally."""
        output, code = self._run(
            ["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"], cwd=path
        )
        if code == 0 and output:
            return output.strip()
        return None

    def has_uncommitted_changes(self, path: str) -> bool:
        """Check if repo has uncommitted changes."""
        output, code = self._run(["status", "--porcelain"], cwd=path)
        return code == 0 and bool(output and output.strip())

    # ------------------------------------------------------------------
    # Remote queries
    # ------------------------------------------------------------------

    def _ls_remote(self, url: str, args: List[str], timeout: Optional[int]) -> Optional[Dict[str, str]]:
        output, code = self._run(["ls-remote"] + args + [url], timeout=timeout)
        if code != 0:
            return None

        refs = {}
        for line in (output or "").splitlines():
            if '\t' not in line:
                continue
            sha, ref = line.split('\t', 1)
            refs[ref.strip()] = sha.strip()
        return refs

    def list_remote_tags(self, url: str, timeout: Optional[int] = None) -> Optional[List[str]]:
        """
        List tag names on a remote without cloning.

        Returns:
            Tag names, or None if the remote could not be reached
        """
        refs = self._ls_remote(url, ["--tags", "--refs"], timeout)
        if refs is None:
            return None
        prefix = "refs/tags/"
        return [ref[len(prefix):] for ref in refs if ref.startswith(prefix)]

    def remote_head(self, url: str, timeout: Optional[int] = None) -> Optional[str]:
        """
        Commit id of the remote's HEAD (its default branch).

        Returns:
            Full commit id, or None if the remote could not be reached
        """
        # Restrict to the HEAD pattern so large remotes answer quickly
        output, code = self._run(["ls-remote", url, "HEAD"], timeout=timeout)
        if code != 0 or not output:
            return None
        for line in output.splitlines():
            sha, _, ref = line.partition('\t')
            if ref.strip() == "HEAD":
                return sha.strip()
        return None

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def fetch(
        self,
        path: str,
        refspec: Optional[str] = None,
        remote: str = "origin",
        depth: Optional[int] = 1,
        tags: bool = False,
        timeout: Optional[int] = None,
    ) -> bool:
        """
        Fetch from the remote.

        Args:
            refspec: What to fetch (None fetches the remote's defaults)
            depth: Shallow depth, None for full history
            tags: Also fetch all tags

        Returns:
            True if successful
        """
        args = ["fetch", "--quiet"]
        if depth:
            args.append(f"--depth={depth}")
        if tags:
            args.append("--tags")
        args.append(remote)
        if refspec:
            args.append(refspec)
        _, code = self._run(args, cwd=path, timeout=timeout)
        return code == 0

    def clone(
        self,
        url: str,
        dest: str,
        branch: Optional[str] = None,
        depth: Optional[int] = 1,
        timeout: Optional[int] = None,
    ) -> bool:
        """
        Clone a remote into dest.

        Args:
            branch: Branch or tag to check out (``--branch``)

        Returns:
            True if successful
        """
        args = ["clone", "--quiet"]
        if depth:
            args.append(f"--depth={depth}")
        if branch:
            args += ["--branch", branch]
        args += [url, dest]
        parent = Path(dest).parent
        parent.mkdir(parents=True, exist_ok=True)
        _, code = self._run(args, cwd=str(parent), timeout=timeout)
        return code == 0

    def checkout(self, path: str, revision: str) -> bool:
        """Check out a revision (detached for tags and remote branches)."""
        _, code = self._run(["checkout", "--quiet", revision], cwd=path)
        return code == 0

    def reset_hard(self, path: str, revision: str) -> bool:
        """Hard-reset the working tree to a revision."""
        _, code = self._run(["reset", "--hard", "--quiet", revision], cwd=path)
        return code == 0

    def stash(self, path: str, message: str = "devbase update") -> bool:
        """
        Stash local modifications, including untracked files.

        Returns:
            True if something was stashed
        """
        if not self.has_uncommitted_changes(path):
            return False
        _, code = self._run(
            ["stash", "push", "--include-untracked", "--quiet", "-m", message], cwd=path
        )
        return code == 0

    def stash_pop(self, path: str) -> bool:
        """Re-apply the most recent stash."""
        _, code = self._run(["stash", "pop", "--quiet"], cwd=path)
        return code == 0
