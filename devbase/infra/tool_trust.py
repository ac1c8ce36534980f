"""
Build-tool trust marker handling.

A checkout that ships a ``.mise.toml`` triggers mise's "untrusted config"
prompt the first time a shell enters it. After devbase moves a working tree
to a new ref it marks that file trusted so the next shell start is silent.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)

TRUST_MARKER = ".mise.toml"


class MiseTrust:
    """Marks a repository's mise config as trusted."""

    def __init__(self, executable: Optional[str] = None, timeout: int = 15):
        self.executable = executable
        self.timeout = timeout

    def _mise(self) -> Optional[str]:
        return self.executable or shutil.which("mise")

    def trust(self, repo_path: str) -> bool:
        """
        Trust ``<repo_path>/.mise.toml`` if present.

        Returns:
            True if the marker was trusted; False when there is no marker,
            no mise binary, or mise refused. Never raises.
        """
        marker = Path(repo_path) / TRUST_MARKER
        if not marker.is_file():
            return False

        mise = self._mise()
        if not mise:
            logger.debug(f"mise not installed; skipping trust of {marker}")
            return False

        try:
            result = subprocess.run(
                [mise, "trust", str(marker)],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Could not trust {marker}: {e}")
            return False

        if result.returncode != 0:
            logger.warning(f"mise trust failed for {marker}: {result.stderr.strip()}")
            return False
        logger.debug(f"Trusted {marker}")
        return True
