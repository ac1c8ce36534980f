"""
Hand-off to the full installation entry point.

devbase does not re-apply configuration itself after an update. It runs the
core repository's installer from the durable copy as a separate process so
that everything downstream reflects the new version.
"""

import subprocess
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class InstallerError(Exception):
    """The installer could not be started or exited non-zero."""


class Installer:
    """Runs the configured install command inside the core checkout."""

    def __init__(self, command: Optional[List[str]] = None):
        self.command = list(command or ["./setup.sh", "--non-interactive"])

    def run(self, core_path: str) -> int:
        """
        Run the installer with ``core_path`` as working directory.

        Returns:
            The installer's exit code (0 on success)

        Raises:
            InstallerError: if the checkout is missing or the command cannot start
        """
        if not Path(core_path).is_dir():
            raise InstallerError(f"Core checkout not found at {core_path}")

        logger.info(f"Running installer: {' '.join(self.command)}")
        try:
            # Inherit the terminal: the installer is interactive in its own right
            completed = subprocess.run(self.command, cwd=core_path)
        except OSError as e:
            raise InstallerError(f"Could not start installer {self.command[0]}: {e}") from e

        if completed.returncode != 0:
            logger.error(f"Installer exited with code {completed.returncode}")
        return completed.returncode
