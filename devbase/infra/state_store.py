"""
Scalar state stores for devbase.

The update subsystem persists two single-value files under the config dir:
- ``update-snooze``: the snooze deadline (UNIX epoch seconds)
- ``version``: the version marker written by the installer

Components receive a store instead of a path, so tests can pass a
``MemoryScalarStore``. File writes are atomic (write to temp, then rename).
"""

import os
import tempfile
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ScalarStore:
    """Interface: a single persisted text value that may be absent."""

    def read(self) -> Optional[str]:
        raise NotImplementedError

    def write(self, value: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryScalarStore(ScalarStore):
    """In-memory store, used in tests and dry runs."""

    def __init__(self, value: Optional[str] = None):
        self.value = value

    def read(self) -> Optional[str]:
        return self.value

    def write(self, value: str) -> None:
        self.value = str(value)

    def clear(self) -> None:
        self.value = None


class FileScalarStore(ScalarStore):
    """
    A single value stored in a small text file.

    Example:
        store = FileScalarStore(Path("~/.config/devbase/update-snooze"))
        store.write("1760000000")
        store.read()   # "1760000000"
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def read(self) -> Optional[str]:
        """
        Read the stored value.

        Returns:
            The file contents stripped of whitespace, or None if the file is
            missing or unreadable
        """
        try:
            return self.path.read_text().strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading {self.path}: {e}")
            return None

    def write(self, value: str) -> None:
        """Replace the stored value atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                f.write(f"{value}\n")
            os.replace(temp_path, self.path)
        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def clear(self) -> None:
        """Remove the file; no-op if it does not exist."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
