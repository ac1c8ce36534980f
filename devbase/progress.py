"""
Progress reporting utilities for devbase.

Status messages go to stderr so that stdout carries only command output
(the "label: old → new" lines of `devbase check`).
"""

import os
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels for progress messages."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    SUCCESS = 4
    STEP = 5


# Prefix and colour per level; INFO is printed as-is
LEVEL_STYLES = {
    LogLevel.ERROR: ("✗", 'red'),
    LogLevel.WARNING: ("⚠", 'yellow'),
    LogLevel.SUCCESS: ("✓", 'green'),
    LogLevel.STEP: ("→", 'cyan'),
    LogLevel.DEBUG: (" ", 'dim'),
}


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: Optional[bool] = None, use_colors: Optional[bool] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = enabled
            use_colors: Use ANSI colors in output. None = auto-detect
        """
        self.enabled = True if enabled is None else enabled

        if use_colors is None:
            self.use_colors = sys.stderr.isatty() and os.environ.get('NO_COLOR') is None
        else:
            self.use_colors = use_colors

        self.colors = {
            'reset': '\033[0m',
            'dim': '\033[2m',
            'red': '\033[31m',
            'green': '\033[32m',
            'yellow': '\033[33m',
            'cyan': '\033[36m',
        }

    def _colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are enabled."""
        if self.use_colors and color in self.colors:
            return f"{self.colors[color]}{text}{self.colors['reset']}"
        return text

    def __call__(self, message: str, force: bool = False, level: LogLevel = LogLevel.INFO):
        """
        Output progress message to stderr if enabled.

        Args:
            message: Progress message to display
            force: Force output even if disabled
            level: Log level for the message
        """
        if not (force or self.enabled):
            return

        style = LEVEL_STYLES.get(level)
        if style:
            prefix, color = style
            message = self._colorize(f"{prefix} {message}", color)

        print(message, file=sys.stderr, flush=True)

    def error(self, message: str):
        """Always output errors to stderr."""
        print(self._colorize(f"ERROR: {message}", 'red'), file=sys.stderr, flush=True)

    def warning(self, message: str):
        """Output warnings to stderr if enabled."""
        if self.enabled:
            self(message, level=LogLevel.WARNING)

    def success(self, message: str):
        """Output success message if enabled."""
        if self.enabled:
            self(message, level=LogLevel.SUCCESS)

    def step(self, message: str):
        """Output a step heading if enabled."""
        if self.enabled:
            self(message, level=LogLevel.STEP)

    def muted(self, message: str):
        """Dim one-line notice (used for the advisory "offline" line)."""
        if self.enabled:
            self(message, level=LogLevel.DEBUG)


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """Create a progress reporter."""
    return ProgressReporter(enabled=enabled)
