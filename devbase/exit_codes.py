"""
Standard exit codes for devbase commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes
UPDATE_AVAILABLE = 10    # `check` found at least one newer version
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
CHECK_FAILED = 68        # Remote unreachable / repository missing
DATA_ERROR = 70          # Data format or validation error
REF_NOT_FOUND = 73       # Requested branch/tag does not exist on the remote
UNSUPPORTED_REF = 74     # Raw commit identifiers are not supported
SYNC_FAILED = 75         # Durable copy could not be cloned or reset
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': CHECK_FAILED,
    'TimeoutError': CHECK_FAILED,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class CheckFailedError(CommandError):
    """Raised when a remote cannot be queried or a local repository is unusable."""
    def __init__(self, message: str = "Could not check for updates (offline?)"):
        super().__init__(message, CHECK_FAILED)


class RefNotFoundError(CommandError):
    """Raised when a ref exists neither as a branch nor as a tag on the remote."""
    def __init__(self, ref: str, remote_url: Optional[str] = None):
        where = f" on {remote_url}" if remote_url else " on the remote"
        super().__init__(
            f"Ref '{ref}' not found{where}. "
            f"Verify that it exists as a branch or tag (git ls-remote --heads --tags <url>).",
            REF_NOT_FOUND,
        )
        self.ref = ref
        self.remote_url = remote_url


class UnsupportedRefKindError(CommandError):
    """Raised when a raw commit identifier is requested as an update target."""
    def __init__(self, ref: str):
        super().__init__(
            f"'{ref}' looks like a commit SHA. Only branch and tag names can be "
            f"checked out from a shallow clone; use a branch or tag instead.",
            UNSUPPORTED_REF,
        )
        self.ref = ref


class SyncError(CommandError):
    """Raised when a durable repository copy cannot be cloned or reset."""
    def __init__(self, message: str):
        super().__init__(message, SYNC_FAILED)


class SnoozeValueError(CommandError):
    """Raised when a snooze duration is not a positive whole number of hours."""
    def __init__(self, value):
        super().__init__(f"Snooze duration must be a positive number of hours, got: {value!r}", USAGE_ERROR)
        self.value = value
