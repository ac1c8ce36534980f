"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps
from .config import configure_logging, load_config
from .progress import get_progress
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Config loading and logging setup (--verbose lowers to DEBUG)
    - Progress reporting on stderr, injected as ``progress``
    - Loaded config injected as ``config``
    - Consistent error handling and exit codes

    The command returns an exit code (None means success).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        config = load_config()
        configure_logging(config, verbose=verbose)

        progress = get_progress()
        kwargs['progress'] = progress
        kwargs['config'] = config

        try:
            code = func(*args, **kwargs)
            sys.exit(code if code is not None else SUCCESS)

        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            progress.error(str(e))
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def verbose_option(func):
    """Add the shared --verbose/-v flag."""
    return click.option('-v', '--verbose', is_flag=True, help='Show debug output')(func)


def is_interactive() -> bool:
    """True when both stdin and stdout are terminals."""
    return sys.stdin.isatty() and sys.stdout.isatty()


def drain_stdin() -> None:
    """
    Discard input typed before a prompt was shown.

    Keystrokes buffered during a long fetch must not answer the
    confirmation prompt.
    """
    if not sys.stdin.isatty():
        return
    try:
        import termios
        termios.tcflush(sys.stdin, termios.TCIFLUSH)
    except (ImportError, OSError, ValueError):
        # Not a POSIX terminal
        pass


def confirm_update(plans) -> bool:
    """Show the pending changes and ask for a yes/no answer."""
    from .render import render_update_plans

    render_update_plans(plans)
    drain_stdin()
    return click.confirm("Apply these updates?", default=False)
