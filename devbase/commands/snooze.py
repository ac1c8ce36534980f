"""
Handles the 'snooze' and 'unsnooze' commands.
"""

from datetime import datetime
from pathlib import Path

import click

from ..cli_utils import standard_command, verbose_option
from ..infra.state_store import FileScalarStore
from ..services.snooze_service import SnoozeStore
from ..services.update_service import SNOOZE_FILENAME


def get_snooze_store(config) -> SnoozeStore:
    config_dir = Path(config["paths"]["config_dir"]).expanduser()
    return SnoozeStore(FileScalarStore(config_dir / SNOOZE_FILENAME))


@click.command("snooze")
@click.argument("hours")
@verbose_option
@standard_command
def snooze_handler(hours, verbose, progress, config):
    """
    Hide update notices for HOURS hours.

    \b
        devbase snooze 24
    """
    state = get_snooze_store(config).set(hours)
    until = datetime.fromtimestamp(state.until).strftime("%Y-%m-%d %H:%M")
    progress.success(f"Update notices snoozed until {until}")


@click.command("unsnooze")
@verbose_option
@standard_command
def unsnooze_handler(verbose, progress, config):
    """Show update notices again."""
    get_snooze_store(config).clear()
    progress.success("Update notices re-enabled")
