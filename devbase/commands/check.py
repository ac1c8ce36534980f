"""
Handles the 'check' command: is a newer devbase or overlay available?

Read-only. Prints one "label: old → new" line per available update on
stdout; status goes to stderr.

Exit status:
    0   no update found (or --advisory)
    10  at least one update available
    68  neither repository could be checked (offline)
"""

import json

import click

from ..cli_utils import standard_command, verbose_option
from ..exit_codes import CHECK_FAILED, SUCCESS, UPDATE_AVAILABLE
from ..services.update_service import UpdateService


@click.command("check")
@click.option("--advisory", is_flag=True,
              help="Session-start mode: short timeout, honour snooze, never fail")
@click.option("--json", "json_output", is_flag=True, help="Output one JSON object per repository")
@verbose_option
@standard_command
def check_handler(advisory, json_output, verbose, progress, config):
    """
    Check whether newer versions of devbase-core or the custom overlay exist.

    Examples:

    \b
        devbase check                 # explicit check, exit 10 if updates exist
        devbase check --advisory      # for shell start-up scripts
        devbase check --json
    """
    service = UpdateService(config, advisory=advisory)

    if advisory and service.snooze.is_active():
        return SUCCESS

    results = service.check()

    for result in results:
        if json_output:
            click.echo(json.dumps(result.to_dict(), ensure_ascii=False))
        elif result.available:
            click.echo(result.message)

        if result.failed and not advisory:
            progress.warning(f"Could not check {result.repository.label}: {result.error}")

    if service.all_failed(results):
        if advisory:
            progress.muted("devbase: offline, update check skipped")
            return SUCCESS
        progress.warning("Offline: could not reach any update source. Check your network and retry.")
        return CHECK_FAILED

    if any(r.available for r in results):
        if advisory:
            progress.muted("Run 'devbase update' to upgrade, or 'devbase snooze <hours>' to hide this notice")
            return SUCCESS
        return UPDATE_AVAILABLE

    if not advisory:
        progress.success("devbase is up to date")
    return SUCCESS
