"""
Handles the 'update' command (also available as 'apply').

check -> show diff -> confirm -> apply -> run installer
"""

import click

from ..cli_utils import confirm_update, is_interactive, standard_command, verbose_option
from ..exit_codes import SUCCESS
from ..services.update_service import UpdateService


@click.command("update")
@click.argument("ref", required=False)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.option("--no-install", is_flag=True, help="Update the repositories but skip the installer")
@verbose_option
@standard_command
def update_handler(ref, yes, no_install, verbose, progress, config):
    """
    Update devbase-core and the custom overlay.

    REF forces devbase-core to a specific tag or branch (no confirmation).
    Without REF the newest release is used; release candidates and betas
    are only picked when no release exists.

    Examples:

    \b
        devbase update                # latest release, asks first
        devbase update v1.4.0-rc.1    # a specific tag
        devbase update main           # track a branch
        devbase update -y --no-install
    """
    service = UpdateService(config)
    interactive = is_interactive() and not yes

    updates = service.update(
        ref=ref,
        confirm=confirm_update,
        interactive=interactive,
        install=not no_install,
    )
    for message in updates:
        progress.step(message)

    report = service.last_report
    if report.offline:
        progress.warning("Offline: could not reach any update source. Check your network and retry.")
        return SUCCESS
    if report.up_to_date or report.declined:
        return SUCCESS

    for error in report.errors:
        progress.warning(error)
    progress.success("Update complete" if report.installed or no_install else "Repositories updated")
    return SUCCESS
