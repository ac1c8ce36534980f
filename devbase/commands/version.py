"""
Handles the 'version' command: installed tag, commit and remote of both repositories.
"""

import json

import click

from ..cli_utils import standard_command, verbose_option
from ..render import format_banner, render_version_table
from ..services.update_service import UpdateService


@click.command("version")
@click.option("--json", "json_output", is_flag=True, help="Output one JSON object per repository")
@click.option("--short", is_flag=True, help="One line per repository")
@verbose_option
@standard_command
def version_handler(json_output, short, verbose, progress, config):
    """Show installed devbase-core and overlay versions."""
    info = UpdateService(config).repositories.version_info()

    if json_output:
        for row in info:
            click.echo(json.dumps(row, ensure_ascii=False))
    elif short:
        for line in format_banner(info):
            click.echo(line)
    else:
        render_version_table(info)
