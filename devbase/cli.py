#!/usr/bin/env python3

import click

from devbase.commands.check import check_handler
from devbase.commands.update import update_handler
from devbase.commands.snooze import snooze_handler, unsnooze_handler
from devbase.commands.version import version_handler


@click.group()
@click.version_option(package_name="devbase")
def cli():
    """devbase - keep the devbase workstation tooling current.

    Checks for and applies new releases of devbase-core and of your
    organization's custom overlay.
    """
    pass


cli.add_command(check_handler, name='check')
cli.add_command(update_handler, name='update')
cli.add_command(update_handler, name='apply')
cli.add_command(snooze_handler, name='snooze')
cli.add_command(unsnooze_handler, name='unsnooze')
cli.add_command(version_handler, name='version')
cli.add_command(version_handler, name='show-version')


def main():
    cli()

if __name__ == "__main__":
    main()
