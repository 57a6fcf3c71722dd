# ABOUTME: CLI package for burette, built on Click.
# ABOUTME: Defines the root command group, configures logging, and registers subcommands.

import logging

import click

from burette.cli.commands import (
    add_cmd,
    edit_cmd,
    get_cmd,
    list_cmd,
    new_cmd,
    remove_cmd,
    validate_cmd,
)


def _setup_logging(verbose: bool) -> None:
    """Setup logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(package_name="burette")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """burette - a content-addressed document library."""
    _setup_logging(verbose)


cli.add_command(new_cmd.new)
cli.add_command(add_cmd.add)
cli.add_command(remove_cmd.remove)
cli.add_command(get_cmd.get)
cli.add_command(edit_cmd.edit)
cli.add_command(list_cmd.list_documents)
cli.add_command(validate_cmd.validate)
