"""Sky CLI entry point."""

import click

from sky_cli import __version__
from sky_cli.commands import (
    configure,
    create_connection,
    create_vault,
    deidentify,
    insert,
    reidentify,
)
from sky_cli.lib import log


@click.group()
@click.version_option(version=__version__, prog_name="sky")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output (requests and responses)")
def cli(verbose: bool) -> None:
    """Sky - command line tool for Skyflow vaults, connections and detection."""
    log.setup(verbose)


# Register subcommands
cli.add_command(configure)
cli.add_command(create_vault)
cli.add_command(create_connection)
cli.add_command(insert)
cli.add_command(deidentify)
cli.add_command(reidentify)


if __name__ == "__main__":
    cli()
