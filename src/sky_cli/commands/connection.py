"""Connection commands - create gateway connections from a JSON file."""

import sys
from pathlib import Path

import click

from sky_cli.commands.common import (
    echo_section,
    format_error,
    handle_result,
    make_context,
    output_option,
    require_config,
    resolve_value,
    to_json,
    vault_id_option,
)
from sky_cli.lib import config as config_module
from sky_cli.lib.config import Config
from sky_cli.lib.result import Ok
from sky_cli.models import BatchResult
from sky_cli.workflows import create_connections, load_connections, validate_connections


def _echo_batch(result: BatchResult) -> None:
    echo_section("Connection creation summary")
    click.echo(f"Succeeded: {result.success_count}")
    click.echo(f"Failed: {result.fail_count}")

    if result.succeeded:
        click.echo()
        click.secho("Created:", fg="green")
        for item in result.succeeded:
            click.echo(f"  - {item.name} (ID: {item.id})")

    if result.failed:
        click.echo()
        click.secho("Failed:", fg="red")
        for item in result.failed:
            reason = format_error(item.error) if item.error else "unknown error"
            click.echo(f"  - {item.name}: {reason}")


@click.command("create-connection")
@click.option(
    "--file-path",
    "-f",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to the connection configuration JSON file",
)
@vault_id_option
@output_option
def create_connection(file_path: Path, vault_id: str | None, output: str) -> None:
    """Create connections from a configuration file.

    The file holds an array of connections, or an object with a
    "connections" array. Every connection is validated before anything
    is created. Exits 1 if any connection fails.

    \b
    Examples:
      sky create-connection -f connections.json
      sky create-connection -f connections.json --vault-id abc123
    """
    raw_connections = handle_result(load_connections(file_path))

    match config_module.read_stored():
        case Ok(Config() as stored):
            last_vault_id = stored.last_vault_id
        case _:
            last_vault_id = None
    default_vault_id = resolve_value(
        vault_id, env_var=config_module.ENV_VAULT_ID, stored=last_vault_id
    )

    descriptors = handle_result(validate_connections(raw_connections, default_vault_id))

    config = require_config()
    ctx = make_context(config)
    try:
        result = create_connections(ctx, descriptors)
    finally:
        ctx.close()

    if output == "json":
        click.echo(
            to_json(
                {
                    "items": result.items,
                    "success_count": result.success_count,
                    "fail_count": result.fail_count,
                }
            )
        )
    else:
        _echo_batch(result)

    if not result.ok:
        sys.exit(1)
