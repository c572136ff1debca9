"""Insert command - write records into a vault table."""

import click

from sky_cli.commands.common import (
    data_plane_options,
    echo_section,
    echo_warning,
    handle_result,
    open_vault,
    output_option,
    read_text_input,
    resolve_target,
    to_json,
)
from sky_cli.models import InsertResult
from sky_cli.workflows import insert as insert_workflow


def _echo_insert(result: InsertResult) -> None:
    if result.records:
        echo_section("Inserted records")
        for index, record in enumerate(result.records, start=1):
            click.echo(f"Record {index}:")
            for field, value in record.items():
                click.echo(f"  {field}: {value}")

    if result.errors:
        echo_section("Errors")
        for error in result.errors:
            click.secho(f"  - request {error.get('request_index')}: {error.get('error')}", fg="red")

    click.echo()
    click.echo(f"Inserted: {len(result.records)}")
    if result.errors:
        click.echo(f"Failed: {len(result.errors)}")


@click.command()
@click.option("--table", required=True, help="Table to insert into")
@click.option("--data", default=None, help="JSON object or array of objects (default: stdin)")
@click.option("--return-tokens", is_flag=True, help="Return tokens for inserted fields")
@click.option("--continue-on-error", is_flag=True, help="Keep inserting when a record fails")
@click.option("--upsert-column", default=None, help="Unique column to upsert on")
@data_plane_options
@output_option
def insert(
    table: str,
    data: str | None,
    return_tokens: bool,
    continue_on_error: bool,
    upsert_column: str | None,
    vault_id: str | None,
    cluster_id: str | None,
    environment: str,
    output: str,
) -> None:
    """Insert records into a vault table.

    \b
    Examples:
      sky insert --table persons --data '{"name": "Ada", "ssn": "123-45-6789"}'
      cat records.json | sky insert --table persons --return-tokens
    """
    payload = read_text_input(data, "JSON data")
    target = resolve_target(vault_id, cluster_id, environment)

    ctx = open_vault(target)
    try:
        result = handle_result(
            insert_workflow(ctx, table, payload, return_tokens, continue_on_error, upsert_column)
        )
    finally:
        ctx.close()

    if result.errors and not result.records:
        echo_warning("No records were inserted")

    if output == "json":
        click.echo(to_json(result))
        return
    _echo_insert(result)
