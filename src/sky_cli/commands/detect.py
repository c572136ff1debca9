"""Detect commands - deidentify and reidentify text."""

import click

from sky_cli.commands.common import (
    RULE,
    data_plane_options,
    echo_section,
    handle_result,
    open_vault,
    output_option,
    read_text_input,
    resolve_target,
    to_json,
)
from sky_cli.lib.entities import AVAILABLE_ENTITIES
from sky_cli.models import DeidentifyResult
from sky_cli.operations.data import TOKEN_TYPES
from sky_cli.workflows import deidentify as deidentify_workflow
from sky_cli.workflows import reidentify as reidentify_workflow

ENTITIES_HELP = f"Comma-separated entity types ({', '.join(AVAILABLE_ENTITIES)})"


def _echo_processed(text: str) -> None:
    click.echo(RULE)
    click.echo(text)
    click.echo(RULE)


def _echo_deidentified(result: DeidentifyResult) -> None:
    _echo_processed(result.processed_text)

    if result.entities:
        echo_section(f"Detected entities ({len(result.entities)})")
        for entity in result.entities:
            line = f"  {entity.entity}: {entity.value} -> {entity.token}"
            if entity.start is not None and entity.end is not None:
                line += f" [{entity.start}:{entity.end}]"
            if entity.score is not None:
                line += f" (score {entity.score:.2f})"
            click.echo(line)

    if result.word_count is not None or result.char_count is not None:
        click.echo()
        click.echo(f"Words: {result.word_count}  Characters: {result.char_count}")


@click.command()
@click.option("--text", default=None, help="Text to deidentify (default: stdin or editor)")
@click.option("--entities", default=None, help=ENTITIES_HELP)
@click.option(
    "--token-type",
    default="vault_token",
    show_default=True,
    help=f"How detected values are tokenized ({', '.join(TOKEN_TYPES)})",
)
@data_plane_options
@output_option
def deidentify(
    text: str | None,
    entities: str | None,
    token_type: str,
    vault_id: str | None,
    cluster_id: str | None,
    environment: str,
    output: str,
) -> None:
    """Detect and tokenize sensitive entities in text.

    \b
    Examples:
      sky deidentify --text "My SSN is 123-45-6789"
      sky deidentify --entities SSN,EMAIL < message.txt
    """
    content = read_text_input(text, "text to deidentify")
    target = resolve_target(vault_id, cluster_id, environment)

    ctx = open_vault(target)
    try:
        result = handle_result(deidentify_workflow(ctx, content, entities, token_type))
    finally:
        ctx.close()

    if output == "json":
        click.echo(to_json(result))
        return
    _echo_deidentified(result)


@click.command()
@click.option("--text", default=None, help="Tokenized text (default: stdin or editor)")
@click.option("--plain-text", default=None, help="Entities to restore as plain text")
@click.option("--masked", default=None, help="Entities to restore masked")
@click.option("--redacted", default=None, help="Entities to keep redacted")
@data_plane_options
@output_option
def reidentify(
    text: str | None,
    plain_text: str | None,
    masked: str | None,
    redacted: str | None,
    vault_id: str | None,
    cluster_id: str | None,
    environment: str,
    output: str,
) -> None:
    """Restore original values in tokenized text.

    With no entity options every entity is returned as plain text.

    \b
    Examples:
      sky reidentify --text "My SSN is [SSN_abc123]"
      sky reidentify --masked SSN --plain-text NAME < tokenized.txt
    """
    content = read_text_input(text, "text to reidentify")
    target = resolve_target(vault_id, cluster_id, environment)

    ctx = open_vault(target)
    try:
        result = handle_result(
            reidentify_workflow(ctx, content, plain_text, masked, redacted)
        )
    finally:
        ctx.close()

    if output == "json":
        click.echo(to_json(result))
        return
    _echo_processed(result.processed_text)
