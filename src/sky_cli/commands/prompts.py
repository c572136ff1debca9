"""Interactive prompts for create-vault.

Every helper returns the provided value untouched when there is one, and
only prompts when stdin is a terminal.
"""

from pathlib import Path

import click

from sky_cli.commands.common import is_interactive
from sky_cli.models import VAULT_NAME_PATTERN, generate_vault_name


def _vault_name(value: str) -> str:
    value = value.strip()
    if not VAULT_NAME_PATTERN.match(value):
        raise click.BadParameter("Name must be alphanumeric with hyphens only")
    return value


def _schema_path(value: str) -> Path:
    path = Path(value.strip()).expanduser()
    if not path.is_file():
        raise click.BadParameter("File does not exist, please enter a valid path")
    return path


def prompt_for_name(provided: str | None) -> str:
    if provided:
        return provided
    default = generate_vault_name()
    if not is_interactive():
        return default
    return click.prompt(
        "Enter vault name (no special chars)", default=default, value_proc=_vault_name
    )


def prompt_for_source(
    template: str | None, schema: Path | None
) -> tuple[str | None, Path | None]:
    """(template, schema) - asks which one to use if neither was given."""
    if template or schema or not is_interactive():
        return template, schema

    method = click.prompt(
        "How would you like to create the vault?",
        type=click.Choice(["template", "schema", "default"]),
        default="default",
    )
    if method == "template":
        return click.prompt("Enter template name", value_proc=str.strip), None
    if method == "schema":
        return None, click.prompt("Enter path to schema JSON file", value_proc=_schema_path)
    return None, None


def prompt_for_description(provided: str | None) -> str | None:
    if provided or not is_interactive():
        return provided
    if not click.confirm("Would you like to add a description?", default=False):
        return None
    return click.prompt("Enter vault description")


def prompt_for_master_key(provided: str | None) -> str | None:
    if provided or not is_interactive():
        return provided
    if not click.confirm("Would you like to specify a master encryption key?", default=False):
        return None
    return click.prompt("Enter master encryption key", hide_input=True)
