"""Vault commands - create a vault with an owner service account."""

from pathlib import Path

import click

from sky_cli.commands.common import (
    echo_key_value,
    echo_warning,
    handle_error,
    handle_result,
    make_context,
    output_option,
    require_config,
    resolve_value,
    to_json,
)
from sky_cli.commands.prompts import (
    prompt_for_description,
    prompt_for_master_key,
    prompt_for_name,
    prompt_for_source,
)
from sky_cli.lib import config as config_module
from sky_cli.lib.errors import InvalidVaultSpecError, MissingValueError
from sky_cli.lib.result import Err
from sky_cli.models import ProvisioningOutcome, VaultSpec
from sky_cli.operations.vault import load_schema
from sky_cli.workflows import provision_vault


def _echo_outcome(outcome: ProvisioningOutcome) -> None:
    vault = outcome.vault
    click.echo()
    click.secho("=== Vault Created Successfully ===", fg="green", bold=True)
    click.echo()
    echo_key_value("Name", vault.name)
    echo_key_value("Description", vault.description)
    echo_key_value("Vault URL", vault.vault_url)
    echo_key_value("Cluster ID", vault.cluster_id)
    echo_key_value("Vault ID", vault.vault_id)

    if outcome.service_account_id:
        echo_key_value("Service Account ID", outcome.service_account_id)
        echo_key_value("Service Account API Key", outcome.service_account_api_key)

    click.echo()
    click.echo("Environment Variables:")
    click.echo(f"export {config_module.ENV_VAULT_ID}={vault.vault_id}")
    click.echo(f"export SKYFLOW_CLUSTER_ID={vault.cluster_id}")
    click.echo(f"export {config_module.ENV_VAULT_URL}={vault.vault_url}")
    click.echo(f"export {config_module.ENV_WORKSPACE_ID}={vault.workspace_id}")
    if outcome.service_account_api_key:
        click.echo(f"export SKYFLOW_SERVICE_ACCOUNT_ID={outcome.service_account_id}")
        click.echo(f"export {config_module.ENV_API_KEY}={outcome.service_account_api_key}")


@click.command("create-vault")
@click.option("--name", default=None, help="Name for the vault (letters, digits, hyphens)")
@click.option("--template", default=None, help="Template ID to create the vault from")
@click.option(
    "--schema",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to JSON schema file for the vault",
)
@click.option("--description", default=None, help="Description for the vault")
@click.option("--master-key", default=None, help="Master encryption key for the vault")
@click.option(
    "--create-service-account/--no-create-service-account",
    default=True,
    show_default=True,
    help="Create a VAULT_OWNER service account for the vault",
)
@click.option("--workspace-id", default=None, help="Workspace ID for the vault")
@output_option
def create_vault(
    name: str | None,
    template: str | None,
    schema: Path | None,
    description: str | None,
    master_key: str | None,
    create_service_account: bool,
    workspace_id: str | None,
    output: str,
) -> None:
    """Create a new Skyflow vault.

    Optionally creates a service account, assigns it the VAULT_OWNER role
    and verifies it can reach the vault.

    \b
    Examples:
      sky create-vault --name payments --template pci
      sky create-vault --name customers --schema ./schema.json
      sky create-vault --name scratch --no-create-service-account
    """
    if template and schema:
        handle_error(InvalidVaultSpecError("template", "cannot be combined with a schema"))

    schema_document = handle_result(load_schema(schema)) if schema else None

    config = require_config()
    workspace = resolve_value(
        workspace_id,
        env_var=config_module.ENV_WORKSPACE_ID,
        stored=config.workspace_id,
        prompt="Enter your Skyflow Workspace ID",
    )
    if not workspace:
        handle_result(
            Err(MissingValueError("workspace ID", "Pass --workspace-id or run: sky configure"))
        )

    name = prompt_for_name(name)
    if schema_document is None and not template:
        template, schema = prompt_for_source(template, schema)
        if schema:
            schema_document = handle_result(load_schema(schema))

    spec = VaultSpec(
        name=name,
        workspace_id=workspace,
        template_id=template,
        schema_document=schema_document,
        description=prompt_for_description(description),
        master_key=prompt_for_master_key(master_key),
        create_service_account=create_service_account,
    )

    ctx = make_context(config)
    try:
        outcome = handle_result(provision_vault(ctx, spec))
    finally:
        ctx.close()

    for warning in outcome.warnings:
        echo_warning(warning)

    if output == "json":
        click.echo(to_json(outcome))
        return
    _echo_outcome(outcome)
