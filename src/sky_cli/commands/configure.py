"""Configure command - store management API credentials."""

from collections.abc import Callable

import click

from sky_cli.commands.common import handle_result
from sky_cli.lib import config as config_module
from sky_cli.lib import paths
from sky_cli.lib.config import Config
from sky_cli.lib.result import Ok


def _required(label: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        value = value.strip()
        if not value:
            raise click.BadParameter(f"{label} is required")
        return value

    return check


@click.command()
@click.option("--bearer-token", default=None, help="Management API bearer token")
@click.option("--account-id", default=None, help="Skyflow account ID")
@click.option("--workspace-id", default=None, help="Default workspace for new vaults")
def configure(
    bearer_token: str | None,
    account_id: str | None,
    workspace_id: str | None,
) -> None:
    """Configure Sky CLI authentication.

    Prompts for anything not given as an option and saves it to
    ~/.skyflow/config.json.

    \b
    Examples:
      sky configure
      sky configure --account-id acc123 --workspace-id ws456
    """
    match config_module.read_stored():
        case Ok(Config() as existing):
            pass
        case _:
            existing = Config()

    if not (bearer_token and account_id and workspace_id):
        click.echo("Please provide your Skyflow API credentials:")

    bearer_token = bearer_token or click.prompt(
        "Enter your Skyflow Bearer Token",
        hide_input=True,
        value_proc=_required("Bearer token"),
    )
    account_id = account_id or click.prompt(
        "Enter your Skyflow Account ID",
        default=existing.account_id or None,
        value_proc=_required("Account ID"),
    )
    workspace_id = workspace_id or click.prompt(
        "Enter your Skyflow Workspace ID",
        default=existing.workspace_id or None,
        value_proc=_required("Workspace ID"),
    )

    updated = Config(
        bearer_token=bearer_token,
        account_id=account_id,
        workspace_id=workspace_id,
        last_vault_id=existing.last_vault_id,
        last_cluster_id=existing.last_cluster_id,
    )
    handle_result(config_module.save(updated))

    click.echo()
    click.secho(f"Configuration saved to {paths.config_path()}", fg="green", bold=True)
    click.echo()
    click.echo("You can now use the Sky CLI. Try running:")
    click.echo("  sky create-vault --help")
