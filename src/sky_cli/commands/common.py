"""Shared CLI utilities.

Common options, context creation, value resolution, error handling,
output formatting.
"""

import json
import sys
from collections.abc import Callable
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn, ParamSpec, TypeVar

import click

from sky_cli.lib import config as config_module
from sky_cli.lib.api import (
    DEFAULT_MANAGEMENT_URL,
    VAULT_DOMAINS,
    SkyflowContext,
    VaultContext,
    cluster_id_from_url,
)
from sky_cli.lib.config import Config
from sky_cli.lib.errors import (
    ConfigError,
    ConnectionFileError,
    ConnectionValidationError,
    CredentialsError,
    InvalidInputError,
    InvalidVaultSpecError,
    MalformedResponseError,
    MissingValueError,
    RemoteError,
    SchemaFileError,
    UnknownEntityError,
    VaultIdMissingError,
)
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.workflows.data import VaultTarget, connect

# Type variables for decorators
P = ParamSpec("P")
T = TypeVar("T")

RULE = "─" * 60


# Common CLI options as decorators
def vault_id_option(fn: Callable[P, T]) -> Callable[P, T]:
    """Add --vault-id option."""
    return click.option(
        "--vault-id",
        default=None,
        help=f"Vault ID (or set {config_module.ENV_VAULT_ID})",
    )(fn)


def cluster_options(fn: Callable[P, T]) -> Callable[P, T]:
    """Add --cluster-id and --environment options."""
    fn = click.option(
        "--environment",
        default="PROD",
        show_default=True,
        help=f"Skyflow environment ({', '.join(VAULT_DOMAINS)})",
    )(fn)
    fn = click.option(
        "--cluster-id",
        default=None,
        help=f"Cluster ID (or set {config_module.ENV_VAULT_URL})",
    )(fn)
    return fn


def data_plane_options(fn: Callable[P, T]) -> Callable[P, T]:
    """Add all vault targeting options (vault ID, cluster ID, environment)."""
    fn = cluster_options(fn)
    fn = vault_id_option(fn)
    return fn


def output_option(fn: Callable[P, T]) -> Callable[P, T]:
    """Add --output text|json."""
    return click.option(
        "--output",
        "output",
        default="text",
        show_default=True,
        type=click.Choice(["text", "json"]),
        help="Output format",
    )(fn)


def require_config() -> Config:
    """Load management API config or exit with a hint to configure."""
    return handle_result(config_module.load())


def make_context(config: Config) -> SkyflowContext:
    """Create SkyflowContext from stored config."""
    return SkyflowContext(
        bearer_token=config.bearer_token,
        account_id=config.account_id,
        base_url=config_module.env(config_module.ENV_MANAGEMENT_URL) or DEFAULT_MANAGEMENT_URL,
    )


def is_interactive() -> bool:
    return sys.stdin.isatty()


def resolve_value(
    value: str | None,
    *,
    env_var: str | None = None,
    stored: str | None = None,
    prompt: str | None = None,
    prompt_default: str | None = None,
) -> str | None:
    """First of: CLI flag, environment variable, stored config, interactive prompt."""
    if value:
        return value
    if env_var and (from_env := config_module.env(env_var)):
        return from_env
    if stored:
        return stored
    if prompt and is_interactive():
        return click.prompt(prompt, default=prompt_default or None).strip() or None
    return None


def read_text_input(value: str | None, what: str) -> str:
    """Text from the option, piped stdin, or an editor session."""
    if value:
        return value
    if not is_interactive():
        return click.get_text_stream("stdin").read().strip()
    edited = click.edit(f"\n# Enter {what} above this line\n")
    if not edited:
        return ""
    return edited.split("\n# Enter", 1)[0].strip()


def handle_result(result: Result[T, Any], success_message: str | None = None) -> T:
    """Handle a Result, exiting on error with appropriate message.

    On Ok: returns the value, optionally prints success message
    On Err: prints error and exits with code 1
    """
    match result:
        case Ok(value):
            if success_message:
                click.secho(success_message, fg="green", bold=True)
            return value
        case Err(error):
            handle_error(error)


def handle_error(error: Any) -> NoReturn:
    """Print error message and exit."""
    message = format_error(error)
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def echo_warning(message: str) -> None:
    click.secho(f"Warning: {message}", fg="yellow", err=True)


def _format_remote(error: RemoteError) -> str:
    if not (error.message or error.details or error.request_id):
        if error.status == 0:
            return f"{error.operation} failed: {error.body}"
        return f"{error.operation} failed: {error.status} - {error.body}"

    lines = [f"Skyflow API error ({error.operation})", f"  HTTP Code: {error.status}"]
    if error.message:
        lines.append(f"  Message: {error.message}")
    if error.details:
        lines.append(f"  Details: {', '.join(error.details)}")
    if error.request_id:
        lines.append(f"  Request ID: {error.request_id}")
    return "\n".join(lines)


def _format_validation(error: ConnectionValidationError) -> str:
    if not error.problems:
        return "No connections found in configuration file"
    lines = ["Invalid connection configuration:"]
    for p in error.problems:
        label = f'Connection "{p.name}"' if p.name else f"Connection at index {p.index}"
        lines.append(f"  - {label} (index {p.index}): field '{p.field}' {p.reason}")
    return "\n".join(lines)


def format_error(error: Any) -> str:
    """Format error for display."""
    match error:
        case InvalidVaultSpecError(field, reason):
            return f"Invalid {field}: {reason}"

        case SchemaFileError(path, reason):
            return f"Schema file {path}: {reason}"

        case ConnectionFileError(path, reason):
            return f"{reason} ({path})"

        case ConnectionValidationError():
            return _format_validation(error)

        case MissingValueError(name, hint):
            return f"Missing {name}. {hint}" if hint else f"Missing {name}."

        case InvalidInputError(what, reason):
            return f"Invalid {what}: {reason}"

        case UnknownEntityError(entity, available):
            return f"Unknown entity type: {entity}\nAvailable entities: {', '.join(available)}"

        case ConfigError(path, reason):
            return f"Error loading configuration ({path}): {reason}"

        case CredentialsError(reason):
            return reason

        case RemoteError():
            return _format_remote(error)

        case MalformedResponseError(operation, expected):
            return f"{operation} failed: unexpected response format (missing {expected})"

        case VaultIdMissingError(fields_tried):
            return f"Vault ID not found in API response (looked for: {', '.join(fields_tried)})"

        case _:
            return str(error)


def to_json(obj: Any) -> str:
    """Convert object to JSON string."""
    return json.dumps(_to_serializable(obj), indent=2)


def _to_serializable(obj: Any) -> Any:
    """Convert object to JSON-serializable form."""
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, dict):
        return {k: _to_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_serializable(v) for v in obj]
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_serializable(asdict(obj))
    return str(obj)


def echo_key_value(key: str, value: Any, indent: int = 0) -> None:
    """Print a key-value pair with optional indentation."""
    prefix = "  " * indent
    click.echo(f"{prefix}{key}: {value}")


def echo_section(title: str) -> None:
    """Print a section header."""
    click.echo()
    click.secho(title, bold=True)
    click.echo("-" * len(title))


def resolve_target(vault_id: str | None, cluster_id: str | None, environment: str) -> VaultTarget:
    """Vault and cluster for data-plane commands.

    Flag, then environment, then a prompt offering the last used vault.
    """
    match config_module.read_stored():
        case Ok(Config() as stored):
            pass
        case _:
            stored = Config()

    vault = resolve_value(
        vault_id,
        env_var=config_module.ENV_VAULT_ID,
        prompt="Enter vault ID",
        prompt_default=stored.last_vault_id,
    )
    if not vault:
        handle_error(
            MissingValueError("vault ID", f"Pass --vault-id or set {config_module.ENV_VAULT_ID}")
        )

    from_url = config_module.env(config_module.ENV_VAULT_URL)
    cluster = resolve_value(
        cluster_id,
        stored=cluster_id_from_url(from_url) if from_url else None,
        prompt="Enter cluster ID",
        prompt_default=stored.last_cluster_id,
    )
    if not cluster:
        handle_error(
            MissingValueError(
                "cluster ID", f"Pass --cluster-id or set {config_module.ENV_VAULT_URL}"
            )
        )

    match config_module.remember_vault(vault, cluster):
        case Err(error):
            echo_warning(f"Could not remember vault: {format_error(error)}")
        case _:
            pass

    return VaultTarget(vault_id=vault, cluster_id=cluster, environment=environment)


def open_vault(target: VaultTarget) -> VaultContext:
    """Authenticate against the target vault or exit."""
    return handle_result(connect(target))
