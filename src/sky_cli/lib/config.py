"""Stored CLI configuration.

Flow:
1. SKYFLOW_BEARER_TOKEN + SKYFLOW_ACCOUNT_ID in the environment win outright
2. Otherwise ~/.skyflow/config.json (written by `sky configure`)
3. Neither -> ConfigError telling the user to configure
"""

import json
import os
from dataclasses import dataclass, replace
from typing import Any, Self

from sky_cli.lib import paths
from sky_cli.lib.errors import ConfigError
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.lib.storage import file

# Environment variables
ENV_BEARER_TOKEN = "SKYFLOW_BEARER_TOKEN"
ENV_ACCOUNT_ID = "SKYFLOW_ACCOUNT_ID"
ENV_WORKSPACE_ID = "SKYFLOW_WORKSPACE_ID"
ENV_VAULT_ID = "SKYFLOW_VAULT_ID"
ENV_VAULT_URL = "SKYFLOW_VAULT_URL"
ENV_API_KEY = "SKYFLOW_API_KEY"
ENV_CREDENTIALS = "SKYFLOW_CREDENTIALS"
ENV_CREDENTIALS_PATH = "SKYFLOW_CREDENTIALS_PATH"
ENV_MANAGEMENT_URL = "SKYFLOW_MANAGEMENT_URL"

NOT_CONFIGURED_HINT = (
    f"Set {ENV_BEARER_TOKEN} and {ENV_ACCOUNT_ID}, or run: sky configure"
)


@dataclass(frozen=True)
class Config:
    """Management API credentials plus remembered vault details."""

    bearer_token: str = ""
    account_id: str = ""
    workspace_id: str = ""
    last_vault_id: str = ""
    last_cluster_id: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.bearer_token and self.account_id)

    def to_json(self) -> str:
        data = {
            "bearerToken": self.bearer_token,
            "accountId": self.account_id,
            "workspaceID": self.workspace_id,
            "lastVaultId": self.last_vault_id,
            "lastClusterId": self.last_cluster_id,
        }
        return json.dumps({k: v for k, v in data.items() if v}, indent=2)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Self:
        return cls(
            bearer_token=str(raw.get("bearerToken") or ""),
            account_id=str(raw.get("accountId") or ""),
            workspace_id=str(raw.get("workspaceID") or ""),
            last_vault_id=str(raw.get("lastVaultId") or ""),
            last_cluster_id=str(raw.get("lastClusterId") or ""),
        )


def env(name: str) -> str | None:
    """Non-empty environment value, or None."""
    value = os.environ.get(name, "").strip()
    return value or None


def read_stored() -> Result[Config | None, ConfigError]:
    """Read the config file as-is. Ok(None) if it does not exist."""
    path = paths.config_path()
    try:
        data = file.read(path)
    except OSError as e:
        return Err(ConfigError(path, str(e)))
    if data is None:
        return Ok(None)

    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        return Err(ConfigError(path, f"Invalid JSON: {e}"))
    if not isinstance(raw, dict):
        return Err(ConfigError(path, "Expected a JSON object"))

    return Ok(Config.from_dict(raw))


def load() -> Result[Config, ConfigError]:
    """Load management API credentials (environment first, then file)."""
    stored = read_stored()

    token = env(ENV_BEARER_TOKEN)
    account_id = env(ENV_ACCOUNT_ID)
    if token and account_id:
        base = stored.value if isinstance(stored, Ok) and stored.value else Config()
        return Ok(
            replace(
                base,
                bearer_token=token,
                account_id=account_id,
                workspace_id=env(ENV_WORKSPACE_ID) or base.workspace_id,
            )
        )

    path = paths.config_path()
    match stored:
        case Err(e):
            return Err(ConfigError(path, f"{e.reason}. {NOT_CONFIGURED_HINT}"))
        case Ok(None):
            return Err(ConfigError(path, f"Sky CLI is not configured. {NOT_CONFIGURED_HINT}"))
        case Ok(config):
            pass

    if not config.is_complete:
        return Err(
            ConfigError(
                path,
                f"Invalid configuration: missing bearerToken or accountId. {NOT_CONFIGURED_HINT}",
            )
        )
    return Ok(config)


def save(config: Config) -> Result[None, ConfigError]:
    """Write config to disk (owner-only permissions)."""
    path = paths.config_path()
    try:
        file.write(path, config.to_json(), private=True)
    except OSError as e:
        return Err(ConfigError(path, str(e)))
    return Ok(None)


def remember_vault(vault_id: str, cluster_id: str) -> Result[None, ConfigError]:
    """Store the last used vault/cluster so prompts can offer them as defaults."""
    match read_stored():
        case Err() as e:
            return e
        case Ok(current):
            pass

    updated = replace(current or Config(), last_vault_id=vault_id, last_cluster_id=cluster_id)
    return save(updated)
