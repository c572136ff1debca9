"""Vault operations - create, look up workspace, verify access."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sky_cli.lib import api
from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import (
    CreateVaultError,
    MalformedResponseError,
    RemoteError,
    SchemaFileError,
    VaultIdMissingError,
)
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import VaultRecord, VaultSpec, Workspace

logger = logging.getLogger(__name__)

# Response fields that may carry the new vault's ID, in priority order
VAULT_ID_FIELDS = ("id", "vaultID", "vault_id", "ID")


def load_schema(path: Path) -> Result[Any, SchemaFileError]:
    """Read and parse a vault schema JSON file."""
    if not path.exists():
        return Err(SchemaFileError(path, "File not found"))
    try:
        return Ok(json.loads(path.read_text()))
    except OSError as e:
        return Err(SchemaFileError(path, str(e)))
    except json.JSONDecodeError as e:
        return Err(SchemaFileError(path, f"Invalid JSON: {e}"))


def extract_vault_id(body: Any) -> str | None:
    """Vault ID from a bare string body or the first populated VAULT_ID_FIELDS entry."""
    if isinstance(body, str):
        return body or None
    if isinstance(body, dict):
        for name in VAULT_ID_FIELDS:
            if body.get(name):
                logger.debug("Found vault ID in field '%s'", name)
                return str(body[name])
    return None


def _payload(spec: VaultSpec) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": spec.name,
        "description": spec.description
        or f"Vault created with Sky CLI on {datetime.now(UTC).isoformat()}",
        "workspaceID": spec.workspace_id,
    }
    if spec.schema_document is not None:
        payload["vaultSchema"] = spec.schema_document
    elif spec.template_id:
        payload["templateID"] = spec.template_id
    if spec.master_key:
        payload["masterKey"] = spec.master_key
    return payload


def get_workspaces(
    ctx: SkyflowContext,
) -> Result[list[Workspace], RemoteError | MalformedResponseError]:
    """List the account's workspaces."""
    match api.request(ctx.http, "Get workspaces", "GET", "/v1/workspaces"):
        case Err() as e:
            return e
        case Ok(body):
            pass

    raw = body.get("workspaces") if isinstance(body, dict) else None
    if not isinstance(raw, list):
        return Err(MalformedResponseError("Get workspaces", "workspaces (list)"))

    workspaces = [Workspace.from_api(w) for w in raw if isinstance(w, dict)]
    logger.debug("Found %d workspace(s)", len(workspaces))
    return Ok(workspaces)


def _locate(ctx: SkyflowContext, workspace_id: str) -> tuple[str, str]:
    """(vault_url, cluster_id) from the workspace, or empty strings.

    Best effort: the vault already exists, so failures only warn.
    """
    match get_workspaces(ctx):
        case Err(e):
            logger.warning("Failed to fetch workspace details: %s", e)
            return "", ""
        case Ok(workspaces):
            pass

    workspace = next((w for w in workspaces if w.id == workspace_id), None)
    if workspace is None:
        logger.warning("Workspace %s not found in available workspaces", workspace_id)
        return "", ""

    cluster_id = api.cluster_id_from_url(workspace.url) or workspace.url
    logger.debug("Matched workspace %s (%s)", workspace.display_name, workspace.url)
    return f"https://{workspace.url}", cluster_id


def create_vault(ctx: SkyflowContext, spec: VaultSpec) -> Result[VaultRecord, CreateVaultError]:
    """Create a vault, then resolve its data-plane URL from the workspace."""
    match api.request(ctx.http, "Vault creation", "POST", "/v1/vaults", json=_payload(spec)):
        case Err() as e:
            return e
        case Ok(body):
            pass

    vault_id = extract_vault_id(body)
    if not vault_id:
        return Err(VaultIdMissingError(VAULT_ID_FIELDS))

    vault_url, cluster_id = _locate(ctx, spec.workspace_id)

    return Ok(
        VaultRecord(
            vault_id=vault_id,
            name=spec.name,
            description=spec.description or "",
            workspace_id=spec.workspace_id,
            vault_url=vault_url,
            cluster_id=cluster_id,
        )
    )


def verify_access(ctx: SkyflowContext, vault_id: str, api_key: str) -> bool:
    """Probe the vault with the service account's API key. Never fails."""
    headers = {
        "Authorization": f"Bearer {api_key}",
        "X-SKYFLOW-ACCOUNT-ID": ctx.account_id,
    }
    url = f"/v1/vaults/{vault_id}"
    result = api.request(ctx.http, "Verify access", "GET", url, headers=headers)
    if isinstance(result, Err):
        logger.debug("Access check failed: %s", result.error)
        return False
    return True
