"""Role operations - list vault roles, assign to service accounts."""

import logging

from sky_cli.lib import api
from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import MalformedResponseError, MissingValueError, RemoteError, RolesError
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import Role

logger = logging.getLogger(__name__)

MEMBER_TYPE_SERVICE_ACCOUNT = "SERVICE_ACCOUNT"


def get_vault_roles(ctx: SkyflowContext, vault_id: str) -> Result[list[Role], RolesError]:
    """Roles scoped to one vault."""
    if not vault_id:
        return Err(MissingValueError("vault ID", "required to fetch roles"))

    logger.debug("Fetching roles for vault ID: %s", vault_id)
    params = {"resource.type": "VAULT", "resource.ID": vault_id}
    match api.request(ctx.http, "Get vault roles", "GET", "/v1/roles", params=params):
        case Err() as e:
            return e
        case Ok(body):
            pass

    raw = body.get("roles") if isinstance(body, dict) else None
    if not isinstance(raw, list):
        return Err(MalformedResponseError("Get vault roles", "roles (list)"))

    roles = [Role.from_api(r) for r in raw if isinstance(r, dict)]
    logger.debug("Found %d roles for vault", len(roles))
    return Ok(roles)


def assign_role(
    ctx: SkyflowContext, role_id: str, service_account_id: str
) -> Result[str, RemoteError]:
    """Grant a role to a service account. Returns the assignment ID."""
    payload = {
        "ID": role_id,
        "members": [{"ID": service_account_id, "type": MEMBER_TYPE_SERVICE_ACCOUNT}],
    }
    match api.request(ctx.http, "Role assignment", "POST", "/v1/roles/assign", json=payload):
        case Err() as e:
            return e
        case Ok(body):
            return Ok(str(body.get("ID", "")) if isinstance(body, dict) else "")
