"""Service account operations."""

from sky_cli.lib import api
from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import ApiError, MalformedResponseError
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import ServiceAccount


def create_service_account(ctx: SkyflowContext, name: str) -> Result[ServiceAccount, ApiError]:
    """Create an API-key-enabled service account."""
    payload = {
        "apiKeyEnabled": True,
        "serviceAccount": {
            "name": name,
            "description": f"Service account created with Sky CLI ({name})",
        },
    }
    url = "/v1/serviceAccounts"
    match api.request(ctx.http, "Service account creation", "POST", url, json=payload):
        case Err() as e:
            return e
        case Ok(body) if isinstance(body, dict) and body.get("clientID"):
            return Ok(ServiceAccount.from_api(body))
        case Ok(_):
            return Err(MalformedResponseError("Service account creation", "clientID"))
