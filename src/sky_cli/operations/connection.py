"""Connection operations - gateway route creation."""

from sky_cli.lib import api
from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import RemoteError
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import ConnectionDescriptor, ConnectionMode, ConnectionResult

ROUTE_COLLECTIONS = {
    ConnectionMode.EGRESS: "outboundRoutes",
    ConnectionMode.INGRESS: "inboundRoutes",
}


def create_connection(
    ctx: SkyflowContext, descriptor: ConnectionDescriptor
) -> Result[ConnectionResult, RemoteError]:
    """Create one connection under the route collection for its mode."""
    url = f"/v1/gateway/{ROUTE_COLLECTIONS[descriptor.mode]}"
    match api.request(ctx.http, "Connection creation", "POST", url, json=descriptor.to_payload()):
        case Err() as e:
            return e
        case Ok(body):
            return Ok(ConnectionResult.from_api(body))
