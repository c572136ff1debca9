"""Connection workflows - load, validate and create connections in batch.

Validation is all-or-nothing and runs before any remote call: one bad
descriptor means no connection is created. Once submission starts, each
connection succeeds or fails on its own and the batch always runs to the end.
"""

import json
import logging
from pathlib import Path
from typing import Any

from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import ConnectionFileError, ConnectionProblem, ConnectionValidationError
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import BatchItem, BatchResult, ConnectionDescriptor, ItemStatus
from sky_cli.operations.connection import create_connection as create_connection_op

logger = logging.getLogger(__name__)

# Server-owned fields dropped before submission
STRIPPED_FIELDS = ("ID", "BasicAudit")
STRIPPED_ROUTE_FIELDS = ("invocationURL",)

SHAPE_HINT = 'must contain an array of connections or an object with a "connections" array'


def decode_connections(document: Any) -> list[Any] | None:
    """Accept `[...]` or `{"connections": [...]}`; anything else is None."""
    if isinstance(document, list):
        return document
    if isinstance(document, dict) and isinstance(document.get("connections"), list):
        return document["connections"]
    return None


def load_connections(path: Path) -> Result[list[Any], ConnectionFileError]:
    """Read a connection configuration file into raw descriptor dicts."""
    if not path.exists():
        return Err(ConnectionFileError(path, "Configuration file not found"))
    try:
        document = json.loads(path.read_text())
    except OSError as e:
        return Err(ConnectionFileError(path, str(e)))
    except json.JSONDecodeError as e:
        return Err(ConnectionFileError(path, f"Invalid JSON in configuration file: {e}"))

    connections = decode_connections(document)
    if connections is None:
        return Err(ConnectionFileError(path, f"Configuration file {SHAPE_HINT}"))
    return Ok(connections)


def _check(index: int, raw: Any, default_vault_id: str | None) -> list[ConnectionProblem]:
    if not isinstance(raw, dict):
        return [ConnectionProblem(index, None, "connection", "must be a JSON object")]

    name = raw.get("name") or None
    problems = []
    if not name:
        problems.append(ConnectionProblem(index, None, "name", "is required"))
    if not (raw.get("vaultID") or default_vault_id):
        problems.append(ConnectionProblem(index, name, "vaultID", "is required"))
    routes = raw.get("routes")
    if not isinstance(routes, list) or not routes:
        problems.append(ConnectionProblem(index, name, "routes", "must be a non-empty array"))
    elif not all(isinstance(route, dict) for route in routes):
        problems.append(
            ConnectionProblem(index, name, "routes", "each route must be a JSON object")
        )
    return problems


def _to_descriptor(raw: dict[str, Any], default_vault_id: str | None) -> ConnectionDescriptor:
    extra = {
        k: v
        for k, v in raw.items()
        if k not in STRIPPED_FIELDS and k not in ("name", "vaultID", "routes")
    }
    routes = tuple(
        {k: v for k, v in route.items() if k not in STRIPPED_ROUTE_FIELDS}
        for route in raw["routes"]
    )
    return ConnectionDescriptor(
        name=raw["name"],
        vault_id=raw.get("vaultID") or default_vault_id or "",
        routes=routes,
        extra=extra,
    )


def validate_connections(
    raw_connections: list[Any], default_vault_id: str | None = None
) -> Result[list[ConnectionDescriptor], ConnectionValidationError]:
    """Check every descriptor up front. Pure: same input, same problems.

    A descriptor's own vaultID wins; `default_vault_id` fills it when absent.
    """
    if not raw_connections:
        return Err(ConnectionValidationError())

    problems = [
        p for index, raw in enumerate(raw_connections) for p in _check(index, raw, default_vault_id)
    ]
    if problems:
        return Err(ConnectionValidationError(tuple(problems)))

    return Ok([_to_descriptor(raw, default_vault_id) for raw in raw_connections])


def create_connections(
    ctx: SkyflowContext, descriptors: list[ConnectionDescriptor]
) -> BatchResult:
    """Create each connection in order. Never fails as a whole."""
    total = len(descriptors)
    logger.info("Creating %d connection(s)...", total)

    items: list[BatchItem] = []
    for position, descriptor in enumerate(descriptors, start=1):
        logger.info("[%d/%d] Creating connection: %s", position, total, descriptor.name)
        match create_connection_op(ctx, descriptor):
            case Ok(created):
                items.append(BatchItem(descriptor.name, ItemStatus.SUCCESS, id=created.id))
                logger.info('Created connection "%s" (ID: %s)', descriptor.name, created.id)
            case Err(error):
                items.append(BatchItem(descriptor.name, ItemStatus.FAILED, error=error))
                logger.info('Failed to create connection "%s"', descriptor.name)

    return BatchResult(items=tuple(items))
