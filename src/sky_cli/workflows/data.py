"""Data-plane workflows - connect to a vault, insert, deidentify, reidentify."""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from sky_cli.lib import api
from sky_cli.lib import credentials as credentials_module
from sky_cli.lib.api import VaultContext
from sky_cli.lib.entities import DEFAULT_ENTITIES, parse_entities
from sky_cli.lib.errors import (
    ApiError,
    CredentialsError,
    InvalidInputError,
    RemoteError,
    UnknownEntityError,
)
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import DeidentifyResult, InsertResult, ReidentifyResult
from sky_cli.operations.data import TOKEN_TYPES
from sky_cli.operations.data import deidentify_text as deidentify_text_op
from sky_cli.operations.data import insert_records as insert_records_op
from sky_cli.operations.data import reidentify_text as reidentify_text_op

logger = logging.getLogger(__name__)

type ConnectError = CredentialsError | RemoteError
type InsertError = InvalidInputError | ApiError
type DetectError = InvalidInputError | UnknownEntityError | ApiError


@dataclass(frozen=True)
class VaultTarget:
    """Which vault to talk to, and on which cluster."""

    vault_id: str
    cluster_id: str
    environment: str = "PROD"

    @property
    def vault_url(self) -> str:
        return api.vault_url_for(self.cluster_id, self.environment)


def connect(
    target: VaultTarget, transport: httpx.BaseTransport | None = None
) -> Result[VaultContext, ConnectError]:
    """Resolve credentials and build a data-plane context for the target vault."""
    match credentials_module.load():
        case Err() as e:
            return e
        case Ok(creds):
            pass
    logger.debug("Credentials loaded (%s)", type(creds).__name__)

    match credentials_module.bearer_token(creds, transport=transport):
        case Err() as e:
            return e
        case Ok(token):
            pass

    logger.debug("Using vault %s at %s", target.vault_id, target.vault_url)
    return Ok(
        VaultContext(
            vault_id=target.vault_id,
            vault_url=target.vault_url,
            bearer_token=token,
            transport=transport,
        )
    )


def parse_records(data: str) -> Result[list[dict[str, Any]], InvalidInputError]:
    """JSON object or array of objects -> list of records."""
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        return Err(InvalidInputError("JSON data", str(e)))

    records = parsed if isinstance(parsed, list) else [parsed]
    if not records or not all(isinstance(r, dict) for r in records):
        return Err(
            InvalidInputError("JSON data", "expected an object or a non-empty array of objects")
        )
    logger.debug("Parsed %d record(s) to insert", len(records))
    return Ok(records)


def insert(
    ctx: VaultContext,
    table: str,
    data: str,
    return_tokens: bool = False,
    continue_on_error: bool = False,
    upsert_column: str | None = None,
) -> Result[InsertResult, InsertError]:
    """Parse JSON data and insert it into `table`."""
    if not table:
        return Err(InvalidInputError("table", "table name is required"))
    match parse_records(data):
        case Err() as e:
            return e
        case Ok(records):
            pass
    return insert_records_op(ctx, table, records, return_tokens, continue_on_error, upsert_column)


def deidentify(
    ctx: VaultContext,
    text: str,
    entities: str | None = None,
    token_type: str = "vault_token",
) -> Result[DeidentifyResult, DetectError]:
    """Tokenize sensitive entities in text. No entity list means DEFAULT_ENTITIES."""
    if not text:
        return Err(InvalidInputError("text", "text is required"))

    match parse_entities(entities):
        case Err() as e:
            return e
        case Ok(None):
            entity_list = list(DEFAULT_ENTITIES)
            logger.debug("Using default entity detection (%s)", ", ".join(entity_list))
        case Ok(entity_list):
            logger.debug("Detecting entities: %s", ", ".join(entity_list))

    token = token_type.lower()
    if token not in TOKEN_TYPES:
        logger.debug("Unknown token type '%s', using vault_token", token_type)
        token = "vault_token"

    return deidentify_text_op(ctx, text, entity_list, token)


def reidentify(
    ctx: VaultContext,
    text: str,
    plain_text: str | None = None,
    masked: str | None = None,
    redacted: str | None = None,
) -> Result[ReidentifyResult, DetectError]:
    """Restore original values. Entity lists are comma-separated aliases."""
    if not text:
        return Err(InvalidInputError("text", "text is required"))

    parsed: dict[str, list[str] | None] = {}
    for key, value in (("plain_text", plain_text), ("masked", masked), ("redacted", redacted)):
        match parse_entities(value):
            case Err() as e:
                return e
            case Ok(entity_list):
                parsed[key] = entity_list

    if not any(parsed.values()):
        logger.debug("No entity options specified, returning all as plain text")

    return reidentify_text_op(ctx, text, **parsed)
