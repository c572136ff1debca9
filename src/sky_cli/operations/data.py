"""Data-plane operations - insert records, deidentify and reidentify text."""

from typing import Any

from sky_cli.lib import api
from sky_cli.lib.api import VaultContext
from sky_cli.lib.errors import ApiError, MalformedResponseError
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import DeidentifyResult, DetectedEntity, InsertResult, ReidentifyResult

TOKEN_TYPES = ("vault_token", "entity_only", "entity_unique_counter")


def _insert_table(
    ctx: VaultContext,
    table: str,
    records: list[dict[str, Any]],
    return_tokens: bool,
    upsert_column: str | None,
) -> Result[InsertResult, ApiError]:
    payload: dict[str, Any] = {
        "records": [{"fields": r} for r in records],
        "tokenization": return_tokens,
    }
    if upsert_column:
        payload["upsert"] = upsert_column

    url = f"/v1/vaults/{ctx.vault_id}/{table}"
    match api.request(ctx.http, "Insert", "POST", url, json=payload):
        case Err() as e:
            return e
        case Ok(body) if isinstance(body, dict) and isinstance(body.get("records"), list):
            return Ok(InsertResult(records=tuple(_flatten(r) for r in body["records"])))
        case Ok(_):
            return Err(MalformedResponseError("Insert", "records (list)"))


def _insert_batch(
    ctx: VaultContext,
    table: str,
    records: list[dict[str, Any]],
    return_tokens: bool,
    upsert_column: str | None,
) -> Result[InsertResult, ApiError]:
    """Batch endpoint: each record succeeds or fails on its own."""
    batch = []
    for r in records:
        entry: dict[str, Any] = {
            "fields": r,
            "tableName": table,
            "method": "POST",
            "tokenization": return_tokens,
        }
        if upsert_column:
            entry["upsert"] = upsert_column
        batch.append(entry)

    url = f"/v1/vaults/{ctx.vault_id}"
    payload = {"records": batch, "continueOnError": True}
    match api.request(ctx.http, "Insert", "POST", url, json=payload):
        case Err() as e:
            return e
        case Ok(body) if isinstance(body, dict) and isinstance(body.get("responses"), list):
            pass
        case Ok(_):
            return Err(MalformedResponseError("Insert", "responses (list)"))

    inserted: list[dict[str, Any]] = []
    errors: list[dict[str, Any]] = []
    for index, response in enumerate(body["responses"]):
        if not isinstance(response, dict):
            errors.append({"request_index": index, "error": "unexpected response entry"})
            continue
        resp_body = response.get("Body") or {}
        if "error" in resp_body:
            errors.append({"request_index": index, "error": resp_body["error"]})
            continue
        inserted.extend(_flatten(r) for r in resp_body.get("records") or [])
    return Ok(InsertResult(records=tuple(inserted), errors=tuple(errors)))


def _flatten(record: dict[str, Any]) -> dict[str, Any]:
    """{"skyflow_id": ..., <field>: <token>, ...}"""
    flat: dict[str, Any] = {"skyflow_id": record.get("skyflow_id", "")}
    flat.update(record.get("tokens") or {})
    return flat


def insert_records(
    ctx: VaultContext,
    table: str,
    records: list[dict[str, Any]],
    return_tokens: bool = False,
    continue_on_error: bool = False,
    upsert_column: str | None = None,
) -> Result[InsertResult, ApiError]:
    """Insert records into a vault table."""
    insert = _insert_batch if continue_on_error else _insert_table
    return insert(ctx, table, records, return_tokens, upsert_column)


def deidentify_text(
    ctx: VaultContext,
    text: str,
    entities: list[str],
    token_type: str = "vault_token",
) -> Result[DeidentifyResult, ApiError]:
    """Replace detected sensitive entities in text with tokens."""
    payload = {
        "vault_id": ctx.vault_id,
        "text": text,
        "entity_types": entities,
        "token_type": {"default": token_type},
    }
    match api.request(ctx.http, "Deidentify", "POST", "/v1/detect/deidentify/string", json=payload):
        case Err() as e:
            return e
        case Ok(body) if isinstance(body, dict) and "processed_text" in body:
            pass
        case Ok(_):
            return Err(MalformedResponseError("Deidentify", "processed_text"))

    return Ok(
        DeidentifyResult(
            processed_text=str(body["processed_text"]),
            entities=tuple(
                DetectedEntity.from_api(e)
                for e in body.get("entities") or []
                if isinstance(e, dict)
            ),
            word_count=body.get("word_count"),
            char_count=body.get("character_count"),
        )
    )


def reidentify_text(
    ctx: VaultContext,
    text: str,
    plain_text: list[str] | None = None,
    masked: list[str] | None = None,
    redacted: list[str] | None = None,
) -> Result[ReidentifyResult, ApiError]:
    """Restore tokenized entities. Entities not listed come back as plain text."""
    payload: dict[str, Any] = {"vault_id": ctx.vault_id, "text": text}
    output_format = {
        key: value
        for key, value in (("plaintext", plain_text), ("masked", masked), ("redacted", redacted))
        if value
    }
    if output_format:
        payload["format"] = output_format

    match api.request(ctx.http, "Reidentify", "POST", "/v1/detect/reidentify/string", json=payload):
        case Err() as e:
            return e
        case Ok(body) if isinstance(body, dict) and "text" in body:
            return Ok(ReidentifyResult(processed_text=str(body["text"])))
        case Ok(_):
            return Err(MalformedResponseError("Reidentify", "text"))
