"""Tests for operations/data.py - insert, deidentify, reidentify."""

import httpx
import pytest

from sky_cli.lib.errors import MalformedResponseError, RemoteError
from sky_cli.lib.result import Err, Ok
from sky_cli.models import InsertResult, ReidentifyResult
from sky_cli.operations.data import deidentify_text, insert_records, reidentify_text


class TestInsertRecords:
    def test_table_insert(self, vault) -> None:
        body = {"records": [{"skyflow_id": "id-1", "tokens": {"ssn": "tok-1"}}]}
        ctx, recorder = vault(lambda r: httpx.Response(200, json=body))

        result = insert_records(ctx, "persons", [{"ssn": "123-45-6789"}], return_tokens=True)

        assert result == Ok(InsertResult(records=({"skyflow_id": "id-1", "ssn": "tok-1"},)))
        request = recorder.requests[0]
        assert str(request.url) == "https://c1.vault.skyflowapis.com/v1/vaults/v-1/persons"
        assert request.headers["Authorization"] == "Bearer data-token"
        assert recorder.json_bodies()[0] == {
            "records": [{"fields": {"ssn": "123-45-6789"}}],
            "tokenization": True,
        }

    def test_upsert(self, vault) -> None:
        ctx, recorder = vault(lambda r: httpx.Response(200, json={"records": []}))
        insert_records(ctx, "persons", [{"email": "a@b.c"}], upsert_column="email")
        assert recorder.json_bodies()[0]["upsert"] == "email"

    def test_batch_continue_on_error(self, vault) -> None:
        body = {
            "responses": [
                {"Body": {"records": [{"skyflow_id": "id-1"}]}, "Status": 200},
                {"Body": {"error": "duplicate value"}, "Status": 409},
            ]
        }
        ctx, recorder = vault(lambda r: httpx.Response(200, json=body))

        result = insert_records(
            ctx, "persons", [{"ssn": "1"}, {"ssn": "2"}], continue_on_error=True
        )

        assert result == Ok(
            InsertResult(
                records=({"skyflow_id": "id-1"},),
                errors=({"request_index": 1, "error": "duplicate value"},),
            )
        )
        payload = recorder.json_bodies()[0]
        assert recorder.requests[0].url.path == "/v1/vaults/v-1"
        assert payload["continueOnError"] is True
        assert [r["tableName"] for r in payload["records"]] == ["persons", "persons"]

    def test_malformed(self, vault) -> None:
        ctx, _ = vault(lambda r: httpx.Response(200, json={"unexpected": 1}))
        assert insert_records(ctx, "persons", [{"a": 1}]) == Err(
            MalformedResponseError("Insert", "records (list)")
        )

    def test_remote_error(self, vault) -> None:
        ctx, _ = vault(lambda r: httpx.Response(404, text="no table"))
        match insert_records(ctx, "missing", [{"a": 1}]):
            case Err(RemoteError(operation="Insert", status=404)):
                pass
            case other:
                pytest.fail(f"Unexpected result {other}")


class TestDeidentify:
    def test_success(self, vault) -> None:
        body = {
            "processed_text": "My SSN is [SSN_1]",
            "entities": [
                {
                    "entity_type": "ssn",
                    "value": "123-45-6789",
                    "token": "SSN_1",
                    "location": {"start_index": 10, "end_index": 21},
                }
            ],
            "word_count": 4,
            "character_count": 21,
        }
        ctx, recorder = vault(lambda r: httpx.Response(200, json=body))

        match deidentify_text(ctx, "My SSN is 123-45-6789", ["ssn"], "entity_only"):
            case Ok(result):
                assert result.processed_text == "My SSN is [SSN_1]"
                assert result.entities[0].entity == "ssn"
                assert result.word_count == 4
                assert result.char_count == 21
            case other:
                pytest.fail(f"Unexpected result {other}")

        assert recorder.requests[0].url.path == "/v1/detect/deidentify/string"
        assert recorder.json_bodies()[0] == {
            "vault_id": "v-1",
            "text": "My SSN is 123-45-6789",
            "entity_types": ["ssn"],
            "token_type": {"default": "entity_only"},
        }

    def test_malformed(self, vault) -> None:
        ctx, _ = vault(lambda r: httpx.Response(200, json={}))
        assert deidentify_text(ctx, "x", ["ssn"]) == Err(
            MalformedResponseError("Deidentify", "processed_text")
        )


class TestReidentify:
    def test_format_lists(self, vault) -> None:
        ctx, recorder = vault(lambda r: httpx.Response(200, json={"text": "My SSN is XXX-XX-6789"}))

        result = reidentify_text(ctx, "My SSN is [SSN_1]", masked=["ssn"])

        assert result == Ok(ReidentifyResult(processed_text="My SSN is XXX-XX-6789"))
        assert recorder.json_bodies()[0] == {
            "vault_id": "v-1",
            "text": "My SSN is [SSN_1]",
            "format": {"masked": ["ssn"]},
        }

    def test_no_format_when_nothing_listed(self, vault) -> None:
        ctx, recorder = vault(lambda r: httpx.Response(200, json={"text": "plain"}))
        reidentify_text(ctx, "[SSN_1]")
        assert "format" not in recorder.json_bodies()[0]

    def test_plain_text_key(self, vault) -> None:
        ctx, recorder = vault(lambda r: httpx.Response(200, json={"text": "plain"}))
        reidentify_text(ctx, "[NAME_1]", plain_text=["name"], redacted=["ssn"])
        assert recorder.json_bodies()[0]["format"] == {"plaintext": ["name"], "redacted": ["ssn"]}
