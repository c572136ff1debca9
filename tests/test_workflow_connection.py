"""Tests for workflows/connection.py - load, validate and batch-create connections."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import (
    ConnectionFileError,
    ConnectionProblem,
    ConnectionValidationError,
    RemoteError,
)
from sky_cli.lib.result import Err, Ok
from sky_cli.models import ConnectionDescriptor, ConnectionResult, ItemStatus
from sky_cli.workflows.connection import (
    create_connections,
    decode_connections,
    load_connections,
    validate_connections,
)

OPS = "sky_cli.workflows.connection"


def _raw(name: str, **overrides) -> dict:
    raw = {"name": name, "vaultID": "v-1", "routes": [{"path": "/a"}]}
    raw.update(overrides)
    return raw


@pytest.fixture
def ctx() -> SkyflowContext:
    return SkyflowContext(bearer_token="t", account_id="acc-1")


class TestDecode:
    def test_array(self) -> None:
        assert decode_connections([{"name": "a"}]) == [{"name": "a"}]

    def test_wrapped(self) -> None:
        assert decode_connections({"connections": [{"name": "a"}]}) == [{"name": "a"}]

    @pytest.mark.parametrize("document", [{"connections": {}}, {"other": []}, "text", 3, None])
    def test_other_shapes(self, document) -> None:
        assert decode_connections(document) is None


class TestLoadConnections:
    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"
        assert load_connections(path) == Err(
            ConnectionFileError(path, "Configuration file not found")
        )

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text("[")
        match load_connections(path):
            case Err(ConnectionFileError(reason=reason)):
                assert reason.startswith("Invalid JSON in configuration file")
            case other:
                pytest.fail(f"Unexpected result {other}")

    def test_wrong_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"name": "a"}))
        assert isinstance(load_connections(path), Err)

    def test_wrapped_document(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"connections": [_raw("a")]}))
        assert load_connections(path) == Ok([_raw("a")])


class TestValidateConnections:
    def test_empty_list(self) -> None:
        assert validate_connections([]) == Err(ConnectionValidationError())

    def test_valid(self) -> None:
        match validate_connections([_raw("a", mode="EGRESS")]):
            case Ok([descriptor]):
                assert descriptor == ConnectionDescriptor(
                    name="a", vault_id="v-1", routes=({"path": "/a"},), extra={"mode": "EGRESS"}
                )
            case other:
                pytest.fail(f"Unexpected result {other}")

    def test_collects_every_problem(self) -> None:
        raw = [
            _raw("ok"),
            _raw("", routes=[]),
            {"name": "no-vault", "routes": [{"path": "/x"}]},
            "not an object",
        ]
        assert validate_connections(raw) == Err(
            ConnectionValidationError(
                (
                    ConnectionProblem(1, None, "name", "is required"),
                    ConnectionProblem(1, None, "routes", "must be a non-empty array"),
                    ConnectionProblem(2, "no-vault", "vaultID", "is required"),
                    ConnectionProblem(3, None, "connection", "must be a JSON object"),
                )
            )
        )

    def test_is_deterministic(self) -> None:
        raw = [_raw("a", routes=[]), _raw("")]
        assert validate_connections(raw) == validate_connections(raw)

    def test_default_vault_fills_missing(self) -> None:
        raw = [{"name": "a", "routes": [{"path": "/a"}]}, _raw("b", vaultID="own")]
        match validate_connections(raw, default_vault_id="v-default"):
            case Ok(descriptors):
                assert [d.vault_id for d in descriptors] == ["v-default", "own"]
            case other:
                pytest.fail(f"Unexpected result {other}")

    def test_strips_server_owned_fields(self) -> None:
        raw = _raw(
            "a",
            ID="old-id",
            BasicAudit={"CreatedBy": "x"},
            routes=[{"path": "/a", "invocationURL": "https://old"}],
        )
        match validate_connections([raw]):
            case Ok([descriptor]):
                payload = descriptor.to_payload()
                assert "ID" not in payload
                assert "BasicAudit" not in payload
                assert payload["routes"] == [{"path": "/a"}]
            case other:
                pytest.fail(f"Unexpected result {other}")


class TestCreateConnections:
    def test_n_items_k_failures(self, ctx: SkyflowContext) -> None:
        descriptors = validate_connections([_raw("a"), _raw("b"), _raw("c")]).value
        error = RemoteError("Connection creation", 400, "bad route")
        outcomes = [Ok(ConnectionResult("c-a")), Err(error), Ok(ConnectionResult("c-c"))]

        with patch(f"{OPS}.create_connection_op", side_effect=outcomes) as create:
            result = create_connections(ctx, descriptors)

        assert create.call_count == 3
        assert [i.name for i in result.items] == ["a", "b", "c"]
        assert [i.status for i in result.items] == [
            ItemStatus.SUCCESS,
            ItemStatus.FAILED,
            ItemStatus.SUCCESS,
        ]
        assert result.items[0].id == "c-a"
        assert result.items[1].error == error
        assert result.success_count == 2
        assert result.fail_count == 1
        assert not result.ok

    def test_all_succeed(self, ctx: SkyflowContext) -> None:
        descriptors = validate_connections([_raw("a")]).value
        with patch(f"{OPS}.create_connection_op", return_value=Ok(ConnectionResult("c-a"))):
            result = create_connections(ctx, descriptors)
        assert result.ok

    def test_invalid_batch_never_reaches_the_service(self) -> None:
        raw = [_raw("a"), _raw("b", routes=[])]
        with patch(f"{OPS}.create_connection_op") as create:
            result = validate_connections(raw)
        assert result == Err(
            ConnectionValidationError(
                (ConnectionProblem(1, "b", "routes", "must be a non-empty array"),)
            )
        )
        create.assert_not_called()

    def test_non_object_route_is_rejected_before_any_call(self) -> None:
        raw = [_raw("a"), _raw("b", routes=["not-a-route"]), _raw("c")]
        with patch(f"{OPS}.create_connection_op") as create:
            result = validate_connections(raw)
        assert result == Err(
            ConnectionValidationError(
                (ConnectionProblem(1, "b", "routes", "each route must be a JSON object"),)
            )
        )
        create.assert_not_called()
