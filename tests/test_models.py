"""Tests for models - vault, connection and data-plane structures."""

import random

from sky_cli.lib.errors import RemoteError
from sky_cli.models import (
    VAULT_NAME_PATTERN,
    BatchItem,
    BatchResult,
    ConnectionDescriptor,
    ConnectionMode,
    ConnectionResult,
    DetectedEntity,
    ItemStatus,
    ProvisioningOutcome,
    Role,
    ServiceAccount,
    VaultRecord,
    VaultSpec,
    Workspace,
    generate_vault_name,
)


class TestVaultName:
    def test_generated_names_are_valid(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            assert VAULT_NAME_PATTERN.match(generate_vault_name(rng))

    def test_pattern_rejects_special_chars(self) -> None:
        assert VAULT_NAME_PATTERN.match("my-vault-1")
        assert not VAULT_NAME_PATTERN.match("my vault")
        assert not VAULT_NAME_PATTERN.match("vault_1")
        assert not VAULT_NAME_PATTERN.match("")

    def test_service_account_name(self) -> None:
        spec = VaultSpec(name="payments", workspace_id="ws-1")
        assert spec.service_account_name == "payments-service-account"
        assert spec.create_service_account is True


class TestFromApi:
    def test_workspace(self) -> None:
        ws = Workspace.from_api(
            {"ID": "ws-1", "name": "main", "displayName": "Main", "url": "c1.vault.skyflowapis.com"}
        )
        assert ws.id == "ws-1"
        assert ws.display_name == "Main"
        assert ws.url == "c1.vault.skyflowapis.com"

    def test_service_account(self) -> None:
        sa = ServiceAccount.from_api(
            {"clientID": "sa-1", "clientName": "n", "apiKeyID": "k-1", "apiKey": "secret"}
        )
        assert sa.client_id == "sa-1"
        assert sa.api_key == "secret"

    def test_role_owner(self) -> None:
        role = Role.from_api({"ID": "r-1", "definition": {"name": "VAULT_OWNER"}})
        assert role.id == "r-1"
        assert role.is_owner

    def test_role_without_definition(self) -> None:
        role = Role.from_api({"ID": "r-2"})
        assert role.definition_name == ""
        assert not role.is_owner

    def test_connection_result_dict(self) -> None:
        result = ConnectionResult.from_api({"ID": "c-1", "baseURL": "https://x", "status": "ok"})
        assert result == ConnectionResult(id="c-1", url="https://x", status="ok")

    def test_connection_result_lowercase_id(self) -> None:
        assert ConnectionResult.from_api({"id": "c-2"}).id == "c-2"

    def test_connection_result_bare_string(self) -> None:
        assert ConnectionResult.from_api("c-3").id == "c-3"

    def test_detected_entity(self) -> None:
        entity = DetectedEntity.from_api(
            {
                "entity_type": "ssn",
                "value": "123-45-6789",
                "token": "[SSN_1]",
                "location": {"start_index": 10, "end_index": 21},
                "entity_scores": {"ssn": 0.97},
            }
        )
        assert entity.entity == "ssn"
        assert entity.start == 10
        assert entity.end == 21
        assert entity.score == 0.97

    def test_detected_entity_minimal(self) -> None:
        entity = DetectedEntity.from_api({"entity_type": "name"})
        assert entity.start is None
        assert entity.score is None


class TestProvisioningOutcome:
    def test_without_service_account(self) -> None:
        outcome = ProvisioningOutcome(vault=VaultRecord("v-1", "n", "", "ws-1"))
        assert outcome.service_account_id is None
        assert outcome.service_account_api_key is None

    def test_with_service_account(self) -> None:
        outcome = ProvisioningOutcome(
            vault=VaultRecord("v-1", "n", "", "ws-1"),
            service_account=ServiceAccount("sa-1", "n", "k-1", "secret"),
        )
        assert outcome.service_account_id == "sa-1"
        assert outcome.service_account_api_key == "secret"


class TestConnectionDescriptor:
    def test_default_mode_is_ingress(self) -> None:
        d = ConnectionDescriptor(name="c", vault_id="v", routes=({"path": "/a"},))
        assert d.mode == ConnectionMode.INGRESS

    def test_egress_mode(self) -> None:
        d = ConnectionDescriptor(name="c", vault_id="v", routes=(), extra={"mode": "EGRESS"})
        assert d.mode == ConnectionMode.EGRESS

    def test_payload_keeps_extra_fields(self) -> None:
        d = ConnectionDescriptor(
            name="c",
            vault_id="v",
            routes=({"path": "/a"},),
            extra={"mode": "EGRESS", "authMode": "NOAUTH"},
        )
        assert d.to_payload() == {
            "mode": "EGRESS",
            "authMode": "NOAUTH",
            "name": "c",
            "vaultID": "v",
            "routes": [{"path": "/a"}],
        }


class TestBatchResult:
    def test_counts(self) -> None:
        err = RemoteError("Connection creation", 400, "bad")
        result = BatchResult(
            items=(
                BatchItem("a", ItemStatus.SUCCESS, id="1"),
                BatchItem("b", ItemStatus.FAILED, error=err),
                BatchItem("c", ItemStatus.SUCCESS, id="3"),
            )
        )
        assert result.success_count == 2
        assert result.fail_count == 1
        assert not result.ok
        assert [i.name for i in result.succeeded] == ["a", "c"]
        assert result.failed[0].error == err

    def test_empty_is_ok(self) -> None:
        assert BatchResult().ok
