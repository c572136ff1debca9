"""Sky CLI data models.

Pure data structures. Parsing from API payloads lives next to each model
as a `from_api` classmethod; nothing here talks to the network.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self

from sky_cli.lib.errors import RemoteError

VAULT_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")

OWNER_ROLE_NAME = "VAULT_OWNER"

_NAME_ADJECTIVES = ("swift", "secure", "silent", "dynamic", "cosmic", "rapid", "stellar", "hidden")
_NAME_NOUNS = ("vault", "fortress", "bunker", "archive", "cache", "chamber", "keep", "locker")


def generate_vault_name(rng: random.Random | None = None) -> str:
    """Random `<adjective>-<noun>-<n>` name, always matching VAULT_NAME_PATTERN."""
    r = rng or random
    return f"{r.choice(_NAME_ADJECTIVES)}-{r.choice(_NAME_NOUNS)}-{r.randrange(1000)}"


# =============================================================================
# Vault provisioning
# =============================================================================


@dataclass(frozen=True)
class VaultSpec:
    """Input to vault provisioning.

    At most one of template_id / schema_document may be set. With neither,
    the service applies its own default schema.
    """

    name: str
    workspace_id: str
    template_id: str | None = None
    schema_document: Any = None
    description: str | None = None
    master_key: str | None = None
    create_service_account: bool = True

    @property
    def service_account_name(self) -> str:
        return f"{self.name}-service-account"


@dataclass(frozen=True)
class VaultRecord:
    """A created vault. vault_url/cluster_id may be empty if lookup failed."""

    vault_id: str
    name: str
    description: str
    workspace_id: str
    vault_url: str = ""
    cluster_id: str = ""


@dataclass(frozen=True)
class Workspace:
    """Account workspace; its url is the data-plane host for its vaults."""

    id: str
    name: str
    display_name: str
    url: str
    type: str = ""
    region_id: str = ""
    status: str = ""

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Self:
        return cls(
            id=str(raw.get("ID", "")),
            name=str(raw.get("name", "")),
            display_name=str(raw.get("displayName", "")),
            url=str(raw.get("url", "")),
            type=str(raw.get("type", "")),
            region_id=str(raw.get("regionID", "")),
            status=str(raw.get("status", "")),
        )


@dataclass(frozen=True)
class ServiceAccount:
    """Service account credentials. api_key is shown once and never stored."""

    client_id: str
    client_name: str
    api_key_id: str
    api_key: str

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Self:
        return cls(
            client_id=str(raw.get("clientID", "")),
            client_name=str(raw.get("clientName", "")),
            api_key_id=str(raw.get("apiKeyID", "")),
            api_key=str(raw.get("apiKey", "")),
        )


@dataclass(frozen=True)
class Role:
    """Vault-scoped role."""

    id: str
    definition_name: str
    display_name: str = ""
    description: str = ""

    @property
    def is_owner(self) -> bool:
        return self.definition_name == OWNER_ROLE_NAME

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Self:
        definition = raw.get("definition") or {}
        return cls(
            id=str(raw.get("ID", "")),
            definition_name=str(definition.get("name", "")),
            display_name=str(definition.get("displayName", "")),
            description=str(definition.get("description", "")),
        )


@dataclass(frozen=True)
class ProvisioningOutcome:
    """Everything a provisioning run produced."""

    vault: VaultRecord
    service_account: ServiceAccount | None = None
    role_assignment_id: str | None = None
    access_verified: bool | None = None
    warnings: tuple[str, ...] = ()

    @property
    def service_account_id(self) -> str | None:
        return self.service_account.client_id if self.service_account else None

    @property
    def service_account_api_key(self) -> str | None:
        return self.service_account.api_key if self.service_account else None


# =============================================================================
# Connections
# =============================================================================


class ConnectionMode(StrEnum):
    """Direction of a connection; picks the gateway route collection."""

    INGRESS = "INGRESS"
    EGRESS = "EGRESS"


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Validated connection, ready to submit.

    `extra` carries the descriptor's pass-through fields (auth mode, base URL,
    ...) untouched.
    """

    name: str
    vault_id: str
    routes: tuple[dict[str, Any], ...]
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def mode(self) -> ConnectionMode:
        if self.extra.get("mode") == "EGRESS":
            return ConnectionMode.EGRESS
        return ConnectionMode.INGRESS

    def to_payload(self) -> dict[str, Any]:
        return {
            **self.extra,
            "name": self.name,
            "vaultID": self.vault_id,
            "routes": [dict(r) for r in self.routes],
        }


@dataclass(frozen=True)
class ConnectionResult:
    """Created connection as reported by the gateway."""

    id: str
    url: str = ""
    status: str = ""

    @classmethod
    def from_api(cls, raw: Any) -> Self:
        if not isinstance(raw, dict):
            return cls(id=str(raw or ""))
        return cls(
            id=str(raw.get("ID") or raw.get("id") or ""),
            url=str(raw.get("baseURL") or raw.get("url") or ""),
            status=str(raw.get("status") or ""),
        )


class ItemStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class BatchItem:
    """Outcome of one connection in a batch."""

    name: str
    status: ItemStatus
    id: str | None = None
    error: RemoteError | None = None


@dataclass(frozen=True)
class BatchResult:
    """Ordered per-item outcomes of a batch run."""

    items: tuple[BatchItem, ...] = ()

    @property
    def succeeded(self) -> tuple[BatchItem, ...]:
        return tuple(i for i in self.items if i.status == ItemStatus.SUCCESS)

    @property
    def failed(self) -> tuple[BatchItem, ...]:
        return tuple(i for i in self.items if i.status == ItemStatus.FAILED)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def fail_count(self) -> int:
        return len(self.failed)

    @property
    def ok(self) -> bool:
        return self.fail_count == 0


# =============================================================================
# Data plane
# =============================================================================


@dataclass(frozen=True)
class InsertResult:
    """Inserted records (skyflow_id plus tokens) and per-record errors."""

    records: tuple[dict[str, Any], ...]
    errors: tuple[dict[str, Any], ...] = ()


@dataclass(frozen=True)
class DetectedEntity:
    entity: str
    value: str
    token: str
    start: int | None = None
    end: int | None = None
    score: float | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Self:
        location = raw.get("location") or {}
        scores = raw.get("entity_scores") or {}
        score = next(iter(scores.values()), None) if isinstance(scores, dict) else None
        return cls(
            entity=str(raw.get("entity_type", "")),
            value=str(raw.get("value", "")),
            token=str(raw.get("token", "")),
            start=location.get("start_index"),
            end=location.get("end_index"),
            score=float(score) if score is not None else None,
        )


@dataclass(frozen=True)
class DeidentifyResult:
    processed_text: str
    entities: tuple[DetectedEntity, ...] = ()
    word_count: int | None = None
    char_count: int | None = None


@dataclass(frozen=True)
class ReidentifyResult:
    processed_text: str
