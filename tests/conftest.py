"""Shared pytest fixtures for sky-cli tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from sky_cli.lib.api import SkyflowContext, VaultContext

SKYFLOW_ENV_VARS = (
    "SKYFLOW_BEARER_TOKEN",
    "SKYFLOW_ACCOUNT_ID",
    "SKYFLOW_WORKSPACE_ID",
    "SKYFLOW_VAULT_ID",
    "SKYFLOW_VAULT_URL",
    "SKYFLOW_API_KEY",
    "SKYFLOW_CREDENTIALS",
    "SKYFLOW_CREDENTIALS_PATH",
    "SKYFLOW_MANAGEMENT_URL",
)

type Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config at a temp dir and clear SKYFLOW_* variables."""
    for name in SKYFLOW_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_dir = tmp_path / "skyflow"
    monkeypatch.setenv("SKYFLOW_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def write_config(isolated_env: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a raw config.json into the temp config dir."""

    def write(data: dict[str, Any]) -> Path:
        isolated_env.mkdir(parents=True, exist_ok=True)
        path = isolated_env / "config.json"
        path.write_text(json.dumps(data))
        return path

    return write


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


@pytest.fixture
def management() -> Callable[[Handler], tuple[SkyflowContext, Recorder]]:
    """SkyflowContext wired to a MockTransport."""

    def make(handler: Handler) -> tuple[SkyflowContext, Recorder]:
        recorder = Recorder(handler)
        ctx = SkyflowContext(
            bearer_token="mgmt-token",
            account_id="acc-1",
            base_url="https://manage.test",
            transport=recorder.transport,
        )
        return ctx, recorder

    return make


@pytest.fixture
def vault() -> Callable[[Handler], tuple[VaultContext, Recorder]]:
    """VaultContext wired to a MockTransport."""

    def make(handler: Handler) -> tuple[VaultContext, Recorder]:
        recorder = Recorder(handler)
        ctx = VaultContext(
            vault_id="v-1",
            vault_url="https://c1.vault.skyflowapis.com",
            bearer_token="data-token",
            transport=recorder.transport,
        )
        return ctx, recorder

    return make
