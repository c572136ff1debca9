"""HTTP contexts for the Skyflow management and data-plane APIs.

A context is created once at CLI entry and passed to all operations.
The httpx client is built lazily on first access via cached_property and
closed by the command when it finishes.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import cached_property
from typing import Any

import httpx

from sky_cli.lib.errors import RemoteError
from sky_cli.lib.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_MANAGEMENT_URL = "https://manage.skyflowapis.com"
DEFAULT_TIMEOUT = 30.0

# Data-plane domain per environment
VAULT_DOMAINS = {
    "PROD": "vault.skyflowapis.com",
    "SANDBOX": "vault.skyflowapis-preview.com",
    "STAGE": "vault.skyflowapis.tech",
    "DEV": "vault.skyflowapis.dev",
}
ENVIRONMENT_ALIASES = {
    "PRODUCTION": "PROD",
    "STAGING": "STAGE",
    "DEVELOPMENT": "DEV",
}

_CLUSTER_RE = re.compile(r"^(?:https?://)?([^./]+)\.vault\.skyflowapis")


@dataclass
class SkyflowContext:
    """Management API session. Created once at CLI entry.

    Example:
        ctx = SkyflowContext(bearer_token="...", account_id="acc-1")
        ctx.http.get("/v1/workspaces")
    """

    bearer_token: str
    account_id: str
    base_url: str = DEFAULT_MANAGEMENT_URL
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.BaseTransport | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.bearer_token}",
            "X-SKYFLOW-ACCOUNT-ID": self.account_id,
            "Content-Type": "application/json",
        }

    @cached_property
    def http(self) -> httpx.Client:
        """httpx client bound to the management API."""
        return httpx.Client(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    def close(self) -> None:
        if "http" in self.__dict__:
            self.http.close()


@dataclass
class VaultContext:
    """Data-plane session for one vault."""

    vault_id: str
    vault_url: str
    bearer_token: str
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.BaseTransport | None = None

    @cached_property
    def http(self) -> httpx.Client:
        """httpx client bound to the vault's cluster URL."""
        return httpx.Client(
            base_url=self.vault_url,
            headers={
                "Authorization": f"Bearer {self.bearer_token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self.transport,
        )

    def close(self) -> None:
        if "http" in self.__dict__:
            self.http.close()


def normalize_environment(environment: str | None) -> str:
    """Map user input to one of VAULT_DOMAINS' keys. Unknown values mean PROD."""
    env = (environment or "PROD").strip().upper()
    env = ENVIRONMENT_ALIASES.get(env, env)
    if env not in VAULT_DOMAINS:
        logger.debug("Unknown environment '%s', defaulting to PROD", environment)
        return "PROD"
    return env


def vault_url_for(cluster_id: str, environment: str | None = None) -> str:
    """https://<cluster>.vault.skyflowapis.com (domain depends on environment)."""
    return f"https://{cluster_id}.{VAULT_DOMAINS[normalize_environment(environment)]}"


def cluster_id_from_url(url: str) -> str | None:
    """First host label of a vault URL, with or without scheme."""
    match = _CLUSTER_RE.match(url.strip())
    return match.group(1) if match else None


def request(
    client: httpx.Client,
    operation: str,
    method: str,
    url: str,
    **kwargs: Any,
) -> Result[Any, RemoteError]:
    """Send one request. Ok(decoded body) on 2xx, Err(RemoteError) otherwise.

    Transport failures come back as RemoteError with status 0.
    """
    logger.debug("%s %s", method, url)
    if "json" in kwargs:
        logger.debug("Request payload:\n%s", json.dumps(kwargs["json"], indent=2, default=str))

    try:
        response = client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        return Err(RemoteError(operation=operation, status=0, body=str(e), message=str(e)))

    logger.debug("Response %s:\n%s", response.status_code, response.text)

    if not response.is_success:
        return Err(remote_error(operation, response))
    return Ok(_decode(response))


def _decode(response: httpx.Response) -> Any:
    """JSON body if it parses, otherwise the raw text (some endpoints return a bare ID)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text.strip()


def remote_error(operation: str, response: httpx.Response) -> RemoteError:
    """Build a RemoteError, unpacking the service's error envelope when present.

    Envelope: {"error": {"http_code": 400, "message": "...", "details": [...],
    "request_ID": "..."}}
    """
    body = response.text
    message = ""
    details: tuple[str, ...] = ()
    request_id = response.headers.get("x-request-id", "")

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        envelope = payload["error"]
        message = str(envelope.get("message") or "")
        raw_details = envelope.get("details") or []
        if isinstance(raw_details, list):
            details = tuple(
                d if isinstance(d, str) else json.dumps(d, default=str) for d in raw_details
            )
        request_id = str(envelope.get("request_ID") or request_id)

    return RemoteError(
        operation=operation,
        status=response.status_code,
        body=body,
        message=message,
        details=details,
        request_id=request_id,
    )
