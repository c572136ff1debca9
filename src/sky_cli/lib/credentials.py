"""Data-plane credentials.

Precedence:
1. SKYFLOW_API_KEY           - used directly as a bearer token
2. SKYFLOW_CREDENTIALS_PATH  - service account credentials JSON file
3. SKYFLOW_CREDENTIALS       - same JSON, inline
4. bearer token from stored config

Service account credentials are exchanged for a bearer token by signing a
short-lived RS256 JWT assertion and posting it to the credential's tokenURI.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import jwt
from cryptography.hazmat.primitives import serialization

from sky_cli.lib import api
from sky_cli.lib import config as config_module
from sky_cli.lib.errors import CredentialsError, RemoteError
from sky_cli.lib.result import Err, Ok, Result

JWT_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_TTL = 3600
REQUIRED_FIELDS = ("clientID", "keyID", "tokenURI", "privateKey")


@dataclass(frozen=True, slots=True)
class ApiKey:
    key: str


@dataclass(frozen=True, slots=True)
class BearerToken:
    token: str


@dataclass(frozen=True, slots=True)
class ServiceAccountCredentials:
    """Parsed credentials.json downloaded for a service account."""

    client_id: str
    key_id: str
    token_uri: str
    private_key: str


type Credentials = ApiKey | BearerToken | ServiceAccountCredentials


def parse_service_account(
    raw: str, source: str
) -> Result[ServiceAccountCredentials, CredentialsError]:
    """Parse service account credentials JSON."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(CredentialsError(f"{source} is not valid JSON: {e}"))
    if not isinstance(data, dict):
        return Err(CredentialsError(f"{source} must be a JSON object"))

    missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
    if missing:
        return Err(CredentialsError(f"{source} is missing: {', '.join(missing)}"))

    return Ok(
        ServiceAccountCredentials(
            client_id=data["clientID"],
            key_id=data["keyID"],
            token_uri=data["tokenURI"],
            private_key=data["privateKey"],
        )
    )


def load() -> Result[Credentials, CredentialsError]:
    """Resolve data-plane credentials from the environment or stored config."""
    if api_key := config_module.env(config_module.ENV_API_KEY):
        return Ok(ApiKey(api_key))

    if path_value := config_module.env(config_module.ENV_CREDENTIALS_PATH):
        path = Path(path_value).expanduser()
        try:
            raw = path.read_text()
        except OSError as e:
            return Err(CredentialsError(f"Cannot read credentials file {path}: {e}"))
        return parse_service_account(raw, str(path))

    if inline := config_module.env(config_module.ENV_CREDENTIALS):
        return parse_service_account(inline, config_module.ENV_CREDENTIALS)

    match config_module.load():
        case Ok(config) if config.bearer_token:
            return Ok(BearerToken(config.bearer_token))
        case _:
            pass

    return Err(
        CredentialsError(
            "No Skyflow credentials found. Set one of:\n"
            f"  - {config_module.ENV_API_KEY}\n"
            f"  - {config_module.ENV_CREDENTIALS_PATH}\n"
            f"  - {config_module.ENV_CREDENTIALS}\n"
            "  - Or run: sky configure"
        )
    )


def sign_assertion(
    creds: ServiceAccountCredentials, now: int | None = None
) -> Result[str, CredentialsError]:
    """Signed JWT assertion for the token endpoint."""
    issued = int(time.time()) if now is None else now
    try:
        private_key = serialization.load_pem_private_key(
            creds.private_key.encode("utf-8"), password=None
        )
    except (ValueError, TypeError) as e:
        return Err(CredentialsError(f"Invalid private key in credentials: {e}"))

    claims: dict[str, Any] = {
        "iss": creds.client_id,
        "key": creds.key_id,
        "aud": creds.token_uri,
        "sub": creds.client_id,
        "exp": issued + ASSERTION_TTL,
    }
    return Ok(jwt.encode(claims, private_key, algorithm="RS256"))


def bearer_token(
    creds: Credentials,
    transport: httpx.BaseTransport | None = None,
) -> Result[str, CredentialsError | RemoteError]:
    """Turn any credential form into a bearer token."""
    match creds:
        case ApiKey(key):
            return Ok(key)
        case BearerToken(token):
            return Ok(token)
        case ServiceAccountCredentials():
            pass

    match sign_assertion(creds):
        case Err() as e:
            return e
        case Ok(assertion):
            pass

    with httpx.Client(timeout=api.DEFAULT_TIMEOUT, transport=transport) as client:
        result = api.request(
            client,
            "Generate bearer token",
            "POST",
            creds.token_uri,
            json={"grant_type": JWT_GRANT_TYPE, "assertion": assertion},
        )

    match result:
        case Err() as e:
            return e
        case Ok(body) if isinstance(body, dict) and body.get("accessToken"):
            return Ok(str(body["accessToken"]))
        case Ok(_):
            return Err(CredentialsError("Token endpoint response has no accessToken"))
