"""Error types for the Sky CLI.

All errors are frozen dataclasses - no exceptions in business logic.
Operations and workflows return them inside Err(...); the CLI layer pattern
matches on them to print a user-facing message and pick the exit code.
"""

from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# Local Validation Errors (detected before any remote call)
# =============================================================================


@dataclass(frozen=True, slots=True)
class InvalidVaultSpecError:
    """Vault creation input failed local validation."""

    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class SchemaFileError:
    """Vault schema file missing, unreadable or not valid JSON."""

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ConnectionFileError:
    """Connection configuration file missing, unreadable or wrongly shaped."""

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ConnectionProblem:
    """One failed field check on one connection descriptor."""

    index: int
    name: str | None
    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class ConnectionValidationError:
    """Connection descriptors failed pre-flight validation.

    An empty `problems` tuple means the descriptor list itself was empty.
    """

    problems: tuple[ConnectionProblem, ...] = ()


@dataclass(frozen=True, slots=True)
class MissingValueError:
    """A required value was not supplied by flag, environment, config or prompt."""

    name: str
    hint: str = ""


@dataclass(frozen=True, slots=True)
class InvalidInputError:
    """User-supplied data could not be parsed."""

    what: str
    reason: str


@dataclass(frozen=True, slots=True)
class UnknownEntityError:
    """Entity alias not recognised by the Detect entity map."""

    entity: str
    available: tuple[str, ...]


# =============================================================================
# Configuration / Credential Errors
# =============================================================================


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Stored configuration missing or invalid."""

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class CredentialsError:
    """Data-plane credentials missing or unusable."""

    reason: str


# =============================================================================
# Remote Errors
# =============================================================================


@dataclass(frozen=True, slots=True)
class RemoteError:
    """Non-2xx response, or transport failure (status 0), from the service.

    `body` is the raw response text. `message`, `details` and `request_id` are
    filled when the service returned its structured error envelope.
    """

    operation: str
    status: int
    body: str
    message: str = ""
    details: tuple[str, ...] = ()
    request_id: str = ""


@dataclass(frozen=True, slots=True)
class MalformedResponseError:
    """Call succeeded but the payload lacks an expected field."""

    operation: str
    expected: str


@dataclass(frozen=True, slots=True)
class VaultIdMissingError:
    """Vault creation succeeded but no known ID field was in the response."""

    fields_tried: tuple[str, ...]


# =============================================================================
# Type Aliases for Error Unions
# =============================================================================

type LocalError = (
    InvalidVaultSpecError
    | SchemaFileError
    | ConnectionFileError
    | ConnectionValidationError
    | MissingValueError
    | InvalidInputError
    | UnknownEntityError
)
type ApiError = RemoteError | MalformedResponseError
type CreateVaultError = RemoteError | VaultIdMissingError
type RolesError = MissingValueError | RemoteError | MalformedResponseError
type DataPlaneError = CredentialsError | RemoteError | MalformedResponseError
