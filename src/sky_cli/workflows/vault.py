"""Vault workflow - create a vault and wire up a service account for it."""

import logging

from sky_cli.lib.api import SkyflowContext
from sky_cli.lib.errors import (
    ApiError,
    CreateVaultError,
    InvalidVaultSpecError,
    RemoteError,
    RolesError,
)
from sky_cli.lib.result import Err, Ok, Result
from sky_cli.models import OWNER_ROLE_NAME, VAULT_NAME_PATTERN, ProvisioningOutcome, Role, VaultSpec
from sky_cli.operations.role import assign_role as assign_role_op
from sky_cli.operations.role import get_vault_roles as get_vault_roles_op
from sky_cli.operations.service_account import (
    create_service_account as create_service_account_op,
)
from sky_cli.operations.vault import create_vault as create_vault_op
from sky_cli.operations.vault import verify_access as verify_access_op

logger = logging.getLogger(__name__)

type ProvisionError = InvalidVaultSpecError | CreateVaultError | ApiError | RolesError | RemoteError

OWNER_ROLE_MISSING = f"{OWNER_ROLE_NAME} role not found, skipping assignment"
ACCESS_UNVERIFIED = "Service account access could not be verified"


def validate_spec(spec: VaultSpec) -> Result[VaultSpec, InvalidVaultSpecError]:
    """Local checks, run before any remote call."""
    if not VAULT_NAME_PATTERN.match(spec.name):
        return Err(InvalidVaultSpecError("name", "must be alphanumeric with hyphens only"))
    if not spec.workspace_id:
        return Err(InvalidVaultSpecError("workspace_id", "is required for vault creation"))
    if spec.template_id and spec.schema_document is not None:
        return Err(InvalidVaultSpecError("template", "cannot be combined with a schema"))
    return Ok(spec)


def find_owner_role(roles: list[Role]) -> Role | None:
    """First VAULT_OWNER role in iteration order."""
    return next((r for r in roles if r.is_owner), None)


def provision_vault(
    ctx: SkyflowContext, spec: VaultSpec
) -> Result[ProvisioningOutcome, ProvisionError]:
    """Create a vault and, optionally, an owner service account for it.

    1. Validate spec (local)
    2. Create vault                       - fatal
    3. Create service account             - fatal (skipped if not requested)
    4. Fetch vault roles                  - fatal
    5. Find VAULT_OWNER                   - missing -> warning, stop here
    6. Assign role to service account     - fatal
    7. Verify access with the API key     - negative -> warning

    Nothing is rolled back: a vault created before a later fatal step stays.
    """
    match validate_spec(spec):
        case Err() as e:
            return e
        case Ok(_):
            pass

    # Create vault
    logger.info('Creating vault "%s"...', spec.name)
    match create_vault_op(ctx, spec):
        case Err() as e:
            return e
        case Ok(vault):
            pass

    if not spec.create_service_account:
        return Ok(ProvisioningOutcome(vault=vault))

    # Create service account
    logger.info("Creating service account...")
    match create_service_account_op(ctx, spec.service_account_name):
        case Err() as e:
            return e
        case Ok(service_account):
            pass

    # Fetch roles
    logger.info("Retrieving roles...")
    match get_vault_roles_op(ctx, vault.vault_id):
        case Err() as e:
            return e
        case Ok(roles):
            pass

    owner = find_owner_role(roles)
    if owner is None:
        return Ok(
            ProvisioningOutcome(
                vault=vault,
                service_account=service_account,
                warnings=(OWNER_ROLE_MISSING,),
            )
        )

    # Assign role
    logger.info("Assigning %s role to service account...", OWNER_ROLE_NAME)
    match assign_role_op(ctx, owner.id, service_account.client_id):
        case Err() as e:
            return e
        case Ok(assignment_id):
            pass

    # Verify access
    logger.info("Verifying service account access...")
    verified = verify_access_op(ctx, vault.vault_id, service_account.api_key)
    warnings: tuple[str, ...] = ()
    if verified:
        logger.info("Service account access verified successfully.")
    else:
        warnings = (ACCESS_UNVERIFIED,)

    return Ok(
        ProvisioningOutcome(
            vault=vault,
            service_account=service_account,
            role_assignment_id=assignment_id,
            access_verified=verified,
            warnings=warnings,
        )
    )
