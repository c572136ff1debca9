"""Operations layer - single remote calls that return Result types."""

from sky_cli.operations.connection import create_connection
from sky_cli.operations.data import deidentify_text, insert_records, reidentify_text
from sky_cli.operations.role import assign_role, get_vault_roles
from sky_cli.operations.service_account import create_service_account
from sky_cli.operations.vault import create_vault, get_workspaces, load_schema, verify_access

__all__ = [
    # vault
    "load_schema",
    "create_vault",
    "get_workspaces",
    "verify_access",
    # service account
    "create_service_account",
    # role
    "get_vault_roles",
    "assign_role",
    # connection
    "create_connection",
    # data plane
    "insert_records",
    "deidentify_text",
    "reidentify_text",
]
