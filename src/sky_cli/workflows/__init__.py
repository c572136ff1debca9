"""Workflows layer - orchestrate operations into user intents."""

from sky_cli.workflows.connection import create_connections, load_connections, validate_connections
from sky_cli.workflows.data import VaultTarget, connect, deidentify, insert, reidentify
from sky_cli.workflows.vault import provision_vault

__all__ = [
    "provision_vault",
    "load_connections",
    "validate_connections",
    "create_connections",
    "VaultTarget",
    "connect",
    "insert",
    "deidentify",
    "reidentify",
]
