"""Commands layer - CLI facade over workflows."""

from sky_cli.commands.configure import configure
from sky_cli.commands.connection import create_connection
from sky_cli.commands.detect import deidentify, reidentify
from sky_cli.commands.insert import insert
from sky_cli.commands.vault import create_vault

__all__ = [
    "configure",
    "create_vault",
    "create_connection",
    "insert",
    "deidentify",
    "reidentify",
]
