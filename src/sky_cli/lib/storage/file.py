"""Local file storage for CLI configuration."""

import os
from pathlib import Path

# Config holds bearer tokens, keep it owner-only
PRIVATE_MODE = 0o600


def read(path: Path) -> str | None:
    """Read file contents, or None if doesn't exist."""
    if not path.exists():
        return None
    return path.read_text()


def write(path: Path, data: str, private: bool = False) -> None:
    """Write data to file, creating parent dirs if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data)
    if private:
        os.chmod(path, PRIVATE_MODE)
