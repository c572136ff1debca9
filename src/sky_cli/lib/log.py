"""Logging setup.

Modules log through `logging.getLogger(__name__)`. At CLI entry the
`sky_cli` logger gets a handler that writes through click, so progress goes
to stderr and stdout stays clean for `--output json`.
"""

import logging

import click

ROOT_LOGGER = "sky_cli"

_COLORS = {
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ClickHandler(logging.Handler):
    """Emit records with click.secho, coloured by level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            click.secho(message, fg=_COLORS.get(record.levelno), err=True)
        except Exception:
            self.handleError(record)


class LevelPrefixFormatter(logging.Formatter):
    """`Warning: ...` / `Error: ...` prefixes, bare message for INFO and DEBUG."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"Error: {message}"
        if record.levelno >= logging.WARNING:
            return f"Warning: {message}"
        return message


def setup(verbose: bool = False) -> None:
    """Attach the click handler to the package logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        if isinstance(handler, ClickHandler):
            logger.removeHandler(handler)

    handler = ClickHandler()
    handler.setFormatter(LevelPrefixFormatter("%(message)s"))
    logger.addHandler(handler)
