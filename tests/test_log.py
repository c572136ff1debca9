"""Tests for lib/log.py - click logging handler."""

import logging

from sky_cli.lib import log


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("sky_cli.test", level, __file__, 1, message, None, None)


class TestLevelPrefixFormatter:
    def test_prefixes(self) -> None:
        formatter = log.LevelPrefixFormatter("%(message)s")
        assert formatter.format(_record(logging.INFO, "Creating vault")) == "Creating vault"
        assert formatter.format(_record(logging.WARNING, "slow")) == "Warning: slow"
        assert formatter.format(_record(logging.ERROR, "bad")) == "Error: bad"


class TestSetup:
    def test_idempotent(self) -> None:
        log.setup()
        log.setup(verbose=True)
        logger = logging.getLogger(log.ROOT_LOGGER)
        handlers = [h for h in logger.handlers if isinstance(h, log.ClickHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_writes_to_stderr(self, capsys) -> None:
        log.setup()
        logging.getLogger("sky_cli.workflows").info("Creating service account...")
        captured = capsys.readouterr()
        assert "Creating service account..." in captured.err
        assert captured.out == ""
