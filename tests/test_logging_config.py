"""
Tests for logging setup and secret masking.
"""

import logging
from pathlib import Path

from rockethandler.logging_config import MASK, RedactingFilter, get_logger, mask_secrets, setup_logging


class TestRedactingFilter:
    """Tests for RedactingFilter."""

    def _record(self, msg: str, *args: object) -> logging.LogRecord:
        return logging.LogRecord("rockethandler.test", logging.ERROR, __file__, 1, msg, args, None)

    def test_masks_formatted_arguments(self) -> None:
        """Test that secrets inside %-style arguments are masked."""
        record = self._record("Login failed: %s", '{"authToken": "tok-abc123"}')

        assert RedactingFilter(["tok-abc123"]).filter(record) is True
        assert record.getMessage() == f'Login failed: {{"authToken": "{MASK}"}}'

    def test_short_values_ignored(self) -> None:
        """Test that tiny values are not masked everywhere."""
        record = self._record("user pw logged in")

        RedactingFilter(["pw", ""]).filter(record)

        assert record.getMessage() == "user pw logged in"

    def test_no_secrets_leaves_record(self) -> None:
        """Test that records pass untouched with nothing to mask."""
        record = self._record("value %d", 42)

        RedactingFilter().filter(record)

        assert record.args == (42,)


class TestSetupLogging:
    """Tests for setup_logging and mask_secrets."""

    def test_file_output_masks_secrets(self, tmp_path: Path) -> None:
        """Test that registered secrets never reach the log file."""
        log_file = tmp_path / "handler.log"
        setup_logging(level="INFO", log_file=str(log_file))
        mask_secrets("s3cret-password")

        get_logger("rockethandler.test").error("password was %s", "s3cret-password")

        content = log_file.read_text()
        assert "s3cret-password" not in content
        assert f"password was {MASK}" in content
        assert "rocket-handler rockethandler.test:" in content

    def test_level_applied(self) -> None:
        """Test that the level is set on the package logger."""
        setup_logging(level="warning")

        assert logging.getLogger("rockethandler").level == logging.WARNING
        assert logging.getLogger("rockethandler").propagate is False

    def test_get_logger_prefix(self) -> None:
        """Test that module names map under the package logger once."""
        assert get_logger("rockethandler.client").name == "rockethandler.client"
        assert get_logger("client").name == "rockethandler.client"
