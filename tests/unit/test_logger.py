import logging

import pytest

from varexport.logger import REDACTED, VarExportLogger, logger, sanitize_log_message


@pytest.fixture
def restore_logger():
    yield logger
    logger.clear()
    logging.getLogger("varexport").setLevel(logging.DEBUG)


class TestSanitize:
    @pytest.mark.parametrize(
        "message",
        ["password=hunter2", "token: abc123", "api_key='s3cr3t'"],
    )
    def test_sensitive_values_masked(self, message):
        sanitized = sanitize_log_message(message)
        assert REDACTED in sanitized
        for secret in ("hunter2", "abc123", "s3cr3t"):
            assert secret not in sanitized

    def test_plain_message_untouched(self):
        assert sanitize_log_message("Added variable queueDepth") == "Added variable queueDepth"

    def test_non_string_passthrough(self):
        assert sanitize_log_message(42) == 42


class TestVarExportLogger:
    def test_singleton(self):
        assert VarExportLogger() is logger

    def test_configure_writes_file(self, tmp_path, restore_logger):
        log_file = logger.configure(log_dir=tmp_path, log_level="DEBUG")
        assert logger.log_file == log_file
        assert log_file.parent == tmp_path

        logging.getLogger("varexport.exporter").warning("password=hunter2 leaked")
        logger.clear()

        content = log_file.read_text()
        assert "leaked" in content
        assert "hunter2" not in content
        assert logger.log_file is None

    def test_reconfigure_replaces_handler(self, tmp_path, restore_logger):
        logger.configure(log_dir=tmp_path / "one")
        second = logger.configure(log_dir=tmp_path / "two")
        assert logger.log_file == second
        handlers = [h for h in logging.getLogger("varexport").handlers if isinstance(h, logging.FileHandler)]
        assert len(handlers) == 1
