"""
varexport Logging Module

This module provides the logging setup shared by the whole package. Modules log
through ``logging.getLogger(__name__)``; this singleton owns the handlers attached
to the ``varexport`` root logger.

Key Features:
- Singleton pattern for consistent handler configuration
- Console handler for errors, always active
- Optional timestamped log file, configured at runtime
- Microsecond timestamps
- Masking of sensitive values (tokens, passwords) that leak into log messages

Usage:
    from varexport.logger import logger

    logger.configure(log_dir="/var/log/myapp", log_level="DEBUG")
    logger.debug("This will go to the log file")
"""

import copy
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import ClassVar

from varexport.constants import PROTECTED_KEYWORDS, VAREXPORT_DEFAULT_LOGGER

REDACTED = "***REDACTED***"

ROOT_LOGGER_NAME = "varexport"


def _get_sanitize_pattern() -> re.Pattern:
    """Get or build the compiled regex pattern for sensitive data detection."""
    if not hasattr(_get_sanitize_pattern, "_pattern"):
        keywords = "|".join(re.escape(kw) for kw in PROTECTED_KEYWORDS)
        _get_sanitize_pattern._pattern = re.compile(  # noqa: SLF001
            rf"({keywords})(\s*[:=]\s*)(['\"]?)(\S+?)(\3)(?=\s|,|}}|\]|$)", re.IGNORECASE
        )
    return _get_sanitize_pattern._pattern  # noqa: SLF001


def sanitize_log_message(message: str) -> str:
    """Sanitize sensitive data from a log message.

    Args:
        message: The log message to sanitize.

    Returns:
        Message with sensitive values replaced by REDACTED.
    """
    if not isinstance(message, str):
        return message
    return _get_sanitize_pattern().sub(rf"\1\2\3{REDACTED}\5", message)


class MicrosecondFormatter(logging.Formatter):
    """Formatter including microseconds in timestamps, with sensitive values masked."""

    DEFAULT_FORMAT: ClassVar[str] = "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        super().__init__(fmt or self.DEFAULT_FORMAT, datefmt)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with microseconds support."""
        ct = datetime.fromtimestamp(record.created)  # noqa: DTZ006
        return ct.strftime(datefmt) if datefmt else ct.isoformat()

    def format(self, record: logging.LogRecord) -> str:
        # Copy so other handlers still see the untouched record
        record_copy = copy.copy(record)
        record_copy.msg = sanitize_log_message(str(record_copy.msg))
        if record_copy.args:
            record_copy.args = tuple(
                sanitize_log_message(arg) if isinstance(arg, str) else arg for arg in record_copy.args
            )
        return super().format(record_copy)


class VarExportLogger:
    """
    Singleton owner of the handlers attached to the ``varexport`` root logger.

    Console output (stderr) only carries ERROR and above. Everything else goes to
    an optional log file enabled with `configure`.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return
        self._initialized = True

        self._logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR)
        console_handler.setFormatter(MicrosecondFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        self._logger.addHandler(console_handler)

        self._file_handler: logging.FileHandler | None = None
        self._log_file: Path | None = None

    @property
    def log_file(self) -> Path | None:
        """Path of the active log file, if file logging is enabled."""
        return self._log_file

    def configure(
        self,
        log_dir: str | Path | None = None,
        log_level: str = VAREXPORT_DEFAULT_LOGGER["level"],
        file_prefix: str = "varexport",
    ) -> Path:
        """
        Enable file logging into a fresh timestamped file.

        Any previously configured file handler is closed first.

        Args:
            log_dir: Directory to store log files. If None, uses the default.
            log_level: Logging level name (e.g., "DEBUG", "INFO").
            file_prefix: Leading part of the log file name.

        Returns:
            Path of the newly created log file.
        """
        self.clear()

        if not log_dir:
            log_dir = VAREXPORT_DEFAULT_LOGGER["directory"]

        level = getattr(logging, log_level.upper(), logging.INFO)
        self._logger.setLevel(level)

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = log_path / f"{file_prefix}_{timestamp}.log"

        self._file_handler = logging.FileHandler(filepath, encoding="utf-8")
        self._file_handler.setLevel(level)
        self._file_handler.setFormatter(MicrosecondFormatter())
        self._logger.addHandler(self._file_handler)
        self._log_file = filepath

        self.debug("File logging enabled at level %s", logging.getLevelName(level))
        return filepath

    def clear(self) -> None:
        """Stop file logging, if enabled."""
        if self._file_handler:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        self._log_file = None

    def debug(self, message: str, *args: object, **kwargs) -> None:
        """Log a debug message."""
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: object, **kwargs) -> None:
        """Log an info message."""
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: object, **kwargs) -> None:
        """Log a warning message."""
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: object, **kwargs) -> None:
        """Log an error message."""
        self._logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args: object, **kwargs) -> None:
        """Log an exception with traceback."""
        self._logger.exception(message, *args, **kwargs)


logger = VarExportLogger()
