import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, PrivateAttr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from varexport.constants import (
    DEFAULT_START_TIME_FORMAT,
    VAREXPORT_DEFAULT_LOGGER,
    VAREXPORT_DEFAULT_SETTINGS_FILE,
    VAREXPORT_SETTINGS_ENV_PREFIX,
    VAREXPORT_SETTINGS_ENV_VAR,
)
from varexport.exceptions import SettingsError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class VarExportSettings(BaseSettings):
    """
    varexport settings management using Pydantic.

    Settings are loaded with the following priority (highest to lowest):
    1. Overrides passed to `load` and values from the settings YAML file
    2. Environment variables (prefixed with VAREXPORT_SETTINGS_)
    3. Default values defined in the model

    Environment variable examples:
    - VAREXPORT_SETTINGS_INCLUDE_DOC=true
    - VAREXPORT_SETTINGS_IMPORTED_MODULES=["myapp.metrics"]
    - VAREXPORT_SETTINGS_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix=VAREXPORT_SETTINGS_ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    imported_modules: list[str] = Field(
        default_factory=list,
        description="Modules (dotted names or .py paths) imported so they can register variables",
    )
    include_doc: bool = Field(default=False, description="Include documentation comments in dumps")
    log_level: str = Field(default=VAREXPORT_DEFAULT_LOGGER["level"], description="Log file level")
    log_dir: str | None = Field(default=None, description="Directory for log files; file logging is off if unset")
    start_time_format: str = Field(
        default=DEFAULT_START_TIME_FORMAT, description="strftime format of the start-time variable"
    )

    _settings_file: str | None = PrivateAttr(default=None)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Normalize the log level name and reject unknown ones."""
        if isinstance(v, int):
            v = logging.getLevelName(v)
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("imported_modules", mode="before")
    @classmethod
    def validate_imported_modules(cls, v: Any) -> list[str]:
        """Accept a single module name as shorthand for a one-item list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    def resolve_relative_paths(self, base_dir: Path) -> "VarExportSettings":
        """Resolve relative file paths in the settings against ``base_dir``."""
        resolved: list[str] = []
        for module in self.imported_modules:
            path = Path(module)
            if module.endswith(".py") and not path.is_absolute():
                resolved.append(str(base_dir / path))
            else:
                resolved.append(module)
        self.imported_modules = resolved

        if self.log_dir and not Path(self.log_dir).is_absolute():
            self.log_dir = str(base_dir / self.log_dir)

        return self

    @classmethod
    def load(cls, settings_file: str | None = None, **overrides: Any) -> "VarExportSettings":
        """
        Load settings from a YAML file, with programmatic overrides.

        Settings file resolution priority (highest to lowest):
        1. Explicit settings_file parameter
        2. VAREXPORT_SETTINGS environment variable
        3. Default "varexport.yaml" in current directory

        A file named explicitly (by parameter or environment variable) must exist. The
        default file is optional: without it, defaults and overrides are used.

        Args:
            settings_file: Path to a settings YAML file.
            **overrides: Values taking precedence over the YAML file.

        Returns:
            VarExportSettings instance with relative paths resolved.

        Raises:
            SettingsError: If the settings file is missing, unreadable or malformed.
        """
        explicit_file = settings_file or os.getenv(VAREXPORT_SETTINGS_ENV_VAR)
        resolved_file = explicit_file or VAREXPORT_DEFAULT_SETTINGS_FILE
        settings_path = Path(resolved_file).resolve()

        if not settings_path.exists():
            if explicit_file:
                raise SettingsError(
                    f"Settings file not found: {resolved_file}\n"
                    f"Resolved to absolute path: {settings_path}\n"
                    f"Current working directory: {Path.cwd()}"
                )
            return cls._build(overrides)

        try:
            with settings_path.open() as f:
                yaml_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise SettingsError(f"Failed to load settings from {resolved_file}: {e}") from e

        if not isinstance(yaml_data, dict):
            raise SettingsError(
                f"Settings file must contain a YAML dictionary, got {type(yaml_data).__name__}"
            )

        instance = cls._build({**yaml_data, **overrides})
        instance._settings_file = str(settings_path)
        return instance.resolve_relative_paths(settings_path.parent)

    @classmethod
    def _build(cls, data: dict[str, Any]) -> "VarExportSettings":
        try:
            return cls(**data)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings: {e}") from e

    @property
    def settings_file(self) -> str | None:
        """Path of the file these settings were loaded from, if any."""
        return self._settings_file

    @property
    def as_dict(self) -> dict[str, Any]:
        """Get settings as a dictionary."""
        return self.model_dump()
