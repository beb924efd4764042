# src/querystash/core/config.py
"""
Configuration schema and loading for querystash.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction and handed to the
build session at construction time; nothing reads the environment later.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from querystash.contracts.errors import ConfigurationError

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

ENVVAR_PREFIX = "QUERYSTASH"


class ProgramSettings(BaseModel):
    """Where the site lives and how it is being built."""

    model_config = {"frozen": True}

    directory: Path = Field(
        default=Path("."),
        description="Site root; .cache/ and public/ are resolved against it",
    )
    build_mode: Literal["build", "develop"] = Field(
        default="build",
        description="'build' halts on query errors, 'develop' only reports them",
    )

    @property
    def public_dir(self) -> Path:
        return self.directory / "public"

    @property
    def cache_dir(self) -> Path:
        return self.directory / ".cache"


class QuerySettings(BaseModel):
    """Query runner behaviour."""

    model_config = {"frozen": True}

    slow_query_warning_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Warn once if a query has not settled after this long",
    )
    page_build_on_data_changes: bool = Field(
        default=False,
        description="Emit PageDataSet with the result hash for every page query",
    )


class LoggingSettings(BaseModel):
    """Structured logging output."""

    model_config = {"frozen": True}

    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    json_output: bool = Field(default=False, description="Render JSON lines instead of console output")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"Invalid log level {v!r}: expected DEBUG, INFO, WARNING or ERROR")
        return level


class QuerystashSettings(BaseModel):
    """Top-level configuration."""

    model_config = {"frozen": True}

    program: ProgramSettings = Field(default_factory=ProgramSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values."""

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lowercase_keys(value: Any) -> Any:
    """Dynaconf uppercases keys; Pydantic fields are lowercase."""
    if isinstance(value, dict):
        return {str(k).lower(): _lowercase_keys(v) for k, v in value.items()}
    return value


def _load_raw(settings_files: list[str]) -> dict[str, Any]:
    from dynaconf import Dynaconf

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENVVAR_PREFIX,
        settings_files=settings_files,
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw = {k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    return _expand_env_vars(_lowercase_keys(raw))


def _build(raw: dict[str, Any]) -> QuerystashSettings:
    known = set(QuerystashSettings.model_fields)
    try:
        return QuerystashSettings(**{k: v for k, v in raw.items() if k in known})
    except ValueError as e:
        raise ConfigurationError(f"Invalid querystash settings: {e}") from e


def load_settings(config_path: Path) -> QuerystashSettings:
    """Load settings from YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (QUERYSTASH_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: QUERYSTASH_QUERY__PAGE_BUILD_ON_DATA_CHANGES
    for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated QuerystashSettings instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If configuration fails validation
    """
    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return _build(_load_raw([str(config_path)]))


def settings_from_env() -> QuerystashSettings:
    """Build settings from QUERYSTASH_* environment variables and defaults only."""
    return _build(_load_raw([]))
