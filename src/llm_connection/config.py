import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from llm_connection.exceptions import LLMConnectionError
from llm_connection.log_config import setup_logging
from llm_connection.types import NormalizeOptions, ValidateOptions

_ENV_REF_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ConnectionSettings(BaseSettings):
    """Application defaults for normalization and validation.

    Read from YAML files and ``LLM_CONNECTION_*`` environment variables.
    The normalizer and validator never read these themselves; callers
    turn them into option objects.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_CONNECTION_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    strict: bool = Field(
        default=False,
        description="Report unknown providers and unknown params as errors instead of warnings",
    )
    verbose: bool = Field(default=False, description="Collect a change log during normalization")
    log_level: str = Field(default="WARNING", description="Level for the llm_connection logger")

    def validate_options(self) -> ValidateOptions:
        return ValidateOptions(strict=self.strict)

    def normalize_options(self) -> NormalizeOptions:
        return NormalizeOptions(verbose=self.verbose)

    def configure_logging(self) -> None:
        setup_logging(self.log_level)


def load_config(config_path: str | Path | None = None) -> ConnectionSettings:
    """Build settings from an optional YAML file plus ``LLM_CONNECTION_*`` variables.

    The file holds top-level ``strict``, ``verbose`` and ``log_level`` keys.
    A missing or empty file means defaults. Values in the file may reference
    environment variables as ``${NAME}``.

    Raises:
        LLMConnectionError: If the file is not a YAML mapping.

    """
    overrides: dict[str, Any] = {}

    path = Path(config_path) if config_path else None
    if path is not None and path.exists():
        with path.open(encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is not None and not isinstance(loaded, dict):
            msg = f"Connection settings in {path} must be a mapping, got {type(loaded).__name__}"
            raise LLMConnectionError(msg)
        if loaded:
            overrides = _resolve_env_vars(loaded)

    return ConnectionSettings(**overrides)


def _resolve_env_vars(value: Any) -> Any:
    """Substitute ``${NAME}`` references in settings values; unset names stay as written."""
    if isinstance(value, dict):
        return {key: _resolve_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    if isinstance(value, str):
        return _ENV_REF_RE.sub(lambda match: os.getenv(match.group(1), match.group(0)), value)
    return value
