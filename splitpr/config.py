import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from splitpr.patches.models import NULL_DEVICE
from splitpr.patches.naming import DEFAULT_EXTENSION, DEFAULT_MAX_ATTEMPTS

logger = logging.getLogger(__name__)

ENV_PREFIX = "SPLITPR_"
_ENV_FIELDS = ("output_dir", "extension", "max_attempts", "log_level")


class SplitSettings(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    output_dir: Path = Path(".")
    extension: str = DEFAULT_EXTENSION
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    null_device: str = NULL_DEVICE
    log_level: str = "INFO"

    @field_validator("extension")
    @classmethod
    def _extension_has_dot(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"extension must look like '.diff', got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level


def load_settings(env_file: Path | None = None, **overrides: Any) -> SplitSettings:
    """
    Build settings from SPLITPR_* environment variables (and a .env file),
    then apply explicit overrides. Overrides set to None are ignored so CLI
    options can be passed straight through.
    """
    load_dotenv(dotenv_path=env_file)

    values: dict[str, Any] = {}
    for field in _ENV_FIELDS:
        raw = os.getenv(f"{ENV_PREFIX}{field.upper()}")
        if raw:
            values[field] = raw

    values.update({k: v for k, v in overrides.items() if v is not None})
    settings = SplitSettings(**values)
    logger.debug("Loaded settings: %s", settings)
    return settings
