"""
Runtime settings.

Values come from the environment (GWS_FILE, GWS_POLL_INTERVAL, GWS_LOG_LEVEL)
and are overridden by command-line flags. Validation failures raise
pydantic.ValidationError; the CLI reports them and exits.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_FILE = Path.home() / ".gws" / "todo.md"

_ENV_KEYS = {
    "file": "GWS_FILE",
    "poll_interval": "GWS_POLL_INTERVAL",
    "log_level": "GWS_LOG_LEVEL",
}


class Settings(BaseModel):
    file: Path = DEFAULT_FILE
    poll_interval: float = Field(0.5, gt=0)
    log_level: str = "WARNING"

    @field_validator("file")
    @classmethod
    def _expand_file(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
    """
    Build Settings from environment variables plus explicit overrides.

    Overrides whose value is None are ignored, so argparse defaults of None
    fall through to the environment.
    """
    env = os.environ if environ is None else environ
    values = {}
    for field_name, env_key in _ENV_KEYS.items():
        raw = env.get(env_key, "")
        if raw:
            values[field_name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
