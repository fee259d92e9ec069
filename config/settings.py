"""
config/settings.py — Canonical configuration contract for index-checkup.

Uses pydantic-settings to load, validate, and type-check the handful of
knobs a checkup run needs: which cluster to talk to, how patient to be,
and how many snapshot retrievals may run at once.

Two usage modes:
  Production / CLI:
      cfg = load_settings()              # reads from .env + os.environ
      cfg = load_settings("env/prod.env") # override env file path

  Tests (isolated — no env file, no os.environ bleed):
      cfg = Settings(ES_HOST="http://es:9200", FETCH_MAX_WORKERS=2)
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    # Only init kwargs feed the model. load_settings() is the explicit entry
    # point that reads the env file and os.environ and passes them as kwargs.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    # -------------------------------------------------------------------------
    # Cluster
    # -------------------------------------------------------------------------
    ES_HOST: str = "http://localhost:9200"

    # -------------------------------------------------------------------------
    # Snapshot retrieval
    # -------------------------------------------------------------------------
    HTTP_TIMEOUT_SECONDS: int = 30
    FETCH_MAX_WORKERS: int = 6
    # Read the snapshot from a YAML/JSON capture instead of the network.
    SNAPSHOT_FILE: Optional[str] = None

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("ES_HOST", "SNAPSHOT_FILE", mode="before")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        """Strip trailing whitespace that GNU make leaves after include .env."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, v: Optional[str]) -> str:
        if v is None:
            return "WARNING"
        return v.strip().upper() or "WARNING"

    @field_validator("ES_HOST")
    @classmethod
    def validate_host(cls, v: Optional[str]) -> str:
        if not v:
            raise ValueError("ES_HOST must be a non-empty URL")
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"ES_HOST must start with http:// or https://, got '{v}'"
            )
        return v.rstrip("/")

    @field_validator("HTTP_TIMEOUT_SECONDS", "FETCH_MAX_WORKERS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v


_COMMENT_RE = re.compile(r"\s+#.*$")


def read_env_file(env_file: str) -> dict[str, str]:
    """KEY=value pairs from a dotenv-style file; a missing file reads as empty.

    Accepts `export KEY=value`, drops trailing ` # comments` and one pair of
    matching quotes around the value.
    """
    values: dict[str, str] = {}
    try:
        with open(env_file, encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except FileNotFoundError:
        return values
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, _, value = line.partition("=")
        value = _COMMENT_RE.sub("", value.strip())
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if key.strip():
            values[key.strip()] = value
    return values


def load_settings(env_file: str = ".env") -> Settings:
    """Settings from `env_file` overlaid with os.environ (os.environ wins).

    Only known fields are passed through, as kwargs.

    Raises:
        ValidationError: if any value is invalid.
    """
    merged = {**read_env_file(env_file), **os.environ}
    known = {k: v for k, v in merged.items() if k in Settings.model_fields}
    return Settings(**known)
