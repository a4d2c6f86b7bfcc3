"""Configuration for the task API, read from environment variables."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ConfigError(ValueError):
    """Raised when one or more settings are missing or invalid."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("config errors: " + "; ".join(self.errors))


@dataclass(frozen=True)
class Config:
    """Validated settings for the task API."""

    port: int
    database_url: str
    log_level: str


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _parse_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw == "":
        return default
    text = raw.strip()
    if _INTEGER.fullmatch(text) is None:
        raise ValueError(f"{key} must be an integer, got {_quote(raw)}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"{key} must be an integer, got {_quote(raw)}")
    return value


def _optional_string(environ: Mapping[str, str], key: str, default: str) -> str:
    value = environ.get(key)
    if value is not None and value.strip():
        return value.strip()
    return default


def load(environ: Mapping[str, str] | None = None) -> Config:
    """Read and validate settings, reporting every problem at once."""
    if environ is None:
        environ = os.environ
    errors: list[str] = []

    port = 0
    try:
        port = _parse_int(environ, "PORT", 8080)
    except ValueError as err:
        errors.append(str(err))

    database_url = environ.get("DATABASE_URL")
    if database_url is None or not database_url.strip():
        errors.append("DATABASE_URL is required")

    log_level = _optional_string(environ, "LOG_LEVEL", "info")

    if errors:
        raise ConfigError(errors)

    return Config(port=port, database_url=database_url.strip(), log_level=log_level)