"""Configuration loader for the record normalizer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .rules import DEFAULT_MAX_ERRORS


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer") from exc


@dataclass(frozen=True)
class AppConfig:
    max_errors: int = DEFAULT_MAX_ERRORS
    log_level: str = "INFO"


def load_config() -> AppConfig:
    max_errors = _get_int("NORMALIZER_MAX_ERRORS", DEFAULT_MAX_ERRORS)
    if max_errors < 1:
        raise ValueError("Environment variable NORMALIZER_MAX_ERRORS must be at least 1")

    log_level = _get_env("NORMALIZER_LOG_LEVEL", "INFO").upper()

    return AppConfig(max_errors=max_errors, log_level=log_level)
