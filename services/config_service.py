"""
Configuration service for runtime system settings.
"""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DetentionConfig:
    urgent_days: int = 2
    warning_days: int = 5


_DETENTION_CONFIG: Optional[DetentionConfig] = None
_DEFAULT_PLAN_PKGS = 16
_DEFAULT_PLAN_WEIGHT = 28.8
_DEFAULT_TALLY_PAGE_SIZE = 15


def _env_number(name: str, fallback, cast=int):
    env_value = os.getenv(name)
    if env_value:
        try:
            return cast(env_value)
        except ValueError:
            return fallback
    return fallback


def get_detention_config() -> DetentionConfig:
    """Return the DET alert thresholds (days before expiry)."""
    if _DETENTION_CONFIG is not None:
        return _DETENTION_CONFIG

    return DetentionConfig(
        urgent_days=_env_number("DET_URGENT_DAYS", 2),
        warning_days=_env_number("DET_WARNING_DAYS", 5),
    )


def set_detention_config(urgent_days: int, warning_days: int) -> DetentionConfig:
    """Override the DET thresholds in memory."""
    global _DETENTION_CONFIG
    _DETENTION_CONFIG = DetentionConfig(urgent_days=int(urgent_days), warning_days=int(warning_days))
    return _DETENTION_CONFIG


def reset_detention_config() -> None:
    global _DETENTION_CONFIG
    _DETENTION_CONFIG = None


def get_import_defaults() -> tuple[int, float]:
    """Placeholder plan size (pkgs, tons) for rows that carry none."""
    return (
        _env_number("IMPORT_DEFAULT_PKGS", _DEFAULT_PLAN_PKGS),
        _env_number("IMPORT_DEFAULT_WEIGHT", _DEFAULT_PLAN_WEIGHT, float),
    )


def get_tally_page_size() -> int:
    size = _env_number("TALLY_PAGE_SIZE", _DEFAULT_TALLY_PAGE_SIZE)
    return size if size > 0 else _DEFAULT_TALLY_PAGE_SIZE
