"""
Reconciliation Settings
=======================

Matching tolerances and report thresholds.

Defaults are the values the reconciliation rules are calibrated for.
Overrides are read from RECON_* environment variables and cached in
Lambda memory between invocations.
"""

import os
from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Any

from aws_lambda_powertools import Logger

logger = Logger()

ENV_PREFIX = "RECON_"


class SettingsError(ValueError):
    """Raised when an environment override cannot be parsed."""


@dataclass(frozen=True)
class ReconciliationSettings:
    """Tunable constants used by the matching and report stages."""

    # Matching
    amount_tolerance: float = 0.01
    typo_max_distance: int = 2
    keying_max_distance: int = 1

    # Error classification
    rounding_threshold: float = 1.0
    keying_amounts: tuple[float, ...] = (1000.0, 100.0)
    transposition_divisor: int = 9

    # Narrative report
    high_match_rate: float = 95.0
    low_match_rate: float = 80.0
    missing_documentation_threshold: int = 5


def _coerce(name: str, raw: str, default: Any) -> Any:
    """Convert a raw environment string to the type of the default value."""
    try:
        if isinstance(default, tuple):
            return tuple(float(part) for part in raw.split(",") if part.strip())
        if isinstance(default, int):
            return int(raw)
        return float(raw)
    except ValueError as e:
        raise SettingsError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e


@lru_cache(maxsize=1)
def get_settings() -> ReconciliationSettings:
    """
    Load settings, applying any RECON_* environment overrides.

    Cached using lru_cache so the environment is read once per
    Lambda execution context.

    Returns:
        ReconciliationSettings instance

    Raises:
        SettingsError: If an override is not a valid number
    """
    defaults = ReconciliationSettings()
    overrides = {}

    for f in fields(ReconciliationSettings):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None or not raw.strip():
            continue
        overrides[f.name] = _coerce(f.name, raw.strip(), getattr(defaults, f.name))

    if overrides:
        logger.info("Applied reconciliation setting overrides", extra={"overrides": overrides})
        return ReconciliationSettings(**overrides)

    return defaults


def clear_settings_cache():
    """
    Clear the settings cache.

    Call this after changing RECON_* variables to force a reload.
    """
    get_settings.cache_clear()
    logger.info("Settings cache cleared")
