"""
Ledger Reconciliation - Common Utilities
========================================

Shared utilities for all Lambda functions.
"""

from .settings import (
    ReconciliationSettings,
    SettingsError,
    get_settings,
    clear_settings_cache,
)

__all__ = [
    "ReconciliationSettings",
    "SettingsError",
    "get_settings",
    "clear_settings_cache",
]
