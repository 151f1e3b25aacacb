"""
Core system module for the roll tree.

This module contains the shared building blocks used by the roll pipeline:
constants and enums, logging, error types, settings, localization and
console helpers.
"""

from .constants import (
    BONUS_OPERATORS,
    CANCEL_BUTTON,
    DEFAULT_BUTTON,
    VARIABLE_PATTERN,
    ModifierSource,
    RollMode,
)
from .error_handling import (
    ContentLoadError,
    CyclicFormulaError,
    RollTreeError,
    ensure_string,
    require_non_empty_string,
)
from .localization import Localization
from .logging import (
    get_logger,
    log_debug,
    log_error,
    log_info,
    setup_logging,
)
from .settings import RollSettings, SettingsStore
from .utils import Singleton, ccapture, cprint, crule

__all__ = [
    # Import from constants.py
    "BONUS_OPERATORS",
    "CANCEL_BUTTON",
    "DEFAULT_BUTTON",
    "VARIABLE_PATTERN",
    "ModifierSource",
    "RollMode",
    # Import from error_handling.py
    "ContentLoadError",
    "CyclicFormulaError",
    "RollTreeError",
    "ensure_string",
    "require_non_empty_string",
    # Import from localization.py
    "Localization",
    # Import from logging.py
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "setup_logging",
    # Import from settings.py
    "RollSettings",
    "SettingsStore",
    # Import from utils.py
    "Singleton",
    "ccapture",
    "cprint",
    "crule",
]
