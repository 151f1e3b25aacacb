"""
Error types and validation helpers for the roll tree.

Expected conditions (a variable missing from the context, a cancelled
selection) are never raised; they are logged and modelled as explicit
outcomes. The exceptions below cover malformed input only.
"""

from typing import Any, Optional

from catchery import log_error, log_warning


class RollTreeError(Exception):
    """Base class for every error raised by the roll tree."""


class CyclicFormulaError(RollTreeError):
    """Raised when a formula refers back to itself through its sub-formulas."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__("Cyclic formula reference: " + " -> ".join(self.chain))


class ContentLoadError(RollTreeError):
    """Raised when a JSON content file (context, settings, strings) cannot be loaded."""


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================


def require_non_empty_string(
    value: Any, param_name: str, context: Optional[dict[str, Any]] = None
) -> str:
    """
    Validates that a value is a non-empty string.

    Args:
        value: The value to validate
        param_name: Human-readable parameter name for error messages
        context: Additional context for logging

    Returns:
        str: The validated string value

    Raises:
        ValueError: If validation fails
    """
    if not value or not isinstance(value, str):
        log_error(
            f"{param_name} must be a non-empty string, got: {value!r}",
            {
                **(context or {}),
                "param_name": param_name,
                "type": type(value).__name__,
            },
        )
        raise ValueError(f"Invalid {param_name}: {value!r}")
    return value


def ensure_string(
    value: Any,
    param_name: str,
    default: str = "",
    context: Optional[dict[str, Any]] = None,
) -> str:
    """
    Ensures a value is a string, converting or using default if needed.
    Logs a warning for non-string types other than numbers.

    Args:
        value: The value to ensure is a string
        param_name: Human-readable parameter name for error messages
        default: Default value if the value is None
        context: Additional context for logging

    Returns:
        str: The string value or default
    """
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        log_warning(
            f"{param_name} should be string, got: {type(value).__name__}, converting",
            {
                **(context or {}),
                "param_name": param_name,
                "value": value,
            },
        )
    return str(value)
