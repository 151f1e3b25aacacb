"""
Localization service for the labels the roll tree writes into display
expressions.
"""

from pathlib import Path
from typing import Any

from catchery import log_warning

from rolltree.core.constants import ADDITIONAL_BONUS_KEY, PART_INDEX_KEY
from rolltree.core.content import _load_json_file

DEFAULT_STRINGS: dict[str, str] = {
    ADDITIONAL_BONUS_KEY: "{bonus}[Additional Bonus]",
    PART_INDEX_KEY: "{partIndex}/{partCount}",
}


class Localization:
    """String table with named-parameter substitution."""

    def __init__(self, strings: dict[str, str] | None = None) -> None:
        self.strings: dict[str, str] = {**DEFAULT_STRINGS, **(strings or {})}

    @classmethod
    def from_file(cls, path: Path) -> "Localization":
        """Builds a string table from a flat JSON object of key -> template."""

        def _load_strings(data: dict[str, Any]) -> dict[str, str]:
            return {str(key): str(value) for key, value in data.items()}

        return cls(_load_json_file(path, _load_strings, "localized strings"))

    def format(self, key: str, **params: Any) -> str:
        """
        Formats the string registered under `key`.

        Args:
            key (str): The string key.
            **params: Named substitution parameters, e.g. `bonus=...`.

        Returns:
            str: The formatted string, or the key itself when it is unknown.

        """
        template = self.strings.get(key)
        if template is None:
            log_warning(f"Missing localized string '{key}'", {"key": key})
            return key
        try:
            return template.format(**params)
        except (KeyError, IndexError) as e:
            log_warning(
                f"Cannot format localized string '{key}': missing {e}",
                {"key": key, "params": params},
            )
            return template
