"""
Settings store for the roll tree.

Supplies the default roll visibility mode when the interactive step is
skipped, and the switches that shape final assembly.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from rolltree.core.constants import RollMode
from rolltree.core.content import _load_json_file
from rolltree.core.utils import Singleton


class RollSettings(BaseModel):
    """User-facing settings for roll building."""

    roll_mode: RollMode = Field(
        default=RollMode.PUBLIC,
        description="Visibility mode used when the roll dialog is skipped.",
    )
    debug: bool = Field(
        default=False,
        description="Emit debug telemetry while building rolls.",
    )
    bonus_to_all_parts: bool = Field(
        default=True,
        description="Append the free-form bonus to every enabled part, not just the primary one.",
    )
    locale_file: Path | None = Field(
        default=None,
        description="Optional JSON file overriding the built-in strings.",
    )


class SettingsStore(metaclass=Singleton):
    """
    Process-wide settings registry.

    The first construction may load the settings from disk; later calls return
    the same instance regardless of their arguments. Use `reload` to replace
    the settings afterwards.
    """

    settings: RollSettings

    def __init__(self, settings_file: Path | None = None) -> None:
        """
        Initialize the SettingsStore.

        Args:
            settings_file (Path | None):
                Optional JSON file holding a RollSettings object.

        """
        self.settings = RollSettings()
        if settings_file:
            self.reload(settings_file)

    def reload(self, settings_file: Path) -> None:
        """Replaces the current settings with the content of `settings_file`."""
        self.settings = _load_json_file(
            settings_file, RollSettings.model_validate, "roll settings"
        )

    def get(self, key: str) -> Any:
        """
        Returns the value of a setting.

        Raises:
            KeyError: If the setting does not exist.

        """
        if key not in RollSettings.model_fields:
            raise KeyError(f"Unknown setting: {key}")
        return getattr(self.settings, key)

    def set(self, key: str, value: Any) -> None:
        """Validates and stores a new value for a setting."""
        if key not in RollSettings.model_fields:
            raise KeyError(f"Unknown setting: {key}")
        self.settings = RollSettings.model_validate(
            {**self.settings.model_dump(), key: value}
        )
