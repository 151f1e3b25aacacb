"""
Modifier models for the roll tree.

A modifier is a named, independently enabled contribution to a roll. It is
either attached to a node because the node's formula came from it (a
reference modifier), or reported by a node because its value was already
folded into a stat (a calculated modifier).
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from rolltree.core.constants import ModifierSource
from rolltree.core.error_handling import ensure_string, require_non_empty_string


class Modifier(BaseModel):
    """
    A named bonus whose value is a number or a formula.

    The `enabled` flag is mutable: the selection dialog toggles it and the
    roll tree copies it onto the node that carries the modifier.
    """

    name: str = Field(
        description="Display name of the modifier, also used for deduplication.",
    )
    modifier: str = Field(
        description="The value of the modifier, e.g. '2', '1d6' or '@abilities.str.mod'.",
    )
    enabled: bool = Field(
        default=True,
        description="Whether the modifier contributes to the roll.",
    )
    source: ModifierSource = Field(
        default=ModifierSource.REFERENCE,
        description="How the modifier entered the roll tree.",
    )
    notes: str = Field(
        default="",
        description="Optional free text shown next to the modifier.",
    )

    @field_validator("modifier", mode="before")
    @classmethod
    def _coerce_modifier(cls, value: Any) -> str:
        return ensure_string(value, "modifier").strip()

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        require_non_empty_string(self.name, "name", {"modifier": self.modifier})
        if not self.modifier:
            raise ValueError(f"Modifier '{self.name}' has an empty value")

    def __repr__(self) -> str:
        state = "on" if self.enabled else "off"
        return f"Modifier({self.name!r}, {self.modifier!r}, {state})"


class CalculatedModifier(BaseModel):
    """A bonus already included in a stat's value, reported for display."""

    bonus: Modifier = Field(
        description="The wrapped modifier.",
    )

    def model_post_init(self, _: Any) -> None:
        self.bonus.source = ModifierSource.CALCULATED

    @property
    def name(self) -> str:
        return self.bonus.name
