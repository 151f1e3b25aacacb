"""
Constants and enumerations for the roll tree.

Defines the variable token pattern, the operators recognised when appending
a free-form bonus, the roll visibility modes, modifier sources and the
localization keys used when building display expressions.
"""

import re
from enum import Enum

# Matches a variable token such as '@abilities.str.mod' or '@item-bonus_2'.
VARIABLE_PATTERN = re.compile(r"@([a-zA-Z.0-9_\-]+)")

# A bonus that starts with one of these already carries its own separator.
BONUS_OPERATORS = ("+", "-", "*", "/")

# Separator used when joining terms and sections.
TERM_SEPARATOR = " + "

# Button id reported when the selection step was cancelled.
CANCEL_BUTTON = "cancel"

# Button id used when no buttons are configured and the UI is skipped.
DEFAULT_BUTTON = "roll"

# Localization keys.
ADDITIONAL_BONUS_KEY = "ROLLTREE.Rolls.AdditionalBonus"
PART_INDEX_KEY = "ROLLTREE.Rolls.PartIndex"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class RollMode(NiceEnum):
    """Defines who gets to see the outcome of a roll."""

    PUBLIC = "publicroll"
    GM = "gmroll"
    BLIND = "blindroll"
    SELF = "selfroll"

    @property
    def display_name(self) -> str:
        return {
            RollMode.PUBLIC: "Public Roll",
            RollMode.GM: "Private GM Roll",
            RollMode.BLIND: "Blind GM Roll",
            RollMode.SELF: "Self Roll",
        }.get(self, self.name.title())

    @property
    def color(self) -> str:
        """Returns the color string associated with this roll mode."""
        return {
            RollMode.PUBLIC: "bold green",
            RollMode.GM: "bold yellow",
            RollMode.BLIND: "bold red",
            RollMode.SELF: "bold blue",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"


class ModifierSource(NiceEnum):
    """Defines how a modifier ended up in a roll tree."""

    REFERENCE = "REFERENCE"
    CALCULATED = "CALCULATED"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this modifier source."""
        return {
            ModifierSource.REFERENCE: "🎲",
            ModifierSource.CALCULATED: "🧮",
        }.get(self, "❔")
