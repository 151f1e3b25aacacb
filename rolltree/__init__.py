"""
Formula roll-tree engine.

Turns a dice formula with variable references and optional modifiers into
the expressions handed to a dice engine: a machine-evaluable expression and
a parallel labelled one for display.
"""

from .core.constants import ModifierSource, RollMode
from .core.localization import Localization
from .core.settings import RollSettings, SettingsStore
from .rolls import (
    CalculatedModifier,
    Modifier,
    ResolvedRoll,
    RollContext,
    RollNode,
    RollOptions,
    RollPart,
    RollResult,
    RollSelection,
    RollTree,
    Selector,
    Stat,
    context_from_dict,
    load_context,
)
from .ui import PromptRollDialog, RollDialog

__version__ = "0.1.0"

__all__ = [
    "CalculatedModifier",
    "Localization",
    "Modifier",
    "ModifierSource",
    "PromptRollDialog",
    "ResolvedRoll",
    "RollContext",
    "RollDialog",
    "RollMode",
    "RollNode",
    "RollOptions",
    "RollPart",
    "RollResult",
    "RollSelection",
    "RollSettings",
    "RollTree",
    "Selector",
    "SettingsStore",
    "Stat",
    "context_from_dict",
    "load_context",
]
