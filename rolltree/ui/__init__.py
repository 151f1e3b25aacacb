"""
User interface module for the roll tree.

Provides the interactive roll dialog the roll tree awaits during the
selection step.
"""

from .roll_dialog import PromptRollDialog, RollDialog

__all__ = [
    "PromptRollDialog",
    "RollDialog",
]
