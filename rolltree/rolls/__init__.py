"""
Roll building: context resolution, modifiers, roll nodes and the roll tree.
"""

from .context import RollContext, Selector, Stat
from .formula import (
    ResolvedRoll,
    append_bonus,
    append_bonus_label,
    apply_bonus,
    find_variables,
    join_terms,
    remove_term,
    replace_variable,
    wrap_term,
)
from .modifier import CalculatedModifier, Modifier
from .roll_info import (
    DialogButton,
    EachRoll,
    RollOptions,
    RollPart,
    RollResult,
    RollSelection,
)
from .roll_node import RollNode
from .roll_tree import RollTree
from .serialization import (
    ContextDeserializer,
    ContextSerializer,
    context_from_dict,
    load_context,
)

__all__ = [
    # Import from context.py
    "RollContext",
    "Selector",
    "Stat",
    # Import from formula.py
    "ResolvedRoll",
    "append_bonus",
    "append_bonus_label",
    "apply_bonus",
    "find_variables",
    "join_terms",
    "remove_term",
    "replace_variable",
    "wrap_term",
    # Import from modifier.py
    "CalculatedModifier",
    "Modifier",
    # Import from roll_info.py
    "DialogButton",
    "EachRoll",
    "RollOptions",
    "RollPart",
    "RollResult",
    "RollSelection",
    # Import from roll_node.py
    "RollNode",
    # Import from roll_tree.py
    "RollTree",
    # Import from serialization.py
    "ContextDeserializer",
    "ContextSerializer",
    "context_from_dict",
    "load_context",
]
