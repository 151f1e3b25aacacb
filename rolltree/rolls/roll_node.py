"""
Roll node module.

A roll node is one formula fragment of a roll tree. Populating a node
discovers the variables of its fragment and registers a child node for
every variable that expands into another formula; resolving it splices the
children's expressions back into the fragment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from catchery import log_warning

from rolltree.core.error_handling import CyclicFormulaError
from rolltree.core.logging import log_debug

from .context import Stat
from .formula import (
    ResolvedRoll,
    find_variables,
    format_number,
    join_terms,
    remove_term,
    replace_variable,
    wrap_term,
)
from .modifier import CalculatedModifier, Modifier

if TYPE_CHECKING:
    from .roll_tree import RollTree


def modifier_key(modifier: Modifier) -> str:
    """Node map key of a modifier: its name and its value."""
    return f"{modifier.name}:{modifier.modifier}"


class RollNode:
    """
    A formula fragment of a roll tree.

    Nodes never hold each other directly: `child_nodes` maps a slot (a
    variable token, or a modifier name for stat nodes) to the key of the
    child in the owning tree's node map. Plain fragments are keyed by their
    text, stat nodes by their variable path and modifier nodes by
    `modifier_key`, so two modifiers sharing a value stay separate nodes.
    """

    def __init__(
        self,
        tree: RollTree,
        formula: str,
        reference_modifier: Modifier | None = None,
        stat: Stat | None = None,
    ) -> None:
        """
        Args:
            tree (RollTree): The tree that owns this node.
            formula (str): The fragment text; for stat nodes, the variable path.
            reference_modifier (Modifier | None): The modifier this fragment came from.
            stat (Stat | None): The stat a variable node stands for.

        """
        self.tree = tree
        self.formula = formula
        self.reference_modifier = reference_modifier
        self.stat = stat
        self.calculated_mods: list[CalculatedModifier] = []
        self.is_enabled = reference_modifier.enabled if reference_modifier else True
        self.child_nodes: dict[str, str] = {}
        self.resolved_value: ResolvedRoll | None = None
        self.is_populating = False

    @property
    def is_variable(self) -> bool:
        return self.stat is not None

    @property
    def children(self) -> list[RollNode]:
        return [self.tree.nodes[key] for key in self.child_nodes.values()]

    # ==========================================================================
    # POPULATION
    # ==========================================================================

    def populate(self) -> None:
        """
        Builds the sub-tree below this node.

        Raises:
            CyclicFormulaError: If a variable leads back to a fragment that is
                still being populated.

        """
        self.is_populating = True
        try:
            if self.stat is not None:
                self._populate_stat(self.stat)
            else:
                self._populate_fragment()
        finally:
            self.is_populating = False

    def _populate_stat(self, stat: Stat) -> None:
        self.calculated_mods = list(stat.calculated_mods)
        for mod in stat.rolled_mods:
            self.child_nodes[mod.name] = self._add_child(
                modifier_key(mod), mod.modifier, reference_modifier=mod
            )

    def _populate_fragment(self) -> None:
        context = self.tree.context
        for token in find_variables(self.formula):
            value = context.resolve(token)
            if isinstance(value, Modifier):
                key = self._add_child(
                    modifier_key(value), value.modifier, reference_modifier=value
                )
            elif isinstance(value, Stat):
                key = self._add_child(token[1:], token[1:], stat=value)
            elif isinstance(value, str) and value.strip():
                key = self._add_child(value.strip(), value.strip())
            else:
                # Numbers are read at resolution time; anything else becomes 0 there.
                continue
            self.child_nodes[token] = key

    def _add_child(
        self,
        key: str,
        formula: str,
        reference_modifier: Modifier | None = None,
        stat: Stat | None = None,
    ) -> str:
        existing = self.tree.nodes.get(key)
        if existing is not None:
            if existing.is_populating:
                raise CyclicFormulaError(self.tree.population_chain(key))
            return key

        child = RollNode(self.tree, formula, reference_modifier, stat)
        self.tree.nodes[key] = child
        if self.tree.options.debug:
            log_debug(
                f"Registered node '{key}'",
                {
                    "parent": self.formula,
                    "modifier": reference_modifier.name if reference_modifier else None,
                },
            )
        self.tree.population_stack.append(key)
        try:
            child.populate()
        finally:
            self.tree.population_stack.pop()
        return key

    # ==========================================================================
    # RESOLUTION
    # ==========================================================================

    def reset(self) -> None:
        """Forgets the cached resolution."""
        self.resolved_value = None

    def resolve(self) -> ResolvedRoll:
        """
        Resolves this node into its machine and display expressions.

        Results are cached until `reset` is called; a shared node is therefore
        resolved once per tree resolution.
        """
        if self.resolved_value is not None:
            return self.resolved_value

        if self.stat is not None:
            resolved = self._resolve_stat(self.stat)
        else:
            resolved = self._resolve_fragment()

        if self.reference_modifier is not None:
            resolved = ResolvedRoll(
                final_roll=resolved.final_roll,
                formula=f"{wrap_term(resolved.formula)}[{self.reference_modifier.name}]",
            )
        self.resolved_value = resolved
        return resolved

    def _resolve_stat(self, stat: Stat) -> ResolvedRoll:
        value = format_number(stat.value)
        final_terms = [value]
        display_terms = [f"{value}[{self.tree.context.label_for(self.formula)}]"]
        for child in self.children:
            if not child.is_enabled:
                continue
            child_roll = child.resolve()
            final_terms.append(wrap_term(child_roll.final_roll))
            display_terms.append(child_roll.formula)
        return ResolvedRoll(
            final_roll=join_terms(final_terms),
            formula=join_terms(display_terms),
        )

    def _resolve_fragment(self) -> ResolvedRoll:
        context = self.tree.context
        final_roll = self.formula
        display = self.formula
        for token in find_variables(self.formula):
            key = self.child_nodes.get(token)
            if key is not None:
                child = self.tree.nodes[key]
                if not child.is_enabled:
                    final_roll = remove_term(final_roll, token)
                    display = remove_term(display, token)
                    continue
                child_roll = child.resolve()
                final_roll = replace_variable(
                    final_roll, token, wrap_term(child_roll.final_roll)
                )
                display = replace_variable(display, token, wrap_term(child_roll.formula))
                continue

            value = context.resolve(token)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                number = format_number(value)
                final_roll = replace_variable(final_roll, token, number)
                display = replace_variable(
                    display, token, f"{number}[{context.label_for(token)}]"
                )
            else:
                log_warning(
                    f"Cannot resolve variable '{token}', substituting with a 0.",
                    {"variable": token, "formula": self.formula},
                )
                final_roll = replace_variable(final_roll, token, "0")
                display = replace_variable(display, token, "0")
        return ResolvedRoll(final_roll=final_roll, formula=display)

    def __repr__(self) -> str:
        modifier = self.reference_modifier.name if self.reference_modifier else None
        return (
            f"RollNode({self.formula!r}, modifier={modifier!r}, "
            f"enabled={self.is_enabled}, children={list(self.child_nodes)})"
        )
