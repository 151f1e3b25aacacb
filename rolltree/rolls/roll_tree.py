"""
Roll tree module.

The roll tree owns the root node of a formula and the map from formula text
to node shared by every branch. It validates the formula against the
context, builds the node tree, aggregates the modifiers discovered on the
way, and assembles the final expressions once the selection step is done.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from catchery import log_warning

from rolltree.core.constants import CANCEL_BUTTON, DEFAULT_BUTTON, PART_INDEX_KEY
from rolltree.core.localization import Localization
from rolltree.core.logging import log_debug, log_info
from rolltree.core.settings import SettingsStore

from .context import RollContext
from .formula import ResolvedRoll, apply_bonus, find_variables, join_terms, replace_variable
from .modifier import Modifier
from .roll_info import EachRoll, RollOptions, RollPart, RollResult
from .roll_node import RollNode

if TYPE_CHECKING:
    from rolltree.ui.roll_dialog import RollDialog


class RollTree:
    """Dependency tree of the sub-formulas of one roll request."""

    def __init__(
        self,
        formula: str,
        context: RollContext,
        options: RollOptions | None = None,
    ) -> None:
        """
        Initialize the RollTree and populate it.

        Args:
            formula (str): The top-level formula.
            context (RollContext): The variables the formula is resolved against.
            options (RollOptions | None): Options of the roll request.

        """
        self.context = context
        self.options = options or RollOptions()
        self.root_node: RollNode | None = None
        self.nodes: dict[str, RollNode] = {}
        self.population_stack: list[str] = []

        self.context.apply_selectors()
        self.formula = self.validate_formula(formula)
        self.populate()

    def validate_formula(self, formula: str) -> str:
        """
        Replaces every variable the context cannot resolve with a literal 0.

        Args:
            formula (str): The formula to validate.

        Returns:
            str: The formula with unresolvable variables substituted.

        """
        for variable in find_variables(formula):
            owner, _ = self.context.get_context_for_variable(variable)
            if owner is None:
                log_warning(
                    f"Cannot find context for variable '{variable}', substituting with a 0.",
                    {"variable": variable},
                )
                formula = replace_variable(formula, variable, "0")
        return formula

    def populate(self, formula: str | None = None) -> None:
        """
        (Re)builds the root node and the node map from scratch.

        Args:
            formula (str | None): A new top-level formula; validated before use.

        """
        if formula is not None:
            self.formula = self.validate_formula(formula)
        if self.options.debug:
            log_debug(
                f"Resolving '{self.formula}'",
                {"contexts": list(self.context.contexts), "main": self.context.main_context},
            )

        self.root_node = RollNode(self, self.formula)
        self.nodes = {self.formula: self.root_node}
        self.population_stack = [self.formula]
        try:
            self.root_node.populate()
        finally:
            self.population_stack = []

    def population_chain(self, formula: str) -> list[str]:
        """Returns the chain of fragments from `formula` back to itself."""
        if formula in self.population_stack:
            start = self.population_stack.index(formula)
            return self.population_stack[start:] + [formula]
        return self.population_stack + [formula]

    # ==========================================================================
    # MODIFIER AGGREGATION
    # ==========================================================================

    def get_reference_modifiers(self) -> list[Modifier]:
        """
        Returns the modifiers attached to nodes, in node registration order.

        These are the modifiers the selection dialog lets the user toggle.
        """
        modifiers: list[Modifier] = []
        for node in self.nodes.values():
            mod = node.reference_modifier
            if mod is not None and all(m.name != mod.name for m in modifiers):
                modifiers.append(mod)
        return modifiers

    def get_modifiers(self) -> list[Modifier]:
        """
        Returns the reference and calculated modifiers of the tree.

        A modifier is skipped when one with the same name is already listed,
        or when its name appears literally in the top-level formula.
        """
        modifiers: list[Modifier] = []
        for node in self.nodes.values():
            candidates = [c.bonus for c in node.calculated_mods]
            if node.reference_modifier is not None:
                candidates.insert(0, node.reference_modifier)
            for mod in candidates:
                if any(m.name == mod.name for m in modifiers):
                    continue
                if mod.name in self.formula:
                    continue
                modifiers.append(mod)
        return modifiers

    # ==========================================================================
    # RESOLUTION
    # ==========================================================================

    def commit_enablement(self) -> None:
        """Copies every reference modifier's enabled flag onto its node."""
        for node in self.nodes.values():
            if node.reference_modifier is not None:
                node.is_enabled = node.reference_modifier.enabled

    def resolve(self) -> ResolvedRoll:
        """Resolves the root node against the current node enablement."""
        for node in self.nodes.values():
            node.reset()
        assert self.root_node is not None, "Roll tree has not been populated."
        return self.root_node.resolve()

    @staticmethod
    def assemble_part(part: RollPart, root_roll: ResolvedRoll) -> ResolvedRoll:
        """
        Builds a section's expressions: its own formula, followed by the root
        expressions when it is the primary section.
        """
        return ResolvedRoll(
            final_roll=join_terms(
                [part.formula, root_roll.final_roll if part.is_primary_section else ""]
            ),
            formula=join_terms(
                [part.formula, root_roll.formula if part.is_primary_section else ""]
            ),
        )

    # ==========================================================================
    # ROLL BUILDING
    # ==========================================================================

    @classmethod
    async def build_roll(
        cls,
        formula: str,
        context: RollContext,
        options: RollOptions | None = None,
        dialog: RollDialog | None = None,
        settings: SettingsStore | None = None,
        localization: Localization | None = None,
    ) -> RollResult:
        """
        Builds the roll data for a formula.

        Args:
            formula (str): The formula to roll.
            context (RollContext): The data context of the roll.
            options (RollOptions | None): Options of the roll request.
            dialog (RollDialog | None): The selection dialog, used unless the
                options skip the UI. Defaults to the terminal dialog.
            settings (SettingsStore | None): Supplies the default roll mode.
            localization (Localization | None): Formats display labels.

        Returns:
            RollResult: The chosen button, roll mode and bonus, and one
            assembled expression pair per enabled part (or one for the root).

        """
        options = options or RollOptions()
        settings = settings or SettingsStore()
        localization = localization or Localization()

        tree = cls(formula, context, options)
        reference_mods = tree.get_reference_modifiers()
        result = RollResult(modifiers=tree.get_modifiers())

        if options.skip_ui:
            result.button = options.default_button or options.first_button() or DEFAULT_BUTTON
            result.mode = settings.get("roll_mode")
            result.bonus = None
            enabled_parts = [part for part in options.parts or [] if part.enabled]
        else:
            if options.debug:
                log_debug("Available modifiers", {"modifiers": reference_mods})
            if dialog is None:
                from rolltree.ui.roll_dialog import PromptRollDialog

                dialog = PromptRollDialog()
            selection = await dialog.show(
                tree, tree.formula, context, reference_mods, options.main_die, options
            )
            if selection.is_cancelled:
                log_info("Roll was cancelled")
                result.button = CANCEL_BUTTON
                return result
            result.button = selection.button
            result.mode = selection.roll_mode
            result.bonus = selection.bonus
            # The dialog may have repopulated the tree.
            result.modifiers = tree.get_modifiers()
            enabled_parts = [part for part in selection.parts or [] if part.enabled]

        tree.commit_enablement()
        root_roll = tree.resolve()

        if not enabled_parts:
            final_roll = apply_bonus(root_roll, result.bonus, localization)
            if options.debug:
                log_debug(
                    "Final roll results outcome",
                    {"formula": tree.formula, "roll": final_roll},
                )
            result.rolls.append(EachRoll(formula=final_roll, node=tree.root_node))
            return result

        bonus_to_all = options.bonus_to_all_parts
        if bonus_to_all is None:
            bonus_to_all = settings.get("bonus_to_all_parts")
        bonus_part = cls._bonus_target(enabled_parts)

        # When parts are given, the root formula describes the bonuses that are
        # added to the primary section.
        for part_index, part in enumerate(enabled_parts):
            section_roll = cls.assemble_part(part, root_roll)
            if bonus_to_all or part is bonus_part:
                section_roll = apply_bonus(section_roll, result.bonus, localization)

            if len(enabled_parts) > 1:
                part.part_index = localization.format(
                    PART_INDEX_KEY,
                    partIndex=part_index + 1,
                    partCount=len(enabled_parts),
                )

            if options.debug:
                log_debug(
                    "Final roll results outcome",
                    {"formula": tree.formula, "part": part.part_index, "roll": section_roll},
                )
            result.rolls.append(EachRoll(formula=section_roll, node=part))

        return result

    @staticmethod
    def _bonus_target(parts: list[RollPart]) -> RollPart:
        """The part that receives the bonus when it is not applied to all parts."""
        return next((part for part in parts if part.is_primary_section), parts[0])
