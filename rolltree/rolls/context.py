"""
Roll context and variable resolution.

A roll context is a set of named, nested mappings (for example the rolling
actor, the item being used, its owner). Variables such as
`@owner.abilities.str.mod` are looked up by their first segment; when that
segment is not a context name the main context is searched instead.
Selectors alias one context name to the current value of another.
"""

from collections.abc import Mapping
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, Field

from .modifier import CalculatedModifier, Modifier


class Selector(BaseModel):
    """Makes `target` an alias of the first available entry in `options`."""

    target: str = Field(description="Context name being aliased.")
    options: list[str] = Field(
        default_factory=list,
        description="Candidate context names, in order of preference.",
    )


class Stat(BaseModel):
    """
    A numeric context value that also carries its own modifiers.

    `rolled_mods` are formula modifiers rolled alongside the value and become
    child nodes of the variable that references the stat. `calculated_mods`
    are constant bonuses already included in `value`.
    """

    value: int | float = Field(default=0, description="The numeric value.")
    label: str | None = Field(default=None, description="Display label.")
    rolled_mods: list[Modifier] = Field(default_factory=list)
    calculated_mods: list[CalculatedModifier] = Field(default_factory=list)


class RollContext(BaseModel):
    """Layered variable namespace a roll formula is resolved against."""

    contexts: dict[str, Any] = Field(
        default_factory=dict,
        description="Named contexts, each a nested mapping of values.",
    )
    main_context: str | None = Field(
        default=None,
        description="Context searched when a variable does not name one.",
    )
    selectors: list[Selector] = Field(default_factory=list)
    labels: dict[str, str] = Field(
        default_factory=dict,
        description="Display labels keyed by variable path (without '@').",
    )

    def apply_selectors(self) -> None:
        """
        Writes every selector alias into the flat context namespace.

        Later selectors overwrite earlier ones that share a target.
        """
        for selector in self.selectors:
            if not selector.target or not selector.options:
                continue
            first_option = selector.options[0]
            if first_option not in self.contexts:
                log_warning(
                    f"Selector '{selector.target}' points at unknown context '{first_option}'",
                    {"target": selector.target, "options": selector.options},
                )
                continue
            self.contexts[selector.target] = self.contexts[first_option]

    def get_context_for_variable(self, variable: str) -> tuple[Mapping | None, str]:
        """
        Finds the mapping that owns the last segment of a variable path.

        Args:
            variable (str): The variable, with or without the leading '@'.

        Returns:
            tuple[Mapping | None, str]:
                The owning mapping and the innermost segment name, or
                (None, path) when the variable cannot be found.

        """
        path = variable[1:] if variable.startswith("@") else variable
        first, _, rest = path.partition(".")
        if rest and isinstance(self.contexts.get(first), Mapping):
            owner, remaining = self.contexts[first], rest
        elif self.main_context and isinstance(
            self.contexts.get(self.main_context), Mapping
        ):
            owner, remaining = self.contexts[self.main_context], path
        else:
            return None, path

        *parents, leaf = remaining.split(".")
        for segment in parents:
            owner = owner.get(segment) if isinstance(owner, Mapping) else None
            if owner is None:
                return None, path
        if not isinstance(owner, Mapping) or owner.get(leaf) is None:
            return None, path
        return owner, leaf

    def resolve(self, variable: str) -> Any | None:
        """Returns the value, sub-context or None (not found) for a variable."""
        owner, leaf = self.get_context_for_variable(variable)
        if owner is None:
            return None
        return owner[leaf]

    def label_for(self, variable: str) -> str:
        """Returns the display label of a variable."""
        path = variable[1:] if variable.startswith("@") else variable
        value = self.resolve(path)
        if isinstance(value, Stat) and value.label:
            return value.label
        return self.labels.get(path, path)
