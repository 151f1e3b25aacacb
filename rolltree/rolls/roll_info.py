"""
Request and result models exchanged by the roll tree, its callers and the
selection dialog.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rolltree.core.constants import CANCEL_BUTTON, RollMode

from .formula import ResolvedRoll
from .modifier import Modifier


class RollPart(BaseModel):
    """
    One output section of a roll, e.g. one damage instance of an attack.

    The primary section receives the root formula (the shared bonus pool)
    after its own formula.
    """

    formula: str = Field(default="", description="The section's own formula.")
    is_primary_section: bool = Field(default=False)
    enabled: bool = Field(default=True)
    name: str = Field(default="", description="Optional display name.")
    part_index: str | None = Field(
        default=None,
        description="Position label, set when several sections are rolled.",
    )


class DialogButton(BaseModel):
    """A button offered by the selection dialog."""

    id: str | None = Field(default=None)
    label: str = Field(description="Text shown on the button.")

    @property
    def key(self) -> str:
        return self.id or self.label


class RollOptions(BaseModel):
    """Caller options for a single roll request."""

    skip_ui: bool = Field(default=False)
    default_button: str | None = Field(default=None)
    buttons: dict[str, DialogButton] | None = Field(default=None)
    title: str = Field(default="Roll")
    main_die: str | None = Field(
        default=None, description="The die shown as the roll's main die, e.g. '1d20'."
    )
    parts: list[RollPart] | None = Field(default=None)
    debug: bool = Field(default=False)
    bonus_to_all_parts: bool | None = Field(
        default=None,
        description="Override of the setting of the same name; None defers to the settings store.",
    )

    def first_button(self) -> str | None:
        if not self.buttons:
            return None
        return next(iter(self.buttons.values())).key


class RollSelection(BaseModel):
    """What the selection dialog returns. A None button means cancelled."""

    button: str | None = Field(default=None)
    roll_mode: RollMode = Field(default=RollMode.PUBLIC)
    bonus: str | None = Field(default=None)
    parts: list[RollPart] | None = Field(default=None)

    @property
    def is_cancelled(self) -> bool:
        return self.button is None or self.button == CANCEL_BUTTON


class EachRoll(BaseModel):
    """One assembled expression pair and the part or node it came from."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    formula: ResolvedRoll
    node: Any = Field(description="The originating RollPart or RollNode.")


class RollResult(BaseModel):
    """Outcome of `RollTree.build_roll`."""

    button: str = Field(default="")
    mode: RollMode | None = Field(default=None)
    modifiers: list[Modifier] = Field(default_factory=list)
    bonus: str | None = Field(default=None)
    rolls: list[EachRoll] = Field(default_factory=list)

    @property
    def is_cancelled(self) -> bool:
        return self.button == CANCEL_BUTTON
