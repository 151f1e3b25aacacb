"""
Roll dialog module.

The selection step of a roll: the user toggles modifiers and parts, enters a
free-form bonus, picks a roll mode and presses a button. `RollDialog` is the
interface the roll tree awaits; `PromptRollDialog` implements it in the
terminal with rich tables and prompt_toolkit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from prompt_toolkit import ANSI, PromptSession
from rich.table import Table

from rolltree.core.constants import DEFAULT_BUTTON, RollMode
from rolltree.core.logging import log_debug
from rolltree.core.utils import ccapture
from rolltree.rolls.context import RollContext
from rolltree.rolls.modifier import Modifier
from rolltree.rolls.roll_info import DialogButton, RollOptions, RollPart, RollSelection

if TYPE_CHECKING:
    from rolltree.rolls.roll_tree import RollTree


class RollDialog(ABC):
    """Interface of the interactive selection step."""

    @abstractmethod
    async def show(
        self,
        tree: RollTree,
        formula: str,
        context: RollContext,
        modifiers: list[Modifier],
        main_die: str | None,
        options: RollOptions,
    ) -> RollSelection:
        """
        Lets the user configure the roll.

        Args:
            tree (RollTree): The tree being rolled; may be re-populated.
            formula (str): The validated top-level formula.
            context (RollContext): The roll context.
            modifiers (list[Modifier]): The modifiers the user may toggle.
            main_die (str | None): The main die of the roll, for display.
            options (RollOptions): Buttons, default button, title and parts.

        Returns:
            RollSelection: The selection; a None button means cancelled.

        """


class PromptRollDialog(RollDialog):
    """
    Terminal roll dialog.

    Commands:
        <n>            toggle modifier n
        p<n>           toggle part n
        b <bonus>      set the additional bonus (`b` alone clears it)
        m <mode>       set the roll mode (e.g. `gmroll` or `gm`)
        f <formula>    replace the formula and rebuild the roll tree
        <button>       roll with the given button
        (empty)        roll with the default button
        q              cancel
    """

    def __init__(
        self,
        session: PromptSession | None = None,
        roll_mode: RollMode = RollMode.PUBLIC,
    ) -> None:
        self._session = session
        self.roll_mode = roll_mode

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession(erase_when_done=True)
        return self._session

    async def show(
        self,
        tree: RollTree,
        formula: str,
        context: RollContext,
        modifiers: list[Modifier],
        main_die: str | None,
        options: RollOptions,
    ) -> RollSelection:
        parts = list(options.parts or [])
        buttons = options.buttons or {
            DEFAULT_BUTTON: DialogButton(id=DEFAULT_BUTTON, label="Roll")
        }
        default_button = options.default_button or next(iter(buttons.values())).key
        roll_mode = self.roll_mode
        bonus: str | None = None

        while True:
            table = self._create_table(
                options.title, tree.formula, main_die, modifiers, parts
            )
            footer = self._create_footer(bonus, roll_mode, buttons, default_button)
            prompt = "\n" + ccapture(table) + "\n" + ccapture(footer) + "\nRoll > "
            answer = (await self.session.prompt_async(ANSI(prompt))).strip()

            if not answer:
                return RollSelection(
                    button=default_button, roll_mode=roll_mode, bonus=bonus, parts=parts
                )

            command, _, argument = answer.partition(" ")
            command_lower = command.lower()
            argument = argument.strip()

            if command_lower == "q":
                return RollSelection(button=None, roll_mode=roll_mode)

            # Toggle a modifier.
            if command.isdigit():
                index = int(command) - 1
                if 0 <= index < len(modifiers):
                    modifiers[index].enabled = not modifiers[index].enabled
                continue

            # Toggle a part.
            if command_lower.startswith("p") and command[1:].isdigit():
                index = int(command[1:]) - 1
                if 0 <= index < len(parts):
                    parts[index].enabled = not parts[index].enabled
                continue

            if command_lower == "b":
                bonus = argument or None
                continue

            if command_lower == "m":
                roll_mode = self._parse_roll_mode(argument, roll_mode)
                continue

            if command_lower == "f" and argument:
                tree.populate(argument)
                modifiers = tree.get_reference_modifiers()
                log_debug("Roll tree rebuilt from dialog", {"formula": tree.formula})
                continue

            button = self._find_button(buttons, answer)
            if button is not None:
                return RollSelection(
                    button=button, roll_mode=roll_mode, bonus=bonus, parts=parts
                )

    @staticmethod
    def _parse_roll_mode(value: str, current: RollMode) -> RollMode:
        value = value.strip().lower()
        for mode in RollMode:
            if value in (mode.value, mode.name.lower()):
                return mode
        return current

    @staticmethod
    def _find_button(buttons: dict[str, DialogButton], answer: str) -> str | None:
        answer = answer.lower()
        for key, button in buttons.items():
            if answer in (key.lower(), button.key.lower(), button.label.lower()):
                return button.key
        return None

    def _create_table(
        self,
        title: str,
        formula: str,
        main_die: str | None,
        modifiers: list[Modifier],
        parts: list[RollPart],
    ) -> Table:
        caption = f"{main_die} + {formula}" if main_die else formula
        table = Table(title=title, caption=caption, pad_edge=False)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Name", style="bold")
        table.add_column("Value", style="magenta")
        table.add_column("On", justify="center")
        for i, mod in enumerate(modifiers, 1):
            table.add_row(
                str(i),
                f"{mod.source.emoji} {mod.name}",
                mod.modifier,
                "[green]✓[/]" if mod.enabled else "",
            )
        if parts:
            table.add_row()
        for i, part in enumerate(parts, 1):
            name = part.name or f"Part {i}"
            if part.is_primary_section:
                name += " (primary)"
            table.add_row(
                f"p{i}",
                name,
                part.formula,
                "[green]✓[/]" if part.enabled else "",
            )
        return table

    def _create_footer(
        self,
        bonus: str | None,
        roll_mode: RollMode,
        buttons: dict[str, DialogButton],
        default_button: str,
    ) -> str:
        labels = [
            f"[bold]{button.label}[/]" if button.key == default_button else button.label
            for button in buttons.values()
        ]
        return (
            f"Bonus: {bonus or '-'}  Mode: {roll_mode.colored_name}\n"
            f"Buttons: {' | '.join(labels)}  (q to cancel)"
        )
