"""
Command-line entry point for the roll tree.

Loads a roll context from a JSON file, builds the roll for a formula
(interactively unless --skip-ui is given) and prints the expressions that
would be handed to the dice engine.

Example:
    rolltree "1d20 + @abilities.str.mod" --context actor.json --part "1d8:primary"
"""

import argparse
import asyncio
import logging
from pathlib import Path

from rich.table import Table

from rolltree.core.error_handling import RollTreeError
from rolltree.core.localization import Localization
from rolltree.core.logging import log_error, setup_logging
from rolltree.core.settings import SettingsStore
from rolltree.core.utils import cprint, crule
from rolltree.rolls.roll_info import RollOptions, RollPart, RollResult
from rolltree.rolls.roll_tree import RollTree
from rolltree.rolls.serialization import load_context
from rolltree.ui.roll_dialog import PromptRollDialog


def parse_part(value: str) -> RollPart:
    """Parses a `--part` value such as '1d8' or '1d8:primary'."""
    formula, _, flag = value.rpartition(":")
    if flag.lower() == "primary" and formula:
        return RollPart(formula=formula, is_primary_section=True)
    return RollPart(formula=value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rolltree",
        description="Resolve a dice formula against a JSON roll context.",
    )
    parser.add_argument("formula", help="The formula to roll, e.g. '1d20 + @bab'.")
    parser.add_argument(
        "--context", type=Path, required=True, help="JSON file with the roll context."
    )
    parser.add_argument(
        "--settings", type=Path, default=None, help="JSON file with roll settings."
    )
    parser.add_argument(
        "--part",
        dest="parts",
        action="append",
        type=parse_part,
        default=None,
        help="An output section; append ':primary' to receive the formula. Repeatable.",
    )
    parser.add_argument("--title", default="Roll", help="Dialog title.")
    parser.add_argument("--main-die", default=None, help="Main die shown in the dialog.")
    parser.add_argument("--skip-ui", action="store_true", help="Roll without the dialog.")
    parser.add_argument("--debug", action="store_true", help="Enable debug telemetry.")
    return parser


def print_result(result: RollResult) -> None:
    """Prints the emitted expressions of a roll."""
    if result.is_cancelled:
        cprint("[yellow]Roll cancelled.[/]")
        return
    table = Table(title=f"{result.button} ({result.mode.display_name if result.mode else '-'})")
    table.add_column("Part", style="cyan")
    table.add_column("Final roll", style="bold")
    table.add_column("Formula", style="magenta")
    for each in result.rolls:
        part_index = each.node.part_index if isinstance(each.node, RollPart) else None
        table.add_row(part_index or "-", each.formula.final_roll, each.formula.formula)
    cprint(table)
    if result.modifiers:
        cprint("Modifiers: " + ", ".join(mod.name for mod in result.modifiers))


async def run(args: argparse.Namespace) -> RollResult:
    settings = SettingsStore(args.settings) if args.settings else SettingsStore()
    locale_file = settings.get("locale_file")
    localization = Localization.from_file(locale_file) if locale_file else Localization()
    options = RollOptions(
        skip_ui=args.skip_ui,
        title=args.title,
        main_die=args.main_die,
        parts=args.parts,
        debug=args.debug or settings.get("debug"),
    )
    return await RollTree.build_roll(
        args.formula,
        load_context(args.context),
        options,
        dialog=PromptRollDialog(roll_mode=settings.get("roll_mode")),
        settings=settings,
        localization=localization,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    crule("Roll Tree", style="bold green")
    try:
        result = asyncio.run(run(args))
    except RollTreeError as e:
        log_error(f"Cannot build roll: {e}", {"formula": args.formula})
        return 1
    print_result(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
