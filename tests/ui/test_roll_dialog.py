"""
Tests for the terminal roll dialog.
"""

import asyncio

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from rolltree.core.constants import RollMode
from rolltree.rolls.roll_info import DialogButton, RollOptions, RollPart
from rolltree.rolls.roll_tree import RollTree
from rolltree.ui.roll_dialog import PromptRollDialog


def scripted_session(mocker, *answers):
    session = mocker.Mock()
    session.prompt_async = mocker.AsyncMock(side_effect=list(answers))
    return session


def show(dialog, tree, options):
    return asyncio.run(
        dialog.show(
            tree,
            tree.formula,
            tree.context,
            tree.get_reference_modifiers(),
            options.main_die,
            options,
        )
    )


@pytest.fixture
def tree(context):
    return RollTree("1d20 + @mods.bless + @mods.inspire", context)


def test_empty_answer_rolls_with_default_button(tree, mocker):
    dialog = PromptRollDialog(session=scripted_session(mocker, ""))
    selection = show(dialog, tree, RollOptions())
    assert selection.button == "roll"
    assert selection.roll_mode == RollMode.PUBLIC
    assert selection.bonus is None
    assert not selection.is_cancelled


def test_toggle_modifier_and_set_bonus(tree, bless, mocker):
    session = scripted_session(mocker, "1", "b +1d4", "m gm", "")
    selection = show(PromptRollDialog(session=session), tree, RollOptions())
    assert bless.enabled is False
    assert selection.bonus == "+1d4"
    assert selection.roll_mode == RollMode.GM
    assert session.prompt_async.await_count == 4


def test_clear_bonus(tree, mocker):
    session = scripted_session(mocker, "b 2", "b", "")
    selection = show(PromptRollDialog(session=session), tree, RollOptions())
    assert selection.bonus is None


def test_unknown_roll_mode_keeps_current(tree, mocker):
    session = scripted_session(mocker, "m whisper", "")
    dialog = PromptRollDialog(session=session, roll_mode=RollMode.SELF)
    assert show(dialog, tree, RollOptions()).roll_mode == RollMode.SELF


def test_toggle_part(tree, mocker):
    parts = [RollPart(formula="1d6"), RollPart(formula="1d4", is_primary_section=True)]
    session = scripted_session(mocker, "p1", "p9", "")
    selection = show(PromptRollDialog(session=session), tree, RollOptions(parts=parts))
    assert [part.enabled for part in selection.parts] == [False, True]
    assert selection.parts[0] is parts[0]


def test_named_button(tree, mocker):
    buttons = {
        "normal": DialogButton(id="normal", label="Normal"),
        "critical": DialogButton(id="critical", label="Critical"),
    }
    session = scripted_session(mocker, "nonsense", "Critical")
    selection = show(
        PromptRollDialog(session=session), tree, RollOptions(buttons=buttons)
    )
    assert selection.button == "critical"


def test_quit_cancels(tree, mocker):
    selection = show(
        PromptRollDialog(session=scripted_session(mocker, "q")), tree, RollOptions()
    )
    assert selection.button is None
    assert selection.is_cancelled


def test_edit_formula_repopulates_tree(tree, mocker):
    session = scripted_session(mocker, "f 1d20 + @mods.bless", "")
    show(PromptRollDialog(session=session), tree, RollOptions())
    assert tree.formula == "1d20 + @mods.bless"
    assert list(tree.nodes) == ["1d20 + @mods.bless", "Bless:1d4"]


def test_real_prompt_session(tree):
    """The dialog works against a prompt_toolkit session fed from a pipe."""
    with create_pipe_input() as pipe_input:
        pipe_input.send_text("q\n")
        session = PromptSession(input=pipe_input, output=DummyOutput())
        selection = show(PromptRollDialog(session=session), tree, RollOptions())
    assert selection.is_cancelled
