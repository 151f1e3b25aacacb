"""
Tests for roll tree validation, population and modifier aggregation.
"""

from rolltree.rolls.context import RollContext, Selector, Stat
from rolltree.rolls.modifier import CalculatedModifier, Modifier
from rolltree.rolls.roll_info import RollOptions
from rolltree.rolls.roll_tree import RollTree


def test_unknown_variable_is_replaced_with_zero(context, mocker):
    mock_warning = mocker.patch("rolltree.rolls.roll_tree.log_warning")
    tree = RollTree("1d20 + @nope + @nope", context)
    assert tree.formula == "1d20 + 0 + 0"
    assert list(tree.nodes) == ["1d20 + 0 + 0"]
    mock_warning.assert_called_once()
    assert "@nope" in mock_warning.call_args[0][0]


def test_validation_keeps_known_variables(context, mocker):
    mocker.patch("rolltree.rolls.roll_tree.log_warning")
    tree = RollTree("@bab + @missing.value", context)
    assert tree.formula == "@bab + 0"
    assert tree.resolve().final_roll == "5 + 0"


def test_selectors_are_applied_before_validation():
    context = RollContext(
        contexts={"actor": {"bab": 5}, "owner": {"bab": 7}},
        selectors=[Selector(target="wielder", options=["owner", "actor"])],
    )
    tree = RollTree("1d20 + @wielder.bab", context)
    assert tree.formula == "1d20 + @wielder.bab"
    assert tree.resolve().final_roll == "1d20 + 7"


def test_reference_modifiers_in_node_order(context, bless, inspire):
    tree = RollTree("1d20 + @mods.inspire + @mods.bless", context)
    assert tree.get_reference_modifiers() == [inspire, bless]


def test_get_modifiers_includes_calculated_bonuses(context):
    tree = RollTree("1d20 + @skills.athletics", context)
    assert [mod.name for mod in tree.get_modifiers()] == ["Heroism", "Weapon Focus"]
    assert [mod.name for mod in tree.get_reference_modifiers()] == ["Weapon Focus"]


def test_get_modifiers_skips_names_present_in_formula(context):
    """A modifier already written into the formula is not offered again."""
    tree = RollTree("1d20 + @skills.athletics + 2[Heroism]", context)
    assert [mod.name for mod in tree.get_modifiers()] == ["Weapon Focus"]


def test_get_modifiers_deduplicates_by_name(context):
    context.contexts["actor"]["skills"]["climb"] = Stat(
        value=1,
        calculated_mods=[
            CalculatedModifier(bonus=Modifier(name="Heroism", modifier="2")),
        ],
    )
    tree = RollTree("@skills.athletics + @skills.climb", context)
    names = [mod.name for mod in tree.get_modifiers()]
    assert names.count("Heroism") == 1


def test_commit_enablement_follows_modifiers(context, bless):
    tree = RollTree("1d20 + @mods.bless", context)
    node = tree.nodes["Bless:1d4"]
    bless.enabled = False
    assert node.is_enabled
    tree.commit_enablement()
    assert not node.is_enabled


def test_repopulate_discards_previous_nodes(context):
    tree = RollTree("1d20 + @mods.bless", context)
    old_nodes = list(tree.nodes.values())

    tree.populate("1d20 + @abilities.str.mod")
    assert tree.formula == "1d20 + @abilities.str.mod"
    assert list(tree.nodes) == ["1d20 + @abilities.str.mod"]
    assert all(node not in tree.nodes.values() for node in old_nodes)
    assert tree.get_reference_modifiers() == []


def test_repopulate_same_formula_builds_new_nodes(context):
    tree = RollTree("1d20 + @mods.bless", context)
    old_root = tree.root_node
    tree.populate()
    assert tree.root_node is not old_root
    assert list(tree.nodes) == ["1d20 + @mods.bless", "Bless:1d4"]


def test_debug_telemetry(context, mocker):
    mock_debug = mocker.patch("rolltree.rolls.roll_tree.log_debug")
    RollTree("1d20 + @mods.bless", context, RollOptions(debug=True))
    assert mock_debug.called

    mock_debug.reset_mock()
    RollTree("1d20 + @mods.bless", context)
    assert not mock_debug.called
