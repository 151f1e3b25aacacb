"""
Tests for the formula string helpers.
"""

from rolltree.core.localization import Localization
from rolltree.rolls.formula import (
    ResolvedRoll,
    append_bonus,
    append_bonus_label,
    apply_bonus,
    find_variables,
    format_number,
    join_terms,
    remove_term,
    replace_variable,
    wrap_term,
)


def test_find_variables_is_distinct_and_ordered():
    """Each token is reported once, in order of first appearance."""
    formula = "@b + 1d20 + @a.x-y_z + @b"
    assert find_variables(formula) == ["@b", "@a.x-y_z"]


def test_find_variables_without_tokens():
    assert find_variables("1d20 + 5") == []


def test_replace_variable_does_not_touch_longer_tokens():
    """Replacing '@str' leaves '@strength' alone."""
    result = replace_variable("@str + @strength + @str", "@str", "3")
    assert result == "3 + @strength + 3"


def test_remove_term_with_preceding_operator():
    assert remove_term("1 + @bonus", "@bonus") == "1"
    assert remove_term("1d20 - @penalty + 2", "@penalty") == "1d20 + 2"


def test_remove_term_at_start_of_formula():
    assert remove_term("@bonus + 1", "@bonus") == "1"


def test_remove_only_term_yields_zero():
    assert remove_term("@bonus", "@bonus") == "0"


def test_remove_term_in_group():
    assert remove_term("2 * (@bonus)", "@bonus") == "2 * 0"


def test_remove_term_used_as_function_argument():
    """A bare argument becomes 0 so the call keeps its arity."""
    assert remove_term("max(@a, 3)", "@a") == "max(0, 3)"
    assert remove_term("max(3, @a)", "@a") == "max(3, 0)"
    assert remove_term("clamp(1, @a, 5)", "@a") == "clamp(1, 0, 5)"


def test_remove_term_inside_function_argument():
    assert remove_term("max(@a + 1, 3)", "@a") == "max(1, 3)"
    assert remove_term("max(3, 1 + @a)", "@a") == "max(3, 1)"


def test_join_terms_skips_empty_terms():
    assert join_terms(["1d4", "", "2"]) == "1d4 + 2"
    assert join_terms(["", ""]) == "0"


def test_wrap_term_keeps_simple_terms():
    assert wrap_term("3") == "3"
    assert wrap_term("1d6") == "1d6"
    assert wrap_term("3[Strength]") == "3[Strength]"
    assert wrap_term("-1") == "-1"
    assert wrap_term("(1 + 2)") == "(1 + 2)"


def test_wrap_term_parenthesizes_compound_terms():
    assert wrap_term("3 + 5") == "(3 + 5)"
    assert wrap_term("(1) + (2)") == "((1) + (2))"


def test_format_number():
    assert format_number(3) == "3"
    assert format_number(2.0) == "2"
    assert format_number(1.5) == "1.5"


def test_append_bonus_inserts_separator():
    """A bare bonus gets ' +' in front of it."""
    assert append_bonus("1d20", "2") == "1d20 +2"


def test_append_bonus_with_operator():
    """A bonus starting with an operator is not given a second one."""
    assert append_bonus("1d20", "+2") == "1d20 +2"
    assert append_bonus("1d20", "-1") == "1d20 -1"
    assert append_bonus("1d20", "*2") == "1d20 *2"


def test_append_empty_bonus():
    assert append_bonus("1d20", None) == "1d20"
    assert append_bonus("1d20", "  ") == "1d20"


def test_append_bonus_label_uses_localized_label():
    localization = Localization()
    assert (
        append_bonus_label("1d20", "2", localization)
        == "1d20 +2[Additional Bonus]"
    )
    assert (
        append_bonus_label("1d20", "-1", localization)
        == "1d20 -1[Additional Bonus]"
    )


def test_apply_bonus_leaves_original_untouched():
    roll = ResolvedRoll(final_roll="1d20", formula="1d20")
    bonus_roll = apply_bonus(roll, "1d4", Localization())
    assert bonus_roll.final_roll == "1d20 +1d4"
    assert bonus_roll.formula == "1d20 +1d4[Additional Bonus]"
    assert roll.final_roll == "1d20"
