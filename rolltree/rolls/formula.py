"""
Formula string helpers.

Formulas are assembled as strings: variables are spliced in place, disabled
terms are cut out together with their operator, sections are joined with
" + " and the free-form bonus is appended with an explicit separator rule.
"""

import re

from pydantic import BaseModel, Field

from rolltree.core.constants import (
    ADDITIONAL_BONUS_KEY,
    BONUS_OPERATORS,
    TERM_SEPARATOR,
    VARIABLE_PATTERN,
)
from rolltree.core.localization import Localization

# A variable token ends where the token alphabet ends.
_TOKEN_END = r"(?![a-zA-Z0-9_\-.])"

# Single terms that can be spliced without parentheses: numbers, dice and
# labelled values such as '3[Strength]' or '1d6[Bless]'.
_SIMPLE_TERM = re.compile(r"^-?[a-zA-Z0-9_.]+(\[[^\[\]]*\])?$")

_LABEL_SUFFIX = re.compile(r"\[[^\[\]]*\]$")

_EMPTY_GROUP = re.compile(r"\(\s*\)")


class ResolvedRoll(BaseModel):
    """A machine expression and its human-readable counterpart."""

    final_roll: str = Field(description="Expression handed to the dice engine.")
    formula: str = Field(description="Same expression with display labels.")


def find_variables(formula: str) -> list[str]:
    """
    Returns the distinct variable tokens of a formula, in order of appearance.

    Args:
        formula (str): The formula to scan.

    Returns:
        list[str]: Tokens including their leading '@'.

    """
    return list(dict.fromkeys(m.group(0) for m in VARIABLE_PATTERN.finditer(formula)))


def replace_variable(formula: str, token: str, replacement: str) -> str:
    """Replaces every occurrence of exactly `token` (not longer tokens it prefixes)."""
    return re.sub(re.escape(token) + _TOKEN_END, lambda _: replacement, formula)


def remove_term(formula: str, token: str) -> str:
    """
    Removes every occurrence of `token` together with the operator binding it.

    The preceding operator is removed when there is one, otherwise a
    following '+', '*' or '/' is. A token standing alone as a function
    argument, such as '@a' in 'max(@a, 3)', is replaced by "0" instead. An
    expression left empty becomes "0".
    """
    escaped = re.escape(token) + _TOKEN_END
    result = re.sub(r"(?<=,)(\s*)" + escaped + r"(?=\s*[,)])", r"\g<1>0", formula)
    result = re.sub(r"(?<=\()(\s*)" + escaped + r"(?=\s*,)", r"\g<1>0", result)
    result = re.sub(r"\s*[-+*/]\s*" + escaped, "", result)
    result = re.sub(escaped + r"\s*[+*/]?\s*", "", result)
    result = _EMPTY_GROUP.sub("0", result).strip()
    return result or "0"


def join_terms(terms: list[str]) -> str:
    """Joins the non-empty terms with " + ", or returns "0" when none remain."""
    return TERM_SEPARATOR.join(term for term in terms if term) or "0"


def _is_wrapped(expression: str) -> bool:
    if not (expression.startswith("(") and expression.endswith(")")):
        return False
    depth = 0
    for index, char in enumerate(expression):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index < len(expression) - 1:
                return False
    return depth == 0


def wrap_term(expression: str) -> str:
    """Parenthesizes a compound expression so it can be spliced as one term."""
    expression = expression.strip()
    if not expression:
        return "0"
    if _SIMPLE_TERM.match(expression):
        return expression
    if _is_wrapped(_LABEL_SUFFIX.sub("", expression)):
        return expression
    return f"({expression})"


def format_number(value: int | float) -> str:
    """Formats a context number, dropping the fraction of integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bonus_separator(bonus: str) -> str:
    return " " if bonus[0] in BONUS_OPERATORS else " +"


def append_bonus(expression: str, bonus: str | None) -> str:
    """
    Appends a free-form bonus to a machine expression.

    A bonus that does not start with an operator gets a " +" separator, so
    both '2' and '+2' turn '1d20' into '1d20 +2'.
    """
    bonus = (bonus or "").strip()
    if not bonus:
        return expression
    return expression + _bonus_separator(bonus) + bonus


def append_bonus_label(
    expression: str, bonus: str | None, localization: Localization
) -> str:
    """Display counterpart of `append_bonus`: the bonus is wrapped in its label."""
    bonus = (bonus or "").strip()
    if not bonus:
        return expression
    label = localization.format(ADDITIONAL_BONUS_KEY, bonus=bonus)
    return expression + _bonus_separator(bonus) + label


def apply_bonus(
    roll: ResolvedRoll, bonus: str | None, localization: Localization
) -> ResolvedRoll:
    """Returns a copy of `roll` with the bonus appended to both expressions."""
    return ResolvedRoll(
        final_roll=append_bonus(roll.final_roll, bonus),
        formula=append_bonus_label(roll.formula, bonus, localization),
    )
