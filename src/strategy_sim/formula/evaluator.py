"""Evaluate arithmetic formulas over the price-change variable N.

Supported surface: decimal literals, the variable ``N``, binary ``+ - * /``
with the usual precedence, unary minus, parentheses and ``abs(...)``.

``N`` is substituted textually before anything else is looked at. ``abs``
calls and parenthesized groups are then resolved by evaluating their interior
and splicing the resulting literal back into the string, so the last stage only
ever sees a flat chain of numbers and operators.

Numeric fragments that fail to parse do not abort evaluation: they count as
zero when they open the additive chain, are skipped as additive operands and
are left unreduced by the multiplicative pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from strategy_sim.formula.errors import (
    DivisionByZeroError,
    EmptyFormulaError,
    FormulaError,
    InvalidCharacterError,
    MissingVariableError,
    UnbalancedParenthesesError,
)

VARIABLE = "N"

_ABS_CALL = "abs("
_ALLOWED = re.compile(r"[0-9+\-*/.() ]+")
_DISALLOWED = re.compile(r"[^0-9+\-*/.() ]")
_WHITESPACE = re.compile(r"\s+")
_OPERATORS = "+-*/"
_SIGN_PREFIXES = "(+-*/"


@dataclass(frozen=True)
class FormulaCheck:
    valid: bool
    reason: str
    code: Optional[str] = None


FORMULA_EXAMPLES = (
    {
        "formula": "10000 * N + 2000",
        "description": "2000 base amount plus 10000 per percent of change",
        "example": "N=5 -> 10000*5+2000 = 52000",
    },
    {
        "formula": "2 * N",
        "description": "Two shares per percent of change",
        "example": "N=3 -> 2*3 = 6 shares",
    },
    {
        "formula": "N",
        "description": "Same ratio as the price change",
        "example": "N=10 -> 10% of cash",
    },
    {
        "formula": "abs(N) * 0.5",
        "description": "Direction-independent sizing",
        "example": "N=-8 -> abs(-8)*0.5 = 4",
    },
    {
        "formula": "N / 2 + 1000",
        "description": "Half the change plus a 1000 base amount",
        "example": "N=20 -> 20/2+1000 = 1010",
    },
    {
        "formula": "(N + 5) * 100",
        "description": "Grouping with parentheses",
        "example": "N=3 -> (3+5)*100 = 800",
    },
)


def evaluate_formula(formula: str, n: float) -> float:
    """Evaluate ``formula`` with ``N`` bound to ``n``.

    Raises a :class:`FormulaError` subclass when the formula is empty, contains
    characters outside the formula surface, has unbalanced parentheses or
    divides by zero.
    """
    if not formula or not formula.strip():
        raise EmptyFormulaError("Formula is empty")

    expression = _WHITESPACE.sub("", formula)
    expression = expression.replace(VARIABLE, format_number(n))
    _check_characters(expression)
    _check_balance(expression)
    return _evaluate(expression)


def validate_formula(formula: str) -> FormulaCheck:
    if not formula or not formula.strip():
        return FormulaCheck(False, "Formula is empty", EmptyFormulaError.code)

    if VARIABLE not in formula:
        return FormulaCheck(
            False,
            f"Formula must reference the variable {VARIABLE}",
            MissingVariableError.code,
        )

    try:
        evaluate_formula(formula, 1)
    except FormulaError as exc:
        return FormulaCheck(False, str(exc), exc.code)
    return FormulaCheck(True, "Valid")


def format_number(value: float) -> str:
    text = repr(float(value))
    if "e" in text:
        # Exponent notation would not survive the character check.
        text = format(Decimal(text), "f")
    return text


def _check_characters(expression: str) -> None:
    candidate = expression.replace(_ABS_CALL, "(")
    if _ALLOWED.fullmatch(candidate):
        return
    invalid = "".join(sorted(set(_DISALLOWED.findall(candidate))))
    raise InvalidCharacterError(f"Invalid characters in formula: {invalid!r}")


def _check_balance(expression: str) -> None:
    depth = 0
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise UnbalancedParenthesesError("Closing parenthesis without a matching opening one")
    if depth != 0:
        raise UnbalancedParenthesesError("Parenthesis is not closed")


def _evaluate(expression: str) -> float:
    expression = _resolve_abs(expression)
    expression = _resolve_parentheses(expression)
    tokens = _reduce_multiplicative(_tokenize(expression))
    return _fold_additive(tokens)


def _resolve_abs(expression: str) -> str:
    while _ABS_CALL in expression:
        start = expression.index(_ABS_CALL)
        inner_start = start + len(_ABS_CALL)
        end = _matching_close(expression, inner_start)
        value = abs(_evaluate(expression[inner_start:end]))
        expression = expression[:start] + format_number(value) + expression[end + 1 :]
    return expression


def _matching_close(expression: str, start: int) -> int:
    depth = 0
    for index in range(start, len(expression)):
        char = expression[index]
        if char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                return index
            depth -= 1
    raise UnbalancedParenthesesError("abs() call is not closed")


def _resolve_parentheses(expression: str) -> str:
    while "(" in expression:
        open_index = expression.rindex("(")
        close_index = expression.find(")", open_index)
        if close_index == -1:
            raise UnbalancedParenthesesError("Parenthesis is not closed")
        value = _evaluate(expression[open_index + 1 : close_index])
        expression = expression[:open_index] + format_number(value) + expression[close_index + 1 :]
    if ")" in expression:
        raise UnbalancedParenthesesError("Closing parenthesis without a matching opening one")
    return expression


def _tokenize(expression: str) -> list[str]:
    tokens: list[str] = []
    current = ""
    for index, char in enumerate(expression):
        if char not in _OPERATORS:
            current += char
            continue
        if char == "-" and (index == 0 or expression[index - 1] in _SIGN_PREFIXES):
            current += char
            continue
        if current:
            tokens.append(current)
            current = ""
        tokens.append(char)
    if current:
        tokens.append(current)
    return tokens


def _parse_number(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def _reduce_multiplicative(tokens: list[str]) -> list[str]:
    reduced: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token in ("*", "/") and reduced and index + 1 < len(tokens):
            left = _parse_number(reduced[-1])
            right = _parse_number(tokens[index + 1])
            if left is not None and right is not None:
                if token == "*":
                    value = left * right
                elif right == 0:
                    raise DivisionByZeroError("Division by zero")
                else:
                    value = left / right
                reduced[-1] = format_number(value)
                index += 2
                continue
        reduced.append(token)
        index += 1
    return reduced


def _fold_additive(tokens: list[str]) -> float:
    if not tokens:
        return 0.0

    result = _parse_number(tokens[0])
    if result is None:
        result = 0.0

    for index in range(1, len(tokens), 2):
        operator = tokens[index]
        operand = _parse_number(tokens[index + 1]) if index + 1 < len(tokens) else None
        if operand is None:
            continue
        if operator == "+":
            result += operand
        elif operator == "-":
            result -= operand
    return result
