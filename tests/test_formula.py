import pytest

from strategy_sim.formula import (
    DivisionByZeroError,
    EmptyFormulaError,
    FormulaError,
    InvalidCharacterError,
    UnbalancedParenthesesError,
    evaluate_formula,
    validate_formula,
)
from strategy_sim.formula.evaluator import format_number


@pytest.mark.parametrize("n", [0.0, 5.0, -3.0, 4.761904761904762, -5.2631578947368425, 1e-07, 1e20])
def test_variable_and_abs_round_trip(n):
    assert evaluate_formula("N", n) == n
    assert evaluate_formula("abs(N)", n) == abs(n)


@pytest.mark.parametrize(
    "formula,n,expected",
    [
        ("10000 * N + 2000", 5, 52000),
        ("2 * N", 3, 6),
        ("N / 2 + 1000", 20, 1010),
        ("(N + 5) * 100", 3, 800),
        ("abs(N) * 0.5", -10, 5),
    ],
)
def test_documented_examples(formula, n, expected):
    assert evaluate_formula(formula, n) == expected


def test_precedence_and_left_associativity():
    assert evaluate_formula("2 + 3 * 4", 0) == 14
    assert evaluate_formula("10 - 4 - 3", 0) == 3
    assert evaluate_formula("2 * 3 * 4", 0) == 24
    assert evaluate_formula("100 / 10 / 2", 0) == 5
    assert evaluate_formula("N - 2 * 3 + 8 / 4", 10) == 6


def test_unary_minus():
    assert evaluate_formula("-N", 3) == -3
    assert evaluate_formula("2 * -N", 3) == -6
    assert evaluate_formula("N - N", -4) == 0
    assert evaluate_formula("-(N + 1)", 2) == -3


def test_nested_groups_and_abs():
    assert evaluate_formula("((N + 1) * 2) / 4", 3) == 2
    assert evaluate_formula("abs(abs(N) - 10)", -3) == 7
    assert evaluate_formula("abs((N - 10) * 2) + 1", 4) == 13


def test_division_by_zero_is_an_error():
    with pytest.raises(DivisionByZeroError):
        evaluate_formula("1/0", 7)
    with pytest.raises(DivisionByZeroError):
        evaluate_formula("N / (N - N)", 5)


@pytest.mark.parametrize(
    "formula,error",
    [
        ("", EmptyFormulaError),
        ("   ", EmptyFormulaError),
        ("N + x", InvalidCharacterError),
        ("n * 2", InvalidCharacterError),
        ("N ** 2 % 3", InvalidCharacterError),
        ("(N + 1", UnbalancedParenthesesError),
        ("N + 1)", UnbalancedParenthesesError),
        (")N(", UnbalancedParenthesesError),
        ("abs(N", UnbalancedParenthesesError),
    ],
)
def test_structural_errors(formula, error):
    with pytest.raises(error):
        evaluate_formula(formula, 1)


def test_errors_are_value_errors_with_codes():
    with pytest.raises(ValueError) as excinfo:
        evaluate_formula("N + y", 1)
    assert isinstance(excinfo.value, FormulaError)
    assert excinfo.value.code == "INVALID_CHARACTER"


def test_malformed_fragments_degrade_instead_of_failing():
    # A fragment that is not a number is skipped as an operand ...
    assert evaluate_formula("2 * . + 3", 0) == 5
    # ... and counts as zero when it opens the chain.
    assert evaluate_formula(". + 4", 0) == 4
    assert evaluate_formula("1.2.3 + 1", 0) == 1


def test_evaluation_has_no_hidden_state():
    first = evaluate_formula("abs(N) * 3 - (N + 2) / 4", -7.5)
    second = evaluate_formula("abs(N) * 3 - (N + 2) / 4", -7.5)
    assert first == second


def test_format_number_avoids_exponent_notation():
    assert format_number(1e-07) == "0.0000001"
    assert format_number(1e20) == "100000000000000000000"
    assert format_number(-2.5) == "-2.5"


def test_validate_formula():
    assert validate_formula("10000 * N + 2000").valid is True
    assert validate_formula("abs(N) * 0.5").valid is True

    missing = validate_formula("100 + 5")
    assert missing.valid is False
    assert missing.code == "MISSING_VARIABLE"

    assert validate_formula("").code == "EMPTY_FORMULA"
    assert validate_formula("N + x").code == "INVALID_CHARACTER"
    assert validate_formula("(N + 1").code == "UNBALANCED_PARENTHESES"
    assert validate_formula("N)(").code == "UNBALANCED_PARENTHESES"
    assert validate_formula("N / 0").code == "DIVISION_BY_ZERO"
