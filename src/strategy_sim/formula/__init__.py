"""Arithmetic formulas over the bound variable N."""

from strategy_sim.formula.errors import (
    DivisionByZeroError,
    EmptyFormulaError,
    FormulaError,
    InvalidCharacterError,
    MissingVariableError,
    UnbalancedParenthesesError,
)
from strategy_sim.formula.evaluator import (
    FORMULA_EXAMPLES,
    VARIABLE,
    FormulaCheck,
    evaluate_formula,
    validate_formula,
)

__all__ = [
    "DivisionByZeroError",
    "EmptyFormulaError",
    "FORMULA_EXAMPLES",
    "FormulaCheck",
    "FormulaError",
    "InvalidCharacterError",
    "MissingVariableError",
    "UnbalancedParenthesesError",
    "VARIABLE",
    "evaluate_formula",
    "validate_formula",
]
