"""Formula error hierarchy."""

from __future__ import annotations


class FormulaError(ValueError):
    code = "FORMULA_ERROR"


class EmptyFormulaError(FormulaError):
    code = "EMPTY_FORMULA"


class MissingVariableError(FormulaError):
    code = "MISSING_VARIABLE"


class InvalidCharacterError(FormulaError):
    code = "INVALID_CHARACTER"


class UnbalancedParenthesesError(FormulaError):
    code = "UNBALANCED_PARENTHESES"


class DivisionByZeroError(FormulaError):
    code = "DIVISION_BY_ZERO"
