"""Input integrity errors that abort a simulation run."""

from __future__ import annotations


class DataIntegrityError(ValueError):
    EMPTY_PRICES = "EMPTY_PRICES"
    NON_MONOTONIC_DATES = "NON_MONOTONIC_DATES"
    NON_POSITIVE_PRICE = "NON_POSITIVE_PRICE"

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
