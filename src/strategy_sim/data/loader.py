"""Load price observations from CSV files."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from strategy_sim.data.models import PriceObservation

REQUIRED_COLUMNS = ("date", "open", "high", "low", "close")


def load_prices_csv(path: str | Path) -> list[PriceObservation]:
    path = Path(path)
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        missing = [column for column in REQUIRED_COLUMNS if column not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing columns {', '.join(missing)}")

        prices: list[PriceObservation] = []
        for line_number, row in enumerate(reader, start=2):
            try:
                prices.append(
                    PriceObservation(
                        date=date.fromisoformat(row["date"].strip()),
                        open=float(row["open"]),
                        high=float(row["high"]),
                        low=float(row["low"]),
                        close=float(row["close"]),
                        volume=float(row.get("volume") or 0.0),
                    )
                )
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{path}:{line_number}: invalid price row ({exc})") from exc

    return prices


def filter_prices(
    prices: Iterable[PriceObservation],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[PriceObservation]:
    selected = []
    for price in prices:
        if start_date is not None and price.date < start_date:
            continue
        if end_date is not None and price.date > end_date:
            continue
        selected.append(price)
    return selected
