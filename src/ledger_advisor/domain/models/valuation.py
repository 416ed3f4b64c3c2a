"""Recorded valuation history."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ledger_advisor.core.dates import parse_date
from ledger_advisor.core.numbers import parse_number


@dataclass
class MonthlyValuation:
    """Total portfolio value recorded at a month end (or any closing date)."""

    valuation_id: str
    valuation_date: Optional[date]
    total_value: Any

    def __post_init__(self) -> None:
        self.valuation_date = parse_date(self.valuation_date)

    @property
    def value(self) -> float:
        return parse_number(self.total_value)
