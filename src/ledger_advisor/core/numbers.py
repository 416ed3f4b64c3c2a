"""Numeric coercion helpers.

Ledger rows come from hand-edited records, so every amount goes through
``parse_number`` before it takes part in a calculation.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_number(value: Any) -> float:
    """Parse a value as a finite float; anything else becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, Decimal):
        try:
            number = float(value)
        except (InvalidOperation, ValueError):
            return 0.0
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 instead of raising or producing NaN/inf."""
    if denominator == 0:
        return 0.0
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def percent_of(numerator: float, denominator: float) -> float:
    """numerator / denominator x 100, 0.0 when the denominator is zero."""
    return safe_divide(numerator, denominator) * 100
