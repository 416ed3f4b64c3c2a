"""Core utilities and shared functionality."""

from ledger_advisor.core.dates import (
    local_timezone,
    now_local,
    today_local,
    parse_date,
)
from ledger_advisor.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
)
from ledger_advisor.core.numbers import (
    parse_number,
    safe_divide,
    percent_of,
)

__all__ = [
    "local_timezone",
    "now_local",
    "today_local",
    "parse_date",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "parse_number",
    "safe_divide",
    "percent_of",
]
