"""Date utilities for ledger rows."""

from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser

from ledger_advisor.config.settings import get_settings

DateLike = Union[date, datetime, str, None]


def local_timezone() -> pytz.BaseTzInfo:
    """Return the configured local timezone."""
    return pytz.timezone(get_settings().timezone)


def now_local() -> datetime:
    """Return current time in the configured timezone."""
    return datetime.now(local_timezone())


def today_local() -> date:
    """Return today's calendar date in the configured timezone."""
    return now_local().date()


def parse_date(value: DateLike) -> Optional[date]:
    """
    Parse a ledger date into a calendar date.

    Accepts date, datetime (aware datetimes are converted to the local zone
    first) or any string dateutil understands. Returns None when the value is
    missing or cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(local_timezone())
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = date_parser.parse(text)
    except (ValueError, OverflowError):
        return None
    return parse_date(parsed)
