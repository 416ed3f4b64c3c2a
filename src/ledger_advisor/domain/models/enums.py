"""Enumerations for domain models."""

from enum import Enum
from typing import Optional


class _LenientEnum(str, Enum):
    """String enum that can be parsed from free-form input without raising."""

    @classmethod
    def parse(cls, value) -> Optional["_LenientEnum"]:
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class TradeSide(_LenientEnum):
    """Direction of a trade."""

    BUY = "BUY"
    SELL = "SELL"


class TransactionKind(_LenientEnum):
    """Types of account cash movements."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    DIVIDEND = "DIVIDEND"


class GoalType(_LenientEnum):
    """How an investment goal measures progress."""

    AMOUNT = "AMOUNT"
    SHARES = "SHARES"


class AlertLevel(str, Enum):
    """Alert tier of a weight deviation."""

    NONE = "NONE"
    CAUTION = "CAUTION"
    WARNING = "WARNING"


class GroupBy(str, Enum):
    """Grouping key for reconstructed holdings."""

    SECURITY = "SECURITY"
    SECURITY_ACCOUNT = "SECURITY_ACCOUNT"


class ScenarioKind(str, Enum):
    """Kinds of rebalancing scenario."""

    EXTERNAL_FUNDING = "EXTERNAL_FUNDING"
    INTERNAL_REALLOCATION = "INTERNAL_REALLOCATION"
    MANUAL = "MANUAL"
