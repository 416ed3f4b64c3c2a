"""Domain layer - plain business models with no framework dependencies."""

from ledger_advisor.domain.models import (
    Account,
    Security,
    Trade,
    AccountTransaction,
    HistoricalGain,
    MonthlyValuation,
    InvestmentGoal,
    AlertThresholds,
    LedgerSnapshot,
    MarketInputs,
    TradeSide,
    TransactionKind,
    AlertLevel,
)

__all__ = [
    "Account",
    "Security",
    "Trade",
    "AccountTransaction",
    "HistoricalGain",
    "MonthlyValuation",
    "InvestmentGoal",
    "AlertThresholds",
    "LedgerSnapshot",
    "MarketInputs",
    "TradeSide",
    "TransactionKind",
    "AlertLevel",
]
