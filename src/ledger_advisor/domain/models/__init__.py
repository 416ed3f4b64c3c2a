"""Domain models package."""

from ledger_advisor.domain.models.enums import (
    TradeSide,
    TransactionKind,
    GoalType,
    AlertLevel,
    GroupBy,
    ScenarioKind,
)
from ledger_advisor.domain.models.account import Account, Security
from ledger_advisor.domain.models.trade import Trade
from ledger_advisor.domain.models.transaction import AccountTransaction, HistoricalGain
from ledger_advisor.domain.models.valuation import MonthlyValuation
from ledger_advisor.domain.models.goal import InvestmentGoal
from ledger_advisor.domain.models.thresholds import (
    Thresholds,
    ThresholdOverride,
    AlertThresholds,
)
from ledger_advisor.domain.models.ledger import LedgerSnapshot, MarketInputs, fingerprint

__all__ = [
    "TradeSide",
    "TransactionKind",
    "GoalType",
    "AlertLevel",
    "GroupBy",
    "ScenarioKind",
    "Account",
    "Security",
    "Trade",
    "AccountTransaction",
    "HistoricalGain",
    "MonthlyValuation",
    "InvestmentGoal",
    "Thresholds",
    "ThresholdOverride",
    "AlertThresholds",
    "LedgerSnapshot",
    "MarketInputs",
    "fingerprint",
]
