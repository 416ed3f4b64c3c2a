"""Input bundles handed to the analytics engine."""

import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Optional

from ledger_advisor.domain.models.account import Account, Security
from ledger_advisor.domain.models.goal import InvestmentGoal
from ledger_advisor.domain.models.thresholds import AlertThresholds
from ledger_advisor.domain.models.trade import Trade
from ledger_advisor.domain.models.transaction import AccountTransaction, HistoricalGain
from ledger_advisor.domain.models.valuation import MonthlyValuation


@dataclass
class LedgerSnapshot:
    """
    Point-in-time copy of every record the engine reads.

    CRUD collaborators own the records; edits and deletes simply produce a
    new snapshot. The engine never mutates one.
    """

    accounts: list[Account] = field(default_factory=list)
    securities: list[Security] = field(default_factory=list)
    trades: list[Trade] = field(default_factory=list)
    transactions: list[AccountTransaction] = field(default_factory=list)
    historical_gains: list[HistoricalGain] = field(default_factory=list)
    valuations: list[MonthlyValuation] = field(default_factory=list)
    goals: list[InvestmentGoal] = field(default_factory=list)

    @property
    def account_ids(self) -> frozenset[str]:
        return frozenset(a.account_id for a in self.accounts)

    @property
    def security_map(self) -> dict[str, Security]:
        return {s.security_id: s for s in self.securities}

    def first_event_date(self) -> Optional[date]:
        """Earliest dated trade, transaction or historical gain."""
        dates = [t.trade_date for t in self.trades if t.trade_date]
        dates += [t.txn_date for t in self.transactions if t.txn_date]
        dates += [g.gain_date for g in self.historical_gains if g.gain_date]
        return min(dates) if dates else None


@dataclass
class MarketInputs:
    """
    Non-ledger inputs: prices, targets, thresholds and the evaluation date.

    as_of is "today" for every time-dependent metric; None means the local
    calendar date at call time.
    """

    prices: dict[str, Any] = field(default_factory=dict)
    target_weights: dict[str, Any] = field(default_factory=dict)
    thresholds: AlertThresholds = field(default_factory=AlertThresholds.default)
    as_of: Optional[date] = None


def fingerprint(*parts: Any) -> str:
    """Stable SHA-256 digest of dataclass/dict/list inputs."""
    payload = [asdict(p) if hasattr(p, "__dataclass_fields__") else p for p in parts]
    encoded = json.dumps(payload, default=str, sort_keys=True)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()
