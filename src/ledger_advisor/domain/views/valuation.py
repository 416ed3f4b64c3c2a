"""View models for cash and valuation outputs."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ledger_advisor.domain.views.deviation import AlertReport
from ledger_advisor.domain.views.returns import ReturnMetrics


@dataclass(frozen=True)
class CashPosition:
    """Reconciled cash of one account."""

    account_id: str
    cash_balance: float = 0.0
    gross_inflow: float = 0.0
    net_contributions: float = 0.0
    internal_transfers: float = 0.0
    trade_cash_flow: float = 0.0
    historical_pnl: float = 0.0


@dataclass(frozen=True)
class PositionValue:
    """A holding priced at the current market price."""

    security_id: str
    ticker: str
    name: str
    quantity: float
    average_cost: float
    cost_basis: float
    price: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_rate: float


@dataclass(frozen=True)
class AccountSnapshot:
    """Valuation of one account."""

    account_id: str
    name: str = ""
    cash_balance: float = 0.0
    securities_value: float = 0.0
    total_value: float = 0.0
    net_contributions: float = 0.0
    profit_loss: float = 0.0
    return_rate: float = 0.0
    internal_transfers: float = 0.0
    positions: tuple[PositionValue, ...] = ()


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Valuation summed across all accounts."""

    accounts: tuple[AccountSnapshot, ...] = ()
    cash_balance: float = 0.0
    securities_value: float = 0.0
    total_value: float = 0.0
    net_contributions: float = 0.0
    profit_loss: float = 0.0
    return_rate: float = 0.0

    def account(self, account_id: str) -> Optional[AccountSnapshot]:
        for snapshot in self.accounts:
            if snapshot.account_id == account_id:
                return snapshot
        return None


@dataclass
class PortfolioSummary:
    """Headline figures: valuation, returns and current alerts."""

    portfolio: PortfolioSnapshot
    returns: ReturnMetrics
    alerts: AlertReport
    as_of: Optional[date] = None
