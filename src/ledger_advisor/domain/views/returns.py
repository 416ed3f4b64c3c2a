"""View models for return metrics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CashFlowPoint:
    """
    Dated cash flow used as XIRR input.

    Capital leaving the investor (deposits) is negative; capital returning
    (withdrawals, terminal valuation) is positive.
    """

    flow_date: date
    amount: float


@dataclass
class ReturnMetrics:
    """Portfolio return figures, all in percent."""

    cumulative_return: float = 0.0
    money_weighted_return: float = 0.0
    time_weighted_return: float = 0.0
    annualized_time_weighted_return: float = 0.0
    ytd_return: float = 0.0
    ytd_profit: float = 0.0
    ytd_base: float = 0.0
    simple_annualized_return: float = 0.0
    years_elapsed: float = 0.0
    net_external_contributions: float = 0.0
    profit_loss: float = 0.0
    total_value: float = 0.0


@dataclass(frozen=True)
class MonthlyPnlPoint:
    """Profit between two consecutive valuations, net of external flows."""

    valuation_date: date
    label: str
    profit_loss: float


@dataclass(frozen=True)
class ContributionTrendPoint:
    """Recorded value against cumulative external contributions."""

    valuation_date: date
    total_value: float
    cumulative_contributions: float
    profit_loss: float
    profit_loss_rate: float
