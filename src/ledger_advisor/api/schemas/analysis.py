"""Pydantic schemas for analysis responses.

Each model reads the matching view dataclass through from_attributes.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ledger_advisor.domain.models import AlertLevel


class ViewModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class HoldingResponse(ViewModel):
    """Response schema for a reconstructed holding."""

    security_id: str
    account_id: Optional[str] = None
    quantity: float
    cost_basis: float
    average_cost: float


class HoldingsResponse(BaseModel):
    holdings: list[HoldingResponse]
    total_realized_pnl: float


class RealizedGainResponse(ViewModel):
    """Response schema for a sell event or historical gain."""

    source_id: str
    account_id: str
    security_id: Optional[str] = None
    label: str
    gain_date: Optional[date] = None
    realized_pnl: float
    quantity: Optional[float] = None
    sell_amount: Optional[float] = None
    pnl_rate: Optional[float] = None
    is_historical: bool = False


class RealizedGainsResponse(BaseModel):
    gains: list[RealizedGainResponse]
    total_realized_pnl: float


class PositionValueResponse(ViewModel):
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


class AccountSnapshotResponse(ViewModel):
    """Response schema for one account's valuation."""

    account_id: str
    name: str
    cash_balance: float
    securities_value: float
    total_value: float
    net_contributions: float
    profit_loss: float
    return_rate: float
    internal_transfers: float
    positions: list[PositionValueResponse]


class PortfolioResponse(ViewModel):
    """Response schema for the portfolio valuation."""

    accounts: list[AccountSnapshotResponse]
    cash_balance: float
    securities_value: float
    total_value: float
    net_contributions: float
    profit_loss: float
    return_rate: float


class ReturnMetricsResponse(ViewModel):
    """Response schema for return metrics (percentages)."""

    cumulative_return: float
    money_weighted_return: float
    time_weighted_return: float
    annualized_time_weighted_return: float
    ytd_return: float
    ytd_profit: float
    ytd_base: float
    simple_annualized_return: float
    years_elapsed: float
    net_external_contributions: float
    profit_loss: float
    total_value: float


class SecurityWeightResponse(ViewModel):
    security_id: str
    ticker: str
    name: str
    category: str
    current_value: float
    current_weight: float
    target_weight: float
    deviation: float
    disparity_ratio: float
    required_purchase: float
    caution_threshold: float
    warning_threshold: float
    level: AlertLevel


class CategoryWeightResponse(ViewModel):
    category: str
    current_value: float
    current_weight: float
    target_weight: float
    deviation: float
    disparity_ratio: float
    level: AlertLevel
    securities: list[SecurityWeightResponse]


class CategoryAlertGroupResponse(ViewModel):
    category: str
    warnings: list[SecurityWeightResponse]
    cautions: list[SecurityWeightResponse]


class AlertReportResponse(ViewModel):
    """Response schema for alerts, warnings first."""

    warnings: list[SecurityWeightResponse]
    cautions: list[SecurityWeightResponse]
    groups: list[CategoryAlertGroupResponse]
    category_warnings: list[CategoryWeightResponse]
    category_cautions: list[CategoryWeightResponse]


class DeviationReportResponse(ViewModel):
    """Response schema for the weight deviation snapshot."""

    total_tracked_value: float
    securities: list[SecurityWeightResponse]
    categories: list[CategoryWeightResponse]
    alerts: AlertReportResponse


class MonthlyPnlPointResponse(ViewModel):
    valuation_date: date
    label: str
    profit_loss: float


class MonthlyPnlResponse(BaseModel):
    year: int
    points: list[MonthlyPnlPointResponse]
    total_profit_loss: float


class ContributionTrendPointResponse(ViewModel):
    valuation_date: date
    total_value: float
    cumulative_contributions: float
    profit_loss: float
    profit_loss_rate: float


class ContributionTrendResponse(BaseModel):
    points: list[ContributionTrendPointResponse]


class GoalHoldingResponse(ViewModel):
    security_id: str
    name: str
    quantity: float
    average_price: float
    current_value: float
    profit_loss: float
    pnl_rate: float


class GoalProgressResponse(ViewModel):
    """Response schema for one goal's progress."""

    goal_id: str
    name: str
    invested_principal: float
    current_value: float
    target_value: float
    progress: float
    days_elapsed: int
    holdings: list[GoalHoldingResponse]


class GoalsResponse(BaseModel):
    goals: list[GoalProgressResponse]


class SummaryResponse(ViewModel):
    """Response schema for the headline summary."""

    portfolio: PortfolioResponse
    returns: ReturnMetricsResponse
    alerts: AlertReportResponse
    as_of: Optional[date] = None
