"""Pydantic schemas for rebalancing responses."""

from typing import Optional

from ledger_advisor.api.schemas.analysis import ViewModel
from ledger_advisor.domain.models import AlertLevel, ScenarioKind, TradeSide


class RebalanceTradeResponse(ViewModel):
    security_id: str
    name: str
    side: TradeSide
    amount: float


class RebalanceScenarioResponse(ViewModel):
    """Response schema for a trade list."""

    kind: ScenarioKind
    trades: list[RebalanceTradeResponse]
    amount: float
    portfolio_change: float
    total_buy: float
    total_sell: float


class CategorySimulationRowResponse(ViewModel):
    category: str
    current_weight: float
    new_weight: float
    target_weight: float
    new_level: AlertLevel


class SimulationResultResponse(ViewModel):
    """Response schema for projected category weights."""

    rows: list[CategorySimulationRowResponse]
    total_before: float
    total_after: float


class RebalancePlanResponse(ViewModel):
    """Response schema for both scenarios of one security."""

    security_id: str
    external_funding: Optional[RebalanceScenarioResponse] = None
    external_simulation: Optional[SimulationResultResponse] = None
    internal_reallocation: Optional[RebalanceScenarioResponse] = None
    internal_simulation: Optional[SimulationResultResponse] = None


class ManualSimulationResponse(ViewModel):
    scenario: RebalanceScenarioResponse
    simulation: SimulationResultResponse
