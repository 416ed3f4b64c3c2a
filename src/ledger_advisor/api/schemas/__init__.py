"""Pydantic schemas for API request/response."""

from ledger_advisor.api.schemas.inputs import (
    AnalysisRequest,
    SimulationRequest,
    LedgerIn,
    MarketIn,
    ProposedTradeIn,
)
from ledger_advisor.api.schemas.analysis import (
    HoldingResponse,
    HoldingsResponse,
    RealizedGainResponse,
    RealizedGainsResponse,
    PortfolioResponse,
    ReturnMetricsResponse,
    DeviationReportResponse,
    MonthlyPnlPointResponse,
    MonthlyPnlResponse,
    ContributionTrendPointResponse,
    ContributionTrendResponse,
    GoalProgressResponse,
    GoalsResponse,
    SummaryResponse,
)
from ledger_advisor.api.schemas.rebalancing import (
    RebalanceScenarioResponse,
    SimulationResultResponse,
    RebalancePlanResponse,
    ManualSimulationResponse,
)

__all__ = [
    "AnalysisRequest",
    "SimulationRequest",
    "LedgerIn",
    "MarketIn",
    "ProposedTradeIn",
    "HoldingResponse",
    "HoldingsResponse",
    "RealizedGainResponse",
    "RealizedGainsResponse",
    "PortfolioResponse",
    "ReturnMetricsResponse",
    "DeviationReportResponse",
    "MonthlyPnlPointResponse",
    "MonthlyPnlResponse",
    "ContributionTrendPointResponse",
    "ContributionTrendResponse",
    "GoalProgressResponse",
    "GoalsResponse",
    "SummaryResponse",
    "RebalanceScenarioResponse",
    "SimulationResultResponse",
    "RebalancePlanResponse",
    "ManualSimulationResponse",
]
