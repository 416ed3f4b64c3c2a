"""View models for service outputs."""

from ledger_advisor.domain.views.holdings import Holding, RealizedGain, HoldingsResult
from ledger_advisor.domain.views.valuation import (
    CashPosition,
    PositionValue,
    AccountSnapshot,
    PortfolioSnapshot,
    PortfolioSummary,
)
from ledger_advisor.domain.views.returns import (
    CashFlowPoint,
    ReturnMetrics,
    MonthlyPnlPoint,
    ContributionTrendPoint,
)
from ledger_advisor.domain.views.deviation import (
    SecurityWeight,
    CategoryWeight,
    CategoryAlertGroup,
    AlertReport,
    DeviationReport,
)
from ledger_advisor.domain.views.rebalancing import (
    RebalanceTrade,
    RebalanceScenario,
    CategorySimulationRow,
    SimulationResult,
    RebalancePlan,
    ProposedTrade,
)
from ledger_advisor.domain.views.goals import GoalHolding, GoalProgress

__all__ = [
    "Holding",
    "RealizedGain",
    "HoldingsResult",
    "CashPosition",
    "PositionValue",
    "AccountSnapshot",
    "PortfolioSnapshot",
    "PortfolioSummary",
    "CashFlowPoint",
    "ReturnMetrics",
    "MonthlyPnlPoint",
    "ContributionTrendPoint",
    "SecurityWeight",
    "CategoryWeight",
    "CategoryAlertGroup",
    "AlertReport",
    "DeviationReport",
    "RebalanceTrade",
    "RebalanceScenario",
    "CategorySimulationRow",
    "SimulationResult",
    "RebalancePlan",
    "ProposedTrade",
    "GoalHolding",
    "GoalProgress",
]
