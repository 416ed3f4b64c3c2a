"""Service layer - analytics and rebalancing engine."""

from ledger_advisor.services.holdings_engine import (
    HoldingsEngine,
    combined_realized_gains,
    total_realized_pnl,
)
from ledger_advisor.services.cash_reconciler import CashReconciler, net_external_contributions
from ledger_advisor.services.valuation_aggregator import ValuationAggregator, value_by_security
from ledger_advisor.services.return_metrics import ReturnMetricsCalculator, xirr
from ledger_advisor.services.deviation_classifier import (
    DeviationClassifier,
    resolve_threshold,
    classify_level,
)
from ledger_advisor.services.rebalance_planner import RebalancePlanner
from ledger_advisor.services.goal_tracker import GoalTracker
from ledger_advisor.services.analysis_service import AnalysisService, ResultCache

__all__ = [
    "HoldingsEngine",
    "combined_realized_gains",
    "total_realized_pnl",
    "CashReconciler",
    "net_external_contributions",
    "ValuationAggregator",
    "value_by_security",
    "ReturnMetricsCalculator",
    "xirr",
    "DeviationClassifier",
    "resolve_threshold",
    "classify_level",
    "RebalancePlanner",
    "GoalTracker",
    "AnalysisService",
    "ResultCache",
]
