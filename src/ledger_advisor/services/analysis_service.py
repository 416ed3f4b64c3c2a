"""Analysis service composing the engine over ledger snapshots."""

import logging
from collections import OrderedDict
from collections.abc import Callable, Iterable
from datetime import date
from typing import Any, Optional, TypeVar

from ledger_advisor.config.settings import get_settings
from ledger_advisor.core.dates import today_local
from ledger_advisor.domain.models import GroupBy, LedgerSnapshot, MarketInputs, fingerprint
from ledger_advisor.domain.views import (
    AlertReport,
    ContributionTrendPoint,
    DeviationReport,
    GoalProgress,
    HoldingsResult,
    MonthlyPnlPoint,
    PortfolioSnapshot,
    PortfolioSummary,
    ProposedTrade,
    RealizedGain,
    RebalancePlan,
    RebalanceScenario,
    ReturnMetrics,
    SimulationResult,
)
from ledger_advisor.services.cash_reconciler import CashReconciler
from ledger_advisor.services.deviation_classifier import DeviationClassifier
from ledger_advisor.services.goal_tracker import GoalTracker
from ledger_advisor.services.holdings_engine import HoldingsEngine, combined_realized_gains
from ledger_advisor.services.rebalance_planner import RebalancePlanner
from ledger_advisor.services.return_metrics import (
    ReturnMetricsCalculator,
    contribution_trend,
    monthly_pnl,
)
from ledger_advisor.services.valuation_aggregator import ValuationAggregator, value_by_security

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResultCache:
    """
    Bounded LRU of computed results keyed by input fingerprint.

    Only results of pure computations are stored, so an entry never goes
    stale: different inputs produce a different key.
    """

    def __init__(self, max_size: int = 32):
        self._max_size = max_size
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        if key in self._entries:
            self._entries.move_to_end(key)
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        value = compute()
        if self._max_size > 0:
            self._entries[key] = value
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class AnalysisService:
    """
    Service for portfolio analytics and rebalancing.

    Every query is a pure function of (LedgerSnapshot, MarketInputs); the
    ledger folds behind holdings, valuations and deviations are memoized.
    """

    def __init__(
        self,
        holdings_engine: Optional[HoldingsEngine] = None,
        cash_reconciler: Optional[CashReconciler] = None,
        return_calculator: Optional[ReturnMetricsCalculator] = None,
        deviation_classifier: Optional[DeviationClassifier] = None,
        rebalance_planner: Optional[RebalancePlanner] = None,
        cache: Optional[ResultCache] = None,
    ):
        self._holdings = holdings_engine or HoldingsEngine()
        self._cash = cash_reconciler or CashReconciler()
        self._valuation = ValuationAggregator(self._holdings, self._cash)
        self._returns = return_calculator or ReturnMetricsCalculator()
        self._classifier = deviation_classifier or DeviationClassifier()
        self._planner = rebalance_planner or RebalancePlanner()
        self._goals = GoalTracker(self._holdings)
        self._cache = cache or ResultCache(get_settings().analysis_cache_size)

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def _memo(self, name: str, compute: Callable[[], T], *parts: Any) -> T:
        return self._cache.get_or_compute(f"{name}:{fingerprint(*parts)}", compute)

    @staticmethod
    def _as_of(market: MarketInputs) -> date:
        return market.as_of or today_local()

    def holdings(
        self,
        ledger: LedgerSnapshot,
        *,
        account_id: Optional[str] = None,
        goal_id: Optional[str] = None,
        by_account: bool = False,
    ) -> HoldingsResult:
        """Reconstruct holdings, optionally for one account or goal."""
        group_by = GroupBy.SECURITY_ACCOUNT if by_account else GroupBy.SECURITY

        def compute() -> HoldingsResult:
            return self._holdings.reconstruct(
                ledger.trades,
                account_id=account_id,
                goal_id=goal_id,
                group_by=group_by,
                known_security_ids=ledger.security_map.keys(),
            )

        return self._memo(
            "holdings",
            compute,
            ledger,
            {"account_id": account_id, "goal_id": goal_id, "group_by": group_by.value},
        )

    def realized_gains(
        self,
        ledger: LedgerSnapshot,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        account_id: Optional[str] = None,
        security_id: Optional[str] = None,
    ) -> list[RealizedGain]:
        """Sell events and historical gains, newest first."""
        return combined_realized_gains(
            self.holdings(ledger),
            ledger.historical_gains,
            year=year,
            month=month,
            account_id=account_id,
            security_id=security_id,
        )

    def portfolio(self, ledger: LedgerSnapshot, market: MarketInputs) -> PortfolioSnapshot:
        """Account and portfolio valuations at current prices."""

        def compute() -> PortfolioSnapshot:
            return self._valuation.portfolio_snapshot(
                ledger.accounts,
                ledger.trades,
                ledger.transactions,
                ledger.historical_gains,
                ledger.securities,
                market.prices,
            )

        return self._memo("portfolio", compute, ledger, market.prices)

    def returns(self, ledger: LedgerSnapshot, market: MarketInputs) -> ReturnMetrics:
        """Cumulative, money-weighted, time-weighted and YTD returns."""
        snapshot = self.portfolio(ledger, market)
        as_of = self._as_of(market)
        return self._returns.calculate(
            total_value=snapshot.total_value,
            transactions=ledger.transactions,
            valuations=ledger.valuations,
            internal_account_ids=ledger.account_ids,
            as_of=as_of,
            first_event_date=ledger.first_event_date(),
        )

    def deviations(self, ledger: LedgerSnapshot, market: MarketInputs) -> DeviationReport:
        """Current vs target weights with alert tiers."""

        def compute() -> DeviationReport:
            fold = self.holdings(ledger)
            values = value_by_security(fold.holdings, ledger.security_map, market.prices)
            return self._classifier.classify(
                ledger.securities,
                values,
                market.target_weights,
                market.thresholds,
            )

        return self._memo(
            "deviations",
            compute,
            ledger,
            market.prices,
            market.target_weights,
            market.thresholds,
        )

    def alerts(self, ledger: LedgerSnapshot, market: MarketInputs) -> AlertReport:
        return self.deviations(ledger, market).alerts

    def rebalance_plan(
        self,
        ledger: LedgerSnapshot,
        market: MarketInputs,
        security_id: str,
    ) -> RebalancePlan:
        """Both rebalancing scenarios for one security. Raises NotFoundError."""
        report = self.deviations(ledger, market)
        return self._planner.plan(security_id, report, market.thresholds)

    def simulate_trades(
        self,
        ledger: LedgerSnapshot,
        market: MarketInputs,
        proposed: Iterable[ProposedTrade],
    ) -> tuple[RebalanceScenario, SimulationResult]:
        report = self.deviations(ledger, market)
        return self._planner.simulate_manual(report, proposed, market.thresholds)

    def goals(self, ledger: LedgerSnapshot, market: MarketInputs) -> list[GoalProgress]:
        return self._goals.progress_all(
            ledger.goals,
            ledger.trades,
            ledger.security_map,
            market.prices,
            self._as_of(market),
        )

    def monthly_pnl(self, ledger: LedgerSnapshot, year: int) -> list[MonthlyPnlPoint]:
        return monthly_pnl(ledger.valuations, ledger.transactions, ledger.account_ids, year)

    def contribution_trend(self, ledger: LedgerSnapshot) -> list[ContributionTrendPoint]:
        return contribution_trend(ledger.valuations, ledger.transactions, ledger.account_ids)

    def summary(self, ledger: LedgerSnapshot, market: MarketInputs) -> PortfolioSummary:
        """Headline valuation, returns and alerts in one call."""
        return PortfolioSummary(
            portfolio=self.portfolio(ledger, market),
            returns=self.returns(ledger, market),
            alerts=self.alerts(ledger, market),
            as_of=self._as_of(market),
        )
