"""Rebalancing scenario generation and simulation."""

import logging
from collections.abc import Iterable
from typing import Optional

from ledger_advisor.config.settings import get_settings
from ledger_advisor.core.exceptions import NotFoundError
from ledger_advisor.core.numbers import parse_number, percent_of
from ledger_advisor.domain.models import AlertThresholds, ScenarioKind, TradeSide
from ledger_advisor.domain.views import (
    CategorySimulationRow,
    DeviationReport,
    ProposedTrade,
    RebalancePlan,
    RebalanceScenario,
    RebalanceTrade,
    SecurityWeight,
    SimulationResult,
)
from ledger_advisor.services.deviation_classifier import (
    classify_level,
    disparity_ratio,
    resolve_threshold,
)

logger = logging.getLogger(__name__)

# Category rows below this weight (%) on both sides are omitted from simulations
_MIN_VISIBLE_WEIGHT = 0.01


class RebalancePlanner:
    """
    Derives trade proposals that move one security back to its target weight.

    Two scenarios are offered:
    - external funding: new money buys the security until it reaches its
      target weight of the enlarged total
    - internal reallocation: overweight holdings fund underweight ones,
      leaving the total unchanged
    """

    def __init__(self, min_trade_amount: Optional[float] = None):
        if min_trade_amount is None:
            min_trade_amount = get_settings().min_trade_amount
        self._min_trade = min_trade_amount

    def plan(
        self,
        security_id: str,
        report: DeviationReport,
        thresholds: Optional[AlertThresholds] = None,
    ) -> RebalancePlan:
        """Build both scenarios for a security together with their simulations."""
        row = report.security(security_id)
        if row is None:
            raise NotFoundError("Security", security_id)

        plan = RebalancePlan(security_id=security_id)
        plan.external_funding = self.external_funding(row, report)
        if plan.external_funding is not None:
            plan.external_simulation = self.simulate(
                report,
                plan.external_funding.trades,
                plan.external_funding.portfolio_change,
                thresholds,
            )
        plan.internal_reallocation = self.internal_reallocation(row, report)
        if plan.internal_reallocation is not None:
            plan.internal_simulation = self.simulate(
                report,
                plan.internal_reallocation.trades,
                0.0,
                thresholds,
            )
        return plan

    def external_funding(
        self,
        row: SecurityWeight,
        report: DeviationReport,
    ) -> Optional[RebalanceScenario]:
        """
        New capital X that brings an underweight security to target.

        Formula: X = (W·T − V) / (1 − W), with W the target as a decimal.
        """
        if row.deviation >= 0:
            return None
        weight = row.target_weight / 100
        if weight >= 1:
            return None
        amount = (weight * report.total_tracked_value - row.current_value) / (1 - weight)
        if amount <= self._min_trade:
            return None

        return RebalanceScenario(
            kind=ScenarioKind.EXTERNAL_FUNDING,
            trades=[RebalanceTrade(row.security_id, row.name, TradeSide.BUY, amount)],
            amount=amount,
            portfolio_change=amount,
        )

    def internal_reallocation(
        self,
        row: SecurityWeight,
        report: DeviationReport,
    ) -> Optional[RebalanceScenario]:
        """
        Sell/buy legs that fix the security without new money.

        Legs are proportional to each counterpart's excess (or shortfall),
        scaled so that total sells equal total buys.
        """
        total = report.total_tracked_value
        others = [r for r in report.securities if r.security_id != row.security_id]

        if row.deviation < 0:
            needed = row.target_weight / 100 * total - row.current_value
            donors = [r for r in others if r.deviation > 0]
            excess = {r.security_id: r.current_value - r.target_weight / 100 * total for r in donors}
            pool = sum(excess.values())
            scale = min(needed, pool)
            if scale <= self._min_trade:
                return None
            legs = self._proportional_legs(donors, excess, pool, scale, TradeSide.SELL)
            trades = legs + [RebalanceTrade(row.security_id, row.name, TradeSide.BUY, scale)]
        else:
            to_sell = row.current_value - row.target_weight / 100 * total
            takers = [r for r in others if r.deviation < 0]
            required = {r.security_id: abs(r.required_purchase) for r in takers}
            pool = sum(required.values())
            scale = min(to_sell, pool)
            if scale <= self._min_trade:
                return None
            legs = self._proportional_legs(takers, required, pool, scale, TradeSide.BUY)
            trades = [RebalanceTrade(row.security_id, row.name, TradeSide.SELL, scale)] + legs

        return RebalanceScenario(
            kind=ScenarioKind.INTERNAL_REALLOCATION,
            trades=trades,
            amount=scale,
            portfolio_change=0.0,
        )

    @staticmethod
    def _proportional_legs(
        rows: list[SecurityWeight],
        shares: dict[str, float],
        pool: float,
        scale: float,
        side: TradeSide,
    ) -> list[RebalanceTrade]:
        legs = [
            RebalanceTrade(r.security_id, r.name, side, shares[r.security_id] / pool * scale)
            for r in rows
        ]
        legs = [leg for leg in legs if leg.amount > 0]
        legs.sort(key=lambda leg: leg.amount, reverse=True)
        return legs

    def simulate(
        self,
        report: DeviationReport,
        trades: Iterable[RebalanceTrade],
        portfolio_change: float,
        thresholds: Optional[AlertThresholds] = None,
    ) -> SimulationResult:
        """
        Project category weights after applying trades.

        The new total is the tracked total plus portfolio_change; nothing is
        written back to the report.
        """
        if thresholds is None:
            thresholds = AlertThresholds.default()

        changes: dict[str, float] = {}
        for trade in trades:
            changes[trade.security_id] = changes.get(trade.security_id, 0.0) + trade.signed_amount

        total_before = report.total_tracked_value
        total_after = total_before + portfolio_change

        new_values: dict[str, float] = {}
        for row in report.securities:
            new_values[row.category] = (
                new_values.get(row.category, 0.0)
                + row.current_value
                + changes.get(row.security_id, 0.0)
            )

        rows = []
        for category in report.categories:
            new_weight = percent_of(new_values.get(category.category, 0.0), total_after)
            if total_after <= 0:
                new_weight = 0.0
            if category.current_weight <= _MIN_VISIBLE_WEIGHT and new_weight <= _MIN_VISIBLE_WEIGHT:
                continue
            level = classify_level(
                disparity_ratio(new_weight - category.target_weight, category.target_weight),
                resolve_threshold(thresholds, "caution", category=category.category),
                resolve_threshold(thresholds, "warning", category=category.category),
            )
            rows.append(
                CategorySimulationRow(
                    category=category.category,
                    current_weight=category.current_weight,
                    new_weight=new_weight,
                    target_weight=category.target_weight,
                    new_level=level,
                )
            )

        return SimulationResult(rows=rows, total_before=total_before, total_after=total_after)

    def simulate_manual(
        self,
        report: DeviationReport,
        proposed: Iterable[ProposedTrade],
        thresholds: Optional[AlertThresholds] = None,
    ) -> tuple[RebalanceScenario, SimulationResult]:
        """
        Simulate user-entered trade amounts.

        Rows for unknown securities, with an unrecognised side or with a
        non-positive amount are skipped. Buys add to the total, sells take
        from it.
        """
        trades = []
        for item in proposed:
            row = report.security(item.security_id)
            side = TradeSide.parse(item.side)
            amount = parse_number(item.amount)
            if row is None or side is None or amount <= 0:
                logger.debug(f"Ignoring proposed trade for {item.security_id}")
                continue
            trades.append(RebalanceTrade(row.security_id, row.name, side, amount))

        change = sum(t.signed_amount for t in trades)
        scenario = RebalanceScenario(
            kind=ScenarioKind.MANUAL,
            trades=trades,
            amount=sum(t.amount for t in trades),
            portfolio_change=change,
        )
        return scenario, self.simulate(report, trades, change, thresholds)
