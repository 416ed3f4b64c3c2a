"""Goal tracker for goal-scoped trade sub-ledgers."""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from ledger_advisor.core.numbers import parse_number, percent_of
from ledger_advisor.domain.models import GoalType, InvestmentGoal, Security, Trade, TradeSide
from ledger_advisor.domain.views import GoalHolding, GoalProgress
from ledger_advisor.services.holdings_engine import HoldingsEngine
from ledger_advisor.services.valuation_aggregator import price_of


class GoalTracker:
    """
    Service for investment goal progress.

    A goal owns the trades tagged with its goal_id; they are folded on their
    own, independently of account grouping.
    """

    def __init__(self, holdings_engine: HoldingsEngine):
        self._holdings = holdings_engine

    def progress(
        self,
        goal: InvestmentGoal,
        trades: Iterable[Trade],
        securities: Mapping[str, Security],
        prices: Mapping[str, Any],
        as_of: date,
    ) -> GoalProgress:
        """
        Measure a goal against its target.

        - invested principal: buy amounts minus sell amounts
        - AMOUNT goals: current value / target_amount
        - SHARES goals: current value / value of target_shares at current prices
        """
        goal_trades = [t for t in trades if t.goal_id == goal.goal_id]
        fold = self._holdings.reconstruct(goal_trades, goal_id=goal.goal_id)

        invested = sum(
            t.gross_amount if t.side == TradeSide.BUY else -t.gross_amount
            for t in goal_trades
            if t.side is not None
        )

        current_value = 0.0
        holdings = []
        for holding in fold.holdings:
            security = securities.get(holding.security_id)
            price = price_of(security, prices)
            value = holding.quantity * price
            current_value += value
            if holding.quantity <= 0:
                continue
            profit = value - holding.cost_basis
            holdings.append(
                GoalHolding(
                    security_id=holding.security_id,
                    name=security.display_name if security else "",
                    quantity=holding.quantity,
                    average_price=holding.average_cost,
                    current_value=value,
                    profit_loss=profit,
                    pnl_rate=percent_of(profit, holding.cost_basis) if holding.cost_basis > 0 else 0.0,
                )
            )
        holdings.sort(key=lambda h: h.current_value, reverse=True)

        target_value = self._target_value(goal, securities, prices)
        start = goal.creation_date or as_of

        return GoalProgress(
            goal_id=goal.goal_id,
            name=goal.name,
            invested_principal=invested,
            current_value=current_value,
            target_value=target_value,
            progress=percent_of(current_value, target_value) if target_value > 0 else 0.0,
            days_elapsed=max(1, (as_of - start).days),
            holdings=holdings,
        )

    def progress_all(
        self,
        goals: Iterable[InvestmentGoal],
        trades: Iterable[Trade],
        securities: Mapping[str, Security],
        prices: Mapping[str, Any],
        as_of: date,
    ) -> list[GoalProgress]:
        trades = list(trades)
        return [self.progress(g, trades, securities, prices, as_of) for g in goals]

    @staticmethod
    def _target_value(
        goal: InvestmentGoal,
        securities: Mapping[str, Security],
        prices: Mapping[str, Any],
    ) -> float:
        if goal.goal_type == GoalType.SHARES:
            return sum(
                parse_number(shares) * price_of(securities.get(security_id), prices)
                for security_id, shares in goal.target_shares.items()
            )
        return max(parse_number(goal.target_amount), 0.0)
