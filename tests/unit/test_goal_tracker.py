"""
Unit tests for GoalTracker.

Tests cover:
- Goal sub-ledger folding and invested principal
- AMOUNT and SHARES progress
- Days elapsed
"""

from datetime import date

import pytest

from ledger_advisor.domain.models import InvestmentGoal
from ledger_advisor.services import GoalTracker, HoldingsEngine

from tests.conftest import assert_close, buy, make_security, sell

AS_OF = date(2024, 4, 1)
PRICES = {"SPY": 500, "BND": 60}


@pytest.fixture
def tracker() -> GoalTracker:
    return GoalTracker(HoldingsEngine())


@pytest.fixture
def securities():
    return {
        "spy": make_security("spy", "Equity"),
        "bnd": make_security("bnd", "Bond"),
    }


@pytest.fixture
def goal_trades():
    return [
        buy("spy", 10, 400, "2024-01-05", goal_id="g1"),
        buy("bnd", 10, 50, "2024-01-06", goal_id="g1"),
        sell("spy", 2, 450, "2024-02-01", goal_id="g1"),
        buy("spy", 100, 300, "2024-01-05"),
        buy("spy", 7, 300, "2024-01-05", goal_id="g2"),
    ]


def amount_goal(target=10000, creation_date="2024-01-01") -> InvestmentGoal:
    return InvestmentGoal(
        goal_id="g1",
        name="House",
        creation_date=creation_date,
        goal_type="AMOUNT",
        target_amount=target,
    )


class TestGoalProgress:
    """Tests for GoalTracker.progress."""

    def test_amount_goal(self, tracker, goal_trades, securities):
        """
        GIVEN goal trades: buy 10 SPY @400, buy 10 BND @50, sell 2 SPY @450
        WHEN I measure progress with SPY 500 and BND 60 against 10000
        THEN principal is 3600, value 4600 and progress 46%
        """
        progress = tracker.progress(amount_goal(), goal_trades, securities, PRICES, AS_OF)

        assert_close(progress.invested_principal, 3600)
        assert_close(progress.current_value, 4600)
        assert_close(progress.target_value, 10000)
        assert_close(progress.progress, 46.0)

    def test_goal_holdings(self, tracker, goal_trades, securities):
        progress = tracker.progress(amount_goal(), goal_trades, securities, PRICES, AS_OF)

        spy, bnd = progress.holdings
        assert spy.security_id == "spy"
        assert_close(spy.quantity, 8)
        assert_close(spy.average_price, 400)
        assert_close(spy.profit_loss, 800)
        assert_close(spy.pnl_rate, 25.0)
        assert bnd.security_id == "bnd"
        assert_close(bnd.profit_loss, 100)

    def test_shares_goal(self, tracker, goal_trades, securities):
        """
        GIVEN a SHARES goal of 20 SPY
        WHEN SPY trades at 500
        THEN the target value is 10000
        """
        goal = InvestmentGoal(
            goal_id="g1",
            name="Shares",
            goal_type="shares",
            target_shares={"spy": 20},
        )

        progress = tracker.progress(goal, goal_trades, securities, PRICES, AS_OF)

        assert_close(progress.target_value, 10000)
        assert_close(progress.progress, 46.0)

    def test_non_positive_target_gives_zero_progress(self, tracker, goal_trades, securities):
        progress = tracker.progress(
            amount_goal(target="-5"), goal_trades, securities, PRICES, AS_OF
        )

        assert progress.target_value == 0
        assert progress.progress == 0

    def test_days_elapsed(self, tracker, securities):
        progress = tracker.progress(amount_goal(), [], securities, PRICES, AS_OF)

        assert progress.days_elapsed == 91

    def test_days_elapsed_is_at_least_one(self, tracker, securities):
        progress = tracker.progress(
            amount_goal(creation_date=None), [], securities, PRICES, AS_OF
        )

        assert progress.days_elapsed == 1
        assert progress.holdings == []

    def test_progress_all_keeps_goal_order(self, tracker, goal_trades, securities):
        goals = [
            amount_goal(),
            InvestmentGoal(goal_id="g2", name="Car", target_amount=3500),
        ]

        results = tracker.progress_all(goals, goal_trades, securities, PRICES, AS_OF)

        assert [r.goal_id for r in results] == ["g1", "g2"]
        assert_close(results[1].current_value, 3500)
        assert_close(results[1].progress, 100.0)
