"""
Unit tests for CashReconciler.

Tests cover:
- Cash from deposits, withdrawals, dividends, trades and historical gains
- Counterparty attribution of transfers
- Net contributions excluding dividends and internal transfers
- Portfolio-wide net external contributions with date windows
"""

from datetime import date

from ledger_advisor.domain.models import HistoricalGain
from ledger_advisor.services import CashReconciler, net_external_contributions

from tests.conftest import assert_close, buy, deposit, dividend, sell, withdrawal

INTERNAL = frozenset({"acc-1", "acc-2"})


class TestReconcile:
    """Tests for single-account reconciliation."""

    def test_cash_formula(self, cash_reconciler: CashReconciler):
        """
        GIVEN deposits, a withdrawal, a dividend, trades and a historical gain
        WHEN I reconcile the account
        THEN cash = credits - debits + sells - buys + historical PnL
        """
        transactions = [
            deposit(1000),
            withdrawal(200),
            dividend(50),
        ]
        trades = [buy("sec", 5, 100), sell("sec", 2, 120)]
        gains = [
            HistoricalGain(
                gain_id="hg-1",
                account_id="acc-1",
                gain_date="2023-01-01",
                label="old",
                realized_pnl=-30,
            )
        ]

        cash = cash_reconciler.reconcile("acc-1", transactions, trades, gains, INTERNAL)

        assert_close(cash.cash_balance, 1000 - 200 + 50 + 240 - 500 - 30)
        assert_close(cash.gross_inflow, 1050)
        assert_close(cash.trade_cash_flow, -260)
        assert_close(cash.historical_pnl, -30)

    def test_dividends_are_not_contributions(self, cash_reconciler: CashReconciler):
        """
        GIVEN a deposit and a dividend
        WHEN I reconcile the account
        THEN the dividend raises cash and gross inflow but not net contributions
        """
        cash = cash_reconciler.reconcile(
            "acc-1", [deposit(1000), dividend(40)], [], [], INTERNAL
        )

        assert_close(cash.cash_balance, 1040)
        assert_close(cash.gross_inflow, 1040)
        assert_close(cash.net_contributions, 1000)

    def test_other_accounts_rows_are_ignored(self, cash_reconciler: CashReconciler):
        transactions = [deposit(1000, account_id="acc-2")]
        trades = [buy("sec", 1, 100, account_id="acc-2")]

        cash = cash_reconciler.reconcile("acc-1", transactions, trades, [], INTERNAL)

        assert cash.cash_balance == 0
        assert cash.net_contributions == 0

    def test_non_numeric_amount_counts_as_zero(self, cash_reconciler: CashReconciler):
        cash = cash_reconciler.reconcile(
            "acc-1", [deposit("abc"), deposit("1,500")], [], [], INTERNAL
        )

        assert_close(cash.cash_balance, 1500)


class TestTransfers:
    """Tests for transfers between the user's own accounts."""

    def test_counterparty_withdrawal_credits_the_other_account(
        self, cash_reconciler: CashReconciler
    ):
        """
        GIVEN acc-1 withdraws 300 to acc-2
        WHEN I reconcile both accounts
        THEN acc-1 loses 300, acc-2 gains 300, and neither counts a contribution
        """
        transactions = [
            deposit(1000, account_id="acc-1"),
            withdrawal(300, account_id="acc-1", counterparty_account_id="acc-2"),
        ]

        positions = cash_reconciler.reconcile_all(["acc-1", "acc-2"], transactions, [], [])

        assert_close(positions["acc-1"].cash_balance, 700)
        assert_close(positions["acc-2"].cash_balance, 300)
        assert_close(positions["acc-1"].net_contributions, 1000)
        assert_close(positions["acc-2"].net_contributions, 0)
        assert_close(positions["acc-1"].internal_transfers, -300)
        assert_close(positions["acc-2"].internal_transfers, 300)

    def test_counterparty_deposit_debits_the_other_account(
        self, cash_reconciler: CashReconciler
    ):
        """
        GIVEN acc-2 records a deposit of 400 coming from acc-1
        WHEN I reconcile both accounts
        THEN acc-1 is debited and acc-2 credited
        """
        transactions = [
            deposit(400, account_id="acc-2", counterparty_account_id="acc-1"),
        ]

        positions = cash_reconciler.reconcile_all(["acc-1", "acc-2"], transactions, [], [])

        assert_close(positions["acc-1"].cash_balance, -400)
        assert_close(positions["acc-2"].cash_balance, 400)
        assert positions["acc-1"].net_contributions == 0
        assert positions["acc-2"].net_contributions == 0

    def test_external_counterparty_is_a_contribution(self, cash_reconciler: CashReconciler):
        """
        GIVEN a deposit whose counterparty is not one of the user's accounts
        WHEN I reconcile the account
        THEN it counts as a contribution
        """
        cash = cash_reconciler.reconcile(
            "acc-1",
            [deposit(500, counterparty_account_id="bank-x")],
            [],
            [],
            INTERNAL,
        )

        assert_close(cash.net_contributions, 500)
        assert cash.internal_transfers == 0

    def test_transfer_is_excluded_for_both_accounts(self, cash_reconciler: CashReconciler):
        """
        GIVEN a transfer between two internal accounts
        WHEN I compute portfolio-wide net external contributions
        THEN the transfer is not counted
        """
        transactions = [
            deposit(1000, account_id="acc-1"),
            withdrawal(250, account_id="acc-1", counterparty_account_id="acc-2"),
            deposit(250, account_id="acc-2", counterparty_account_id="acc-1"),
        ]

        total = net_external_contributions(transactions, INTERNAL)

        assert_close(total, 1000)


class TestNetExternalContributions:
    """Tests for the portfolio-wide contribution figure."""

    def test_deposits_minus_withdrawals(self):
        transactions = [deposit(1000), withdrawal(300), dividend(99)]

        assert_close(net_external_contributions(transactions, INTERNAL), 700)

    def test_window_is_start_exclusive_end_inclusive(self):
        """
        GIVEN deposits on the window boundaries
        WHEN I restrict to (2024-01-31, 2024-02-29]
        THEN only the end boundary is counted
        """
        transactions = [
            deposit(1, "2024-01-31"),
            deposit(10, "2024-02-15"),
            deposit(100, "2024-02-29"),
            deposit(1000, "2024-03-01"),
        ]

        total = net_external_contributions(
            transactions,
            INTERNAL,
            start=date(2024, 1, 31),
            end=date(2024, 2, 29),
        )

        assert_close(total, 110)

    def test_undated_rows_only_count_without_window(self):
        transactions = [deposit(10, "garbage"), deposit(5, "2024-01-10")]

        assert_close(net_external_contributions(transactions, INTERNAL), 15)
        assert_close(
            net_external_contributions(transactions, INTERNAL, end=date(2024, 12, 31)),
            5,
        )
