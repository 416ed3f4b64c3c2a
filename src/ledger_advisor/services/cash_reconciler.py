"""Cash reconciler for deriving account cash from the transaction ledger."""

from collections.abc import Collection, Iterable
from datetime import date
from typing import Optional

from ledger_advisor.domain.models import (
    AccountTransaction,
    HistoricalGain,
    Trade,
    TransactionKind,
)
from ledger_advisor.domain.views import CashPosition

_CREDIT_ON_OWN = (TransactionKind.DEPOSIT, TransactionKind.DIVIDEND)


class CashReconciler:
    """
    Computes per-account cash by replaying transactions, trades and
    historical gains.

    A row affects its own account and, through counterparty_account_id, the
    account on the other side:
    - own DEPOSIT/DIVIDEND and counterparty WITHDRAWAL are credits
    - own WITHDRAWAL and counterparty DEPOSIT are debits
    """

    def reconcile(
        self,
        account_id: str,
        transactions: Iterable[AccountTransaction],
        trades: Iterable[Trade],
        historical_gains: Iterable[HistoricalGain],
        internal_account_ids: Collection[str],
    ) -> CashPosition:
        """Reconcile the cash position of one account."""
        credits = 0.0
        debits = 0.0
        gross_inflow = 0.0
        net_contributions = 0.0
        internal_transfers = 0.0

        for txn in transactions:
            sign = self._direction(account_id, txn)
            if sign == 0:
                continue
            amount = txn.value
            if sign > 0:
                credits += amount
                gross_inflow += amount
            else:
                debits += amount

            if txn.is_dividend:
                continue
            if txn.is_internal_transfer(internal_account_ids):
                internal_transfers += sign * amount
            else:
                net_contributions += sign * amount

        trade_cash_flow = sum(
            t.net_cash_impact for t in trades if t.account_id == account_id
        )
        historical_pnl = sum(
            g.value for g in historical_gains if g.account_id == account_id
        )

        return CashPosition(
            account_id=account_id,
            cash_balance=credits - debits + trade_cash_flow + historical_pnl,
            gross_inflow=gross_inflow,
            net_contributions=net_contributions,
            internal_transfers=internal_transfers,
            trade_cash_flow=trade_cash_flow,
            historical_pnl=historical_pnl,
        )

    def reconcile_all(
        self,
        account_ids: Iterable[str],
        transactions: Iterable[AccountTransaction],
        trades: Iterable[Trade],
        historical_gains: Iterable[HistoricalGain],
        internal_account_ids: Optional[Collection[str]] = None,
    ) -> dict[str, CashPosition]:
        """Reconcile every account; internal ids default to account_ids."""
        account_ids = list(account_ids)
        transactions = list(transactions)
        trades = list(trades)
        historical_gains = list(historical_gains)
        if internal_account_ids is None:
            internal_account_ids = frozenset(account_ids)
        return {
            account_id: self.reconcile(
                account_id,
                transactions,
                trades,
                historical_gains,
                internal_account_ids,
            )
            for account_id in account_ids
        }

    @staticmethod
    def _direction(account_id: str, txn: AccountTransaction) -> int:
        """+1 for a credit to account_id, -1 for a debit, 0 if unrelated."""
        if txn.account_id == account_id:
            if txn.kind in _CREDIT_ON_OWN:
                return 1
            if txn.kind == TransactionKind.WITHDRAWAL:
                return -1
            return 0
        if txn.counterparty_account_id == account_id:
            if txn.kind == TransactionKind.WITHDRAWAL:
                return 1
            if txn.kind == TransactionKind.DEPOSIT:
                return -1
        return 0


def net_external_contributions(
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> float:
    """
    Portfolio-wide deposits minus withdrawals.

    Dividends and internal transfers are excluded. The optional window is
    (start, end]: start exclusive, end inclusive. Undated rows only count
    when no window is given.
    """
    total = 0.0
    for txn in external_flows(transactions, internal_account_ids):
        if start is not None or end is not None:
            if txn.txn_date is None:
                continue
            if start is not None and txn.txn_date <= start:
                continue
            if end is not None and txn.txn_date > end:
                continue
        total += txn.signed_contribution
    return total


def external_flows(
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
) -> list[AccountTransaction]:
    """Deposits and withdrawals that move capital across the portfolio boundary."""
    return [t for t in transactions if t.is_external_flow(internal_account_ids)]
