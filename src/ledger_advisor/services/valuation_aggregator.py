"""Valuation aggregator combining holdings, prices and cash."""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from ledger_advisor.core.numbers import parse_number, percent_of
from ledger_advisor.domain.models import (
    Account,
    AccountTransaction,
    GroupBy,
    HistoricalGain,
    Security,
    Trade,
)
from ledger_advisor.domain.views import (
    AccountSnapshot,
    CashPosition,
    Holding,
    PortfolioSnapshot,
    PositionValue,
)
from ledger_advisor.services.cash_reconciler import CashReconciler
from ledger_advisor.services.holdings_engine import HoldingsEngine


def price_of(
    security: Optional[Security],
    prices: Mapping[str, Any],
) -> float:
    """Current price by ticker; unknown security or ticker prices at 0."""
    if security is None or not security.ticker:
        return 0.0
    return parse_number(prices.get(security.ticker))


def value_by_security(
    holdings: Iterable[Holding],
    securities: Mapping[str, Security],
    prices: Mapping[str, Any],
) -> dict[str, float]:
    """Market value per security id, summed over every holding of it."""
    values: dict[str, float] = {}
    for holding in holdings:
        price = price_of(securities.get(holding.security_id), prices)
        values[holding.security_id] = (
            values.get(holding.security_id, 0.0) + holding.quantity * price
        )
    return values


class ValuationAggregator:
    """
    Service for account- and portfolio-level valuations.

    Every snapshot is rebuilt from the ledger on each call.
    """

    def __init__(
        self,
        holdings_engine: HoldingsEngine,
        cash_reconciler: CashReconciler,
    ):
        self._holdings = holdings_engine
        self._cash = cash_reconciler

    def account_snapshot(
        self,
        account: Account,
        holdings: Iterable[Holding],
        cash: CashPosition,
        securities: Mapping[str, Security],
        prices: Mapping[str, Any],
    ) -> AccountSnapshot:
        """
        Value one account.

        Formula: total = cash + Σ(quantity × price)
        Return rate is profit over net contributions, 0 when nothing was contributed.
        """
        positions = [
            self._position_value(h, securities, prices) for h in holdings if h.is_open
        ]
        securities_value = sum(p.market_value for p in positions)
        total_value = cash.cash_balance + securities_value
        profit_loss = total_value - cash.net_contributions

        return AccountSnapshot(
            account_id=account.account_id,
            name=account.name,
            cash_balance=cash.cash_balance,
            securities_value=securities_value,
            total_value=total_value,
            net_contributions=cash.net_contributions,
            profit_loss=profit_loss,
            return_rate=percent_of(profit_loss, cash.net_contributions),
            internal_transfers=cash.internal_transfers,
            positions=tuple(positions),
        )

    def portfolio_snapshot(
        self,
        accounts: Iterable[Account],
        trades: Iterable[Trade],
        transactions: Iterable[AccountTransaction],
        historical_gains: Iterable[HistoricalGain],
        securities: Iterable[Security],
        prices: Mapping[str, Any],
    ) -> PortfolioSnapshot:
        """Value every account and sum the totals."""
        accounts = list(accounts)
        trades = list(trades)
        security_map = {s.security_id: s for s in securities}
        account_ids = [a.account_id for a in accounts]

        cash_positions = self._cash.reconcile_all(
            account_ids,
            transactions,
            trades,
            historical_gains,
        )
        fold = self._holdings.reconstruct(
            trades,
            group_by=GroupBy.SECURITY_ACCOUNT,
            known_security_ids=security_map.keys(),
        )
        holdings_by_account: dict[str, list[Holding]] = {}
        for holding in fold.holdings:
            holdings_by_account.setdefault(holding.account_id, []).append(holding)

        snapshots = [
            self.account_snapshot(
                account,
                holdings_by_account.get(account.account_id, []),
                cash_positions[account.account_id],
                security_map,
                prices,
            )
            for account in accounts
        ]

        cash_balance = sum(s.cash_balance for s in snapshots)
        securities_value = sum(s.securities_value for s in snapshots)
        total_value = cash_balance + securities_value
        net_contributions = sum(s.net_contributions for s in snapshots)
        profit_loss = total_value - net_contributions

        return PortfolioSnapshot(
            accounts=tuple(snapshots),
            cash_balance=cash_balance,
            securities_value=securities_value,
            total_value=total_value,
            net_contributions=net_contributions,
            profit_loss=profit_loss,
            return_rate=percent_of(profit_loss, net_contributions),
        )

    @staticmethod
    def _position_value(
        holding: Holding,
        securities: Mapping[str, Security],
        prices: Mapping[str, Any],
    ) -> PositionValue:
        security = securities.get(holding.security_id)
        price = price_of(security, prices)
        market_value = holding.quantity * price
        unrealized = market_value - holding.cost_basis
        return PositionValue(
            security_id=holding.security_id,
            ticker=security.ticker if security else "",
            name=security.display_name if security else holding.security_id,
            quantity=holding.quantity,
            average_cost=holding.average_cost,
            cost_basis=holding.cost_basis,
            price=price,
            market_value=market_value,
            unrealized_pnl=unrealized,
            unrealized_pnl_rate=percent_of(unrealized, holding.cost_basis),
        )
