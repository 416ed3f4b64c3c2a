"""Holdings engine for deriving positions and realized gains from the trade ledger."""

import logging
from collections.abc import Collection, Iterable
from datetime import date
from typing import Optional

from ledger_advisor.config.settings import get_settings
from ledger_advisor.core.numbers import percent_of
from ledger_advisor.domain.models import GroupBy, HistoricalGain, Trade, TradeSide
from ledger_advisor.domain.views import Holding, HoldingsResult, RealizedGain

logger = logging.getLogger(__name__)

GroupKey = tuple[str, Optional[str]]


def _sort_key(trade: Trade) -> date:
    # Undated rows sort first; sorted() is stable so ties keep ledger order
    return trade.trade_date or date.min


class HoldingsEngine:
    """
    Engine for computing holdings by replaying the trade ledger.

    Holdings are never edited directly; every call folds the ledger from
    scratch using a single moving-average cost basis per group.
    """

    def __init__(self, quantity_epsilon: Optional[float] = None):
        if quantity_epsilon is None:
            quantity_epsilon = get_settings().quantity_epsilon
        self._epsilon = quantity_epsilon

    def reconstruct(
        self,
        trades: Iterable[Trade],
        *,
        account_id: Optional[str] = None,
        goal_id: Optional[str] = None,
        group_by: GroupBy = GroupBy.SECURITY,
        known_security_ids: Optional[Collection[str]] = None,
    ) -> HoldingsResult:
        """
        Fold trades into holdings and the realized-PnL series.

        - account_id / goal_id restrict the fold to one sub-ledger
        - group_by SECURITY_ACCOUNT keeps one holding per (security, account)
        - rows without a security or account, with an unknown side, or for a
          security outside known_security_ids are skipped
        """
        holdings: dict[GroupKey, Holding] = {}
        realized: list[RealizedGain] = []

        for trade in sorted(trades, key=_sort_key):
            if account_id is not None and trade.account_id != account_id:
                continue
            if goal_id is not None and trade.goal_id != goal_id:
                continue
            if not self._is_usable(trade, known_security_ids):
                continue

            key = self._group_key(trade, group_by)
            current = holdings.get(key) or Holding(security_id=key[0], account_id=key[1])

            if trade.side == TradeSide.BUY:
                holdings[key] = self._apply_buy(current, trade)
            else:
                updated, gain = self._apply_sell(current, trade)
                holdings[key] = updated
                realized.append(gain)

        return HoldingsResult(holdings=tuple(holdings.values()), realized_gains=tuple(realized))

    def _is_usable(
        self,
        trade: Trade,
        known_security_ids: Optional[Collection[str]],
    ) -> bool:
        if not trade.security_id or not trade.account_id:
            logger.debug(f"Skipping trade {trade.trade_id}: missing security or account")
            return False
        if trade.side is None:
            logger.debug(f"Skipping trade {trade.trade_id}: unknown side")
            return False
        if known_security_ids is not None and trade.security_id not in known_security_ids:
            logger.debug(
                f"Skipping trade {trade.trade_id}: unknown security {trade.security_id}"
            )
            return False
        return True

    @staticmethod
    def _group_key(trade: Trade, group_by: GroupBy) -> GroupKey:
        if group_by == GroupBy.SECURITY_ACCOUNT:
            return (trade.security_id, trade.account_id)
        return (trade.security_id, None)

    def _snap(self, holding: Holding) -> Holding:
        if abs(holding.quantity) < self._epsilon:
            return Holding(
                security_id=holding.security_id,
                account_id=holding.account_id,
                quantity=0.0,
                cost_basis=0.0,
            )
        return holding

    def _apply_buy(self, holding: Holding, trade: Trade) -> Holding:
        qty = trade.qty
        return self._snap(
            Holding(
                security_id=holding.security_id,
                account_id=holding.account_id,
                quantity=holding.quantity + qty,
                cost_basis=holding.cost_basis + qty * trade.unit_price,
            )
        )

    def _apply_sell(self, holding: Holding, trade: Trade) -> tuple[Holding, RealizedGain]:
        qty = trade.qty
        price = trade.unit_price
        avg_cost = holding.cost_basis / holding.quantity if holding.quantity > 0 else 0.0
        sold_from_position = min(qty, holding.quantity)

        if qty - holding.quantity >= self._epsilon:
            logger.warning(
                f"Trade {trade.trade_id} sells {qty} of {trade.security_id} "
                f"but only {holding.quantity} is held; quantity goes negative"
            )

        realized_pnl = (price - avg_cost) * qty
        cost_of_sold = avg_cost * qty
        gain = RealizedGain(
            source_id=trade.trade_id,
            account_id=trade.account_id,
            security_id=trade.security_id,
            label=trade.security_id,
            gain_date=trade.trade_date,
            realized_pnl=realized_pnl,
            quantity=qty,
            sell_amount=qty * price,
            pnl_rate=percent_of(realized_pnl, cost_of_sold),
        )

        updated = self._snap(
            Holding(
                security_id=holding.security_id,
                account_id=holding.account_id,
                quantity=holding.quantity - qty,
                cost_basis=holding.cost_basis - avg_cost * sold_from_position,
            )
        )
        return updated, gain


def combined_realized_gains(
    result: HoldingsResult,
    historical_gains: Iterable[HistoricalGain],
    *,
    year: Optional[int] = None,
    month: Optional[int] = None,
    account_id: Optional[str] = None,
    security_id: Optional[str] = None,
) -> list[RealizedGain]:
    """
    Merge sell events with back-filled historical gains, newest first.

    Filters apply to both kinds of row. Historical gains carry no security,
    so a security_id filter drops them.
    """
    rows = list(result.realized_gains)
    for gain in historical_gains:
        rows.append(
            RealizedGain(
                source_id=gain.gain_id,
                account_id=gain.account_id,
                security_id=None,
                label=gain.label,
                gain_date=gain.gain_date,
                realized_pnl=gain.value,
                is_historical=True,
            )
        )

    def keep(row: RealizedGain) -> bool:
        if account_id is not None and row.account_id != account_id:
            return False
        if security_id is not None and row.security_id != security_id:
            return False
        if year is not None and (row.gain_date is None or row.gain_date.year != year):
            return False
        if month is not None and (row.gain_date is None or row.gain_date.month != month):
            return False
        return True

    filtered = [row for row in rows if keep(row)]
    filtered.sort(key=lambda row: row.gain_date or date.min, reverse=True)
    return filtered


def total_realized_pnl(gains: Iterable[RealizedGain]) -> float:
    """Sum of realized PnL across report rows."""
    return sum(g.realized_pnl for g in gains)
