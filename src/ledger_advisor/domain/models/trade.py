"""Trade domain model."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ledger_advisor.core.dates import parse_date
from ledger_advisor.core.numbers import parse_number
from ledger_advisor.domain.models.enums import TradeSide


@dataclass(frozen=True)
class Trade:
    """
    Ledger trade entry (source of truth for holdings).

    - quantity and price are kept as supplied; calculations read them through
      parse_number so a malformed value counts as 0
    - side is parsed leniently; an unrecognised side leaves it None and the
      row is ignored by the engine
    - goal_id places the trade in a goal sub-ledger
    - frozen: holdings folds read trades but never rewrite them
    """

    trade_id: str
    account_id: str
    security_id: str
    trade_date: Optional[date]
    quantity: Any
    price: Any
    side: Optional[TradeSide]
    trade_method: Optional[str] = None
    goal_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "side", TradeSide.parse(self.side))
        object.__setattr__(self, "trade_date", parse_date(self.trade_date))

    @property
    def qty(self) -> float:
        return parse_number(self.quantity)

    @property
    def unit_price(self) -> float:
        return parse_number(self.price)

    @property
    def gross_amount(self) -> float:
        """quantity x price."""
        return self.qty * self.unit_price

    @property
    def net_cash_impact(self) -> float:
        """
        Calculate net cash impact of this trade.

        Positive = cash added, Negative = cash removed.
        """
        if self.side == TradeSide.BUY:
            return -self.gross_amount
        if self.side == TradeSide.SELL:
            return self.gross_amount
        return 0.0
