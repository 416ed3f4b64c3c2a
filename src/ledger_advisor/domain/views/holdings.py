"""View models for reconstructed holdings and realized gains."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ledger_advisor.core.numbers import safe_divide


@dataclass(frozen=True)
class Holding:
    """
    Derived position of one security (optionally within one account).

    cost_basis always equals quantity x average_cost. Never edited in place;
    each fold step produces a new instance.
    """

    security_id: str
    account_id: Optional[str] = None
    quantity: float = 0.0
    cost_basis: float = 0.0

    @property
    def average_cost(self) -> float:
        if self.quantity <= 0:
            return 0.0
        return safe_divide(self.cost_basis, self.quantity)

    @property
    def is_open(self) -> bool:
        return self.quantity != 0


@dataclass(frozen=True)
class RealizedGain:
    """A realized profit/loss: a sell event or a back-filled historical gain."""

    source_id: str
    account_id: str
    security_id: Optional[str]
    label: str
    gain_date: Optional[date]
    realized_pnl: float
    quantity: Optional[float] = None
    sell_amount: Optional[float] = None
    pnl_rate: Optional[float] = None
    is_historical: bool = False


@dataclass(frozen=True)
class HoldingsResult:
    """Output of a holdings fold, shared by memoized callers."""

    holdings: tuple[Holding, ...] = ()
    realized_gains: tuple[RealizedGain, ...] = ()

    def open_positions(self) -> list[Holding]:
        """Holdings with a non-zero quantity (negative oversold rows included)."""
        return [h for h in self.holdings if h.is_open]

    def by_security(self) -> dict[str, Holding]:
        """Merge holdings per security, whatever the grouping of the fold."""
        merged: dict[str, Holding] = {}
        for h in self.holdings:
            prev = merged.get(h.security_id)
            if prev is None:
                merged[h.security_id] = Holding(
                    security_id=h.security_id,
                    quantity=h.quantity,
                    cost_basis=h.cost_basis,
                )
            else:
                merged[h.security_id] = Holding(
                    security_id=h.security_id,
                    quantity=prev.quantity + h.quantity,
                    cost_basis=prev.cost_basis + h.cost_basis,
                )
        return merged

    @property
    def total_realized_pnl(self) -> float:
        return sum(g.realized_pnl for g in self.realized_gains)
