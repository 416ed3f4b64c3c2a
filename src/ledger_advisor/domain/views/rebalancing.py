"""View models for rebalancing scenarios and simulations."""

from dataclasses import dataclass, field
from typing import Optional

from ledger_advisor.domain.models.enums import AlertLevel, ScenarioKind, TradeSide


@dataclass(frozen=True)
class RebalanceTrade:
    """A proposed buy or sell, expressed as a currency amount."""

    security_id: str
    name: str
    side: TradeSide
    amount: float

    @property
    def signed_amount(self) -> float:
        return self.amount if self.side == TradeSide.BUY else -self.amount


@dataclass
class RebalanceScenario:
    """
    A trade list that moves one security toward its target weight.

    portfolio_change is the new money the scenario adds to the tracked total
    (non-zero only for external funding and manual trades).
    """

    kind: ScenarioKind
    trades: list[RebalanceTrade] = field(default_factory=list)
    amount: float = 0.0
    portfolio_change: float = 0.0

    @property
    def total_buy(self) -> float:
        return sum(t.amount for t in self.trades if t.side == TradeSide.BUY)

    @property
    def total_sell(self) -> float:
        return sum(t.amount for t in self.trades if t.side == TradeSide.SELL)


@dataclass(frozen=True)
class CategorySimulationRow:
    """Before/after/target weight of a category."""

    category: str
    current_weight: float
    new_weight: float
    target_weight: float
    new_level: AlertLevel


@dataclass
class SimulationResult:
    """Projected category weights after applying a trade list."""

    rows: list[CategorySimulationRow] = field(default_factory=list)
    total_before: float = 0.0
    total_after: float = 0.0


@dataclass
class RebalancePlan:
    """Both scenarios for one security, each with its simulation."""

    security_id: str
    external_funding: Optional[RebalanceScenario] = None
    external_simulation: Optional[SimulationResult] = None
    internal_reallocation: Optional[RebalanceScenario] = None
    internal_simulation: Optional[SimulationResult] = None


@dataclass(frozen=True)
class ProposedTrade:
    """User-entered trade for manual simulation; amount may be unparsed."""

    security_id: str
    side: object
    amount: object
