"""View models for investment goals."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GoalHolding:
    """A position held in a goal sub-ledger."""

    security_id: str
    name: str
    quantity: float
    average_price: float
    current_value: float
    profit_loss: float
    pnl_rate: float


@dataclass
class GoalProgress:
    """Progress of one investment goal."""

    goal_id: str
    name: str
    invested_principal: float = 0.0
    current_value: float = 0.0
    target_value: float = 0.0
    progress: float = 0.0
    days_elapsed: int = 1
    holdings: list[GoalHolding] = field(default_factory=list)
