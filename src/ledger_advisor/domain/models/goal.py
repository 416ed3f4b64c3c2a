"""Investment goal domain model."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ledger_advisor.core.dates import parse_date
from ledger_advisor.domain.models.enums import GoalType


@dataclass
class InvestmentGoal:
    """
    A savings target backed by its own trade sub-ledger.

    Trades carrying this goal_id are folded separately from the main ledger.
    AMOUNT goals compare current value to target_amount; SHARES goals compare
    it to the value of target_shares (security_id -> share count).
    """

    goal_id: str
    name: str
    creation_date: Optional[date] = None
    goal_type: Optional[GoalType] = GoalType.AMOUNT
    target_amount: Any = None
    target_shares: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.goal_type = GoalType.parse(self.goal_type) or GoalType.AMOUNT
        self.creation_date = parse_date(self.creation_date)
        if self.target_shares is None:
            self.target_shares = {}
