"""Account and Security domain models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Account:
    """
    Securities account owned by the user.

    The set of account ids is what makes a transfer "internal": money moving
    between two of these accounts is neither a contribution nor a withdrawal.
    """

    account_id: str
    name: str = ""
    broker_name: Optional[str] = None


@dataclass
class Security:
    """
    A holdable instrument.

    Only tracked securities take part in target-weight allocation and alerting.
    """

    security_id: str
    ticker: str
    name: str = ""
    category: str = ""
    is_tracked: bool = True

    @property
    def display_name(self) -> str:
        return self.name or self.ticker
