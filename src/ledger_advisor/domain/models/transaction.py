"""AccountTransaction and HistoricalGain domain models."""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ledger_advisor.core.dates import parse_date
from ledger_advisor.core.numbers import parse_number
from ledger_advisor.domain.models.enums import TransactionKind


@dataclass
class AccountTransaction:
    """
    Cash movement on an account.

    Supports: DEPOSIT, WITHDRAWAL, DIVIDEND.
    - counterparty_account_id names the other side of a transfer; when it is
      one of the user's own accounts the row is an internal transfer
    - dividends are return on investment, never capital
    """

    txn_id: str
    account_id: str
    txn_date: Optional[date]
    amount: Any
    kind: Optional[TransactionKind]
    counterparty_account_id: Optional[str] = None
    security_id: Optional[str] = None
    goal_id: Optional[str] = None

    def __post_init__(self) -> None:
        self.kind = TransactionKind.parse(self.kind)
        self.txn_date = parse_date(self.txn_date)
        if not self.counterparty_account_id:
            self.counterparty_account_id = None

    @property
    def value(self) -> float:
        return parse_number(self.amount)

    @property
    def is_dividend(self) -> bool:
        return self.kind == TransactionKind.DIVIDEND

    def is_internal_transfer(self, internal_account_ids: Collection[str]) -> bool:
        """Return True if the counterparty is one of the user's own accounts."""
        return (
            self.counterparty_account_id is not None
            and self.counterparty_account_id in internal_account_ids
        )

    def is_external_flow(self, internal_account_ids: Collection[str]) -> bool:
        """Return True if this row moves capital into or out of the portfolio."""
        return (
            self.kind in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL)
            and not self.is_internal_transfer(internal_account_ids)
        )

    @property
    def signed_contribution(self) -> float:
        """Deposits count positive, withdrawals negative, dividends zero."""
        if self.kind == TransactionKind.DEPOSIT:
            return self.value
        if self.kind == TransactionKind.WITHDRAWAL:
            return -self.value
        return 0.0


@dataclass
class HistoricalGain:
    """
    Manually back-filled realized profit or loss.

    Predates ledger tracking; added to the account's cash as-is (losses are
    negative).
    """

    gain_id: str
    account_id: str
    gain_date: Optional[date]
    label: str
    realized_pnl: Any
    note: Optional[str] = None

    def __post_init__(self) -> None:
        self.gain_date = parse_date(self.gain_date)

    @property
    def value(self) -> float:
        return parse_number(self.realized_pnl)
