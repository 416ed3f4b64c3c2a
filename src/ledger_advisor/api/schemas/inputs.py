"""Pydantic schemas for the ledger snapshot and market inputs sent with each request.

Numeric and date fields accept strings as well: ledger rows are
hand-edited, and the engine turns anything it cannot parse into 0 (or an
undated row) instead of rejecting the request.
"""

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field

from ledger_advisor.core.exceptions import ValidationError
from ledger_advisor.domain.models import (
    Account,
    AccountTransaction,
    AlertThresholds,
    HistoricalGain,
    InvestmentGoal,
    LedgerSnapshot,
    MarketInputs,
    MonthlyValuation,
    Security,
    ThresholdOverride,
    Thresholds,
    Trade,
)
from ledger_advisor.domain.views import ProposedTrade

Number = Optional[Union[float, str]]
DateInput = Optional[Union[date, str]]


class AccountIn(BaseModel):
    account_id: str
    name: str = ""
    broker_name: Optional[str] = None

    def to_domain(self) -> Account:
        return Account(**self.model_dump())


class SecurityIn(BaseModel):
    security_id: str
    ticker: str
    name: str = ""
    category: str = ""
    is_tracked: bool = True

    def to_domain(self) -> Security:
        return Security(**self.model_dump())


class TradeIn(BaseModel):
    """A ledger trade; side is BUY or SELL (case-insensitive)."""

    trade_id: str
    account_id: str = ""
    security_id: str = ""
    trade_date: DateInput = None
    quantity: Number = None
    price: Number = None
    side: Optional[str] = None
    trade_method: Optional[str] = None
    goal_id: Optional[str] = None

    def to_domain(self) -> Trade:
        return Trade(**self.model_dump())


class TransactionIn(BaseModel):
    """A cash movement; kind is DEPOSIT, WITHDRAWAL or DIVIDEND."""

    txn_id: str
    account_id: str = ""
    txn_date: DateInput = None
    amount: Number = None
    kind: Optional[str] = None
    counterparty_account_id: Optional[str] = None
    security_id: Optional[str] = None
    goal_id: Optional[str] = None

    def to_domain(self) -> AccountTransaction:
        return AccountTransaction(**self.model_dump())


class HistoricalGainIn(BaseModel):
    gain_id: str
    account_id: str = ""
    gain_date: DateInput = None
    label: str = ""
    realized_pnl: Number = None
    note: Optional[str] = None

    def to_domain(self) -> HistoricalGain:
        return HistoricalGain(**self.model_dump())


class ValuationIn(BaseModel):
    valuation_id: str
    valuation_date: DateInput = None
    total_value: Number = None

    def to_domain(self) -> MonthlyValuation:
        return MonthlyValuation(**self.model_dump())


class GoalIn(BaseModel):
    goal_id: str
    name: str = ""
    creation_date: DateInput = None
    goal_type: Optional[str] = None
    target_amount: Number = None
    target_shares: dict[str, Number] = Field(default_factory=dict)

    def to_domain(self) -> InvestmentGoal:
        return InvestmentGoal(**self.model_dump())


class LedgerIn(BaseModel):
    """Every record the engine reads."""

    accounts: list[AccountIn] = Field(default_factory=list)
    securities: list[SecurityIn] = Field(default_factory=list)
    trades: list[TradeIn] = Field(default_factory=list)
    transactions: list[TransactionIn] = Field(default_factory=list)
    historical_gains: list[HistoricalGainIn] = Field(default_factory=list)
    valuations: list[ValuationIn] = Field(default_factory=list)
    goals: list[GoalIn] = Field(default_factory=list)

    def to_domain(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            accounts=[a.to_domain() for a in self.accounts],
            securities=[s.to_domain() for s in self.securities],
            trades=[t.to_domain() for t in self.trades],
            transactions=[t.to_domain() for t in self.transactions],
            historical_gains=[g.to_domain() for g in self.historical_gains],
            valuations=[v.to_domain() for v in self.valuations],
            goals=[g.to_domain() for g in self.goals],
        )


class ThresholdsIn(BaseModel):
    caution: float
    warning: float


class ThresholdOverrideIn(BaseModel):
    caution: Optional[float] = None
    warning: Optional[float] = None


class AlertThresholdsIn(BaseModel):
    """Threshold hierarchy; global defaults to the configured thresholds."""

    global_thresholds: Optional[ThresholdsIn] = None
    category_overrides: dict[str, ThresholdOverrideIn] = Field(default_factory=dict)
    security_overrides: dict[str, ThresholdOverrideIn] = Field(default_factory=dict)

    def to_domain(self) -> AlertThresholds:
        defaults = AlertThresholds.default()
        global_thresholds = defaults.global_thresholds
        if self.global_thresholds is not None:
            if self.global_thresholds.caution > self.global_thresholds.warning:
                raise ValidationError("caution threshold must not exceed warning threshold")
            global_thresholds = Thresholds(
                caution=self.global_thresholds.caution,
                warning=self.global_thresholds.warning,
            )
        return AlertThresholds(
            global_thresholds=global_thresholds,
            category_overrides={
                k: ThresholdOverride(**v.model_dump())
                for k, v in self.category_overrides.items()
            },
            security_overrides={
                k: ThresholdOverride(**v.model_dump())
                for k, v in self.security_overrides.items()
            },
        )


class MarketIn(BaseModel):
    """Prices keyed by ticker, target weights keyed by security id."""

    prices: dict[str, Number] = Field(default_factory=dict)
    target_weights: dict[str, Number] = Field(default_factory=dict)
    thresholds: AlertThresholdsIn = Field(default_factory=AlertThresholdsIn)
    as_of: Optional[date] = Field(default=None, description="Evaluation date; defaults to today")

    def to_domain(self) -> MarketInputs:
        return MarketInputs(
            prices=dict(self.prices),
            target_weights=dict(self.target_weights),
            thresholds=self.thresholds.to_domain(),
            as_of=self.as_of,
        )


class AnalysisRequest(BaseModel):
    """Request body shared by every analysis endpoint."""

    ledger: LedgerIn = Field(default_factory=LedgerIn)
    market: MarketIn = Field(default_factory=MarketIn)


class ProposedTradeIn(BaseModel):
    security_id: str
    side: Optional[str] = None
    amount: Number = None

    def to_domain(self) -> ProposedTrade:
        return ProposedTrade(**self.model_dump())


class SimulationRequest(AnalysisRequest):
    """Analysis request plus user-entered trade amounts."""

    trades: list[ProposedTradeIn] = Field(default_factory=list)
