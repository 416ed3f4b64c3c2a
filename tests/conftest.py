"""
Pytest configuration and fixtures for ledger advisor tests.

This module provides:
- Settings reset between tests
- Factory helpers for trades, transactions, valuations and securities
- A small two-account sample ledger with prices and target weights
- Service fixtures
- FastAPI test client
"""

import itertools
from datetime import date
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from ledger_advisor.main import app
from ledger_advisor.api.deps import reset_analysis_service
from ledger_advisor.config.settings import reset_settings
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
    Thresholds,
    Trade,
)
from ledger_advisor.services import (
    AnalysisService,
    CashReconciler,
    DeviationClassifier,
    HoldingsEngine,
    RebalancePlanner,
    ReturnMetricsCalculator,
)

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings():
    """Reload settings from defaults around every test."""
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# FACTORY HELPERS (exported for use in tests)
# =============================================================================


def make_trade(
    security_id: str,
    side: str,
    quantity,
    price,
    trade_date="2024-01-01",
    account_id: str = "acc-1",
    goal_id: Optional[str] = None,
    trade_id: Optional[str] = None,
) -> Trade:
    """Helper to create a ledger trade."""
    return Trade(
        trade_id=trade_id or _next_id("trd"),
        account_id=account_id,
        security_id=security_id,
        trade_date=trade_date,
        quantity=quantity,
        price=price,
        side=side,
        goal_id=goal_id,
    )


def buy(security_id: str, quantity, price, trade_date="2024-01-01", **kwargs) -> Trade:
    return make_trade(security_id, "BUY", quantity, price, trade_date, **kwargs)


def sell(security_id: str, quantity, price, trade_date="2024-01-01", **kwargs) -> Trade:
    return make_trade(security_id, "SELL", quantity, price, trade_date, **kwargs)


def make_txn(
    kind: str,
    amount,
    txn_date="2024-01-01",
    account_id: str = "acc-1",
    counterparty_account_id: Optional[str] = None,
) -> AccountTransaction:
    """Helper to create a cash movement."""
    return AccountTransaction(
        txn_id=_next_id("txn"),
        account_id=account_id,
        txn_date=txn_date,
        amount=amount,
        kind=kind,
        counterparty_account_id=counterparty_account_id,
    )


def deposit(amount, txn_date="2024-01-01", **kwargs) -> AccountTransaction:
    return make_txn("DEPOSIT", amount, txn_date, **kwargs)


def withdrawal(amount, txn_date="2024-01-01", **kwargs) -> AccountTransaction:
    return make_txn("WITHDRAWAL", amount, txn_date, **kwargs)


def dividend(amount, txn_date="2024-01-01", **kwargs) -> AccountTransaction:
    return make_txn("DIVIDEND", amount, txn_date, **kwargs)


def valuation(valuation_date, total_value) -> MonthlyValuation:
    return MonthlyValuation(
        valuation_id=_next_id("val"),
        valuation_date=valuation_date,
        total_value=total_value,
    )


def make_security(
    security_id: str,
    category: str = "Equity",
    ticker: Optional[str] = None,
    is_tracked: bool = True,
) -> Security:
    return Security(
        security_id=security_id,
        ticker=ticker or security_id.upper(),
        name=security_id.upper(),
        category=category,
        is_tracked=is_tracked,
    )


def thresholds(caution: float = 20.0, warning: float = 30.0, **kwargs) -> AlertThresholds:
    return AlertThresholds(global_thresholds=Thresholds(caution=caution, warning=warning), **kwargs)


def assert_close(actual: float, expected: float, tolerance: float = 1e-6) -> None:
    """Assert two floats are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def holdings_engine() -> HoldingsEngine:
    return HoldingsEngine()


@pytest.fixture
def cash_reconciler() -> CashReconciler:
    return CashReconciler()


@pytest.fixture
def return_calculator() -> ReturnMetricsCalculator:
    return ReturnMetricsCalculator()


@pytest.fixture
def classifier() -> DeviationClassifier:
    return DeviationClassifier()


@pytest.fixture
def planner() -> RebalancePlanner:
    return RebalancePlanner()


@pytest.fixture
def analysis_service() -> AnalysisService:
    return AnalysisService()


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_ledger() -> LedgerSnapshot:
    """
    Two accounts, three tracked securities in two categories.

    acc-1: deposit 10000, buy 10 SPY @ 400, buy 20 BND @ 50
    acc-2: deposit 5000, buy 5 QQQ @ 300, dividend 100
    """
    return LedgerSnapshot(
        accounts=[
            Account(account_id="acc-1", name="Main"),
            Account(account_id="acc-2", name="Pension"),
        ],
        securities=[
            make_security("spy", "Equity"),
            make_security("qqq", "Equity"),
            make_security("bnd", "Bond"),
        ],
        trades=[
            buy("spy", 10, 400, "2024-01-10", account_id="acc-1"),
            buy("bnd", 20, 50, "2024-01-11", account_id="acc-1"),
            buy("qqq", 5, 300, "2024-02-01", account_id="acc-2"),
        ],
        transactions=[
            deposit(10000, "2024-01-02", account_id="acc-1"),
            deposit(5000, "2024-01-20", account_id="acc-2"),
            dividend(100, "2024-03-15", account_id="acc-2"),
        ],
        historical_gains=[
            HistoricalGain(
                gain_id="hg-1",
                account_id="acc-1",
                gain_date="2023-12-01",
                label="Before tracking",
                realized_pnl=250,
            )
        ],
        valuations=[
            valuation("2024-01-31", 15000),
            valuation("2024-02-29", 15300),
            valuation("2024-03-31", 15800),
        ],
        goals=[
            InvestmentGoal(
                goal_id="goal-1",
                name="House",
                creation_date="2024-01-01",
                goal_type="AMOUNT",
                target_amount=10000,
            )
        ],
    )


@pytest.fixture
def sample_market() -> MarketInputs:
    """Prices by ticker and targets by security id (as_of 2024-04-01)."""
    return MarketInputs(
        prices={"SPY": 500, "QQQ": 400, "BND": 50},
        target_weights={"spy": 50, "qqq": 30, "bnd": 20},
        thresholds=thresholds(),
        as_of=date(2024, 4, 1),
    )


# =============================================================================
# API CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Provide FastAPI test client with a fresh analysis service."""
    reset_analysis_service()
    with TestClient(app) as c:
        yield c
    reset_analysis_service()


@pytest.fixture
def sample_payload() -> dict:
    """JSON request body equivalent to sample_ledger and sample_market."""
    return {
        "ledger": {
            "accounts": [
                {"account_id": "acc-1", "name": "Main"},
                {"account_id": "acc-2", "name": "Pension"},
            ],
            "securities": [
                {"security_id": "spy", "ticker": "SPY", "name": "SPY", "category": "Equity"},
                {"security_id": "qqq", "ticker": "QQQ", "name": "QQQ", "category": "Equity"},
                {"security_id": "bnd", "ticker": "BND", "name": "BND", "category": "Bond"},
            ],
            "trades": [
                {"trade_id": "t1", "account_id": "acc-1", "security_id": "spy",
                 "trade_date": "2024-01-10", "quantity": 10, "price": 400, "side": "BUY"},
                {"trade_id": "t2", "account_id": "acc-1", "security_id": "bnd",
                 "trade_date": "2024-01-11", "quantity": "20", "price": "50", "side": "buy"},
                {"trade_id": "t3", "account_id": "acc-2", "security_id": "qqq",
                 "trade_date": "2024-02-01", "quantity": 5, "price": 300, "side": "BUY"},
            ],
            "transactions": [
                {"txn_id": "x1", "account_id": "acc-1", "txn_date": "2024-01-02",
                 "amount": 10000, "kind": "DEPOSIT"},
                {"txn_id": "x2", "account_id": "acc-2", "txn_date": "2024-01-20",
                 "amount": "5,000", "kind": "DEPOSIT"},
                {"txn_id": "x3", "account_id": "acc-2", "txn_date": "2024-03-15",
                 "amount": 100, "kind": "DIVIDEND"},
            ],
            "historical_gains": [
                {"gain_id": "hg-1", "account_id": "acc-1", "gain_date": "2023-12-01",
                 "label": "Before tracking", "realized_pnl": 250},
            ],
            "valuations": [
                {"valuation_id": "v1", "valuation_date": "2024-01-31", "total_value": 15000},
                {"valuation_id": "v2", "valuation_date": "2024-02-29", "total_value": 15300},
                {"valuation_id": "v3", "valuation_date": "2024-03-31", "total_value": 15800},
            ],
            "goals": [
                {"goal_id": "goal-1", "name": "House", "creation_date": "2024-01-01",
                 "goal_type": "AMOUNT", "target_amount": 10000},
            ],
        },
        "market": {
            "prices": {"SPY": 500, "QQQ": 400, "BND": 50},
            "target_weights": {"spy": 50, "qqq": 30, "bnd": 20},
            "thresholds": {"global_thresholds": {"caution": 20, "warning": 30}},
            "as_of": "2024-04-01",
        },
    }
