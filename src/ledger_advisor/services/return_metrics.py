"""Return metrics: cumulative, money-weighted, time-weighted and year-to-date."""

import logging
import math
from collections.abc import Collection, Iterable, Sequence
from datetime import date
from typing import Optional

from ledger_advisor.config.settings import Settings, get_settings
from ledger_advisor.core.numbers import percent_of, safe_divide
from ledger_advisor.domain.models import AccountTransaction, MonthlyValuation
from ledger_advisor.domain.views import (
    CashFlowPoint,
    ContributionTrendPoint,
    MonthlyPnlPoint,
    ReturnMetrics,
)
from ledger_advisor.services.cash_reconciler import (
    external_flows,
    net_external_contributions,
)

logger = logging.getLogger(__name__)


def npv(rate: float, flows: Sequence[CashFlowPoint], days_per_year: float = 365.25) -> float:
    """Net present value of dated flows, discounted from the earliest date."""
    if not flows:
        return 0.0
    first = min(f.flow_date for f in flows)
    total = 0.0
    for flow in flows:
        years = (flow.flow_date - first).days / days_per_year
        total += flow.amount / (1 + rate) ** years
    return total


def xirr(
    flows: Sequence[CashFlowPoint],
    *,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
    max_iterations: Optional[int] = None,
    tolerance: Optional[float] = None,
    days_per_year: Optional[float] = None,
) -> float:
    """
    Annualized internal rate of return of dated flows, in percent.

    Solved by bisection on [lower, upper]. Returns 0 when there are fewer
    than two flows, when the flows do not include both signs, or when NPV
    has the same sign at both bounds. Flow spans long enough to push the
    discount factor out of float range also give 0. When iterations run
    out the last midpoint is returned.
    """
    settings = get_settings()
    lower = settings.xirr_lower_bound if lower is None else lower
    upper = settings.xirr_upper_bound if upper is None else upper
    max_iterations = settings.xirr_max_iterations if max_iterations is None else max_iterations
    tolerance = settings.xirr_tolerance if tolerance is None else tolerance
    days_per_year = settings.days_per_year if days_per_year is None else days_per_year

    if len(flows) < 2:
        return 0.0
    if not any(f.amount > 0 for f in flows) or not any(f.amount < 0 for f in flows):
        return 0.0

    try:
        return _bisect(flows, lower, upper, max_iterations, tolerance, days_per_year)
    except (OverflowError, ZeroDivisionError):
        logger.warning("XIRR discount factor out of float range; returning 0")
        return 0.0


def _bisect(
    flows: Sequence[CashFlowPoint],
    lower: float,
    upper: float,
    max_iterations: int,
    tolerance: float,
    days_per_year: float,
) -> float:
    npv_low = npv(lower, flows, days_per_year)
    npv_high = npv(upper, flows, days_per_year)
    if not (math.isfinite(npv_low) and math.isfinite(npv_high)):
        logger.warning("XIRR bounds evaluate to a non-finite NPV; returning 0")
        return 0.0
    if npv_low * npv_high > 0:
        logger.debug("XIRR root not bracketed; returning 0")
        return 0.0

    low, high = lower, upper
    mid = 0.0
    for _ in range(max_iterations):
        mid = (low + high) / 2
        npv_mid = npv(mid, flows, days_per_year)
        if abs(npv_mid) < tolerance:
            return mid * 100
        if npv_low * npv_mid < 0:
            high = mid
        else:
            low = mid
    return mid * 100


def _sorted_valuations(valuations: Iterable[MonthlyValuation]) -> list[MonthlyValuation]:
    # Undated valuations cannot be placed on the timeline
    return sorted(
        (v for v in valuations if v.valuation_date is not None),
        key=lambda v: v.valuation_date,
    )


def time_weighted_return(
    valuations: Iterable[MonthlyValuation],
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
) -> float:
    """
    Chain sub-period returns between consecutive valuations, in percent.

    sub = (end − net external flow in (prev, cur]) / start − 1; periods
    starting at a non-positive value are skipped.
    """
    growth = _twrr_growth(valuations, transactions, internal_account_ids)
    if growth is None:
        return 0.0
    return (growth - 1) * 100


def annualized_time_weighted_return(
    valuations: Iterable[MonthlyValuation],
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
    days_per_year: Optional[float] = None,
) -> float:
    """
    Annualized TWRR, in percent.

    Contributions made up to the first valuation open a leading sub-period,
    first value / net external flow to date, when that flow is positive.
    The compounded growth is annualized from the earliest dated transaction
    (the first valuation when there is none) to the last valuation. Returns
    -100 when growth is <= 0 and 0 when the span is empty or the annualized
    factor leaves float range.
    """
    if days_per_year is None:
        days_per_year = get_settings().days_per_year
    ordered = _sorted_valuations(valuations)
    if len(ordered) < 2:
        return 0.0
    transactions = list(transactions)

    first = ordered[0]
    growth = _twrr_growth(ordered, transactions, internal_account_ids)
    opening_flow = net_external_contributions(
        transactions, internal_account_ids, end=first.valuation_date
    )
    if opening_flow > 0:
        leading = first.value / opening_flow
        growth = leading if growth is None else growth * leading
    if growth is None:
        return 0.0

    dated = [t.txn_date for t in transactions if t.txn_date is not None]
    start = min(dated) if dated else first.valuation_date
    span_days = (ordered[-1].valuation_date - start).days
    if span_days <= 0:
        return 0.0
    if growth <= 0:
        return -100.0
    try:
        factor = math.exp(math.log(growth) * days_per_year / span_days)
    except OverflowError:
        logger.warning(
            "Annualized TWRR out of float range over %d days; returning 0", span_days
        )
        return 0.0
    return (factor - 1) * 100


def _twrr_growth(
    valuations: Iterable[MonthlyValuation],
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
) -> Optional[float]:
    ordered = _sorted_valuations(valuations)
    if len(ordered) < 2:
        return None
    transactions = list(transactions)

    growth = 1.0
    chained = 0
    for prev, cur in zip(ordered, ordered[1:]):
        start = prev.value
        if start <= 0:
            continue
        flow = net_external_contributions(
            transactions,
            internal_account_ids,
            start=prev.valuation_date,
            end=cur.valuation_date,
        )
        growth *= (cur.value - flow) / start
        chained += 1
    return growth if chained else None


def monthly_pnl(
    valuations: Iterable[MonthlyValuation],
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
    year: int,
) -> list[MonthlyPnlPoint]:
    """
    Profit of each valuation in ``year`` relative to the one before it.

    P/L = current − previous − net external flow in (previous, current].
    The first valuation of the year is measured from the last valuation of
    the previous year; without one it has no baseline and is skipped.
    """
    ordered = _sorted_valuations(valuations)
    transactions = list(transactions)
    points: list[MonthlyPnlPoint] = []

    previous: Optional[MonthlyValuation] = None
    for valuation in ordered:
        if valuation.valuation_date.year < year:
            previous = valuation
            continue
        if valuation.valuation_date.year > year:
            break
        if previous is not None:
            flow = net_external_contributions(
                transactions,
                internal_account_ids,
                start=previous.valuation_date,
                end=valuation.valuation_date,
            )
            points.append(
                MonthlyPnlPoint(
                    valuation_date=valuation.valuation_date,
                    label=valuation.valuation_date.strftime("%Y-%m"),
                    profit_loss=valuation.value - previous.value - flow,
                )
            )
        previous = valuation
    return points


def contribution_trend(
    valuations: Iterable[MonthlyValuation],
    transactions: Iterable[AccountTransaction],
    internal_account_ids: Collection[str],
) -> list[ContributionTrendPoint]:
    """Recorded value vs cumulative net external contributions per valuation."""
    transactions = list(transactions)
    points = []
    for valuation in _sorted_valuations(valuations):
        contributed = net_external_contributions(
            transactions,
            internal_account_ids,
            end=valuation.valuation_date,
        )
        profit = valuation.value - contributed
        points.append(
            ContributionTrendPoint(
                valuation_date=valuation.valuation_date,
                total_value=valuation.value,
                cumulative_contributions=contributed,
                profit_loss=profit,
                profit_loss_rate=percent_of(profit, contributed),
            )
        )
    return points


class ReturnMetricsCalculator:
    """
    Service for portfolio return metrics.

    All rates are percentages. "Today" is the as_of date handed in by the
    caller so that results are reproducible.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def cash_flows(
        self,
        transactions: Iterable[AccountTransaction],
        internal_account_ids: Collection[str],
        total_value: float,
        as_of: date,
    ) -> list[CashFlowPoint]:
        """
        Build the XIRR series.

        Deposits are negative, withdrawals positive, plus a terminal flow of
        the current total value dated as_of.
        """
        flows = [
            CashFlowPoint(flow_date=t.txn_date, amount=-t.signed_contribution)
            for t in external_flows(transactions, internal_account_ids)
            if t.txn_date is not None
        ]
        if total_value > 0 or flows:
            flows.append(CashFlowPoint(flow_date=as_of, amount=total_value))
        flows.sort(key=lambda f: f.flow_date)
        return flows

    def money_weighted_return(self, flows: Sequence[CashFlowPoint]) -> float:
        s = self._settings
        return xirr(
            flows,
            lower=s.xirr_lower_bound,
            upper=s.xirr_upper_bound,
            max_iterations=s.xirr_max_iterations,
            tolerance=s.xirr_tolerance,
            days_per_year=s.days_per_year,
        )

    def ytd(
        self,
        valuations: Iterable[MonthlyValuation],
        transactions: Iterable[AccountTransaction],
        internal_account_ids: Collection[str],
        total_value: float,
        as_of: date,
    ) -> tuple[float, float, float]:
        """
        Year-to-date (return %, profit, base).

        base = last valuation before Jan 1 of the as_of year (0 if none)
        plus net external contributions since then.
        """
        year_start = date(as_of.year, 1, 1)
        prior = [v for v in _sorted_valuations(valuations) if v.valuation_date < year_start]
        opening = prior[-1].value if prior else 0.0
        inflow = net_external_contributions(
            transactions,
            internal_account_ids,
            start=date(as_of.year - 1, 12, 31),
            end=as_of,
        )
        base = opening + inflow
        profit = total_value - base
        rate = percent_of(profit, base) if base > 0 else 0.0
        return rate, profit, base

    def calculate(
        self,
        *,
        total_value: float,
        transactions: Iterable[AccountTransaction],
        valuations: Iterable[MonthlyValuation],
        internal_account_ids: Collection[str],
        as_of: date,
        first_event_date: Optional[date] = None,
    ) -> ReturnMetrics:
        """
        Compute every return metric for the portfolio.

        first_event_date anchors the simple annualized return; it defaults
        to the earliest transaction date.
        """
        transactions = list(transactions)
        valuations = list(valuations)

        contributed = net_external_contributions(transactions, internal_account_ids)
        profit_loss = total_value - contributed
        cumulative = percent_of(profit_loss, contributed)

        flows = self.cash_flows(transactions, internal_account_ids, total_value, as_of)
        mwrr = self.money_weighted_return(flows)

        twrr = time_weighted_return(valuations, transactions, internal_account_ids)
        twrr_annual = annualized_time_weighted_return(
            valuations,
            transactions,
            internal_account_ids,
            days_per_year=self._settings.days_per_year,
        )

        ytd_rate, ytd_profit, ytd_base = self.ytd(
            valuations, transactions, internal_account_ids, total_value, as_of
        )

        if first_event_date is None:
            dated = [t.txn_date for t in transactions if t.txn_date is not None]
            first_event_date = min(dated) if dated else as_of
        elapsed_days = max(1, (as_of - first_event_date).days)
        years = elapsed_days / self._settings.days_per_year

        return ReturnMetrics(
            cumulative_return=cumulative,
            money_weighted_return=mwrr,
            time_weighted_return=twrr,
            annualized_time_weighted_return=twrr_annual,
            ytd_return=ytd_rate,
            ytd_profit=ytd_profit,
            ytd_base=ytd_base,
            simple_annualized_return=safe_divide(cumulative, years),
            years_elapsed=years,
            net_external_contributions=contributed,
            profit_loss=profit_loss,
            total_value=total_value,
        )
