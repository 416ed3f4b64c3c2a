"""Portfolio analysis endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ledger_advisor.api.deps import get_analysis_service, to_domain
from ledger_advisor.api.schemas import (
    AnalysisRequest,
    ContributionTrendPointResponse,
    ContributionTrendResponse,
    DeviationReportResponse,
    GoalProgressResponse,
    GoalsResponse,
    HoldingResponse,
    HoldingsResponse,
    MonthlyPnlPointResponse,
    MonthlyPnlResponse,
    PortfolioResponse,
    RealizedGainResponse,
    RealizedGainsResponse,
    ReturnMetricsResponse,
    SummaryResponse,
)
from ledger_advisor.core.dates import today_local
from ledger_advisor.services import AnalysisService, total_realized_pnl

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/holdings", response_model=HoldingsResponse)
def get_holdings(
    request: AnalysisRequest,
    account_id: Optional[str] = Query(None, description="Restrict to one account"),
    goal_id: Optional[str] = Query(None, description="Restrict to one goal sub-ledger"),
    by_account: bool = Query(False, description="One holding per security and account"),
    analysis: AnalysisService = Depends(get_analysis_service),
) -> HoldingsResponse:
    """Reconstruct holdings from the trade ledger."""
    ledger, _ = to_domain(request)
    result = analysis.holdings(
        ledger,
        account_id=account_id,
        goal_id=goal_id,
        by_account=by_account,
    )
    return HoldingsResponse(
        holdings=[HoldingResponse.model_validate(h) for h in result.holdings],
        total_realized_pnl=result.total_realized_pnl,
    )


@router.post("/realized-gains", response_model=RealizedGainsResponse)
def get_realized_gains(
    request: AnalysisRequest,
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    account_id: Optional[str] = Query(None),
    security_id: Optional[str] = Query(None),
    analysis: AnalysisService = Depends(get_analysis_service),
) -> RealizedGainsResponse:
    """Sell events merged with historical gains, newest first."""
    ledger, _ = to_domain(request)
    gains = analysis.realized_gains(
        ledger,
        year=year,
        month=month,
        account_id=account_id,
        security_id=security_id,
    )
    return RealizedGainsResponse(
        gains=[RealizedGainResponse.model_validate(g) for g in gains],
        total_realized_pnl=total_realized_pnl(gains),
    )


@router.post("/portfolio", response_model=PortfolioResponse)
def get_portfolio(
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> PortfolioResponse:
    """Account and portfolio valuations."""
    ledger, market = to_domain(request)
    return PortfolioResponse.model_validate(analysis.portfolio(ledger, market))


@router.post("/returns", response_model=ReturnMetricsResponse)
def get_returns(
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> ReturnMetricsResponse:
    """Cumulative, money-weighted, time-weighted and YTD returns."""
    ledger, market = to_domain(request)
    return ReturnMetricsResponse.model_validate(analysis.returns(ledger, market))


@router.post("/deviations", response_model=DeviationReportResponse)
def get_deviations(
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> DeviationReportResponse:
    """Weight deviations and alert tiers."""
    ledger, market = to_domain(request)
    return DeviationReportResponse.model_validate(analysis.deviations(ledger, market))


@router.post("/monthly-pnl", response_model=MonthlyPnlResponse)
def get_monthly_pnl(
    request: AnalysisRequest,
    year: Optional[int] = Query(None, description="Defaults to the as_of year"),
    analysis: AnalysisService = Depends(get_analysis_service),
) -> MonthlyPnlResponse:
    """Month-over-month profit net of external flows."""
    ledger, market = to_domain(request)
    if year is None:
        year = (market.as_of or today_local()).year
    points = analysis.monthly_pnl(ledger, year)
    return MonthlyPnlResponse(
        year=year,
        points=[MonthlyPnlPointResponse.model_validate(p) for p in points],
        total_profit_loss=sum(p.profit_loss for p in points),
    )


@router.post("/contribution-trend", response_model=ContributionTrendResponse)
def get_contribution_trend(
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> ContributionTrendResponse:
    """Recorded valuations against cumulative contributions."""
    ledger, _ = to_domain(request)
    return ContributionTrendResponse(
        points=[
            ContributionTrendPointResponse.model_validate(p)
            for p in analysis.contribution_trend(ledger)
        ]
    )


@router.post("/goals", response_model=GoalsResponse)
def get_goals(
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> GoalsResponse:
    """Progress of every investment goal."""
    ledger, market = to_domain(request)
    return GoalsResponse(
        goals=[GoalProgressResponse.model_validate(g) for g in analysis.goals(ledger, market)]
    )


@router.post("/summary", response_model=SummaryResponse)
def get_summary(
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> SummaryResponse:
    """Valuation, returns and alerts in one response."""
    ledger, market = to_domain(request)
    return SummaryResponse.model_validate(analysis.summary(ledger, market))
