"""Rebalancing endpoints."""

from fastapi import APIRouter, Depends

from ledger_advisor.api.deps import get_analysis_service, to_domain
from ledger_advisor.api.schemas import (
    AnalysisRequest,
    ManualSimulationResponse,
    RebalancePlanResponse,
    RebalanceScenarioResponse,
    SimulationRequest,
    SimulationResultResponse,
)
from ledger_advisor.services import AnalysisService

router = APIRouter(prefix="/rebalancing", tags=["rebalancing"])


# Declared before /{security_id} so "simulate" is not taken as an id
@router.post("/simulate", response_model=ManualSimulationResponse)
def simulate_trades(
    request: SimulationRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> ManualSimulationResponse:
    """Project category weights after user-entered trades."""
    ledger, market = to_domain(request)
    scenario, simulation = analysis.simulate_trades(
        ledger,
        market,
        [t.to_domain() for t in request.trades],
    )
    return ManualSimulationResponse(
        scenario=RebalanceScenarioResponse.model_validate(scenario),
        simulation=SimulationResultResponse.model_validate(simulation),
    )


@router.post("/{security_id}", response_model=RebalancePlanResponse)
def get_rebalance_plan(
    security_id: str,
    request: AnalysisRequest,
    analysis: AnalysisService = Depends(get_analysis_service),
) -> RebalancePlanResponse:
    """External-funding and internal-reallocation scenarios for one security."""
    ledger, market = to_domain(request)
    plan = analysis.rebalance_plan(ledger, market, security_id)
    return RebalancePlanResponse.model_validate(plan)
