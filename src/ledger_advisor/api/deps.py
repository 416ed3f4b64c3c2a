"""Dependency injection for FastAPI."""

from typing import Optional

from ledger_advisor.api.schemas import AnalysisRequest
from ledger_advisor.domain.models import LedgerSnapshot, MarketInputs
from ledger_advisor.services import AnalysisService

# Shared across requests so the result cache survives between calls
_analysis_service: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Provide the AnalysisService instance."""
    global _analysis_service
    if _analysis_service is None:
        _analysis_service = AnalysisService()
    return _analysis_service


def reset_analysis_service() -> None:
    """Drop the shared instance (and its cache)."""
    global _analysis_service
    _analysis_service = None


def to_domain(request: AnalysisRequest) -> tuple[LedgerSnapshot, MarketInputs]:
    """Convert a request body into engine inputs."""
    return request.ledger.to_domain(), request.market.to_domain()
