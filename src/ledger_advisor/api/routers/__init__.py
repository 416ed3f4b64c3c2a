"""API routers package."""

from ledger_advisor.api.routers.analysis import router as analysis_router
from ledger_advisor.api.routers.rebalancing import router as rebalancing_router

__all__ = [
    "analysis_router",
    "rebalancing_router",
]
