"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledger_advisor.config.settings import get_settings
from ledger_advisor.config.logging_config import setup_logging
from ledger_advisor.api.routers import analysis_router, rebalancing_router
from ledger_advisor.core.exceptions import AppError, NotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Portfolio analytics and rebalancing over a personal investment ledger",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(analysis_router)
app.include_router(rebalancing_router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Unknown resource referenced by the request path."""
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": exc.message},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
