"""
FastAPI main application for the portfolio ledger.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from portfolio_ledger import __version__
from portfolio_ledger.bootstrap import build_trading_ledger
from portfolio_ledger.core.exceptions.ledger import (
    InvalidTradeTransition,
    LedgerException,
    NotFoundError,
    PortfolioError,
    StorageError,
    ValidationError,
)
from portfolio_ledger.core.services.trading_ledger import TradingLedger

from .routers import portfolios, trades, watchlists
from .schemas.api_models import ErrorResponse


def _status_for(exc: LedgerException) -> int:
    """Map ledger exceptions to HTTP status codes."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, PortfolioError | InvalidTradeTransition):
        return 409
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, StorageError):
        return 503
    return 500


def _details_for(exc: LedgerException) -> dict | None:
    """Expose the structured attributes some ledger exceptions carry."""
    details = {
        key: str(value)
        for key, value in vars(exc).items()
        if not key.startswith("_") and value is not None
    }
    return details or None


async def ledger_exception_handler(request: Request, exc: LedgerException) -> JSONResponse:
    """Render ledger exceptions as ErrorResponse bodies."""
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")

    body = ErrorResponse(error=type(exc).__name__, message=str(exc), details=_details_for(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(ledger: TradingLedger | None = None) -> FastAPI:
    """Create the API application around a ledger instance."""
    app = FastAPI(
        title="Portfolio Ledger API",
        version=__version__,
        description="API for trade recording and portfolio position accounting",
    )
    app.state.ledger = ledger or build_trading_ledger()

    # For development, use environment-specific origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Development frontend
        ],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin"],
    )
    app.add_exception_handler(LedgerException, ledger_exception_handler)

    app.include_router(trades.router, prefix="/api/users", tags=["trades"])
    app.include_router(portfolios.router, prefix="/api/users", tags=["portfolios"])
    app.include_router(watchlists.router, prefix="/api/users", tags=["watchlists"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "Portfolio Ledger API", "version": __version__, "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
