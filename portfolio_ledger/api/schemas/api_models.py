"""
Pydantic schemas for API request/response models.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from portfolio_ledger.core.constants import MAX_SYMBOL_LENGTH
from portfolio_ledger.core.enums import AlertCondition, TradeSide, TradeStatus
from portfolio_ledger.core.models.portfolio import PortfolioSnapshot, PortfolioValuation
from portfolio_ledger.core.models.position import Position
from portfolio_ledger.core.models.profile import ProfileDefaults
from portfolio_ledger.core.models.trade import Trade
from portfolio_ledger.core.models.watchlist import Alert, Watchlist
from portfolio_ledger.core.services.trading_ledger import PortfolioOverview, TradeExecution


class ProfileDefaultsModel(BaseModel):
    """Display fields used when the user's profile is created."""

    email: str = ""
    full_name: str = ""
    avatar_url: str = ""

    def to_domain(self) -> ProfileDefaults:
        return ProfileDefaults(
            email=self.email, full_name=self.full_name, avatar_url=self.avatar_url
        )


class TradeRequest(BaseModel):
    """Request model for a trade instruction."""

    symbol: str = Field(..., min_length=1, max_length=MAX_SYMBOL_LENGTH, description="Ticker")
    side: TradeSide = Field(..., description="buy or sell")
    quantity: Decimal = Field(..., gt=0, description="Quantity to trade")
    price: Decimal = Field(..., gt=0, description="Execution price")
    current_price: Decimal | None = Field(
        default=None, gt=0, description="Latest market price used to mark the position"
    )
    profile: ProfileDefaultsModel | None = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Normalize ticker to uppercase."""
        return v.strip().upper()


class TradeResponse(BaseModel):
    """Response model for a recorded trade."""

    id: str
    portfolio_id: str
    symbol: str
    side: TradeSide
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    status: TradeStatus
    executed_at: datetime | None
    created_at: datetime

    @classmethod
    def from_domain(cls, trade: Trade) -> "TradeResponse":
        return cls(**trade.to_dict())


class PositionResponse(BaseModel):
    """Response model for a position snapshot."""

    symbol: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Decimal
    market_value: Decimal
    unrealized_pnl: Decimal
    realized_pnl: Decimal
    updated_at: datetime

    @classmethod
    def from_domain(cls, position: Position) -> "PositionResponse":
        data = position.to_dict()
        return cls(**{k: data[k] for k in cls.model_fields})


class ValuationResponse(BaseModel):
    """Response model for a derived portfolio valuation."""

    cash_balance: Decimal
    market_value: Decimal
    unrealized_pnl: Decimal
    realized_pnl: Decimal
    total_value: Decimal
    positions: int

    @classmethod
    def from_domain(cls, valuation: PortfolioValuation) -> "ValuationResponse":
        return cls(**valuation.to_dict())


class SnapshotResponse(ValuationResponse):
    """Response model for a recorded valuation snapshot."""

    timestamp: datetime

    @classmethod
    def from_snapshot(cls, snapshot: PortfolioSnapshot) -> "SnapshotResponse":
        return cls(timestamp=snapshot.timestamp, **snapshot.valuation.to_dict())


class TradeExecutionResponse(BaseModel):
    """Response model for an executed trade."""

    trade: TradeResponse
    position: PositionResponse
    realized_pnl: Decimal
    valuation: ValuationResponse

    @classmethod
    def from_domain(cls, execution: TradeExecution) -> "TradeExecutionResponse":
        return cls(
            trade=TradeResponse.from_domain(execution.trade),
            position=PositionResponse.from_domain(execution.position),
            realized_pnl=execution.realized_pnl,
            valuation=ValuationResponse.from_domain(execution.valuation),
        )


class PortfolioResponse(BaseModel):
    """Response model for a portfolio overview."""

    id: str
    name: str
    cash_balance: Decimal
    total_value: Decimal
    positions: list[PositionResponse]
    valuation: ValuationResponse

    @classmethod
    def from_domain(cls, overview: PortfolioOverview) -> "PortfolioResponse":
        return cls(
            id=overview.portfolio.id,
            name=overview.portfolio.name,
            cash_balance=overview.portfolio.cash_balance,
            total_value=overview.valuation.total_value,
            positions=[PositionResponse.from_domain(p) for p in overview.positions],
            valuation=ValuationResponse.from_domain(overview.valuation),
        )


class MarkPricesRequest(BaseModel):
    """Request model for externally observed prices."""

    prices: dict[str, Decimal] = Field(..., min_length=1)

    @field_validator("prices")
    @classmethod
    def validate_prices(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        """Validate that every price is positive."""
        for symbol, price in v.items():
            if price <= 0:
                raise ValueError(f"Price for {symbol} must be positive")
        return v


class WatchlistResponse(BaseModel):
    """Response model for a watchlist."""

    id: str
    name: str
    symbols: list[str]
    updated_at: datetime

    @classmethod
    def from_domain(cls, watchlist: Watchlist) -> "WatchlistResponse":
        return cls(
            id=watchlist.id,
            name=watchlist.name,
            symbols=list(watchlist.symbols),
            updated_at=watchlist.updated_at,
        )


class WatchlistSymbolRequest(BaseModel):
    """Request model for adding a symbol to a watchlist."""

    symbol: str = Field(..., min_length=1, max_length=MAX_SYMBOL_LENGTH)


class AlertRequest(BaseModel):
    """Request model for creating a price alert."""

    symbol: str = Field(..., min_length=1, max_length=MAX_SYMBOL_LENGTH)
    condition: AlertCondition
    target_price: Decimal = Field(..., gt=0)


class AlertUpdateRequest(BaseModel):
    """Request model for enabling or disabling an alert."""

    is_active: bool


class AlertResponse(BaseModel):
    """Response model for a price alert."""

    id: str
    symbol: str
    condition: AlertCondition
    target_price: Decimal
    is_active: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, alert: Alert) -> "AlertResponse":
        return cls(
            id=alert.id,
            symbol=alert.symbol,
            condition=alert.condition,
            target_price=alert.target_price,
            is_active=alert.is_active,
            created_at=alert.created_at,
        )


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: dict | None = None
