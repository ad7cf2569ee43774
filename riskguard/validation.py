"""Order types and pre-trade order validation."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

_order_ids = itertools.count(1)
_trade_ids = itertools.count(1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _fmt(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    STOP_LIMIT = "stop_limit"


@dataclass
class Order:
    """An order submitted by a client."""

    symbol: str
    side: Side
    order_type: OrderType
    price: float
    quantity: float
    client_id: uuid.UUID = field(default_factory=uuid.uuid4)
    id: int = field(default_factory=lambda: next(_order_ids))
    timestamp: datetime = field(default_factory=_now)

    def signed_quantity(self) -> float:
        return self.quantity if self.side is Side.BUY else -self.quantity


@dataclass
class Trade:
    """An execution between a buyer and a seller."""

    symbol: str
    price: float
    quantity: float
    buyer_client_id: uuid.UUID
    seller_client_id: uuid.UUID
    id: int = field(default_factory=lambda: next(_trade_ids))
    timestamp: datetime = field(default_factory=_now)


class ValidationError(Exception):
    """Base class for order validation failures."""


class OrderSizeExceedsLimit(ValidationError):
    def __init__(self, size: float, max_size: float) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Order size {_fmt(size)} exceeds maximum allowed {_fmt(max_size)}"
        )


class PositionLimitExceeded(ValidationError):
    def __init__(self, current: float, new_position: float, limit: float) -> None:
        self.current = current
        self.new_position = new_position
        self.limit = limit
        super().__init__(
            f"Position limit would be exceeded: current {_fmt(current)}, "
            f"new {_fmt(new_position)}, limit {_fmt(limit)}"
        )


class DailyPnLLimitExceeded(ValidationError):
    def __init__(self, current_pnl: float, limit: float) -> None:
        self.current_pnl = current_pnl
        self.limit = limit
        super().__init__(
            f"Daily P&L limit exceeded: current {_fmt(current_pnl)}, limit {_fmt(limit)}"
        )


class PriceDeviationExceedsLimit(ValidationError):
    def __init__(
        self, price: float, reference_price: float, deviation: float, limit: float
    ) -> None:
        self.price = price
        self.reference_price = reference_price
        self.deviation = deviation
        self.limit = limit
        super().__init__(
            f"Price {_fmt(price)} deviates {_fmt(deviation)}% from reference "
            f"{_fmt(reference_price)}, limit {_fmt(limit)}%"
        )


class NotionalValueExceedsLimit(ValidationError):
    def __init__(self, notional: float, limit: float) -> None:
        self.notional = notional
        self.limit = limit
        super().__init__(
            f"Notional value {_fmt(notional)} exceeds limit {_fmt(limit)}"
        )


class InvalidOrder(ValidationError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid order: {reason}")


class MarketClosed(ValidationError):
    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Market is closed for symbol {symbol}")


class UnsupportedSymbol(ValidationError):
    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Symbol {symbol} is not supported")


class InvalidQuantity(ValidationError):
    def __init__(self) -> None:
        super().__init__("Order quantity must be positive")


class InvalidPrice(ValidationError):
    def __init__(self) -> None:
        super().__init__("Order price must be positive")


class OrderSizeBelowMinimum(ValidationError):
    def __init__(self, size: float, min_size: float) -> None:
        self.size = size
        self.min_size = min_size
        super().__init__(
            f"Order size is below minimum: {_fmt(size)} < {_fmt(min_size)}"
        )


@dataclass
class ValidationConfig:
    enable_price_validation: bool = True
    enable_size_validation: bool = True
    enable_position_validation: bool = True
    enable_pnl_validation: bool = True
    enable_notional_validation: bool = True
    enable_market_hours_validation: bool = False
    max_order_size: float = 1000.0
    min_order_size: float = 0.001
    max_price_deviation_pct: float = 5.0
    max_notional_value: float = 1_000_000.0
    supported_symbols: list[str] = field(default_factory=lambda: ["BTCUSD", "ETHUSD"])


class OrderValidator:
    """Checks orders against a ValidationConfig, raising ValidationError."""

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self.config = config if config is not None else ValidationConfig()

    def validate_order(self, order: Order) -> None:
        self._validate_basic_properties(order)
        if self.config.enable_size_validation:
            self._validate_order_size(order)
        if self.config.enable_notional_validation:
            self._validate_notional_value(order)

    def validate_order_with_reference_price(
        self, order: Order, reference_price: float | None
    ) -> None:
        self.validate_order(order)
        if self.config.enable_price_validation and reference_price is not None:
            self._validate_price_deviation(order.price, reference_price)

    def validate_position_impact(
        self, order: Order, current_position: float, position_limit: float
    ) -> None:
        if not self.config.enable_position_validation:
            return
        new_position = current_position + order.signed_quantity()
        if abs(new_position) > position_limit:
            raise PositionLimitExceeded(current_position, new_position, position_limit)

    def validate_pnl_impact(self, current_pnl: float, pnl_limit: float) -> None:
        if not self.config.enable_pnl_validation:
            return
        if current_pnl < -pnl_limit:
            raise DailyPnLLimitExceeded(current_pnl, pnl_limit)

    def _validate_basic_properties(self, order: Order) -> None:
        if order.quantity <= 0.0:
            raise InvalidQuantity()
        if order.price <= 0.0 and order.order_type is not OrderType.MARKET:
            raise InvalidPrice()
        if (
            self.config.enable_market_hours_validation
            and order.symbol not in self.config.supported_symbols
        ):
            raise UnsupportedSymbol(order.symbol)

    def _validate_order_size(self, order: Order) -> None:
        if order.quantity > self.config.max_order_size:
            raise OrderSizeExceedsLimit(order.quantity, self.config.max_order_size)
        if order.quantity < self.config.min_order_size:
            raise OrderSizeBelowMinimum(order.quantity, self.config.min_order_size)

    def _validate_notional_value(self, order: Order) -> None:
        notional = order.quantity * order.price
        if notional > self.config.max_notional_value:
            raise NotionalValueExceedsLimit(notional, self.config.max_notional_value)

    def _validate_price_deviation(self, order_price: float, reference_price: float) -> None:
        deviation = abs((order_price - reference_price) / reference_price) * 100.0
        if deviation > self.config.max_price_deviation_pct:
            raise PriceDeviationExceedsLimit(
                order_price, reference_price, deviation, self.config.max_price_deviation_pct
            )