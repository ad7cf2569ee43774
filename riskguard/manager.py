"""Risk manager combining limits, validation and position tracking."""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from riskguard.limits import RiskLimits, RiskLimitType
from riskguard.position import Position, PositionTracker
from riskguard.validation import Order, OrderValidator, Side, Trade, ValidationError

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RiskError(Exception):
    """Raised when an order fails a risk check."""


@dataclass
class RiskConfig:
    enable_position_limits: bool = True
    enable_pnl_limits: bool = True
    enable_order_size_limits: bool = True
    enable_price_validation: bool = True
    max_symbols: int = 1000
    default_position_limit: float = 1000.0
    default_daily_loss_limit: float = 100_000.0
    max_order_size: float = 100.0
    price_tolerance_pct: float = 5.0


@dataclass
class RiskMetrics:
    total_positions: int = 0
    total_pnl: float = 0.0
    daily_pnl: float = 0.0
    max_position_size: float = 0.0
    violations_count: int = 0
    last_update: datetime = field(default_factory=_now)


class RiskManager:
    """Thread-safe pre-trade checks and post-trade position bookkeeping."""

    def __init__(self, config: RiskConfig | None = None) -> None:
        self.config = config if config is not None else RiskConfig()
        self._lock = threading.RLock()
        self._limits: dict[str, RiskLimits] = {}
        self._positions: dict[str, PositionTracker] = {}
        self._validator = OrderValidator()
        self._metrics = RiskMetrics()
        self._daily_pnl: dict[uuid.UUID, float] = {}

    def validate_order(self, order: Order) -> None:
        """Raise RiskError if the order breaks any enabled risk check."""
        try:
            self._validator.validate_order(order)
        except ValidationError as exc:
            raise RiskError(f"Risk validation failed: {exc}") from exc

        if self.config.enable_position_limits:
            self._validate_position_limits(order)
        if self.config.enable_pnl_limits:
            self._validate_pnl_limits(order.client_id)

    def process_trade(self, trade: Trade) -> None:
        with self._lock:
            tracker = self._positions.get(trade.symbol)
            if tracker is None:
                tracker = PositionTracker(trade.symbol)
                self._positions[trade.symbol] = tracker
            tracker.update_position_with_trade(trade, trade.buyer_client_id, Side.BUY)
            tracker.update_position_with_trade(trade, trade.seller_client_id, Side.SELL)

            for client_id in (trade.buyer_client_id, trade.seller_client_id):
                position = tracker.get_position(client_id)
                if position is not None:
                    self._daily_pnl[client_id] = position.realized_pnl

            self._update_metrics()

    def add_symbol_limits(self, symbol: str, limits: RiskLimits) -> None:
        with self._lock:
            self._limits[symbol] = limits

    def get_symbol_limits(self, symbol: str) -> RiskLimits | None:
        with self._lock:
            limits = self._limits.get(symbol)
            return copy.copy(limits) if limits is not None else None

    def get_position(self, symbol: str, client_id: uuid.UUID) -> Position | None:
        with self._lock:
            tracker = self._positions.get(symbol)
            if tracker is None:
                return None
            position = tracker.get_position(client_id)
            return copy.copy(position) if position is not None else None

    def get_all_positions(self, symbol: str) -> PositionTracker | None:
        with self._lock:
            tracker = self._positions.get(symbol)
            return copy.deepcopy(tracker) if tracker is not None else None

    def get_metrics(self) -> RiskMetrics:
        with self._lock:
            return copy.copy(self._metrics)

    def get_daily_pnl(self, client_id: uuid.UUID) -> float:
        with self._lock:
            return self._daily_pnl.get(client_id, 0.0)

    def reset_daily_pnl(self) -> None:
        with self._lock:
            self._daily_pnl.clear()
        logger.info("Daily P&L reset for all clients")

    def set_position_limit(self, symbol: str, limit: float) -> None:
        with self._lock:
            limits = self._limits.get(symbol)
            if limits is not None:
                limits.get_limit(RiskLimitType.POSITION_SIZE).max_value = limit

    def set_daily_pnl_limit(self, symbol: str, limit: float) -> None:
        with self._lock:
            limits = self._limits.get(symbol)
            if limits is not None:
                limits.get_limit(RiskLimitType.DAILY_PNL).max_value = limit

    def check_risk_violations(self) -> list[tuple[str, list[RiskLimitType]]]:
        with self._lock:
            return [
                (symbol, violations)
                for symbol, limits in self._limits.items()
                if (violations := limits.get_violations())
            ]

    def _validate_position_limits(self, order: Order) -> None:
        with self._lock:
            limits = self._limits.get(order.symbol) or RiskLimits(order.symbol)
            tracker = self._positions.get(order.symbol)
            position = tracker.get_position(order.client_id) if tracker else None
            current = position.quantity if position is not None else 0.0
            max_position = limits.position_limit.max_value
        try:
            self._validator.validate_position_impact(order, current, max_position)
        except ValidationError as exc:
            raise RiskError(f"Position limit validation failed: {exc}") from exc

    def _validate_pnl_limits(self, client_id: uuid.UUID) -> None:
        daily_pnl = self.get_daily_pnl(client_id)
        try:
            self._validator.validate_pnl_impact(daily_pnl, self.config.default_daily_loss_limit)
        except ValidationError as exc:
            raise RiskError(f"P&L limit validation failed: {exc}") from exc

    def _update_metrics(self) -> None:
        trackers = list(self._positions.values())
        metrics = self._metrics
        metrics.total_positions = sum(t.get_position_count() for t in trackers)
        metrics.total_pnl = sum(t.total_pnl for t in trackers)
        metrics.daily_pnl = sum(self._daily_pnl.values())
        metrics.max_position_size = max(
            (t.get_max_position_size() for t in trackers), default=0.0
        )
        metrics.max_position_size = max(metrics.max_position_size, 0.0)
        metrics.violations_count = len(self.check_risk_violations())
        metrics.last_update = _now()