"""Per-client positions and per-symbol position aggregation."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from riskguard.validation import Side, Trade


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Position:
    """A client's signed position in one symbol; negative quantity is short."""

    symbol: str
    client_id: uuid.UUID
    quantity: float = 0.0
    average_price: float = 0.0
    unrealized_pnl: float = 0.0
    realized_pnl: float = 0.0
    total_pnl: float = 0.0
    mark_price: float | None = None
    created_at: datetime = field(default_factory=_now)
    last_update: datetime | None = None

    def __post_init__(self) -> None:
        if self.last_update is None:
            self.last_update = self.created_at

    def is_long(self) -> bool:
        return self.quantity > 0.0

    def is_short(self) -> bool:
        return self.quantity < 0.0

    def is_flat(self) -> bool:
        return self.quantity == 0.0

    def notional_value(self) -> float:
        return self.quantity * self.average_price

    def update_mark_price(self, mark_price: float) -> None:
        self.mark_price = mark_price
        self._refresh_pnl()

    def add_trade(self, trade: Trade, side: Side) -> None:
        """Apply a fill on the given side to this position."""
        signed = trade.quantity if side is Side.BUY else -trade.quantity

        if self.is_flat():
            self.quantity = signed
            self.average_price = trade.price
        elif (self.is_long() and side is Side.BUY) or (self.is_short() and side is Side.SELL):
            new_total_cost = self.notional_value() + trade.quantity * trade.price
            new_total_quantity = self.quantity + signed
            if new_total_quantity != 0.0:
                self.average_price = new_total_cost / new_total_quantity
            self.quantity = new_total_quantity
        else:
            closing = min(trade.quantity, abs(self.quantity))
            if self.is_long():
                pnl_per_unit = trade.price - self.average_price
            else:
                pnl_per_unit = self.average_price - trade.price
            self.realized_pnl += pnl_per_unit * closing

            remaining = trade.quantity - closing
            if self.is_long():
                self.quantity -= closing
            else:
                self.quantity += closing

            if remaining > 0.0:
                self.quantity = remaining if side is Side.BUY else -remaining
                self.average_price = trade.price

        self._refresh_pnl()

    def _refresh_pnl(self) -> None:
        if self.mark_price is not None:
            if self.is_flat():
                self.unrealized_pnl = 0.0
            else:
                if self.is_long():
                    per_unit = self.mark_price - self.average_price
                else:
                    per_unit = self.average_price - self.mark_price
                self.unrealized_pnl = per_unit * abs(self.quantity)
        self.total_pnl = self.realized_pnl + self.unrealized_pnl
        self.last_update = _now()


@dataclass
class PositionTracker:
    """All client positions in one symbol, with aggregate totals."""

    symbol: str
    positions: dict[uuid.UUID, Position] = field(default_factory=dict)
    total_long_quantity: float = 0.0
    total_short_quantity: float = 0.0
    net_quantity: float = 0.0
    total_realized_pnl: float = 0.0
    total_unrealized_pnl: float = 0.0
    total_pnl: float = 0.0
    last_update: datetime = field(default_factory=_now)

    def get_position(self, client_id: uuid.UUID) -> Position | None:
        return self.positions.get(client_id)

    def get_or_create_position(self, client_id: uuid.UUID) -> Position:
        position = self.positions.get(client_id)
        if position is None:
            position = Position(self.symbol, client_id)
            self.positions[client_id] = position
        return position

    def update_position_with_trade(self, trade: Trade, client_id: uuid.UUID, side: Side) -> None:
        self.get_or_create_position(client_id).add_trade(trade, side)
        self._update_aggregates()

    def update_mark_prices(self, mark_price: float) -> None:
        for position in self.positions.values():
            position.update_mark_price(mark_price)
        self._update_aggregates()

    def get_total_exposure(self) -> float:
        return self.total_long_quantity + abs(self.total_short_quantity)

    def get_position_count(self) -> int:
        return sum(1 for p in self.positions.values() if not p.is_flat())

    def get_max_position_size(self) -> float:
        return max((abs(p.quantity) for p in self.positions.values()), default=0.0)

    def _update_aggregates(self) -> None:
        positions = list(self.positions.values())
        self.total_long_quantity = sum(p.quantity for p in positions if p.is_long())
        self.total_short_quantity = sum(p.quantity for p in positions if p.is_short())
        self.total_realized_pnl = sum(p.realized_pnl for p in positions)
        self.total_unrealized_pnl = sum(p.unrealized_pnl for p in positions)
        self.net_quantity = self.total_long_quantity + self.total_short_quantity
        self.total_pnl = self.total_realized_pnl + self.total_unrealized_pnl
        self.last_update = _now()