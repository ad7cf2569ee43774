"""Risk limits per symbol and their utilisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RiskLimitType(IntEnum):
    """Kinds of limit tracked for a symbol."""

    POSITION_SIZE = 0
    DAILY_PNL = 1
    ORDER_SIZE = 2
    PRICE_DEVIATION = 3
    NOTIONAL_VALUE = 4


@dataclass
class RiskLimit:
    """A single limit with its current value."""

    limit_type: RiskLimitType
    max_value: float
    symbol: str | None = None
    current_value: float = 0.0
    enabled: bool = True
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    def update_current_value(self, value: float) -> None:
        self.current_value = value
        self.updated_at = _now()

    def is_violated(self) -> bool:
        return self.enabled and self.current_value > self.max_value

    def utilization_pct(self) -> float:
        if self.max_value == 0.0:
            return 0.0
        return self.current_value / self.max_value * 100.0

    def remaining_capacity(self) -> float:
        return max(self.max_value - self.current_value, 0.0)


_DEFAULT_MAXIMA = {
    RiskLimitType.POSITION_SIZE: 1000.0,
    RiskLimitType.DAILY_PNL: 100_000.0,
    RiskLimitType.ORDER_SIZE: 100.0,
    RiskLimitType.PRICE_DEVIATION: 5.0,
    RiskLimitType.NOTIONAL_VALUE: 1_000_000.0,
}


class RiskLimits:
    """The full set of limits for one symbol."""

    def __init__(self, symbol: str, maxima: dict[RiskLimitType, float] | None = None) -> None:
        values = dict(_DEFAULT_MAXIMA)
        if maxima:
            values.update(maxima)
        self.symbol = symbol
        self._limits = {
            kind: RiskLimit(kind, values[kind], symbol) for kind in RiskLimitType
        }

    @classmethod
    def with_custom_limits(
        cls,
        symbol: str,
        position_limit: float,
        daily_pnl_limit: float,
        order_size_limit: float,
        price_deviation_limit: float,
        notional_limit: float,
    ) -> "RiskLimits":
        return cls(
            symbol,
            {
                RiskLimitType.POSITION_SIZE: position_limit,
                RiskLimitType.DAILY_PNL: daily_pnl_limit,
                RiskLimitType.ORDER_SIZE: order_size_limit,
                RiskLimitType.PRICE_DEVIATION: price_deviation_limit,
                RiskLimitType.NOTIONAL_VALUE: notional_limit,
            },
        )

    @property
    def position_limit(self) -> RiskLimit:
        return self._limits[RiskLimitType.POSITION_SIZE]

    @property
    def daily_pnl_limit(self) -> RiskLimit:
        return self._limits[RiskLimitType.DAILY_PNL]

    @property
    def order_size_limit(self) -> RiskLimit:
        return self._limits[RiskLimitType.ORDER_SIZE]

    @property
    def price_deviation_limit(self) -> RiskLimit:
        return self._limits[RiskLimitType.PRICE_DEVIATION]

    @property
    def notional_limit(self) -> RiskLimit:
        return self._limits[RiskLimitType.NOTIONAL_VALUE]

    def get_limit(self, limit_type: RiskLimitType) -> RiskLimit:
        """Return the limit of the given kind; it may be modified in place."""
        return self._limits[limit_type]

    def has_violations(self) -> bool:
        return any(limit.is_violated() for limit in self._limits.values())

    def get_violations(self) -> list[RiskLimitType]:
        return [kind for kind in RiskLimitType if self._limits[kind].is_violated()]

    def __copy__(self) -> "RiskLimits":
        clone = RiskLimits.__new__(RiskLimits)
        clone.symbol = self.symbol
        clone._limits = {
            kind: RiskLimit(
                limit.limit_type,
                limit.max_value,
                limit.symbol,
                limit.current_value,
                limit.enabled,
                limit.created_at,
                limit.updated_at,
            )
            for kind, limit in self._limits.items()
        }
        return clone

    def __repr__(self) -> str:
        return f"RiskLimits(symbol={self.symbol!r})"