# riskguard

Pre-trade risk checks and position accounting for a trading system.

riskguard checks orders against size, notional, price and position limits.
It tracks each client's position and realised and unrealised P&L per symbol,
and it keeps aggregate risk metrics over every symbol it has seen trades for.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `riskguard.limits`

- `RiskLimitType` is an `IntEnum`: `POSITION_SIZE`, `DAILY_PNL`, `ORDER_SIZE`,
  `PRICE_DEVIATION`, `NOTIONAL_VALUE`.
- `RiskLimit` holds one limit: `max_value`, `current_value`, `enabled` and timestamps.
  Its methods:
  - `update_current_value(value)`
  - `is_violated()` returns true when the limit is enabled and `current_value > max_value`.
  - `utilization_pct()` gives the percentage of `max_value` in use, or 0 when `max_value` is 0.
  - `remaining_capacity()` never returns less than 0.
- `RiskLimits(symbol)` holds all five limits for one symbol. The defaults are:
  position 1000, daily P&L 100,000, order size 100, price deviation 5,
  notional 1,000,000. `RiskLimits.with_custom_limits(...)` sets all five yourself.
  The limits are reached as `position_limit`, `daily_pnl_limit` and so on, or through
  `get_limit(limit_type)`, which returns the live object so you can change it in place.
  `has_violations()` and `get_violations()` report the breached limits, listed in enum order.

### `riskguard.validation`

- The order model has `Side` (`BUY`, `SELL`), `OrderType` (`MARKET`, `LIMIT`, `STOP`,
  `STOP_LIMIT`), `Order` and `Trade`. Order and trade ids come from process-wide counters.
- `ValidationConfig` defaults: max order size 1000, min order size 0.001, max price
  deviation 5 %, max notional 1,000,000. Symbol checking against
  `supported_symbols` is off by default (`enable_market_hours_validation=False`).
- `OrderValidator(config=None)` raises a subclass of `ValidationError` when a check fails:
  - `validate_order(order)`: quantity must be positive. Price must be positive unless the
    order is a market order. Then come the size and notional checks.
  - `validate_order_with_reference_price(order, reference_price)`: runs the checks above,
    then checks the price deviation from the reference when one is given.
  - `validate_position_impact(order, current_position, position_limit)`
  - `validate_pnl_impact(current_pnl, pnl_limit)`: fails when `current_pnl < -pnl_limit`.

  The exception classes are `OrderSizeExceedsLimit`, `OrderSizeBelowMinimum`,
  `PositionLimitExceeded`, `DailyPnLLimitExceeded`, `PriceDeviationExceedsLimit`,
  `NotionalValueExceedsLimit`, `InvalidQuantity`, `InvalidPrice` and `UnsupportedSymbol`.
  `InvalidOrder` and `MarketClosed` are defined too.

### `riskguard.position`

- `Position` holds one client's signed quantity in one symbol. A negative quantity is
  a short. It also holds the average price and realised, unrealised and total P&L.
  - `add_trade(trade, side)` does three things. It averages into a position on the same
    side. It realises P&L on the part of a position that a trade closes. When a fill
    crosses through zero, the rest opens a new position at the trade price.
  - `update_mark_price(mark_price)` recomputes the unrealised P&L.
- `PositionTracker(symbol)` holds every client position in a symbol and keeps long, short
  and net quantity and P&L totals. Its methods are `get_position`,
  `get_or_create_position`, `update_position_with_trade`, `update_mark_prices`,
  `get_total_exposure`, `get_position_count` (non-flat positions only) and
  `get_max_position_size`.

### `riskguard.manager`

- `RiskManager(config=None)` is thread-safe. It combines validation, limits and positions.
  - `validate_order(order)` raises `RiskError` when a check fails. It first runs the
    default `OrderValidator` checks. It then checks the position limit for the order's
    symbol, taken from the registered `RiskLimits` or the defaults. Last, it checks the
    client's daily P&L against `RiskConfig.default_daily_loss_limit`.
  - `process_trade(trade)` updates the buyer's and the seller's positions. It sets each
    one's daily P&L to the realised P&L of that position, then refreshes the metrics.
  - `add_symbol_limits` and `get_symbol_limits` (which returns a copy).
  - `set_position_limit` and `set_daily_pnl_limit` do nothing unless limits are
    registered for the symbol.
  - `get_position` and `get_all_positions` return copies.
  - `get_metrics()`, `get_daily_pnl(client_id)` and `reset_daily_pnl()`.
  - `check_risk_violations()` returns `(symbol, [RiskLimitType, ...])` for each symbol
    that has breached limits.
- `RiskConfig` switches the position and P&L checks on or off with
  `enable_position_limits` and `enable_pnl_limits`, and sets `default_daily_loss_limit`.
  Its other fields are stored, but `RiskManager` does not read them.
- `RiskMetrics` holds the following:
  - the number of open positions
  - total P&L
  - the sum of daily P&L
  - the largest absolute position
  - the number of symbols with violations
  - the time of the last update

## Example

```python
import uuid

from riskguard.limits import RiskLimits
from riskguard.manager import RiskError, RiskManager
from riskguard.validation import Order, OrderType, Side, Trade

manager = RiskManager()
manager.add_symbol_limits("BTCUSD", RiskLimits("BTCUSD"))

buyer, seller = uuid.uuid4(), uuid.uuid4()
order = Order("BTCUSD", Side.BUY, OrderType.LIMIT, price=50.0, quantity=1.0, client_id=buyer)
try:
    manager.validate_order(order)
except RiskError as exc:
    print("rejected:", exc)

manager.process_trade(Trade("BTCUSD", price=50.0, quantity=1.0,
                            buyer_client_id=buyer, seller_client_id=seller))
print(manager.get_position("BTCUSD", buyer).quantity)   # 1.0
print(manager.get_metrics().total_positions)            # 2
```

## What it does not do

riskguard has no order book, no matching engine and no market connection. Trades have to
be created by the caller and passed in. It has no command-line tool, and it stores nothing
on disk: all state lives in memory.

The manager does not set the `current_value` of registered limits itself. Use
`get_limit(...).update_current_value(...)` to set it, and `check_risk_violations()` will
then reflect it.