import uuid

import pytest

from riskguard.position import Position, PositionTracker
from riskguard.validation import Side, Trade


def _trade(price, quantity, buyer=None, seller=None):
    return Trade("BTCUSD", price, quantity, buyer or uuid.uuid4(), seller or uuid.uuid4())


@pytest.fixture
def position():
    return Position("BTCUSD", uuid.uuid4())


def test_new_position_is_flat(position):
    assert position.is_flat()
    assert not position.is_long()
    assert not position.is_short()
    assert position.notional_value() == 0.0
    assert position.mark_price is None


def test_first_buy_opens_long(position):
    position.add_trade(_trade(100.0, 2.0), Side.BUY)
    assert position.is_long()
    assert position.quantity == 2.0
    assert position.average_price == 100.0
    assert position.notional_value() == 200.0


def test_first_sell_opens_short(position):
    position.add_trade(_trade(50.0, 3.0), Side.SELL)
    assert position.is_short()
    assert position.quantity == -3.0
    assert position.average_price == 50.0


def test_adding_to_long_averages_price(position):
    position.add_trade(_trade(100.0, 1.0), Side.BUY)
    position.add_trade(_trade(200.0, 1.0), Side.BUY)
    assert position.quantity == 2.0
    assert 100.0 < position.average_price < 200.0
    assert position.average_price == pytest.approx(150.0)


def test_closing_long_realizes_pnl(position):
    position.add_trade(_trade(100.0, 2.0), Side.BUY)
    position.add_trade(_trade(110.0, 2.0), Side.SELL)
    assert position.is_flat()
    assert position.realized_pnl == pytest.approx(20.0)
    assert position.total_pnl == position.realized_pnl


def test_partial_close_keeps_average(position):
    position.add_trade(_trade(100.0, 4.0), Side.BUY)
    position.add_trade(_trade(90.0, 1.0), Side.SELL)
    assert position.quantity == 3.0
    assert position.average_price == 100.0
    assert position.realized_pnl < 0.0


def test_reversal_opens_opposite_side_at_trade_price(position):
    position.add_trade(_trade(100.0, 1.0), Side.BUY)
    position.add_trade(_trade(90.0, 3.0), Side.SELL)
    assert position.is_short()
    assert position.quantity == -2.0
    assert position.average_price == 90.0
    assert position.realized_pnl == pytest.approx(-10.0)


def test_mark_price_sets_unrealized_pnl(position):
    position.add_trade(_trade(100.0, 2.0), Side.BUY)
    position.update_mark_price(105.0)
    assert position.mark_price == 105.0
    assert position.unrealized_pnl == pytest.approx(10.0)
    assert position.total_pnl == position.realized_pnl + position.unrealized_pnl


def test_short_gains_when_mark_falls(position):
    position.add_trade(_trade(100.0, 1.0), Side.SELL)
    position.update_mark_price(95.0)
    assert position.unrealized_pnl > 0.0


def test_unrealized_resets_when_flat_with_mark(position):
    position.add_trade(_trade(100.0, 1.0), Side.BUY)
    position.update_mark_price(120.0)
    position.add_trade(_trade(120.0, 1.0), Side.SELL)
    assert position.is_flat()
    assert position.unrealized_pnl == 0.0


def test_tracker_records_both_sides():
    tracker = PositionTracker("BTCUSD")
    buyer, seller = uuid.uuid4(), uuid.uuid4()
    trade = _trade(100.0, 5.0, buyer, seller)
    tracker.update_position_with_trade(trade, buyer, Side.BUY)
    tracker.update_position_with_trade(trade, seller, Side.SELL)

    assert tracker.get_position(buyer).quantity == 5.0
    assert tracker.get_position(seller).quantity == -5.0
    assert tracker.total_long_quantity == 5.0
    assert tracker.total_short_quantity == -5.0
    assert tracker.net_quantity == 0.0
    assert tracker.get_total_exposure() == 10.0
    assert tracker.get_position_count() == 2
    assert tracker.get_max_position_size() == 5.0


def test_tracker_unknown_client_and_empty_sizes():
    tracker = PositionTracker("ETHUSD")
    assert tracker.get_position(uuid.uuid4()) is None
    assert tracker.get_max_position_size() == 0.0
    assert tracker.get_position_count() == 0


def test_get_or_create_returns_same_position():
    tracker = PositionTracker("ETHUSD")
    client = uuid.uuid4()
    first = tracker.get_or_create_position(client)
    second = tracker.get_or_create_position(client)
    assert first is second
    assert first.symbol == "ETHUSD"
    assert first.client_id == client


def test_tracker_mark_prices_aggregate_pnl():
    tracker = PositionTracker("BTCUSD")
    buyer, seller = uuid.uuid4(), uuid.uuid4()
    trade = _trade(100.0, 1.0, buyer, seller)
    tracker.update_position_with_trade(trade, buyer, Side.BUY)
    tracker.update_position_with_trade(trade, seller, Side.SELL)
    tracker.update_mark_prices(110.0)
    buyer_pnl = tracker.get_position(buyer).unrealized_pnl
    seller_pnl = tracker.get_position(seller).unrealized_pnl
    assert buyer_pnl == -seller_pnl
    assert tracker.total_unrealized_pnl == buyer_pnl + seller_pnl
    assert tracker.total_pnl == tracker.total_realized_pnl + tracker.total_unrealized_pnl


def test_flat_position_not_counted():
    tracker = PositionTracker("BTCUSD")
    client = uuid.uuid4()
    tracker.update_position_with_trade(_trade(100.0, 1.0), client, Side.BUY)
    tracker.update_position_with_trade(_trade(100.0, 1.0), client, Side.SELL)
    assert tracker.get_position_count() == 0
    assert len(tracker.positions) == 1