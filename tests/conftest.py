"""
Pytest configuration and fixtures for position tracker tests.

Provides a fixed clock, deterministic ids, an in-memory store and a
PositionService wired to them, plus factories for positions and trades.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from sell_thirds.calculations import (
    INITIAL_STOP_REASON,
    calculate_initial_stop_loss,
    calculate_sell_targets,
)
from sell_thirds.models import Position, StopLoss, StopLossStatus, Trade, TradeType
from sell_thirds.repositories import InMemoryPositionStore
from sell_thirds.services import PositionService

FIXED_NOW = datetime(2024, 3, 15, 14, 30, tzinfo=UTC)


class SteppingClock:
    """Clock that advances one second per call so executed_at values are ordered."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(seconds=1)
        return now


class SequentialIds:
    """Deterministic UUID factory."""

    def __init__(self):
        self.issued: list[UUID] = []

    def __call__(self) -> UUID:
        value = UUID(int=len(self.issued) + 1)
        self.issued.append(value)
        return value


def make_position(
    ticker: str = "AAPL",
    buy_price: Decimal = Decimal("150.00"),
    original_shares: int = 300,
    remaining_shares: int | None = None,
    stop_status: StopLossStatus = StopLossStatus.INITIAL,
    stop_price: Decimal | None = None,
) -> Position:
    """Build a Position the way PositionService.create_position does."""
    price = stop_price if stop_price is not None else calculate_initial_stop_loss(buy_price)
    stop = StopLoss(price=price, status=stop_status).with_change(
        price=price, status=stop_status, changed_at=FIXED_NOW, reason=INITIAL_STOP_REASON
    )
    return Position(
        id=uuid4(),
        ticker=ticker,
        buy_price=buy_price,
        original_shares=original_shares,
        remaining_shares=original_shares if remaining_shares is None else remaining_shares,
        sell_targets=calculate_sell_targets(buy_price, original_shares),
        stop_loss=stop,
        created_at=FIXED_NOW,
    )


def make_trade(
    position: Position,
    shares_sold: int = 100,
    sell_price: Decimal = Decimal("225.00"),
    trade_type: TradeType = TradeType.FIRST_TARGET,
    executed_at: datetime = FIXED_NOW,
) -> Trade:
    """Build a Trade for position with derived values computed from buy_price."""
    profit = (sell_price - position.buy_price) * shares_sold
    return Trade(
        position_id=position.id,
        shares_sold=shares_sold,
        sell_price=sell_price,
        total_value=(sell_price * shares_sold).quantize(Decimal("0.01")),
        profit=profit.quantize(Decimal("0.01")),
        profit_percent=((sell_price - position.buy_price) / position.buy_price * 100).quantize(
            Decimal("0.01")
        ),
        executed_at=executed_at,
        trade_type=trade_type,
    )


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def id_factory() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def store() -> InMemoryPositionStore:
    return InMemoryPositionStore()


@pytest.fixture
def service(store, clock, id_factory) -> PositionService:
    return PositionService(store, clock=clock, id_factory=id_factory)


@pytest.fixture
def position() -> Position:
    """AAPL: 300 shares bought at $150.00."""
    return make_position()
