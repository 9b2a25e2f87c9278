"""
Position Service - Sell-in-Thirds Lifecycle Manager

Creates positions, records partial sales against them, deletes them with
their trades, and aggregates portfolio metrics. Every operation returns a
ServiceResult instead of raising, so callers handle validation failures,
missing positions and storage failures as separate outcomes.

Persistence Model:
------------------
Each mutating operation loads the full position and trade collections,
modifies them in memory, and saves them back. Those read-modify-write
cycles run under a single asyncio.Lock per service instance so concurrent
calls can never record a trade against a stale position snapshot. Reads
take the same lock, so a query never sees a trade without its position
update.

record_trade writes trades first, then positions. If the position write
fails, the previous trade collection is written back so a trade is never
visible without its position update.
"""

import asyncio
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from sell_thirds.calculations import (
    INITIAL_STOP_REASON,
    analyze_triggered_levels,
    calculate_initial_stop_loss,
    calculate_profit_loss,
    calculate_progressed_stop_loss,
    calculate_sell_targets,
    infer_trade_type,
    round2,
    to_decimal,
)
from sell_thirds.calculations.precision import HUNDRED, ZERO
from sell_thirds.exceptions import (
    PositionNotFoundError,
    StorageError,
    TrackerError,
    ValidationFailedError,
)
from sell_thirds.models.metrics import ProfitLossMetrics, TriggeredLevels
from sell_thirds.models.portfolio import PortfolioMetrics
from sell_thirds.models.position import CreatePositionParams, Position, PositionStatus
from sell_thirds.models.stop_loss import StopLoss, StopLossStatus
from sell_thirds.models.trade import RecordTradeParams, Trade, TradeType
from sell_thirds.repositories.base import PositionStore
from sell_thirds.services.result import ServiceResult, TradeRecordResult
from sell_thirds.validators import (
    validate_create_position,
    validate_price_input,
    validate_record_trade,
)

logger = structlog.get_logger(__name__)

# Sold share percentage at which a position counts as mostly sold
MOSTLY_SOLD_PERCENT = Decimal("66")


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _coerce_position_id(value: UUID | str | None) -> UUID | None:
    """Parse a position id; malformed ids resolve to None (treated as not found)."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value)
        except ValueError:
            return None
    return None


class PositionService:
    """
    Lifecycle manager for sell-in-thirds positions and their trades.

    Args:
        store: Position/trade store
        clock: Returns the current time (defaults to UTC now)
        id_factory: Returns new position/trade ids (defaults to uuid4)
    """

    def __init__(
        self,
        store: PositionStore,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], UUID]] = None,
    ):
        self.store = store
        self.clock = clock or _utc_now
        self.id_factory = id_factory or uuid4
        self._lock = asyncio.Lock()
        self._logger = logger.bind(component="position_service")

    async def create_position(self, params: CreatePositionParams) -> ServiceResult[Position]:
        """
        Create and persist a new position.

        Validates the input (ticker must not already be stored), computes
        sell targets and the initial -20% stop-loss, and appends the
        position to the stored collection.

        Returns:
            ServiceResult with the new Position, or a failed result carrying
            ValidationFailedError (nothing persisted) or a StorageError
        """
        try:
            async with self._lock:
                positions = await self.store.load_positions()

                validation = validate_create_position(
                    params, existing_tickers=[p.ticker for p in positions]
                )
                if not validation.is_valid:
                    raise ValidationFailedError(validation)

                buy_price = to_decimal(params.buy_price)
                shares = int(to_decimal(params.original_shares))
                now = self.clock()

                stop_price = calculate_initial_stop_loss(buy_price)
                stop_loss = StopLoss(price=stop_price, status=StopLossStatus.INITIAL).with_change(
                    price=stop_price,
                    status=StopLossStatus.INITIAL,
                    changed_at=now,
                    reason=INITIAL_STOP_REASON,
                )

                position = Position(
                    id=self.id_factory(),
                    ticker=params.ticker,
                    buy_price=buy_price,
                    original_shares=shares,
                    remaining_shares=shares,
                    sell_targets=calculate_sell_targets(buy_price, shares),
                    stop_loss=stop_loss,
                    created_at=now,
                )

                await self.store.save_positions([*positions, position])
        except TrackerError as e:
            return self._failed("create_position", e)

        self._logger.info(
            "position_created",
            position_id=str(position.id),
            ticker=position.ticker,
            buy_price=str(position.buy_price),
            original_shares=position.original_shares,
            stop_loss=str(position.stop_loss.price),
        )
        return ServiceResult.ok(position)

    async def record_trade(self, params: RecordTradeParams) -> ServiceResult[TradeRecordResult]:
        """
        Record a partial sale against a position.

        Steps:
        1. Look up the position (PositionNotFoundError if absent)
        2. Validate the sale against the position's remaining shares
        3. Compute total value, profit and profit percent (rounded)
        4. Use the supplied trade type or infer it from the sell price
        5. Reduce remaining shares and progress the stop-loss using the
           full trade history including the new trade
        6. Persist both collections as one logical write

        Returns:
            ServiceResult with TradeRecordResult(position, trade)
        """
        try:
            async with self._lock:
                position_id = _coerce_position_id(params.position_id)
                positions = await self.store.load_positions()
                position = next((p for p in positions if p.id == position_id), None)
                if position is None:
                    raise PositionNotFoundError(params.position_id)

                validation = validate_record_trade(params, position)
                if not validation.is_valid:
                    raise ValidationFailedError(validation)

                shares_sold = int(to_decimal(params.shares_sold))
                sell_price = to_decimal(params.sell_price)
                trade_type = (
                    TradeType(params.trade_type)
                    if params.trade_type is not None
                    else infer_trade_type(position, sell_price)
                )
                now = self.clock()

                trade = Trade(
                    id=self.id_factory(),
                    position_id=position.id,
                    shares_sold=shares_sold,
                    sell_price=sell_price,
                    total_value=round2(shares_sold * sell_price),
                    profit=round2((sell_price - position.buy_price) * shares_sold),
                    profit_percent=round2(
                        (sell_price - position.buy_price) / position.buy_price * HUNDRED
                    ),
                    executed_at=now,
                    trade_type=trade_type,
                )

                trades = await self.store.load_trades()
                all_trades = [*trades, trade]

                updated = position.model_copy(
                    update={"remaining_shares": position.remaining_shares - shares_sold}
                )
                updated = updated.model_copy(
                    update={
                        "stop_loss": calculate_progressed_stop_loss(updated, all_trades, now=now)
                    }
                )

                await self._save_trade_and_position(
                    trades,
                    all_trades,
                    [updated if p.id == updated.id else p for p in positions],
                )
        except TrackerError as e:
            return self._failed("record_trade", e)

        self._logger.info(
            "trade_recorded",
            position_id=str(updated.id),
            trade_id=str(trade.id),
            ticker=updated.ticker,
            shares_sold=trade.shares_sold,
            sell_price=str(trade.sell_price),
            trade_type=trade.trade_type.value,
            profit=str(trade.profit),
            remaining_shares=updated.remaining_shares,
            stop_loss_status=updated.stop_loss.status.value,
        )
        return ServiceResult.ok(TradeRecordResult(position=updated, trade=trade))

    async def delete_position(self, position_id: UUID | str) -> ServiceResult[None]:
        """
        Delete a position and every trade that references it.

        Deleting an unknown position succeeds without writing anything.
        """
        target_id = _coerce_position_id(position_id)
        try:
            async with self._lock:
                positions = await self.store.load_positions()
                trades = await self.store.load_trades()

                kept_positions = [p for p in positions if p.id != target_id]
                kept_trades = [t for t in trades if t.position_id != target_id]
                if len(kept_positions) == len(positions) and len(kept_trades) == len(trades):
                    self._logger.debug("position_delete_noop", position_id=str(position_id))
                    return ServiceResult.ok()

                await self.store.save_positions(kept_positions)
                try:
                    await self.store.save_trades(kept_trades)
                except StorageError:
                    await self._restore("positions", self.store.save_positions, positions)
                    raise
        except TrackerError as e:
            return self._failed("delete_position", e)

        self._logger.info(
            "position_deleted",
            position_id=str(position_id),
            trades_removed=len(trades) - len(kept_trades),
        )
        return ServiceResult.ok()

    async def calculate_portfolio_metrics(
        self, current_prices: Mapping[str, Decimal | float | int]
    ) -> ServiceResult[PortfolioMetrics]:
        """
        Aggregate metrics across every stored position.

        Each position is priced from current_prices by ticker, falling back
        to its transient current_price. Positions with no usable price
        still count toward total_cost but are skipped for value, realized
        profit and trigger counts.

        unrealized_profit = total_value - (total_cost - invested_capital_returned),
        where invested_capital_returned is Σ(shares_sold × sell_price) over
        all stored trades.
        """
        try:
            positions, trades = await self._load_snapshot()

            total_value = ZERO
            total_cost = ZERO
            realized_profit = ZERO
            positions_at_target = 0
            positions_at_stop_loss = 0

            for position in positions:
                price = self._resolve_price(position, current_prices)
                if price is not None:
                    metrics = calculate_profit_loss(position, price, trades)
                    total_value += metrics.total_value
                    realized_profit += metrics.realized_profit

                    levels = analyze_triggered_levels(position, price)
                    if levels.is_at_first_target or levels.is_at_second_target:
                        positions_at_target += 1
                    if levels.is_at_stop_loss:
                        positions_at_stop_loss += 1

                total_cost += position.cost_basis

            invested_capital_returned = sum(
                (trade.shares_sold * trade.sell_price for trade in trades), ZERO
            )
            unrealized_profit = total_value - (total_cost - invested_capital_returned)
            total_profit = realized_profit + unrealized_profit
            total_profit_percent = (
                total_profit / total_cost * HUNDRED if total_cost > ZERO else ZERO
            )
            average_return_percent = (
                total_profit_percent / len(positions) if positions else ZERO
            )
        except TrackerError as e:
            return self._failed("calculate_portfolio_metrics", e)

        metrics = PortfolioMetrics(
            total_positions=len(positions),
            total_value=round2(total_value),
            total_cost=round2(total_cost),
            total_profit=round2(total_profit),
            total_profit_percent=round2(total_profit_percent),
            realized_profit=round2(realized_profit),
            unrealized_profit=round2(unrealized_profit),
            positions_at_target=positions_at_target,
            positions_at_stop_loss=positions_at_stop_loss,
            average_return_percent=round2(average_return_percent),
            calculated_at=self.clock(),
        )
        self._logger.debug(
            "portfolio_metrics_calculated",
            total_positions=metrics.total_positions,
            total_value=str(metrics.total_value),
            total_profit=str(metrics.total_profit),
        )
        return ServiceResult.ok(metrics)

    async def get_all_positions(self) -> ServiceResult[list[Position]]:
        try:
            async with self._lock:
                positions = await self.store.load_positions()
        except TrackerError as e:
            return self._failed("get_all_positions", e)
        return ServiceResult.ok(positions)

    async def get_position(self, position_id: UUID | str) -> ServiceResult[Optional[Position]]:
        """Look up one position. A missing position is a successful result with value None."""
        target_id = _coerce_position_id(position_id)
        try:
            async with self._lock:
                positions = await self.store.load_positions()
        except TrackerError as e:
            return self._failed("get_position", e)
        return ServiceResult.ok(next((p for p in positions if p.id == target_id), None))

    async def get_trades(
        self, position_id: UUID | str | None = None
    ) -> ServiceResult[list[Trade]]:
        """
        Load trades ordered by execution time.

        Args:
            position_id: Only return this position's trades (all trades if None)
        """
        try:
            async with self._lock:
                trades = await self.store.load_trades()
        except TrackerError as e:
            return self._failed("get_trades", e)

        if position_id is not None:
            target_id = _coerce_position_id(position_id)
            trades = [t for t in trades if t.position_id == target_id]
        return ServiceResult.ok(sorted(trades, key=lambda t: t.executed_at))

    async def update_current_price(
        self, position_id: UUID | str, price: Decimal | float | int
    ) -> ServiceResult[Position]:
        """
        Attach a scenario price to a position for what-if views.

        The price is validated and set on a copy of the position; nothing
        is persisted.
        """
        try:
            validation = validate_price_input(price)
            if not validation.is_valid:
                raise ValidationFailedError(validation)

            async with self._lock:
                positions = await self.store.load_positions()
            position = self._find_position(positions, position_id)
        except TrackerError as e:
            return self._failed("update_current_price", e)

        return ServiceResult.ok(position.model_copy(update={"current_price": to_decimal(price)}))

    async def calculate_position_metrics(
        self, position_id: UUID | str, current_price: Decimal | float | int
    ) -> ServiceResult[tuple[ProfitLossMetrics, TriggeredLevels]]:
        """Profit/loss and triggered levels for one position at current_price."""
        try:
            positions, trades = await self._load_snapshot()
            position = self._find_position(positions, position_id)
            profit_loss = calculate_profit_loss(position, current_price, trades)
            levels = analyze_triggered_levels(position, current_price)
        except TrackerError as e:
            return self._failed("calculate_position_metrics", e)
        return ServiceResult.ok((profit_loss, levels))

    @staticmethod
    def get_position_status(position: Position) -> PositionStatus:
        """
        Derive lifecycle status from sold shares.

        - no shares remaining -> CLOSED
        - at least 66% sold -> MOSTLY_SOLD
        - any shares sold -> PARTIALLY_SOLD
        - otherwise -> ACTIVE
        """
        if position.remaining_shares == 0:
            return PositionStatus.CLOSED

        sold_percent = Decimal(position.sold_shares) / Decimal(position.original_shares) * HUNDRED
        if sold_percent >= MOSTLY_SOLD_PERCENT:
            return PositionStatus.MOSTLY_SOLD
        if sold_percent > ZERO:
            return PositionStatus.PARTIALLY_SOLD
        return PositionStatus.ACTIVE

    async def clear_all(self) -> ServiceResult[None]:
        """Remove every stored position and trade."""
        try:
            async with self._lock:
                await self.store.clear_all()
        except TrackerError as e:
            return self._failed("clear_all", e)

        self._logger.info("all_positions_cleared")
        return ServiceResult.ok()

    async def _load_snapshot(self) -> tuple[list[Position], list[Trade]]:
        """Load both collections under the lock so no half-finished write is visible."""
        async with self._lock:
            return await self.store.load_positions(), await self.store.load_trades()

    @staticmethod
    def _find_position(positions: list[Position], position_id: UUID | str) -> Position:
        target_id = _coerce_position_id(position_id)
        for position in positions:
            if position.id == target_id:
                return position
        raise PositionNotFoundError(position_id)

    @staticmethod
    def _resolve_price(
        position: Position, current_prices: Mapping[str, Decimal | float | int]
    ) -> Decimal | None:
        """Price from the map by ticker, else the transient current_price, else None."""
        for candidate in (current_prices.get(position.ticker), position.current_price):
            price = to_decimal(candidate)
            if price is not None and price.is_finite() and price > ZERO:
                return price
        return None

    async def _save_trade_and_position(
        self,
        previous_trades: list[Trade],
        trades: list[Trade],
        positions: list[Position],
    ) -> None:
        await self.store.save_trades(trades)
        try:
            await self.store.save_positions(positions)
        except StorageError:
            await self._restore("trades", self.store.save_trades, previous_trades)
            raise

    async def _restore(self, collection: str, save: Callable, previous: list) -> None:
        """Write back a collection after the paired write failed."""
        try:
            await save(previous)
        except StorageError as e:
            self._logger.error(
                "storage_rollback_failed",
                collection=collection,
                error=e.message,
            )
        else:
            self._logger.warning("storage_rolled_back", collection=collection)

    def _failed(self, operation: str, error: TrackerError) -> ServiceResult:
        log = self._logger.warning if isinstance(error, StorageError) else self._logger.info
        log(
            f"{operation}_failed",
            error_type=type(error).__name__,
            error=error.message,
            details=error.details,
        )
        return ServiceResult.fail(error)
