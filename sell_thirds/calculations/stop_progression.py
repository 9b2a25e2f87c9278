"""
Stop-Loss Progression

Purpose:
--------
Moves a position's stop-loss according to its recorded trades.

Rules:
------
1. No trades for the position: stop-loss returned unchanged.
2. At least one FIRST_TARGET or SECOND_TARGET trade while status is
   INITIAL: move to BREAKEVEN at buy_price and append one history entry.
3. BREAKEVEN and CUSTOM never change automatically.

Because rule 2 only fires from INITIAL, calling this repeatedly with the
same trade set never appends duplicate history entries.

Must be called on the post-trade position after every trade is recorded.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Optional

import structlog

from sell_thirds.calculations.profit_loss import trades_for_position
from sell_thirds.models.position import Position
from sell_thirds.models.stop_loss import StopLoss, StopLossStatus
from sell_thirds.models.trade import Trade

logger = structlog.get_logger(__name__)

INITIAL_STOP_REASON = "Initial stop-loss set at -20%"
BREAKEVEN_REASON = "First third sold - moved to breakeven"


def calculate_progressed_stop_loss(
    position: Position,
    completed_trades: Iterable[Trade],
    now: Optional[datetime] = None,
) -> StopLoss:
    """
    Calculate the stop-loss after trade execution.

    Parameters:
    -----------
    position : Position
        Post-trade position
    completed_trades : Iterable[Trade]
        Full trade history including the newly recorded trade. Filtered to
        this position internally.
    now : datetime, optional
        Timestamp for a new history entry (defaults to UTC now)

    Returns:
    --------
    StopLoss
        Either position.stop_loss unchanged or a new BREAKEVEN StopLoss
    """
    position_trades = trades_for_position(position, completed_trades)
    if not position_trades:
        return position.stop_loss

    has_target_trade = any(trade.is_target_trade for trade in position_trades)
    if not has_target_trade or position.stop_loss.status != StopLossStatus.INITIAL:
        return position.stop_loss

    progressed = position.stop_loss.with_change(
        price=position.buy_price,
        status=StopLossStatus.BREAKEVEN,
        changed_at=now or datetime.now(UTC),
        reason=BREAKEVEN_REASON,
    )

    logger.info(
        "stop_loss_moved_to_breakeven",
        position_id=str(position.id),
        ticker=position.ticker,
        previous_stop=str(position.stop_loss.price),
        new_stop=str(progressed.price),
    )
    return progressed
