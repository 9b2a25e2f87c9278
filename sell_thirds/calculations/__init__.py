"""Pure sell-in-thirds calculations: targets, stops, profit/loss and triggers."""

from sell_thirds.calculations.precision import round2, to_decimal
from sell_thirds.calculations.profit_loss import (
    analyze_triggered_levels,
    calculate_profit_loss,
    trades_for_position,
)
from sell_thirds.calculations.stop_progression import (
    BREAKEVEN_REASON,
    INITIAL_STOP_REASON,
    calculate_progressed_stop_loss,
)
from sell_thirds.calculations.targets import (
    calculate_initial_stop_loss,
    calculate_sell_targets,
    infer_trade_type,
)

__all__ = [
    "BREAKEVEN_REASON",
    "INITIAL_STOP_REASON",
    "analyze_triggered_levels",
    "calculate_initial_stop_loss",
    "calculate_profit_loss",
    "calculate_progressed_stop_loss",
    "calculate_sell_targets",
    "infer_trade_type",
    "round2",
    "to_decimal",
    "trades_for_position",
]
