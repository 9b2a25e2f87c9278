"""
Unit Tests for PositionService.calculate_portfolio_metrics

Worked example used throughout:

- AAPL: 300 @ $150.00, first third sold 100 @ $225.00 (stop now $150.00)
- MSFT: 30 @ $100.00, untouched (stop $80.00)

invested_capital_returned = 100 × 225.00 = 22,500.00
total_cost = 45,000.00 + 3,000.00 = 48,000.00
"""

from datetime import UTC
from decimal import Decimal

import pytest
import pytest_asyncio

from sell_thirds.models import CreatePositionParams, RecordTradeParams


@pytest_asyncio.fixture
async def portfolio(service):
    aapl = (await service.create_position(CreatePositionParams("AAPL", Decimal("150.00"), 300))).value
    await service.create_position(CreatePositionParams("MSFT", Decimal("100.00"), 30))
    await service.record_trade(RecordTradeParams(aapl.id, 100, Decimal("225.00")))
    return service


class TestPortfolioMetrics:
    """Test portfolio aggregation"""

    @pytest.mark.asyncio
    async def test_empty_portfolio(self, service):
        result = await service.calculate_portfolio_metrics({})

        metrics = result.value
        assert metrics.total_positions == 0
        assert metrics.total_value == Decimal("0")
        assert metrics.total_cost == Decimal("0")
        assert metrics.total_profit_percent == Decimal("0")
        assert metrics.average_return_percent == Decimal("0")

    @pytest.mark.asyncio
    async def test_priced_portfolio(self, portfolio):
        """
        AAPL at 230 (at first target), MSFT at 75 (below its $80 stop):

        total_value = 200 × 230 + 30 × 75 = 48,250.00
        unrealized = 48,250 - (48,000 - 22,500) = 22,750.00
        total_profit = 7,500 + 22,750 = 30,250.00
        total_profit_percent = 30,250 / 48,000 × 100 = 63.02
        average_return_percent = 63.0208... / 2 = 31.51
        """
        result = await portfolio.calculate_portfolio_metrics(
            {"AAPL": Decimal("230.00"), "MSFT": 75}
        )

        metrics = result.value
        assert metrics.total_positions == 2
        assert metrics.total_value == Decimal("48250.00")
        assert metrics.total_cost == Decimal("48000.00")
        assert metrics.realized_profit == Decimal("7500.00")
        assert metrics.unrealized_profit == Decimal("22750.00")
        assert metrics.total_profit == Decimal("30250.00")
        assert metrics.total_profit_percent == Decimal("63.02")
        assert metrics.average_return_percent == Decimal("31.51")
        assert metrics.positions_at_target == 1
        assert metrics.positions_at_stop_loss == 1
        assert metrics.calculated_at.tzinfo == UTC

    @pytest.mark.asyncio
    async def test_unpriced_position_counts_in_cost_only(self, portfolio):
        """
        MSFT has no price: skipped for value, realized profit and triggers,
        but its 3,000.00 cost still lands in total_cost.

        total_value = 200 × 200 = 40,000.00
        unrealized = 40,000 - (48,000 - 22,500) = 14,500.00
        """
        result = await portfolio.calculate_portfolio_metrics({"AAPL": Decimal("200.00")})

        metrics = result.value
        assert metrics.total_cost == Decimal("48000.00")
        assert metrics.total_value == Decimal("40000.00")
        assert metrics.unrealized_profit == Decimal("14500.00")
        assert metrics.positions_at_target == 0
        assert metrics.positions_at_stop_loss == 0

    @pytest.mark.asyncio
    async def test_unpriced_realized_profit_is_excluded(self, portfolio):
        """AAPL's realized profit only counts when AAPL itself is priced"""
        result = await portfolio.calculate_portfolio_metrics({"MSFT": Decimal("100.00")})

        metrics = result.value
        assert metrics.realized_profit == Decimal("0.00")
        assert metrics.total_value == Decimal("3000.00")
        # 3,000 - (48,000 - 22,500)
        assert metrics.unrealized_profit == Decimal("-22500.00")

    @pytest.mark.asyncio
    async def test_zero_price_is_treated_as_missing(self, portfolio):
        with_zero = await portfolio.calculate_portfolio_metrics(
            {"AAPL": Decimal("200.00"), "MSFT": 0}
        )
        without = await portfolio.calculate_portfolio_metrics({"AAPL": Decimal("200.00")})

        assert with_zero.value.total_value == without.value.total_value
