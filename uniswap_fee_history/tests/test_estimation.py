"""
Range fee estimation tests
"""

import pytest

from ..fees.estimation import (
    FeeRateEstimate,
    estimate_fee_rate,
    fees_to_usd,
    liquidity_for_usd,
    token_shares,
)
from ..data.types import Pool, Tick, Token, TokenFeeAmount
from ..math.liquidity_math import get_liquidity_for_amount0, get_liquidity_for_amounts
from ..math.tick_math import get_sqrt_ratio_at_tick
from ..constants import Q128

USDC = Token(id="0xusdc", decimals=6, symbol="USDC")
WETH = Token(id="0xweth", decimals=18, symbol="WETH")

LOWER = Tick.uninitialized(-60)
UPPER = Tick.uninitialized(60)


def make_pool(tick=0, fg0=0, fg1=0, token0=USDC, token1=WETH):
    return Pool(
        id="0xpool",
        tick=tick,
        fee_growth_global_0_x128=fg0 * Q128,
        fee_growth_global_1_x128=fg1 * Q128,
        sqrt_price=get_sqrt_ratio_at_tick(tick),
        token0=token0,
        token1=token1,
    )


class TestEstimateFeeRate:
    """Two-point fee growth difference"""

    def test_fees_and_rate(self):
        estimate = estimate_fee_rate(
            make_pool(fg0=300, fg1=50), LOWER, UPPER,
            make_pool(fg0=100, fg1=10), LOWER, UPPER,
            liquidity=10, num_days=2,
        )
        assert estimate.available
        assert estimate.fees == TokenFeeAmount(2000, 400)
        assert estimate.amount0_per_day == 1000.0
        assert estimate.amount1_per_day == 200.0

    def test_boundary_ticks_change_between_snapshots(self):
        """Past snapshot uses its own tick state"""
        past_lower = Tick(-60, 40 * Q128, 0)
        estimate = estimate_fee_rate(
            make_pool(fg0=300), LOWER, UPPER,
            make_pool(fg0=100), past_lower, UPPER,
            liquidity=1, num_days=1,
        )
        # inside now 300, inside then 100 - 40
        assert estimate.fees.amount0 == 240

    def test_inverted_current_range(self):
        estimate = estimate_fee_rate(
            make_pool(fg0=300), UPPER, LOWER,
            make_pool(fg0=100), LOWER, UPPER,
            liquidity=1, num_days=1,
        )
        assert not estimate.available
        assert estimate.fees is None
        assert estimate.amount0_per_day is None
        assert "inverted" in estimate.reason

    def test_inverted_past_range(self):
        estimate = estimate_fee_rate(
            make_pool(fg0=300), LOWER, UPPER,
            make_pool(fg0=100), Tick.uninitialized(60), Tick.uninitialized(60),
            liquidity=1, num_days=1,
        )
        assert not estimate.available

    def test_num_days_must_be_positive(self):
        with pytest.raises(ValueError):
            estimate_fee_rate(make_pool(), LOWER, UPPER, make_pool(), LOWER, UPPER, 1, 0)

    def test_unavailable_constructor(self):
        estimate = FeeRateEstimate.unavailable("no data", 3)
        assert estimate.num_days == 3
        assert estimate.reason == "no data"
        assert estimate.available is False


class TestTokenShares:
    """Notional split across the range"""

    def test_middle_of_range(self):
        assert token_shares(0, -100, 100) == (0.5, 0.5)

    def test_quarter_of_range(self):
        assert token_shares(-50, -100, 100) == (0.75, 0.25)

    def test_below_range(self):
        assert token_shares(-200, -100, 100) == (1.0, 0.0)

    def test_at_lower_tick(self):
        assert token_shares(-100, -100, 100) == (1.0, 0.0)

    def test_at_or_above_upper_tick(self):
        assert token_shares(100, -100, 100) == (0.0, 1.0)
        assert token_shares(500, -100, 100) == (0.0, 1.0)


class TestLiquidityForUsd:
    """USD notional to liquidity"""

    def test_price_below_range_uses_token0_only(self):
        pool = make_pool(tick=-200, token1=USDC)
        liquidity = liquidity_for_usd(pool, -100, 100, 1000.0, 1.0, 1.0)
        expected = get_liquidity_for_amount0(
            get_sqrt_ratio_at_tick(-100), get_sqrt_ratio_at_tick(100), 1000 * 10 ** 6
        )
        assert liquidity == expected
        assert liquidity > 0

    def test_price_inside_range(self):
        pool = make_pool(tick=0)
        liquidity = liquidity_for_usd(pool, -100, 100, 2000.0, 1.0, 2000.0)
        expected = get_liquidity_for_amounts(
            get_sqrt_ratio_at_tick(0),
            get_sqrt_ratio_at_tick(-100),
            get_sqrt_ratio_at_tick(100),
            1000 * 10 ** 6,
            round(0.5 * 10 ** 18),
        )
        assert liquidity == expected

    def test_scales_with_notional(self):
        pool = make_pool(tick=-200, token1=USDC)
        small = liquidity_for_usd(pool, -100, 100, 1000.0, 1.0, 1.0)
        large = liquidity_for_usd(pool, -100, 100, 2000.0, 1.0, 1.0)
        assert large >= 2 * small - 1

    def test_rejects_non_positive_price(self):
        with pytest.raises(ValueError):
            liquidity_for_usd(make_pool(), -100, 100, 1000.0, 0.0, 1.0)

    def test_requires_token_metadata(self):
        with pytest.raises(ValueError):
            liquidity_for_usd(make_pool(token0=None), -100, 100, 1000.0, 1.0, 1.0)


class TestFeesToUsd:
    """Fee amount valuation"""

    def test_decimals_and_prices(self):
        fees = TokenFeeAmount(amount0=5 * 10 ** 6, amount1=2 * 10 ** 15)
        value = fees_to_usd(fees, make_pool(), 1.0, 2000.0)
        assert value == pytest.approx(5.0 + 4.0)

    def test_zero_fees(self):
        assert fees_to_usd(TokenFeeAmount.zero(), make_pool(), 1.0, 2000.0) == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
