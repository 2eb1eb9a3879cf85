"""
Range fee estimation

Projects the fee rate of a hypothetical position from the change in fee
growth inside its range between two moments (now and N days ago):

    fees = (f_r(now) - f_r(past)) * l / 2^128
    rate = fees / N

`l` is derived from a USD notional split between the tokens by where the
current tick sits in the range (linear in ticks, 100% token0 below the
range, 100% token1 above it).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..data.types import Pool, Tick, TokenFeeAmount
from ..math.fee_math import calculate_position_fees, compute_fee_growth_inside, decode_fee_amount
from ..math.liquidity_math import get_liquidity_for_amounts
from ..math.tick_math import get_sqrt_ratio_at_tick

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeRateEstimate:
    """Fees over the estimation window, or the reason none is available"""
    fees: Optional[TokenFeeAmount]
    num_days: float
    reason: Optional[str] = None

    @classmethod
    def unavailable(cls, reason: str, num_days: float) -> "FeeRateEstimate":
        return cls(fees=None, num_days=num_days, reason=reason)

    @property
    def available(self) -> bool:
        return self.fees is not None

    @property
    def amount0_per_day(self) -> Optional[float]:
        return self.fees.amount0 / self.num_days if self.fees is not None else None

    @property
    def amount1_per_day(self) -> Optional[float]:
        return self.fees.amount1 / self.num_days if self.fees is not None else None


def estimate_fee_rate(
    pool_now: Pool,
    tick_lower_now: Tick,
    tick_upper_now: Tick,
    pool_past: Pool,
    tick_lower_past: Tick,
    tick_upper_past: Tick,
    liquidity: int,
    num_days: float
) -> FeeRateEstimate:
    """Fee rate of `liquidity` between two snapshots of a range

    Args:
        pool_now: pool state at the end of the window
        tick_lower_now: lower boundary tick at the end of the window
        tick_upper_now: upper boundary tick at the end of the window
        pool_past: pool state at the start of the window
        tick_lower_past: lower boundary tick at the start of the window
        tick_upper_past: upper boundary tick at the start of the window
        liquidity: position liquidity (l)
        num_days: window length in days

    Returns:
        FeeRateEstimate; unavailable when either snapshot has an inverted range
    """
    if num_days <= 0:
        raise ValueError(f"num_days must be positive, got {num_days}")

    if tick_lower_now.index >= tick_upper_now.index:
        logger.warning("Lower tick %d >= upper tick %d", tick_lower_now.index, tick_upper_now.index)
        return FeeRateEstimate.unavailable("current tick range is inverted", num_days)

    if tick_lower_past.index >= tick_upper_past.index:
        logger.warning("Past lower tick %d >= past upper tick %d",
                       tick_lower_past.index, tick_upper_past.index)
        return FeeRateEstimate.unavailable("past tick range is inverted", num_days)

    inside_now = compute_fee_growth_inside(
        tick_lower_now, tick_upper_now, pool_now.tick,
        pool_now.fee_growth_global_0_x128, pool_now.fee_growth_global_1_x128,
    )
    inside_past = compute_fee_growth_inside(
        tick_lower_past, tick_upper_past, pool_past.tick,
        pool_past.fee_growth_global_0_x128, pool_past.fee_growth_global_1_x128,
    )

    fees = calculate_position_fees(inside_now, inside_past, liquidity)
    return FeeRateEstimate(fees=fees, num_days=num_days)


def token_shares(current_tick: int, tick_lower: int, tick_upper: int) -> Tuple[float, float]:
    """Share of the notional held as (token0, token1)"""
    if current_tick <= tick_lower:
        return 1.0, 0.0
    if current_tick < tick_upper:
        width = tick_upper - tick_lower
        return (tick_upper - current_tick) / width, (current_tick - tick_lower) / width
    return 0.0, 1.0


def liquidity_for_usd(
    pool: Pool,
    tick_lower: int,
    tick_upper: int,
    liquidity_usd: float,
    token0_price: float,
    token1_price: float
) -> int:
    """Liquidity of a position worth `liquidity_usd`

    Args:
        pool: current pool state (tick, sqrtPrice, token decimals)
        tick_lower: lower tick of the range
        tick_upper: upper tick of the range
        liquidity_usd: notional in USD
        token0_price: USD price of token0
        token1_price: USD price of token1

    Returns:
        liquidity (l)
    """
    if token0_price <= 0 or token1_price <= 0:
        raise ValueError("Token prices must be positive")
    if pool.token0 is None or pool.token1 is None:
        raise ValueError(f"Pool {pool.id} is missing token metadata")

    share0, share1 = token_shares(pool.tick, tick_lower, tick_upper)
    amount0 = round(liquidity_usd / token0_price * share0 * 10 ** pool.token0.decimals)
    amount1 = round(liquidity_usd / token1_price * share1 * 10 ** pool.token1.decimals)

    return get_liquidity_for_amounts(
        pool.sqrt_price,
        get_sqrt_ratio_at_tick(tick_lower),
        get_sqrt_ratio_at_tick(tick_upper),
        amount0,
        amount1,
    )


def fees_to_usd(
    fees: TokenFeeAmount,
    pool: Pool,
    token0_price: float,
    token1_price: float
) -> float:
    """USD value of a fee amount"""
    if pool.token0 is None or pool.token1 is None:
        raise ValueError(f"Pool {pool.id} is missing token metadata")
    return (decode_fee_amount(fees.amount0, pool.token0.decimals) * token0_price
            + decode_fee_amount(fees.amount1, pool.token1.decimals) * token1_price)
