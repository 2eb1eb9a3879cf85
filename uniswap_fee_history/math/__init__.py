"""
Math layer for the fee history engine

- fee_math: fee growth inside a range, Q128 decoding
- tick_math: tick -> sqrtPriceX96
- liquidity_math: token amounts -> liquidity
"""

from .fee_math import (
    FeeGrowthInside,
    compute_fee_growth_inside,
    fee_growth_to_amount,
    calculate_position_fees,
)
from .tick_math import get_sqrt_ratio_at_tick
from .liquidity_math import get_liquidity_for_amounts
