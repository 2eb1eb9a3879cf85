"""
Fee Math - fee growth inside a tick range

Off-chain evaluation of Tick.getFeeGrowthInside and the position fee
formula, following whitepaper Sections 6.3 and 6.4.1.

References:
- Whitepaper Section 6.3: Tick-Indexed State (feeGrowthOutside)
- Whitepaper Section 6.4.1: Position-Indexed State (uncollected fees)
- Uniswap V3 Core: contracts/libraries/Tick.sol (getFeeGrowthInside)

Core formulas:
    f_b(i) = f_o(i)        if i_c >= i else f_g - f_o(i)   # growth below tick i
    f_a(i) = f_o(i)        if i_c < i  else f_g - f_o(i)   # growth above tick i
    f_r = f_g - f_b(i_l) - f_a(i_u)                        # growth inside range
    f_u = l * (f_r(t_1) - f_r(t_0)) / 2^128                # fees in token units

Subtractions use plain signed integers. The contract relies on uint256
wraparound instead; results agree as long as the accumulators never
overflow, and negative intermediate values stay visible to the caller.
"""

from typing import NamedTuple

from ..constants import Q128
from ..data.types import Tick, TokenFeeAmount
from ..exceptions import InvalidTickRangeError


class FeeGrowthInside(NamedTuple):
    """Fee growth inside a range for both tokens (Q128)"""
    fee_growth_inside_0_x128: int  # f_r,0
    fee_growth_inside_1_x128: int  # f_r,1


def fee_growth_below(
    tick_idx: int,
    current_tick: int,
    fee_growth_global: int,
    fee_growth_outside: int
) -> int:
    """Fee growth below tick i (f_b)

    Args:
        tick_idx: tick index (i)
        current_tick: current tick (i_c)
        fee_growth_global: global fee growth (f_g)
        fee_growth_outside: the tick's fee growth outside (f_o)

    Returns:
        fee growth below the tick (f_b)
    """
    if current_tick >= tick_idx:
        return fee_growth_outside
    else:
        return fee_growth_global - fee_growth_outside


def fee_growth_above(
    tick_idx: int,
    current_tick: int,
    fee_growth_global: int,
    fee_growth_outside: int
) -> int:
    """Fee growth above tick i (f_a)

    Args:
        tick_idx: tick index (i)
        current_tick: current tick (i_c)
        fee_growth_global: global fee growth (f_g)
        fee_growth_outside: the tick's fee growth outside (f_o)

    Returns:
        fee growth above the tick (f_a)
    """
    if current_tick < tick_idx:
        return fee_growth_outside
    else:
        return fee_growth_global - fee_growth_outside


def compute_fee_growth_inside(
    tick_lower: Tick,
    tick_upper: Tick,
    current_tick: int,
    fee_growth_global_0: int,
    fee_growth_global_1: int
) -> FeeGrowthInside:
    """Fee growth inside [tick_lower, tick_upper) for both tokens (f_r)

    Args:
        tick_lower: lower boundary tick with its outside accumulators
        tick_upper: upper boundary tick with its outside accumulators
        current_tick: pool tick at the evaluated moment (i_c)
        fee_growth_global_0: token0 global fee growth (f_g,0)
        fee_growth_global_1: token1 global fee growth (f_g,1)

    Returns:
        FeeGrowthInside (may be negative, see module docstring)

    Raises:
        InvalidTickRangeError: tick_lower.index >= tick_upper.index
    """
    if tick_lower.index >= tick_upper.index:
        raise InvalidTickRangeError(tick_lower.index, tick_upper.index)

    below_0 = fee_growth_below(tick_lower.index, current_tick,
                               fee_growth_global_0, tick_lower.fee_growth_outside_0_x128)
    below_1 = fee_growth_below(tick_lower.index, current_tick,
                               fee_growth_global_1, tick_lower.fee_growth_outside_1_x128)

    above_0 = fee_growth_above(tick_upper.index, current_tick,
                               fee_growth_global_0, tick_upper.fee_growth_outside_0_x128)
    above_1 = fee_growth_above(tick_upper.index, current_tick,
                               fee_growth_global_1, tick_upper.fee_growth_outside_1_x128)

    return FeeGrowthInside(
        fee_growth_inside_0_x128=fee_growth_global_0 - below_0 - above_0,
        fee_growth_inside_1_x128=fee_growth_global_1 - below_1 - above_1,
    )


def fee_growth_to_amount(fee_growth_delta: int, liquidity: int) -> int:
    """Q128 decoding: fee growth delta x liquidity / 2^128

    Division truncates toward zero, so a negative delta yields the exact
    negation of the matching positive delta.

    Args:
        fee_growth_delta: f_r(t_1) - f_r(t_0) (Q128, may be negative)
        liquidity: position liquidity (l)

    Returns:
        amount in token base units
    """
    product = fee_growth_delta * liquidity
    if product < 0:
        return -((-product) // Q128)
    return product // Q128


def calculate_position_fees(
    fee_growth_inside: FeeGrowthInside,
    fee_growth_inside_last: FeeGrowthInside,
    liquidity: int
) -> TokenFeeAmount:
    """Fees accrued between two fee-growth-inside observations (f_u)

    Args:
        fee_growth_inside: f_r(t_1)
        fee_growth_inside_last: f_r(t_0)
        liquidity: position liquidity (l)

    Returns:
        TokenFeeAmount in token base units
    """
    return TokenFeeAmount(
        amount0=fee_growth_to_amount(
            fee_growth_inside.fee_growth_inside_0_x128
            - fee_growth_inside_last.fee_growth_inside_0_x128,
            liquidity,
        ),
        amount1=fee_growth_to_amount(
            fee_growth_inside.fee_growth_inside_1_x128
            - fee_growth_inside_last.fee_growth_inside_1_x128,
            liquidity,
        ),
    )


def decode_fee_amount(amount: int, decimals: int = 18) -> float:
    """Token base units -> human-readable token amount

    Args:
        amount: amount in base units
        decimals: token decimals

    Returns:
        amount in whole tokens
    """
    return amount / (10 ** decimals)
