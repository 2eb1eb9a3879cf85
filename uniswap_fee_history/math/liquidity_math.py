"""
Liquidity Math - token amounts to liquidity

Maximum liquidity mintable from given token amounts at the current price,
used to turn a USD notional into the `l` of a hypothetical position.

References:
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol
- Uniswap V3 SDK: maxLiquidityForAmounts (full precision)

Core formulas:
    L = x * sqrtP_a * sqrtP_b / (sqrtP_b - sqrtP_a)   # token0 side
    L = y / (sqrtP_b - sqrtP_a)                        # token1 side
"""

from ..constants import Q96


def get_liquidity_for_amount0(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int
) -> int:
    """Liquidity from an amount of token0

    Args:
        sqrt_ratio_a_x96: lower sqrtPriceX96
        sqrt_ratio_b_x96: upper sqrtPriceX96
        amount0: token0 amount (base units)

    Returns:
        liquidity
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_b_x96 == sqrt_ratio_a_x96:
        return 0

    numerator = amount0 * sqrt_ratio_a_x96 * sqrt_ratio_b_x96
    denominator = Q96 * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)
    return numerator // denominator


def get_liquidity_for_amount1(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount1: int
) -> int:
    """Liquidity from an amount of token1

    Args:
        sqrt_ratio_a_x96: lower sqrtPriceX96
        sqrt_ratio_b_x96: upper sqrtPriceX96
        amount1: token1 amount (base units)

    Returns:
        liquidity
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_b_x96 == sqrt_ratio_a_x96:
        return 0

    return amount1 * Q96 // (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amounts(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int
) -> int:
    """Maximum liquidity for the given amounts at the current price

    Args:
        sqrt_ratio_x96: current sqrtPriceX96
        sqrt_ratio_a_x96: lower sqrtPriceX96
        sqrt_ratio_b_x96: upper sqrtPriceX96
        amount0: token0 amount
        amount1: token1 amount

    Returns:
        liquidity (the binding side when the price is inside the range)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        # price below range: token0 only
        return get_liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)

    elif sqrt_ratio_x96 < sqrt_ratio_b_x96:
        liquidity0 = get_liquidity_for_amount0(sqrt_ratio_x96, sqrt_ratio_b_x96, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_x96, amount1)
        return min(liquidity0, liquidity1)

    else:
        # price above range: token1 only
        return get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)
