"""
24h USD fee estimate

Values the fee rate a USD notional would have earned in a range over the
last `num_days_ago` days.
"""

import logging
import time
from typing import Optional

from ..data.graph_client import GraphClient
from .estimation import estimate_fee_rate, fees_to_usd, liquidity_for_usd
from .position_fees import requested_floor

logger = logging.getLogger(__name__)


def estimate_24h_usd_fees(
    client: GraphClient,
    blocks_client: GraphClient,
    pool_id: str,
    liquidity_usd: float,
    tick_lower: int,
    tick_upper: int,
    num_days_ago: float,
    now: Optional[int] = None
) -> Optional[float]:
    """Expected USD fees per day for a position of `liquidity_usd`

    Args:
        client: Uniswap V3 subgraph client
        blocks_client: blocks subgraph client
        pool_id: pool address
        liquidity_usd: position notional in USD
        tick_lower: lower tick of the range
        tick_upper: upper tick of the range
        num_days_ago: length of the lookback window in days
        now: end of the window (unix seconds), current time when None

    Returns:
        USD per day, or None when the tick data is missing or inverted
    """
    if now is None:
        now = int(time.time())

    block = blocks_client.get_block_at_timestamp(requested_floor(num_days_ago, now))
    data = client.get_fee_estimation_data(pool_id, tick_lower, tick_upper, block)

    ticks = (data.tick_lower, data.tick_upper, data.tick_lower_past, data.tick_upper_past)
    if any(t is None for t in ticks):
        logger.warning("No initialized boundary ticks in [%d, %d] for pool %s",
                       tick_lower, tick_upper, pool_id)
        return None

    token0_price, token1_price = data.token_prices
    liquidity = liquidity_for_usd(data.pool, tick_lower, tick_upper,
                                  liquidity_usd, token0_price, token1_price)

    estimate = estimate_fee_rate(
        data.pool, data.tick_lower, data.tick_upper,
        data.pool_past, data.tick_lower_past, data.tick_upper_past,
        liquidity, num_days_ago,
    )
    if not estimate.available:
        logger.warning("Fee estimate unavailable for pool %s: %s", pool_id, estimate.reason)
        return None

    return fees_to_usd(estimate.fees, data.pool, token0_price, token1_price) / num_days_ago
