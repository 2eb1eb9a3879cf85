"""
Position fee history

Fetches the inputs of the daily reconstruction from the subgraph and runs
it for a single position or for every position of an owner in a pool.
"""

import logging
import time
from typing import Dict, Optional, Sequence

from ..config import settings
from ..constants import SECONDS_PER_DAY
from ..data.graph_client import GraphClient
from ..data.types import Position, PositionCheckpoint, TokenFeeAmount
from ..exceptions import FeeHistoryError
from ..math.fee_math import calculate_position_fees, compute_fee_growth_inside, FeeGrowthInside
from .daily_fees import DailyFees, reconstruct_daily_fees

logger = logging.getLogger(__name__)


def requested_floor(num_days: float, now: Optional[int] = None) -> int:
    """Unix timestamp `num_days` before `now`"""
    if now is None:
        now = int(time.time())
    return int(now - num_days * SECONDS_PER_DAY)


def effective_floor(requested: int, checkpoints: Sequence[PositionCheckpoint]) -> int:
    """max(requested floor, earliest checkpoint timestamp)

    Days before the first checkpoint have no baseline to measure against.
    """
    if not checkpoints:
        raise FeeHistoryError("Cannot compute a date floor without checkpoints")
    return max(requested, min(c.timestamp for c in checkpoints))


def get_daily_position_fees(
    client: GraphClient,
    position_id: str,
    num_days: Optional[int] = None,
    now: Optional[int] = None
) -> DailyFees:
    """Daily fees of one position over the last `num_days` days

    Args:
        client: subgraph client
        position_id: position NFT id
        num_days: window length, DEFAULT_NUM_DAYS when None
        now: end of the window (unix seconds), current time when None

    Returns:
        {date: TokenFeeAmount}
    """
    position, checkpoints = client.get_position_with_checkpoints(position_id)
    return reconstruct_position_fees(client, position, checkpoints, num_days, now)


def reconstruct_position_fees(
    client: GraphClient,
    position: Position,
    checkpoints: Sequence[PositionCheckpoint],
    num_days: Optional[int] = None,
    now: Optional[int] = None
) -> DailyFees:
    """Daily fees of an already fetched position and its checkpoints"""
    num_days = num_days if num_days is not None else settings.DEFAULT_NUM_DAYS
    if not checkpoints:
        raise FeeHistoryError(f"Position {position.id} has no checkpoints")

    floor = effective_floor(requested_floor(num_days, now), checkpoints)
    logger.info("Reconstructing fees of position %s since %d", position.id, floor)

    pool_days = client.get_pool_day_records(position.pool_id, floor)
    histories = client.get_tick_histories(
        position.pool_id,
        [position.tick_lower.index, position.tick_upper.index],
        floor,
    )

    return reconstruct_daily_fees(
        position,
        pool_days,
        histories[position.tick_lower.index],
        histories[position.tick_upper.index],
        checkpoints,
    )


def get_daily_owner_pool_fees(
    client: GraphClient,
    owner: str,
    pool_id: str,
    num_days: Optional[int] = None,
    now: Optional[int] = None
) -> Dict[str, DailyFees]:
    """Daily fees of every position an owner holds in a pool

    Pool and tick history are fetched once for all positions; each
    position is then reconstructed independently from its own first
    checkpoint.

    Returns:
        {position id: {date: TokenFeeAmount}}
    """
    num_days = num_days if num_days is not None else settings.DEFAULT_NUM_DAYS

    positions = []
    for position, checkpoints in client.get_owner_pool_positions(owner, pool_id):
        if not checkpoints:
            logger.warning("Position %s has no checkpoints, skipping", position.id)
            continue
        positions.append((position, checkpoints))

    if not positions:
        return {}

    all_checkpoints = [c for _, checkpoints in positions for c in checkpoints]
    floor = effective_floor(requested_floor(num_days, now), all_checkpoints)
    logger.info("Reconstructing fees of %d positions of %s in %s since %d",
                len(positions), owner, pool_id, floor)

    pool_days = client.get_pool_day_records(pool_id, floor)
    tick_idxs = {idx for p, _ in positions for idx in (p.tick_lower.index, p.tick_upper.index)}
    histories = client.get_tick_histories(pool_id, tick_idxs, floor)

    fees: Dict[str, DailyFees] = {}
    for position, checkpoints in positions:
        first = checkpoints[0].timestamp
        fees[position.id] = reconstruct_daily_fees(
            position,
            [d for d in pool_days if d.date >= first],
            histories[position.tick_lower.index],
            histories[position.tick_upper.index],
            checkpoints,
        )
    return fees


def get_total_owner_pool_fees(client: GraphClient, owner: str, pool_id: str) -> TokenFeeAmount:
    """Uncollected fees of an owner's positions in a pool, right now

    f_u = l * (f_r(now) - f_r(last)) / 2^128, summed over positions.
    """
    pool = client.get_pool(pool_id)

    total = TokenFeeAmount.zero()
    for position, _ in client.get_owner_pool_positions(owner, pool_id):
        inside = compute_fee_growth_inside(
            position.tick_lower,
            position.tick_upper,
            pool.tick,
            pool.fee_growth_global_0_x128,
            pool.fee_growth_global_1_x128,
        )
        last = FeeGrowthInside(
            position.fee_growth_inside_0_last_x128,
            position.fee_growth_inside_1_last_x128,
        )
        total = total + calculate_position_fees(inside, last, position.liquidity)
    return total
