"""
Daily fee reconstruction

Rebuilds the per-day fee accrual of one position from daily pool snapshots,
sparse boundary tick history and the position's checkpoints.

For every pool day (ascending):
    1. resolve the lower/upper tick state on that day (tick_history)
    2. align the active checkpoint (checkpoints); on a new checkpoint the
       baseline becomes its feeGrowthInsideLast and running totals reset
    3. f_r(day) from the pool's tick and global growth (fee_math)
    4. total since checkpoint = (f_r(day) - f_r(checkpoint)) * l / 2^128,
       the day's amount is the increment over the previous day's total
    5. carry correction (below)

Carry correction, per token:
    A tick crossing can flip which side a boundary's outside accumulator
    refers to, so f_r(day) may dip under the checkpoint baseline and recover
    later. When that happens on a day whose increment is still >= 0 the
    increment is withheld (reported as 0). It is added back on the next day
    whose increment is negative, or on the first day f_r(day) is back at or
    above the baseline. A carry still pending after the last day is added
    to that day, so sums over the series are preserved. A new checkpoint
    discards any pending carry since its fees were realized on-chain.

    A negative increment larger than the pending carry is still reported
    as a negative day.

Precondition: pool_day_records start at or after the first checkpoint.
"""

import logging
from typing import Dict, Iterable, Sequence, Tuple

from ..data.types import (
    PoolDayRecord,
    Position,
    PositionCheckpoint,
    TickDayRecord,
    TokenFeeAmount,
)
from ..exceptions import InvalidTickRangeError
from ..math.fee_math import FeeGrowthInside, compute_fee_growth_inside, fee_growth_to_amount
from .checkpoints import CheckpointTracker
from .tick_history import TickHistory

logger = logging.getLogger(__name__)

DailyFees = Dict[int, TokenFeeAmount]


def _baseline(checkpoint: PositionCheckpoint) -> FeeGrowthInside:
    return FeeGrowthInside(
        checkpoint.fee_growth_inside_0_last_x128,
        checkpoint.fee_growth_inside_1_last_x128,
    )


def apply_carry(
    raw_amount: int,
    fee_growth_inside: int,
    fee_growth_inside_baseline: int,
    carry: int
) -> Tuple[int, int]:
    """Negative-delta correction for one token

    Args:
        raw_amount: the day's increment before correction
        fee_growth_inside: f_r(day)
        fee_growth_inside_baseline: f_r at the active checkpoint
        carry: amount currently withheld

    Returns:
        (reported amount, new carry)
    """
    if raw_amount < 0:
        return raw_amount + carry, 0
    if fee_growth_inside < fee_growth_inside_baseline and carry == 0:
        return 0, raw_amount
    if fee_growth_inside >= fee_growth_inside_baseline and carry:
        return raw_amount + carry, 0
    return raw_amount, carry


def reconstruct_daily_fees(
    position: Position,
    pool_day_records: Sequence[PoolDayRecord],
    tick_lower_records: Iterable[TickDayRecord],
    tick_upper_records: Iterable[TickDayRecord],
    checkpoints: Sequence[PositionCheckpoint]
) -> DailyFees:
    """Per-day fees of a position

    Args:
        position: the position; its live boundary ticks are the fallback
            when no tick day record predates a day
        pool_day_records: daily pool snapshots, ascending by date
        tick_lower_records: tick day records of the lower boundary
        tick_upper_records: tick day records of the upper boundary
        checkpoints: position checkpoints, ascending by timestamp

    Returns:
        {date: TokenFeeAmount}, in ascending date order

    Raises:
        InvalidTickRangeError: the position's lower tick is not below its upper tick
    """
    if position.tick_lower.index >= position.tick_upper.index:
        raise InvalidTickRangeError(position.tick_lower.index, position.tick_upper.index)

    lower_history = TickHistory(position.tick_lower.index, tick_lower_records, position.tick_lower)
    upper_history = TickHistory(position.tick_upper.index, tick_upper_records, position.tick_upper)
    tracker = CheckpointTracker(checkpoints)

    baseline = _baseline(tracker.current)
    prev_total = TokenFeeAmount.zero()
    carry0 = carry1 = 0

    daily: DailyFees = {}
    for day in pool_day_records:
        tick_lower = lower_history.resolve(day.date)
        tick_upper = upper_history.resolve(day.date)

        checkpoint, advanced = tracker.advance(day.date)
        if advanced:
            logger.debug("Position %s: checkpoint %d active from %d",
                         position.id, tracker.index, day.date)
            baseline = _baseline(checkpoint)
            prev_total = TokenFeeAmount.zero()
            carry0 = carry1 = 0

        inside = compute_fee_growth_inside(
            tick_lower,
            tick_upper,
            day.current_tick,
            day.fee_growth_global_0_x128,
            day.fee_growth_global_1_x128,
        )

        total = TokenFeeAmount(
            amount0=fee_growth_to_amount(
                inside.fee_growth_inside_0_x128 - baseline.fee_growth_inside_0_x128,
                checkpoint.liquidity,
            ),
            amount1=fee_growth_to_amount(
                inside.fee_growth_inside_1_x128 - baseline.fee_growth_inside_1_x128,
                checkpoint.liquidity,
            ),
        )
        raw = total - prev_total

        amount0, carry0_next = apply_carry(
            raw.amount0, inside.fee_growth_inside_0_x128,
            baseline.fee_growth_inside_0_x128, carry0,
        )
        amount1, carry1_next = apply_carry(
            raw.amount1, inside.fee_growth_inside_1_x128,
            baseline.fee_growth_inside_1_x128, carry1,
        )
        if (carry0_next, carry1_next) != (carry0, carry1):
            logger.debug("Position %s on %d: carry (%d, %d) -> (%d, %d)",
                         position.id, day.date, carry0, carry1, carry0_next, carry1_next)
        carry0, carry1 = carry0_next, carry1_next

        daily[day.date] = TokenFeeAmount(amount0, amount1)
        prev_total = total

    if daily and (carry0 or carry1):
        last_date = list(daily)[-1]
        logger.debug("Position %s: releasing carry (%d, %d) into %d",
                     position.id, carry0, carry1, last_date)
        daily[last_date] = daily[last_date] + TokenFeeAmount(carry0, carry1)

    return daily
