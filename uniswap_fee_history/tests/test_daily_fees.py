"""
Daily fee reconstruction tests

Growth values are whole multiples of Q128 so fee amounts are exact.
"""

import pytest

from ..fees.daily_fees import apply_carry, reconstruct_daily_fees
from ..data.types import (
    PoolDayRecord,
    Position,
    PositionCheckpoint,
    Tick,
    TickDayRecord,
    TokenFeeAmount,
)
from ..exceptions import InvalidTickRangeError
from ..math.fee_math import FeeGrowthInside, calculate_position_fees, compute_fee_growth_inside
from ..constants import Q128

DAY = 86400


def pool_day(date, tick, fg0, fg1):
    return PoolDayRecord(date=date, current_tick=tick,
                         fee_growth_global_0_x128=fg0 * Q128,
                         fee_growth_global_1_x128=fg1 * Q128)


def tick_day(date, index, outside0, outside1):
    return TickDayRecord(date=date, tick_index=index,
                         fee_growth_outside_0_x128=outside0 * Q128,
                         fee_growth_outside_1_x128=outside1 * Q128)


def checkpoint(timestamp, liquidity, inside0, inside1):
    return PositionCheckpoint(timestamp=timestamp, liquidity=liquidity,
                              fee_growth_inside_0_last_x128=inside0 * Q128,
                              fee_growth_inside_1_last_x128=inside1 * Q128)


def position(lower=Tick.uninitialized(-60), upper=Tick.uninitialized(60)):
    return Position(id="1", pool_id="0xpool", tick_lower=lower, tick_upper=upper)


def in_range_days(fg0_series, fg1_series):
    """Price stays at tick 0 with fresh boundary ticks, so f_r equals f_g"""
    return [pool_day((i + 1) * DAY, 0, fg0, fg1)
            for i, (fg0, fg1) in enumerate(zip(fg0_series, fg1_series))]


class TestSingleDay:
    """Single pool day, no tick history"""

    def test_fallback_ticks(self):
        """f_r = f_g with zeroed fallback ticks and the price inside"""
        days = [pool_day(1, -100, 1000, 2000)]
        result = reconstruct_daily_fees(
            position(Tick.uninitialized(-200), Tick.uninitialized(0)),
            days, [], [], [checkpoint(0, 500, 0, 0)],
        )
        assert result == {1: TokenFeeAmount(1000 * 500, 2000 * 500)}

    def test_empty_pool_days(self):
        assert reconstruct_daily_fees(position(), [], [], [], [checkpoint(0, 1, 0, 0)]) == {}

    def test_inverted_position_range(self):
        """Inverted bounds are a data integrity error, not zero fees"""
        with pytest.raises(InvalidTickRangeError):
            reconstruct_daily_fees(
                position(Tick.uninitialized(60), Tick.uninitialized(-60)),
                in_range_days([1], [1]), [], [], [checkpoint(0, 1, 0, 0)],
            )


class TestCrossingHistory:
    """Price leaves the range upwards and comes back, tick history is sparse"""

    LIQUIDITY = 1000

    # upper tick crossed up on day 3 (f_g = 140) and back down on day 5 (f_g = 180)
    LOWER_RECORDS = [tick_day(0, -60, 10, 20)]
    UPPER_RECORDS = [tick_day(0, 60, 5, 10), tick_day(3 * DAY, 60, 135, 270),
                     tick_day(5 * DAY, 60, 45, 90)]
    DAYS = [
        pool_day(1 * DAY, 0, 100, 200),
        pool_day(2 * DAY, 0, 130, 260),
        pool_day(3 * DAY, 100, 150, 300),
        pool_day(4 * DAY, 100, 170, 340),
        pool_day(5 * DAY, 30, 200, 400),
    ]
    CHECKPOINTS = [checkpoint(0, LIQUIDITY, 80, 160)]

    def _position(self):
        # live ticks reflect the latest state
        return position(Tick(-60, 10 * Q128, 20 * Q128), Tick(60, 45 * Q128, 90 * Q128))

    def _run(self):
        return reconstruct_daily_fees(self._position(), self.DAYS, self.LOWER_RECORDS,
                                      self.UPPER_RECORDS, self.CHECKPOINTS)

    def test_daily_amounts(self):
        """No fees accrue while the price is above the range"""
        result = self._run()
        assert [f.amount0 for f in result.values()] == [5000, 30000, 10000, 0, 20000]
        assert [f.amount1 for f in result.values()] == [10000, 60000, 20000, 0, 40000]

    def test_dates_ascending(self):
        assert list(self._run()) == [d.date for d in self.DAYS]

    def test_conservation(self):
        """Sum of daily amounts equals the single-shot computation"""
        result = self._run()
        last = self.DAYS[-1]
        inside = compute_fee_growth_inside(
            Tick(-60, 10 * Q128, 20 * Q128), Tick(60, 45 * Q128, 90 * Q128),
            last.current_tick, last.fee_growth_global_0_x128, last.fee_growth_global_1_x128,
        )
        expected = calculate_position_fees(inside, FeeGrowthInside(80 * Q128, 160 * Q128),
                                           self.LIQUIDITY)

        total = TokenFeeAmount.zero()
        for amount in result.values():
            total = total + amount
        assert total == expected

    def test_non_negative(self):
        assert all(f.amount0 >= 0 and f.amount1 >= 0 for f in self._run().values())

    def test_idempotent(self):
        assert self._run() == self._run()


class TestCarry:
    """Negative-delta carry correction"""

    def test_withhold_then_release(self):
        """Amount withheld below the baseline is added back on the next negative day

        A negative increment larger than the pending carry (day 3: -3
        against a carry of 2) still shows as a negative day, as does a
        first day that starts below the baseline.
        """
        days = in_range_days([95, 97, 94, 120], [95, 97, 94, 120])
        result = reconstruct_daily_fees(position(), days, [], [], [checkpoint(0, 1, 100, 100)])

        assert [f.amount0 for f in result.values()] == [-5, 0, -1, 26]
        # nothing lost: the sum still equals the final total since the checkpoint
        assert sum(f.amount0 for f in result.values()) == 20

    def test_release_when_growth_recovers(self):
        """Carry is released once fee growth is back at or above the baseline"""
        days = in_range_days([120, 97, 99, 130], [100, 100, 100, 100])
        result = reconstruct_daily_fees(position(), days, [], [], [checkpoint(0, 1, 100, 100)])

        assert [f.amount0 for f in result.values()] == [20, -23, 0, 33]
        assert [f.amount1 for f in result.values()] == [0, 0, 0, 0]

    def test_pending_carry_released_on_last_day(self):
        """Series ending while a carry is pending reports it on the last day"""
        days = in_range_days([120, 97, 99], [100, 100, 100])
        result = reconstruct_daily_fees(position(), days, [], [], [checkpoint(0, 1, 100, 100)])

        assert [f.amount0 for f in result.values()] == [20, -23, 2]

    def test_conservation_with_carry(self):
        """Sum of daily amounts equals the single-shot fees whenever a carry occurs"""
        series = [
            [120, 97, 99, 130],
            [120, 97, 99],
            [95, 97, 94, 120],
            [95, 97, 98, 99],
            [100, 98, 99, 99, 101, 150],
            [110, 90, 95, 96, 80, 85, 200],
        ]
        for growth in series:
            days = in_range_days(growth, list(reversed(growth)))
            result = reconstruct_daily_fees(position(), days, [], [], [checkpoint(0, 3, 100, 100)])

            assert sum(f.amount0 for f in result.values()) == (growth[-1] - 100) * 3
            assert sum(f.amount1 for f in result.values()) == (growth[0] - 100) * 3

    def test_tokens_are_independent(self):
        """Each token's carry depends on its own fee growth"""
        days = in_range_days([100, 110, 120, 130], [95, 97, 94, 120])
        result = reconstruct_daily_fees(position(), days, [], [], [checkpoint(0, 1, 100, 100)])

        assert [f.amount0 for f in result.values()] == [0, 10, 10, 10]
        assert [f.amount1 for f in result.values()] == [-5, 0, -1, 26]

    def test_carry_dropped_on_new_checkpoint(self):
        """A new checkpoint realizes fees, pending carry is discarded"""
        days = in_range_days([95, 97, 97, 99], [0, 0, 0, 0])
        checkpoints = [checkpoint(0, 1, 100, 0), checkpoint(3 * DAY - 1, 1, 97, 0)]
        result = reconstruct_daily_fees(position(), days, [], [], checkpoints)

        assert [f.amount0 for f in result.values()] == [-5, 0, 0, 2]


class TestCheckpointReset:
    """Baseline reset on a new checkpoint"""

    def test_reported_amount_restarts_from_new_baseline(self):
        """After a reset the day's amount is measured from the new checkpoint"""
        days = in_range_days([110, 130, 160, 200], [110, 130, 160, 200])
        # second checkpoint between day 2 and day 3: liquidity doubled,
        # baseline equal to day 2's computed fee growth inside
        checkpoints = [checkpoint(0, 1, 100, 100), checkpoint(2 * DAY + 1, 2, 130, 130)]
        result = reconstruct_daily_fees(position(), days, [], [], checkpoints)

        assert [f.amount0 for f in result.values()] == [10, 20, 60, 80]
        assert [f.amount1 for f in result.values()] == [10, 20, 60, 80]

    def test_checkpoint_after_last_day_is_ignored(self):
        days = in_range_days([110, 130], [110, 130])
        checkpoints = [checkpoint(0, 1, 100, 100), checkpoint(10 * DAY, 5, 0, 0)]
        result = reconstruct_daily_fees(position(), days, [], [], checkpoints)
        assert [f.amount0 for f in result.values()] == [10, 20]


class TestApplyCarry:
    """apply_carry"""

    def test_positive_above_baseline(self):
        assert apply_carry(10, 120, 100, 0) == (10, 0)

    def test_negative_releases_carry(self):
        assert apply_carry(-3, 94, 100, 2) == (-1, 0)

    def test_withhold_below_baseline(self):
        assert apply_carry(2, 97, 100, 0) == (0, 2)

    def test_no_double_withhold(self):
        """With a carry already pending the day is reported as is"""
        assert apply_carry(4, 98, 100, 2) == (4, 2)

    def test_release_at_baseline(self):
        assert apply_carry(5, 100, 100, 2) == (7, 0)

    def test_release_above_baseline(self):
        assert apply_carry(5, 130, 100, 2) == (7, 0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
