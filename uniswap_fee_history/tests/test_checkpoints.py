"""
Checkpoint alignment tests
"""

import pytest

from ..fees.checkpoints import CheckpointTracker, advance_checkpoint
from ..data.types import PositionCheckpoint


def checkpoint(timestamp, liquidity=100):
    return PositionCheckpoint(timestamp=timestamp, liquidity=liquidity,
                              fee_growth_inside_0_last_x128=timestamp,
                              fee_growth_inside_1_last_x128=timestamp)


CHECKPOINTS = [checkpoint(10), checkpoint(20), checkpoint(25), checkpoint(40)]


class TestAdvanceCheckpoint:
    """advance_checkpoint"""

    def test_no_advance_before_next(self):
        result = advance_checkpoint(0, CHECKPOINTS, 15)
        assert result.index == 0
        assert result.checkpoint is CHECKPOINTS[0]
        assert result.advanced is False

    def test_advance_on_exact_timestamp(self):
        """timestamp <= day activates the checkpoint"""
        result = advance_checkpoint(0, CHECKPOINTS, 20)
        assert result.index == 1
        assert result.advanced is True

    def test_skips_several_checkpoints(self):
        """Lands on the last checkpoint not after the day"""
        result = advance_checkpoint(0, CHECKPOINTS, 30)
        assert result.index == 2
        assert result.checkpoint is CHECKPOINTS[2]

    def test_stays_on_last(self):
        result = advance_checkpoint(3, CHECKPOINTS, 1000)
        assert result.index == 3
        assert result.advanced is False

    def test_never_moves_backwards(self):
        result = advance_checkpoint(2, CHECKPOINTS, 0)
        assert result.index == 2

    def test_empty_checkpoints(self):
        with pytest.raises(ValueError):
            advance_checkpoint(0, [], 10)


class TestCheckpointTracker:
    """CheckpointTracker"""

    def test_monotonic_alignment(self):
        """Index is non-decreasing over ascending days"""
        tracker = CheckpointTracker(CHECKPOINTS)
        indexes = []
        for day in range(0, 50, 5):
            tracker.advance(day)
            indexes.append(tracker.index)
        assert indexes == sorted(indexes)
        assert indexes[-1] == 3

    def test_advance_flag(self):
        tracker = CheckpointTracker(CHECKPOINTS)
        assert tracker.advance(12) == (CHECKPOINTS[0], False)
        assert tracker.advance(21) == (CHECKPOINTS[1], True)
        assert tracker.advance(22) == (CHECKPOINTS[1], False)

    def test_unordered_rejected(self):
        with pytest.raises(ValueError):
            CheckpointTracker([checkpoint(20), checkpoint(10)])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
