"""
Position checkpoint alignment

Walks a position's checkpoints (positionSnapshots) in lockstep with an
ascending day timeline. The active checkpoint for a day is the latest one
whose timestamp is <= the day.
"""

from typing import NamedTuple, Sequence

from ..data.types import PositionCheckpoint


class CheckpointAdvance(NamedTuple):
    """Result of advancing the checkpoint cursor"""
    index: int
    checkpoint: PositionCheckpoint
    advanced: bool


def advance_checkpoint(
    current_index: int,
    checkpoints: Sequence[PositionCheckpoint],
    day: int
) -> CheckpointAdvance:
    """Move the cursor to the last checkpoint not after `day`

    The cursor never moves backwards, so for ascending days the returned
    index is non-decreasing. Several checkpoints written before the same
    day are skipped in one call.

    Args:
        current_index: cursor from the previous day (0 initially)
        checkpoints: checkpoints ordered ascending by timestamp
        day: day-aligned timestamp

    Returns:
        CheckpointAdvance; `advanced` tells the caller to reset its
        fee baseline to the new checkpoint
    """
    if not checkpoints:
        raise ValueError("Position has no checkpoints")

    index = current_index
    while index + 1 < len(checkpoints) and checkpoints[index + 1].timestamp <= day:
        index += 1

    return CheckpointAdvance(index, checkpoints[index], index != current_index)


class CheckpointTracker:
    """Stateful cursor over one position's checkpoints

    Usage:
        tracker = CheckpointTracker(checkpoints)
        for day in days:
            checkpoint, advanced = tracker.advance(day)
    """

    def __init__(self, checkpoints: Sequence[PositionCheckpoint]):
        if not checkpoints:
            raise ValueError("Position has no checkpoints")
        for prev, checkpoint in zip(checkpoints, checkpoints[1:]):
            if checkpoint.timestamp < prev.timestamp:
                raise ValueError("Checkpoints must be ordered ascending by timestamp")
        self.checkpoints = checkpoints
        self.index = 0

    @property
    def current(self) -> PositionCheckpoint:
        return self.checkpoints[self.index]

    def advance(self, day: int):
        """Advance to `day`; returns (checkpoint, advanced)"""
        result = advance_checkpoint(self.index, self.checkpoints, day)
        self.index = result.index
        return result.checkpoint, result.advanced
