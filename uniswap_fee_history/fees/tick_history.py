"""
Tick history resolution

tickDayData is only written on days when a tick's outside accumulator
changed, so the state of a boundary tick on an arbitrary day has to be
recovered from a sparse series:

    1. the record dated exactly on the requested day, else
    2. the most recent record dated before it ("first smaller"), else
    3. the caller-supplied fallback (the tick's live state).

Lower and upper boundaries are resolved independently.
"""

from bisect import bisect_right
from typing import Iterable, List, Optional

from ..data.types import Tick, TickDayRecord
from ..exceptions import MissingTickHistoryError


class TickHistory:
    """Date-indexed history of one tick

    Records may arrive in any order; they are sorted once on construction.

    Usage:
        history = TickHistory(-200, records, fallback=position.tick_lower)
        tick = history.resolve(pool_day.date)
    """

    def __init__(
        self,
        tick_index: int,
        records: Iterable[TickDayRecord],
        fallback: Optional[Tick] = None
    ):
        """
        Args:
            tick_index: index of the tick every record must belong to
            records: tick day records of that tick, any order
            fallback: tick state used when nothing predates a query
        """
        if fallback is not None and fallback.index != tick_index:
            raise ValueError(
                f"Fallback tick {fallback.index} does not match history tick {tick_index}"
            )

        ordered: List[TickDayRecord] = sorted(records, key=lambda r: r.date)
        for prev, record in zip(ordered, ordered[1:]):
            if record.date == prev.date:
                raise ValueError(f"Duplicate tick day record for tick {tick_index} on {record.date}")
        for record in ordered:
            if record.tick_index != tick_index:
                raise ValueError(
                    f"Tick day record for tick {record.tick_index} in history of tick {tick_index}"
                )

        self.tick_index = tick_index
        self.fallback = fallback
        self._records = ordered
        self._dates = [r.date for r in ordered]

    def __len__(self) -> int:
        return len(self._records)

    def record_at(self, as_of_date: int) -> Optional[TickDayRecord]:
        """Latest record with date <= as_of_date, or None"""
        pos = bisect_right(self._dates, as_of_date)
        if pos == 0:
            return None
        return self._records[pos - 1]

    def resolve(self, as_of_date: int) -> Tick:
        """Tick state as of a day

        Raises:
            MissingTickHistoryError: no record at or before the day and no fallback
        """
        record = self.record_at(as_of_date)
        if record is not None:
            return record.to_tick()
        if self.fallback is None:
            raise MissingTickHistoryError(self.tick_index, as_of_date)
        return self.fallback


def resolve_tick(
    tick_index: int,
    as_of_date: int,
    history: Iterable[TickDayRecord],
    fallback: Optional[Tick] = None
) -> Tick:
    """Best available state of a tick on a given day

    Args:
        tick_index: tick to resolve
        as_of_date: day-aligned timestamp
        history: tick day records of the tick (any order)
        fallback: live tick state, returned unmodified when no record
            is dated on or before as_of_date

    Returns:
        Tick
    """
    return TickHistory(tick_index, history, fallback).resolve(as_of_date)
