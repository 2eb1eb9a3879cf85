"""
Tick history tests

Exact day, first smaller and fallback resolution of sparse tickDayData.
"""

import pytest

from ..fees.tick_history import TickHistory, resolve_tick
from ..data.types import Tick, TickDayRecord
from ..exceptions import MissingTickHistoryError

DAY = 86400


def record(date, outside0, outside1=0, tick_index=-200):
    return TickDayRecord(date=date, tick_index=tick_index,
                         fee_growth_outside_0_x128=outside0,
                         fee_growth_outside_1_x128=outside1)


FALLBACK = Tick(index=-200, fee_growth_outside_0_x128=7, fee_growth_outside_1_x128=8)

HISTORY = [record(3 * DAY, 300, 30), record(1 * DAY, 100, 10), record(5 * DAY, 500, 50)]


class TestResolveTick:
    """resolve_tick"""

    def test_exact_date(self):
        """A record dated on the day wins"""
        tick = resolve_tick(-200, 3 * DAY, HISTORY, FALLBACK)
        assert tick == Tick(-200, 300, 30)

    def test_first_smaller(self):
        """Otherwise the most recent earlier record"""
        assert resolve_tick(-200, 4 * DAY, HISTORY, FALLBACK) == Tick(-200, 300, 30)
        assert resolve_tick(-200, 100 * DAY, HISTORY, FALLBACK) == Tick(-200, 500, 50)

    def test_unsorted_input(self):
        """Input order does not matter"""
        descending = sorted(HISTORY, key=lambda r: r.date, reverse=True)
        assert resolve_tick(-200, 2 * DAY, descending, FALLBACK) == Tick(-200, 100, 10)

    def test_fallback_when_nothing_predates(self):
        """Fallback returned unmodified"""
        assert resolve_tick(-200, DAY - 1, HISTORY, FALLBACK) is FALLBACK

    def test_fallback_with_empty_history(self):
        assert resolve_tick(-200, 10 * DAY, [], FALLBACK) is FALLBACK

    def test_missing_fallback_raises(self):
        """No record and no fallback is a caller error"""
        with pytest.raises(MissingTickHistoryError):
            resolve_tick(-200, DAY - 1, HISTORY)


class TestTickHistory:
    """TickHistory validation and lookup"""

    def test_record_at(self):
        history = TickHistory(-200, HISTORY)
        assert history.record_at(0) is None
        assert history.record_at(2 * DAY).date == DAY
        assert len(history) == 3

    def test_foreign_record_rejected(self):
        """Records of another tick are a data error"""
        with pytest.raises(ValueError):
            TickHistory(-200, [record(DAY, 1, tick_index=0)])

    def test_duplicate_date_rejected(self):
        with pytest.raises(ValueError):
            TickHistory(-200, [record(DAY, 1), record(DAY, 2)])

    def test_fallback_index_must_match(self):
        with pytest.raises(ValueError):
            TickHistory(0, [], fallback=FALLBACK)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
