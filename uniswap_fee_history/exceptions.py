"""
Fee history errors

Inverted tick ranges and missing boundary history are data/caller errors.
Negative fee-growth deltas are routine and never raise (see fees.daily_fees).
"""


class FeeHistoryError(Exception):
    """Base error for the fee history package"""


class InvalidTickRangeError(FeeHistoryError, ValueError):
    """Lower tick index is not strictly below the upper tick index"""

    def __init__(self, tick_lower: int, tick_upper: int):
        self.tick_lower = tick_lower
        self.tick_upper = tick_upper
        super().__init__(
            f"Invalid tick range: lower {tick_lower} >= upper {tick_upper}"
        )


class MissingTickHistoryError(FeeHistoryError, LookupError):
    """No tick day record at or before the date and no fallback tick"""

    def __init__(self, tick_index: int, as_of_date: int):
        self.tick_index = tick_index
        self.as_of_date = as_of_date
        super().__init__(
            f"No history for tick {tick_index} at or before {as_of_date} "
            f"and no fallback tick supplied"
        )


class GraphClientError(FeeHistoryError):
    """Graph API error"""


class ReferenceCallError(FeeHistoryError):
    """On-chain reference call failed"""
