"""
Fee history engine

- tick_history: boundary tick state on a given day
- checkpoints: active position checkpoint on a given day
- daily_fees: per-day fee reconstruction with carry correction
- estimation: fee rate of a range between two snapshots
- position_fees / fee_estimate: subgraph-backed entry points
"""

from .tick_history import TickHistory, resolve_tick
from .checkpoints import CheckpointTracker, advance_checkpoint
from .daily_fees import reconstruct_daily_fees
from .estimation import FeeRateEstimate, estimate_fee_rate, liquidity_for_usd
from .position_fees import (
    effective_floor,
    get_daily_position_fees,
    get_daily_owner_pool_fees,
    get_total_owner_pool_fees,
    reconstruct_position_fees,
)
from .fee_estimate import estimate_24h_usd_fees
from .validation import compare_with_reference, sum_daily_fees
