"""
Uniswap V3 position fee history

Reconstructs daily fee accrual of concentrated-liquidity positions from
subgraph snapshots (poolDayData, tickDayData, positionSnapshot) and
estimates short-horizon fee rates for a tick range.
"""

__version__ = "0.1.0"

from .constants import Q128, SECONDS_PER_DAY
