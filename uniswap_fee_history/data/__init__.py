"""
Data layer for the fee history engine

Record types, The Graph API client and the on-chain reference.
"""

from .types import (
    Token,
    Tick,
    Pool,
    Position,
    PositionCheckpoint,
    PoolDayRecord,
    TickDayRecord,
    TokenFeeAmount,
)
from .graph_client import GraphClient, FeeEstimationData
