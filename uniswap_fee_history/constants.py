"""
Uniswap V3 fee history constants

Fixed-point and protocol constants used by the fee reconstruction engine:
- Q96: sqrt price encoding (2^96)
- Q128: fee growth encoding (2^128)
- SECONDS_PER_DAY: day alignment of poolDayData / tickDayData
- SUBGRAPH_IDS: Uniswap V3 subgraph deployments on The Graph network
"""

from typing import Dict

# Fixed-point encoding
Q96: int = 2 ** 96
Q128: int = 2 ** 128

# Tick bounds
MIN_TICK: int = -887272
MAX_TICK: int = 887272

UINT128_MAX: int = 2 ** 128 - 1

SECONDS_PER_DAY: int = 86400

CHAIN_IDS: Dict[str, int] = {
    "ethereum": 0,
    "optimism": 1,
    "arbitrum": 2,
    "polygon": 3,
    "celo": 5,
}

# The Graph Subgraph IDs
SUBGRAPH_IDS: Dict[int, str] = {
    0: "5zvR82QoaXYFyDEKLZ9t6v9adgnptxYpKpSbxtgVENFV",  # Ethereum Mainnet
    1: "Cghf4LfVqPiFw6fp6Y5X5Ubc8UpmUhSfJL82zwiBFLaj",  # Optimism
    2: "FbCGRftH4a3yZugY7TnbYgPJVEv2LvMT6oF1fxPe9aJM",  # Arbitrum
    3: "3hCPRGf4z88VC5rsBKU5AA9FBBq5nF3jbKJG7VZCbhjm",  # Polygon
    5: "ESdrTJ3twMwWVoQ1hUE2u7PugEHX3QkenudD6aXCkDQ4",  # Celo
}

# NonfungiblePositionManager (same address on all official deployments)
POSITION_MANAGER_ADDRESS: str = "0xC36442b4a4522E871399CD717aBDD847Ab11FE88"
