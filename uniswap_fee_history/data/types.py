"""
Uniswap V3 fee history data types

Records returned by the Uniswap V3 subgraph, defined as frozen dataclasses.
Every numeric field that carries on-chain precision is an int; each record
kind has exactly one `from_dict` constructor that validates the raw payload.
"""

from dataclasses import dataclass
from typing import Optional


def _tick_index(data: dict) -> int:
    # tickDayData nests the tick entity, ticks carry tickIdx directly
    if "tickIdx" in data:
        return int(data["tickIdx"])
    return int(data["tick"]["tickIdx"])


def _unsigned(data: dict, key: str) -> int:
    value = int(data[key])
    if value < 0:
        raise ValueError(f"{key} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class Token:
    """ERC20 token information"""
    id: str  # contract address
    decimals: int
    symbol: str = ""
    derived_eth: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        return cls(
            id=data.get("id", ""),
            decimals=int(data["decimals"]),
            symbol=data.get("symbol", ""),
            derived_eth=float(data.get("derivedETH", 0) or 0),
        )


@dataclass(frozen=True)
class Tick:
    """Tick-Indexed State (whitepaper Section 6.3)

    - index: tick index (i)
    - fee_growth_outside_0_x128: f_o,0(i)
    - fee_growth_outside_1_x128: f_o,1(i)
    """
    index: int
    fee_growth_outside_0_x128: int
    fee_growth_outside_1_x128: int

    @classmethod
    def from_dict(cls, data: dict) -> "Tick":
        return cls(
            index=_tick_index(data),
            fee_growth_outside_0_x128=_unsigned(data, "feeGrowthOutside0X128"),
            fee_growth_outside_1_x128=_unsigned(data, "feeGrowthOutside1X128"),
        )

    @classmethod
    def uninitialized(cls, index: int) -> "Tick":
        """Tick that has never been crossed (outside accumulators at zero)"""
        return cls(index=index, fee_growth_outside_0_x128=0, fee_growth_outside_1_x128=0)


@dataclass(frozen=True)
class PoolDayRecord:
    """Daily pool snapshot (poolDayData)"""
    date: int  # day-aligned unix timestamp
    current_tick: int  # i_c at the end of the day
    fee_growth_global_0_x128: int  # f_g,0
    fee_growth_global_1_x128: int  # f_g,1

    @classmethod
    def from_dict(cls, data: dict) -> "PoolDayRecord":
        return cls(
            date=int(data["date"]),
            current_tick=int(data["tick"]),
            fee_growth_global_0_x128=_unsigned(data, "feeGrowthGlobal0X128"),
            fee_growth_global_1_x128=_unsigned(data, "feeGrowthGlobal1X128"),
        )


@dataclass(frozen=True)
class TickDayRecord:
    """Daily tick snapshot (tickDayData)

    Only written on days when the tick's outside accumulator changed,
    so a tick's history is sparse.
    """
    date: int
    tick_index: int
    fee_growth_outside_0_x128: int
    fee_growth_outside_1_x128: int

    @classmethod
    def from_dict(cls, data: dict) -> "TickDayRecord":
        return cls(
            date=int(data["date"]),
            tick_index=_tick_index(data),
            fee_growth_outside_0_x128=_unsigned(data, "feeGrowthOutside0X128"),
            fee_growth_outside_1_x128=_unsigned(data, "feeGrowthOutside1X128"),
        )

    def to_tick(self) -> Tick:
        return Tick(
            index=self.tick_index,
            fee_growth_outside_0_x128=self.fee_growth_outside_0_x128,
            fee_growth_outside_1_x128=self.fee_growth_outside_1_x128,
        )


@dataclass(frozen=True)
class PositionCheckpoint:
    """Position-Indexed State snapshot (positionSnapshot)

    Written on every deposit, withdrawal and collect.

    - liquidity: l
    - fee_growth_inside_0_last_x128: f_r,0(t_0)
    - fee_growth_inside_1_last_x128: f_r,1(t_0)
    """
    timestamp: int
    liquidity: int
    fee_growth_inside_0_last_x128: int
    fee_growth_inside_1_last_x128: int

    @classmethod
    def from_dict(cls, data: dict) -> "PositionCheckpoint":
        return cls(
            timestamp=int(data["timestamp"]),
            liquidity=_unsigned(data, "liquidity"),
            fee_growth_inside_0_last_x128=_unsigned(data, "feeGrowthInside0LastX128"),
            fee_growth_inside_1_last_x128=_unsigned(data, "feeGrowthInside1LastX128"),
        )


@dataclass(frozen=True)
class Position:
    """Liquidity position with its live boundary ticks

    The range is fixed for the lifetime of the position. The live ticks
    double as the fallback state when no tick day record predates a day.
    """
    id: str
    pool_id: str
    tick_lower: Tick  # i_l
    tick_upper: Tick  # i_u
    owner: str = ""
    liquidity: int = 0
    fee_growth_inside_0_last_x128: int = 0
    fee_growth_inside_1_last_x128: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        pool = data.get("pool", {})
        return cls(
            id=str(data.get("id", "")),
            pool_id=pool.get("id", "") if isinstance(pool, dict) else str(pool),
            tick_lower=Tick.from_dict(data["tickLower"]),
            tick_upper=Tick.from_dict(data["tickUpper"]),
            owner=data.get("owner", ""),
            liquidity=int(data.get("liquidity", 0)),
            fee_growth_inside_0_last_x128=int(data.get("feeGrowthInside0LastX128", 0)),
            fee_growth_inside_1_last_x128=int(data.get("feeGrowthInside1LastX128", 0)),
        )


@dataclass(frozen=True)
class Pool:
    """Uniswap V3 Pool global state (whitepaper Section 6.2)

    - tick: current tick (i_c)
    - sqrt_price: sqrtPriceX96
    - fee_growth_global_0_x128: f_g,0
    - fee_growth_global_1_x128: f_g,1
    """
    id: str
    tick: int
    fee_growth_global_0_x128: int
    fee_growth_global_1_x128: int
    sqrt_price: int = 0
    liquidity: int = 0
    fee_tier: int = 0
    token0: Optional[Token] = None
    token1: Optional[Token] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Pool":
        return cls(
            id=data.get("id", ""),
            tick=int(data["tick"]),
            fee_growth_global_0_x128=_unsigned(data, "feeGrowthGlobal0X128"),
            fee_growth_global_1_x128=_unsigned(data, "feeGrowthGlobal1X128"),
            sqrt_price=int(data.get("sqrtPrice", 0)),
            liquidity=int(data.get("liquidity", 0)),
            fee_tier=int(data.get("feeTier", 0)),
            token0=Token.from_dict(data["token0"]) if data.get("token0") else None,
            token1=Token.from_dict(data["token1"]) if data.get("token1") else None,
        )


@dataclass(frozen=True)
class TokenFeeAmount:
    """Fee amounts in raw token base units (may be negative before correction)"""
    amount0: int
    amount1: int

    def __add__(self, other: "TokenFeeAmount") -> "TokenFeeAmount":
        return TokenFeeAmount(self.amount0 + other.amount0, self.amount1 + other.amount1)

    def __sub__(self, other: "TokenFeeAmount") -> "TokenFeeAmount":
        return TokenFeeAmount(self.amount0 - other.amount0, self.amount1 - other.amount1)

    @classmethod
    def zero(cls) -> "TokenFeeAmount":
        return cls(0, 0)
