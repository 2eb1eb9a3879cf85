"""
GraphQL query definitions

Queries against the Uniswap V3 subgraph (and a blocks subgraph) that feed
the fee history engine. Every query takes variables; tick entities are
addressed by their subgraph id "<pool>#<tickIdx>".
"""

_TICK_FIELDS = """
    tickIdx
    feeGrowthOutside0X128
    feeGrowthOutside1X128
"""

_CHECKPOINT_FIELDS = """
    timestamp
    liquidity
    feeGrowthInside0LastX128
    feeGrowthInside1LastX128
"""

_SNAPSHOT_FIELDS = """
    id
    blockNumber
    position { id }""" + _CHECKPOINT_FIELDS + """
"""

_POSITION_FIELDS = """
    id
    owner
    liquidity
    feeGrowthInside0LastX128
    feeGrowthInside1LastX128
    pool { id }
    tickLower {""" + _TICK_FIELDS + """}
    tickUpper {""" + _TICK_FIELDS + """}
"""

_POOL_FIELDS = """
    id
    feeTier
    liquidity
    sqrtPrice
    tick
    feeGrowthGlobal0X128
    feeGrowthGlobal1X128
    token0 {
      id
      symbol
      decimals
      derivedETH
    }
    token1 {
      id
      symbol
      decimals
      derivedETH
    }
"""

# Pool global state (current tick, fee growth, tokens)
POOL_QUERY = """
query Pool($id: String!) {
  pool(id: $id) {""" + _POOL_FIELDS + """}
}
"""

# A position with its live boundary ticks
POSITION_QUERY = """
query Position($id: String!) {
  position(id: $id) {""" + _POSITION_FIELDS + """}
}
"""

# One page of a position's checkpoints, by id cursor
POSITION_SNAPSHOTS_QUERY = """
query PositionSnapshots($position: String!, $lastId: String!) {
  positionSnapshots(
    where: { position: $position, id_gt: $lastId }
    orderBy: id
    orderDirection: asc
    first: 1000
  ) {""" + _SNAPSHOT_FIELDS + """}
}
"""

# One page of an owner's positions in a pool, by id cursor
OWNER_POOL_POSITIONS_QUERY = """
query OwnerPoolPositions($owner: String!, $pool: String!, $lastId: String!) {
  positions(
    where: { owner: $owner, pool: $pool, id_gt: $lastId }
    orderBy: id
    orderDirection: asc
    first: 1000
  ) {""" + _POSITION_FIELDS + """}
}
"""

# One page of the checkpoints of an owner's positions in a pool, by id cursor
OWNER_POOL_SNAPSHOTS_QUERY = """
query OwnerPoolSnapshots($owner: String!, $pool: String!, $lastId: String!) {
  positionSnapshots(
    where: { owner: $owner, pool: $pool, id_gt: $lastId }
    orderBy: id
    orderDirection: asc
    first: 1000
  ) {""" + _SNAPSHOT_FIELDS + """}
}
"""

# Daily pool snapshots after a date (ascending)
POOL_DAY_DATAS_QUERY = """
query PoolDayDatas($pool: String!, $fromdate: Int!) {
  poolDayDatas(
    where: { pool: $pool, date_gt: $fromdate }
    orderBy: date
    orderDirection: asc
    first: 1000
  ) {
    date
    tick
    feeGrowthGlobal0X128
    feeGrowthGlobal1X128
  }
}
"""

_TICK_DAY_FIELDS = """
    date
    tick { tickIdx }
    feeGrowthOutside0X128
    feeGrowthOutside1X128
"""

# Daily tick snapshots after a date (ascending)
TICK_DAY_DATAS_QUERY = """
query TickDayDatas($tick: String!, $fromdate: Int!) {
  tickDayDatas(
    where: { tick: $tick, date_gt: $fromdate }
    orderBy: date
    orderDirection: asc
    first: 1000
  ) {""" + _TICK_DAY_FIELDS + """}
}
"""

# Most recent daily tick snapshot at or before a date
TICK_DAY_DATA_FIRST_SMALLER_QUERY = """
query TickDayDataFirstSmaller($tick: String!, $date: Int!) {
  tickDayDatas(
    where: { tick: $tick, date_lte: $date }
    orderBy: date
    orderDirection: desc
    first: 1
  ) {""" + _TICK_DAY_FIELDS + """}
}
"""

# Pool and nearest initialized boundary ticks, now and at a past block
FEE_ESTIMATE_QUERY = """
query FeeEstimationData($pool: String!, $tickLower: BigInt!, $tickUpper: BigInt!, $block: Int!) {
  bundle(id: "1") {
    ethPriceUSD
  }
  pool(id: $pool) {""" + _POOL_FIELDS + """}
  tickLower: ticks(
    first: 1
    where: { poolAddress: $pool, tickIdx_gte: $tickLower }
    orderBy: tickIdx
    orderDirection: asc
  ) {""" + _TICK_FIELDS + """}
  tickUpper: ticks(
    first: 1
    where: { poolAddress: $pool, tickIdx_lte: $tickUpper }
    orderBy: tickIdx
    orderDirection: desc
  ) {""" + _TICK_FIELDS + """}
  poolOld: pool(id: $pool, block: { number: $block }) {""" + _POOL_FIELDS + """}
  tickLowerOld: ticks(
    first: 1
    where: { poolAddress: $pool, tickIdx_gte: $tickLower }
    orderBy: tickIdx
    orderDirection: asc
    block: { number: $block }
  ) {""" + _TICK_FIELDS + """}
  tickUpperOld: ticks(
    first: 1
    where: { poolAddress: $pool, tickIdx_lte: $tickUpper }
    orderBy: tickIdx
    orderDirection: desc
    block: { number: $block }
  ) {""" + _TICK_FIELDS + """}
}
"""

# Latest block the subgraph has indexed
LATEST_INDEXED_BLOCK_QUERY = """
query LatestIndexedBlock {
  _meta {
    block {
      number
    }
  }
}
"""

# First block at or after a timestamp (blocks subgraph)
BLOCK_AT_TIMESTAMP_QUERY = """
query BlockAtTimestamp($timestamp: Int!) {
  blocks(
    first: 1
    where: { timestamp_gte: $timestamp }
    orderBy: number
    orderDirection: asc
  ) {
    number
  }
}
"""
