"""
The Graph API client

Fetches the fee history inputs from the Uniswap V3 subgraph: positions and
their checkpoints, daily pool snapshots, sparse daily tick snapshots and
the two-point data used by fee estimation.
Multi-chain (Ethereum, Polygon, Optimism, Arbitrum, Celo).
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from ..config import settings
from ..constants import CHAIN_IDS, SUBGRAPH_IDS
from ..exceptions import GraphClientError
from . import queries
from .types import Pool, PoolDayRecord, Position, PositionCheckpoint, Tick, TickDayRecord

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


@dataclass(frozen=True)
class FeeEstimationData:
    """Pool and nearest initialized boundary ticks at two moments

    Ticks are None when the subgraph has no initialized tick on that side.
    """
    eth_price_usd: float
    pool: Pool
    tick_lower: Optional[Tick]
    tick_upper: Optional[Tick]
    pool_past: Pool
    tick_lower_past: Optional[Tick]
    tick_upper_past: Optional[Tick]

    @property
    def token_prices(self) -> Tuple[float, float]:
        """Current USD prices of (token0, token1)"""
        if self.pool.token0 is None or self.pool.token1 is None:
            raise GraphClientError(f"Pool {self.pool.id} returned without token data")
        return (self.eth_price_usd * self.pool.token0.derived_eth,
                self.eth_price_usd * self.pool.token1.derived_eth)


def tick_id(pool_id: str, tick_idx: int) -> str:
    """Subgraph id of a tick entity"""
    return f"{pool_id.lower()}#{tick_idx}"


def _first_tick(rows: List[dict]) -> Optional[Tick]:
    return Tick.from_dict(rows[0]) if rows else None


def _checkpoints(snapshots: List[dict]) -> List[PositionCheckpoint]:
    # paged by id, so restore chronological order
    ordered = sorted(snapshots, key=lambda s: (int(s["timestamp"]), int(s.get("blockNumber", 0))))
    return [PositionCheckpoint.from_dict(s) for s in ordered]


class GraphClient:
    """The Graph API client

    Usage:
        client = GraphClient(api_key="your_api_key", chain="ethereum")
        position, checkpoints = client.get_position_with_checkpoints("34054")
        days = client.get_pool_day_records(position.pool_id, since)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        chain: Optional[str] = None,
        timeout: Optional[int] = None,
        endpoint: Optional[str] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            api_key: The Graph API key. Falls back to GRAPH_API_KEY
            chain: chain name (ethereum, polygon, optimism, arbitrum, celo)
            timeout: request timeout (seconds)
            endpoint: full GraphQL URL, bypasses the gateway URL
            max_retries: attempts per query on transport errors
            session: requests session to reuse
        """
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else settings.MAX_RETRIES
        self._session = session or requests.Session()

        endpoint = endpoint or settings.SUBGRAPH_URL
        if endpoint:
            self._endpoint = endpoint
            return

        api_key = api_key or settings.GRAPH_API_KEY
        if not api_key:
            raise GraphClientError(
                "An API key is required. Set the GRAPH_API_KEY environment variable "
                "or pass api_key. Keys are issued at https://thegraph.com/studio/"
            )

        chain_lower = (chain or settings.CHAIN).lower()
        if chain_lower not in CHAIN_IDS:
            raise GraphClientError(
                f"Unsupported chain: {chain_lower}. "
                f"Supported chains: {', '.join(CHAIN_IDS.keys())}"
            )
        subgraph_id = SUBGRAPH_IDS[CHAIN_IDS[chain_lower]]
        self._endpoint = f"https://gateway.thegraph.com/api/{api_key}/subgraphs/id/{subgraph_id}"

    @property
    def endpoint(self) -> str:
        """GraphQL endpoint URL"""
        return self._endpoint

    def _execute_query(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Run a GraphQL query

        Transport failures are retried with linear backoff; GraphQL errors
        are returned by the server deterministically and raised at once.

        Raises:
            GraphClientError: API error or retries exhausted
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        last_error: Optional[GraphClientError] = None
        for attempt in range(self.max_retries):
            try:
                response = self._session.post(
                    self.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
            except requests.exceptions.Timeout:
                last_error = GraphClientError(f"Request timed out ({self.timeout}s)")
            except requests.exceptions.RequestException as e:
                last_error = GraphClientError(f"Network error: {e}")
            except ValueError as e:
                last_error = GraphClientError(f"Invalid JSON response: {e}")
            else:
                if "errors" in data:
                    error_messages = [e.get("message", str(e)) for e in data["errors"]]
                    raise GraphClientError(f"GraphQL error: {'; '.join(error_messages)}")
                if "data" not in data:
                    raise GraphClientError("Response has no 'data' field")
                return data["data"]

            logger.warning("Query attempt %d/%d failed: %s", attempt + 1, self.max_retries, last_error)
            if attempt < self.max_retries - 1:
                time.sleep(1.0 * (attempt + 1))

        raise last_error or GraphClientError("Query was not attempted")

    def get_pool(self, pool_id: str) -> Pool:
        """Live pool state

        Raises:
            GraphClientError: pool not found
        """
        data = self._execute_query(queries.POOL_QUERY, {"id": pool_id.lower()})
        if not data.get("pool"):
            raise GraphClientError(f"Pool not found: {pool_id}")
        return Pool.from_dict(data["pool"])

    # -- positions ---------------------------------------------------------

    def _paginate_by_id(
        self,
        query: str,
        key: str,
        variables: Dict[str, Any]
    ) -> List[dict]:
        """All rows of an entity list, paged by `id_gt` cursor"""
        rows: List[dict] = []
        last_id = ""
        while True:
            data = self._execute_query(query, dict(variables, lastId=last_id))
            batch = data.get(key, [])
            rows.extend(batch)

            if len(batch) < PAGE_SIZE:
                break
            last_id = batch[-1]["id"]

        return rows

    def get_position_with_checkpoints(
        self,
        position_id: str
    ) -> Tuple[Position, List[PositionCheckpoint]]:
        """A position with live boundary ticks and its checkpoints (ascending)

        Raises:
            GraphClientError: position not found
        """
        data = self._execute_query(queries.POSITION_QUERY, {"id": str(position_id)})
        if not data.get("position"):
            raise GraphClientError(f"Position not found: {position_id}")

        position = Position.from_dict(data["position"])
        snapshots = self._paginate_by_id(
            queries.POSITION_SNAPSHOTS_QUERY, "positionSnapshots", {"position": str(position_id)}
        )
        return position, _checkpoints(snapshots)

    def get_owner_pool_positions(
        self,
        owner: str,
        pool_id: str
    ) -> List[Tuple[Position, List[PositionCheckpoint]]]:
        """All positions of an owner in a pool, each with its checkpoints"""
        variables = {"owner": owner.lower(), "pool": pool_id.lower()}
        positions = self._paginate_by_id(queries.OWNER_POOL_POSITIONS_QUERY, "positions", variables)
        snapshots = self._paginate_by_id(queries.OWNER_POOL_SNAPSHOTS_QUERY, "positionSnapshots", variables)

        snapshots_by_position: Dict[str, List[dict]] = {}
        for snap in snapshots:
            snapshots_by_position.setdefault(snap["position"]["id"], []).append(snap)

        result = []
        for raw in positions:
            position = Position.from_dict(raw)
            result.append((position, _checkpoints(snapshots_by_position.get(position.id, []))))
        return result

    # -- daily snapshots -----------------------------------------------------

    def get_pool_day_records(self, pool_id: str, min_timestamp: int) -> List[PoolDayRecord]:
        """Daily pool snapshots with date > min_timestamp (ascending, paginated)"""
        records: List[PoolDayRecord] = []
        cursor = min_timestamp
        while True:
            data = self._execute_query(
                queries.POOL_DAY_DATAS_QUERY,
                {"pool": pool_id.lower(), "fromdate": cursor}
            )
            batch = data.get("poolDayDatas", [])
            for raw in batch:
                if raw.get("tick") is None:
                    logger.warning("Pool %s has no tick on %s, skipping day", pool_id, raw.get("date"))
                    continue
                records.append(PoolDayRecord.from_dict(raw))

            if len(batch) < PAGE_SIZE:
                break
            cursor = int(batch[-1]["date"])

        return records

    def get_tick_history(
        self,
        pool_id: str,
        tick_idx: int,
        min_timestamp: int
    ) -> List[TickDayRecord]:
        """Daily snapshots of one tick after min_timestamp, plus the latest one before it

        The extra "first smaller" record lets the resolver recover the
        tick's state on days before its first in-window change.
        """
        tid = tick_id(pool_id, tick_idx)

        data = self._execute_query(
            queries.TICK_DAY_DATA_FIRST_SMALLER_QUERY,
            {"tick": tid, "date": min_timestamp}
        )
        records = [TickDayRecord.from_dict(t) for t in data.get("tickDayDatas", [])]

        cursor = min_timestamp
        while True:
            data = self._execute_query(
                queries.TICK_DAY_DATAS_QUERY,
                {"tick": tid, "fromdate": cursor}
            )
            batch = data.get("tickDayDatas", [])
            records.extend(TickDayRecord.from_dict(t) for t in batch)

            if len(batch) < PAGE_SIZE:
                break
            cursor = int(batch[-1]["date"])

        return records

    def get_tick_histories(
        self,
        pool_id: str,
        tick_idxs: Iterable[int],
        min_timestamp: int
    ) -> Dict[int, List[TickDayRecord]]:
        """{tick index: tick history} for several ticks of a pool"""
        return {
            idx: self.get_tick_history(pool_id, idx, min_timestamp)
            for idx in sorted(set(tick_idxs))
        }

    # -- estimation ---------------------------------------------------------

    def get_fee_estimation_data(
        self,
        pool_id: str,
        tick_lower: int,
        tick_upper: int,
        block: int
    ) -> FeeEstimationData:
        """Pool and boundary ticks now and at `block`

        Raises:
            GraphClientError: pool not found at either moment
        """
        data = self._execute_query(
            queries.FEE_ESTIMATE_QUERY,
            {
                "pool": pool_id.lower(),
                "tickLower": str(tick_lower),
                "tickUpper": str(tick_upper),
                "block": block,
            }
        )
        if not data.get("pool") or not data.get("poolOld"):
            raise GraphClientError(f"Pool not found: {pool_id} (block {block})")

        return FeeEstimationData(
            eth_price_usd=float(data["bundle"]["ethPriceUSD"]),
            pool=Pool.from_dict(data["pool"]),
            tick_lower=_first_tick(data.get("tickLower", [])),
            tick_upper=_first_tick(data.get("tickUpper", [])),
            pool_past=Pool.from_dict(data["poolOld"]),
            tick_lower_past=_first_tick(data.get("tickLowerOld", [])),
            tick_upper_past=_first_tick(data.get("tickUpperOld", [])),
        )

    # -- blocks --------------------------------------------------------------

    def get_latest_indexed_block(self) -> int:
        """Latest block indexed by the subgraph"""
        data = self._execute_query(queries.LATEST_INDEXED_BLOCK_QUERY)
        return int(data["_meta"]["block"]["number"])

    def get_block_at_timestamp(self, timestamp: int) -> int:
        """First block at or after a timestamp (blocks subgraph)"""
        data = self._execute_query(queries.BLOCK_AT_TIMESTAMP_QUERY, {"timestamp": int(timestamp)})
        blocks = data.get("blocks", [])
        if not blocks:
            raise GraphClientError(f"No block at or after timestamp {timestamp}")
        return int(blocks[0]["number"])
