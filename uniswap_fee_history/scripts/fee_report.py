#!/usr/bin/env python
"""
Fee report CLI

Usage:
  python -m uniswap_fee_history.scripts.fee_report daily --position 34054 --days 30
  python -m uniswap_fee_history.scripts.fee_report owner --owner 0x95ae... --pool 0x151c... --days 30
  python -m uniswap_fee_history.scripts.fee_report total --owner 0x95ae... --pool 0x151c...
  python -m uniswap_fee_history.scripts.fee_report estimate --pool 0x151c... --usd 15902 --lower -31980 --upper -28320 --days 7
  python -m uniswap_fee_history.scripts.fee_report validate --position 34054 --days 30
"""
import argparse
import sys
from datetime import datetime, timezone
from typing import Mapping, Optional, Sequence

import pandas as pd

from uniswap_fee_history.config import settings
from uniswap_fee_history.data.graph_client import GraphClient
from uniswap_fee_history.data.reference import PositionFeesReference
from uniswap_fee_history.data.types import TokenFeeAmount
from uniswap_fee_history.exceptions import FeeHistoryError
from uniswap_fee_history.fees import (
    compare_with_reference,
    estimate_24h_usd_fees,
    get_daily_owner_pool_fees,
    get_daily_position_fees,
    get_total_owner_pool_fees,
    reconstruct_position_fees,
    sum_daily_fees,
)
from uniswap_fee_history.logging_config import setup_logging


def daily_fees_frame(daily: Mapping[int, TokenFeeAmount]) -> pd.DataFrame:
    """{date: TokenFeeAmount} -> DataFrame(date, amount0, amount1)"""
    rows = [
        {
            "date": datetime.fromtimestamp(date, tz=timezone.utc).strftime("%Y-%m-%d"),
            "amount0": fees.amount0,
            "amount1": fees.amount1,
        }
        for date, fees in daily.items()
    ]
    return pd.DataFrame(rows, columns=["date", "amount0", "amount1"])


def _print_daily(daily: Mapping[int, TokenFeeAmount]) -> None:
    df = daily_fees_frame(daily)
    if df.empty:
        print("No pool days in window")
        return
    print(df.to_string(index=False))
    total = sum_daily_fees(daily)
    print(f"\nTotal: amount0={total.amount0} amount1={total.amount1}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Uniswap V3 position fee history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--chain", type=str, default=settings.CHAIN, help="chain name")
    parser.add_argument("--log-level", type=str, default=settings.LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    daily = sub.add_parser("daily", help="daily fees of one position")
    daily.add_argument("--position", required=True, help="position NFT id")
    daily.add_argument("--days", type=int, default=settings.DEFAULT_NUM_DAYS)

    owner = sub.add_parser("owner", help="daily fees of an owner's positions in a pool")
    owner.add_argument("--owner", required=True)
    owner.add_argument("--pool", required=True)
    owner.add_argument("--days", type=int, default=settings.DEFAULT_NUM_DAYS)

    total = sub.add_parser("total", help="current uncollected fees of an owner in a pool")
    total.add_argument("--owner", required=True)
    total.add_argument("--pool", required=True)

    estimate = sub.add_parser("estimate", help="24h USD fee estimate for a range")
    estimate.add_argument("--pool", required=True)
    estimate.add_argument("--usd", type=float, required=True, help="position notional in USD")
    estimate.add_argument("--lower", type=int, required=True, help="lower tick")
    estimate.add_argument("--upper", type=int, required=True, help="upper tick")
    estimate.add_argument("--days", type=float, default=7, help="lookback window in days")

    validate = sub.add_parser("validate", help="compare reconstructed fees with collect()")
    validate.add_argument("--position", required=True, help="position NFT id")
    validate.add_argument("--days", type=int, default=settings.DEFAULT_NUM_DAYS)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if getattr(args, "days", 0) > settings.MAX_NUM_DAYS:
        print(f"--days is capped at {settings.MAX_NUM_DAYS}", file=sys.stderr)
        return 2

    try:
        client = GraphClient(chain=args.chain)

        if args.command == "daily":
            _print_daily(get_daily_position_fees(client, args.position, args.days))

        elif args.command == "owner":
            for position_id, daily in get_daily_owner_pool_fees(client, args.owner, args.pool, args.days).items():
                print(f"\n=== Position {position_id} ===")
                _print_daily(daily)

        elif args.command == "total":
            total = get_total_owner_pool_fees(client, args.owner, args.pool)
            print(f"amount0={total.amount0} amount1={total.amount1}")

        elif args.command == "estimate":
            if not settings.BLOCKS_SUBGRAPH_URL:
                print("BLOCKS_SUBGRAPH_URL is not set", file=sys.stderr)
                return 2
            blocks_client = GraphClient(endpoint=settings.BLOCKS_SUBGRAPH_URL)
            usd = estimate_24h_usd_fees(client, blocks_client, args.pool, args.usd,
                                        args.lower, args.upper, args.days)
            if usd is None:
                print("Estimate unavailable")
                return 1
            print(f"Estimated fees: ${usd:,.2f} / day")

        elif args.command == "validate":
            position, checkpoints = client.get_position_with_checkpoints(args.position)
            daily = reconstruct_position_fees(client, position, checkpoints, args.days)
            # collect() only covers fees since the last checkpoint
            last = checkpoints[-1].timestamp
            since_last = {date: fees for date, fees in daily.items() if date >= last}

            block = client.get_latest_indexed_block()
            reference = PositionFeesReference().get_position_fees(args.position, position.owner, block)
            comparison = compare_with_reference(since_last, reference)

            print(f"Reconstructed: amount0={comparison.reconstructed.amount0} "
                  f"amount1={comparison.reconstructed.amount1}")
            print(f"collect() @ {block}: amount0={reference.amount0} amount1={reference.amount1}")
            print(f"Difference: amount0={comparison.difference.amount0} "
                  f"amount1={comparison.difference.amount1}")
            if not comparison.within_tolerance:
                return 1

    except FeeHistoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
