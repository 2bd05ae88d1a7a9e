#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from laakhay.binance import BinanceClient, DepthUpdate


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream Binance depth updates via WebSocket")
    p.add_argument("symbol", nargs="?", default="BTCUSDT")
    p.add_argument("--seconds", type=float, default=30.0)
    return p.parse_args()


def on_depth(update: DepthUpdate) -> None:
    print(
        f"{update.timestamp.isoformat()} {update.symbol} U={update.first_update_id} "
        f"u={update.final_update_id} bids={len(update.bids)} asks={len(update.asks)}"
    )


async def main() -> None:
    args = parse_args()
    print("=" * 60)
    print(f"Streaming depth updates for {args.symbol}")
    print("=" * 60)
    async with BinanceClient() as client:
        session = await client.depth(args.symbol, on_depth)
        try:
            reason = await asyncio.wait_for(session.wait_closed(), timeout=args.seconds)
            print(f"Stream closed: {reason.value}")
        except asyncio.TimeoutError:
            pass


if __name__ == "__main__":
    asyncio.run(main())
