#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from laakhay.binance import BinanceClient, KlineUpdate, Timeframe


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream Binance klines via WebSocket")
    p.add_argument("symbol", nargs="?", default="BTCUSDT")
    p.add_argument("interval", nargs="?", default="1m", choices=[t.value for t in Timeframe])
    p.add_argument("--seconds", type=float, default=60.0)
    return p.parse_args()


def on_kline(update: KlineUpdate) -> None:
    k = update.kline
    status = "closed" if k.is_closed else "open"
    print(f"{k.timestamp.isoformat()} {k.symbol} {k.interval} O={k.open} H={k.high} L={k.low} C={k.close} V={k.volume} [{status}]")


async def main() -> None:
    args = parse_args()
    async with BinanceClient() as client:
        session = await client.kline(args.symbol, args.interval, on_kline)
        try:
            await asyncio.wait_for(session.wait_closed(), timeout=args.seconds)
        except asyncio.TimeoutError:
            pass


if __name__ == "__main__":
    asyncio.run(main())
