#!/usr/bin/env python3
"""Signed request example. Reads BINANCE_API_KEY / BINANCE_SECRET_KEY."""

from __future__ import annotations

import asyncio
import logging

from laakhay.binance import BinanceClient, ExchangeError


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    async with BinanceClient.from_env() as client:
        server = await client.request("GET", "/api/v3/time")
        print(f"Server time: {server['serverTime']}")
        try:
            account = await client.signed_request("GET", "/api/v3/account", {"recvWindow": 5000})
        except ExchangeError as e:
            print(f"Account request failed ({e.code}): {e}")
            return
        for balance in account.get("balances", []):
            if float(balance["free"]) or float(balance["locked"]):
                print(f"  {balance['asset']:>8} free={balance['free']} locked={balance['locked']}")


if __name__ == "__main__":
    asyncio.run(main())
