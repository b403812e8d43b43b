#!/usr/bin/env python3
"""
Standalone scheduler — rescan the market on a fixed interval without the API.
Run: python scheduler.py
"""
import asyncio

from common.logger import get_logger
from config.settings import POLL_INTERVAL_SEC
from scanner.cycle import make_ingestor, run_scan_cycle
from scanner.poller import Poller
from storage.latest import store

logger = get_logger("scheduler")


async def print_update(payload: dict):
    if payload["type"] == "scan_error":
        print(f"⚠️  {payload['message']}")
        return
    top = payload["scores"][:10]
    print(f"\n{payload['timestamp']}  page {payload['page']}  top {len(top)}:")
    for row in top:
        emoji = {"BUY": "🟢", "SELL": "🔴"}.get(row["signal"], "⚪")
        print(f"  {row['symbol']:<10} {row['score']:>3}  {emoji} {row['signal']}")


async def main():
    ingestor = make_ingestor()
    poller = Poller(lambda: run_scan_cycle(ingestor, store, notify=print_update),
                    interval=POLL_INTERVAL_SEC)
    logger.info(f"🚀 Polling every {POLL_INTERVAL_SEC:.0f}s")
    await poller.run_forever()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
