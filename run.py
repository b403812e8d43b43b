"""
QuantAI Signal — one-shot terminal scan
Fetches one page, scores every asset and prints the ranked table.
Run: python run.py [--page N] [--signal BUY] [--sort change] [--source mock]
"""
import argparse
import sys

from common.formatting import format_change, format_price, format_volume
from common.logger import get_logger, new_request_id
from config.settings import MARKET_DATA_SOURCE
from ingest.base import FetchError
from scanner.cycle import INGESTORS, make_ingestor, scan_once
from scanner.views import SignalFilter, SortKey, filter_and_sort, summarize
from scoring.aggregator import WEIGHTS

logger = get_logger("run")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Score one page of the market and print it.")
    parser.add_argument("--page", type=int, default=None, help="provider page (random if omitted)")
    parser.add_argument("--signal", choices=[s.value for s in SignalFilter], default="ALL")
    parser.add_argument("--sort", choices=[s.value for s in SortKey], default="score")
    parser.add_argument("--source", choices=sorted(INGESTORS), default=MARKET_DATA_SOURCE)
    args = parser.parse_args(argv)

    rid = new_request_id()
    try:
        result = scan_once(make_ingestor(args.source), page=args.page, request_id=rid)
    except FetchError as e:
        logger.error(f"❌ {e}")
        print("Scanner temporarily rate-limited. Please wait 30s.")
        return 1

    rows = filter_and_sort(result.assets, args.signal, args.sort)

    print("\n" + "="*96)
    print(f"  ⚡  QuantAI Signal  —  page {result.page}, {len(result.assets)} assets")
    print("="*96)
    hdr = f"{'#':>3} {'Symbol':<10} {'Price':>14} {'24h':>9} {'Volume':>9} {'Score':>6} {'Conf':>5} {'Risk':>5} {'Trend':>7} {'Sentiment':>9}  Signal"
    print(hdr)
    print("-"*96)
    for i, item in enumerate(rows, 1):
        s, a = item.snapshot, item.analysis
        print(
            f"{i:>3} {s.symbol:<10}"
            f" {format_price(s.price):>14}"
            f" {format_change(s.change_24h):>9}"
            f" {format_volume(s.volume):>9}"
            f" {a.score:>6}"
            f" {a.confidence:>4}%"
            f" {a.risk_score:>4}%"
            f" {a.trend.value:>7}"
            f" {a.sentiment.value:>9}"
            f"  {a.signal_emoji} {a.signal.value}"
        )

    summary = summarize(result.assets)
    print("="*96)
    print(f"\n  BUY: {summary['buy']} | SELL: {summary['sell']} | WAIT: {summary['wait']}"
          f" | avg confidence {summary['avg_confidence']}%")
    print("  Weights: " + " | ".join(f"{k}: {v:.0%}" for k, v in WEIGHTS.items()))
    print("  SCORE: 1 (SELL < 40) → 99 (BUY > 80)")
    print("="*96 + "\n")
    return 0

if __name__ == "__main__":
    sys.exit(main())
