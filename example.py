"""
Trade Simulator Example
=======================

Demonstration of the complete cost estimation pipeline.
This example shows how to:
1. Estimate costs against a static order book
2. Stream a live L2 feed into the simulation controller
3. Inspect pipeline latency
"""

import argparse
import asyncio

from tradesim.cost_model import SimulationParams, calculate_trading_metrics
from tradesim.data_ingestion import IngestionPipeline, build_snapshot
from tradesim.simulation import SimulationController
from tradesim.utils.config import config
from tradesim.utils.logger import (
    log_config,
    setup_development_logging,
    setup_production_logging,
    setup_quiet_logging,
)


def print_result(result):
    """Print one cost estimate"""
    usd = result.cost_in_quote()
    print(f"\n📊 {result.base_asset}/{result.quote_asset} • ${result.quantity:,.2f}")
    print("-" * 40)
    print(f"Slippage:        {result.slippage:.4%}  (${usd['slippage']:.4f})")
    print(f"Fees:            {result.fees:.4%}  (${usd['fees']:.4f})")
    print(f"Market Impact:   {result.market_impact:.4%}  (${usd['market_impact']:.4f})")
    print(f"Net Cost:        {result.net_cost:.4%}  (${usd['net_cost']:.4f})")
    print(f"Maker / Taker:   {result.maker_proportion:.1%} / {result.taker_proportion:.1%}")


def run_static_estimate():
    """Estimate costs against a fixed book"""
    print("🔬 Static Order Book Estimate...")

    snapshot = build_snapshot(
        bids=[["19500", "2.5"], ["19450", "3.2"]],
        asks=[["19550", "1.9"], ["19600", "2.8"]]
    )

    for quantity in (100.0, 50_000.0, 500_000.0):
        params = SimulationParams(quantity=quantity, volatility=50, fee_tier="tier1")
        print_result(calculate_trading_metrics(snapshot, params))


async def run_live(duration: float, params: SimulationParams):
    """Stream the live feed and recompute on every tick"""
    print(f"🚀 Streaming {config.feed.exchange} {config.feed.symbol} for {duration:.0f}s...")

    controller = SimulationController(params=params, auto_run=True)
    controller.add_callback('on_result', print_result)

    async with IngestionPipeline() as pipeline:
        controller.attach(pipeline)
        await asyncio.sleep(duration)
        stats = pipeline.get_statistics()

    summary = pipeline.tracker.summary()
    print("\n⏱️  LATENCY SUMMARY (ms)")
    print("-" * 40)
    for stage in ('data_processing_latency', 'parse_latency', 'ui_update_latency', 'end_to_end_latency'):
        s = summary[stage]
        print(f"{stage:<26} mean={s['mean']:.3f} p95={s['p95']:.3f} max={s['max']:.3f}")

    print(f"\nMessages processed: {stats['messages_processed']}, "
          f"parse errors: {stats['parse_errors']}, reconnects: {stats['reconnect_attempts']}")


def main():
    parser = argparse.ArgumentParser(description="Trade simulator example")
    parser.add_argument("--live", action="store_true", help="Stream the live feed")
    parser.add_argument("--duration", type=float, default=30.0, help="Live streaming duration in seconds")
    parser.add_argument("--quantity", type=float, default=config.simulation.default_quantity)
    parser.add_argument("--volatility", type=float, default=config.simulation.default_volatility)
    parser.add_argument("--fee-tier", default=config.simulation.default_fee_tier)
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", action="store_true", help="Warnings only, per-tick logging muted")
    parser.add_argument("--log-file", help="Also write a rotating debug log to this path")
    args = parser.parse_args()

    if args.verbose:
        setup_development_logging()
    elif args.quiet:
        setup_quiet_logging()
    else:
        setup_production_logging()

    if args.log_file:
        log_config.add_file_logging(args.log_file)

    if args.live:
        params = SimulationParams(quantity=args.quantity, volatility=args.volatility, fee_tier=args.fee_tier)
        asyncio.run(run_live(args.duration, params))
    else:
        run_static_estimate()


if __name__ == "__main__":
    main()
