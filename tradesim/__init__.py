"""
High-Performance Trade Simulator
================================

Estimates the execution cost of a hypothetical market order against a live
L2 order book, and measures the latency of turning a raw market data tick
into a usable estimate.

Project Structure:
- tradesim/data_ingestion: WebSocket feed, snapshot normalization, reconnection
- tradesim/cost_model: Slippage, market impact, fees and maker/taker split
- tradesim/simulation: Recompute orchestration
- tradesim/monitoring: Pipeline latency history
- tradesim/utils: Configuration and logging
"""

__version__ = "1.0.0"

from tradesim.data_ingestion.order_book import OrderBookSnapshot, MalformedTick, build_snapshot
from tradesim.data_ingestion.tick_pipeline import IngestionPipeline, ConnectionStatus
from tradesim.cost_model.models import FeeTier, SimulationParams, TradingMetricsResult
from tradesim.cost_model.cost_estimator import calculate_trading_metrics
from tradesim.monitoring.latency_tracker import LatencyRecord, LatencyTracker
from tradesim.simulation.controller import SimulationController

__all__ = [
    "OrderBookSnapshot",
    "MalformedTick",
    "build_snapshot",
    "IngestionPipeline",
    "ConnectionStatus",
    "FeeTier",
    "SimulationParams",
    "TradingMetricsResult",
    "calculate_trading_metrics",
    "LatencyRecord",
    "LatencyTracker",
    "SimulationController"
]
