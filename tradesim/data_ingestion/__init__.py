"""
Data Ingestion Module for the Trade Simulator
============================================

Market data ingestion with:
- L2 order book WebSocket connectivity
- Normalized, immutable order book snapshots
- Per-tick latency instrumentation
- Fixed-delay reconnection
"""

from .order_book import OrderBookSnapshot, MalformedTick, build_snapshot, parse_market_message
from .tick_pipeline import IngestionPipeline, ConnectionStatus

__all__ = [
    'OrderBookSnapshot',
    'MalformedTick',
    'build_snapshot',
    'parse_market_message',
    'IngestionPipeline',
    'ConnectionStatus'
]
