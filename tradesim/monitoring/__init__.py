"""
Monitoring Module
================

Latency instrumentation for the tick ingestion pipeline.
"""

from .latency_tracker import LatencyRecord, LatencyTracker

__all__ = ['LatencyRecord', 'LatencyTracker']
