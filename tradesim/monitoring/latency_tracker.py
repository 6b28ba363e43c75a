"""
Pipeline Latency Tracker
========================

Rolling history of per-tick latency samples with summary statistics
for the network -> processing -> render pipeline.
"""

import time
from collections import deque
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

import numpy as np

from ..utils.config import config
from ..utils.logger import get_logger


STAGES = ('data_processing_latency', 'parse_latency', 'ui_update_latency', 'end_to_end_latency')


@dataclass(frozen=True)
class LatencyRecord:
    """Latency of one tick through the pipeline, all durations in milliseconds"""
    data_processing_latency: float
    ui_update_latency: float
    end_to_end_latency: float
    parse_latency: float = 0.0
    timestamp: float = field(default_factory=lambda: time.time() * 1000.0)

    def to_dict(self) -> Dict:
        return asdict(self)


class LatencyTracker:
    """
    Tracks pipeline latency with:
    - Bounded rolling history
    - Per-stage mean / p50 / p95 / max
    - Threshold warnings on slow ticks
    """

    def __init__(self,
                 history_size: Optional[int] = None,
                 threshold_ms: Optional[float] = None):
        self.history_size = history_size or config.monitoring.latency_history_size
        self.threshold_ms = threshold_ms if threshold_ms is not None else config.monitoring.latency_threshold_ms
        self.logger = get_logger('latency_tracker')

        self.records: deque = deque(maxlen=self.history_size)
        self.total_records = 0
        self.slow_ticks = 0

    @property
    def latest(self) -> Optional[LatencyRecord]:
        return self.records[-1] if self.records else None

    def add_record(self, record: LatencyRecord):
        """Append a completed latency sample"""
        self.records.append(record)
        self.total_records += 1

        if record.end_to_end_latency > self.threshold_ms:
            self.slow_ticks += 1
            self.logger.warning(f"Slow tick: end-to-end {record.end_to_end_latency:.2f}ms "
                                f"> {self.threshold_ms:.2f}ms")

    def history(self) -> List[LatencyRecord]:
        return list(self.records)

    def summary(self) -> Dict:
        """Get per-stage statistics over the rolling window"""
        result = {
            'count': len(self.records),
            'total_records': self.total_records,
            'slow_ticks': self.slow_ticks
        }

        for stage in STAGES:
            if not self.records:
                result[stage] = {'mean': 0.0, 'p50': 0.0, 'p95': 0.0, 'max': 0.0}
                continue

            values = np.array([getattr(r, stage) for r in self.records], dtype=float)
            result[stage] = {
                'mean': float(np.mean(values)),
                'p50': float(np.percentile(values, 50)),
                'p95': float(np.percentile(values, 95)),
                'max': float(np.max(values))
            }

        return result

    def reset(self):
        """Reset all latency history"""
        self.logger.info("Resetting latency history")
        self.records.clear()
        self.total_records = 0
        self.slow_ticks = 0
