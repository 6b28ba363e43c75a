"""
Simulation Controller
====================

Holds the latest order book snapshot and the latest simulation parameters,
and recomputes the cost estimate on demand or, with auto-run enabled,
whenever either of them changes.
"""

import threading
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from ..cost_model.cost_estimator import calculate_trading_metrics
from ..cost_model.models import SimulationParams, TradingMetricsResult
from ..data_ingestion.order_book import OrderBookSnapshot
from ..utils.config import config
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..data_ingestion.tick_pipeline import IngestionPipeline


class SimulationController:
    """
    Coordinates snapshot updates, parameter edits and recomputation.

    The snapshot has one writer (the ingestion pipeline) and the parameters
    one writer (the caller). Both are immutable and replaced wholesale under
    a lock, so a recompute always sees a consistent pair.
    """

    def __init__(self,
                 params: Optional[SimulationParams] = None,
                 auto_run: Optional[bool] = None,
                 base_asset: Optional[str] = None,
                 quote_asset: Optional[str] = None):

        self.logger = get_logger('simulation_controller')
        self.base_asset = base_asset or config.simulation.base_asset
        self.quote_asset = quote_asset or config.simulation.quote_asset

        self._lock = threading.RLock()
        self._snapshot = OrderBookSnapshot.empty()
        self._params = params or SimulationParams()
        self._auto_run = config.simulation.auto_run if auto_run is None else auto_run
        self._latest_result: Optional[TradingMetricsResult] = None

        self.callbacks: Dict[str, List[Callable]] = {'on_result': []}
        self.recompute_count = 0

        self.logger.info(f"SimulationController initialized for {self.base_asset}/{self.quote_asset}, "
                         f"auto_run={self._auto_run}")

    def add_callback(self, event_type: str, callback: Callable):
        """Add callback for specific events"""
        if event_type not in self.callbacks:
            raise ValueError(f"Unknown event type: {event_type}")
        self.callbacks[event_type].append(callback)

    def _emit_event(self, event_type: str, data):
        for callback in self.callbacks.get(event_type, []):
            try:
                callback(data)
            except Exception as e:
                self.logger.error(f"Callback error for {event_type}: {e}")

    @property
    def snapshot(self) -> OrderBookSnapshot:
        return self._snapshot

    @property
    def params(self) -> SimulationParams:
        return self._params

    @property
    def auto_run(self) -> bool:
        return self._auto_run

    @property
    def latest_result(self) -> Optional[TradingMetricsResult]:
        return self._latest_result

    def set_auto_run(self, enabled: bool) -> Optional[TradingMetricsResult]:
        """Toggle auto-run; switching it on recomputes immediately"""
        with self._lock:
            self._auto_run = bool(enabled)
        self.logger.info(f"Auto-run {'enabled' if enabled else 'disabled'}")
        return self.recompute() if enabled else None

    def update_snapshot(self, snapshot: OrderBookSnapshot) -> Optional[TradingMetricsResult]:
        """Replace the current snapshot; recomputes when auto-run is on"""
        with self._lock:
            self._snapshot = snapshot
            auto_run = self._auto_run
        return self.recompute() if auto_run else None

    def update_params(self, params: SimulationParams) -> Optional[TradingMetricsResult]:
        """Replace the current parameters; recomputes when auto-run is on"""
        with self._lock:
            self._params = params
            auto_run = self._auto_run
        self.logger.debug(f"Parameters updated: {params}")
        return self.recompute() if auto_run else None

    def recompute(self) -> TradingMetricsResult:
        """Estimate costs for the current snapshot and parameters"""
        with self._lock:
            snapshot = self._snapshot
            params = self._params

        result = calculate_trading_metrics(snapshot, params, self.base_asset, self.quote_asset)

        with self._lock:
            self._latest_result = result
            self.recompute_count += 1

        self.logger.debug(f"Recomputed: net_cost={result.net_cost:.6f} slippage={result.slippage:.6f} "
                          f"impact={result.market_impact:.6f} fees={result.fees:.4f}")
        self._emit_event('on_result', result)
        return result

    def attach(self, pipeline: "IngestionPipeline"):
        """Subscribe to a pipeline's snapshots"""
        pipeline.add_callback('on_snapshot', self.update_snapshot)
        self.logger.info("Attached to ingestion pipeline")
