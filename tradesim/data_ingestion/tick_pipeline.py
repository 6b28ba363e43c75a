"""
Market Data Ingestion Pipeline
==============================

Streams L2 order book ticks over WebSocket and turns each one into a
normalized snapshot plus a latency sample:
- Explicit connection state machine (disconnected -> connecting -> connected)
- Fixed-delay reconnection for as long as the pipeline is running
- Per-tick timing of the network, processing and render stages
- Scoped lifecycle: `async with IngestionPipeline() as pipeline: ...`
"""

import asyncio
import contextlib
import inspect
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import websockets
from websockets.exceptions import WebSocketException

from .order_book import MalformedTick, OrderBookSnapshot, parse_market_message
from ..monitoring.latency_tracker import LatencyRecord, LatencyTracker
from ..utils.config import config
from ..utils.logger import get_logger


class ConnectionStatus(Enum):
    """Connection state exposed to the caller"""
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


EVENT_TYPES = ('on_snapshot', 'on_latency', 'on_status_change', 'on_error')


class IngestionPipeline:
    """
    Owns the feed connection, the current snapshot and the per-tick timing state.

    Messages are handled strictly one at a time in arrival order. The current
    snapshot is replaced wholesale, so readers only ever see a complete one.
    """

    def __init__(self,
                 url: Optional[str] = None,
                 reconnect_delay: Optional[float] = None,
                 connect: Optional[Callable[..., Any]] = None,
                 tracker: Optional[LatencyTracker] = None,
                 clock: Callable[[], float] = time.perf_counter):

        self.url = url or config.feed.ws_url
        self.reconnect_delay = config.feed.reconnect_delay if reconnect_delay is None else reconnect_delay
        self.logger = get_logger('tick_pipeline')

        # Transport factory, websockets.connect unless a test injects one
        self._connect = connect or websockets.connect
        self._clock = clock

        # Connection state
        self._status = ConnectionStatus.DISCONNECTED
        self._websocket = None
        self._task: Optional[asyncio.Task] = None
        self.is_running = False
        self.last_error: Optional[str] = None

        # Latest published book
        self._snapshot: Optional[OrderBookSnapshot] = None
        self.tracker = tracker or LatencyTracker()

        self.callbacks: Dict[str, List[Callable]] = {event: [] for event in EVENT_TYPES}

        self.stats = {
            'messages_received': 0,
            'messages_processed': 0,
            'messages_ignored': 0,
            'parse_errors': 0,
            'connection_errors': 0,
            'connections': 0,
            'reconnect_attempts': 0,
            'last_message_time': 0.0
        }

        self.logger.info(f"IngestionPipeline initialized for {self.url}")

    # Observer interface

    def add_callback(self, event_type: str, callback: Callable):
        """Add callback for specific events"""
        if event_type not in self.callbacks:
            raise ValueError(f"Unknown event type: {event_type}")
        self.callbacks[event_type].append(callback)
        self.logger.debug(f"Added callback for {event_type}")

    def remove_callback(self, event_type: str, callback: Callable):
        """Remove callback for specific events"""
        if event_type in self.callbacks and callback in self.callbacks[event_type]:
            self.callbacks[event_type].remove(callback)

    def _emit_event(self, event_type: str, data: Any):
        """Emit event to all registered callbacks"""
        for callback in self.callbacks.get(event_type, []):
            try:
                callback(data)
            except Exception as e:
                self.logger.error(f"Callback error for {event_type}: {e}")

    async def _publish_snapshot(self, snapshot: OrderBookSnapshot):
        """Hand the snapshot to consumers; returns once every consumer has applied it"""
        for callback in self.callbacks['on_snapshot']:
            try:
                result = callback(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self.logger.error(f"Callback error for on_snapshot: {e}")

    # Read-only surface

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def snapshot(self) -> Optional[OrderBookSnapshot]:
        return self._snapshot

    @property
    def latest_latency(self) -> Optional[LatencyRecord]:
        return self.tracker.latest

    def _set_status(self, status: ConnectionStatus):
        if status == self._status:
            return
        self.logger.info(f"Connection status: {self._status.value} -> {status.value}")
        self._status = status
        self._emit_event('on_status_change', status)

    # Per-message processing

    async def handle_message(self,
                             raw: Union[str, bytes, dict],
                             tick_start: Optional[float] = None) -> Optional[LatencyRecord]:
        """
        Process one raw message and publish the resulting snapshot

        Args:
            raw: Message exactly as received from the feed
            tick_start: Clock reading taken when the bytes arrived

        Returns:
            The latency sample for this tick, or None if nothing was published
        """
        if tick_start is None:
            tick_start = self._clock()

        processing_start = self._clock()
        try:
            snapshot = parse_market_message(raw)
        except MalformedTick as e:
            # Dropped; current snapshot and latency state are left untouched
            self.stats['parse_errors'] += 1
            self.last_error = f"Failed to parse market data message: {e}"
            self.logger.warning(self.last_error)
            self._emit_event('on_error', self.last_error)
            return None

        if snapshot is None:
            self.stats['messages_ignored'] += 1
            return None
        processing_end = self._clock()

        self._snapshot = snapshot
        render_start = self._clock()
        await self._publish_snapshot(snapshot)
        render_end = self._clock()

        record = LatencyRecord(
            data_processing_latency=(processing_start - tick_start) * 1000.0,
            ui_update_latency=(render_end - render_start) * 1000.0,
            end_to_end_latency=(render_end - tick_start) * 1000.0,
            parse_latency=(processing_end - processing_start) * 1000.0
        )

        self.stats['messages_processed'] += 1
        self.tracker.add_record(record)
        self._emit_event('on_latency', record)
        return record

    # Connection lifecycle

    async def _connect_and_receive(self):
        """Open one connection and consume it until it closes or fails"""
        self._set_status(ConnectionStatus.CONNECTING)
        self.last_error = None
        self.logger.info(f"Connecting to market data feed: {self.url}")

        try:
            async with self._connect(
                self.url,
                ping_interval=config.feed.ping_interval,
                ping_timeout=config.feed.ping_timeout,
                close_timeout=config.feed.close_timeout
            ) as websocket:
                self._websocket = websocket
                self.stats['connections'] += 1
                self._set_status(ConnectionStatus.CONNECTED)
                self.logger.success("WebSocket connected")

                async for message in websocket:
                    tick_start = self._clock()
                    self.stats['messages_received'] += 1
                    self.stats['last_message_time'] = time.time()
                    await self.handle_message(message, tick_start)

            if self.is_running:
                self.logger.warning("WebSocket connection closed by remote")

        except (WebSocketException, OSError, asyncio.TimeoutError) as e:
            self.stats['connection_errors'] += 1
            self.last_error = f"WebSocket connection error: {e}"
            self.logger.error(self.last_error)
            self._emit_event('on_error', self.last_error)

        except Exception as e:
            self.stats['connection_errors'] += 1
            self.last_error = f"Unexpected error in receive loop: {e}"
            self.logger.exception(self.last_error)
            self._emit_event('on_error', self.last_error)

        finally:
            self._websocket = None
            self._set_status(ConnectionStatus.DISCONNECTED)

    async def run(self):
        """Main receive loop with fixed-delay reconnection"""
        self.is_running = True

        try:
            while self.is_running:
                await self._connect_and_receive()

                if not self.is_running:
                    break

                # TODO: confirm unbounded fixed-interval retry is wanted in production before adding a cap
                self.stats['reconnect_attempts'] += 1
                self.logger.info(f"Reconnecting in {self.reconnect_delay:.1f}s "
                                 f"(attempt #{self.stats['reconnect_attempts']})")
                await asyncio.sleep(self.reconnect_delay)
        finally:
            self.is_running = False
            self._set_status(ConnectionStatus.DISCONNECTED)

    def start(self) -> asyncio.Task:
        """Start the receive loop as a task on the running event loop"""
        if self._task and not self._task.done():
            self.logger.warning("Pipeline already running")
            return self._task

        self.is_running = True
        self._task = asyncio.get_running_loop().create_task(self.run())
        self.logger.info("IngestionPipeline started")
        return self._task

    async def stop(self):
        """Close the live connection and cancel any pending reconnect"""
        self.is_running = False

        websocket = self._websocket
        if websocket is not None:
            try:
                await websocket.close()
            except (WebSocketException, OSError) as e:
                self.logger.warning(f"Error closing WebSocket: {e}")

        task = self._task
        self._task = None
        if task is not None:
            if not task.done():
                task.cancel()
                if task is not asyncio.current_task():
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            elif not task.cancelled() and task.exception() is not None:
                self.logger.error(f"Receive loop had already failed: {task.exception()}")

        self._set_status(ConnectionStatus.DISCONNECTED)
        self.logger.info("IngestionPipeline stopped")

    async def __aenter__(self) -> "IngestionPipeline":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    def get_statistics(self) -> Dict:
        """Get pipeline statistics"""
        latest = self.tracker.latest
        return {
            **self.stats,
            'status': self._status.value,
            'is_running': self.is_running,
            'last_error': self.last_error,
            'url': self.url,
            'latest_latency': latest.to_dict() if latest else None
        }
