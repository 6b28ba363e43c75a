"""
Order Book Snapshot for Cost Simulation
=======================================

Normalized, immutable view of the bid/ask ladder at one point in time.
Every inbound tick produces a brand new snapshot; nothing is patched in place.

Normalization rules:
- prices and quantities arrive as text (or numbers) and are parsed to float
- bids are sorted descending, asks ascending, one level per price
- duplicate prices inside one message: the last occurrence wins
- anything that cannot be parsed raises MalformedTick and no snapshot is built
"""

import json
import math
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from loguru import logger


PriceLevel = Tuple[float, float]
RawLevel = Sequence[Union[str, float, int]]

# Message types that carry a full ladder
BOOK_MESSAGE_TYPES = ("snapshot", "update")


class MalformedTick(ValueError):
    """Raised when an inbound message cannot be turned into a snapshot"""


@dataclass(frozen=True)
class OrderBookSnapshot:
    """Complete order book snapshot at a point in time"""
    bids: Tuple[PriceLevel, ...]
    asks: Tuple[PriceLevel, ...]
    timestamp: float  # epoch milliseconds

    @classmethod
    def empty(cls, timestamp: Optional[float] = None) -> "OrderBookSnapshot":
        """Snapshot with no liquidity on either side"""
        return cls(bids=(), asks=(), timestamp=_now_ms() if timestamp is None else timestamp)

    def best_bid(self) -> Optional[float]:
        return self.bids[0][0] if self.bids else None

    def best_ask(self) -> Optional[float]:
        return self.asks[0][0] if self.asks else None

    def midprice(self) -> Optional[float]:
        """Calculate midprice from best bid/ask"""
        if not self.bids or not self.asks:
            return None
        return (self.bids[0][0] + self.asks[0][0]) / 2.0

    def spread(self) -> Optional[float]:
        """Calculate bid-ask spread"""
        if not self.bids or not self.asks:
            return None
        return self.asks[0][0] - self.bids[0][0]

    def spread_bps(self) -> Optional[float]:
        """Calculate spread in basis points"""
        mid = self.midprice()
        spread = self.spread()
        if mid is None or spread is None or mid == 0:
            return None
        return (spread / mid) * 10000

    def is_empty(self) -> bool:
        return not self.bids and not self.asks

    def get_depth(self, levels: int = 5) -> Dict:
        """Get order book depth for specified number of levels"""
        return {
            'bids': [[price, qty] for price, qty in self.bids[:levels]],
            'asks': [[price, qty] for price, qty in self.asks[:levels]],
            'timestamp': self.timestamp
        }


def _now_ms() -> float:
    return time.time() * 1000.0


def _parse_number(value, field: str) -> float:
    # bool is an int subclass but never a valid price or quantity
    if isinstance(value, bool):
        raise MalformedTick(f"{field} is not numeric: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise MalformedTick(f"{field} is not numeric: {value!r}") from None
    if not math.isfinite(number):
        raise MalformedTick(f"{field} is not finite: {value!r}")
    return number


def _normalize_side(raw_levels: Iterable[RawLevel], side: str, descending: bool) -> Tuple[PriceLevel, ...]:
    """Parse one side of the ladder into sorted, de-duplicated levels"""
    if raw_levels is None:
        return ()
    if isinstance(raw_levels, (str, bytes, dict)):
        raise MalformedTick(f"{side} must be a list of [price, quantity] pairs")

    levels: Dict[float, float] = {}  # price -> quantity
    try:
        iterator = iter(raw_levels)
    except TypeError:
        raise MalformedTick(f"{side} must be a list of [price, quantity] pairs") from None

    for raw in iterator:
        if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence) or len(raw) < 2:
            raise MalformedTick(f"{side} level is not a [price, quantity] pair: {raw!r}")

        price = _parse_number(raw[0], f"{side} price")
        qty = _parse_number(raw[1], f"{side} quantity")
        if price <= 0:
            raise MalformedTick(f"{side} price must be positive: {raw[0]!r}")
        if qty < 0:
            raise MalformedTick(f"{side} quantity must be non-negative: {raw[1]!r}")

        if price in levels:
            logger.debug(f"Duplicate {side} level at {price}, keeping last quantity {qty}")
        levels[price] = qty

    return tuple(sorted(levels.items(), key=lambda x: x[0], reverse=descending))


def build_snapshot(bids: Iterable[RawLevel],
                   asks: Iterable[RawLevel],
                   timestamp: Optional[float] = None) -> OrderBookSnapshot:
    """
    Build a normalized snapshot from raw price/quantity pairs

    Args:
        bids: [[price, qty], ...] in any order, strings or numbers
        asks: [[price, qty], ...] in any order, strings or numbers
        timestamp: source timestamp in epoch ms, local capture time when omitted

    Raises:
        MalformedTick: if any level fails to parse
    """
    normalized_bids = _normalize_side(bids, "bid", descending=True)
    normalized_asks = _normalize_side(asks, "ask", descending=False)

    if timestamp is None or timestamp == 0:
        ts = _now_ms()
    else:
        ts = _parse_number(timestamp, "timestamp")

    return OrderBookSnapshot(bids=normalized_bids, asks=normalized_asks, timestamp=ts)


def parse_market_message(raw: Union[str, bytes, dict]) -> Optional[OrderBookSnapshot]:
    """
    Parse an inbound market-data message

    Format: {'type': 'snapshot'|'update', 'data': {'bids': [[p, q]], 'asks': [[p, q]], 'timestamp': ms}}

    Returns:
        The normalized snapshot, or None for message types that carry no book

    Raises:
        MalformedTick: if the message is not valid JSON or the ladder cannot be parsed
    """
    if isinstance(raw, dict):
        message = raw
    else:
        try:
            message = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError) as e:
            raise MalformedTick(f"Invalid JSON: {e}") from None

    if not isinstance(message, dict):
        raise MalformedTick(f"Message is not an object: {type(message).__name__}")

    message_type = message.get('type')
    if message_type not in BOOK_MESSAGE_TYPES:
        logger.debug(f"Ignoring message type: {message_type!r}")
        return None

    data = message.get('data')
    if not isinstance(data, dict):
        raise MalformedTick("Message has no 'data' object")
    if 'bids' not in data or 'asks' not in data:
        raise MalformedTick("Message data is missing 'bids' or 'asks'")

    return build_snapshot(data['bids'], data['asks'], data.get('timestamp'))
