"""
Execution Cost Estimator
=======================

Pure functions estimating the cost of a hypothetical market order against
an order book snapshot:
- Slippage by walking the price ladder
- Market impact via a simplified Almgren-Chriss style heuristic
- Flat fee lookup by tier
- Maker/taker split via a logistic heuristic

Every function is deterministic and side-effect free. Empty books are a
normal input and yield documented fallback values, never an exception.
"""

import math
from typing import Literal, Optional, Tuple, Union

from loguru import logger

from .models import FeeTier, SimulationParams, TradingMetricsResult
from ..data_ingestion.order_book import OrderBookSnapshot
from ..utils.config import config


Side = Literal["buy", "sell"]

# Heuristic policy constants, not calibrated
LIQUIDITY_PENALTY = 0.05          # price penalty on volume beyond the visible book
DEPTH_BAND = 0.01                 # depth counted within 1% of mid
VOLATILITY_IMPACT_SCALE = 1000.0  # 0-100 volatility -> 0-0.1
MIN_MARKET_IMPACT = 0.0001        # 1 bp
MAX_MARKET_IMPACT = 0.05          # 5%
MAKER_INTERCEPT = 1.5
MAKER_VOLATILITY_WEIGHT = 2.0


def _reference_midprice(snapshot: OrderBookSnapshot) -> Optional[float]:
    """Mid when both sides exist, otherwise the best price on the populated side"""
    mid = snapshot.midprice()
    if mid is not None:
        return mid
    if snapshot.bids:
        return snapshot.bids[0][0]
    if snapshot.asks:
        return snapshot.asks[0][0]
    return None


def _normalized_spread(snapshot: OrderBookSnapshot) -> Tuple[float, float]:
    """(midprice, spread / midprice) for a two-sided book; crossed books floor at zero"""
    mid = snapshot.midprice()
    spread = snapshot.spread()
    return mid, max(spread / mid, 0.0)


def calculate_slippage(snapshot: OrderBookSnapshot, quantity: float, side: Side) -> float:
    """
    Slippage of a market order walking one side of the book

    Args:
        snapshot: Order book to execute against
        quantity: Order notional in quote currency
        side: 'buy' consumes asks, 'sell' consumes bids

    Returns:
        Non-negative fraction of mid lost to execution
    """
    if side not in ("buy", "sell"):
        raise ValueError(f"side must be 'buy' or 'sell', got {side!r}")

    levels = snapshot.asks if side == "buy" else snapshot.bids
    if not levels:
        return 0.0

    mid = _reference_midprice(snapshot)
    base_quantity = quantity / mid
    if base_quantity <= 0:
        return 0.0

    remaining = base_quantity
    total_cost = 0.0

    for price, available in levels:
        executed = min(remaining, available)
        total_cost += executed * price
        remaining -= executed
        if remaining <= 0:
            break

    if remaining > 0:
        # Book exhausted: fill the rest beyond the last visible level, adverse to the order.
        # Sells use x0.95 rather than the earlier x1.05-on-both-sides policy.
        last_price = levels[-1][0]
        penalty = 1.0 + LIQUIDITY_PENALTY if side == "buy" else 1.0 - LIQUIDITY_PENALTY
        total_cost += remaining * last_price * penalty
        logger.debug(f"Liquidity exhausted on {side} side, {remaining:.6f} filled at penalty price")

    avg_price = total_cost / base_quantity
    if side == "buy":
        slippage = (avg_price - mid) / mid
    else:
        slippage = (mid - avg_price) / mid

    return max(slippage, 0.0)


def calculate_market_impact(snapshot: OrderBookSnapshot, quantity: float, volatility: float) -> float:
    """
    Temporary market impact, simplified Almgren-Chriss form

    impact = sqrt(spread/mid * volatility/1000) * q^1.5, where q is the order's
    base quantity over the depth within 1% of mid. Clamped to [1bp, 5%];
    0 when either side of the book is empty.
    """
    if not snapshot.bids or not snapshot.asks:
        return 0.0

    mid, normalized_spread = _normalized_spread(snapshot)

    threshold = mid * DEPTH_BAND
    bid_depth = sum(qty for price, qty in snapshot.bids if mid - price <= threshold)
    ask_depth = sum(qty for price, qty in snapshot.asks if price - mid <= threshold)
    total_depth = bid_depth + ask_depth

    base_quantity = max(quantity, 0.0) / mid
    normalized_quantity = base_quantity / total_depth if total_depth > 0 else 0.0

    volatility_factor = max(volatility, 0.0) / VOLATILITY_IMPACT_SCALE
    impact_factor = math.sqrt(normalized_spread * volatility_factor)
    market_impact = impact_factor * normalized_quantity * math.sqrt(normalized_quantity)

    return min(max(market_impact, MIN_MARKET_IMPACT), MAX_MARKET_IMPACT)


def get_fee_rate(fee_tier: Union[FeeTier, str, None]) -> float:
    """Flat fee rate for a tier; unknown tiers pay the highest fee"""
    return FeeTier.from_value(fee_tier).rate


def calculate_maker_taker_proportion(snapshot: OrderBookSnapshot, volatility: float) -> Tuple[float, float]:
    """
    Expected maker/taker split of the order

    Higher volatility pushes toward taking, wider spreads toward making.

    Returns:
        (maker_proportion, taker_proportion), 0.5/0.5 when either side is empty
    """
    if not snapshot.bids or not snapshot.asks:
        return 0.5, 0.5

    _, normalized_spread = _normalized_spread(snapshot)

    volatility_factor = volatility / 100.0
    spread_factor = min(normalized_spread * 100.0, 1.0)

    z = MAKER_INTERCEPT - MAKER_VOLATILITY_WEIGHT * volatility_factor + spread_factor
    maker = 1.0 / (1.0 + math.exp(-z))

    return maker, 1.0 - maker


def calculate_trading_metrics(snapshot: OrderBookSnapshot,
                              params: SimulationParams,
                              base_asset: Optional[str] = None,
                              quote_asset: Optional[str] = None) -> TradingMetricsResult:
    """
    Full cost estimate for one order

    Slippage is the mean of the buy and sell walks (a round trip); fees are the
    flat tier rate. net_cost = slippage + fees + market_impact.
    """
    buy_slippage = calculate_slippage(snapshot, params.quantity, "buy")
    sell_slippage = calculate_slippage(snapshot, params.quantity, "sell")
    slippage = (buy_slippage + sell_slippage) / 2.0

    fees = get_fee_rate(params.fee_tier)
    market_impact = calculate_market_impact(snapshot, params.quantity, params.volatility)
    maker, taker = calculate_maker_taker_proportion(snapshot, params.volatility)

    return TradingMetricsResult(
        slippage=slippage,
        fees=fees,
        market_impact=market_impact,
        net_cost=slippage + fees + market_impact,
        maker_proportion=maker,
        taker_proportion=taker,
        base_asset=base_asset or config.simulation.base_asset,
        quote_asset=quote_asset or config.simulation.quote_asset,
        quantity=params.quantity,
        snapshot_timestamp=snapshot.timestamp
    )
