"""
Cost Model Module for the Trade Simulator
========================================

Slippage, market impact, fee and maker/taker estimates for a hypothetical
market order against an order book snapshot.
"""

from .models import FeeTier, FEE_RATES, SimulationParams, TradingMetricsResult
from .cost_estimator import (
    calculate_slippage,
    calculate_market_impact,
    calculate_maker_taker_proportion,
    calculate_trading_metrics,
    get_fee_rate
)

__all__ = [
    'FeeTier',
    'FEE_RATES',
    'SimulationParams',
    'TradingMetricsResult',
    'calculate_slippage',
    'calculate_market_impact',
    'calculate_maker_taker_proportion',
    'calculate_trading_metrics',
    'get_fee_rate'
]
