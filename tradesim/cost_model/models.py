"""
Cost Model Data Types
=====================

Simulation inputs (order size, volatility, fee tier) and the cost estimate
handed to the presentation layer.
"""

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Optional, Union

from loguru import logger

from ..utils.config import config


class FeeTier(Enum):
    """Exchange fee tiers, highest fee first"""
    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"
    TIER4 = "tier4"
    TIER5 = "tier5"

    @property
    def rate(self) -> float:
        return FEE_RATES[self]

    @classmethod
    def from_value(cls, value: Union["FeeTier", str, None]) -> "FeeTier":
        """Resolve a tier, falling back to the highest-fee tier when unrecognized"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.TIER1


FEE_RATES = {
    FeeTier.TIER1: 0.0010,  # 0.10%
    FeeTier.TIER2: 0.0008,  # 0.08%
    FeeTier.TIER3: 0.0006,  # 0.06%
    FeeTier.TIER4: 0.0004,  # 0.04%
    FeeTier.TIER5: 0.0002,  # 0.02%
}


def _as_float(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class SimulationParams:
    """
    Parameters of one hypothetical market order.

    Invalid values degrade to configured defaults instead of failing:
    - quantity: notional in quote currency; non-numeric or negative -> default
    - volatility: 0-100 scale; non-numeric -> default, out of range -> clamped
    - fee_tier: unknown tier -> tier1
    """
    quantity: float = field(default_factory=lambda: config.simulation.default_quantity)
    volatility: float = field(default_factory=lambda: config.simulation.default_volatility)
    fee_tier: Union[FeeTier, str] = field(default_factory=lambda: config.simulation.default_fee_tier)

    def __post_init__(self):
        quantity = _as_float(self.quantity)
        if quantity is None or quantity < 0:
            logger.warning(f"Invalid quantity {self.quantity!r}, using default "
                           f"{config.simulation.default_quantity}")
            quantity = config.simulation.default_quantity

        volatility = _as_float(self.volatility)
        if volatility is None:
            logger.warning(f"Invalid volatility {self.volatility!r}, using default "
                           f"{config.simulation.default_volatility}")
            volatility = config.simulation.default_volatility
        volatility = min(max(volatility, 0.0), 100.0)

        fee_tier = FeeTier.from_value(self.fee_tier)
        if not isinstance(self.fee_tier, FeeTier) and fee_tier.value != str(self.fee_tier).strip().lower():
            logger.warning(f"Unknown fee tier {self.fee_tier!r}, falling back to {fee_tier.value}")

        object.__setattr__(self, 'quantity', quantity)
        object.__setattr__(self, 'volatility', volatility)
        object.__setattr__(self, 'fee_tier', fee_tier)


@dataclass(frozen=True)
class TradingMetricsResult:
    """Estimated execution cost; every cost is a fraction of notional"""
    slippage: float
    fees: float
    market_impact: float
    net_cost: float
    maker_proportion: float
    taker_proportion: float
    base_asset: str
    quote_asset: str
    quantity: float
    snapshot_timestamp: Optional[float] = None

    def cost_in_quote(self) -> Dict[str, float]:
        """Costs expressed in quote currency for the given notional"""
        return {
            'slippage': self.quantity * self.slippage,
            'fees': self.quantity * self.fees,
            'market_impact': self.quantity * self.market_impact,
            'net_cost': self.quantity * self.net_cost
        }

    def to_dict(self) -> Dict:
        return asdict(self)
