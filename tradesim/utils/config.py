"""
Trade Simulator Configuration
"""

import os
from typing import Dict, Any
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class FeedConfig(BaseModel):
    """Market data feed configuration"""
    ws_url: str = Field(
        default="wss://ws.gomarket-cpp.goquant.io/ws/l2-orderbook/okx/BTC-USDT-SWAP",
        description="L2 order book WebSocket URL"
    )
    exchange: str = Field(default="okx", description="Venue the feed is sourced from")
    symbol: str = Field(default="BTC-USDT-SWAP", description="Instrument streamed by the feed")
    
    # Fixed interval, no backoff growth and no retry cap
    reconnect_delay: float = Field(default=5.0, ge=0.0, description="Seconds to wait after an unexpected close")
    
    ping_interval: float = Field(default=20.0, description="Keepalive ping interval in seconds")
    ping_timeout: float = Field(default=10.0, description="Keepalive pong timeout in seconds")
    close_timeout: float = Field(default=10.0, description="Closing handshake timeout in seconds")


class SimulationConfig(BaseModel):
    """Cost simulation defaults"""
    base_asset: str = Field(default="BTC", description="Base asset echoed in results")
    quote_asset: str = Field(default="USDT", description="Quote asset echoed in results")
    default_quantity: float = Field(default=100.0, ge=0.0, description="Order notional in quote currency")
    default_volatility: float = Field(default=50.0, ge=0.0, le=100.0, description="Volatility estimate (0-100)")
    default_fee_tier: str = Field(default="tier1", description="Fee tier used when none is given")
    auto_run: bool = Field(default=False, description="Recompute on every snapshot or parameter change")


class MonitoringConfig(BaseModel):
    """Latency monitoring configuration"""
    latency_history_size: int = Field(default=100, gt=0, description="Latency samples kept in memory")
    latency_threshold_ms: float = Field(default=100.0, description="End-to-end latency warning threshold in ms")


class Config:
    """Main configuration class"""
    
    def __init__(self):
        feed_overrides = {}
        if os.getenv("TRADESIM_WS_URL"):
            feed_overrides['ws_url'] = os.getenv("TRADESIM_WS_URL")
        if os.getenv("TRADESIM_RECONNECT_DELAY"):
            feed_overrides['reconnect_delay'] = float(os.getenv("TRADESIM_RECONNECT_DELAY"))
        
        self.feed = FeedConfig(**feed_overrides)
        self.simulation = SimulationConfig(
            base_asset=os.getenv("TRADESIM_BASE_ASSET", "BTC"),
            quote_asset=os.getenv("TRADESIM_QUOTE_ASSET", "USDT")
        )
        self.monitoring = MonitoringConfig()
        self.log_level = os.getenv("TRADESIM_LOG_LEVEL", "NORMAL").upper()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return {
            "feed": self.feed.model_dump(),
            "simulation": self.simulation.model_dump(),
            "monitoring": self.monitoring.model_dump(),
            "log_level": self.log_level
        }


# Global configuration instance
config = Config()
