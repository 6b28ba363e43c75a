"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from tradesim.utils.config import Config, FeedConfig, MonitoringConfig, SimulationConfig


def test_defaults():
    cfg = Config()
    assert cfg.feed.reconnect_delay == 5.0
    assert cfg.feed.ws_url.startswith("wss://")
    assert cfg.simulation.default_fee_tier == "tier1"
    assert cfg.simulation.auto_run is False
    assert cfg.monitoring.latency_history_size == 100


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TRADESIM_WS_URL", "ws://localhost:9000/book")
    monkeypatch.setenv("TRADESIM_RECONNECT_DELAY", "2.5")
    monkeypatch.setenv("TRADESIM_BASE_ASSET", "ETH")
    monkeypatch.setenv("TRADESIM_LOG_LEVEL", "verbose")

    cfg = Config()
    assert cfg.feed.ws_url == "ws://localhost:9000/book"
    assert cfg.feed.reconnect_delay == 2.5
    assert cfg.simulation.base_asset == "ETH"
    assert cfg.simulation.quote_asset == "USDT"
    assert cfg.log_level == "VERBOSE"


def test_to_dict_covers_every_section():
    data = Config().to_dict()
    assert set(data) == {"feed", "simulation", "monitoring", "log_level"}
    assert data["feed"]["ping_interval"] == 20.0


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        FeedConfig(reconnect_delay=-1)
    with pytest.raises(ValidationError):
        SimulationConfig(default_volatility=150)
    with pytest.raises(ValidationError):
        MonitoringConfig(latency_history_size=0)
