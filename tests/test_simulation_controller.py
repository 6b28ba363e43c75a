"""Tests for SimulationController."""

import pytest

from tradesim.cost_model.models import SimulationParams
from tradesim.data_ingestion.order_book import build_snapshot
from tradesim.data_ingestion.tick_pipeline import IngestionPipeline
from tradesim.simulation.controller import SimulationController


@pytest.fixture
def controller():
    return SimulationController(params=SimulationParams(quantity=100, volatility=50, fee_tier="tier1"))


def test_recompute_before_first_tick_is_degenerate(controller):
    result = controller.recompute()
    assert result.slippage == 0.0
    assert result.market_impact == 0.0
    assert result.fees == 0.001
    assert result.maker_proportion == 0.5
    assert controller.latest_result is result


def test_manual_mode_does_not_recompute(controller, scenario_snapshot):
    assert controller.auto_run is False
    assert controller.update_snapshot(scenario_snapshot) is None
    assert controller.update_params(SimulationParams(quantity=500)) is None
    assert controller.latest_result is None
    assert controller.recompute_count == 0

    result = controller.recompute()
    assert result.quantity == 500
    assert result.snapshot_timestamp == scenario_snapshot.timestamp


def test_auto_run_recomputes_on_every_change(controller, scenario_snapshot):
    results = []
    controller.add_callback('on_result', results.append)

    first = controller.set_auto_run(True)
    assert first is not None

    second = controller.update_snapshot(scenario_snapshot)
    assert second.snapshot_timestamp == scenario_snapshot.timestamp

    third = controller.update_params(SimulationParams(quantity=250, fee_tier="tier5"))
    assert third.quantity == 250
    assert third.fees == 0.0002

    assert results == [first, second, third]
    assert controller.recompute_count == 3

    assert controller.set_auto_run(False) is None
    assert controller.update_snapshot(scenario_snapshot) is None
    assert controller.recompute_count == 3


def test_callback_errors_do_not_break_recompute(controller):
    def broken(result):
        raise RuntimeError("presentation failed")

    controller.add_callback('on_result', broken)
    assert controller.recompute() is not None


def test_unknown_event_type_is_rejected(controller):
    with pytest.raises(ValueError):
        controller.add_callback('on_tick', print)


def test_assets_are_echoed(scenario_snapshot):
    controller = SimulationController(base_asset="ETH", quote_asset="USDC", auto_run=True)
    result = controller.update_snapshot(scenario_snapshot)
    assert (result.base_asset, result.quote_asset) == ("ETH", "USDC")


def test_snapshot_is_replaced_wholesale(controller, scenario_snapshot):
    newer = build_snapshot(bids=[["20000", "1"]], asks=[["20010", "1"]])
    controller.update_snapshot(scenario_snapshot)
    controller.update_snapshot(newer)
    assert controller.snapshot is newer


@pytest.mark.asyncio
async def test_attached_controller_follows_pipeline(controller, valid_message):
    pipeline = IngestionPipeline(url="ws://test")
    controller.attach(pipeline)
    controller.set_auto_run(True)

    record = await pipeline.handle_message(valid_message)

    assert record is not None
    assert controller.snapshot is pipeline.snapshot
    assert controller.latest_result.snapshot_timestamp == 1700000000000
    assert controller.latest_result.fees == 0.001
