"""Tests for LatencyTracker."""

import pytest

from tradesim.monitoring.latency_tracker import LatencyRecord, LatencyTracker


def record(end_to_end, processing=1.0, render=2.0, parse=0.5):
    return LatencyRecord(
        data_processing_latency=processing,
        ui_update_latency=render,
        end_to_end_latency=end_to_end,
        parse_latency=parse
    )


def test_empty_summary_is_zeroed():
    summary = LatencyTracker(history_size=5).summary()
    assert summary['count'] == 0
    assert summary['end_to_end_latency'] == {'mean': 0.0, 'p50': 0.0, 'p95': 0.0, 'max': 0.0}
    assert LatencyTracker().latest is None


def test_summary_statistics():
    tracker = LatencyTracker(history_size=10, threshold_ms=1000)
    for value in (10.0, 20.0, 30.0, 40.0):
        tracker.add_record(record(value))

    stats = tracker.summary()['end_to_end_latency']
    assert stats['mean'] == pytest.approx(25.0)
    assert stats['p50'] == pytest.approx(25.0)
    assert stats['max'] == 40.0
    assert tracker.summary()['parse_latency']['mean'] == pytest.approx(0.5)
    assert tracker.latest.end_to_end_latency == 40.0


def test_history_is_bounded():
    tracker = LatencyTracker(history_size=3, threshold_ms=1000)
    for value in range(5):
        tracker.add_record(record(float(value)))

    assert [r.end_to_end_latency for r in tracker.history()] == [2.0, 3.0, 4.0]
    assert tracker.total_records == 5


def test_slow_ticks_are_counted():
    tracker = LatencyTracker(history_size=10, threshold_ms=50)
    tracker.add_record(record(10.0))
    tracker.add_record(record(75.0))
    assert tracker.slow_ticks == 1
    assert tracker.summary()['slow_ticks'] == 1


def test_reset():
    tracker = LatencyTracker(history_size=10)
    tracker.add_record(record(5.0))
    tracker.reset()
    assert tracker.history() == []
    assert tracker.total_records == 0
    assert tracker.latest is None


def test_record_to_dict():
    data = record(12.0).to_dict()
    assert data['end_to_end_latency'] == 12.0
    assert set(data) == {
        'data_processing_latency', 'ui_update_latency', 'end_to_end_latency', 'parse_latency', 'timestamp'
    }
