"""Shared fixtures."""

import pytest

from tests.helpers import book_message
from tradesim.data_ingestion.order_book import build_snapshot


@pytest.fixture
def scenario_snapshot():
    return build_snapshot(
        bids=[["19500", "2.5"], ["19450", "3.2"]],
        asks=[["19550", "1.9"], ["19600", "2.8"]],
        timestamp=1700000000000
    )


@pytest.fixture
def valid_message():
    return book_message(
        bids=[["19500", "2.5"], ["19450", "3.2"]],
        asks=[["19550", "1.9"], ["19600", "2.8"]]
    )
