from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from usd_vault.adapters.price_adapters.base import RoundData
from usd_vault.adapters.price_adapters.static import StaticPriceFeed
from usd_vault.constants import NATIVE_ASSET
from usd_vault.errors import InvalidAsset, InvalidPrice, StaleOracleData
from usd_vault.processors.oracle_gateway import PriceOracleGateway, PriceSample

NOW = 1_700_000_000
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture
def feed():
    return StaticPriceFeed(2000_00000000, updated_at=NOW - 60)


@pytest.fixture
def gateway(feed):
    return PriceOracleGateway(feed, NATIVE_ASSET, clock=lambda: NOW)


def test_current_unit_price_returns_price_and_age(gateway):
    sample = gateway.current_unit_price(NATIVE_ASSET)

    assert sample == PriceSample(
        price=2000_00000000,
        age_seconds=60,
        round_id=1,
        answered_in_round=1,
        updated_at=NOW - 60,
    )


def test_rejects_feed_with_unexpected_decimals():
    with pytest.raises(ValueError, match="expected 8"):
        PriceOracleGateway(StaticPriceFeed(1, decimals=18), NATIVE_ASSET)


def test_rejects_unpriced_asset(gateway):
    with pytest.raises(InvalidAsset, match="No price feed"):
        gateway.current_unit_price(USDC)


def test_stale_when_older_than_heartbeat(feed, gateway):
    feed.set_price(2000_00000000, updated_at=NOW - 3601)

    with pytest.raises(StaleOracleData, match="heartbeat"):
        gateway.current_unit_price(NATIVE_ASSET)


def test_stale_when_round_answered_earlier(feed, gateway):
    feed.set_round(
        RoundData(
            round_id=8,
            answer=2000_00000000,
            started_at=NOW,
            updated_at=NOW,
            answered_in_round=7,
        )
    )

    with pytest.raises(StaleOracleData, match="earlier round"):
        gateway.current_unit_price(NATIVE_ASSET)


def test_non_positive_price_rejected(feed, gateway):
    feed.set_price(0, updated_at=NOW)

    with pytest.raises(InvalidPrice):
        gateway.current_unit_price(NATIVE_ASSET)


def test_every_call_reads_the_feed():
    feed = MagicMock()
    feed.feed_name = "mock"
    feed.decimals.return_value = 8
    feed.latest_round_data.side_effect = [
        RoundData(1, 2000_00000000, NOW, NOW, 1),
        RoundData(2, 2000_00000000, NOW - 7200, NOW - 7200, 2),
    ]
    gateway = PriceOracleGateway(feed, NATIVE_ASSET, clock=lambda: NOW)

    gateway.current_unit_price(NATIVE_ASSET)
    with pytest.raises(StaleOracleData):
        gateway.current_unit_price(NATIVE_ASSET)

    assert feed.latest_round_data.call_count == 2


def test_clock_is_consulted_per_call(feed):
    now = {"t": NOW}
    gateway = PriceOracleGateway(feed, NATIVE_ASSET, clock=lambda: now["t"])

    gateway.current_unit_price(NATIVE_ASSET)
    now["t"] = NOW + 3600

    with pytest.raises(StaleOracleData):
        gateway.current_unit_price(NATIVE_ASSET)
