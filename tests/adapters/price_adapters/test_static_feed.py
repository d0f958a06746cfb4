from __future__ import annotations

from usd_vault.adapters.price_adapters.base import RoundData
from usd_vault.adapters.price_adapters.static import StaticPriceFeed


def test_initial_round():
    feed = StaticPriceFeed(2000_00000000, updated_at=1_000)

    sample = feed.latest_round_data()

    assert feed.decimals() == 8
    assert sample == RoundData(
        round_id=1,
        answer=2000_00000000,
        started_at=1_000,
        updated_at=1_000,
        answered_in_round=1,
    )


def test_set_price_opens_new_answered_round():
    feed = StaticPriceFeed(2000_00000000, updated_at=1_000)

    feed.set_price(2100_00000000, updated_at=1_500)
    sample = feed.latest_round_data()

    assert sample.round_id == 2
    assert sample.answered_in_round == 2
    assert sample.answer == 2100_00000000
    assert sample.updated_at == 1_500


def test_set_round_overrides_sample():
    feed = StaticPriceFeed(2000_00000000, updated_at=1_000)
    carried_over = RoundData(
        round_id=9, answer=1, started_at=0, updated_at=5, answered_in_round=8
    )

    feed.set_round(carried_over)

    assert feed.latest_round_data() is carried_over
