from __future__ import annotations

import time

from ...constants import ORACLE_PRICE_DECIMALS
from .base import BasePriceFeed, RoundData


class StaticPriceFeed(BasePriceFeed):
    """Price feed whose rounds are pushed by hand.

    Used for simulations and scenario replays where no RPC endpoint is
    available. Each ``set_price`` call opens and answers a new round.
    """

    def __init__(
        self,
        answer: int,
        *,
        updated_at: int | None = None,
        decimals: int = ORACLE_PRICE_DECIMALS,
    ):
        self._decimals = decimals
        self._round = RoundData(
            round_id=1,
            answer=answer,
            started_at=updated_at if updated_at is not None else int(time.time()),
            updated_at=updated_at if updated_at is not None else int(time.time()),
            answered_in_round=1,
        )

    @property
    def feed_name(self) -> str:
        return "static"

    def decimals(self) -> int:
        return self._decimals

    def latest_round_data(self) -> RoundData:
        return self._round

    def set_price(self, answer: int, updated_at: int | None = None) -> RoundData:
        timestamp = updated_at if updated_at is not None else int(time.time())
        next_round = self._round.round_id + 1
        self._round = RoundData(
            round_id=next_round,
            answer=answer,
            started_at=timestamp,
            updated_at=timestamp,
            answered_in_round=next_round,
        )
        return self._round

    def set_round(self, round_data: RoundData) -> None:
        self._round = round_data
