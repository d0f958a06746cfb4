from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from ..adapters.price_adapters.base import BasePriceFeed
from ..adapters.price_validators import PRICE_VALIDATORS, BasePriceValidator
from ..assets import canonical_asset
from ..constants import NATIVE_ASSET, ORACLE_PRICE_DECIMALS
from ..errors import InvalidAsset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceSample:
    """A validated price read, never cached between conversions."""

    price: int  # ORACLE_PRICE_DECIMALS fixed point
    age_seconds: int
    round_id: int
    answered_in_round: int
    updated_at: int


def unix_now() -> int:
    return int(time.time())


class PriceOracleGateway:
    """Wraps a single external price feed and enforces freshness on every read."""

    def __init__(
        self,
        feed: BasePriceFeed,
        priced_asset: str = NATIVE_ASSET,
        *,
        clock: Callable[[], int] = unix_now,
        validators: Sequence[BasePriceValidator] | None = None,
    ):
        feed_decimals = feed.decimals()
        if feed_decimals != ORACLE_PRICE_DECIMALS:
            raise ValueError(
                f"Feed {feed.feed_name} reports {feed_decimals} decimals, "
                f"expected {ORACLE_PRICE_DECIMALS}"
            )
        self.feed = feed
        self.priced_asset = canonical_asset(priced_asset)
        self._clock = clock
        self.validators = (
            list(validators)
            if validators is not None
            else [validator_cls() for validator_cls in PRICE_VALIDATORS]
        )

    def current_unit_price(self, asset_id: str) -> PriceSample:
        """Fetch the priced asset's current unit price.

        Raises:
            InvalidAsset: If ``asset_id`` is not the asset this feed prices.
            StaleOracleData: If the round is incomplete or older than the heartbeat.
            InvalidPrice: If the feed reports a non-positive price.
        """
        if canonical_asset(asset_id) != self.priced_asset:
            raise InvalidAsset(f"No price feed configured for asset {asset_id}")

        sample = self.feed.latest_round_data()
        now = self._clock()

        for validator in self.validators:
            result = validator.validate(sample, now)
            if not result.passed:
                logger.warning(f"✗ {validator.name}: {result.message}")
                raise validator.error_cls(result.message)

        age = max(now - sample.updated_at, 0)
        logger.debug(
            "Price %d from %s round %d (age %ds)",
            sample.answer,
            self.feed.feed_name,
            sample.round_id,
            age,
        )
        return PriceSample(
            price=sample.answer,
            age_seconds=age,
            round_id=sample.round_id,
            answered_in_round=sample.answered_in_round,
            updated_at=sample.updated_at,
        )
