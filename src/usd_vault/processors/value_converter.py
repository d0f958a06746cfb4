from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from ..assets import canonical_asset
from ..constants import ORACLE_PRICE_DECIMALS, PRECISION_SCALE, REFERENCE_DECIMALS
from ..errors import InvalidAsset
from ..units import normalize_amount
from .oracle_gateway import PriceOracleGateway

if TYPE_CHECKING:
    from ..ledger.registry import AssetRegistry

logger = logging.getLogger(__name__)


class ValueConverter:
    """Converts native asset amounts to and from the unit of account.

    The gateway's priced asset is valued through the oracle. Every other
    configured asset is valued 1:1 after normalization, unless
    ``pegged_assets`` is given, in which case only those assets (and the
    reference asset) are accepted at parity.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        gateway: PriceOracleGateway,
        *,
        reference_asset: str | None = None,
        pegged_assets: Iterable[str] | None = None,
    ):
        self.registry = registry
        self.gateway = gateway
        self.reference_asset = (
            canonical_asset(reference_asset) if reference_asset else None
        )
        self.pegged_assets: set[str] | None = None
        if pegged_assets is not None:
            self.pegged_assets = {canonical_asset(a) for a in pegged_assets}
            if self.reference_asset:
                self.pegged_assets.add(self.reference_asset)

    @property
    def priced_asset(self) -> str:
        return self.gateway.priced_asset

    def to_unit_value(self, asset_id: str, amount: int) -> int:
        """Unit-of-account value of ``amount`` native units of ``asset_id``.

        Raises:
            InvalidAsset: If the asset's precision is unconfigured or out of
                range, or the asset is not on the pegged allow-list.
            StaleOracleData: If pricing the native asset hits a stale sample.
        """
        asset = canonical_asset(asset_id)
        normalized = normalize_amount(amount, self.registry.precision_of(asset))

        if asset == self.priced_asset:
            price = self.gateway.current_unit_price(asset).price
            return (
                normalized * price * PRECISION_SCALE // 10**ORACLE_PRICE_DECIMALS
            ) // PRECISION_SCALE

        if self.pegged_assets is not None and asset not in self.pegged_assets:
            raise InvalidAsset(f"Asset {asset_id} has no price source and is not pegged")

        return normalized

    def to_native_amount(self, unit_value: int) -> int:
        """Amount of the priced asset worth ``unit_value`` at the current price."""
        if unit_value < 0:
            raise ValueError(f"Unit value must be non-negative, got {unit_value}")

        native_decimals = self.registry.precision_of(self.priced_asset)
        if not native_decimals or native_decimals < REFERENCE_DECIMALS:
            raise InvalidAsset(
                f"Priced asset {self.priced_asset} has no usable decimal precision"
            )

        price = self.gateway.current_unit_price(self.priced_asset).price
        return (
            unit_value
            * 10**ORACLE_PRICE_DECIMALS
            * 10 ** (native_decimals - REFERENCE_DECIMALS)
            // price
        )
