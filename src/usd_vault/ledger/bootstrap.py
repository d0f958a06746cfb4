from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..adapters.custody.base import BaseCustodyAdapter
from ..adapters.price_adapters.base import BasePriceFeed
from ..adapters.price_adapters.chainlink import ChainlinkPriceFeed
from ..constants import NATIVE_ASSET
from ..processors.oracle_gateway import PriceOracleGateway, unix_now
from ..processors.value_converter import ValueConverter
from ..settings import VaultSettings
from .registry import AdminCapability, AssetRegistry
from .vault import VaultLedger

logger = logging.getLogger(__name__)


@dataclass
class LedgerDeployment:
    """A freshly built ledger and the capability of the admin who deployed it."""

    ledger: VaultLedger
    admin: AdminCapability


def build_price_feed(settings: VaultSettings) -> ChainlinkPriceFeed:
    return ChainlinkPriceFeed(
        settings.rpc_url_required,
        settings.price_feed_address_required,
        max_tries=settings.rpc_max_tries,
    )


def build_converter(
    settings: VaultSettings,
    registry: AssetRegistry,
    *,
    price_feed: BasePriceFeed | None = None,
    clock: Callable[[], int] | None = None,
) -> ValueConverter:
    feed = price_feed or build_price_feed(settings)
    gateway = PriceOracleGateway(
        feed,
        NATIVE_ASSET,
        clock=clock or unix_now,
    )
    return ValueConverter(
        registry,
        gateway,
        reference_asset=settings.reference_asset_required,
        pegged_assets=settings.pegged_assets,
    )


def build_ledger(
    settings: VaultSettings,
    custody: BaseCustodyAdapter,
    *,
    price_feed: BasePriceFeed | None = None,
    clock: Callable[[], int] | None = None,
    admin: str = "deployer",
) -> LedgerDeployment:
    """Assemble a ledger from settings.

    The deploying admin applies ``settings.asset_precisions`` before the
    ledger is handed out.
    """
    capability = AdminCapability(holder=admin)
    registry = AssetRegistry([capability])
    converter = build_converter(settings, registry, price_feed=price_feed, clock=clock)

    ledger = VaultLedger(
        settings.bank_cap_value_required,
        settings.withdrawal_limit_value_required,
        converter,
        custody,
    )
    for asset, precision in settings.asset_precisions.items():
        ledger.set_asset_precision(capability, asset, precision)

    logger.info(
        "Ledger ready: cap %d, withdrawal limit %d, %d configured assets",
        ledger.bank_cap_value,
        ledger.withdrawal_limit_value,
        len(registry.configured_assets()),
    )
    return LedgerDeployment(ledger=ledger, admin=capability)
