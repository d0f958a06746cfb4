"""Per-asset decimal precision, writable only by administrative capability holders."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Iterable

from ..assets import canonical_asset
from ..constants import MAX_ASSET_DECIMALS, NATIVE_ASSET, NATIVE_DECIMALS, REFERENCE_DECIMALS
from ..errors import InvalidAsset, Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminCapability:
    """Credential presented by callers of administrative operations."""

    holder: str
    token: str = field(default_factory=lambda: secrets.token_hex(16), repr=False)


class AssetRegistry:
    def __init__(
        self,
        admins: Iterable[AdminCapability],
        *,
        native_asset: str = NATIVE_ASSET,
        native_decimals: int = NATIVE_DECIMALS,
    ):
        self._admins = frozenset(admins)
        self._precisions: dict[str, int] = {canonical_asset(native_asset): native_decimals}

    def is_admin(self, credential: AdminCapability | None) -> bool:
        return credential is not None and credential in self._admins

    def precision_of(self, asset: str) -> int | None:
        """Configured precision for ``asset``, or None when never set."""
        return self._precisions.get(canonical_asset(asset))

    def set_precision(
        self, credential: AdminCapability | None, asset: str, precision: int
    ) -> None:
        """Set or update an asset's decimal precision.

        Takes effect for every later conversion; recorded totals are untouched.

        Raises:
            Unauthorized: If ``credential`` is not an administrative capability.
            InvalidAsset: If ``precision`` is outside the supported range.
        """
        if credential is None or not self.is_admin(credential):
            raise Unauthorized("Caller does not hold the admin capability")
        if not (REFERENCE_DECIMALS <= precision <= MAX_ASSET_DECIMALS):
            raise InvalidAsset(
                f"Decimal precision {precision} outside supported range "
                f"[{REFERENCE_DECIMALS}, {MAX_ASSET_DECIMALS}]"
            )

        key = canonical_asset(asset)
        previous = self._precisions.get(key)
        self._precisions[key] = precision
        logger.info(
            "Asset %s precision set to %d (was %s) by %s",
            key,
            precision,
            previous,
            credential.holder,
        )

    def configured_assets(self) -> dict[str, int]:
        return dict(self._precisions)
