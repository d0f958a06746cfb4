from __future__ import annotations

from .constants import MAX_ASSET_DECIMALS, REFERENCE_DECIMALS
from .errors import InvalidAsset


def scale_decimals(value: int, decimals: int, target_decimals: int) -> int:
    """Rescale a fixed-point integer between decimal precisions.

    Args:
        value: Integer amount expressed with ``decimals`` decimal places.
        decimals: Current decimal precision of ``value``.
        target_decimals: Desired decimal precision.

    Returns:
        The amount expressed with ``target_decimals`` decimal places.

    Notes:
        - Scaling up multiplies by 10**(target_decimals - decimals).
        - Scaling down uses integer division (truncates toward zero).
    """
    if decimals == target_decimals:
        return value
    if decimals < target_decimals:
        return value * (10 ** (target_decimals - decimals))
    return value // (10 ** (decimals - target_decimals))


def normalize_amount(
    amount: int, decimals: int | None, reference_decimals: int = REFERENCE_DECIMALS
) -> int:
    """Express a native asset amount at the reference precision.

    Truncates toward zero; the dropped digits are lost.

    Raises:
        InvalidAsset: If ``decimals`` is unset, zero, below the reference
            precision or above MAX_ASSET_DECIMALS.
        ValueError: If ``amount`` is negative.
    """
    if not decimals:
        raise InvalidAsset("Asset decimal precision is not configured")
    if not (reference_decimals <= decimals <= MAX_ASSET_DECIMALS):
        raise InvalidAsset(
            f"Asset decimal precision {decimals} outside supported range "
            f"[{reference_decimals}, {MAX_ASSET_DECIMALS}]"
        )
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")

    return scale_decimals(amount, decimals, reference_decimals)
