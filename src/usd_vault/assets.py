from __future__ import annotations

from web3 import Web3


def canonical_asset(asset: str) -> str:
    """Canonical form of an asset id: EIP-55 checksum for addresses, else lower-case."""
    try:
        return Web3.to_checksum_address(asset)
    except ValueError:
        return asset.lower()
