from __future__ import annotations

from .bootstrap import LedgerDeployment, build_ledger
from .events import DepositEvent, WithdrawalEvent
from .registry import AdminCapability, AssetRegistry
from .vault import LedgerStats, VaultLedger

__all__ = [
    "AdminCapability",
    "AssetRegistry",
    "DepositEvent",
    "LedgerDeployment",
    "LedgerStats",
    "VaultLedger",
    "WithdrawalEvent",
    "build_ledger",
]
