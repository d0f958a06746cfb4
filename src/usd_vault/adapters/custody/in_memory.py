from __future__ import annotations

import logging
from collections import defaultdict

from ...assets import canonical_asset
from ...constants import NATIVE_ASSET
from ...errors import InsufficientAllowance, TransferFailed
from .base import BaseCustodyAdapter

logger = logging.getLogger(__name__)


class InMemoryCustody(BaseCustodyAdapter):
    """Custody backed by in-process wallet, allowance and pool balances.

    Asset ids are canonicalized on every call, so a lowercase address and
    its checksummed form name the same balance.
    """

    def __init__(self) -> None:
        self._wallets: defaultdict[tuple[str, str], int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = {}
        self._pool: defaultdict[str, int] = defaultdict(int)

    def fund(self, user: str, asset: str, amount: int) -> None:
        self._wallets[(user, canonical_asset(asset))] += amount

    def approve(self, user: str, asset: str, amount: int) -> None:
        self._allowances[(user, canonical_asset(asset))] = amount

    def wallet_balance(self, user: str, asset: str) -> int:
        return self._wallets.get((user, canonical_asset(asset)), 0)

    def pool_balance(self, asset: str) -> int:
        return self._pool.get(canonical_asset(asset), 0)

    def _debit_wallet(self, user: str, asset: str, amount: int) -> None:
        held = self._wallets.get((user, asset), 0)
        if held < amount:
            raise TransferFailed(
                f"Wallet {user} holds {held} of {asset}, cannot move {amount}"
            )
        self._wallets[(user, asset)] -= amount
        self._pool[asset] += amount

    def _debit_pool(self, user: str, asset: str, amount: int) -> None:
        held = self._pool.get(asset, 0)
        if held < amount:
            raise TransferFailed(f"Pool holds {held} of {asset}, cannot pay {amount}")
        self._pool[asset] -= amount
        self._wallets[(user, asset)] += amount

    def receive_native(self, user: str, amount: int) -> None:
        self._debit_wallet(user, NATIVE_ASSET, amount)

    def send_native(self, user: str, amount: int) -> None:
        self._debit_pool(user, NATIVE_ASSET, amount)

    def allowance(self, user: str, asset: str) -> int:
        return self._allowances.get((user, canonical_asset(asset)), 0)

    def transfer_from(self, user: str, asset: str, amount: int) -> None:
        key = (user, canonical_asset(asset))
        approved = self._allowances.get(key, 0)
        if approved < amount:
            raise InsufficientAllowance(
                f"Allowance {approved} of {key[1]} below requested {amount}"
            )
        self._debit_wallet(user, key[1], amount)
        self._allowances[key] = approved - amount
        logger.debug("Pulled %d of %s from %s", amount, key[1], user)

    def transfer(self, user: str, asset: str, amount: int) -> None:
        self._debit_pool(user, canonical_asset(asset), amount)
        logger.debug("Pushed %d of %s to %s", amount, asset, user)
