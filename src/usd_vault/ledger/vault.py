"""Per-user, per-asset vault balances with unit-of-account limits."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from ..adapters.custody.base import BaseCustodyAdapter
from ..assets import canonical_asset
from ..constants import NATIVE_ASSET
from ..errors import (
    CapExceeded,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAsset,
    NativeValueMismatch,
    ReentrantCall,
    TransferFailed,
    VaultError,
    WithdrawalLimitExceeded,
    ZeroAmount,
)
from ..processors.value_converter import ValueConverter
from .events import DepositEvent, EventListener, LedgerEvent, WithdrawalEvent
from .registry import AdminCapability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerStats:
    """Cumulative activity counters in unit-of-account base units."""

    total_deposited_value: int
    total_withdrawn_value: int


class VaultLedger:
    """Single-writer ledger for a shared pool.

    Every mutating call runs to completion or fails with no state change.
    Deposits are bounded by ``bank_cap_value`` on the cumulative deposited
    value; each withdrawal is bounded by ``withdrawal_limit_value``.
    """

    def __init__(
        self,
        bank_cap_value: int,
        withdrawal_limit_value: int,
        converter: ValueConverter,
        custody: BaseCustodyAdapter,
        *,
        native_asset: str = NATIVE_ASSET,
    ):
        if not (0 < withdrawal_limit_value <= bank_cap_value):
            raise CapExceeded(
                f"Invalid limits: withdrawal limit {withdrawal_limit_value} "
                f"must be positive and not exceed bank cap {bank_cap_value}"
            )
        self._bank_cap_value = bank_cap_value
        self._withdrawal_limit_value = withdrawal_limit_value
        self.converter = converter
        self.custody = custody
        self.native_asset = canonical_asset(native_asset)

        # rows are created by the first successful deposit only
        self._vaults: dict[str, dict[str, int]] = {}
        self._total_deposited_value = 0
        self._total_withdrawn_value = 0

        self._entered = False
        self.events: list[LedgerEvent] = []
        self._listeners: list[EventListener] = []

    @property
    def bank_cap_value(self) -> int:
        return self._bank_cap_value

    @property
    def withdrawal_limit_value(self) -> int:
        return self._withdrawal_limit_value

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback invoked after each committed deposit or withdrawal."""
        self._listeners.append(listener)

    @contextmanager
    def _non_reentrant(self) -> Iterator[None]:
        if self._entered:
            raise ReentrantCall("Ledger is already processing a mutating call")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False

    @contextmanager
    def _transaction(self, user: str, asset: str) -> Iterator[None]:
        """Restore the touched vault entry and totals if the block raises."""
        vault = self._vaults.get(user)
        balance = vault.get(asset) if vault is not None else None
        deposited = self._total_deposited_value
        withdrawn = self._total_withdrawn_value
        try:
            yield
        except Exception:
            if balance is not None:
                self._vaults[user][asset] = balance
            elif user in self._vaults:
                self._vaults[user].pop(asset, None)
                if not self._vaults[user]:
                    del self._vaults[user]
            self._total_deposited_value = deposited
            self._total_withdrawn_value = withdrawn
            raise

    def _credit(self, user: str, asset: str, amount: int) -> None:
        vault = self._vaults.setdefault(user, {})
        vault[asset] = vault.get(asset, 0) + amount

    def _move(self, transfer: Callable[..., None], *args) -> None:
        try:
            transfer(*args)
        except TransferFailed:
            raise
        except Exception as exc:
            raise TransferFailed(f"Custody transfer failed: {exc}") from exc

    def _emit(self, event: LedgerEvent) -> None:
        self.events.append(event)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s", event)

    def deposit(
        self, user: str, asset_id: str, amount: int, *, native_value: int = 0
    ) -> int:
        """Credit ``amount`` of ``asset_id`` to ``user``'s vault.

        ``native_value`` is the native currency attached to the call and must
        equal ``amount`` for native deposits and be zero otherwise.

        Returns:
            The unit-of-account value added to the deposited total.
        """
        asset = canonical_asset(asset_id)
        try:
            with self._non_reentrant():
                if amount == 0:
                    raise ZeroAmount("Deposit amount must be non-zero")
                if amount < 0:
                    raise ValueError(f"Deposit amount must be positive, got {amount}")

                is_native = asset == self.native_asset
                if is_native and native_value != amount:
                    raise NativeValueMismatch(
                        f"Declared {amount} but attached {native_value} native units"
                    )
                if not is_native and native_value:
                    raise NativeValueMismatch(
                        f"Native value {native_value} attached to a {asset} deposit"
                    )

                if not is_native and self.custody.allowance(user, asset) < amount:
                    raise InsufficientAllowance(
                        f"{user} has not approved {amount} of {asset}"
                    )

                unit_value = self.converter.to_unit_value(asset, amount)
                if self._total_deposited_value + unit_value > self._bank_cap_value:
                    raise CapExceeded(
                        f"Deposit of {unit_value} would raise total to "
                        f"{self._total_deposited_value + unit_value}, "
                        f"cap is {self._bank_cap_value}"
                    )

                with self._transaction(user, asset):
                    if is_native:
                        self._move(self.custody.receive_native, user, amount)
                    else:
                        self._move(self.custody.transfer_from, user, asset, amount)
                    self._credit(user, asset, amount)
                    self._total_deposited_value += unit_value

                logger.info(
                    "Deposit: %s credited %d of %s (value %d, total %d)",
                    user,
                    amount,
                    asset,
                    unit_value,
                    self._total_deposited_value,
                )
                self._emit(DepositEvent(user=user, asset=asset, amount=amount))
                return unit_value
        except VaultError as exc:
            logger.warning(
                "Deposit rejected for %s (%s): %s", user, type(exc).__name__, exc
            )
            raise

    def withdraw(self, user: str, asset_id: str, amount: int) -> int:
        """Debit ``amount`` of ``asset_id`` from ``user``'s vault and pay it out.

        The ledger mutation and the outbound transfer form one unit: if the
        transfer fails, the balance and withdrawn total are restored.

        Returns:
            The unit-of-account value added to the withdrawn total.
        """
        asset = canonical_asset(asset_id)
        try:
            with self._non_reentrant():
                if amount == 0:
                    raise ZeroAmount("Withdrawal amount must be non-zero")
                if amount < 0:
                    raise ValueError(
                        f"Withdrawal amount must be positive, got {amount}"
                    )

                if self.converter.registry.precision_of(asset) is None:
                    raise InvalidAsset(f"Asset {asset} precision is not configured")

                balance = self._vaults.get(user, {}).get(asset, 0)
                if balance < amount:
                    raise InsufficientBalance(
                        f"{user} holds {balance} of {asset}, requested {amount}"
                    )

                unit_value = self.converter.to_unit_value(asset, amount)
                if unit_value > self._withdrawal_limit_value:
                    raise WithdrawalLimitExceeded(
                        f"Withdrawal value {unit_value} exceeds limit "
                        f"{self._withdrawal_limit_value}"
                    )

                with self._transaction(user, asset):
                    self._vaults[user][asset] -= amount
                    self._total_withdrawn_value += unit_value
                    if asset == self.native_asset:
                        self._move(self.custody.send_native, user, amount)
                    else:
                        self._move(self.custody.transfer, user, asset, amount)

                logger.info(
                    "Withdrawal: %s debited %d of %s (value %d)",
                    user,
                    amount,
                    asset,
                    unit_value,
                )
                self._emit(WithdrawalEvent(user=user, asset=asset, amount=amount))
                return unit_value
        except VaultError as exc:
            logger.warning(
                "Withdrawal rejected for %s (%s): %s", user, type(exc).__name__, exc
            )
            raise

    def get_vault_balance(self, user: str, asset_id: str) -> int:
        vault = self._vaults.get(user)
        if vault is None:
            return 0
        return vault.get(canonical_asset(asset_id), 0)

    def get_stats(self) -> LedgerStats:
        return LedgerStats(
            total_deposited_value=self._total_deposited_value,
            total_withdrawn_value=self._total_withdrawn_value,
        )

    def get_total_balance_usd(self, user: str, asset_ids: Iterable[str]) -> int:
        """Sum of the unit values of ``user``'s balances in the listed assets."""
        return sum(
            self.converter.to_unit_value(asset, self.get_vault_balance(user, asset))
            for asset in asset_ids
        )

    def set_asset_precision(
        self, credential: AdminCapability | None, asset_id: str, precision: int
    ) -> None:
        self.converter.registry.set_precision(credential, asset_id, precision)

    def convert_unit_value_to_native(self, unit_value: int) -> int:
        return self.converter.to_native_amount(unit_value)
