"""Rejection outcomes raised by the ledger and its collaborators."""

from __future__ import annotations


class VaultError(Exception):
    """Base class for every ledger rejection."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidAsset(VaultError):
    """Asset precision is unconfigured or outside the supported range."""

    pass


class CapExceeded(VaultError):
    """Global deposit ceiling would be breached, or limits are misconfigured."""

    pass


class InsufficientBalance(VaultError):
    """Withdrawal exceeds the user's recorded balance."""

    pass


class TransferFailed(VaultError):
    """Custody movement in or out of the pool did not succeed."""

    pass


class InsufficientAllowance(TransferFailed):
    """Token deposit was not pre-approved for the pull transfer."""

    pass


class ZeroAmount(VaultError):
    """A zero-amount deposit or withdrawal was requested."""

    pass


class WithdrawalLimitExceeded(VaultError):
    """Unit value of a single withdrawal exceeds the per-withdrawal ceiling."""

    pass


class StaleOracleData(VaultError):
    """Price sample belongs to an incomplete round or is older than the heartbeat."""

    pass


class InvalidPrice(VaultError):
    """Oracle reported a non-positive price."""

    pass


class NativeValueMismatch(VaultError):
    """Attached native value does not match the declared deposit."""

    pass


class Unauthorized(VaultError):
    """Caller does not hold the administrative capability."""

    pass


class ReentrantCall(VaultError):
    """A mutating call re-entered the ledger while the guard was held."""

    pass
