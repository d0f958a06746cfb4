"""Base class for custody adapters."""

from abc import ABC, abstractmethod


class BaseCustodyAdapter(ABC):
    """Moves assets between user wallets and the shared pool.

    Implementations raise ``TransferFailed`` (or ``InsufficientAllowance``
    for unapproved pulls) when a movement does not succeed.
    """

    @abstractmethod
    def receive_native(self, user: str, amount: int) -> None:
        """Accept native currency attached to a deposit."""
        pass

    @abstractmethod
    def send_native(self, user: str, amount: int) -> None:
        """Pay native currency out of the pool."""
        pass

    @abstractmethod
    def allowance(self, user: str, asset: str) -> int:
        """Amount of ``asset`` the pool may pull from ``user``."""
        pass

    @abstractmethod
    def transfer_from(self, user: str, asset: str, amount: int) -> None:
        """Pull a token amount from ``user`` into the pool."""
        pass

    @abstractmethod
    def transfer(self, user: str, asset: str, amount: int) -> None:
        """Push a token amount from the pool to ``user``."""
        pass
