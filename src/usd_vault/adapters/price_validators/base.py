from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...errors import VaultError
from ..price_adapters.base import RoundData


@dataclass
class CheckResult:
    """Result from a price validator."""

    passed: bool
    message: str


class BasePriceValidator(ABC):
    """Base class for all price sample validators."""

    # Raised by the gateway when this validator fails.
    error_cls: type[VaultError] = VaultError

    @abstractmethod
    def validate(self, sample: RoundData, now: int) -> CheckResult:
        """Validate a price sample read at ``now`` (unix seconds).

        Args:
            sample: The feed's latest round data
            now: Current time in unix seconds

        Returns:
            CheckResult indicating if the sample may be used
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this validator."""
        pass
