from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RoundData:
    """Latest sample reported by a price feed (AggregatorV3 layout)."""

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int


class BasePriceFeed(ABC):
    """Abstract base class for external price sources."""

    @property
    @abstractmethod
    def feed_name(self) -> str:
        """Return the name of this feed."""
        ...

    @abstractmethod
    def decimals(self) -> int:
        """Decimal precision of the reported answer."""
        ...

    @abstractmethod
    def latest_round_data(self) -> RoundData:
        """Read the feed's latest sample."""
        ...
