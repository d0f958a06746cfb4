"""Price validators registry."""

from .base import BasePriceValidator, CheckResult
from .freshness import HeartbeatValidator, RoundCompletenessValidator
from .positive_prices import PositivePriceValidator

# Order matters: staleness is reported before price sanity.
PRICE_VALIDATORS: list[type[BasePriceValidator]] = [
    RoundCompletenessValidator,
    HeartbeatValidator,
    PositivePriceValidator,
]

__all__ = [
    "BasePriceValidator",
    "CheckResult",
    "HeartbeatValidator",
    "PositivePriceValidator",
    "PRICE_VALIDATORS",
    "RoundCompletenessValidator",
]
