from __future__ import annotations

from ...errors import InvalidPrice
from ..price_adapters.base import RoundData
from .base import BasePriceValidator, CheckResult


class PositivePriceValidator(BasePriceValidator):
    error_cls = InvalidPrice

    @property
    def name(self) -> str:
        return "Positive Price Validator"

    def validate(self, sample: RoundData, now: int) -> CheckResult:
        if sample.answer <= 0:
            return CheckResult(
                passed=False,
                message=f"Non-positive price {sample.answer} in round {sample.round_id}",
            )
        return CheckResult(passed=True, message="Price is positive")
