from __future__ import annotations

import logging

from ...constants import HEARTBEAT_SECONDS
from ...errors import StaleOracleData
from ..price_adapters.base import RoundData
from .base import BasePriceValidator, CheckResult

logger = logging.getLogger(__name__)


def format_age(seconds: int) -> str:
    """Format a sample age as e.g. "1h 5m", "4m 10s" or "30s"."""
    if seconds >= 3600:
        hours = seconds // 3600
        mins = (seconds % 3600) // 60
        return f"{hours}h {mins}m"
    elif seconds >= 60:
        mins = seconds // 60
        secs = seconds % 60
        return f"{mins}m {secs}s"
    else:
        return f"{seconds}s"


class RoundCompletenessValidator(BasePriceValidator):
    """Reject samples whose answer was carried over from an earlier round."""

    error_cls = StaleOracleData

    @property
    def name(self) -> str:
        return "Round Completeness Validator"

    def validate(self, sample: RoundData, now: int) -> CheckResult:
        if sample.updated_at == 0:
            return CheckResult(
                passed=False,
                message=f"Round {sample.round_id} is incomplete (no update timestamp)",
            )
        if sample.answered_in_round < sample.round_id:
            return CheckResult(
                passed=False,
                message=(
                    f"Round {sample.round_id} answered in earlier round "
                    f"{sample.answered_in_round}"
                ),
            )
        return CheckResult(passed=True, message=f"Round {sample.round_id} complete")


class HeartbeatValidator(BasePriceValidator):
    """Reject samples older than the heartbeat."""

    error_cls = StaleOracleData

    def __init__(self, heartbeat_seconds: int = HEARTBEAT_SECONDS):
        self.heartbeat_seconds = heartbeat_seconds

    @property
    def name(self) -> str:
        return "Heartbeat Validator"

    def validate(self, sample: RoundData, now: int) -> CheckResult:
        age = max(now - sample.updated_at, 0)
        if age > self.heartbeat_seconds:
            return CheckResult(
                passed=False,
                message=(
                    f"Price sample is {format_age(age)} old "
                    f"(heartbeat: {format_age(self.heartbeat_seconds)})"
                ),
            )
        return CheckResult(passed=True, message=f"Price sample is {format_age(age)} old")
