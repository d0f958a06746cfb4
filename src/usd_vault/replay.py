"""Replay a JSON scenario against an in-memory ledger."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .adapters.custody.in_memory import InMemoryCustody
from .adapters.price_adapters.static import StaticPriceFeed
from .assets import canonical_asset
from .errors import VaultError
from .ledger.bootstrap import build_ledger
from .ledger.vault import LedgerStats
from .processors.oracle_gateway import unix_now
from .settings import VaultSettings

logger = logging.getLogger(__name__)


class Funding(BaseModel):
    user: str
    asset: str
    amount: int = Field(ge=0)

    model_config = ConfigDict(extra="forbid")


class Operation(BaseModel):
    op: Literal["deposit", "withdraw", "set_precision", "set_price"]
    user: str | None = None
    asset: str | None = None
    amount: int | None = Field(default=None, ge=0)
    native_value: int | None = Field(default=None, ge=0)
    precision: int | None = None
    price: int | None = None

    model_config = ConfigDict(extra="forbid")


class Scenario(BaseModel):
    price: int
    wallets: list[Funding] = Field(default_factory=list)
    allowances: list[Funding] = Field(default_factory=list)
    operations: list[Operation] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_file(cls, path: str | Path) -> "Scenario":
        with Path(path).open() as f:
            return cls.model_validate(json.load(f))


@dataclass
class OperationOutcome:
    index: int
    op: str
    ok: bool
    detail: str


@dataclass
class ReplayResult:
    outcomes: list[OperationOutcome] = field(default_factory=list)
    stats: LedgerStats | None = None

    @property
    def rejected(self) -> list[OperationOutcome]:
        return [o for o in self.outcomes if not o.ok]


def _require(operation: Operation, *names: str) -> None:
    missing = [name for name in names if getattr(operation, name) is None]
    if missing:
        raise ValueError(f"Operation '{operation.op}' is missing {', '.join(missing)}")


def run_scenario(settings: VaultSettings, scenario: Scenario) -> ReplayResult:
    """Run every scenario operation in order, recording each outcome.

    Ledger rejections are recorded and do not stop the replay; malformed
    operations raise ValueError.
    """
    now = unix_now()
    feed = StaticPriceFeed(scenario.price, updated_at=now)
    custody = InMemoryCustody()
    deployment = build_ledger(settings, custody, price_feed=feed, clock=lambda: now)
    ledger = deployment.ledger

    for funding in scenario.wallets:
        custody.fund(funding.user, funding.asset, funding.amount)
    for allowance in scenario.allowances:
        custody.approve(allowance.user, allowance.asset, allowance.amount)

    result = ReplayResult()
    for index, operation in enumerate(scenario.operations):
        user, asset, amount = operation.user, operation.asset, operation.amount
        try:
            if operation.op == "set_price":
                _require(operation, "price")
                assert operation.price is not None
                feed.set_price(operation.price, updated_at=now)
                detail = f"price {operation.price}"
            elif operation.op == "set_precision":
                _require(operation, "asset", "precision")
                assert asset is not None and operation.precision is not None
                ledger.set_asset_precision(deployment.admin, asset, operation.precision)
                detail = f"{asset} precision {operation.precision}"
            elif operation.op == "deposit":
                _require(operation, "user", "asset", "amount")
                assert user is not None and asset is not None and amount is not None
                native_value = operation.native_value
                if native_value is None:
                    is_native = canonical_asset(asset) == ledger.native_asset
                    native_value = amount if is_native else 0
                value = ledger.deposit(user, asset, amount, native_value=native_value)
                detail = f"{user} +{amount} (value {value})"
            else:
                _require(operation, "user", "asset", "amount")
                assert user is not None and asset is not None and amount is not None
                value = ledger.withdraw(user, asset, amount)
                detail = f"{user} -{amount} (value {value})"
        except VaultError as exc:
            result.outcomes.append(
                OperationOutcome(index, operation.op, False, f"{type(exc).__name__}: {exc}")
            )
            continue
        result.outcomes.append(OperationOutcome(index, operation.op, True, detail))

    result.stats = ledger.get_stats()
    return result
