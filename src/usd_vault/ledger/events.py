from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union


@dataclass(frozen=True)
class DepositEvent:
    user: str
    asset: str
    amount: int


@dataclass(frozen=True)
class WithdrawalEvent:
    user: str
    asset: str
    amount: int


LedgerEvent = Union[DepositEvent, WithdrawalEvent]
EventListener = Callable[[LedgerEvent], None]
