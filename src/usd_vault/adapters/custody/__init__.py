from __future__ import annotations

from .base import BaseCustodyAdapter
from .in_memory import InMemoryCustody

__all__ = ["BaseCustodyAdapter", "InMemoryCustody"]
