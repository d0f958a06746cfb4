from __future__ import annotations

from .oracle_gateway import PriceOracleGateway, PriceSample
from .value_converter import ValueConverter

__all__ = [
    "PriceOracleGateway",
    "PriceSample",
    "ValueConverter",
]
