from __future__ import annotations

from .base import BasePriceFeed, RoundData
from .chainlink import ChainlinkPriceFeed
from .static import StaticPriceFeed

__all__ = ["BasePriceFeed", "RoundData", "ChainlinkPriceFeed", "StaticPriceFeed"]
