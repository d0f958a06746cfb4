from __future__ import annotations

import logging

import backoff
import requests
from eth_typing import URI
from web3 import Web3

from ...abi import load_aggregator_abi
from .base import BasePriceFeed, RoundData

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


class ChainlinkPriceFeed(BasePriceFeed):
    """Reads an AggregatorV3Interface price feed over JSON-RPC."""

    def __init__(
        self,
        rpc_url: str,
        feed_address: str,
        *,
        max_tries: int = 3,
        w3: Web3 | None = None,
    ):
        self.w3 = w3 or Web3(
            Web3.HTTPProvider(URI(rpc_url), request_kwargs={"timeout": 15})
        )
        self.feed_address = Web3.to_checksum_address(feed_address)
        self.max_tries = max_tries
        self.contract = self.w3.eth.contract(
            address=self.feed_address,
            abi=load_aggregator_abi(),
        )

    @property
    def feed_name(self) -> str:
        return f"chainlink:{self.feed_address}"

    def _call(self, fn):
        @backoff.on_exception(
            backoff.expo,
            _TRANSPORT_ERRORS,
            max_tries=self.max_tries,
            jitter=backoff.full_jitter,
            on_backoff=lambda details: logger.warning(
                "Retrying %s (attempt %d): %s",
                self.feed_name,
                details["tries"],
                details.get("exception"),
            ),
        )
        def _with_retry():
            return fn.call()

        return _with_retry()

    def decimals(self) -> int:
        return int(self._call(self.contract.functions.decimals()))

    def latest_round_data(self) -> RoundData:
        round_id, answer, started_at, updated_at, answered_in_round = self._call(
            self.contract.functions.latestRoundData()
        )
        return RoundData(
            round_id=int(round_id),
            answer=int(answer),
            started_at=int(started_at),
            updated_at=int(updated_at),
            answered_in_round=int(answered_in_round),
        )
