from __future__ import annotations

import pytest

from usd_vault.adapters.custody.in_memory import InMemoryCustody
from usd_vault.constants import NATIVE_ASSET
from usd_vault.errors import InsufficientAllowance, TransferFailed

TOKEN = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture
def custody():
    custody = InMemoryCustody()
    custody.fund("alice", NATIVE_ASSET, 5 * 10**18)
    custody.fund("alice", TOKEN, 1_000_000)
    return custody


def test_receive_and_send_native(custody):
    custody.receive_native("alice", 2 * 10**18)

    assert custody.wallet_balance("alice", NATIVE_ASSET) == 3 * 10**18
    assert custody.pool_balance(NATIVE_ASSET) == 2 * 10**18

    custody.send_native("alice", 10**18)

    assert custody.wallet_balance("alice", NATIVE_ASSET) == 4 * 10**18
    assert custody.pool_balance(NATIVE_ASSET) == 10**18


def test_receive_native_beyond_wallet_fails(custody):
    with pytest.raises(TransferFailed):
        custody.receive_native("alice", 6 * 10**18)

    assert custody.pool_balance(NATIVE_ASSET) == 0


def test_transfer_from_requires_allowance(custody):
    with pytest.raises(InsufficientAllowance):
        custody.transfer_from("alice", TOKEN, 100)

    assert custody.wallet_balance("alice", TOKEN) == 1_000_000


def test_transfer_from_consumes_allowance(custody):
    custody.approve("alice", TOKEN, 600_000)

    custody.transfer_from("alice", TOKEN, 400_000)

    assert custody.allowance("alice", TOKEN) == 200_000
    assert custody.wallet_balance("alice", TOKEN) == 600_000
    assert custody.pool_balance(TOKEN) == 400_000


def test_transfer_from_with_short_wallet_keeps_allowance(custody):
    custody.approve("alice", TOKEN, 5_000_000)

    with pytest.raises(TransferFailed):
        custody.transfer_from("alice", TOKEN, 2_000_000)

    assert custody.allowance("alice", TOKEN) == 5_000_000


def test_transfer_out_of_empty_pool_fails(custody):
    with pytest.raises(TransferFailed, match="Pool holds 0"):
        custody.transfer("alice", TOKEN, 1)


def test_asset_ids_are_canonicalized(custody):
    custody.approve("alice", TOKEN.lower(), 300)

    assert custody.allowance("alice", TOKEN) == 300

    custody.transfer_from("alice", TOKEN.lower(), 300)

    assert custody.wallet_balance("alice", TOKEN.lower()) == 999_700
    assert custody.pool_balance(TOKEN.lower()) == 300
    assert custody.allowance("alice", TOKEN) == 0
