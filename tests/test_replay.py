from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from usd_vault.constants import NATIVE_ASSET
from usd_vault.ledger.vault import LedgerStats
from usd_vault.replay import Scenario, run_scenario
from usd_vault.settings import VaultSettings

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture
def settings():
    return VaultSettings(
        bank_cap_value=10_000_000,
        withdrawal_limit_value=1_000_000,
        asset_precisions={USDC: 6},
    )


def make_scenario(**overrides) -> Scenario:
    body = {
        "price": 2000_00000000,
        "wallets": [
            {"user": "alice", "asset": NATIVE_ASSET, "amount": 10**18},
            {"user": "alice", "asset": USDC, "amount": 5_000_000},
        ],
        "allowances": [{"user": "alice", "asset": USDC, "amount": 5_000_000}],
        "operations": [
            {"op": "deposit", "user": "alice", "asset": NATIVE_ASSET, "amount": 250_000_000_000_000},
            {"op": "deposit", "user": "alice", "asset": NATIVE_ASSET, "amount": 4_800_000_000_000_000},
            {"op": "set_price", "price": 6000_00000000},
            {"op": "withdraw", "user": "alice", "asset": NATIVE_ASSET, "amount": 250_000_000_000_000},
            {"op": "set_price", "price": 2000_00000000},
            {"op": "withdraw", "user": "alice", "asset": NATIVE_ASSET, "amount": 250_000_000_000_000},
        ],
    }
    body.update(overrides)
    return Scenario.model_validate(body)


def test_replay_records_outcomes_and_stats(settings):
    result = run_scenario(settings, make_scenario())

    assert [o.ok for o in result.outcomes] == [True, False, True, False, True, True]
    assert result.outcomes[1].detail.startswith("CapExceeded")
    assert result.outcomes[3].detail.startswith("WithdrawalLimitExceeded")
    assert result.stats == LedgerStats(500_000, 500_000)
    assert [o.index for o in result.rejected] == [1, 3]


def test_replay_token_deposit_and_precision_update(settings):
    scenario = make_scenario(
        operations=[
            {"op": "deposit", "user": "alice", "asset": USDC, "amount": 2_000_000},
            {"op": "deposit", "user": "alice", "asset": USDC, "amount": 1_000, "native_value": 1_000},
            {"op": "set_precision", "asset": USDC, "precision": 5},
            {"op": "set_precision", "asset": USDC, "precision": 7},
            {"op": "withdraw", "user": "alice", "asset": USDC, "amount": 2_000_000},
        ]
    )

    result = run_scenario(settings, scenario)

    assert [o.ok for o in result.outcomes] == [True, False, False, True, True]
    assert result.outcomes[1].detail.startswith("NativeValueMismatch")
    assert result.outcomes[2].detail.startswith("InvalidAsset")
    assert result.stats == LedgerStats(2_000_000, 200_000)


def test_replay_rejects_incomplete_operation(settings):
    scenario = make_scenario(operations=[{"op": "deposit", "user": "alice"}])

    with pytest.raises(ValueError, match="missing asset, amount"):
        run_scenario(settings, scenario)


def test_scenario_rejects_unknown_operation():
    with pytest.raises(ValidationError):
        make_scenario(operations=[{"op": "borrow", "user": "alice"}])


def test_scenario_from_file(tmp_path):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps({"price": 1, "operations": []}))

    scenario = Scenario.from_file(path)

    assert scenario.price == 1
    assert scenario.wallets == []
