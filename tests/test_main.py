from __future__ import annotations

import json
from textwrap import dedent
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from usd_vault.adapters.price_adapters.static import StaticPriceFeed
from usd_vault.constants import NATIVE_ASSET
from usd_vault.main import app

runner = CliRunner()

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "usd-vault.toml"
    path.write_text(
        dedent(
            f"""
            bank_cap_value = 10000000
            withdrawal_limit_value = 1000000
            log_level = "WARNING"

            [asset_precisions]
            "{USDC}" = 6
            """
        ).strip()
    )
    # the CLI writes USD_VAULT_CONFIG; registering it here restores it afterwards
    monkeypatch.setenv("USD_VAULT_CONFIG", str(path))
    return path


@pytest.fixture
def live_feed():
    feed = StaticPriceFeed(2000_00000000)
    with patch("usd_vault.ledger.bootstrap.ChainlinkPriceFeed", return_value=feed):
        yield feed


def test_show_config(config_file):
    result = runner.invoke(app, ["--config", str(config_file), "--show-config"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["bank_cap_value"] == 10_000_000
    assert data["network"] == "mainnet"


def test_price_command(config_file, live_feed):
    result = runner.invoke(app, ["--config", str(config_file), "price"])

    assert result.exit_code == 0
    assert "2,000.00000000" in result.stdout


def test_quote_command(config_file, live_feed):
    result = runner.invoke(app, ["--config", str(config_file), "quote", str(10**18)])

    assert result.exit_code == 0
    assert result.stdout.strip() == "2000000000 ($2,000.000000)"


def test_to_native_command(config_file, live_feed):
    result = runner.invoke(app, ["--config", str(config_file), "to-native", "500000"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "250000000000000"


def test_stale_price_exits_non_zero(config_file, live_feed):
    live_feed.set_price(2000_00000000, updated_at=1)

    result = runner.invoke(app, ["--config", str(config_file), "quote", "1"])

    assert result.exit_code == 1
    assert "StaleOracleData" in result.output


def write_scenario(tmp_path, operations):
    path = tmp_path / "scenario.json"
    path.write_text(
        json.dumps(
            {
                "price": 2000_00000000,
                "wallets": [{"user": "alice", "asset": NATIVE_ASSET, "amount": 10**18}],
                "operations": operations,
            }
        )
    )
    return path


def test_replay_command(config_file, tmp_path):
    scenario = write_scenario(
        tmp_path,
        [
            {"op": "deposit", "user": "alice", "asset": NATIVE_ASSET, "amount": 10**14},
            {"op": "withdraw", "user": "alice", "asset": NATIVE_ASSET, "amount": 10**15},
        ],
    )

    result = runner.invoke(app, ["--config", str(config_file), "replay", str(scenario)])

    assert result.exit_code == 0
    assert "InsufficientBalance" in result.stdout
    assert "$0.200000" in result.stdout


def test_replay_strict_fails_on_rejection(config_file, tmp_path):
    scenario = write_scenario(
        tmp_path,
        [{"op": "withdraw", "user": "alice", "asset": NATIVE_ASSET, "amount": 1}],
    )

    result = runner.invoke(
        app, ["--config", str(config_file), "replay", str(scenario), "--strict"]
    )

    assert result.exit_code == 1


def test_replay_reports_through_app_logger(config_file, tmp_path):
    scenario = write_scenario(
        tmp_path,
        [{"op": "withdraw", "user": "alice", "asset": NATIVE_ASSET, "amount": 1}],
    )
    log = MagicMock()

    with patch("usd_vault.main._build_logger", return_value=log):
        result = runner.invoke(
            app, ["--config", str(config_file), "replay", str(scenario), "--strict"]
        )

    assert result.exit_code == 1
    log.info.assert_called_once_with(
        "Replaying %d operations from %s", 1, scenario
    )
    log.error.assert_called_once_with("%d operations rejected in strict mode", 1)


def test_replay_limit_overrides(config_file, tmp_path):
    scenario = write_scenario(
        tmp_path,
        [{"op": "deposit", "user": "alice", "asset": NATIVE_ASSET, "amount": 10**15}],
    )

    result = runner.invoke(
        app,
        [
            "--config",
            str(config_file),
            "replay",
            str(scenario),
            "--bank-cap",
            "1000000",
            "--withdrawal-limit",
            "1000000",
            "--strict",
        ],
    )

    # $2.00 does not fit under a $1.00 cap
    assert result.exit_code == 1
    assert "CapExceeded" in result.stdout
