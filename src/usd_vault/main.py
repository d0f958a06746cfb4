"""CLI entrypoint for usd-vault."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from .constants import NATIVE_ASSET
from .errors import VaultError
from .formatter import format_usd, print_price, print_replay
from .ledger.bootstrap import build_converter
from .ledger.registry import AssetRegistry
from .logger import setup_logging
from .processors.value_converter import ValueConverter
from .replay import Scenario, run_scenario
from .settings import Network, VaultSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="USD-denominated vault ledger tooling.",
)


def _build_logger() -> logging.Logger:
    return logging.getLogger("usd_vault")


def _state(ctx: typer.Context) -> AppState:
    return ctx.obj


def _live_converter(state: AppState) -> ValueConverter:
    """Converter backed by the configured on-chain feed. Only the native asset is priced."""
    log = state.logger
    log.debug(
        "Using %s price feed via %s",
        state.settings.network.value,
        state.settings.rpc_url_required,
    )
    return build_converter(state.settings, AssetRegistry([]))


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"Error ({type(exc).__name__}): {exc}", err=True)
    return typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [usd_vault] table).",
        ),
    ] = None,
    network: Annotated[
        Network | None,
        typer.Option("--network", "-n", help="Network to use (mainnet, sepolia, or base)."),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="RPC endpoint; overrides the network default."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option("--show-config", help="Print effective config and exit."),
    ] = False,
):
    """Load configuration shared by every command."""
    if config_path:
        os.environ["USD_VAULT_CONFIG"] = str(config_path)

    init_kwargs: dict[str, Network | str] = {}
    if network is not None:
        init_kwargs["network"] = network
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    try:
        settings = VaultSettings(**init_kwargs)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc))

    setup_logging(settings.log_level)
    ctx.obj = AppState(settings=settings, logger=_build_logger())

    if show_config:
        typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def price(ctx: typer.Context):
    """Read the native asset's current USD price with freshness enforced."""
    converter = _live_converter(_state(ctx))
    try:
        sample = converter.gateway.current_unit_price(NATIVE_ASSET)
    except VaultError as exc:
        raise _fail(exc)
    print_price(sample, converter.gateway.feed.feed_name)


@app.command()
def quote(
    ctx: typer.Context,
    amount: Annotated[int, typer.Argument(help="Native amount in wei.", min=0)],
):
    """Unit-of-account value of a native amount."""
    converter = _live_converter(_state(ctx))
    try:
        value = converter.to_unit_value(NATIVE_ASSET, amount)
    except VaultError as exc:
        raise _fail(exc)
    typer.echo(f"{value} ({format_usd(value)})")


@app.command("to-native")
def to_native(
    ctx: typer.Context,
    unit_value: Annotated[
        int, typer.Argument(help="Unit-of-account value (6 decimals).", min=0)
    ],
):
    """Native amount (wei) worth a unit-of-account value at the current price."""
    converter = _live_converter(_state(ctx))
    try:
        amount = converter.to_native_amount(unit_value)
    except VaultError as exc:
        raise _fail(exc)
    typer.echo(str(amount))


@app.command()
def replay(
    ctx: typer.Context,
    scenario_path: Annotated[
        Path, typer.Argument(help="JSON scenario file.", exists=True, dir_okay=False)
    ],
    bank_cap: Annotated[
        int | None, typer.Option("--bank-cap", help="Override bank_cap_value.")
    ] = None,
    withdrawal_limit: Annotated[
        int | None,
        typer.Option("--withdrawal-limit", help="Override withdrawal_limit_value."),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit non-zero if any operation is rejected."),
    ] = False,
):
    """Run a scenario against an in-memory ledger priced by a static feed."""
    state = _state(ctx)
    log = state.logger
    overrides: dict[str, int] = {}
    if bank_cap is not None:
        overrides["bank_cap_value"] = bank_cap
    if withdrawal_limit is not None:
        overrides["withdrawal_limit_value"] = withdrawal_limit

    try:
        settings = state.settings.model_copy(update=overrides)
        scenario = Scenario.from_file(scenario_path)
        log.info(
            "Replaying %d operations from %s", len(scenario.operations), scenario_path
        )
        result = run_scenario(settings, scenario)
    except (ValidationError, ValueError) as exc:
        raise typer.BadParameter(str(exc))
    except VaultError as exc:
        raise _fail(exc)

    print_replay(result)

    if strict and result.rejected:
        log.error("%d operations rejected in strict mode", len(result.rejected))
        raise typer.Exit(code=1)


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
