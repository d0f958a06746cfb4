"""Rich console output for CLI commands."""

from __future__ import annotations

from decimal import Decimal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .constants import ORACLE_PRICE_DECIMALS, REFERENCE_DECIMALS
from .processors.oracle_gateway import PriceSample
from .replay import ReplayResult


def format_units(value: int, decimals: int) -> str:
    """Format a fixed-point integer with comma separators, e.g. 1,234.500000."""
    return f"{Decimal(value).scaleb(-decimals):,.{decimals}f}"


def format_usd(unit_value: int) -> str:
    return f"${format_units(unit_value, REFERENCE_DECIMALS)}"


def print_price(sample: PriceSample, feed_name: str, console: Console | None = None) -> None:
    console = console or Console()

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="cyan")
    table.add_row("Feed", feed_name)
    table.add_row("Price", f"${format_units(sample.price, ORACLE_PRICE_DECIMALS)}")
    table.add_row("Round", str(sample.round_id))
    table.add_row("Age", f"{sample.age_seconds}s")

    console.print(Panel(table, title="[bold]ETH / USD[/]", border_style="blue"))


def print_replay(result: ReplayResult, console: Console | None = None) -> None:
    console = console or Console()

    ops_table = Table(title="Operations", show_lines=False)
    ops_table.add_column("#", justify="right", style="dim")
    ops_table.add_column("Op")
    ops_table.add_column("Result")
    ops_table.add_column("Detail", overflow="fold")
    for outcome in result.outcomes:
        status = "[green]ok[/]" if outcome.ok else "[red]rejected[/]"
        ops_table.add_row(str(outcome.index), outcome.op, status, outcome.detail)
    console.print(ops_table)

    if result.stats is not None:
        stats_table = Table(show_header=False, box=None, padding=(0, 1))
        stats_table.add_column("Key", style="dim")
        stats_table.add_column("Value", style="green")
        stats_table.add_row(
            "Total deposited", format_usd(result.stats.total_deposited_value)
        )
        stats_table.add_row(
            "Total withdrawn", format_usd(result.stats.total_withdrawn_value)
        )
        stats_table.add_row("Rejected", str(len(result.rejected)))
        console.print(Panel(stats_table, title="[bold]Ledger Stats[/]", border_style="green"))
