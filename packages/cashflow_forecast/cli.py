"""CLI for the ``cashflow_forecast`` package.

Typer-based console interface over :mod:`cashflow_forecast.api`. The root
callback loads a local ``.env`` with ``python-dotenv`` (without overriding
variables already set) and configures logging before any subcommand runs.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from typer.models import OptionInfo

from .config import MAX_HORIZON_WEEKS, load_settings
from .logging_setup import configure_logging
from .models import ForecastReport, TransactionOut, WeekStart

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


class SortBy(str, Enum):
    DATE = "date"
    DESCRIPTION = "description"
    AMOUNT = "amount"
    TYPE = "type"


# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a bank CSV export with a header row",
    dir_okay=True,  # directories are reported by the handler
    file_okay=True,
    exists=False,  # allow non-existent here; the handler reports nice errors
)


def _read_or_exit(csv_path: Path) -> str:
    from .ingest.utils import read_csv_text

    try:
        return read_csv_text(csv_path)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {csv_path}")
    except IsADirectoryError:
        err_console.print(f"[red]Error:[/red] Not a file: {csv_path}")
    except PermissionError:
        err_console.print(f"[red]Error:[/red] Permission denied: {csv_path}")
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Failed to read '{csv_path}': {e}")
    raise typer.Exit(1)


def _write_or_echo(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Failed to write '{output}': {e}")
        raise typer.Exit(1) from e
    err_console.print(f"Wrote {output}")


app = typer.Typer(
    add_completion=False,
    help=(
        "Turn a bank CSV export into a weekly cash-flow forecast. "
        "Loads settings from a local .env before running."
    ),
)


@app.command("transactions")
def transactions_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    sort_by: Annotated[
        SortBy | None, typer.Option("--sort-by", help="Column to sort by.")
    ] = None,
    descending: Annotated[bool, typer.Option(help="Sort in descending order.")] = False,
    fmt: Annotated[
        OutputFormat, typer.Option("--format", help="Output format.")
    ] = OutputFormat.TABLE,
) -> None:
    """Show the normalized transactions parsed from a CSV export."""

    from .normalizers import normalize_csv_text
    from .render import sort_transactions, transactions_table

    transactions = normalize_csv_text(_read_or_exit(csv_path))
    rows = sort_transactions(
        transactions, sort_by.value if sort_by else None, descending=descending
    )

    if fmt is OutputFormat.JSON:
        payload = [TransactionOut.from_ctv(t).model_dump(mode="json") for t in rows]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not rows:
        console.print("No transactions found.")
        return
    console.print(transactions_table(rows))


@app.command("forecast")
def forecast_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    as_of: Annotated[
        datetime | None,
        typer.Option(
            "--as-of",
            formats=["%Y-%m-%d"],
            help="Reference date (YYYY-MM-DD) for the first forecast week; defaults to today.",
        ),
    ] = None,
    week_start: Annotated[
        WeekStart | None,
        typer.Option("--week-start", help="First day of the week (env CASHFLOW_WEEK_START)."),
    ] = None,
    weeks: Annotated[
        int | None,
        typer.Option(
            "--weeks",
            min=1,
            max=MAX_HORIZON_WEEKS,
            help="Weeks to forecast (env CASHFLOW_HORIZON_WEEKS).",
        ),
    ] = None,
    fmt: Annotated[
        OutputFormat, typer.Option("--format", help="Output format.")
    ] = OutputFormat.TABLE,
    output: Annotated[
        Path | None,
        typer.Option("--output", dir_okay=False, help="Write JSON output to this file."),
    ] = None,
) -> None:
    """Build the weekly cash-flow forecast for a CSV export."""

    from .api import build_forecast
    from .render import forecast_table

    settings = load_settings(horizon_weeks=weeks, week_start=week_start)
    csv_text = _read_or_exit(csv_path)
    report: ForecastReport = build_forecast(
        csv_text,
        reference_date=as_of.date() if as_of else None,
        settings=settings,
    )

    if fmt is OutputFormat.JSON or output is not None:
        _write_or_echo(report.model_dump_json(by_alias=True, indent=2), output)
        return

    console.print(forecast_table(report.weeks, horizon=settings.horizon_weeks))


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging, using rich
    formatting when stderr is a terminal.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(rich_output=sys.stderr.isatty())

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:
    app(prog_name="cashflow-forecast")


if __name__ == "__main__":  # pragma: no cover
    main()
