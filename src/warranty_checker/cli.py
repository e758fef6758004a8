"""Command-line interface for warranty_checker.

Provides the entry point and subcommands for checking warranty status of
one or more serial numbers and exporting batch reports.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from warranty_checker.config import WarrantySettings
from warranty_checker.engine import WarrantyEngine
from warranty_checker.exceptions import InvalidSerialError
from warranty_checker.models import BatchReport, WarrantyRecord, WarrantyStatus, normalize_serial
from warranty_checker.reporters import MarkdownReporter

app = typer.Typer(
    name="warranty-checker",
    help="Check device warranty status against the vendor support site.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("warranty_checker")

STATUS_STYLES = {
    WarrantyStatus.ACTIVE: "green",
    WarrantyStatus.EXPIRING_SOON: "yellow",
    WarrantyStatus.EXPIRED: "red",
    WarrantyStatus.NOT_FOUND: "dim",
    WarrantyStatus.ERROR: "bold red",
}


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("warranty_checker").setLevel(level)


def _validate_serials(raw_serials: list[str]) -> tuple[list[str], list[str]]:
    """Split input into normalized valid serials and error messages.

    Duplicates are dropped, keeping the first occurrence.
    """
    valid: list[str] = []
    errors: list[str] = []
    for raw in raw_serials:
        try:
            serial = normalize_serial(raw)
        except InvalidSerialError as e:
            errors.append(str(e))
            continue
        if serial not in valid:
            valid.append(serial)
    return valid, errors


def _results_table(results: list[WarrantyRecord]) -> Table:
    table = Table(title="Warranty Status")
    table.add_column("Serial Number", style="bold")
    table.add_column("Product")
    table.add_column("End Date")
    table.add_column("Days Left", justify="right")
    table.add_column("Status")
    table.add_column("Notes", overflow="fold")

    for record in results:
        style = STATUS_STYLES.get(record.warranty_status, "")
        table.add_row(
            record.serial_number,
            escape(record.product_name or "-"),
            record.warranty_end_date or "-",
            "-" if record.days_remaining is None else str(record.days_remaining),
            f"[{style}]{record.warranty_status.value}[/{style}]" if style else record.warranty_status.value,
            escape(record.error_message or ""),
        )
    return table


async def _run_check(
    serials: list[str],
    settings: WarrantySettings,
) -> BatchReport:
    """Resolve a batch with a progress spinner; always tears the engine down."""
    async with WarrantyEngine(settings) as engine:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=err_console,
            transient=True,
        ) as progress:
            task = progress.add_task(
                f"Checking {len(serials)} serial numbers...", total=None
            )

            def _on_chunk(done: int, total: int) -> None:
                progress.update(
                    task, description=f"Checked chunk {done}/{total}..."
                )

            return await engine.check_batch(serials, on_chunk=_on_chunk)


async def _run_lookup(serial: str, settings: WarrantySettings) -> WarrantyRecord:
    async with WarrantyEngine(settings) as engine:
        return await engine.resolve_one(serial)


@app.command()
def check(
    serials: Annotated[
        list[str],
        typer.Argument(help="Serial numbers to check (6-15 alphanumeric characters)"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write a Markdown report to this path",
        ),
    ] = None,
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Custom Jinja2 template for the report",
            exists=True,
            readable=True,
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print results as JSON instead of a table",
        ),
    ] = False,
    headful: Annotated[
        bool,
        typer.Option(
            "--headful",
            help="Show the browser window while scraping",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Check warranty status for a batch of serial numbers.

    Exit codes:
        0 - Batch processed (individual records may still be errors)
        1 - Invalid input or the batch could not be processed
    """
    _setup_logging(verbose)
    settings = WarrantySettings.from_env(**({"headless": False} if headful else {}))

    valid, errors = _validate_serials(serials)
    for message in errors:
        err_console.print(f"[yellow]Skipping:[/yellow] {escape(message)}")

    if not valid:
        err_console.print("[red]Error:[/red] No valid serial numbers")
        raise typer.Exit(code=1)

    if len(valid) > settings.max_batch_size:
        err_console.print(
            f"[red]Error:[/red] Maximum {settings.max_batch_size} serial numbers "
            f"allowed per request, got {len(valid)}"
        )
        raise typer.Exit(code=1)

    try:
        report = asyncio.run(_run_check(valid, settings))
    except Exception as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(report.to_dict()))
    else:
        console.print(_results_table(report.results))
        console.print(
            f"Processed [bold]{report.total_processed}[/bold] serial numbers "
            f"in {report.processing_time:.1f}s ({report.errors} errors)"
        )

    if output:
        reporter = MarkdownReporter(template_path=template)
        try:
            reporter.write(report, output)
        except Exception as e:
            err_console.print(f"[red]Error writing output:[/red] {escape(str(e))}")
            raise typer.Exit(code=1)
        console.print(f"[green]Generated:[/green] {output}")

    raise typer.Exit(code=0)


@app.command()
def lookup(
    serial: Annotated[str, typer.Argument(help="Serial number to check")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the record as JSON"),
    ] = False,
    headful: Annotated[
        bool,
        typer.Option("--headful", help="Show the browser window while scraping"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Check warranty status for a single serial number."""
    _setup_logging(verbose)
    settings = WarrantySettings.from_env(**({"headless": False} if headful else {}))

    try:
        serial = normalize_serial(serial)
    except InvalidSerialError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    try:
        record = asyncio.run(_run_lookup(serial, settings))
    except Exception as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(record.to_dict()))
    else:
        console.print(_results_table([record]))
    raise typer.Exit(code=0)


if __name__ == "__main__":
    app()
