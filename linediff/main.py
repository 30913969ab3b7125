"""Command line entry point for comparing two texts."""

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from linediff.config import VIEWS, Config, load_config
from linediff.differ import (
    UNIFIED_PREFIXES,
    DiffResult,
    OperationKind,
    Statistics,
    compute_diff,
    serialize_unified,
)
from linediff.highlighter import HighlightedLine, side_by_side
from linediff.loader import STDIN, TextLoader
from linediff.reporter import ReportGenerator

logger = logging.getLogger(__name__)
console = Console()

STYLES = {
    OperationKind.INSERT: "green",
    OperationKind.DELETE: "red",
    OperationKind.EQUAL: "",
}


class InputError(Exception):
    """Raised when an input text cannot be loaded."""


def load_inputs(original: str, revised: str, config: Config) -> tuple[str, str]:
    """Load both inputs, raising InputError on the first failure."""

    async def _load() -> tuple:
        async with TextLoader(timeout=config.loader.timeout) as loader:
            return await loader.load_pair(
                original, revised, retry_count=config.loader.retry_count
            )

    results = asyncio.run(_load())
    for result in results:
        if not result.is_success:
            raise InputError(f"{result.source}: {result.error}")
    return results[0].content, results[1].content


def print_unified(result: DiffResult) -> None:
    for op in result:
        console.print(Text(f"{UNIFIED_PREFIXES[op.kind]}{op.text}", style=STYLES[op.kind]))


def _cell(line: HighlightedLine, style: str) -> Text:
    return Text(line.text, style=style if line.highlighted else "")


def print_side_by_side(
    original_text: str, revised_text: str, result: DiffResult, by_position: bool
) -> None:
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Original Text", ratio=1)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Modified Text", ratio=1)

    for row in side_by_side(original_text, revised_text, result, by_position=by_position):
        table.add_row(
            str(row.number),
            _cell(row.original, "red"),
            str(row.number),
            _cell(row.revised, "green"),
        )

    console.print(table)


def print_statistics(stats: Statistics) -> None:
    console.print("\n[bold]Diff Statistics:[/bold]")
    console.print(f"  [green]Additions: {stats.additions}[/green]")
    console.print(f"  [red]Deletions: {stats.deletions}[/red]")
    console.print(f"  Unchanged: {stats.unchanged}")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.command()
@click.argument("original")
@click.argument("revised")
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("--view", type=click.Choice(VIEWS), default=None, help="Diff view to print")
@click.option("--swap", is_flag=True, help="Swap original and revised inputs")
@click.option("--by-position", is_flag=True, help="Highlight by aligned line index")
@click.option("--stats/--no-stats", default=True, help="Print diff statistics")
@click.option("--output", "output_path", default=None, help="Write the unified diff to a file")
@click.option("--report/--no-report", default=False, help="Generate an HTML report")
@click.option("--name", default="diff", help="Report name")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def cli(
    original: str,
    revised: str,
    config_path: str | None,
    view: str | None,
    swap: bool,
    by_position: bool,
    stats: bool,
    output_path: str | None,
    report: bool,
    name: str,
    verbose: bool,
) -> None:
    """Compare ORIGINAL and REVISED line by line.

    Each input is a file path, '-' for stdin, or an http(s) URL.
    """
    # Load .env file for local development
    load_dotenv()
    setup_logging(verbose)

    try:
        if original == STDIN and revised == STDIN:
            raise click.UsageError("Only one input can be read from stdin")

        config = load_config(Path(config_path) if config_path else None)
        view = view or config.view
        by_position = by_position or config.highlight.by_position

        original_text, revised_text = load_inputs(original, revised, config)
        if swap:
            original_text, revised_text = revised_text, original_text

        result = compute_diff(original_text, revised_text)

        if view == "unified":
            print_unified(result)
        else:
            print_side_by_side(original_text, revised_text, result, by_position)

        if stats:
            print_statistics(result.statistics)

        if output_path:
            Path(output_path).write_text(serialize_unified(result), encoding="utf-8")
            console.print(f"[green]Diff written to {output_path}[/green]")

        if report:
            reporter = ReportGenerator(config.reports_dir, base_url=config.reports_base_url)
            report_time = datetime.now(UTC)
            path = reporter.generate_report(
                name,
                original_text,
                revised_text,
                result,
                report_time,
                by_position=by_position,
                marker=config.highlight.marker,
            )
            reporter.update_main_index()
            console.print(f"Report: {path}")
            if reporter.base_url:
                console.print(f"Report URL: {reporter.get_report_url(report_time)}{name}.html")

    except click.UsageError:
        raise
    except (FileNotFoundError, InputError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1) from None
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1) from None


if __name__ == "__main__":
    cli()
