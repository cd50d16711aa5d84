"""perfresults CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from perfresults import __version__
from perfresults._constants import DEFAULT_CONFIG
from perfresults.config import (
    ConfigError,
    PerfResultsConfig,
    generate_example_config_yaml,
    load_config,
)
from perfresults.errors import PerfResultsError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="perfresults",
    help="Convert, validate and compare performance test results",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    epilog="[dim]Workflow: gatling2csv | extract-metrics -> csv2html -> compare-atop[/dim]",
)

console = Console()

# Global config (loaded by the app callback)
_config: PerfResultsConfig | None = None


# =============================================================================
# Helper Functions
# =============================================================================


def resolve_config_path(config_file: Path | None) -> Path | None:
    """Resolve config file path, using ./perfresults.yaml when present.

    Unlike an explicit path, a missing default file is not an error: the
    built-in defaults apply.
    """
    if config_file is not None:
        return config_file

    default = Path(DEFAULT_CONFIG)
    if default.exists():
        return default
    return None


def get_config() -> PerfResultsConfig:
    """Get the loaded config, falling back to defaults."""
    global _config
    if _config is None:
        _config = PerfResultsConfig()
    return _config


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]OK[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]ERROR[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]WARN[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]...[/blue] {message}")


def _fail(e: Exception) -> typer.Exit:
    print_error(escape(str(e)))
    return typer.Exit(1)


def _output_dir(option: Path | None) -> Path | None:
    return option if option is not None else get_config().output_dir


@app.callback()
def main_callback(
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help=f"Path to configuration YAML file (default: ./{DEFAULT_CONFIG} if present)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress while processing files"),
    ] = False,
) -> None:
    """Load configuration and set up logging."""
    global _config
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    try:
        _config = load_config(resolve_config_path(config_file))
    except ConfigError as e:
        raise _fail(e)  # noqa: B904


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"perfresults version {__version__}")


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the configuration file"),
    ] = Path(DEFAULT_CONFIG),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write an example configuration file."""
    if output.exists() and not force:
        print_error(f"{output} already exists (use --force to overwrite)")
        raise typer.Exit(1)
    output.write_text(generate_example_config_yaml())
    print_success(f"Wrote {output}")


@app.command()
def gatling2csv(
    results_dir: Annotated[Path, typer.Argument(help="Gatling results directory")],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the CSV/HTML output"),
    ] = None,
) -> None:
    """Convert Gatling request statistics to CSV and HTML."""
    from perfresults.gatling import gatling2csv as run_gatling2csv

    try:
        csv_path = run_gatling2csv(
            results_dir,
            output_dir=_output_dir(output_dir),
            table_class=get_config().html.table_class,
        )
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904
    print_success(f"Wrote {csv_path}")


@app.command()
def csv2html(
    path: Annotated[Path, typer.Argument(help="CSV file, or directory searched recursively")],
) -> None:
    """Render CSV files as HTML tables."""
    from perfresults.tables import csv2html as render_one
    from perfresults.tables import csv2html_directory

    table_class = get_config().html.table_class
    try:
        if not path.is_dir():
            print_success(f"Wrote {render_one(path, table_class=table_class)}")
            return
        outcomes = csv2html_directory(path, table_class=table_class)
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904

    table = Table(title=f"CSV files in {path}")
    table.add_column("CSV", style="cyan")
    table.add_column("Status")
    for outcome in outcomes:
        if outcome.success:
            status = "[green]rendered[/green]"
        else:
            status = f"[red]{escape(outcome.error)}[/red]"
        table.add_row(str(outcome.csv_path), status)
    console.print(table)

    failed = [o for o in outcomes if not o.success]
    if failed:
        print_warning(f"{len(failed)} of {len(outcomes)} files could not be rendered")


@app.command("extract-table")
def extract_table(
    path: Annotated[Path, typer.Argument(help="HTML file written by csv2html")],
) -> None:
    """Print the table markup of a csv2html document."""
    from perfresults.tables import extract_table_from_csv2html_output

    try:
        fragment = extract_table_from_csv2html_output(path)
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904
    typer.echo(fragment, nl=False)


@app.command("validate-csv")
def validate_csv(
    path: Annotated[Path, typer.Argument(help="CSV file to validate")],
) -> None:
    """Check that a CSV file has a header, data rows and uniform width."""
    from perfresults.tables import validate_csv as run_validate

    try:
        run_validate(path)
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904
    print_success(f"{path} is valid")


@app.command()
def average(
    path: Annotated[Path, typer.Argument(help="CSV file to average")],
    skip_first_column: Annotated[
        bool,
        typer.Option("--skip-first-column", "-s", help="Treat the first column as labels"),
    ] = False,
) -> None:
    """Append a row of column averages to a CSV file."""
    from perfresults.tables import average_csv

    places = get_config().comparison.decimal_places
    try:
        averages = average_csv(path, skip_first_column=skip_first_column, places=places)
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904
    formatted = ", ".join(f"{a:.{places}f}" for a in averages)
    print_success(f"Appended averages to {path}: {formatted}")


def _comparison_table(title: str, comparison) -> Table:
    table = Table(title=title)
    table.add_column("Row", style="cyan")
    table.add_column("Column")
    table.add_column("Baseline", justify="right")
    table.add_column("Candidate", justify="right")
    table.add_column("Change", justify="right")
    for key, column, result in comparison.cells:
        if result.percent is None:
            style = "yellow"
        elif result.diff > 0:
            style = "red"
        elif result.diff < 0:
            style = "green"
        else:
            style = "dim"
        table.add_row(
            key,
            column,
            f"{result.baseline:g}",
            f"{result.candidate:g}",
            f"[{style}]{result.formatted}[/{style}]",
        )
    return table


@app.command("compare-atop")
def compare_atop(
    baseline: Annotated[Path, typer.Argument(help="Baseline atop CSV")],
    candidate: Annotated[Path, typer.Argument(help="Candidate atop CSV")],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Write comparison CSV/HTML files here"),
    ] = None,
) -> None:
    """Compare the atop results of a candidate run against a baseline."""
    from perfresults.atop import compare_atop_csv_results

    cfg = get_config()
    try:
        result = compare_atop_csv_results(
            baseline,
            candidate,
            output_dir=_output_dir(output_dir),
            marker=cfg.atop.marker,
            places=cfg.comparison.decimal_places,
            table_class=cfg.html.table_class,
        )
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904

    console.print(Panel(f"[bold]{baseline}[/bold] -> [bold]{candidate}[/bold]", expand=False))
    for title, section in (("Summary", result.summary), ("Detail", result.detail)):
        console.print(_comparison_table(title, section))
        for key in section.only_in_baseline:
            print_warning(f"{title}: '{key}' only in baseline")
        for key in section.only_in_candidate:
            print_warning(f"{title}: '{key}' only in candidate")
    for path in result.outputs:
        print_success(f"Wrote {path}")


@app.command("extract-metrics")
def extract_metrics(
    path: Annotated[
        Path, typer.Argument(help="puppet-metrics-collector tarball or directory")
    ],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the CSV/HTML output"),
    ] = None,
) -> None:
    """Tabulate catalog metrics from puppet-metrics-collector output."""
    from perfresults.collector import extract_puppet_metrics_collector_data

    cfg = get_config()
    try:
        result = extract_puppet_metrics_collector_data(
            path,
            output_dir=_output_dir(output_dir),
            config=cfg.collector,
            table_class=cfg.html.table_class,
            places=cfg.comparison.decimal_places,
        )
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904

    for outcome in result.outcomes:
        if outcome.skipped:
            print_info(f"Ignored {outcome.path} (no {cfg.collector.category})")
        elif outcome.error:
            print_warning(outcome.error)
    print_success(f"Wrote {result.csv_path} ({len(result.records)} documents)")


@app.command("verify-baseline")
def verify_baseline(
    baseline_version: Annotated[str, typer.Argument(help="Baseline build number")],
) -> None:
    """Check that a build has baseline results in the warehouse."""
    from perfresults.query import verify_baseline_version

    try:
        verify_baseline_version(baseline_version)
    except PerfResultsError as e:
        raise _fail(e)  # noqa: B904
    print_success(f"Baseline {baseline_version} found")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
