"""CLI application using Typer for forest plot data preparation."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config.presentation import load_plot_config
from ..config.settings import settings
from ..core.errors import ForestPrepError, RecordValidationError
from ..core.normalization import normalize_records
from ..io.loader import load_rows
from ..io.paths import spec_output_path
from ..io.validation import validate_records
from ..plot.assembler import ForestPlotSpec, PlotSpecAssembler
from ..utils.logging import get_logger

app = typer.Typer(
    name="forestprep",
    help="Prepare effect-size tables for forest plot rendering",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def _preview(spec: ForestPlotSpec) -> Table:
    presentation = spec.presentation
    table = Table(title=presentation.title, show_lines=False)
    header = spec.text[0]
    for label, align in zip(header, presentation.align):
        table.add_column(label, justify=align, style="bold")
    table.add_column("Box", justify="right", style="dim")
    for i, row in enumerate(spec.text[1:], start=1):
        size = spec.box_sizes[i]
        cells = [escape(cell.replace("\n", " / ")) for cell in row]
        if spec.is_summary[i]:
            cells = [f"[bold]{c}[/bold]" if c else c for c in cells]
        table.add_row(*cells, f"{size:.3f}" if size is not None else "")
    return table


@app.command()
def validate(
    input_file: Path = typer.Argument(..., help="Workbook (.xlsx) or CSV with forest plot rows", exists=True),
    sheet: Optional[str] = typer.Option(None, "--sheet", "-s", help="Worksheet name (default from settings)"),
    strict: bool = typer.Option(settings.strict, "--strict/--lenient", help="Treat warnings as errors"),
) -> None:
    """Check every row and report all problems at once."""
    console.print(f"[bold blue]Validating[/bold blue] {input_file}")
    try:
        rows = load_rows(input_file, sheet)
    except (ForestPrepError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    records = normalize_records(rows)
    validator = validate_records(records, rows, strict=strict)
    console.print(f"Rows: {len(records)}")
    if not validator.print_report(console):
        raise typer.Exit(1)


@app.command()
def build(
    input_file: Path = typer.Argument(..., help="Workbook (.xlsx) or CSV with forest plot rows", exists=True),
    sheet: Optional[str] = typer.Option(None, "--sheet", "-s", help="Worksheet name (default from settings)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML file with presentation, ticks and header", exists=True),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Spec JSON path (default: timestamped directory)"),
    strict: bool = typer.Option(settings.strict, "--strict/--lenient", help="Treat warnings as errors"),
    preview: bool = typer.Option(True, "--preview/--no-preview", help="Print the text table"),
) -> None:
    """Build the render-ready forest plot spec and save it as JSON."""
    console.print(f"[bold blue]Building forest plot spec[/bold blue] from {input_file}")
    try:
        plot_config = load_plot_config(config)
        rows = load_rows(input_file, sheet)
    except (ForestPrepError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    records = normalize_records(rows)
    validator = validate_records(records, rows, strict=strict, xlog=plot_config.presentation.xlog)
    try:
        validator.raise_for_errors()
        spec = PlotSpecAssembler.from_config(plot_config).assemble(records)
    except RecordValidationError:
        validator.print_report(console)
        console.print("[red]✗ Spec not built; fix the rows above[/red]")
        raise typer.Exit(1)
    if validator.warnings:
        validator.print_report(console)
    if preview:
        console.print(_preview(spec))
    if output is None:
        output = spec_output_path(input_file)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(spec.model_dump_json(indent=2), encoding="utf-8")
    console.print(f"[green]✓ Spec with {spec.n_rows} rows saved to {output}[/green]")


@app.command()
def ticks(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML file with a ticks section", exists=True),
) -> None:
    """Show the axis tick positions and labels in use."""
    try:
        plot_config = load_plot_config(config)
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    assembler = PlotSpecAssembler.from_config(plot_config)
    table = Table(title="Axis ticks")
    table.add_column("Position", justify="right", style="cyan")
    table.add_column("Label", style="magenta")
    for position, label in assembler.ticks.pairs():
        table.add_row(f"{position:g}", label)
    console.print(table)
    console.print(f"Clip range: {list(plot_config.presentation.clip)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
