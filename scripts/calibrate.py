#!/usr/bin/env python
"""
Calibrate a 2PL model on scored answer data and save the result.
"""

from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from calibration_service.core.data import load_csv_to_score_rows
from calibration_service.irt import (
    CalibrationService,
    InMemoryScoreRepository,
    compute_item_fit,
)
from calibration_service.irt.estimation import (
    CalibrationResult,
    CalibrationSettings,
    InsufficientDataError,
    build_response_matrix,
)

BACKEND_DIR = Path(__file__).parent.parent.absolute()
DEFAULT_OUTPUT_DIR = BACKEND_DIR / "data" / "calibrations"

console = Console(force_terminal=True, legacy_windows=True)
app = typer.Typer()


def save_result(result: CalibrationResult, output_path: Path) -> None:
    """Save calibration result to json file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(result.model_dump_json(indent=4))


def _item_table(result: CalibrationResult) -> Table:
    table = Table(title="Item parameters")
    table.add_column("Item")
    table.add_column("a", justify="right")
    table.add_column("SE(a)", justify="right")
    table.add_column("b", justify="right")
    table.add_column("SE(b)", justify="right")
    for cal in result.item_calibrations:
        table.add_row(
            str(cal.item_id),
            f"{cal.discrimination:.3f}",
            f"{cal.se_discrimination:.3f}",
            f"{cal.difficulty:.3f}",
            f"{cal.se_difficulty:.3f}",
        )
    return table


@app.command()
def main(
    input_path: Path = typer.Argument(
        ...,
        help="Path to CSV file with scores (columns: respondent_id, item_id, normalized_score)",
    ),
    competency: str | None = typer.Option(
        None,
        "-c",
        "--competency",
        help="Competency id stored on the result (defaults to the file stem)",
    ),
    output_dir: Path = typer.Option(
        DEFAULT_OUTPUT_DIR,
        "-o",
        "--output-dir",
        help="Output directory for the calibration result",
    ),
    show_items: bool = typer.Option(
        False, "--show-items", help="Print the calibrated item table"
    ),
) -> None:
    """Calibrate a 2PL model with JMLE and save the result as JSON."""

    # Validate input
    if not input_path.exists():
        console.print(f"[red]File not found: {input_path}[/red]")
        raise typer.Exit(1)
    if input_path.suffix != ".csv":
        console.print("[red]Only .csv files are supported[/red]")
        raise typer.Exit(1)

    # Load data
    console.print("[dim]Loading data...[/dim]")
    try:
        rows = load_csv_to_score_rows(input_path)
    except ValueError as e:
        console.print(f"[red]Error loading CSV: {e}[/red]")
        raise typer.Exit(1) from e

    competency_id = competency or input_path.stem
    config = CalibrationSettings().to_config()
    repository = InMemoryScoreRepository({competency_id: rows})
    service = CalibrationService(repository, config)

    console.print(
        Panel(
            f"[bold]Calibrate 2PL Model[/bold]\n\n"
            f"Input: [cyan]{input_path}[/cyan]\n"
            f"Competency: [cyan]{competency_id}[/cyan]\n"
            f"Scores: [cyan]{len(rows)}[/cyan]\n"
            f"Max iterations: [cyan]{config.convergence.max_iterations}[/cyan]",
            title="Configuration",
        )
    )

    # Calibrate
    console.print("[dim]Running JMLE...[/dim]")
    try:
        result = service.calibrate(competency_id)
    except InsufficientDataError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    console.print(
        f"  {result.convergence_status.value} "
        f"({result.n_iterations} iterations, "
        f"{result.n_items} items, {result.n_respondents} respondents, "
        f"max change={result.max_parameter_change:.5f})"
    )

    if show_items:
        console.print(_item_table(result))

    # Run diagnostics
    console.print("[dim]Running diagnostics...[/dim]")
    data = build_response_matrix(rows, config)
    fit = compute_item_fit(
        data, result, np.array(result.abilities, dtype=np.float64)
    )
    abs_diff = np.abs(fit.difference)

    console.print("Model Diagnostics:")
    console.print(f"  Mean diff = {float(np.mean(fit.difference)):.4f}")
    for p in [50, 90]:
        console.print(
            f"  {p}th percentile |diff| = "
            f"{float(np.quantile(abs_diff, q=p / 100)):.4f}"
        )
    console.print(f"  Max |diff| = {fit.max_abs_difference:.4f}")

    # Save result
    output_path = output_dir / f"{input_path.stem}.json"
    save_result(result, output_path)

    console.print(
        Panel(
            f"[bold green]Calibration saved[/bold green]\n\n"
            f"Output: [cyan]{output_path}[/cyan]",
            title="Done",
        )
    )


if __name__ == "__main__":
    app()
