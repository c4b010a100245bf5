"""Command-line interface for hourcast."""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from hourcast.dataset.models import WeatherDataset

app = typer.Typer(
    name="hourcast",
    help="Hourly normalization of NWS gridpoint forecasts.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Log level (DEBUG, INFO, WARNING)."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON."),
    ] = False,
) -> None:
    """Configure logging for all commands."""
    from hourcast.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


def _parse_now(now: str | None) -> datetime | None:
    """Parse the --now option."""
    if now is None:
        return None

    from hourcast.errors import PayloadError
    from hourcast.ingestion.payload import parse_instant

    try:
        return parse_instant(now)
    except PayloadError as e:
        console.print(f"[red]Error: invalid --now value {now!r}[/red]")
        raise typer.Exit(code=1) from e


def _summary_row(dataset: "WeatherDataset") -> tuple[str, str, str]:
    """Temperature range, max precipitation chance and total precipitation."""
    from hourcast.dataset.models import Quantity

    temps = dataset.series(Quantity.TEMPERATURE)
    pop = dataset.series(Quantity.PROBABILITY_OF_PRECIPITATION)
    qpf = dataset.series(Quantity.QUANTITATIVE_PRECIPITATION)
    return (
        f"{min(temps):.0f}..{max(temps):.0f} °F",
        f"{max(pop):.0f} %",
        f"{sum(qpf):.2f} in",
    )


@app.command()
def fetch(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    location: Annotated[
        str | None,
        typer.Option("--location", "-n", help="Only build this configured location."),
    ] = None,
    now: Annotated[
        str | None,
        typer.Option("--now", help="Reference instant (ISO-8601) defining 'today'."),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for CSV exports."),
    ] = None,
) -> None:
    """Fetch and normalize forecasts for configured locations."""
    from pandera.errors import SchemaError

    from hourcast.config.loader import load_config
    from hourcast.config.settings import OutputConfig
    from hourcast.errors import ForecastError
    from hourcast.pipeline import build_forecast

    try:
        app_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if location is not None:
        try:
            locations = [app_config.get_location(location)]
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1) from e
    else:
        locations = app_config.locations

    reference = _parse_now(now)
    output = OutputConfig(output_root=output_dir) if output_dir else app_config.output
    output.output_root.mkdir(parents=True, exist_ok=True)

    table = Table(title="Forecast Results")
    table.add_column("Location", style="cyan")
    table.add_column("Grid", style="blue")
    table.add_column("Timezone")
    table.add_column("Temperature", justify="right")
    table.add_column("Max PoP", justify="right")
    table.add_column("Precip", justify="right")
    table.add_column("Status")

    failures = 0
    for loc in locations:
        console.print(f"[blue]Building {loc.display_title}[/blue]")
        try:
            result = build_forecast(loc, app_config.fetch, now=reference)
        except ForecastError as e:
            failures += 1
            console.print(f"[red]{loc.name}: {e}[/red]")
            table.add_row(loc.name, "-", "-", "-", "-", "-", "[red]failed[/red]")
            continue

        try:
            df = result.dataset.to_frame(hours=loc.hours_to_show)
        except SchemaError as e:
            failures += 1
            console.print(f"[red]{loc.name}: validation failed: {e}[/red]")
            table.add_row(loc.name, "-", "-", "-", "-", "-", "[red]invalid[/red]")
            continue

        csv_path = output.csv_path(loc)
        df.to_csv(csv_path)

        grid = f"{result.grid.grid_id} {result.grid.grid_x},{result.grid.grid_y}"
        table.add_row(
            loc.name,
            grid,
            result.grid.timezone,
            *_summary_row(result.dataset),
            f"[green]{csv_path}[/green]",
        )

    console.print(table)

    if failures:
        console.print(f"[red]{failures} of {len(locations)} location(s) failed[/red]")
        raise typer.Exit(code=1)


@app.command()
def normalize(
    payload: Annotated[
        Path,
        typer.Argument(help="Saved gridpoint JSON document.", exists=True, dir_okay=False),
    ],
    timezone: Annotated[
        str,
        typer.Option("--timezone", "-z", help="IANA timezone of the location."),
    ],
    now: Annotated[
        str | None,
        typer.Option("--now", help="Reference instant (ISO-8601) defining 'today'."),
    ] = None,
    hours: Annotated[
        int | None,
        typer.Option("--hours", help="Only keep the first N hours.", min=1, max=121),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the table to this CSV file."),
    ] = None,
) -> None:
    """Normalize a saved gridpoint document without network access."""
    from pandera.errors import SchemaError

    from hourcast.errors import ForecastError
    from hourcast.pipeline import normalize_payload

    try:
        with payload.open(encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {payload} is not valid JSON: {e}[/red]")
        raise typer.Exit(code=1) from e

    try:
        dataset = normalize_payload(raw, timezone, now=_parse_now(now))
    except ForecastError as e:
        console.print(f"[red]Normalization failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    try:
        df = dataset.to_frame(hours=hours)
    except SchemaError as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    if output is not None:
        df.to_csv(output)
        console.print(f"[green]Saved {len(df)} hours to: {output}[/green]")
        return

    table = Table(title=f"Hourly forecast ({dataset.timezone})")
    table.add_column("Time", style="cyan")
    for column in df.columns:
        table.add_column(column, justify="right")
    for ts, row in df.head(24).iterrows():
        table.add_row(ts.strftime("%a %H:%M"), *(f"{v:.1f}" for v in row))
    console.print(table)
    console.print(f"[dim]{len(df)} hours starting {dataset.start_time.isoformat()}[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    from hourcast import __version__

    console.print(f"hourcast version {__version__}")


if __name__ == "__main__":
    app()
