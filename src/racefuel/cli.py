"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from racefuel.catalog.loader import CatalogError, load_catalog
from racefuel.config import Settings, get_settings
from racefuel.export.formatters import format_result
from racefuel.planner.engine import generate_suggestions
from racefuel.planner.strategies import list_strategies
from racefuel.planner.targets import calculate_targets

app = typer.Typer(
    help="Race-day fueling plans from your product catalog",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the configuration file")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def configure_logging(verbose: bool) -> None:
    """Route planner decision logs to the console when verbose."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# ============================================================================
# Commands
# ============================================================================


@app.command()
def suggest(
    catalog_path: Path = typer.Argument(..., help="Catalog file (.yaml, .json or .csv)"),
    minutes: float = typer.Option(..., "--minutes", "-m", help="Segment duration in minutes"),
    carbs_per_hour: Optional[float] = typer.Option(None, "--carbs-per-hour", help="Carbs (g/h)"),
    sodium_per_hour: Optional[float] = typer.Option(
        None, "--sodium-per-hour", help="Sodium (mg/h)"
    ),
    water_per_hour: Optional[float] = typer.Option(None, "--water-per-hour", help="Water (ml/h)"),
    recent: Optional[list[str]] = typer.Option(
        None, "--recent", help="Recently used item name (repeatable)"
    ),
    segment: Optional[str] = typer.Option(None, "--segment", help="Segment label for output"),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: table, json, markdown"
    ),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write output to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show planner decisions"),
) -> None:
    """Suggest fueling plans for a segment."""
    configure_logging(verbose)
    settings = get_settings()

    try:
        catalog = load_catalog(catalog_path)
    except (CatalogError, FileNotFoundError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    target = calculate_targets(
        minutes,
        carbs_per_hour=carbs_per_hour,
        sodium_per_hour=sodium_per_hour,
        water_per_hour=water_per_hour,
        rates=settings.rates,
    )
    result = generate_suggestions(
        catalog,
        target,
        recently_used=recent or [],
        config=settings.planner,
    )

    fmt = output_format or settings.defaults.output_format
    if fmt not in ("table", "json", "markdown"):
        console.print(f"[red]Unknown output format: {fmt}[/red]")
        raise typer.Exit(1)

    if output_file and fmt == "table":
        fmt = "markdown"

    output = format_result(result, fmt, segment_name=segment, console=console)
    if output is None:
        return

    if output_file:
        output_file.write_text(output)
        console.print(f"[green]Output written to {output_file}[/green]")
    else:
        print(output)


@app.command()
def target(
    minutes: float = typer.Option(..., "--minutes", "-m", help="Segment duration in minutes"),
    carbs_per_hour: Optional[float] = typer.Option(None, "--carbs-per-hour", help="Carbs (g/h)"),
    sodium_per_hour: Optional[float] = typer.Option(
        None, "--sodium-per-hour", help="Sodium (mg/h)"
    ),
    water_per_hour: Optional[float] = typer.Option(None, "--water-per-hour", help="Water (ml/h)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show nutrient targets for a segment."""
    settings = get_settings()
    result = calculate_targets(
        minutes,
        carbs_per_hour=carbs_per_hour,
        sodium_per_hour=sodium_per_hour,
        water_per_hour=water_per_hour,
        rates=settings.rates,
    )

    if json_output:
        output_json(result.to_dict())
        return

    table = Table(title=f"Targets for {minutes:g} min")
    table.add_column("Nutrient")
    table.add_column("Amount", justify="right")
    table.add_row("Carbs", f"{result.carbs} g")
    table.add_row("Sodium", f"{result.sodium} mg")
    table.add_row("Water", f"{result.water} ml")
    console.print(table)


@app.command()
def strategies() -> None:
    """List the built-in plan strategies."""
    table = Table(title="Strategies")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Rules", style="dim")

    for strategy in list_strategies():
        rules = []
        if strategy.macro_restriction:
            rules.append(strategy.macro_restriction.value)
        if strategy.excluded_categories:
            excluded = sorted(c.value for c in strategy.excluded_categories)
            rules.append("no " + ", ".join(excluded))
        if strategy.max_sodium_per_serving is not None:
            rules.append(f"<= {strategy.max_sodium_per_serving:g}mg sodium/serving")
        table.add_row(strategy.id, strategy.display_name, strategy.description, "; ".join(rules))

    console.print(table)


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--path", help="Config file path"),
) -> None:
    """Print the effective configuration as YAML."""
    settings = Settings.load(config_path) if config_path else get_settings()
    print(yaml.dump(settings.to_dict(), default_flow_style=False, sort_keys=False), end="")


@config_app.command("init")
def config_init(
    config_path: Optional[Path] = typer.Option(None, "--path", help="Config file path"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a configuration file with default values."""
    path = config_path or Path.home() / ".racefuel" / "config.yaml"
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists: {path}[/yellow] (use --force)")
        raise typer.Exit(1)

    Settings().save(path)
    console.print(f"[green]Config written to {path}[/green]")


if __name__ == "__main__":
    app()
