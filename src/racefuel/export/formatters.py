"""Output formatters for suggestion results."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from racefuel.planner.models import Nutrient, Plan, SuggestionResult
from racefuel.planner.scoring import STATUS_COLORS, STATUS_MESSAGES, coverage_status


def _amount(value: float, nutrient: Nutrient) -> str:
    return f"{value:.0f}{nutrient.unit}"


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(self, result: SuggestionResult, segment_name: Optional[str] = None) -> None:
        """Print formatted tables to console.

        Args:
            result: Suggestion result to format
            segment_name: Optional segment label to display
        """
        target = result.target
        header_lines = [
            f"[bold]FUELING SUGGESTIONS[/bold] - {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        ]
        if segment_name:
            header_lines.append(f"Segment: {segment_name}")
        header_lines.append(
            f"Target: {target.carbs}g carbs, {target.sodium}mg sodium, "
            f"{target.water}ml water over {target.duration_hours:.2f}h"
        )
        self.console.print(Panel("\n".join(header_lines), title="Race Fuel"))

        for warning in result.warnings:
            self.console.print(f"[red]Warning: {warning}[/red]")

        if not result.plans:
            self.console.print("[yellow]No plans could be built.[/yellow]")

        for rank, plan in enumerate(result.plans, start=1):
            self._format_plan(plan, rank)

        for tip in result.tips:
            self.console.print(f"[dim]Tip: {tip}[/dim]")

    def _format_plan(self, plan: Plan, rank: int) -> None:
        items_table = Table(title=f"#{rank} {plan.name} - score {plan.score}")
        items_table.add_column("Item", style="cyan", max_width=40)
        items_table.add_column("Qty", justify="right")
        items_table.add_column("Serving")
        for nutrient in Nutrient:
            items_table.add_column(nutrient.label, justify="right")

        for entry in plan.entries:
            items_table.add_row(
                escape(entry.item.name[:40]),
                f"{entry.quantity}x",
                entry.item.serving_size,
                *(_amount(entry.contributes.get(n), n) for n in Nutrient),
            )

        items_table.add_row(
            "[bold]TOTAL[/bold]",
            "",
            "",
            *(f"[bold]{_amount(plan.totals.get(n), n)}[/bold]" for n in Nutrient),
            style="bold",
        )
        self.console.print(items_table)

        coverage_parts = []
        for nutrient in Nutrient:
            pct = plan.coverage.get(nutrient)
            color = STATUS_COLORS[coverage_status(pct)]
            coverage_parts.append(f"{nutrient.label}: [{color}]{pct:.0f}%[/{color}]")
        self.console.print(f"[dim]{plan.description}[/dim]")
        self.console.print(" | ".join(coverage_parts))


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def to_dict(self, result: SuggestionResult) -> dict:
        return {
            "timestamp": datetime.now().isoformat(),
            "target": result.target.to_dict(),
            "plans": [self._plan_dict(plan) for plan in result.plans],
            "warnings": list(result.warnings),
            "tips": list(result.tips),
        }

    def _plan_dict(self, plan: Plan) -> dict:
        return {
            "id": plan.id,
            "strategy": plan.strategy_id,
            "name": plan.name,
            "description": plan.description,
            "score": plan.score,
            "products": [
                {
                    "name": e.item.name,
                    "category": e.item.category.value,
                    "quantity": e.quantity,
                    "serving_size": e.item.serving_size,
                    "contributes": {k: round(v, 1) for k, v in e.contributes.to_dict().items()},
                }
                for e in plan.entries
            ],
            "totals": {k: round(v, 1) for k, v in plan.totals.to_dict().items()},
            "coverage_percent": {k: int(v) for k, v in plan.coverage.to_dict().items()},
            "includes_required_category": plan.includes_required_category,
            "created_at": plan.created_at.isoformat(),
        }

    def format(self, result: SuggestionResult) -> str:
        """Return JSON string.

        Args:
            result: Suggestion result to format

        Returns:
            JSON string
        """
        return json.dumps(self.to_dict(result), indent=2, ensure_ascii=False)


class MarkdownFormatter:
    """Format results as Markdown for race notes or sharing."""

    def format(self, result: SuggestionResult, segment_name: Optional[str] = None) -> str:
        """Return Markdown string.

        Args:
            result: Suggestion result to format
            segment_name: Optional segment label

        Returns:
            Markdown string
        """
        target = result.target
        lines = ["# Fueling Suggestions", ""]
        if segment_name:
            lines.append(f"**Segment:** {segment_name}")
        lines.append(
            f"**Target:** {target.carbs}g carbs, {target.sodium}mg sodium, "
            f"{target.water}ml water ({target.duration_hours:.2f}h)"
        )

        if result.warnings:
            lines.extend(["", "## Warnings", ""])
            lines.extend(f"- {w}" for w in result.warnings)

        for rank, plan in enumerate(result.plans, start=1):
            lines.extend(
                [
                    "",
                    f"## {rank}. {plan.name} (score {plan.score})",
                    "",
                    plan.description,
                    "",
                    "| Item | Qty | Carbs | Sodium | Water |",
                    "|------|-----|-------|--------|-------|",
                ]
            )
            for e in plan.entries:
                lines.append(
                    f"| {e.item.name} | {e.quantity}x | {e.contributes.carbs:.0f}g "
                    f"| {e.contributes.sodium:.0f}mg | {e.contributes.water:.0f}ml |"
                )
            lines.append(
                f"| **Total** | | {plan.totals.carbs:.0f}g | {plan.totals.sodium:.0f}mg "
                f"| {plan.totals.water:.0f}ml |"
            )
            lines.append("")
            for nutrient in Nutrient:
                pct = plan.coverage.get(nutrient)
                message = STATUS_MESSAGES[coverage_status(pct)]
                lines.append(f"- {nutrient.label}: {pct:.0f}% - {message}")

        if result.tips:
            lines.extend(["", "## Tips", ""])
            lines.extend(f"- {t}" for t in result.tips)

        return "\n".join(lines)


def format_result(
    result: SuggestionResult,
    output_format: str = "table",
    segment_name: Optional[str] = None,
    console: Optional[Console] = None,
) -> Optional[str]:
    """Format a suggestion result in the specified format.

    Args:
        result: Suggestion result to format
        output_format: One of 'table', 'json', 'markdown'
        segment_name: Optional segment label
        console: Rich console (for table format)

    Returns:
        Formatted string for json/markdown, None for table (prints directly)
    """
    if output_format == "table":
        formatter = TableFormatter(console)
        formatter.format(result, segment_name)
        return None
    elif output_format == "json":
        return JSONFormatter().format(result)
    elif output_format == "markdown":
        return MarkdownFormatter().format(result, segment_name)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
