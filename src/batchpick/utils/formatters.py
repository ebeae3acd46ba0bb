"""Formatters for batchpick results.

This module converts batch and sort results to terminal tables, templated
text/markdown reports, JSON and CSV.
"""

import csv
from pathlib import Path
from typing import Optional, Union

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text

from .output import OutputFormat
from .templates import render_template, render_to_format
from ..models import BatchItemResult, BatchSummary, OutcomeTag, SortResult


STATUS_STYLES = {
    OutcomeTag.SUCCESS: "green",
    OutcomeTag.SUCCESS_WITH_CONFLICTS: "green",
    OutcomeTag.SUCCESS_WITH_UNCOMMITTED_CHANGES: "green",
    OutcomeTag.FAILED: "red",
    OutcomeTag.COMMANDS_GENERATED: "yellow",
}

CSV_HEADER = [
    "Index",
    "URL",
    "Project Code",
    "Commit ID",
    "Status",
    "Type",
    "Target Branch",
    "Project Path",
    "Error Message",
]

NOT_AVAILABLE = "N/A"


def _or_na(value: Optional[str]) -> str:
    return value if value else NOT_AVAILABLE


def status_text(item: BatchItemResult) -> Text:
    if item.tag is None:
        return Text("Pending", style="dim")
    return Text(item.tag.display_name, style=STATUS_STYLES[item.tag])


def build_results_table(summary: BatchSummary) -> Table:
    """Build the per-item results table."""
    table = Table(title="Cherry-Pick Results", title_justify="left", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Project Code")
    table.add_column("Commit ID")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("Target Branch")
    table.add_column("Project Path", overflow="fold")
    table.add_column("Error Message", overflow="fold")

    for item in summary.items:
        table.add_row(
            str(item.index),
            _or_na(item.project_code),
            item.commit_id[:8] if item.commit_id else NOT_AVAILABLE,
            status_text(item),
            item.type_label,
            item.target_branch,
            _or_na(item.project_path),
            item.error_message or "",
        )
    return table


def build_totals_table(summary: BatchSummary) -> Table:
    table = Table(title="Summary", title_justify="left", show_header=True)
    table.add_column("Total", justify="center")
    table.add_column("Success", justify="center", style="green")
    table.add_column("Fail", justify="center", style="red")
    table.add_column("To Run CMD", justify="center", style="yellow")
    table.add_row(
        str(summary.processed),
        str(summary.succeeded),
        str(summary.failed),
        str(summary.commands_generated),
    )
    return table


def print_summary(summary: BatchSummary, console: Optional[Console] = None):
    console = console or Console()
    console.print(build_totals_table(summary))
    console.print(build_results_table(summary))


def print_report(text: str, format: str, console: Optional[Console] = None):
    """Write a rendered markdown or JSON report to stdout.

    On a terminal, markdown is rendered by rich and paged once it no longer
    fits on screen. Redirected output and JSON are written verbatim so they
    stay machine-readable; live progress has already gone to stderr.
    """
    console = console or Console()
    if format != OutputFormat.MARKDOWN.value or not console.is_terminal:
        click.echo(text, nl=False)
        return

    rendered = Markdown(text, justify="left")
    if text.count("\n") + 4 <= console.size.height:
        console.print(rendered)
        return
    with console.pager(styles=True):
        console.print(rendered)


def format_batch_summary(summary: BatchSummary, format: str) -> str:
    """Render a batch summary as markdown or JSON."""
    return render_to_format(format, "batch_summary", summary)


def format_sort_result(result: SortResult, format: str) -> str:
    """Render a sort result as the plain sorted URL list, markdown or JSON."""
    return render_to_format(format, "sort_result", result)


def format_item_detail(item: BatchItemResult, comment_prefix: str) -> str:
    """Render the full report of one item: header, log, commands and error."""
    return render_template(
        "text", "item_detail", item_detail=item, comment_prefix=comment_prefix
    )


def _csv_row(item: BatchItemResult) -> list:
    return [
        item.index,
        item.raw_input,
        _or_na(item.project_code),
        _or_na(item.commit_id),
        item.tag.display_name if item.tag else "",
        item.type_label,
        item.target_branch,
        _or_na(item.project_path),
        item.error_message or "",
    ]


def write_results_csv(summary: BatchSummary, path: Union[str, Path]) -> Path:
    """Export the per-item results to a CSV file.

    Returns:
        The path written to.
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for item in summary.items:
            writer.writerow(_csv_row(item))
    return path
