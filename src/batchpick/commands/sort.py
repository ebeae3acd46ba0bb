import click
from pathlib import Path
from typing import Optional

from ..app import AppContext
from ..orchestrator import split_reference_lines
from ..utils.formatters import format_sort_result, print_report
from ..utils.output import format_option
from ..worker import BatchWorker
from .batch import workspace_option


@click.command()
@click.pass_obj
@click.argument("input", type=click.Path(dir_okay=False, allow_dash=True), default="-")
@workspace_option
@click.option(
    "-i",
    "--in-place",
    is_flag=True,
    default=False,
    help="Rewrite INPUT with the sorted URLs instead of printing them.",
)
@format_option()
def sort(
    app: AppContext,
    input: str,
    workspace: Optional[str],
    in_place: bool,
    format: str,
):
    """Reorder the commit URLs in INPUT by commit time, oldest first.

    URLs that cannot be parsed, whose project checkout is missing, or whose
    commit is unknown locally are left out of the result.
    """
    if in_place and input == "-":
        raise click.UsageError("--in-place needs an INPUT file, not stdin.")

    with click.open_file(input, "r") as f:
        lines = split_reference_lines(f.read())
    if not any(line.strip() for line in lines):
        raise click.UsageError("Please enter commit URLs first.")

    workspace = app.workspace(workspace)
    if not workspace:
        raise click.UsageError("Please choose the workspace directory.")

    sorter = app.create_sorter()
    worker = BatchWorker(lambda run_log: sorter.sort(lines, workspace, run_log))
    result = worker.run(on_line=lambda line: click.echo(line, err=True))

    if in_place:
        Path(input).write_text(result.text + "\n", encoding="utf-8")
        click.echo(f"URLs have been reordered in {input}", err=True)
        return

    print_report(format_sort_result(result, format), format)
