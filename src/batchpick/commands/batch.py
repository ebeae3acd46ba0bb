import click
from typing import List, Optional

from ..app import AppContext
from ..errors import BatchPickError, InputError
from ..models import BatchSummary
from ..orchestrator import split_reference_lines, validate_batch_inputs
from ..utils.formatters import (
    format_batch_summary,
    format_item_detail,
    print_report,
    print_summary,
    write_results_csv,
)
from ..utils.output import OutputFormat, format_option
from ..worker import BatchWorker


def workspace_option(func):
    return click.option(
        "-w",
        "--workspace",
        type=click.Path(file_okay=False),
        default=None,
        help="Directory holding one checkout per project "
        "(default: $BATCHPICK_WORKSPACE, then workspace.parent_dir from config).",
    )(func)


def no_log_file_option(func):
    return click.option(
        "--no-log-file",
        is_flag=True,
        default=False,
        help="Do not write the run log to the log directory.",
    )(func)


def execute_batch(
    app: AppContext,
    lines: List[str],
    target_branch: Optional[str],
    workspace: Optional[str],
    commands_only: bool,
    live_to_stderr: bool,
    save_log: bool = True,
) -> BatchSummary:
    """Validate, run the batch on a worker thread while echoing its log, then persist the log."""
    try:
        validate_batch_inputs(lines, target_branch, workspace)
    except InputError as e:
        raise click.UsageError(e.message)

    orchestrator = app.create_orchestrator(commands_only=commands_only)
    worker = BatchWorker(
        lambda run_log: orchestrator.run(lines, target_branch, workspace, run_log)
    )
    try:
        summary = worker.run(on_line=lambda line: click.echo(line, err=live_to_stderr))
    except BatchPickError as e:
        raise click.ClickException(e.describe())
    if save_log:
        app.save_run_log(worker.run_log)
    return summary


@click.command()
@click.pass_obj
@click.argument("input", type=click.File("r"), default="-")
@click.option(
    "-b",
    "--branch",
    "target_branch",
    type=str,
    default=None,
    help="Target branch every commit is cherry-picked onto.",
)
@workspace_option
@no_log_file_option
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Export per-item results to this CSV file.",
)
@click.option(
    "--ask-credentials",
    is_flag=True,
    default=False,
    help="Prompt for a git username/password before the batch starts.",
)
@click.option(
    "--details",
    is_flag=True,
    default=False,
    help="Print the full report of every item after the summary.",
)
@format_option()
def run(
    app: AppContext,
    input,
    target_branch: Optional[str],
    workspace: Optional[str],
    no_log_file: bool,
    csv_path: Optional[str],
    ask_credentials: bool,
    details: bool,
    format: str,
):
    """Cherry-pick every commit URL in INPUT onto the target branch.

    INPUT holds one commit URL per line (default: stdin). Commits from a
    checkout's own repository are cherry-picked in place; commits from other
    repositories produce a command script to run manually.
    """
    lines = split_reference_lines(input.read())
    workspace = app.workspace(workspace)
    app.init_credentials(ask=ask_credentials)

    summary = execute_batch(
        app,
        lines,
        target_branch,
        workspace,
        commands_only=False,
        live_to_stderr=format != OutputFormat.TEXT.value,
        save_log=not no_log_file,
    )

    if csv_path:
        path = write_results_csv(summary, csv_path)
        click.echo(f"Results exported to: {path}", err=True)

    if format == OutputFormat.TEXT.value:
        print_summary(summary)
        if details:
            for item in summary.items:
                click.echo(format_item_detail(item, app.config.script.comment_prefix))
    else:
        print_report(format_batch_summary(summary, format), format)

    if summary.failed:
        raise SystemExit(1)


@click.command()
@click.pass_obj
@click.argument("input", type=click.File("r"), default="-")
@click.option(
    "-b",
    "--branch",
    "target_branch",
    type=str,
    default=None,
    help="Target branch used in the generated commands.",
)
@workspace_option
@no_log_file_option
def script(
    app: AppContext,
    input,
    target_branch: Optional[str],
    workspace: Optional[str],
    no_log_file: bool,
):
    """Print a command script for every commit URL in INPUT without touching any repository.

    Progress goes to stderr; the script alone goes to stdout.
    """
    lines = split_reference_lines(input.read())
    workspace = app.workspace(workspace)

    summary = execute_batch(
        app,
        lines,
        target_branch,
        workspace,
        commands_only=True,
        live_to_stderr=True,
        save_log=not no_log_file,
    )
    click.echo(summary.script_text)

    if summary.failed:
        raise SystemExit(1)
