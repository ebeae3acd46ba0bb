"""Batch cherry-pick over a list of commit references.

Each non-blank input line is processed in order, one at a time:

1. Parse the commit URL.
2. Find the project's checkout in the workspace.
3. Read the checkout's remote URL.
4. Compare it with the commit's repository.
5. Cherry-pick in place (same project) or write a command script
   (cross project).

A failure at any step finishes that line's item as Failed and the batch
moves on; nothing is retried. Items touch their repositories strictly one
after another, so no locking is needed; running items in parallel would
need a lock per repository path.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from .backend import VcsBackend
from .cherry_picker import IntraRepoCherryPicker
from .command_script import (
    DEFAULT_COMMENT_PREFIX,
    DEFAULT_UPSTREAM_REMOTE,
    build_cross_repo_commands,
    is_annotation,
)
from .errors import BackendError, InputError, ParseError, ResolutionError
from .identity import is_same_project
from .models import (
    TIME_FORMAT,
    BatchItemResult,
    BatchSummary,
    CherryPickOutcome,
    ResolvedTarget,
)
from .project_resolver import list_workspace_dirs, resolve_project_dir
from .reference_parser import EXPECTED_FORMATS, parse_commit_reference
from .run_log import RunLog

log = logging.getLogger(__name__)

Emit = Callable[[str], None]


def split_reference_lines(text: str) -> List[str]:
    return text.strip().splitlines()


def validate_batch_inputs(
    lines: List[str],
    target_branch: Optional[str],
    workspace: Optional[Union[str, Path]],
) -> None:
    """Reject a batch that cannot start.

    Raises:
        InputError: If there is no non-blank reference line, no target
            branch, or no workspace directory.
    """
    if not any(line.strip() for line in lines):
        raise InputError("Please enter at least one commit URL.")
    if not target_branch or not target_branch.strip():
        raise InputError("Please enter the target branch name.")
    if not workspace or not str(workspace).strip():
        raise InputError("Please choose the workspace directory.")


class BatchOrchestrator:
    """Drives every reference line through parse, resolve, compare and dispatch.

    Attributes:
        backend: Repository operations.
        remote_name: Remote whose URL identifies a checkout.
        comment_prefix: Comment marker used in generated command scripts.
        upstream_remote: Temporary remote name used in generated command scripts.
        commands_only: Send every resolved item to the command synthesizer,
            so the run never modifies a repository.
    """

    def __init__(
        self,
        backend: VcsBackend,
        remote_name: str = "origin",
        comment_prefix: str = DEFAULT_COMMENT_PREFIX,
        upstream_remote: str = DEFAULT_UPSTREAM_REMOTE,
        commands_only: bool = False,
    ):
        self.backend = backend
        self.remote_name = remote_name
        self.comment_prefix = comment_prefix
        self.upstream_remote = upstream_remote
        self.commands_only = commands_only
        self.picker = IntraRepoCherryPicker(backend)

    def run(
        self,
        lines: List[str],
        target_branch: str,
        workspace: Union[str, Path],
        run_log: Optional[RunLog] = None,
    ) -> BatchSummary:
        """Process all reference lines and summarize the outcomes.

        Args:
            lines: Reference lines in input order; blank lines are skipped.
            target_branch: Branch every commit is applied to.
            workspace: Parent directory holding one checkout per project.
            run_log: Receives the full narration of the run.

        Returns:
            BatchSummary with one item per non-blank line, in input order.

        Raises:
            InputError: If the inputs fail validate_batch_inputs().
        """
        validate_batch_inputs(lines, target_branch, workspace)
        run_log = run_log or RunLog()
        target_branch = target_branch.strip()
        workspace = Path(workspace)

        self._write_header(run_log, len(lines), target_branch, workspace)

        items: List[BatchItemResult] = []
        for index, line in enumerate(lines, start=1):
            raw_input = line.strip()
            if not raw_input:
                run_log.write(f"Skipping empty line {index}")
                continue

            item = BatchItemResult(
                index=index, raw_input=raw_input, target_branch=target_branch
            )

            def emit(text: str, item: BatchItemResult = item):
                item.detail_log.append(text)
                run_log.write(text)

            run_log.write()
            run_log.rule()
            run_log.write(f"Processing reference {index} of {len(lines)}")
            run_log.write(f"Original URL: {raw_input}")
            run_log.rule()

            item.finish(self._process_item(item, target_branch, workspace, emit))
            run_log.write()
            run_log.rule("-")
            items.append(item)

        summary = BatchSummary.from_items(items, target_branch=target_branch)
        self._write_summary(run_log, summary, len(lines))
        return summary

    def _process_item(
        self,
        item: BatchItemResult,
        target_branch: str,
        workspace: Path,
        emit: Emit,
    ) -> CherryPickOutcome:
        try:
            return self._dispatch(item, target_branch, workspace, emit)
        except ParseError as e:
            emit("  [FAILED] Invalid URL format")
            emit("  Expected formats:")
            for example in EXPECTED_FORMATS:
                emit(f"    - {example}")
            return CherryPickOutcome.failed(e.message)
        except ResolutionError as e:
            emit("  [FAILED] Project directory NOT found")
            emit("  Available directories in workspace:")
            for name in list_workspace_dirs(e.workspace):
                emit(f"    - {name}")
            return CherryPickOutcome.failed(e.message)
        except BackendError as e:
            emit(f"  [FAILED] {e.message}")
            return CherryPickOutcome.failed(e.message)
        except Exception as e:
            log.debug(f"Unexpected error processing item {item.index}", exc_info=True)
            emit("  [ERROR] Error processing URL")
            emit(f"  Error: {e}")
            emit(f"  Type: {type(e).__name__}")
            return CherryPickOutcome.failed(str(e) or type(e).__name__)

    def _dispatch(
        self,
        item: BatchItemResult,
        target_branch: str,
        workspace: Path,
        emit: Emit,
    ) -> CherryPickOutcome:
        emit("[Step 1] Parsing commit URL...")
        reference = parse_commit_reference(item.raw_input)
        if reference is None:
            raise ParseError(item.raw_input)
        item.commit_reference = reference
        emit("  [OK] URL parsing successful")
        emit(f"  - Project Code: {reference.project_code}")
        emit(f"  - Commit ID: {reference.commit_id}")
        emit(f"  - Base URL: {reference.repo_base_url}")

        emit("[Step 2] Searching for project directory...")
        emit(f"  Looking for: {reference.project_code}")
        emit(f"  In workspace: {workspace}")
        project_dir = resolve_project_dir(reference.project_code, workspace)
        if project_dir is None:
            raise ResolutionError(reference.project_code, str(workspace))
        emit("  [OK] Project directory found")
        emit(f"  - Path: {project_dir}")

        emit("[Step 3] Retrieving project Git configuration...")
        origin_url = self.backend.remote_url(project_dir, self.remote_name)
        if origin_url is None:
            emit(f"  No '{self.remote_name}' remote URL available; treating as cross-project")
        else:
            emit(f"  Current remote URL: {origin_url}")

        emit("[Step 4] Comparing projects...")
        emit(f"  Commit URL Base: {reference.repo_base_url}")
        emit(f"  Local Project URL: {origin_url}")
        same_project = is_same_project(reference.repo_base_url, origin_url)
        emit(f"  Result: {'SAME PROJECT' if same_project else 'DIFFERENT PROJECT'}")
        item.resolved_target = ResolvedTarget(
            commit_reference=reference,
            local_repo_path=project_dir,
            is_same_project=same_project,
            origin_url=origin_url,
        )

        if same_project and not self.commands_only:
            emit("[Step 5] Executing SAME-PROJECT cherry-pick...")
            emit("  Strategy: Direct cherry-pick within same repository")
            outcome = self.picker.run(
                project_dir,
                reference.commit_id,
                target_branch,
                emit=lambda text: emit(f"  {text}"),
            )
            if outcome.tag.is_success:
                emit(f"  [SUCCESS] Cherry-pick completed ({outcome.tag.display_name})")
            else:
                emit("  [FAILED] Cherry-pick execution failed")
            return outcome

        emit("[Step 5] Generating CROSS-PROJECT commands...")
        emit(f"  Strategy: Add the source repository as '{self.upstream_remote}' remote")
        commands = build_cross_repo_commands(
            str(project_dir),
            reference.repo_base_url,
            reference.commit_id,
            target_branch,
            comment_prefix=self.comment_prefix,
            upstream_remote=self.upstream_remote,
        )
        emit(f"  Generated {len(commands)} commands:")
        for number, command in enumerate(commands, start=1):
            emit(f"    {number}. {command}" if command else "    [empty line]")
        emit("  [OK] Commands generated and added to batch command list")
        return CherryPickOutcome.commands(commands)

    def _write_header(
        self, run_log: RunLog, line_count: int, target_branch: str, workspace: Path
    ):
        run_log.write("=== Batch Cherry-Pick Started ===")
        run_log.write(f"Timestamp: {datetime.now().strftime(TIME_FORMAT)}")
        run_log.write(f"Target Branch: {target_branch}")
        run_log.write(f"Number of URLs: {line_count}")
        run_log.write(f"Workspace Directory: {workspace.absolute()}")
        run_log.rule("=", 40)

    def _write_summary(self, run_log: RunLog, summary: BatchSummary, line_count: int):
        if summary.command_script:
            run_log.write()
            run_log.rule()
            run_log.write("CROSS-PROJECT COMMANDS SUMMARY")
            run_log.rule()
            run_log.write(f"Total cross-project commands: {len(summary.command_script)}")
            run_log.write("Full command list:")
            number = 1
            for command in summary.command_script:
                if is_annotation(command, self.comment_prefix):
                    run_log.write(f"{number}. {command}")
                    number += 1
                else:
                    run_log.write(f"   {command}")
            run_log.rule()

        run_log.write()
        run_log.rule()
        run_log.write("BATCH CHERRY-PICK SUMMARY")
        run_log.rule()
        run_log.write(f"Total URLs provided: {line_count}")
        run_log.write(f"Items processed: {summary.processed}")
        run_log.write(f"Same-project cherry-picks executed: {summary.same_project_count}")
        run_log.write(f"Cross-project commands generated: {summary.cross_project_count}")
        run_log.write(f"Succeeded: {summary.succeeded}")
        run_log.write(f"Failed: {summary.failed}")
        run_log.write(
            f"Total operations: {summary.same_project_count + summary.cross_project_count}"
        )
        run_log.rule()
        run_log.write(f"Process completed at: {summary.completed_at.strftime(TIME_FORMAT)}")
