"""Same-project cherry-pick.

One item goes through these steps, in order:

    CheckBranch -> SwitchBranch (only if needed) -> CherryPick -> DetectConflicts

and ends in exactly one outcome. Nothing is rolled back on failure: the
working tree is left as git left it.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .backend import CherryPickSignal, VcsBackend
from .errors import BackendError
from .models import CherryPickOutcome

log = logging.getLogger(__name__)

LogFn = Callable[[str], None]


class PickStep(str, Enum):
    CHECK_BRANCH = "Branch Check"
    SWITCH_BRANCH = "Branch Switch"
    CHERRY_PICK = "Cherry-Pick"
    DETECT_CONFLICTS = "Conflict Check"


class IntraRepoCherryPicker:
    def __init__(self, backend: VcsBackend):
        self.backend = backend

    def run(
        self,
        repo_path: Path,
        commit_id: str,
        target_branch: str,
        emit: Optional[LogFn] = None,
    ) -> CherryPickOutcome:
        """Cherry-pick commit_id onto target_branch inside repo_path.

        Args:
            repo_path: Checkout whose origin is the commit's repository.
            commit_id: Commit to apply.
            target_branch: Branch to apply it on; checked out first if needed.
            emit: Receives one narration line per step.

        Returns:
            Success, SuccessWithConflicts, SuccessWithUncommittedChanges or Failed.
        """
        emit = emit or log.debug
        step = PickStep.CHECK_BRANCH

        try:
            emit(f"[{step.value}] Checking current branch...")
            current = self.backend.current_branch(repo_path)
            emit(f"  Current branch: {current}")
            emit(f"  Target branch: {target_branch}")

            if current != target_branch:
                step = PickStep.SWITCH_BRANCH
                emit(f"[{step.value}] Branches differ, initiating switch...")
                emit(f"  From: {current}")
                emit(f"  To: {target_branch}")
                self.backend.switch_branch(repo_path, target_branch)
                emit("  [OK] Branch switch completed")
            else:
                emit(f"[{step.value}] Already on target branch, no switch needed")

            step = PickStep.CHERRY_PICK
            emit(f"[{step.value}] Executing git cherry-pick...")
            emit(f"  Commit ID: {commit_id}")
            emit(f"  Repository: {repo_path}")
            result = self.backend.cherry_pick(repo_path, commit_id)
        except BackendError as e:
            log.debug(f"{step.value} failed in {repo_path}: {e.message}")
            emit(f"  [FAILED] {step.value} failed")
            emit(f"  Error: {e.message}")
            return CherryPickOutcome.failed(e.message)

        if result.signal == CherryPickSignal.FAILED:
            emit("  [FAILED] Cherry-pick command failed")
            emit(f"  Error: {result.message}")
            return CherryPickOutcome.failed(result.message)

        if result.signal == CherryPickSignal.CONFLICTED:
            emit("  [WARNING] Cherry-pick stopped with conflicts")
        else:
            emit("  [OK] Cherry-pick command executed successfully")

        return self._detect_conflicts(repo_path, emit)

    def _detect_conflicts(self, repo_path: Path, emit: LogFn) -> CherryPickOutcome:
        emit(f"[{PickStep.DETECT_CONFLICTS.value}] Checking working tree status...")
        try:
            if not self.backend.has_uncommitted_changes(repo_path):
                emit("  [OK] Clean cherry-pick (no conflicts)")
                return CherryPickOutcome.success()

            emit("  [WARNING] Uncommitted changes detected")
            conflicted = self.backend.conflicted_files(repo_path)
        except BackendError as e:
            emit(f"  [FAILED] Status check failed: {e.message}")
            return CherryPickOutcome.failed(e.message)

        if conflicted:
            emit("  [CONFLICT] Conflicted files:")
            for path in conflicted:
                emit(f"    - {path}")
            emit("  Please resolve conflicts manually")
            emit("  Use 'git status' to see details")
            return CherryPickOutcome.with_conflicts(conflicted)

        emit("  No conflicted files reported; changes are left uncommitted")
        emit("  Please check: git status")
        return CherryPickOutcome.with_uncommitted_changes()
