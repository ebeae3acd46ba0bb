"""Data models for batch cherry-pick runs.

This module provides the value types that flow through a batch run:

1. CommitReference: a commit URL split into its parts (pure text).
2. ResolvedTarget: a reference bound to a local checkout.
3. CherryPickOutcome: the single terminal outcome of one item.
4. BatchItemResult: one item's reference, target, outcome and log.
5. BatchSummary: totals and the aggregated command script of a run.
6. SortedCommit / SortResult: output of the chronological sort.

Every model has a to_dict() used for JSON output.

Example usage:
    ref = parse_commit_reference("https://host/group/app/-/commit/abc123")
    item = BatchItemResult(index=1, raw_input=ref.raw_input, commit_reference=ref)
    item.finish(CherryPickOutcome.success())
    summary = BatchSummary.from_items([item], target_branch="release-1")
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class CommitReference:
    """A commit reference parsed from one line of input.

    Attributes:
        raw_input: The input line as given (whitespace-trimmed).
        repo_base_url: Scheme, host and repository path, without the commit marker.
        project_code: Last path segment of the repository path.
        commit_id: Hexadecimal commit id taken from the end of the URL.
    """

    raw_input: str
    repo_base_url: str
    project_code: str
    commit_id: str

    @property
    def short_commit_id(self) -> str:
        return self.commit_id[:8]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_input": self.raw_input,
            "repo_base_url": self.repo_base_url,
            "project_code": self.project_code,
            "commit_id": self.commit_id,
        }


@dataclass(frozen=True)
class ResolvedTarget:
    """A commit reference bound to the local checkout it will be applied to.

    Attributes:
        commit_reference: The parsed reference.
        local_repo_path: Workspace child directory named after the project code.
        is_same_project: True when the checkout's origin is the reference's repository.
        origin_url: The checkout's configured remote URL, if any.
    """

    commit_reference: CommitReference
    local_repo_path: Path
    is_same_project: bool
    origin_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "local_repo_path": str(self.local_repo_path),
            "is_same_project": self.is_same_project,
            "origin_url": self.origin_url,
        }


class OutcomeTag(str, Enum):
    SUCCESS = "Success"
    SUCCESS_WITH_CONFLICTS = "SuccessWithConflicts"
    SUCCESS_WITH_UNCOMMITTED_CHANGES = "SuccessWithUncommittedChanges"
    FAILED = "Failed"
    COMMANDS_GENERATED = "CommandsGenerated"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_success(self) -> bool:
        return self in (
            OutcomeTag.SUCCESS,
            OutcomeTag.SUCCESS_WITH_CONFLICTS,
            OutcomeTag.SUCCESS_WITH_UNCOMMITTED_CHANGES,
        )


_DISPLAY_NAMES = {
    OutcomeTag.SUCCESS: "Success",
    OutcomeTag.SUCCESS_WITH_CONFLICTS: "Success (conflicts)",
    OutcomeTag.SUCCESS_WITH_UNCOMMITTED_CHANGES: "Success (uncommitted changes)",
    OutcomeTag.FAILED: "Fail",
    OutcomeTag.COMMANDS_GENERATED: "To Run CMD",
}


@dataclass(frozen=True)
class CherryPickOutcome:
    """Terminal outcome of one batch item.

    Attributes:
        tag: Which of the terminal states was reached.
        conflicted_files: Files left unmerged (SuccessWithConflicts only).
        generated_commands: Command script lines (CommandsGenerated only).
        error_message: Failure reason or follow-up warning.
    """

    tag: OutcomeTag
    conflicted_files: List[str] = field(default_factory=list)
    generated_commands: List[str] = field(default_factory=list)
    error_message: Optional[str] = None

    @classmethod
    def success(cls) -> "CherryPickOutcome":
        return cls(tag=OutcomeTag.SUCCESS)

    @classmethod
    def with_conflicts(cls, files: List[str]) -> "CherryPickOutcome":
        return cls(
            tag=OutcomeTag.SUCCESS_WITH_CONFLICTS,
            conflicted_files=list(files),
            error_message="Warning: conflicted files exist",
        )

    @classmethod
    def with_uncommitted_changes(cls) -> "CherryPickOutcome":
        return cls(
            tag=OutcomeTag.SUCCESS_WITH_UNCOMMITTED_CHANGES,
            error_message="Warning: uncommitted changes without conflicted files",
        )

    @classmethod
    def failed(cls, message: str) -> "CherryPickOutcome":
        return cls(tag=OutcomeTag.FAILED, error_message=message)

    @classmethod
    def commands(cls, commands: List[str]) -> "CherryPickOutcome":
        return cls(tag=OutcomeTag.COMMANDS_GENERATED, generated_commands=list(commands))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag.value,
            "conflicted_files": list(self.conflicted_files),
            "generated_commands": list(self.generated_commands),
            "error_message": self.error_message,
        }


@dataclass
class BatchItemResult:
    """Result of processing one non-blank input line.

    The item is created as soon as the line is read and collects log lines
    while it is processed. It reaches exactly one outcome through finish().

    Attributes:
        index: 1-based line number in the original input.
        raw_input: The trimmed input line.
        target_branch: Branch the commit is applied to.
        commit_reference: Set once the line parsed.
        resolved_target: Set once the project directory was found.
        outcome: Terminal outcome, None while processing.
        detail_log: Narration of every step taken for this item.
    """

    index: int
    raw_input: str
    target_branch: str = ""
    commit_reference: Optional[CommitReference] = None
    resolved_target: Optional[ResolvedTarget] = None
    outcome: Optional[CherryPickOutcome] = None
    detail_log: List[str] = field(default_factory=list)

    def finish(self, outcome: CherryPickOutcome) -> None:
        if self.outcome is not None:
            raise RuntimeError(f"Item {self.index} already finished as {self.outcome.tag.value}")
        self.outcome = outcome

    @property
    def tag(self) -> Optional[OutcomeTag]:
        return self.outcome.tag if self.outcome else None

    @property
    def project_code(self) -> Optional[str]:
        return self.commit_reference.project_code if self.commit_reference else None

    @property
    def commit_id(self) -> Optional[str]:
        return self.commit_reference.commit_id if self.commit_reference else None

    @property
    def project_path(self) -> Optional[str]:
        return str(self.resolved_target.local_repo_path) if self.resolved_target else None

    @property
    def is_same_project(self) -> bool:
        return bool(self.resolved_target and self.resolved_target.is_same_project)

    @property
    def type_label(self) -> str:
        return "Same Project" if self.is_same_project else "Cross-Project"

    @property
    def error_message(self) -> Optional[str]:
        return self.outcome.error_message if self.outcome else None

    @property
    def generated_commands(self) -> List[str]:
        return list(self.outcome.generated_commands) if self.outcome else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "raw_input": self.raw_input,
            "target_branch": self.target_branch,
            "commit_reference": (
                self.commit_reference.to_dict() if self.commit_reference else None
            ),
            "resolved_target": (
                self.resolved_target.to_dict() if self.resolved_target else None
            ),
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "detail_log": list(self.detail_log),
        }


@dataclass
class BatchSummary:
    """Totals and aggregated command script of one batch run.

    Attributes:
        target_branch: Branch requested for the run.
        items: One result per non-blank input line, in input order.
        processed: Number of items.
        succeeded: Items whose outcome is any success state.
        failed: Items whose outcome is Failed.
        commands_generated: Items whose outcome is CommandsGenerated.
        same_project_count: Resolved items dispatched to the same-project cherry-pick.
        cross_project_count: Resolved items dispatched to the command synthesizer.
        command_script: Every item's generated commands, in input order.
        completed_at: When the summary was built.
    """

    target_branch: str
    items: List[BatchItemResult] = field(default_factory=list)
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    commands_generated: int = 0
    same_project_count: int = 0
    cross_project_count: int = 0
    command_script: List[str] = field(default_factory=list)
    completed_at: Optional[datetime] = None

    @classmethod
    def from_items(
        cls,
        items: List[BatchItemResult],
        target_branch: str,
        completed_at: Optional[datetime] = None,
    ) -> "BatchSummary":
        summary = cls(
            target_branch=target_branch,
            items=list(items),
            processed=len(items),
            completed_at=completed_at or datetime.now(),
        )
        for item in items:
            tag = item.tag
            if tag is not None and tag.is_success:
                summary.succeeded += 1
            elif tag == OutcomeTag.FAILED:
                summary.failed += 1
            elif tag == OutcomeTag.COMMANDS_GENERATED:
                summary.commands_generated += 1

            if item.resolved_target is not None:
                if tag == OutcomeTag.COMMANDS_GENERATED:
                    summary.cross_project_count += 1
                else:
                    summary.same_project_count += 1

            summary.command_script.extend(item.generated_commands)
        return summary

    @property
    def script_text(self) -> str:
        return "\n".join(self.command_script)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_branch": self.target_branch,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "commands_generated": self.commands_generated,
            "same_project_count": self.same_project_count,
            "cross_project_count": self.cross_project_count,
            "command_script": list(self.command_script),
            "completed_at": (
                self.completed_at.strftime(TIME_FORMAT) if self.completed_at else None
            ),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class SortedCommit:
    """A reference that resolved to a commit, with its authorship data."""

    raw_input: str
    commit_reference: CommitReference
    timestamp: datetime
    author: str

    @property
    def time_string(self) -> str:
        return self.timestamp.strftime(TIME_FORMAT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_input": self.raw_input,
            "commit_id": self.commit_reference.commit_id,
            "project_code": self.commit_reference.project_code,
            "timestamp": self.timestamp.isoformat(),
            "author": self.author,
        }


@dataclass
class SortResult:
    """Output of a chronological sort.

    Attributes:
        records: Resolvable references, oldest commit first.
        dropped: Input lines that could not be parsed, resolved or looked up.
    """

    records: List[SortedCommit] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Sorted references as a newline-joined block, ready to replace the input."""
        return "\n".join(record.raw_input for record in self.records)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "dropped": list(self.dropped),
        }
