import pytest

from batchpick.backend import CherryPickResult
from batchpick.errors import InputError
from batchpick.git_backend import GitBackend
from batchpick.models import OutcomeTag
from batchpick.orchestrator import BatchOrchestrator, split_reference_lines
from batchpick.run_log import RunLog

from conftest import HOST, commit_file, commit_url

SHA1 = "1111111111111111111111111111111111111111"
SHA2 = "2222222222222222222222222222222222222222"


@pytest.fixture
def same_project(workspace, fake_backend):
    (workspace / "app").mkdir()
    fake_backend.add_project("app", f"{HOST}/group/app.git", branch="release-1")
    return fake_backend


@pytest.fixture
def cross_project(workspace, fake_backend):
    (workspace / "lib").mkdir()
    fake_backend.add_project("lib", f"{HOST}/fork/lib.git")
    return fake_backend


def test_two_clean_same_project_picks(same_project, workspace):
    lines = [commit_url("group", "app", SHA1), commit_url("group", "app", SHA2)]
    summary = BatchOrchestrator(same_project).run(lines, "release-1", workspace)

    assert [item.tag for item in summary.items] == [OutcomeTag.SUCCESS, OutcomeTag.SUCCESS]
    assert summary.succeeded == 2
    assert summary.commands_generated == 0
    assert summary.same_project_count == 2


def test_conflicts_are_counted_as_succeeded(same_project, workspace):
    same_project.pick_results[("app", SHA1)] = CherryPickResult.conflicted("CONFLICT")
    same_project.dirty["app"] = True
    same_project.conflicts["app"] = ["x.py", "y.py"]

    summary = BatchOrchestrator(same_project).run(
        [commit_url("group", "app", SHA1)], "release-1", workspace
    )

    item = summary.items[0]
    assert item.tag == OutcomeTag.SUCCESS_WITH_CONFLICTS
    assert len(item.outcome.conflicted_files) == 2
    assert summary.succeeded == 1


def test_cross_project_generates_commands(cross_project, workspace):
    summary = BatchOrchestrator(cross_project).run(
        [commit_url("group", "lib", SHA1)], "main", workspace
    )

    item = summary.items[0]
    assert item.tag == OutcomeTag.COMMANDS_GENERATED
    assert len(item.generated_commands) == 8
    assert item.generated_commands[4] == f"git remote add upstream {HOST}/group/lib.git"
    assert summary.commands_generated == 1
    assert summary.cross_project_count == 1
    assert summary.command_script == item.generated_commands
    assert ("cherry_pick", "lib") not in cross_project.calls


def test_missing_origin_is_cross_project(workspace, fake_backend):
    (workspace / "app").mkdir()
    fake_backend.add_project("app", None)
    summary = BatchOrchestrator(fake_backend).run(
        [commit_url("group", "app", SHA1)], "main", workspace
    )
    assert summary.items[0].tag == OutcomeTag.COMMANDS_GENERATED
    assert not summary.items[0].is_same_project


def test_batch_continues_past_failures(same_project, workspace):
    lines = [
        "not-a-url",
        commit_url("group", "app", SHA1),
        commit_url("group", "app", SHA2),
    ]
    summary = BatchOrchestrator(same_project).run(lines, "release-1", workspace)

    assert [item.raw_input for item in summary.items] == lines
    assert summary.items[0].commit_reference is None
    assert summary.items[0].tag == OutcomeTag.FAILED
    assert summary.items[0].error_message == "Invalid commit reference format"
    assert [item.commit_reference.raw_input for item in summary.items[1:]] == lines[1:]
    assert summary.succeeded == 2
    assert summary.failed == 1


def test_unresolved_project_lists_workspace(workspace, fake_backend):
    (workspace / "other").mkdir()
    summary = BatchOrchestrator(fake_backend).run(
        [commit_url("group", "missing", SHA1)], "main", workspace
    )
    item = summary.items[0]
    assert item.tag == OutcomeTag.FAILED
    assert item.error_message == "Project directory not found"
    assert item.resolved_target is None
    assert "    - other" in item.detail_log


def test_unexpected_error_fails_only_that_item(workspace, fake_backend):
    (workspace / "app").mkdir()
    fake_backend.add_project("app", f"{HOST}/group/app")
    del fake_backend.branches["app"]

    summary = BatchOrchestrator(fake_backend).run(
        [commit_url("group", "app", SHA1)], "main", workspace
    )
    item = summary.items[0]
    assert item.tag == OutcomeTag.FAILED
    assert "  Type: KeyError" in item.detail_log


def test_blank_lines_are_skipped_and_indices_follow_input(same_project, workspace):
    lines = [commit_url("group", "app", SHA1), "   ", commit_url("group", "app", SHA2)]
    summary = BatchOrchestrator(same_project).run(lines, "release-1", workspace)
    assert [item.index for item in summary.items] == [1, 3]
    assert summary.processed == 2


def test_commands_only_never_touches_repositories(same_project, workspace):
    summary = BatchOrchestrator(same_project, commands_only=True).run(
        [commit_url("group", "app", SHA1)], "release-1", workspace
    )
    assert summary.items[0].tag == OutcomeTag.COMMANDS_GENERATED
    assert summary.items[0].is_same_project
    assert summary.cross_project_count == 1
    assert not any(call[0] in ("switch_branch", "cherry_pick") for call in same_project.calls)


def test_mixed_batch_keeps_script_order(workspace, fake_backend):
    for name in ("lib", "tools"):
        (workspace / name).mkdir()
        fake_backend.add_project(name, f"{HOST}/fork/{name}")
    lines = [commit_url("group", "lib", SHA1), commit_url("group", "tools", SHA2)]

    summary = BatchOrchestrator(fake_backend, comment_prefix="#").run(lines, "main", workspace)

    assert len(summary.command_script) == 16
    assert summary.command_script[6] == f"git cherry-pick {SHA1}"
    assert summary.command_script[14] == f"git cherry-pick {SHA2}"
    assert summary.command_script[8].startswith("# ")


def test_run_log_narrates_steps_and_summary(same_project, workspace):
    run_log = RunLog()
    BatchOrchestrator(same_project).run(
        [commit_url("group", "app", SHA1)], "release-1", workspace, run_log
    )
    assert run_log.lines[0] == "=== Batch Cherry-Pick Started ==="
    assert "[Step 1] Parsing commit URL..." in run_log.lines
    assert "  Result: SAME PROJECT" in run_log.lines
    assert "BATCH CHERRY-PICK SUMMARY" in run_log.lines
    assert "Succeeded: 1" in run_log.lines


@pytest.mark.parametrize(
    "lines, branch, ws, message",
    [
        ([], "main", "/ws", "Please enter at least one commit URL."),
        (["  "], "main", "/ws", "Please enter at least one commit URL."),
        (["x"], "  ", "/ws", "Please enter the target branch name."),
        (["x"], "main", None, "Please choose the workspace directory."),
    ],
)
def test_missing_input_is_rejected_before_work(fake_backend, lines, branch, ws, message):
    with pytest.raises(InputError) as exc_info:
        BatchOrchestrator(fake_backend).run(lines, branch, ws)
    assert exc_info.value.message == message
    assert fake_backend.calls == []


def test_split_reference_lines():
    assert split_reference_lines("\n a \n\nb\n\n") == ["a ", "", "b"]


def test_pick_after_unresolved_conflict_fails(git_project, workspace):
    git_project.git.checkout("-b", "feature")
    conflicting = commit_file(git_project, "a.txt", "feature\n", "Change a on feature")
    unrelated = commit_file(git_project, "z.txt", "z\n", "Add z")
    git_project.git.checkout("main")
    commit_file(git_project, "a.txt", "main\n", "Change a on main")
    lines = [commit_url("group", "app", conflicting), commit_url("group", "app", unrelated)]

    summary = BatchOrchestrator(GitBackend()).run(lines, "main", workspace)

    first, second = summary.items
    assert first.tag == OutcomeTag.SUCCESS_WITH_CONFLICTS
    assert first.outcome.conflicted_files == ["a.txt"]
    assert second.tag == OutcomeTag.FAILED
    assert second.error_message
    assert not (workspace / "app" / "z.txt").exists()
    assert summary.succeeded == 1
    assert summary.failed == 1
