from pathlib import Path

from batchpick.backend import CherryPickResult
from batchpick.cherry_picker import IntraRepoCherryPicker
from batchpick.git_backend import GitBackend
from batchpick.models import OutcomeTag

from conftest import commit_file, init_repo

REPO = Path("/ws/app")


def run_picker(backend, branch="main", commit_id="abc123"):
    lines = []
    outcome = IntraRepoCherryPicker(backend).run(REPO, commit_id, branch, emit=lines.append)
    return outcome, lines


def test_clean_pick_on_current_branch(fake_backend):
    fake_backend.add_project("app", "https://h/g/app")
    outcome, lines = run_picker(fake_backend)
    assert outcome.tag == OutcomeTag.SUCCESS
    assert ("switch_branch", "app") not in fake_backend.calls
    assert "  [OK] Clean cherry-pick (no conflicts)" in lines


def test_switches_branch_when_needed(fake_backend):
    fake_backend.add_project("app", "https://h/g/app", branch="develop")
    outcome, lines = run_picker(fake_backend, branch="release-1")
    assert outcome.tag == OutcomeTag.SUCCESS
    assert fake_backend.branches["app"] == "release-1"
    assert fake_backend.calls.index(("switch_branch", "app")) < fake_backend.calls.index(
        ("cherry_pick", "app")
    )
    assert "  To: release-1" in lines


def test_switch_failure_stops_before_pick(fake_backend):
    fake_backend.add_project("app", "https://h/g/app", branch="develop")
    fake_backend.switch_errors["app"] = "pathspec 'release-1' did not match"
    outcome, _ = run_picker(fake_backend, branch="release-1")
    assert outcome.tag == OutcomeTag.FAILED
    assert outcome.error_message == "pathspec 'release-1' did not match"
    assert ("cherry_pick", "app") not in fake_backend.calls


def test_failed_pick_keeps_backend_message(fake_backend):
    fake_backend.add_project("app", "https://h/g/app")
    fake_backend.pick_results[("app", "abc123")] = CherryPickResult.failed("bad revision 'abc123'")
    outcome, _ = run_picker(fake_backend)
    assert outcome.tag == OutcomeTag.FAILED
    assert outcome.error_message == "bad revision 'abc123'"


def test_conflicts_are_a_success_with_files(fake_backend):
    fake_backend.add_project("app", "https://h/g/app")
    fake_backend.pick_results[("app", "abc123")] = CherryPickResult.conflicted("CONFLICT")
    fake_backend.dirty["app"] = True
    fake_backend.conflicts["app"] = ["src/a.py", "src/b.py"]
    outcome, lines = run_picker(fake_backend)
    assert outcome.tag == OutcomeTag.SUCCESS_WITH_CONFLICTS
    assert outcome.tag.is_success
    assert outcome.conflicted_files == ["src/a.py", "src/b.py"]
    assert "    - src/b.py" in lines


def test_dirty_without_conflicts_is_its_own_state(fake_backend):
    fake_backend.add_project("app", "https://h/g/app")
    fake_backend.dirty["app"] = True
    outcome, _ = run_picker(fake_backend)
    assert outcome.tag == OutcomeTag.SUCCESS_WITH_UNCOMMITTED_CHANGES
    assert outcome.tag.is_success
    assert outcome.conflicted_files == []


def test_real_conflict_is_detected_from_index(tmp_path):
    repo = init_repo(tmp_path / "app")
    repo.git.checkout("-b", "feature")
    picked = commit_file(repo, "a.txt", "feature\n", "Change on feature")
    repo.git.checkout("main")
    commit_file(repo, "a.txt", "main\n", "Change on main")

    outcome = IntraRepoCherryPicker(GitBackend()).run(tmp_path / "app", picked, "main")

    assert outcome.tag == OutcomeTag.SUCCESS_WITH_CONFLICTS
    assert outcome.conflicted_files == ["a.txt"]


def test_real_clean_pick_after_switch(tmp_path):
    repo = init_repo(tmp_path / "app")
    repo.git.checkout("-b", "feature")
    picked = commit_file(repo, "b.txt", "new\n", "Add b")

    outcome = IntraRepoCherryPicker(GitBackend()).run(tmp_path / "app", picked, "main")

    assert outcome.tag == OutcomeTag.SUCCESS
    assert repo.active_branch.name == "main"
    assert repo.head.commit.message.strip() == "Add b"
