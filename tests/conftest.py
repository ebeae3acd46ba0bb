from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import git
import pytest

from batchpick.backend import CherryPickResult, VcsBackend
from batchpick.errors import BackendError

HOST = "https://git.example.com"


def commit_url(group: str, project: str, sha: str, separator: bool = True) -> str:
    marker = "/-/commit/" if separator else "/commit/"
    return f"{HOST}/{group}/{project}{marker}{sha}"


class FakeBackend(VcsBackend):
    """In-memory backend keyed by checkout directory name."""

    def __init__(self):
        self.branches: Dict[str, str] = {}
        self.remotes: Dict[str, str] = {}
        self.pick_results: Dict[Tuple[str, str], CherryPickResult] = {}
        self.dirty: Dict[str, bool] = {}
        self.conflicts: Dict[str, List[str]] = {}
        self.switch_errors: Dict[str, str] = {}
        self.commits: Dict[Tuple[str, str], Tuple[datetime, str]] = {}
        self.calls: List[Tuple[str, str]] = []

    def add_project(self, name: str, origin_url: Optional[str], branch: str = "main"):
        self.branches[name] = branch
        if origin_url is not None:
            self.remotes[name] = origin_url

    def current_branch(self, path: Path) -> str:
        self.calls.append(("current_branch", path.name))
        return self.branches[path.name]

    def switch_branch(self, path: Path, branch: str) -> None:
        self.calls.append(("switch_branch", path.name))
        if path.name in self.switch_errors:
            raise BackendError(self.switch_errors[path.name], operation="switch_branch")
        self.branches[path.name] = branch

    def cherry_pick(self, path: Path, commit_id: str) -> CherryPickResult:
        self.calls.append(("cherry_pick", path.name))
        return self.pick_results.get((path.name, commit_id), CherryPickResult.clean())

    def has_uncommitted_changes(self, path: Path) -> bool:
        return self.dirty.get(path.name, False)

    def conflicted_files(self, path: Path) -> List[str]:
        return list(self.conflicts.get(path.name, []))

    def remote_url(self, path: Path, remote_name: str) -> Optional[str]:
        return self.remotes.get(path.name)

    def commit_timestamp_and_author(self, path: Path, commit_id: str):
        return self.commits.get((path.name, commit_id))


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def workspace(tmp_path):
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "BATCHPICK_WORKSPACE",
        "BATCHPICK_GIT_USERNAME",
        "BATCHPICK_GIT_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)


def init_repo(path: Path, origin_url: Optional[str] = None) -> git.Repo:
    """Create a repository on branch main with one commit of a.txt."""
    path.mkdir(parents=True, exist_ok=True)
    repo = git.Repo.init(path)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")
        cw.set_value("commit", "gpgsign", "false")
    repo.git.symbolic_ref("HEAD", "refs/heads/main")
    commit_file(repo, "a.txt", "base\n", "Initial commit")
    if origin_url is not None:
        repo.create_remote("origin", origin_url)
    return repo


def commit_file(
    repo: git.Repo, name: str, content: str, message: str, date: Optional[str] = None
) -> str:
    (Path(repo.working_tree_dir) / name).write_text(content)
    repo.git.add(name)
    args = ["-m", message]
    if date is not None:
        args += ["--date", date]
    repo.git.commit(*args)
    return repo.head.commit.hexsha


@pytest.fixture
def git_project(workspace):
    """A checkout named 'app' whose origin is HOST/group/app."""
    return init_repo(workspace / "app", origin_url=f"{HOST}/group/app.git")
