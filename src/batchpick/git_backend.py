"""GitPython implementation of the VcsBackend contract."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .backend import CherryPickResult, VcsBackend
from .credentials import CredentialsContext
from .errors import BackendError
from .utils import git_utils

log = logging.getLogger(__name__)


class GitBackend(VcsBackend):
    """Runs repository operations through GitPython.

    Attributes:
        credentials: Used for fetches over HTTP(S); git never prompts.
        remote_name: Remote whose branches are tracked when a target branch
            has no local counterpart.
    """

    def __init__(
        self,
        credentials: Optional[CredentialsContext] = None,
        remote_name: str = "origin",
    ):
        self.credentials = credentials or CredentialsContext()
        self.remote_name = remote_name
        self._repos: Dict[Path, git.Repo] = {}

    def _open(self, path: Path) -> git.Repo:
        key = Path(path).absolute()
        repo = self._repos.get(key)
        if repo is None:
            try:
                repo = git.Repo(key)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise BackendError(f"Not a git repository: {key}", operation="open") from e
            self._repos[key] = repo
        return repo

    def current_branch(self, path: Path) -> str:
        repo = self._open(path)
        try:
            return git_utils.get_current_branch(repo)
        except ValueError as e:
            # Unborn HEAD
            raise BackendError(str(e), operation="current_branch") from e

    def switch_branch(self, path: Path, branch: str) -> None:
        repo = self._open(path)
        try:
            if git_utils.branch_exists_locally(repo, branch):
                log.debug(f"Checking out local branch {branch} in {path}")
                repo.git.checkout(branch)
                return

            self._fetch(repo)
            if not git_utils.remote_tracking_branch_exists(repo, branch, self.remote_name):
                raise BackendError(
                    f"Branch '{branch}' exists neither locally nor on remote '{self.remote_name}'",
                    operation="switch_branch",
                )

            log.debug(f"Creating {branch} tracking {self.remote_name}/{branch} in {path}")
            repo.git.checkout("-b", branch, "--track", f"{self.remote_name}/{branch}")
        except GitCommandError as e:
            raise BackendError(
                git_utils.command_error_message(e), operation="switch_branch"
            ) from e

    def _fetch(self, repo: git.Repo) -> None:
        url = None
        if self.credentials.is_set():
            remote_url = git_utils.get_remote_url(repo, self.remote_name)
            if remote_url:
                url = self.credentials.apply_to_url(remote_url)
        git_utils.fetch_remote(repo, self.remote_name, url)

    def cherry_pick(self, path: Path, commit_id: str) -> CherryPickResult:
        repo = self._open(path)
        leftover = git_utils.get_unmerged_paths(repo)
        try:
            repo.git.cherry_pick(commit_id)
            return CherryPickResult.clean()
        except GitCommandError as e:
            message = git_utils.command_error_message(e)

        if leftover:
            log.debug(f"Unmerged paths in {path} before picking {commit_id}: {leftover}")
            return CherryPickResult.failed(message)

        # Conflicts count only if this very commit started and stopped
        picking = git_utils.get_cherry_pick_head(repo)
        if picking is None or picking != git_utils.resolve_commit_sha(repo, commit_id):
            return CherryPickResult.failed(message)
        if git_utils.get_unmerged_paths(repo):
            return CherryPickResult.conflicted(message)
        return CherryPickResult.failed(f"{message} (cherry-pick left in progress)")

    def has_uncommitted_changes(self, path: Path) -> bool:
        repo = self._open(path)
        return repo.is_dirty(untracked_files=False) or bool(
            git_utils.get_unmerged_paths(repo)
        )

    def conflicted_files(self, path: Path) -> List[str]:
        return git_utils.get_unmerged_paths(self._open(path))

    def remote_url(self, path: Path, remote_name: str) -> Optional[str]:
        try:
            repo = self._open(path)
        except BackendError:
            return None
        return git_utils.get_remote_url(repo, remote_name)

    def commit_timestamp_and_author(
        self, path: Path, commit_id: str
    ) -> Optional[Tuple[datetime, str]]:
        try:
            repo = self._open(path)
        except BackendError:
            return None
        return git_utils.get_commit_author_info(repo, commit_id)
