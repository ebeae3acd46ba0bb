from git import Repo
from git.exc import BadName, BadObject, GitCommandError
from datetime import datetime
from typing import List, Optional, Tuple
from pathlib import Path
import logging

log = logging.getLogger(__name__)

NO_PROMPT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


def short_sha(sha: str) -> str:
    return sha[:11]


def get_current_branch(repo: Repo) -> str:
    try:
        return repo.active_branch.name
    except TypeError:
        # Detached HEAD state
        return short_sha(repo.head.commit.hexsha)


def branch_exists_locally(repo: Repo, branch_name: str) -> bool:
    """Check if a branch exists locally.

    Args:
        repo: GitPython Repo instance.
        branch_name: Name of the branch to check.

    Returns:
        True if the branch exists locally, False otherwise.
    """
    try:
        repo.git.rev_parse("--verify", f"refs/heads/{branch_name}")
        return True
    except GitCommandError:
        return False


def remote_tracking_branch_exists(
    repo: Repo, branch_name: str, remote: str = "origin"
) -> bool:
    """Check if a remote-tracking ref exists for the branch (no network access).

    Args:
        repo: GitPython Repo instance.
        branch_name: Name of the branch to check.
        remote: Name of the remote (default: "origin").

    Returns:
        True if refs/remotes/<remote>/<branch_name> exists, False otherwise.
    """
    try:
        repo.git.rev_parse("--verify", f"refs/remotes/{remote}/{branch_name}")
        return True
    except GitCommandError:
        return False


def get_cherry_pick_head(repo: Repo) -> Optional[str]:
    """Return the commit a stopped cherry-pick is applying, or None if none is in progress."""
    cherry_pick_head = Path(repo.git_dir) / "CHERRY_PICK_HEAD"
    if not cherry_pick_head.exists():
        return None
    return cherry_pick_head.read_text().strip() or None


def resolve_commit_sha(repo: Repo, commit_id: str) -> Optional[str]:
    try:
        return repo.commit(commit_id).hexsha
    except (BadName, BadObject, ValueError):
        return None


def get_unmerged_paths(repo: Repo) -> List[str]:
    """Return the paths that have unmerged index entries, sorted."""
    return sorted(str(path) for path in repo.index.unmerged_blobs().keys())


def get_remote_url(repo: Repo, remote_name: str = "origin") -> Optional[str]:
    """Get the first URL configured for a remote.

    Args:
        repo: GitPython Repo instance.
        remote_name: Name of the remote.

    Returns:
        The remote URL, or None if the remote does not exist or has no URL.
    """
    try:
        remote = repo.remote(remote_name)
        return next(iter(remote.urls), None)
    except (ValueError, GitCommandError):
        return None


def fetch_remote(repo: Repo, remote_name: str, url: Optional[str] = None) -> None:
    """Fetch all branches of a remote without ever prompting for credentials.

    When url is given (e.g. the remote URL with credentials embedded) it is
    fetched from instead of the configured URL, updating the same
    remote-tracking refs.
    """
    with repo.git.custom_environment(**NO_PROMPT_ENV):
        if url is None:
            repo.git.fetch(remote_name)
        else:
            repo.git.fetch(url, f"+refs/heads/*:refs/remotes/{remote_name}/*")


def get_commit_author_info(
    repo: Repo, commit_id: str
) -> Optional[Tuple[datetime, str]]:
    """Get the author timestamp and author name of a commit.

    Args:
        repo: GitPython Repo instance.
        commit_id: Full or abbreviated commit SHA.

    Returns:
        (authored_datetime, author_name), or None if the commit is unknown.
    """
    try:
        commit = repo.commit(commit_id)
        return commit.authored_datetime, commit.author.name
    except (BadName, BadObject, ValueError) as e:
        log.debug(f"Commit {commit_id} not found in {repo.working_tree_dir}: {e}")
        return None


def command_error_message(error: GitCommandError) -> str:
    """Return git's own error text from a failed command."""
    stderr = (error.stderr or "").strip()
    prefix = "stderr: '"
    if stderr.startswith(prefix) and stderr.endswith("'"):
        stderr = stderr[len(prefix) : -1].strip()
    return stderr or str(error)
