"""Command scripts for cross-project cherry-picks.

A commit from another repository has to be fetched through a temporary
remote first, which may need credentials this tool cannot assume. So the
tool only writes the commands down; the user runs them.
"""

from typing import List

DEFAULT_COMMENT_PREFIX = "::"
DEFAULT_UPSTREAM_REMOTE = "upstream"
SCRIPT_LENGTH = 8


def build_cross_repo_commands(
    local_repo_path: str,
    source_repo_base_url: str,
    commit_id: str,
    target_branch: str,
    comment_prefix: str = DEFAULT_COMMENT_PREFIX,
    upstream_remote: str = DEFAULT_UPSTREAM_REMOTE,
) -> List[str]:
    """Build the command sequence that cherry-picks a commit from another repository.

    Nothing is executed. Inputs are not validated: commit_id and
    target_branch must be non-empty.

    Args:
        local_repo_path: Checkout the commit is applied to.
        source_repo_base_url: Repository URL the commit comes from, without ".git".
        commit_id: Commit to cherry-pick.
        target_branch: Branch to switch to before picking.
        comment_prefix: Comment marker of the target shell ("::" for cmd, "#" for sh).
        upstream_remote: Name of the temporary remote.

    Returns:
        Exactly SCRIPT_LENGTH lines: a comment, cd, switch, remote remove,
        remote add, fetch, cherry-pick and an empty separator line.
    """
    return [
        f"{comment_prefix} Cherry-pick commit {commit_id} from {upstream_remote} to {target_branch}",
        f"cd {local_repo_path}",
        f"git switch {target_branch}",
        f"git remote remove {upstream_remote}",
        f"git remote add {upstream_remote} {source_repo_base_url}.git",
        f"git fetch {upstream_remote}",
        f"git cherry-pick {commit_id}",
        "",
    ]


def is_annotation(line: str, comment_prefix: str = DEFAULT_COMMENT_PREFIX) -> bool:
    return line.startswith(comment_prefix)
