"""Parsing of commit URLs pasted by the user.

Two URL styles are recognised, tried in this order:

    GitLab (separator style):  https://host/group/project/-/commit/<sha>
    GitHub (plain style):      https://host/user/project/commit/<sha>

Both patterns are anchored at the start and end of the line. A line that
matches neither is not an error here; callers get None and decide.
"""

import re
from typing import List, Optional

from .models import CommitReference

GIT_SUFFIX = ".git"

SEPARATOR_STYLE = re.compile(r"(https?://[^/]+)/(.+)/-/commit/([a-fA-F0-9]+)")
PLAIN_STYLE = re.compile(r"(https?://[^/]+)/(.+?)(?<!/-)/commit/([a-fA-F0-9]+)")

EXPECTED_FORMATS: List[str] = [
    "GitLab: https://gitlab.example.com/group/project/-/commit/abc123",
    "GitHub: https://github.com/user/project/commit/abc123",
]


def strip_git_suffix(url: str) -> str:
    if url.endswith(GIT_SUFFIX):
        return url[: -len(GIT_SUFFIX)]
    return url


def project_code_from_path(base_path: str) -> Optional[str]:
    """Return the last path segment that is not a literal '-'."""
    for part in reversed(base_path.split("/")):
        if part and part != "-":
            return part
    return None


def parse_commit_reference(line: str) -> Optional[CommitReference]:
    """Parse one input line into a CommitReference.

    Args:
        line: A commit URL, optionally surrounded by whitespace and
            optionally ending in ".git".

    Returns:
        The parsed reference, or None if the line is not a recognised
        commit URL or has no usable project segment.
    """
    raw_input = line.strip()
    url = strip_git_suffix(raw_input)

    match = SEPARATOR_STYLE.fullmatch(url) or PLAIN_STYLE.fullmatch(url)
    if match is None:
        return None

    host, base_path, commit_id = match.groups()
    project_code = project_code_from_path(base_path)
    if project_code is None:
        return None

    return CommitReference(
        raw_input=raw_input,
        repo_base_url=f"{host}/{base_path}",
        project_code=project_code,
        commit_id=commit_id,
    )
