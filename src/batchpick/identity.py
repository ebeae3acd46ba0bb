from typing import Optional

from .reference_parser import strip_git_suffix


def normalize_remote_url(url: str) -> str:
    return strip_git_suffix(url.strip()).lower()


def is_same_project(repo_base_url: Optional[str], origin_url: Optional[str]) -> bool:
    """Decide whether a reference belongs to the checkout's own repository.

    Both URLs are compared without a trailing ".git" and ignoring case. A
    missing origin URL always means cross-project.
    """
    if not repo_base_url or not origin_url:
        return False
    return normalize_remote_url(repo_base_url) == normalize_remote_url(origin_url)
