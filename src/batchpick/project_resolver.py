"""Mapping of project codes to local checkouts.

The workspace is flat: every checkout is an immediate child directory of
the workspace parent, named exactly like the project code in its URL.
Nested or renamed checkouts are not found; there is no recursive search.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

log = logging.getLogger(__name__)


def list_workspace_dirs(workspace: Union[str, Path]) -> List[str]:
    """List the names of the immediate child directories of the workspace.

    Returns:
        Directory names in sorted order, or an empty list if the workspace
        does not exist or cannot be read.
    """
    parent = Path(workspace)
    try:
        return sorted(child.name for child in parent.iterdir() if child.is_dir())
    except OSError as e:
        log.debug(f"Cannot list workspace {parent}: {e}")
        return []


def resolve_project_dir(
    project_code: str, workspace: Union[str, Path]
) -> Optional[Path]:
    """Find the checkout directory for a project code.

    Args:
        project_code: Project code taken from a commit reference.
        workspace: Parent directory holding one checkout per project.

    Returns:
        Absolute path of the child directory whose name equals project_code
        (case-sensitive), or None if there is none.
    """
    parent = Path(workspace)
    if not parent.is_dir():
        return None

    for name in list_workspace_dirs(parent):
        if name == project_code:
            return (parent / name).absolute()
    return None
