"""Version-control backend contract.

The batch core never touches a repository directly; everything it needs
goes through a VcsBackend. GitBackend (git_backend.py) is the real one,
tests use an in-memory fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class CherryPickSignal(str, Enum):
    CLEAN = "clean"
    CONFLICTED = "conflicted"
    FAILED = "failed"


@dataclass(frozen=True)
class CherryPickResult:
    """What the backend reports after running a cherry-pick.

    Attributes:
        signal: CLEAN if the commit applied, CONFLICTED if git stopped with
            unmerged paths, FAILED for anything else.
        message: Backend output explaining a CONFLICTED or FAILED result.
    """

    signal: CherryPickSignal
    message: str = ""

    @classmethod
    def clean(cls) -> "CherryPickResult":
        return cls(CherryPickSignal.CLEAN)

    @classmethod
    def conflicted(cls, message: str = "") -> "CherryPickResult":
        return cls(CherryPickSignal.CONFLICTED, message)

    @classmethod
    def failed(cls, message: str) -> "CherryPickResult":
        return cls(CherryPickSignal.FAILED, message)


class VcsBackend(ABC):
    """Repository operations used by the batch core.

    Methods that cannot complete raise BackendError with the backend's own
    message, except where a None/False return is documented.
    """

    @abstractmethod
    def current_branch(self, path: Path) -> str:
        pass

    @abstractmethod
    def switch_branch(self, path: Path, branch: str) -> None:
        """Check out branch, creating it to track the remote branch if needed."""
        pass

    @abstractmethod
    def cherry_pick(self, path: Path, commit_id: str) -> CherryPickResult:
        pass

    @abstractmethod
    def has_uncommitted_changes(self, path: Path) -> bool:
        pass

    @abstractmethod
    def conflicted_files(self, path: Path) -> List[str]:
        pass

    @abstractmethod
    def remote_url(self, path: Path, remote_name: str) -> Optional[str]:
        """Return the remote's URL, or None if the remote or repository is missing."""
        pass

    @abstractmethod
    def commit_timestamp_and_author(
        self, path: Path, commit_id: str
    ) -> Optional[Tuple[datetime, str]]:
        """Return the commit's author time and author name, or None if not found."""
        pass
