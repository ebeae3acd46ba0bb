from enum import Enum
from typing import Optional


class BatchPickErrorType(str, Enum):
    INPUT = "Invalid batch input"
    PARSE = "Invalid commit reference format"
    RESOLUTION = "Project directory not found"
    BACKEND = "Git operation failed"


class BatchPickError(Exception):
    error_type: BatchPickErrorType = BatchPickErrorType.BACKEND

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def describe(self) -> str:
        return f"{self.error_type.value}: {self.message}"


class InputError(BatchPickError):
    """Missing reference lines or target branch; raised before any work starts."""

    error_type = BatchPickErrorType.INPUT


class ParseError(BatchPickError):
    error_type = BatchPickErrorType.PARSE

    def __init__(self, raw_input: str):
        self.raw_input = raw_input
        super().__init__(BatchPickErrorType.PARSE.value)


class ResolutionError(BatchPickError):
    error_type = BatchPickErrorType.RESOLUTION

    def __init__(self, project_code: str, workspace: str):
        self.project_code = project_code
        self.workspace = workspace
        super().__init__(BatchPickErrorType.RESOLUTION.value)


class BackendError(BatchPickError):
    """A git operation failed; message is the backend's own text."""

    error_type = BatchPickErrorType.BACKEND

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message)
