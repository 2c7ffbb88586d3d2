"""
Exception hierarchy for aicov.

    AicovError
    ├── ReadError              file could not be loaded
    ├── UnreadableInput        text cannot be decoded as source
    │   └── UnsupportedContent binary / oversized content
    └── CancellationRequested  a project pass was cancelled

Per-file errors never abort a project pass: the file is skipped and
reported in ``ProjectAnalysis.skipped``.
"""

from typing import Optional


class AicovError(Exception):
    """Base class for all aicov exceptions."""

    exit_code = 1

    def __init__(self, message: str, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__(message)


class ReadError(AicovError):
    """Raised when a file cannot be read from storage."""

    def __init__(self, path: str, reason: str = ""):
        msg = f"Could not read '{path}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, context={"path": path})


class UnreadableInput(AicovError):
    """Raised when content cannot be decoded as source text."""

    def __init__(self, path: str = "", reason: str = "not valid UTF-8 text"):
        where = f"'{path}' " if path else ""
        super().__init__(f"Input {where}is unreadable: {reason}", context={"path": path})


class UnsupportedContent(UnreadableInput):
    """Raised for binary or otherwise non-text content."""

    def __init__(self, path: str = "", reason: str = "binary content"):
        super().__init__(path, reason)


class CancellationRequested(AicovError):
    """Raised between file analyses when a project pass is cancelled."""

    def __init__(self, completed: int = 0, total: int = 0):
        super().__init__(
            f"Analysis cancelled after {completed} of {total} files",
            context={"completed": completed, "total": total},
        )
