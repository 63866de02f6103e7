"""Exceptions raised by parse-git-log."""

from typing import Optional


class GitLogError(Exception):
    """Base class for every error raised while listing history."""


class ProcessSpawnError(GitLogError):
    """The git process could not be started."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ProcessExitError(GitLogError):
    """The git process exited with a non-zero status.

    The message is the text git wrote to stderr and ``code`` is the exit
    status.
    """

    def __init__(self, stderr: str, code: Optional[int] = None):
        super().__init__(stderr)
        self.stderr = stderr
        self.code = code


class CommitDecodeError(GitLogError, ValueError):
    """A record did not contain every expected field."""

    def __init__(self, message: str, chunk: str, field_count: int):
        super().__init__(message)
        self.chunk = chunk
        self.field_count = field_count


class StreamStateError(GitLogError, RuntimeError):
    """A stream was driven more than once."""
