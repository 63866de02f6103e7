"""Parse ``git log`` output into commit records, streaming or collected."""

from parse_git_log.config import ParserSettings
from parse_git_log.core.hooks import RecordHooks
from parse_git_log.core.stream import (
    GitLogStream,
    StreamState,
    collect_commits,
    parse_git_log,
)
from parse_git_log.exceptions import (
    CommitDecodeError,
    GitLogError,
    ProcessExitError,
    ProcessSpawnError,
    StreamStateError,
)
from parse_git_log.models import Author, Commit, CommitDate

__version__ = "0.1.0"

__all__ = [
    "Author",
    "Commit",
    "CommitDate",
    "CommitDecodeError",
    "GitLogError",
    "GitLogStream",
    "ParserSettings",
    "ProcessExitError",
    "ProcessSpawnError",
    "RecordHooks",
    "StreamState",
    "StreamStateError",
    "collect_commits",
    "parse_git_log",
]
