"""Spawn git to list history."""

import asyncio
import logging
import os
from pathlib import Path
from typing import AsyncIterator, List, Optional, Protocol, Union

import git

from parse_git_log.config import DEFAULT_SETTINGS, ParserSettings
from parse_git_log.core.log_format import build_log_args
from parse_git_log.exceptions import ProcessSpawnError

logger = logging.getLogger(__name__)


class ByteReader(Protocol):
    """Readable half of a pipe, as exposed by asyncio.subprocess."""

    async def read(self, n: int = -1) -> bytes: ...


class LogProcess(Protocol):
    """Running process whose stdout carries ``git log`` output."""

    stdout: ByteReader
    stderr: ByteReader
    returncode: Optional[int]

    async def wait(self) -> int: ...

    def kill(self) -> None: ...


class ProcessRunner(Protocol):
    """Starts the history listing process for a repository."""

    async def start(self, git_dir: Path, cwd: Path) -> LogProcess: ...


def resolve_git_dir(cwd: Union[str, Path]) -> Path:
    """Return the absolute ``.git`` directory path for a working tree."""
    return (Path(cwd) / ".git").resolve()


def has_unborn_head(git_dir: Path) -> bool:
    """Check if git_dir is a repository whose HEAD has no commit yet.

    ``git log`` fails in such a repository although its history is simply
    empty.
    """
    try:
        repo = git.Repo(git_dir)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        return False
    try:
        return not repo.head.is_valid()
    finally:
        repo.close()


class GitLogRunner:
    """Runs ``git --git-dir=<dir> log --format=...`` as an asyncio subprocess.

    The working directory is handed to the child process; the parent's own
    working directory is never changed.
    """

    def __init__(self, settings: ParserSettings = DEFAULT_SETTINGS):
        self.settings = settings

    def command(self, git_dir: Path) -> List[str]:
        """Build the full argument vector for a git directory."""
        return [
            self.settings.git_executable,
            *build_log_args(
                str(git_dir),
                self.settings.field_delimiter,
                self.settings.record_delimiter,
            ),
        ]

    async def start(self, git_dir: Path, cwd: Path) -> LogProcess:
        cmd = self.command(git_dir)
        # A missing directory is reported by git itself, not as a spawn error.
        workdir = str(cwd) if cwd.is_dir() else None
        logger.debug("Starting %s in %s", cmd[:3], workdir or os.getcwd())
        try:
            return await asyncio.create_subprocess_exec(
                *cmd,
                cwd=workdir,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessSpawnError(
                f"Could not start {cmd[0]}: {e}", code=e.errno
            ) from e


async def iter_bytes(reader: ByteReader, read_size: int) -> AsyncIterator[bytes]:
    """Yield blocks from a reader until end of file."""
    while True:
        block = await reader.read(read_size)
        if not block:
            return
        yield block
