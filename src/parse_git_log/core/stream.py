"""Streaming ``git log`` parser.

A GitLogStream spawns git, splits its stdout into records, decodes each record
into a Commit and reports progress through events:

- ``commit``: a decoded Commit, or one a hook passed to ``push``
- ``data``: the same Commit, emitted right after ``commit``
- ``error``: the failure (ProcessExitError, or the runner's own error)
- ``finish``: git exited with status 0
- ``close``: ``(code, signal)`` of the process; always the last event, once

Commits can be consumed with listeners and ``await stream.run()`` or pulled
with ``async for commit in stream``.
"""

import asyncio
import codecs
import logging
import os
import signal
from collections import defaultdict
from enum import Enum
from pathlib import Path
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
)

from parse_git_log.config import DEFAULT_SETTINGS, ParserSettings
from parse_git_log.core.decoder import decode_commit
from parse_git_log.core.hooks import RecordHooks
from parse_git_log.core.process import (
    GitLogRunner,
    LogProcess,
    has_unborn_head,
    ProcessRunner,
    iter_bytes,
    resolve_git_dir,
)
from parse_git_log.core.splitter import asplit_records
from parse_git_log.exceptions import (
    CommitDecodeError,
    ProcessExitError,
    StreamStateError,
)
from parse_git_log.models.commit import Commit

logger = logging.getLogger(__name__)

EVENTS = ("commit", "data", "error", "finish", "close")

CloseArgs = Tuple[Optional[int], Optional[str]]


class StreamState(str, Enum):
    """Lifecycle of a stream."""

    PENDING = "pending"
    RUNNING = "running"
    DRAINING = "draining"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (StreamState.FINISHED, StreamState.FAILED)


def _close_args(returncode: Optional[int]) -> CloseArgs:
    """Split a returncode into an exit code and a signal name."""
    if returncode is None or returncode >= 0:
        return returncode, None
    try:
        return None, signal.Signals(-returncode).name
    except ValueError:
        return None, str(-returncode)


class GitLogStream:
    """One run of ``git log`` parsed into commits."""

    def __init__(
        self,
        cwd: Optional[Union[str, Path]] = None,
        hooks: Optional[RecordHooks] = None,
        settings: Optional[ParserSettings] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.cwd = Path(cwd) if cwd is not None else Path(os.getcwd())
        self.git_dir = resolve_git_dir(self.cwd)
        self.hooks = hooks or RecordHooks()
        self.settings = settings or DEFAULT_SETTINGS
        self.runner = runner or GitLogRunner(self.settings)

        self.state = StreamState.PENDING
        self.error: Optional[BaseException] = None
        self.stderr = ""
        self.commit_count = 0

        self._listeners: Dict[str, List[Tuple[Callable[..., Any], bool]]] = (
            defaultdict(list)
        )
        self._next_id = 0
        self._pushed: List[Commit] = []
        self._closed = False
        self._error_delivered = False

    # Listener registry

    def on(self, event: str, listener: Callable[..., Any]) -> "GitLogStream":
        """Call ``listener`` every time ``event`` is emitted."""
        self._listeners[self._check_event(event)].append((listener, False))
        return self

    def once(self, event: str, listener: Callable[..., Any]) -> "GitLogStream":
        """Call ``listener`` the next time ``event`` is emitted only."""
        self._listeners[self._check_event(event)].append((listener, True))
        return self

    def off(self, event: str, listener: Callable[..., Any]) -> "GitLogStream":
        """Remove the first registration of ``listener`` for ``event``."""
        entries = self._listeners[self._check_event(event)]
        for index, (registered, _) in enumerate(entries):
            if registered == listener:
                del entries[index]
                break
        return self

    def listener_count(self, event: str) -> int:
        return len(self._listeners[self._check_event(event)])

    def emit(self, event: str, *args: Any) -> bool:
        """Call the listeners of ``event``; return whether there were any."""
        entries = self._listeners[self._check_event(event)]
        if not entries:
            return False
        for entry in list(entries):
            listener, one_shot = entry
            if one_shot and entry in entries:
                entries.remove(entry)
            listener(*args)
        return True

    @staticmethod
    def _check_event(event: str) -> str:
        if event not in EVENTS:
            raise ValueError(f"Unknown event {event!r}, expected one of {EVENTS}")
        return event

    def push(self, commit: Commit) -> None:
        """Emit an extra commit right after the one being decoded.

        Meant for hooks that derive additional records from a commit; pushed
        commits keep whatever id the hook gave them.
        """
        if self.state is not StreamState.RUNNING:
            raise StreamStateError(f"Cannot push to a {self.state.value} stream")
        self._pushed.append(commit)

    # Driving the run

    async def run(self) -> None:
        """Drive the run to completion, emitting events along the way.

        A failure delivered to at least one ``error`` listener is not raised
        again; without an ``error`` listener it is raised once ``close`` has
        fired.
        """
        try:
            async for _ in self._iterate():
                pass
        except Exception as e:
            if e is self.error and self._error_delivered:
                return
            raise

    def __aiter__(self) -> AsyncIterator[Commit]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Commit]:
        if self.state is not StreamState.PENDING:
            raise StreamStateError(f"Stream already {self.state.value}")
        self.state = StreamState.RUNNING

        try:
            process = await self.runner.start(self.git_dir, self.cwd)
        except Exception as e:
            self._fail(e, (None, None))
            raise

        stderr_task = asyncio.create_task(self._read_stderr(process))
        try:
            async for record in asplit_records(
                self._read_stdout(process), self.settings.record_delimiter
            ):
                commit = self._decode(record)
                if commit is None:
                    continue
                pushed, self._pushed = self._pushed, []
                for item in [commit, *pushed]:
                    self.commit_count += 1
                    self.emit("commit", item)
                    self.emit("data", item)
                    yield item

            self.state = StreamState.DRAINING
            returncode = await process.wait()
            self.stderr = (await stderr_task).strip()
        except CommitDecodeError as e:
            await self._abort(process, stderr_task)
            self._fail(e, _close_args(process.returncode))
            raise
        except BaseException:
            # Hook errors, cancellation or an abandoned iterator.
            await self._abort(process, stderr_task)
            self.state = StreamState.FAILED
            self._close(_close_args(process.returncode))
            raise

        logger.debug("git log exited with %s", returncode)
        if returncode == 0 or await asyncio.to_thread(
            has_unborn_head, self.git_dir
        ):
            self._finish(_close_args(returncode))
            return

        error = ProcessExitError(self.stderr, code=returncode)
        if self._fail(error, _close_args(returncode)):
            raise error

    async def _read_stdout(self, process: LogProcess) -> AsyncIterator[str]:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        async for block in iter_bytes(process.stdout, self.settings.read_size):
            text = decoder.decode(block)
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail

    async def _read_stderr(self, process: LogProcess) -> str:
        parts = []
        async for block in iter_bytes(process.stderr, self.settings.read_size):
            parts.append(block)
        return b"".join(parts).decode("utf-8", errors="replace")

    async def _abort(
        self, process: LogProcess, stderr_task: "asyncio.Task"
    ) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
        stderr_task.cancel()
        await asyncio.gather(stderr_task, return_exceptions=True)

    def _decode(self, record: str) -> Optional[Commit]:
        chunk = record.strip()
        if not chunk:
            return None

        commit = decode_commit(
            chunk,
            self.settings.field_delimiter,
            commit_id=self._next_id,
            strict=self.settings.strict,
        )
        self._next_id += 1
        self.hooks.apply(self, commit)
        return commit

    # Terminal transitions

    def _finish(self, close_args: CloseArgs) -> bool:
        if self.state.is_terminal:
            logger.debug("Ignoring completion after %s", self.state.value)
            return False
        self.state = StreamState.FINISHED
        try:
            self.emit("finish")
        finally:
            self._close(close_args)
        return True

    def _fail(self, error: BaseException, close_args: CloseArgs) -> bool:
        if self.state.is_terminal:
            logger.debug("Ignoring failure after %s: %s", self.state.value, error)
            return False
        self.state = StreamState.FAILED
        self.error = error
        try:
            self._error_delivered = self.emit("error", error)
        finally:
            self._close(close_args)
        return True

    def _close(self, close_args: CloseArgs) -> None:
        if self._closed:
            return
        self._closed = True
        self.emit("close", *close_args)


def parse_git_log(
    cwd: Optional[Union[str, Path]] = None,
    hooks: Optional[RecordHooks] = None,
    settings: Optional[ParserSettings] = None,
    runner: Optional[ProcessRunner] = None,
) -> GitLogStream:
    """Create a stream over the history of the repository at ``cwd``.

    Nothing runs until the stream is driven with ``await stream.run()`` or
    iterated with ``async for``.

    Example:
        stream = parse_git_log("path/to/repo")
        stream.on("commit", lambda commit: print(commit.abbrev, commit.header))
        stream.once("error", lambda err: print("failed:", err))
        await stream.run()
    """
    return GitLogStream(cwd, hooks=hooks, settings=settings, runner=runner)


async def collect_commits(
    cwd: Optional[Union[str, Path]] = None,
    hooks: Optional[RecordHooks] = None,
    settings: Optional[ParserSettings] = None,
    runner: Optional[ProcessRunner] = None,
) -> List[Commit]:
    """Run ``git log`` and return every commit, newest first.

    Raises the same error the stream would emit on ``error``; commits read
    before a failure are discarded.
    """
    commits: List[Commit] = []
    stream = parse_git_log(cwd, hooks=hooks, settings=settings, runner=runner)
    stream.on("commit", commits.append)
    await stream.run()
    return commits
