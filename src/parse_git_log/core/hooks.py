"""Per-commit extension hooks."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from parse_git_log.models.commit import Commit

if TYPE_CHECKING:
    from parse_git_log.core.stream import GitLogStream


RecordStartHook = Callable[["GitLogStream", Commit], Any]
RecordFinalHook = Callable[[Commit], Any]


@dataclass
class RecordHooks:
    """Optional callbacks run while each commit is decoded.

    ``on_record_start`` sees the stream and the fresh commit and may mutate
    the commit or hand extra commits to ``stream.push``. ``on_record_final``
    runs afterwards with the finalized commit.
    Exceptions raised by either hook abort the run.
    """

    on_record_start: Optional[RecordStartHook] = None
    on_record_final: Optional[RecordFinalHook] = None

    def apply(self, stream: "GitLogStream", commit: Commit) -> None:
        """Run both hooks, in order, on one commit."""
        if self.on_record_start is not None:
            self.on_record_start(stream, commit)
        if self.on_record_final is not None:
            self.on_record_final(commit)
