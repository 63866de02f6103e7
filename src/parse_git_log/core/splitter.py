"""Split a text stream into records on a fixed delimiter."""

from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, List

from parse_git_log.core.log_format import RECORD_DELIMITER


class RecordSplitter:
    """Incremental splitter that buffers input until a delimiter is complete.

    Joining every returned chunk with the delimiter reproduces the input, up
    to a trailing delimiter. A stream that starts with the delimiter, or holds
    two in a row, yields empty chunks; callers discard those.
    """

    def __init__(self, delimiter: str = RECORD_DELIMITER):
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self.delimiter = delimiter
        # Text of the current record that can no longer hold a delimiter start.
        self._pieces: List[str] = []
        # Last few characters, shorter than the delimiter, still undecided.
        self._tail = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a delimiter."""
        return "".join(self._pieces) + self._tail

    def feed(self, text: str) -> List[str]:
        """Add text and return every record it completes.

        Only the new text and the undecided tail are searched, so a record
        spread over many feeds costs time linear in its length.
        """
        if not text:
            return []
        window = self._tail + text
        records = []
        start = 0
        while True:
            index = window.find(self.delimiter, start)
            if index == -1:
                break
            self._pieces.append(window[start:index])
            records.append("".join(self._pieces))
            self._pieces = []
            start = index + len(self.delimiter)

        rest = window[start:]
        settled = max(len(rest) - (len(self.delimiter) - 1), 0)
        if settled:
            self._pieces.append(rest[:settled])
        self._tail = rest[settled:]
        return records

    def flush(self) -> List[str]:
        """Return the unterminated tail, if any, and reset the buffer."""
        tail = self.pending
        self._pieces = []
        self._tail = ""
        return [tail] if tail else []


def split_records(
    stream: Iterable[str], delimiter: str = RECORD_DELIMITER
) -> Iterator[str]:
    """Yield records from an iterable of text pieces."""
    splitter = RecordSplitter(delimiter)
    for text in stream:
        yield from splitter.feed(text)
    yield from splitter.flush()


async def asplit_records(
    stream: AsyncIterable[str], delimiter: str = RECORD_DELIMITER
) -> AsyncIterator[str]:
    """Yield records from an async iterable of text pieces."""
    splitter = RecordSplitter(delimiter)
    async for text in stream:
        for record in splitter.feed(text):
            yield record
    for record in splitter.flush():
        yield record
