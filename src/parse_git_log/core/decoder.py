"""Decode one ``git log`` record into a Commit."""

import logging
from typing import List, Optional

from parse_git_log.core.log_format import (
    ABBREV_LENGTH,
    FIELD_COUNT,
    FIELD_DELIMITER,
    FIELD_POSITIONS,
)
from parse_git_log.exceptions import CommitDecodeError
from parse_git_log.models.commit import Author, Commit, CommitDate

logger = logging.getLogger(__name__)


def strip_markers(chunk: str) -> str:
    """Remove the two-character marker git output can leave at either end.

    A record may start with a stray ``x)`` pair and end with a ``<x`` pair;
    both are dropped.
    """
    text = chunk
    if len(text) > 1 and text[1] == ")":
        text = text[2:]
    if len(text) > 1 and text[-2] == "<":
        text = text[:-2]
    return text


def split_fields(text: str, delimiter: str = FIELD_DELIMITER) -> List[str]:
    """Split a record into its positional fields."""
    return text.split(delimiter)


def _field(fields: List[str], name: str) -> Optional[str]:
    position = FIELD_POSITIONS[name]
    return fields[position] if position < len(fields) else None


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def decode_commit(
    chunk: str,
    delimiter: str = FIELD_DELIMITER,
    *,
    commit_id: int = 0,
    strict: bool = False,
) -> Commit:
    """Build a Commit from one trimmed record.

    Args:
        chunk: Record text, without the record delimiter.
        delimiter: Marker separating the fields.
        commit_id: Run-local id given to the commit.
        strict: Raise CommitDecodeError when fields are missing instead of
            leaving the matching attributes empty.

    Returns:
        The decoded Commit.
    """
    fields = split_fields(strip_markers(chunk), delimiter)

    if len(fields) < FIELD_COUNT:
        message = (
            f"Record has {len(fields)} of {FIELD_COUNT} fields: {chunk[:80]!r}"
        )
        if strict:
            raise CommitDecodeError(message, chunk=chunk, field_count=len(fields))
        logger.warning(message)

    parent_text = _field(fields, "parents") or ""
    commit_hash = _field(fields, "hash")
    timestamp_text = _field(fields, "timestamp")
    timestamp = _to_int(timestamp_text)
    header = _field(fields, "header")

    body = (_field(fields, "body") or "").strip() or None
    contents = f"{header}\n\n{body}" if body else header

    return Commit(
        id=commit_id,
        path=f"{commit_hash or ''}-{timestamp_text or ''}",
        contents=contents,
        hash=commit_hash,
        abbrev=commit_hash[:ABBREV_LENGTH] if commit_hash is not None else None,
        parents=parent_text.split(" ") if parent_text else [],
        tree=_field(fields, "tree"),
        author=Author(
            name=_field(fields, "author_name"),
            email=_field(fields, "author_email"),
            timestamp=timestamp,
        ),
        date=CommitDate(
            relative=_field(fields, "date_relative"),
            unix=timestamp,
            iso=_field(fields, "date_iso"),
        ),
        timestamp=timestamp,
        header=header,
        body=body,
        ref=_field(fields, "ref"),
        raw_chunks=fields,
        chunk=chunk,
    )
