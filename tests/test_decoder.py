"""Tests for decoding git log records into commits."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from parse_git_log.core.decoder import decode_commit, strip_markers
from parse_git_log.core.log_format import FIELD_COUNT, FIELD_DELIMITER
from parse_git_log.exceptions import CommitDecodeError

HASH = "3f2c9a1b7d6e5f4a3b2c1d0e9f8a7b6c5d4e3f2a"
TREE = "9a8b7c6d5e4f3a2b1c0d9e8f7a6b5c4d3e2f1a0b"


def make_record(
    parents: str = "",
    commit_hash: str = HASH,
    timestamp: str = "1577880000",
    body: str = "",
    tree: str = TREE,
    name: str = "Test User",
    email: str = "test@example.com",
    relative: str = "3 years ago",
    iso: str = "2020-01-01T12:00:00+00:00",
    subject: str = "Initial commit",
    ref: str = "",
) -> str:
    """Build a record the way git prints it, without the record delimiter."""
    return FIELD_DELIMITER.join(
        [
            parents,
            commit_hash,
            timestamp,
            body,
            tree,
            name,
            email,
            relative,
            iso,
            subject,
            ref,
        ]
    )


def test_decode_full_record():
    """Test that every positional field lands on its attribute."""
    commit = decode_commit(make_record(ref="HEAD -> main, tag: v1.0"), commit_id=4)

    assert commit.id == 4
    assert commit.hash == HASH
    assert commit.abbrev == "3f2c9a1"
    assert commit.tree == TREE
    assert commit.parents == []
    assert commit.path == f"{HASH}-1577880000"
    assert commit.author.name == "Test User"
    assert commit.author.email == "test@example.com"
    assert commit.author.timestamp == 1577880000
    assert commit.date.unix == 1577880000
    assert commit.date.relative == "3 years ago"
    assert commit.date.iso == "2020-01-01T12:00:00+00:00"
    assert commit.timestamp == 1577880000
    assert commit.header == "Initial commit"
    assert commit.body is None
    assert commit.contents == "Initial commit"
    assert commit.ref == "HEAD -> main, tag: v1.0"
    assert len(commit.raw_chunks) == FIELD_COUNT


def test_parents_split_on_spaces():
    """Test merge commits keep their parents in order."""
    commit = decode_commit(make_record(parents="abc123 def456"))

    assert commit.parents == ["abc123", "def456"]
    assert commit.parent == ["abc123", "def456"]
    assert not commit.is_root


def test_root_commit_has_no_parents():
    commit = decode_commit(make_record(parents=""))

    assert commit.parents == []
    assert commit.is_root


def test_body_joined_to_header_in_contents():
    """Test that a non-empty body is trimmed and appended after a blank line."""
    commit = decode_commit(
        make_record(subject="fix: thing", body="\n  Detailed body.\n\n")
    )

    assert commit.body == "Detailed body."
    assert commit.contents == "fix: thing\n\nDetailed body."


def test_whitespace_body_is_absent():
    commit = decode_commit(make_record(subject="chore: bump", body=" \n\n "))

    assert commit.body is None
    assert commit.contents == "chore: bump"


@pytest.mark.parametrize(
    "commit_hash",
    ["abcdefg", "0123456789", HASH],
)
def test_abbrev_is_first_seven_characters(commit_hash):
    commit = decode_commit(make_record(commit_hash=commit_hash))

    assert commit.abbrev == commit_hash[:7]


def test_leading_marker_is_stripped():
    """Test that an ``x)`` prefix is removed before splitting."""
    commit = decode_commit("x)" + make_record(parents="abc123"))

    assert commit.parents == ["abc123"]
    assert commit.chunk.startswith("x)")


def test_trailing_marker_is_stripped():
    """Test that a ``<x`` suffix is removed before splitting."""
    commit = decode_commit(make_record(ref="HEAD") + "<x")

    assert commit.ref == "HEAD"


def test_strip_markers_leaves_short_text_alone():
    assert strip_markers("") == ""
    assert strip_markers("a") == "a"
    assert strip_markers("plain text") == "plain text"


def test_short_record_degrades_with_warning(caplog):
    """Test that missing fields are left empty rather than raising."""
    with caplog.at_level(logging.WARNING, logger="parse_git_log.core.decoder"):
        commit = decode_commit(FIELD_DELIMITER.join(["", HASH, "1577880000"]))

    assert commit.hash == HASH
    assert commit.abbrev == "3f2c9a1"
    assert commit.timestamp == 1577880000
    assert commit.body is None
    assert commit.tree is None
    assert commit.author.name is None
    assert commit.header is None
    assert commit.contents is None
    assert commit.ref is None
    assert "3 of 11 fields" in caplog.text


def test_record_without_delimiters_degrades():
    commit = decode_commit("garbage")

    assert commit.parents == ["garbage"]
    assert commit.hash is None
    assert commit.abbrev is None
    assert commit.path == "-"


def test_short_record_raises_in_strict_mode():
    with pytest.raises(CommitDecodeError) as exc_info:
        decode_commit(FIELD_DELIMITER.join(["", HASH]), strict=True)

    assert exc_info.value.field_count == 2


def test_invalid_timestamp_is_none():
    commit = decode_commit(make_record(timestamp="soon"))

    assert commit.timestamp is None
    assert commit.path == f"{HASH}-soon"


def test_custom_delimiter():
    fields = ["", HASH, "1", "", TREE, "n", "e", "r", "i", "subject", ""]
    commit = decode_commit("|".join(fields), "|")

    assert commit.header == "subject"


def test_authored_at_parses_iso_date():
    commit = decode_commit(make_record(iso="2020-01-01T13:00:00+01:00"))

    assert commit.authored_at == datetime(2020, 1, 1, 12, tzinfo=timezone.utc)
    assert commit.authored_at.utcoffset() == timedelta(hours=1)


def test_authored_at_invalid_is_none():
    assert decode_commit(make_record(iso="yesterday")).authored_at is None


def test_hooks_can_set_extra_attributes():
    """Test that decoded commits accept attributes beyond the declared ones."""
    commit = decode_commit(make_record())
    commit.kind = "feat"

    assert commit.kind == "feat"
    assert commit.model_dump()["kind"] == "feat"
