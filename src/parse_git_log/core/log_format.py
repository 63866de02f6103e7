"""Delimiters and placeholders of the ``git log --format`` string."""

from typing import Dict, List

FIELD_DELIMITER = "~&>8~#@~8<&~"
RECORD_DELIMITER = "~!---------------------- >8~ ----------------------!~"

# Order matters: a field's position in the output is its index here.
PLACEHOLDERS: List[str] = [
    "%P",  # parent hashes
    "%H",  # commit hash
    "%at",  # author date, unix timestamp
    "%b",  # body
    "%T",  # tree hash
    "%an",  # author name
    "%ae",  # author email
    "%ar",  # author date, relative
    "%aI",  # author date, strict ISO 8601
    "%s",  # subject
    "%D",  # ref names
]

FIELD_POSITIONS: Dict[str, int] = {
    "parents": 0,
    "hash": 1,
    "timestamp": 2,
    "body": 3,
    "tree": 4,
    "author_name": 5,
    "author_email": 6,
    "date_relative": 7,
    "date_iso": 8,
    "header": 9,
    "ref": 10,
}

FIELD_COUNT = len(PLACEHOLDERS)

ABBREV_LENGTH = 7


def build_format(
    field_delimiter: str = FIELD_DELIMITER,
    record_delimiter: str = RECORD_DELIMITER,
) -> str:
    """Return the pretty format string, record delimiter included."""
    return field_delimiter.join(PLACEHOLDERS) + record_delimiter


def build_log_args(
    git_dir: str,
    field_delimiter: str = FIELD_DELIMITER,
    record_delimiter: str = RECORD_DELIMITER,
) -> List[str]:
    """Return the git arguments that list history in the parseable format."""
    return [
        f"--git-dir={git_dir}",
        "log",
        f"--format={build_format(field_delimiter, record_delimiter)}",
    ]
