"""Runtime settings for parse-git-log."""

import git
from pydantic import BaseModel, Field

from parse_git_log.core.log_format import FIELD_DELIMITER, RECORD_DELIMITER


def default_git_executable() -> str:
    """Get the git executable GitPython resolved at import time.

    GitPython honours the ``GIT_PYTHON_GIT_EXECUTABLE`` environment variable,
    so the same override applies here.
    """
    return git.Git.GIT_PYTHON_GIT_EXECUTABLE or "git"


class ParserSettings(BaseModel):
    """Settings shared by the process runner, splitter and decoder.

    Attributes:
        git_executable: Program spawned to list history.
        field_delimiter: Marker separating fields within one record.
        record_delimiter: Marker separating records in the output.
        strict: Raise on records with missing fields instead of degrading.
        read_size: Maximum number of bytes read from stdout at once.
    """

    git_executable: str = Field(default_factory=default_git_executable)
    field_delimiter: str = Field(default=FIELD_DELIMITER, min_length=1)
    record_delimiter: str = Field(default=RECORD_DELIMITER, min_length=1)
    strict: bool = False
    read_size: int = Field(default=64 * 1024, gt=0)

    model_config = {"frozen": True}


DEFAULT_SETTINGS = ParserSettings()
