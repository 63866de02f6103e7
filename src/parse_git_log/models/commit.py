"""Commit model produced by the git log parser."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Author(BaseModel):
    """Author identity of a commit."""

    name: Optional[str] = None
    email: Optional[str] = None
    timestamp: Optional[int] = None


class CommitDate(BaseModel):
    """Author date of a commit in the three forms git prints."""

    relative: Optional[str] = None
    unix: Optional[int] = None
    iso: Optional[str] = None


class Commit(BaseModel):
    """Represents a single commit decoded from ``git log`` output.

    Hooks may set additional attributes on an instance while it is being
    decoded; they are kept and serialized with the declared fields.
    """

    id: int
    path: str
    contents: Optional[str] = None

    hash: Optional[str] = None
    abbrev: Optional[str] = None
    parents: List[str] = Field(default_factory=list)
    tree: Optional[str] = None

    author: Author = Field(default_factory=Author)
    date: CommitDate = Field(default_factory=CommitDate)
    timestamp: Optional[int] = None

    header: Optional[str] = None
    body: Optional[str] = None
    ref: Optional[str] = None

    raw_chunks: List[str] = Field(default_factory=list)
    chunk: str = ""

    model_config = {"extra": "allow"}

    @property
    def parent(self) -> List[str]:
        """Alias of ``parents``."""
        return self.parents

    @property
    def is_root(self) -> bool:
        """Check if the commit has no parents."""
        return not self.parents

    @property
    def authored_at(self) -> Optional[datetime]:
        """Get the author date as a timezone aware datetime."""
        if not self.date.iso:
            return None
        try:
            return datetime.fromisoformat(self.date.iso)
        except ValueError:
            return None
