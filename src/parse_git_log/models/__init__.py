"""Data models for parse-git-log."""

from .commit import Author, Commit, CommitDate

__all__ = ["Author", "Commit", "CommitDate"]
