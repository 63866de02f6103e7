"""Command line interface for parse-git-log."""
