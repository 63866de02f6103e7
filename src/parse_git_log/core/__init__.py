"""Streaming git log parser internals."""
