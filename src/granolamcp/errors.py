"""Exceptions raised while reading and querying the Granola cache."""

from __future__ import annotations


class GranolaMCPError(Exception):
    """Base class for all granolamcp errors."""


class CacheReadError(GranolaMCPError):
    """The cache file is missing or could not be read."""


class CacheParseError(GranolaMCPError):
    """The cache file is not valid JSON or does not have the expected shape."""


class NoteNotFoundError(GranolaMCPError):
    def __init__(self, doc_id: str):
        super().__init__(f"Document not found: {doc_id}")
        self.doc_id = doc_id
