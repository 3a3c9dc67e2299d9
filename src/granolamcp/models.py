"""Data models for Granola cache snapshots and query results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class TranscriptEntry:
    start_timestamp: str | float
    text: str


@dataclass
class Document:
    id: str
    created_at: str
    title: str = ""
    deleted_at: str | None = None
    notes_plain: str = ""
    calendar_summary: str = ""


@dataclass
class State:
    """One read of the cache: documents and transcripts keyed by document id."""

    documents: dict[str, Document] = field(default_factory=dict)
    transcripts: dict[str, list[TranscriptEntry]] = field(default_factory=dict)


@dataclass
class NoteSummary:
    id: str
    title: str
    created_at: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Note:
    id: str
    title: str
    summary: str
    created_at: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Transcript:
    id: str
    transcript: str

    def to_dict(self) -> dict:
        return asdict(self)
