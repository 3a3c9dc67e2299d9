"""Query operations over the Granola cache: list notes, get note, get transcript."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .cache_parser import CacheLoader
from .errors import NoteNotFoundError
from .models import Document, Note, NoteSummary, State, Transcript, TranscriptEntry
from .polling import poll_until_ready

log = logging.getLogger(__name__)

UNTITLED = "Untitled"


def effective_title(doc: Document) -> str:
    """Title, else the calendar event's summary, else a fixed fallback."""
    return doc.title or doc.calendar_summary or UNTITLED


def _epoch_seconds(value: float) -> float:
    # Epoch millis or seconds
    return value / 1000 if value > 1e12 else value


def _timestamp_key(value: str | float) -> tuple[float, str]:
    """Sort key for ISO-8601 or epoch timestamps; unparseable values sort first, lexically."""
    try:
        return (_epoch_seconds(float(value)), "")
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return (float("-inf"), value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed.timestamp(), "")


def _in_range(created_at: str, start_date: str | None, end_date: str | None) -> bool:
    # ISO-8601 strings order correctly as plain strings
    if start_date and created_at < start_date:
        return False
    if end_date and created_at > end_date:
        return False
    return True


def _join_transcript(entries: list[TranscriptEntry]) -> str:
    ordered = sorted(entries, key=lambda e: _timestamp_key(e.start_timestamp))
    return "\n".join(e.text for e in ordered)


class CacheAccessor:
    """Read-only queries against fresh cache snapshots.

    Every call loads its own State. get_note() and get_transcript() poll
    until their payload is non-empty or poll_timeout seconds have passed,
    since Granola writes summaries and transcripts some time after the
    document itself appears.
    """

    def __init__(
        self,
        loader: CacheLoader,
        *,
        poll_timeout: float = 60.0,
        poll_interval: float = 2.0,
    ):
        self.loader = loader
        self.poll_timeout = poll_timeout
        self.poll_interval = poll_interval

    async def list_notes(
        self,
        limit: int = 50,
        offset: int = 0,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[NoteSummary]:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        if offset < 0:
            raise ValueError(f"offset must not be negative, got {offset}")

        state = await self.loader.load()
        docs = [
            doc for doc in state.documents.values()
            if not doc.deleted_at and _in_range(doc.created_at, start_date, end_date)
        ]
        docs.sort(key=lambda d: _timestamp_key(d.created_at), reverse=True)

        page = docs[offset:offset + limit]
        log.debug("Listing %d of %d notes (offset %d)", len(page), len(docs), offset)
        return [
            NoteSummary(id=doc.id, title=effective_title(doc), created_at=doc.created_at)
            for doc in page
        ]

    async def get_note(self, doc_id: str) -> Note:
        return await self._poll(
            lambda: self._fetch_note(doc_id),
            lambda note: bool(note.summary),
        )

    async def get_transcript(self, doc_id: str) -> Transcript:
        return await self._poll(
            lambda: self._fetch_transcript(doc_id),
            lambda transcript: bool(transcript.transcript),
        )

    async def _poll(self, fetch, is_ready):
        return await poll_until_ready(
            fetch,
            is_ready,
            timeout=self.poll_timeout,
            interval=self.poll_interval,
        )

    async def _load_document(self, doc_id: str) -> tuple[State, Document]:
        state = await self.loader.load()
        doc = state.documents.get(doc_id)
        if doc is None:
            raise NoteNotFoundError(doc_id)
        return state, doc

    async def _fetch_note(self, doc_id: str) -> Note:
        _, doc = await self._load_document(doc_id)
        return Note(
            id=doc.id,
            title=effective_title(doc),
            summary=doc.notes_plain,
            created_at=doc.created_at,
        )

    async def _fetch_transcript(self, doc_id: str) -> Transcript:
        state, _ = await self._load_document(doc_id)
        entries = state.transcripts.get(doc_id, [])
        return Transcript(id=doc_id, transcript=_join_transcript(entries))
