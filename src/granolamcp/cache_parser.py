"""Load Granola's double-encoded JSON cache file into a State snapshot."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from .errors import CacheParseError, CacheReadError
from .models import Document, State, TranscriptEntry

log = logging.getLogger(__name__)


class CacheLoader:
    """Reads a fresh State from the cache file on every call to load()."""

    def __init__(self, cache_path: Path):
        self.cache_path = cache_path

    async def load(self) -> State:
        try:
            raw_text = await asyncio.to_thread(self.cache_path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f"Cannot read Granola cache at {self.cache_path}: {e}") from e
        return parse_state(raw_text)


def parse_state(raw_text: str) -> State:
    """Validate the nested cache structure and build a State from it."""
    outer = _decode(raw_text, "cache file")
    if not isinstance(outer, dict) or "cache" not in outer:
        raise CacheParseError("Cache file has no 'cache' field")

    # Double-encoded: outer["cache"] is a JSON string
    inner = outer["cache"]
    if isinstance(inner, str):
        inner = _decode(inner, "'cache' field")
    if not isinstance(inner, dict):
        raise CacheParseError("'cache' field is not a JSON object")

    state = inner.get("state")
    if not isinstance(state, dict):
        raise CacheParseError("Cache has no 'state' object")

    documents = state.get("documents")
    if not isinstance(documents, dict):
        raise CacheParseError("'state.documents' is missing or not an object")
    transcripts = state.get("transcripts", {})
    if transcripts is None:
        transcripts = {}
    if not isinstance(transcripts, dict):
        raise CacheParseError("'state.transcripts' is not an object")

    result = State()
    for key, doc in documents.items():
        parsed = _parse_document(key, doc)
        if parsed is None:
            log.warning("Skipping malformed document %s", key)
            continue
        result.documents[key] = parsed

    for doc_id, data in transcripts.items():
        result.transcripts[doc_id] = _parse_transcript(data)

    log.debug(
        "Loaded %d documents and %d transcripts from cache",
        len(result.documents),
        len(result.transcripts),
    )
    return result


def _decode(text: str, what: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CacheParseError(f"Invalid JSON in {what}: {e}") from e


def _str_or_empty(value: object) -> str:
    return value if isinstance(value, str) else ""


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_document(key: str, doc: object) -> Document | None:
    if not isinstance(doc, dict):
        return None
    created_at = doc.get("created_at")
    if not isinstance(created_at, str):
        return None

    doc_id = doc.get("id")
    if not isinstance(doc_id, str) or not doc_id:
        doc_id = key

    gcal = doc.get("google_calendar_event")
    calendar_summary = _str_or_empty(gcal.get("summary")) if isinstance(gcal, dict) else ""

    return Document(
        id=doc_id,
        created_at=created_at,
        title=_str_or_empty(doc.get("title")),
        deleted_at=str(doc["deleted_at"]) if doc.get("deleted_at") else None,
        notes_plain=_str_or_empty(doc.get("notes_plain")),
        calendar_summary=calendar_summary,
    )


def _parse_transcript(data: object) -> list[TranscriptEntry]:
    # Value is usually a list of entries; some versions wrap it in an object
    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict):
        entries = data.get("entries", data.get("segments", []))
    else:
        entries = []
    if not isinstance(entries, list):
        return []

    transcript: list[TranscriptEntry] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        timestamp = entry.get("start_timestamp") or entry.get("timestamp") or ""
        transcript.append(
            TranscriptEntry(
                start_timestamp=timestamp if _is_number(timestamp) else str(timestamp),
                text=_str_or_empty(entry.get("text")),
            )
        )
    return transcript
