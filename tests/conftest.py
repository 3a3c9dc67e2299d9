"""Shared fixtures for granolamcp tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from granolamcp.accessor import CacheAccessor
from granolamcp.cache_parser import CacheLoader
from granolamcp.config import Config


def _make_cache_text(documents: dict, transcripts: dict | None = None) -> str:
    """Build cache file contents in Granola's double-encoded layout."""
    state: dict = {"documents": documents}
    if transcripts is not None:
        state["transcripts"] = transcripts
    return json.dumps({"cache": json.dumps({"state": state})})


@pytest.fixture
def cache_text():
    return _make_cache_text


@pytest.fixture
def sample_documents() -> dict:
    return {
        "A": {"id": "A", "title": "Old", "created_at": "2024-01-01T09:00:00.000Z",
              "deleted_at": "2024-01-05T09:00:00.000Z", "notes_plain": "gone"},
        "B": {"id": "B", "title": "Planning", "created_at": "2024-02-01T09:00:00.000Z",
              "notes_plain": "Plan the quarter."},
        "C": {"id": "C", "title": "", "created_at": "2024-03-01T09:00:00.000Z",
              "google_calendar_event": {"summary": "Standup"}},
    }


@pytest.fixture
def sample_transcripts() -> dict:
    return {
        "B": [
            {"start_timestamp": "2024-02-01T09:00:02.000Z", "text": "world", "source": "microphone"},
            {"start_timestamp": "2024-02-01T09:00:01.000Z", "text": "hello", "source": "system"},
        ],
    }


@pytest.fixture
def cache_file(tmp_path: Path, sample_documents: dict, sample_transcripts: dict) -> Path:
    path = tmp_path / "Granola" / "cache-v3.json"
    path.parent.mkdir(parents=True)
    path.write_text(_make_cache_text(sample_documents, sample_transcripts), encoding="utf-8")
    return path


@pytest.fixture
def accessor(cache_file: Path) -> CacheAccessor:
    return CacheAccessor(CacheLoader(cache_file), poll_timeout=0.05, poll_interval=0.01)


@pytest.fixture
def sample_config(cache_file: Path) -> Config:
    return Config(
        cache_dir=cache_file.parent,
        cache_filename=cache_file.name,
        poll_timeout=0.05,
        poll_interval=0.01,
    )
