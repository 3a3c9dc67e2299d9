"""Tests for granolamcp.server — tool handlers and FastMCP registration."""

from __future__ import annotations

import asyncio
import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from granolamcp.server import (
    SERVER_NAME,
    build_accessor,
    create_server,
    get_note_json,
    get_transcript_json,
    list_notes_json,
)


class TestToolHandlers:
    def test_list_notes_json(self, accessor):
        payload = json.loads(asyncio.run(list_notes_json(accessor)))
        assert payload == [
            {"id": "C", "title": "Standup", "created_at": "2024-03-01T09:00:00.000Z"},
            {"id": "B", "title": "Planning", "created_at": "2024-02-01T09:00:00.000Z"},
        ]

    def test_output_is_indented(self, accessor):
        text = asyncio.run(get_note_json(accessor, "B"))
        assert text.startswith("{\n  ")

    def test_list_notes_bad_limit(self, accessor):
        with pytest.raises(ToolError, match="limit"):
            asyncio.run(list_notes_json(accessor, limit=0))

    def test_get_note_json(self, accessor):
        payload = json.loads(asyncio.run(get_note_json(accessor, "B")))
        assert payload["summary"] == "Plan the quarter."
        assert payload["title"] == "Planning"

    def test_get_note_not_found(self, accessor):
        with pytest.raises(ToolError, match="Document not found: zzz"):
            asyncio.run(get_note_json(accessor, "zzz"))

    def test_get_transcript_json(self, accessor):
        payload = json.loads(asyncio.run(get_transcript_json(accessor, "B")))
        assert payload == {"id": "B", "transcript": "hello\nworld"}

    def test_get_transcript_not_found(self, accessor):
        with pytest.raises(ToolError, match="not found"):
            asyncio.run(get_transcript_json(accessor, "zzz"))

    def test_read_error_becomes_tool_error(self, sample_config, tmp_path):
        sample_config.cache_dir = tmp_path / "nowhere"
        with pytest.raises(ToolError, match="Cannot read Granola cache"):
            asyncio.run(list_notes_json(build_accessor(sample_config)))


class TestCreateServer:
    def test_build_accessor_uses_config(self, sample_config):
        acc = build_accessor(sample_config)
        assert acc.loader.cache_path == sample_config.cache_path
        assert acc.poll_timeout == 0.05
        assert acc.poll_interval == 0.01

    def test_registers_tools(self, sample_config):
        server = create_server(sample_config)
        assert server.name == SERVER_NAME
        tools = asyncio.run(server.list_tools())
        assert sorted(t.name for t in tools) == ["get_note", "get_transcript", "list_notes"]

    def test_list_notes_schema(self, sample_config):
        tools = asyncio.run(create_server(sample_config).list_tools())
        schema = next(t for t in tools if t.name == "list_notes").inputSchema
        assert set(schema["properties"]) == {"limit", "offset", "start_date", "end_date"}
        assert schema["properties"]["limit"]["exclusiveMinimum"] == 0
        assert schema["properties"]["offset"]["minimum"] == 0

    def test_get_note_requires_id(self, sample_config):
        tools = asyncio.run(create_server(sample_config).list_tools())
        schema = next(t for t in tools if t.name == "get_note").inputSchema
        assert schema["required"] == ["id"]
