"""MCP server exposing the cache queries as tools."""

from __future__ import annotations

import json
import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from .accessor import CacheAccessor
from .cache_parser import CacheLoader
from .config import Config
from .errors import GranolaMCPError

log = logging.getLogger(__name__)

SERVER_NAME = "granola-mcp"


def _to_json(payload: object) -> str:
    return json.dumps(payload, indent=2)


async def list_notes_json(
    accessor: CacheAccessor,
    limit: int = 50,
    offset: int = 0,
    start_date: str | None = None,
    end_date: str | None = None,
) -> str:
    try:
        notes = await accessor.list_notes(
            limit=limit, offset=offset, start_date=start_date, end_date=end_date,
        )
    except (GranolaMCPError, ValueError) as e:
        log.warning("list_notes failed: %s", e)
        raise ToolError(str(e)) from e
    return _to_json([note.to_dict() for note in notes])


async def get_note_json(accessor: CacheAccessor, doc_id: str) -> str:
    try:
        note = await accessor.get_note(doc_id)
    except GranolaMCPError as e:
        log.warning("get_note %s failed: %s", doc_id, e)
        raise ToolError(str(e)) from e
    return _to_json(note.to_dict())


async def get_transcript_json(accessor: CacheAccessor, doc_id: str) -> str:
    try:
        transcript = await accessor.get_transcript(doc_id)
    except GranolaMCPError as e:
        log.warning("get_transcript %s failed: %s", doc_id, e)
        raise ToolError(str(e)) from e
    return _to_json(transcript.to_dict())


def build_accessor(config: Config) -> CacheAccessor:
    return CacheAccessor(
        CacheLoader(config.cache_path),
        poll_timeout=config.poll_timeout,
        poll_interval=config.poll_interval,
    )


def create_server(config: Config) -> FastMCP:
    """Build a FastMCP server with list_notes, get_note and get_transcript tools."""
    accessor = build_accessor(config)
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool(title="List Notes", description="List meeting notes with optional filters")
    async def list_notes(
        limit: Annotated[int, Field(gt=0, description="Max results")] = 50,
        offset: Annotated[int, Field(ge=0, description="Skip first N results")] = 0,
        start_date: Annotated[
            str | None, Field(description="ISO date, include notes from this date")
        ] = None,
        end_date: Annotated[
            str | None, Field(description="ISO date, include notes until this date")
        ] = None,
    ) -> str:
        return await list_notes_json(accessor, limit, offset, start_date, end_date)

    @mcp.tool(title="Get Note", description="Get note title and summary")
    async def get_note(id: Annotated[str, Field(description="Document UUID")]) -> str:
        return await get_note_json(accessor, id)

    @mcp.tool(title="Get Transcript", description="Get full transcript for a note")
    async def get_transcript(id: Annotated[str, Field(description="Document UUID")]) -> str:
        return await get_transcript_json(accessor, id)

    log.debug("Serving Granola cache at %s", config.cache_path)
    return mcp
