"""
Unit tests for the metadata fetch and decode.
"""

import asyncio
import json
from unittest.mock import patch

import aiohttp
import pytest
from pydantic import ValidationError

from sterilis_agent.edge.exceptions import DecodeError, FetchError
from sterilis_agent.edge.processors.metadata import (
    METADATA_URL,
    PortalMetadata,
    decode_metadata,
    fetch_metadata,
)


class TestDecodeMetadata:
    """Test cases for decode_metadata."""

    def test_decode_full_document(self, metadata_payload):
        """All eleven fields are decoded."""
        metadata = decode_metadata(json.dumps(metadata_payload))

        assert metadata.id == "42"
        assert metadata.waste_type == "organic"
        assert metadata.type == "autoclave"
        assert metadata.successful == "false"

    def test_decode_missing_fields_are_empty(self):
        """Absent keys decode to empty strings."""
        metadata = decode_metadata(b'{"id": "7"}')

        assert metadata.id == "7"
        assert metadata.cycle == ""
        assert metadata.end_time == ""

    def test_decode_null_field_is_empty(self):
        metadata = decode_metadata(b'{"id": null, "cycle": "c"}')

        assert metadata.id == ""
        assert metadata.cycle == "c"

    def test_decode_ignores_unknown_keys(self):
        metadata = decode_metadata(b'{"id": "1", "firmware": "3.2"}')

        assert metadata == PortalMetadata(id="1")

    def test_decode_invalid_json(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_metadata(b"<html>not json</html>")

        assert exc_info.value.code == "DECODE_ERROR"

    def test_decode_non_object(self):
        with pytest.raises(DecodeError):
            decode_metadata(b'["id", "42"]')

    def test_decode_non_string_field(self):
        """Numbers are not coerced into string fields."""
        with pytest.raises(DecodeError) as exc_info:
            decode_metadata(b'{"id": 42}')

        assert "id" in exc_info.value.details["errors"]

    def test_document_is_immutable(self):
        metadata = PortalMetadata(id="1")

        with pytest.raises(ValidationError):
            metadata.id = "2"


class TestFetchMetadata:
    """Test cases for fetch_metadata."""

    @pytest.mark.asyncio
    async def test_fetch_success(self, make_session, metadata_payload):
        session = make_session(metadata_payload)

        metadata = await fetch_metadata(session=session)

        assert metadata.id == "42"
        assert metadata.grind_cycle == "G1"
        assert session.calls[0]["url"] == METADATA_URL

    @pytest.mark.asyncio
    async def test_fetch_applies_timeout(self, make_session):
        session = make_session({"id": "1"})

        await fetch_metadata(timeout=2.5, session=session)

        assert session.calls[0]["timeout"].total == 2.5

    @pytest.mark.asyncio
    async def test_fetch_leaves_caller_session_open(self, make_session):
        session = make_session({"id": "1"})

        await fetch_metadata(session=session)

        assert session.closed is False

    @pytest.mark.asyncio
    async def test_fetch_closes_own_session(self, make_session):
        session = make_session({"id": "1"})

        with patch("sterilis_agent.edge.processors.metadata.aiohttp.ClientSession", return_value=session) as cls:
            metadata = await fetch_metadata(timeout=3)

        assert metadata.id == "1"
        assert session.closed is True
        assert cls.call_args.kwargs["timeout"].total == 3

    @pytest.mark.asyncio
    async def test_fetch_connection_error(self, make_session):
        session = make_session(error=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(FetchError) as exc_info:
            await fetch_metadata(session=session)

        assert exc_info.value.code == "FETCH_ERROR"
        assert exc_info.value.details["url"] == METADATA_URL

    @pytest.mark.asyncio
    async def test_fetch_timeout(self, make_session):
        session = make_session(error=asyncio.TimeoutError())

        with pytest.raises(FetchError) as exc_info:
            await fetch_metadata(session=session)

        assert exc_info.value.details["error"] == "TimeoutError"

    @pytest.mark.asyncio
    async def test_fetch_non_2xx(self, make_session):
        session = make_session({"id": "1"}, status=503)

        with pytest.raises(FetchError) as exc_info:
            await fetch_metadata(session=session)

        assert exc_info.value.details["status"] == 503

    @pytest.mark.asyncio
    async def test_fetch_malformed_body(self, make_session):
        session = make_session(body=b"{broken")

        with pytest.raises(DecodeError):
            await fetch_metadata(session=session)

    @pytest.mark.asyncio
    async def test_fetch_error_closes_own_session(self, make_session):
        session = make_session(error=aiohttp.ClientConnectionError("refused"))

        with patch("sterilis_agent.edge.processors.metadata.aiohttp.ClientSession", return_value=session):
            with pytest.raises(FetchError):
                await fetch_metadata()

        assert session.closed is True
