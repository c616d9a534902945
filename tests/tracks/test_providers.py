"""Tests for track message providers."""

import asyncio

import httpx
import pytest

from skyroute.tracks.errors import TrackFetchError, TrackParseError
from skyroute.tracks.providers import FileTrackMessageProvider, HttpTrackMessageProvider
from skyroute.tracks.track_system import TrackSystem

NATS_URL = "https://tracks.test/nats.xml"


def xml_transport(body: str, status_code: int = 200) -> httpx.MockTransport:
    """Transport that answers every request with the given body."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == NATS_URL
        return httpx.Response(status_code, text=body)

    return httpx.MockTransport(handler)


class TestHttpTrackMessageProvider:
    """Test downloading messages over HTTP."""

    def test_get_message(self, nats_xml):
        """Test a successful download is parsed."""
        with httpx.Client(transport=xml_transport(nats_xml)) as client:
            provider = HttpTrackMessageProvider(TrackSystem.NATS, NATS_URL, client=client)
            message = provider.get_message()

        assert message.system is TrackSystem.NATS
        assert len(message.all_tracks()) == 3

    def test_http_error_raises_fetch_error(self):
        """Test a server error becomes TrackFetchError."""
        with httpx.Client(transport=xml_transport("down", status_code=503)) as client:
            provider = HttpTrackMessageProvider(TrackSystem.NATS, NATS_URL, client=client)

            with pytest.raises(TrackFetchError, match="NATS"):
                provider.get_message()

    def test_connection_error_raises_fetch_error(self):
        """Test transport failures become TrackFetchError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            provider = HttpTrackMessageProvider(TrackSystem.NATS, NATS_URL, client=client)

            with pytest.raises(TrackFetchError):
                provider.get_message()

    def test_invalid_url_raises_fetch_error(self):
        """Test a URL httpx cannot parse becomes TrackFetchError."""
        with httpx.Client(transport=xml_transport("")) as client:
            provider = HttpTrackMessageProvider(
                TrackSystem.NATS, "https://tracks.test/na\x00ts.xml", client=client
            )

            with pytest.raises(TrackFetchError):
                provider.get_message()

    def test_wrong_system_raises_parse_error(self, nats_xml):
        """Test a message of another system is rejected."""
        with httpx.Client(transport=xml_transport(nats_xml)) as client:
            provider = HttpTrackMessageProvider(TrackSystem.PACOTS, NATS_URL, client=client)

            with pytest.raises(TrackParseError):
                provider.get_message()

    def test_malformed_body_raises_parse_error(self):
        """Test a body that is not a track message is rejected."""
        with httpx.Client(transport=xml_transport("<html>")) as client:
            provider = HttpTrackMessageProvider(TrackSystem.NATS, NATS_URL, client=client)

            with pytest.raises(TrackParseError):
                provider.get_message()

    def test_get_message_async(self, nats_xml):
        """Test the async download path."""

        async def fetch():
            async with httpx.AsyncClient(transport=xml_transport(nats_xml)) as client:
                provider = HttpTrackMessageProvider(
                    TrackSystem.NATS, NATS_URL, async_client=client
                )
                return await provider.get_message_async()

        message = asyncio.run(fetch())

        assert [t.ident for t in message.all_tracks()] == ["A", "B", "Z"]

    def test_get_message_async_http_error(self):
        """Test async server errors become TrackFetchError."""

        async def fetch():
            async with httpx.AsyncClient(transport=xml_transport("", status_code=404)) as client:
                provider = HttpTrackMessageProvider(
                    TrackSystem.NATS, NATS_URL, async_client=client
                )
                return await provider.get_message_async()

        with pytest.raises(TrackFetchError):
            asyncio.run(fetch())


class TestFileTrackMessageProvider:
    """Test reading messages from disk."""

    def test_get_message(self, tmp_path, nats_xml):
        """Test a message file is read and parsed."""
        path = tmp_path / "nats.xml"
        path.write_text(nats_xml, encoding="utf-8")

        message = FileTrackMessageProvider(path).get_message()

        assert message.system is TrackSystem.NATS

    def test_get_message_async_runs_sync_read(self, tmp_path, nats_xml):
        """Test the default async variant returns the same message."""
        path = tmp_path / "nats.xml"
        path.write_text(nats_xml, encoding="utf-8")
        provider = FileTrackMessageProvider(path)

        assert asyncio.run(provider.get_message_async()) == provider.get_message()

    def test_missing_file_raises(self, tmp_path):
        """Test a missing file raises TrackFetchError."""
        with pytest.raises(TrackFetchError):
            FileTrackMessageProvider(tmp_path / "missing.xml").get_message()
