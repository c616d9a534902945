"""Sources of track messages.

Providers return a parsed TrackMessage. The HTTP provider downloads the XML
feed with httpx and has a native async variant so that a fetch can be
cancelled; the file provider reads a cached copy.

Typical usage:
    provider = HttpTrackMessageProvider(TrackSystem.NATS, "https://example.net/nats.xml")
    message = provider.get_message()
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

import httpx

from skyroute.tracks.errors import TrackFetchError, TrackParseError
from skyroute.tracks.track_message import TrackMessage
from skyroute.tracks.track_system import TrackSystem

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


class TrackMessageProvider(ABC):
    """Abstract source of track messages."""

    @abstractmethod
    def get_message(self) -> TrackMessage:
        """Fetch and parse a message.

        Raises:
            TrackFetchError: If the message cannot be obtained.
            TrackParseError: If the message is malformed.
        """

    async def get_message_async(self) -> TrackMessage:
        """Async counterpart of get_message(); runs it in a worker thread by default."""
        return await asyncio.to_thread(self.get_message)


class FileTrackMessageProvider(TrackMessageProvider):
    """Reads a message from an XML file, typically a cache written earlier."""

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)

    def get_message(self) -> TrackMessage:
        try:
            content = self.file_path.read_bytes()
        except OSError as e:
            raise TrackFetchError(f"Failed to read track message {self.file_path}: {e}") from e
        return TrackMessage.from_xml(content)


class HttpTrackMessageProvider(TrackMessageProvider):
    """Downloads a track message over HTTP.

    Clients may be injected (tests use httpx.MockTransport); otherwise a
    short-lived client is created per request.

    Examples:
        >>> provider = HttpTrackMessageProvider(TrackSystem.NATS, url)
        >>> message = await provider.get_message_async()
    """

    def __init__(
        self,
        system: TrackSystem,
        url: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.system = system
        self.url = url
        self.timeout = httpx.Timeout(timeout_s, connect=min(timeout_s, 10.0))
        self._client = client
        self._async_client = async_client

    def get_message(self) -> TrackMessage:
        logger.info("Downloading %s tracks from %s", self.system.value, self.url)
        try:
            if self._client is not None:
                response = self._client.get(self.url)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(self.url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TrackFetchError(f"Failed to download {self.system.value} tracks: {e}") from e
        return self._parse(response)

    async def get_message_async(self) -> TrackMessage:
        logger.info("Downloading %s tracks from %s", self.system.value, self.url)
        try:
            if self._async_client is not None:
                response = await self._async_client.get(self.url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TrackFetchError(f"Failed to download {self.system.value} tracks: {e}") from e
        return self._parse(response)

    def _parse(self, response: httpx.Response) -> TrackMessage:
        message = TrackMessage.from_xml(response.content)
        if message.system is not self.system:
            raise TrackParseError(
                f"Expected {self.system.value} tracks, got {message.system.value}"
            )
        return message
