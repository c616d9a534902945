"""Coordinates the track handlers of several systems.

A failed download of one system is logged and skipped; the others still
load. Successfully fetched messages can be cached to disk in their XML
form and read back later without network access.

Typical usage:
    manager = TrackManager.from_config(graph, config)
    manager.fetch_all()
    manager.apply_all()
"""

import asyncio
import logging
from pathlib import Path

import httpx

from skyroute.core.config import ConfigLoader
from skyroute.navigation.waypoint_graph import WaypointGraph
from skyroute.tracks.errors import TrackError
from skyroute.tracks.providers import (
    DEFAULT_TIMEOUT_S,
    FileTrackMessageProvider,
    HttpTrackMessageProvider,
)
from skyroute.tracks.track_handler import OverlayState, TrackHandler
from skyroute.tracks.track_system import TrackSystem

logger = logging.getLogger(__name__)


class TrackManager:
    """Runs fetch, apply and undo over a set of track handlers.

    Attributes:
        graph: Graph shared by all handlers
        handlers: Handler per track system
        cache_dir: Directory for cached messages, None to disable caching
    """

    def __init__(
        self,
        graph: WaypointGraph,
        handlers: list[TrackHandler] | None = None,
        cache_dir: str | Path | None = None,
    ) -> None:
        self.graph = graph
        self.handlers: dict[TrackSystem, TrackHandler] = {}
        self.cache_dir = Path(cache_dir) if cache_dir is not None else None
        for handler in handlers or []:
            self.add_handler(handler)

    @classmethod
    def from_config(
        cls,
        graph: WaypointGraph,
        config: ConfigLoader,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ) -> "TrackManager":
        """Create HTTP-backed handlers for every enabled system in the configuration."""
        timeout_s = float(config.get("tracks.timeout_s", DEFAULT_TIMEOUT_S))
        manager = cls(graph, cache_dir=config.get("tracks.cache_dir"))

        for name, settings in config.get("tracks.systems", {}).items():
            if not settings.get("enabled", True):
                continue
            system = TrackSystem.from_name(name)
            provider = HttpTrackMessageProvider(
                system,
                settings["url"],
                timeout_s=timeout_s,
                client=client,
                async_client=async_client,
            )
            manager.add_handler(TrackHandler(system, graph, provider))

        return manager

    def add_handler(self, handler: TrackHandler) -> None:
        if handler.graph is not self.graph:
            raise ValueError("Handler operates on a different waypoint graph")
        self.handlers[handler.system] = handler

    def cache_path(self, system: TrackSystem) -> Path | None:
        if self.cache_dir is None:
            return None
        return self.cache_dir / f"{system.value.lower()}.xml"

    def fetch_all(self) -> list[TrackSystem]:
        """Fetch every handler's tracks, skipping the ones that fail.

        Returns:
            Systems whose tracks were fetched
        """
        fetched = []
        for system, handler in self.handlers.items():
            try:
                handler.get_all_tracks()
            except TrackError as e:
                logger.error("Failed to get %s tracks: %s", system.value, e)
                continue
            self._write_cache(handler)
            fetched.append(system)
        return fetched

    async def fetch_all_async(self) -> list[TrackSystem]:
        """Fetch every handler's tracks concurrently, skipping the ones that fail."""
        systems = list(self.handlers)
        results = await asyncio.gather(
            *(self.handlers[s].get_all_tracks_async() for s in systems),
            return_exceptions=True,
        )

        fetched = []
        for system, result in zip(systems, results):
            if isinstance(result, TrackError):
                logger.error("Failed to get %s tracks: %s", system.value, result)
                continue
            if isinstance(result, BaseException):
                raise result
            self._write_cache(self.handlers[system])
            fetched.append(system)
        return fetched

    def load_cached(self) -> list[TrackSystem]:
        """Read cached messages for handlers that have not fetched yet."""
        loaded = []
        for system, handler in self.handlers.items():
            path = self.cache_path(system)
            if path is None or not path.exists() or handler.started_getting_tracks:
                continue
            try:
                handler.get_all_tracks(FileTrackMessageProvider(path))
            except TrackError as e:
                logger.error("Failed to read cached %s tracks: %s", system.value, e)
                continue
            loaded.append(system)
        return loaded

    def apply_all(self) -> None:
        """Apply every parsed overlay to the graph."""
        for handler in self.handlers.values():
            if handler.state in (OverlayState.PARSED, OverlayState.APPLIED):
                handler.add_to_waypoint_list()

    def undo_all(self) -> None:
        """Undo every applied overlay, most recently added system first."""
        for handler in reversed(list(self.handlers.values())):
            if handler.state is OverlayState.APPLIED:
                handler.undo_edit()

    def _write_cache(self, handler: TrackHandler) -> None:
        path = self.cache_path(handler.system)
        if path is None or handler.raw_data is None:
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(handler.raw_data.to_xml(), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not cache %s tracks to %s: %s", handler.system.value, path, e)
