"""Reversible overlay of oceanic tracks onto a waypoint graph.

A TrackHandler owns one overlay for one track system and moves through

    NOT_STARTED -> FETCHING -> PARSED -> APPLIED -> ROLLED_BACK
                   FETCHING -> FAILED

Fetching may be async and cancellable; a cancelled fetch returns the
handler to NOT_STARTED. Applying and undoing are synchronous and never
yield, so the graph is never seen half-edited.

Typical usage:
    handler = TrackHandler(TrackSystem.NATS, graph, provider)
    handler.get_all_tracks()
    handler.add_to_waypoint_list()
    ...
    handler.undo_edit()
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from itertools import pairwise

from skyroute.navigation.waypoint import Waypoint
from skyroute.navigation.waypoint_graph import Edge, Neighbor, WaypointGraph
from skyroute.tracks.errors import InvalidOverlayTransitionError, TrackFetchError
from skyroute.tracks.providers import TrackMessageProvider
from skyroute.tracks.track_message import TrackMessage
from skyroute.tracks.track_system import Track, TrackSystem, airway_name, parse_coordinate

logger = logging.getLogger(__name__)


class OverlayState(Enum):
    """Lifecycle state of a track overlay."""

    NOT_STARTED = auto()
    FETCHING = auto()
    PARSED = auto()
    APPLIED = auto()
    ROLLED_BACK = auto()
    FAILED = auto()


@dataclass
class OverlayRecord:
    """Graph changes made by one application of an overlay.

    Attributes:
        waypoints: Touched waypoint index -> True if the overlay created it
        edges: (source index, edge) of every edge the overlay added, in order
    """

    waypoints: dict[int, bool] = field(default_factory=dict)
    edges: list[tuple[int, Edge]] = field(default_factory=list)

    @property
    def owned_waypoints(self) -> list[int]:
        return [index for index, owned in self.waypoints.items() if owned]


class TrackHandler:
    """Downloads the tracks of one system and overlays them on a graph.

    Attributes:
        system: Track system handled
        graph: Graph the overlay is applied to
        provider: Default message source
        state: Current lifecycle state
        raw_data: Last successfully fetched message, None before that
        record: Changes of the current application, None when not applied

    Examples:
        >>> handler = TrackHandler(TrackSystem.NATS, graph, provider)
        >>> handler.get_all_tracks()
        >>> handler.add_to_waypoint_list()
        >>> handler.undo_edit()
    """

    def __init__(
        self,
        system: TrackSystem,
        graph: WaypointGraph,
        provider: TrackMessageProvider | None = None,
    ) -> None:
        self.system = system
        self.graph = graph
        self.provider = provider
        self.state = OverlayState.NOT_STARTED
        self.raw_data: TrackMessage | None = None
        self.record: OverlayRecord | None = None

    @property
    def started_getting_tracks(self) -> bool:
        """Whether get_all_tracks() or get_all_tracks_async() has been called."""
        return self.state is not OverlayState.NOT_STARTED

    def get_all_tracks(self, provider: TrackMessageProvider | None = None) -> TrackMessage:
        """Download and parse all track messages, blocking.

        Args:
            provider: Message source overriding the handler's default

        Returns:
            The parsed message

        Raises:
            InvalidOverlayTransitionError: If tracks were already applied or the handler failed.
            TrackError: If the download or parsing fails. The handler becomes FAILED
                on this or any other error raised by the provider.
        """
        source = self._begin_fetch(provider)
        try:
            message = source.get_message()
        except Exception:
            self.state = OverlayState.FAILED
            raise
        return self._finish_fetch(message)

    async def get_all_tracks_async(
        self, provider: TrackMessageProvider | None = None
    ) -> TrackMessage:
        """Async counterpart of get_all_tracks().

        Cancelling the awaiting task resets the handler to NOT_STARTED and
        discards whatever was fetched.
        """
        source = self._begin_fetch(provider)
        try:
            message = await source.get_message_async()
        except asyncio.CancelledError:
            logger.info("%s track download cancelled", self.system.value)
            self.state = OverlayState.NOT_STARTED
            self.raw_data = None
            raise
        except Exception:
            self.state = OverlayState.FAILED
            raise
        return self._finish_fetch(message)

    def _begin_fetch(self, provider: TrackMessageProvider | None) -> TrackMessageProvider:
        if self.state not in (OverlayState.NOT_STARTED, OverlayState.PARSED):
            raise InvalidOverlayTransitionError(
                f"Cannot fetch {self.system.value} tracks in state {self.state.name}"
            )
        source = provider or self.provider
        if source is None:
            raise TrackFetchError(f"No message provider for {self.system.value} tracks")

        self.state = OverlayState.FETCHING
        self.raw_data = None
        return source

    def _finish_fetch(self, message: TrackMessage) -> TrackMessage:
        if message.system is not self.system:
            self.state = OverlayState.FAILED
            raise TrackFetchError(
                f"Expected {self.system.value} message, got {message.system.value}"
            )
        self.raw_data = message
        self.state = OverlayState.PARSED
        logger.info(
            "Parsed %d %s tracks", len(message.all_tracks()), self.system.value
        )
        return message

    def add_to_waypoint_list(self) -> None:
        """Add the parsed tracks to the graph, if not added already.

        Every track is resolved against the graph before anything is
        mutated; tracks with unknown waypoint identifiers are skipped.

        Raises:
            InvalidOverlayTransitionError: If tracks have not been parsed or were undone.
        """
        if self.state is OverlayState.APPLIED:
            logger.debug("%s tracks already applied", self.system.value)
            return
        if self.state is not OverlayState.PARSED or self.raw_data is None:
            raise InvalidOverlayTransitionError(
                f"Cannot apply {self.system.value} tracks in state {self.state.name}"
            )

        resolved = []
        for track in self.raw_data.all_tracks():
            waypoints = self._resolve_track(track)
            if waypoints is not None:
                resolved.append((track, waypoints))

        record = OverlayRecord()
        for track, waypoints in resolved:
            airway = airway_name(self.system, track.ident)
            for first, second in pairwise(waypoints):
                if first == second:
                    continue
                from_index = self._touch(first, record)
                to_index = self._touch(second, record)
                edge = self.graph.add_neighbor(
                    from_index, to_index, Neighbor(airway, first.distance_from(second))
                )
                record.edges.append((from_index, edge))

        for index, created in record.waypoints.items():
            self.graph.retain_overlay_waypoint(index, created)

        self.record = record
        self.state = OverlayState.APPLIED
        logger.info(
            "Applied %d %s tracks: %d edges, %d new waypoints",
            len(resolved),
            self.system.value,
            len(record.edges),
            len(record.owned_waypoints),
        )

    def undo_edit(self) -> None:
        """Undo the changes of add_to_waypoint_list().

        Does nothing if the tracks were never applied.

        Raises:
            InvalidOverlayTransitionError: If the overlay was already undone.
        """
        if self.state is OverlayState.ROLLED_BACK:
            raise InvalidOverlayTransitionError(f"{self.system.value} tracks already undone")
        if self.state is not OverlayState.APPLIED or self.record is None:
            logger.debug("%s tracks not applied, nothing to undo", self.system.value)
            return

        for from_index, edge in reversed(self.record.edges):
            self.graph.remove_neighbor(from_index, edge)

        # Waypoints shared with another applied overlay stay until it is undone too.
        for index in reversed(list(self.record.waypoints)):
            self.graph.release_overlay_waypoint(index)

        self.record = None
        self.state = OverlayState.ROLLED_BACK
        logger.info("Removed %s tracks from the waypoint graph", self.system.value)

    def _touch(self, waypoint: Waypoint, record: OverlayRecord) -> int:
        index, created = self.graph.find_or_add(waypoint)
        record.waypoints.setdefault(index, created)
        return index

    def _resolve_track(self, track: Track) -> list[Waypoint] | None:
        """Turn the tokens of a track into waypoints without touching the graph.

        Identifiers are matched against the graph, choosing the candidate
        closest to the previous waypoint (or the first coordinate of the
        track when the identifier comes first).

        Returns:
            The waypoints, or None if an identifier is unknown
        """
        coordinates = [parse_coordinate(self.system, token) for token in track.waypoints]
        anchor = next((c for c in coordinates if c is not None), None)

        waypoints: list[Waypoint] = []
        for token, coordinate in zip(track.waypoints, coordinates):
            if coordinate is not None:
                waypoints.append(Waypoint(token, coordinate[0], coordinate[1]))
                continue

            if waypoints:
                reference = (waypoints[-1].lat, waypoints[-1].lon)
            else:
                reference = anchor

            if reference is None:
                candidates = self.graph.find_by_ident(token)
                index = candidates[0] if candidates else None
            else:
                index = self.graph.find_nearest_by_ident(token, *reference)

            if index is None:
                logger.warning(
                    "Skipping %s track %s: unknown waypoint %s",
                    self.system.value,
                    track.ident,
                    token,
                )
                return None
            waypoints.append(self.graph.waypoint(index))

        if len(waypoints) < 2:
            logger.warning(
                "Skipping %s track %s: fewer than 2 waypoints", self.system.value, track.ident
            )
            return None
        return waypoints
