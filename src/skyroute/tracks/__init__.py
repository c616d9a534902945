"""Oceanic track download, parsing and reversible graph overlays.

Typical usage:
    from skyroute.tracks import TrackHandler, TrackSystem

    handler = TrackHandler(TrackSystem.NATS, graph, provider)
    handler.get_all_tracks()
    handler.add_to_waypoint_list()
    handler.undo_edit()
"""

from skyroute.tracks.errors import (
    InvalidOverlayTransitionError,
    TrackError,
    TrackFetchError,
    TrackParseError,
)
from skyroute.tracks.providers import (
    FileTrackMessageProvider,
    HttpTrackMessageProvider,
    TrackMessageProvider,
)
from skyroute.tracks.track_handler import OverlayRecord, OverlayState, TrackHandler
from skyroute.tracks.track_manager import TrackManager
from skyroute.tracks.track_message import IndividualTrackMessage, TrackMessage
from skyroute.tracks.track_system import Track, TrackSystem, airway_name, parse_tracks

__all__ = [
    "FileTrackMessageProvider",
    "HttpTrackMessageProvider",
    "IndividualTrackMessage",
    "InvalidOverlayTransitionError",
    "OverlayRecord",
    "OverlayState",
    "Track",
    "TrackError",
    "TrackFetchError",
    "TrackHandler",
    "TrackManager",
    "TrackMessage",
    "TrackMessageProvider",
    "TrackParseError",
    "TrackSystem",
    "airway_name",
    "parse_tracks",
]
