"""Oceanic track systems and their message dialects.

Each system publishes its tracks in a different text layout and names
coordinates differently. TrackSystem is a closed set; every per-system
behaviour below is a match over it.

NATS (North Atlantic):
    A PIKIL 56/20 57/30 58/40 58/50 HOIST
    "56/20" means 56N 020W; "5720N" means 57N 020W.

PACOTS (Pacific):
    TRACK 1.
     FLEX ROUTE : KALNA 40N160E 42N170E 44N180E ADNAP

AUSOTS (Australia):
    TDM TRK MY 160101120001
    1601011200 1601012100
    JAD 3140S11500E 3330S12000E TAXEG
"""

import re
from dataclasses import dataclass, field
from enum import Enum


class TrackSystem(Enum):
    """Supported track systems.

    Attributes:
        NATS: North Atlantic Track System
        PACOTS: Pacific Organized Track System
        AUSOTS: Australian Organized Track Structure
    """

    NATS = "NATS"
    PACOTS = "PACOTS"
    AUSOTS = "AUSOTS"

    @classmethod
    def from_name(cls, name: str) -> "TrackSystem":
        """Look up a system by case-insensitive name.

        Raises:
            ValueError: If the name is not a known track system.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError as e:
            raise ValueError(f"Unknown track system: {name}") from e


@dataclass
class Track:
    """One named track.

    Attributes:
        ident: Track identifier within its system (e.g. "A", "1", "MY")
        waypoints: Ordered waypoint tokens, identifiers or coordinates
    """

    ident: str
    waypoints: list[str] = field(default_factory=list)


_LAT_LON_PATTERN = re.compile(r"^(\d{2})(\d{2})?([NS])(\d{3})(\d{2})?([EW])$")
_NATS_SLASH_PATTERN = re.compile(r"^(\d{2})(\d{2})?/(\d{2,3})$")
_NATS_SHORT_PATTERN = re.compile(r"^(\d{2})(\d{2})N$")

_NATS_TRACK_LINE = re.compile(r"^([A-Z])\s+(\S+(?:\s+\S+)+)\s*$")
_PACOTS_TRACK_LINE = re.compile(r"^TRACK\s+(\w+)\.?\s*$")
_PACOTS_ROUTE_LINE = re.compile(r"ROUTE\s*:\s*(.+)$")
_AUSOTS_TRACK_LINE = re.compile(r"^\(?TDM\s+TRK\s+(\w+)\b")


def airway_name(system: TrackSystem, ident: str) -> str:
    """Airway label used for the edges of a track, e.g. "NATA" or "PACOT11"."""
    match system:
        case TrackSystem.NATS:
            return f"NAT{ident}"
        case TrackSystem.PACOTS:
            return f"PACOT{ident}"
        case TrackSystem.AUSOTS:
            return f"AUSOT{ident}"


def _minutes(value: str | None) -> float:
    return int(value) / 60.0 if value else 0.0


def _parse_lat_lon(token: str) -> tuple[float, float] | None:
    m = _LAT_LON_PATTERN.match(token)
    if not m:
        return None
    lat = int(m.group(1)) + _minutes(m.group(2))
    lon = int(m.group(4)) + _minutes(m.group(5))
    if m.group(3) == "S":
        lat = -lat
    if m.group(6) == "W":
        lon = -lon
    return lat, lon


def parse_coordinate(system: TrackSystem, token: str) -> tuple[float, float] | None:
    """Decode a coordinate token of a track.

    Args:
        system: Track system the token comes from
        token: Waypoint token, e.g. "55N020W", "55/20", "5520N"

    Returns:
        (lat, lon) in degrees, or None if the token is a waypoint identifier
    """
    coordinate = _parse_lat_lon(token)
    if coordinate is not None:
        return coordinate

    match system:
        case TrackSystem.NATS:
            m = _NATS_SLASH_PATTERN.match(token)
            if m:
                return int(m.group(1)) + _minutes(m.group(2)), -float(m.group(3))
            m = _NATS_SHORT_PATTERN.match(token)
            if m:
                return float(m.group(1)), -float(m.group(2))
            return None
        case TrackSystem.PACOTS | TrackSystem.AUSOTS:
            return None


def parse_tracks(system: TrackSystem, message: str) -> list[Track]:
    """Extract the tracks from the free text of a track message.

    Lines that do not belong to a track (remarks, levels, validity) are
    ignored.
    """
    lines = [line.strip() for line in message.splitlines()]

    match system:
        case TrackSystem.NATS:
            return _parse_nats(lines)
        case TrackSystem.PACOTS:
            return _parse_pacots(lines)
        case TrackSystem.AUSOTS:
            return _parse_ausots(lines)


def _parse_nats(lines: list[str]) -> list[Track]:
    tracks = []
    for line in lines:
        m = _NATS_TRACK_LINE.match(line)
        if m:
            tracks.append(Track(m.group(1), m.group(2).split()))
    return tracks


def _parse_pacots(lines: list[str]) -> list[Track]:
    tracks = []
    current: str | None = None
    for line in lines:
        m = _PACOTS_TRACK_LINE.match(line)
        if m:
            current = m.group(1)
            continue
        if current is None:
            continue
        m = _PACOTS_ROUTE_LINE.search(line)
        if m:
            tracks.append(Track(current, m.group(1).split()))
            current = None
    return tracks


def _parse_ausots(lines: list[str]) -> list[Track]:
    tracks = []
    current: str | None = None
    for line in lines:
        m = _AUSOTS_TRACK_LINE.match(line)
        if m:
            current = m.group(1)
            continue
        if current is None or not line:
            continue
        tokens = line.split()
        # Validity times precede the route.
        if all(token.isdigit() for token in tokens):
            continue
        tracks.append(Track(current, tokens))
        current = None
    return tracks
