"""Navigation waypoint definition.

This module provides the immutable Waypoint used as graph vertex and route
node. Identifiers are not unique: fixes sharing a name in different regions
are told apart by their coordinates.
"""

from dataclasses import dataclass

from skyroute.geometry.earth_geometry import great_circle_distance_nm, initial_true_course
from skyroute.geometry.vectors import Vector3


@dataclass(frozen=True)
class Waypoint:
    """Named point on the earth.

    Two waypoints are equal when identifier, latitude and longitude all
    match.

    Attributes:
        ident: Waypoint identifier (e.g. "CARPE", "55N020W")
        lat: Latitude in degrees, north positive
        lon: Longitude in degrees, east positive

    Examples:
        >>> carpe = Waypoint("CARPE", 55.0, -15.0)
        >>> carpe == Waypoint("CARPE", 55.0, -15.0)
        True
    """

    ident: str
    lat: float
    lon: float

    def distance_from(self, other: "Waypoint") -> float:
        """Great-circle distance to another waypoint in nautical miles."""
        return great_circle_distance_nm(self.lat, self.lon, other.lat, other.lon)

    def course_to(self, other: "Waypoint") -> float:
        """Initial true course towards another waypoint, in (0, 360].

        Raises:
            DegenerateGeometryError: If both waypoints are at the same position.
        """
        return initial_true_course(self.lat, self.lon, other.lat, other.lon)

    def to_vector(self) -> Vector3:
        """Unit vector of the waypoint position."""
        return Vector3.from_lat_lon(self.lat, self.lon)

    def __str__(self) -> str:
        return f"{self.ident} ({self.lat:.4f}, {self.lon:.4f})"
