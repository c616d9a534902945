"""Vector mathematics for positions on the unit sphere.

Points on the earth are handled as unit vectors in an earth-centered frame:
x points to lat 0/lon 0, y to lat 0/lon 90E and z to the north pole.

Typical usage example:
    from skyroute.geometry.vectors import Vector3

    v = Vector3.from_lat_lon(51.47, -0.45)
    lat, lon = v.to_lat_lon()
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector.

    Attributes:
        x: X component (towards lat 0, lon 0).
        y: Y component (towards lat 0, lon 90E).
        z: Z component (towards the north pole).

    Examples:
        >>> v1 = Vector3(1.0, 0.0, 0.0)
        >>> v2 = Vector3(0.0, 1.0, 0.0)
        >>> v1.cross(v2)
        Vector3(x=0.0, y=0.0, z=1.0)
    """

    x: float
    y: float
    z: float

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> "Vector3":
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> "Vector3":
        """Divide vector by scalar.

        Raises:
            ZeroDivisionError: If scalar is zero.
        """
        if scalar == 0:
            raise ZeroDivisionError("Cannot divide vector by zero")
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def magnitude(self) -> float:
        """Calculate the magnitude (length) of the vector.

        Examples:
            >>> Vector3(3.0, 4.0, 0.0).magnitude()
            5.0
        """
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Vector3":
        """Return a unit vector in the same direction.

        Raises:
            ValueError: If magnitude is zero.
        """
        mag = self.magnitude()
        if mag == 0:
            raise ValueError("Cannot normalize zero vector")
        return self / mag

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def is_close(self, other: "Vector3", tolerance: float = 1e-12) -> bool:
        """Check component-wise equality within an absolute tolerance.

        Args:
            other: Vector to compare with.
            tolerance: Maximum allowed difference per component.

        Returns:
            True if every component differs by at most tolerance.
        """
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=0.0, atol=tolerance))

    def to_array(self) -> npt.NDArray[np.float64]:
        """Convert to numpy array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: npt.NDArray[np.float64]) -> "Vector3":
        """Create vector from numpy array.

        Args:
            arr: Numpy array with at least 3 elements.
        """
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> "Vector3":
        """Create the unit vector of a coordinate.

        Args:
            lat: Latitude in degrees (north positive).
            lon: Longitude in degrees (east positive).

        Returns:
            Unit vector pointing at the coordinate.

        Examples:
            >>> Vector3.from_lat_lon(90.0, 0.0).is_close(Vector3(0.0, 0.0, 1.0))
            True
        """
        lat_r = math.radians(lat)
        lon_r = math.radians(lon)
        cos_lat = math.cos(lat_r)
        return cls(cos_lat * math.cos(lon_r), cos_lat * math.sin(lon_r), math.sin(lat_r))

    def to_lat_lon(self) -> tuple[float, float]:
        """Convert a (not necessarily unit) vector to latitude/longitude.

        Returns:
            Tuple of (latitude, longitude) in degrees, longitude in (-180, 180].

        Raises:
            ValueError: If the vector has zero length.
        """
        unit = self.normalized()
        lat = math.degrees(math.asin(max(-1.0, min(1.0, unit.z))))
        lon = math.degrees(math.atan2(unit.y, unit.x))
        return lat, lon

    def __str__(self) -> str:
        return f"Vector3(x={self.x:.4f}, y={self.y:.4f}, z={self.z:.4f})"
