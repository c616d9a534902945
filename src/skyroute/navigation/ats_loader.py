"""Airway network loader for ats.txt feeds.

The feed is line oriented and comma delimited:

    A,UN544,3
    S,CARPE,55.000000,-15.000000,REDBY,55.000000,-14.000000,90,270,34.4

An "A" line sets the airway used by the following "S" (segment) lines. A
segment line carries two waypoints (identifier, latitude, longitude), two
headings that are ignored, and the segment distance in nautical miles.
Blank lines and lines starting with any other character are skipped.

Typical usage:
    from skyroute.navigation.ats_loader import load_ats_file

    graph = load_ats_file("data/navdata/ats.txt")
"""

import logging
from pathlib import Path

from skyroute.navigation.waypoint import Waypoint
from skyroute.navigation.waypoint_graph import Neighbor, WaypointGraph

logger = logging.getLogger(__name__)

SEGMENT_FIELD_COUNT = 10


class WaypointFileReadError(Exception):
    """Raised when an airway feed cannot be read or parsed.

    Attributes:
        source: Path or name of the feed
        line_number: 1-based line number of the bad record, if known
    """

    def __init__(self, message: str, source: str, line_number: int | None = None) -> None:
        self.source = source
        self.line_number = line_number
        location = f"{source}:{line_number}" if line_number is not None else source
        super().__init__(f"{message} ({location})")


class AtsFileLoader:
    """Reads airway feeds into an existing WaypointGraph.

    Waypoints are deduplicated by identifier and coordinate; each segment
    adds one directed edge labelled with the current airway.

    A failed load leaves the graph partially filled. Discard it, or use
    load_ats_file() which only returns fully loaded graphs.

    Examples:
        >>> graph = WaypointGraph()
        >>> AtsFileLoader(graph).read_from_file("ats.txt")
    """

    def __init__(self, graph: WaypointGraph) -> None:
        self.graph = graph

    def read_from_file(self, file_path: str | Path) -> int:
        """Read every record of an ats.txt file.

        Args:
            file_path: Path to the feed

        Returns:
            Number of segments added

        Raises:
            WaypointFileReadError: If the file cannot be read or a record is malformed.
        """
        path = Path(file_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise WaypointFileReadError(f"Failed to read airway feed: {e}", str(path)) from e

        count = self.read_from_text(text, source=str(path))
        logger.info("Loaded %d airway segments from %s", count, path)
        return count

    def read_from_text(self, text: str, source: str = "<string>") -> int:
        """Read every record of feed text.

        Args:
            text: Feed content
            source: Name used in error messages

        Returns:
            Number of segments added

        Raises:
            WaypointFileReadError: If a record is malformed.
        """
        current_airway = ""
        count = 0

        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue

            try:
                if line[0] == "A":
                    current_airway = self._parse_airway(line)
                elif line[0] == "S":
                    self._add_segment(line, current_airway)
                    count += 1
            except (ValueError, IndexError) as e:
                raise WaypointFileReadError(
                    f"Malformed record {line!r}: {e}", source, line_number
                ) from e

        return count

    @staticmethod
    def _parse_airway(line: str) -> str:
        fields = line.split(",")
        if len(fields) < 2 or not fields[1].strip():
            raise ValueError("airway line has no airway identifier")
        return fields[1].strip()

    def _add_segment(self, line: str, airway: str) -> None:
        fields = [f.strip() for f in line.split(",")]
        if len(fields) < SEGMENT_FIELD_COUNT:
            raise ValueError(
                f"expected {SEGMENT_FIELD_COUNT} fields, found {len(fields)}"
            )

        first = self._parse_waypoint(fields[1:4])
        second = self._parse_waypoint(fields[4:7])
        # fields[7] and fields[8] are headings between the two waypoints.
        distance = float(fields[9])

        from_index, _ = self.graph.find_or_add(first)
        to_index, _ = self.graph.find_or_add(second)
        self.graph.add_neighbor(from_index, to_index, Neighbor(airway, distance))

    @staticmethod
    def _parse_waypoint(fields: list[str]) -> Waypoint:
        ident, lat, lon = fields
        if not ident:
            raise ValueError("empty waypoint identifier")
        return Waypoint(ident, float(lat), float(lon))


def load_ats_file(file_path: str | Path) -> WaypointGraph:
    """Build a new graph from an ats.txt file.

    Raises:
        WaypointFileReadError: If the feed cannot be loaded. No graph is returned.
    """
    graph = WaypointGraph()
    AtsFileLoader(graph).read_from_file(file_path)
    return graph
