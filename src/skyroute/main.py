"""SkyRoute command-line interface.

Typical usage:
    skyroute graph data/navdata/ats.txt
    skyroute tracks --file data/tracks/nats.xml --ats data/navdata/ats.txt
    skyroute route data/navdata/ats.txt CARPE UN544 REDBY DCT PIKIL
"""

import argparse
import logging
import sys

from skyroute.core.config import ConfigError, ConfigLoader
from skyroute.core.logging_system import LoggingError, initialize_logging
from skyroute.navigation.ats_loader import WaypointFileReadError, load_ats_file
from skyroute.navigation.route import Route, RouteError
from skyroute.navigation.waypoint_graph import DIRECT, WaypointGraph
from skyroute.tracks.errors import TrackError
from skyroute.tracks.providers import FileTrackMessageProvider
from skyroute.tracks.track_handler import TrackHandler
from skyroute.tracks.track_manager import TrackManager
from skyroute.tracks.track_system import TrackSystem

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments without the program name; sys.argv if None

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="skyroute", description="SkyRoute - airway graph and oceanic track tools"
    )
    parser.add_argument("--config", type=str, help="Settings YAML file")
    parser.add_argument("--log-config", type=str, help="Logging configuration YAML file")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages to console")

    subparsers = parser.add_subparsers(dest="command", required=True)

    graph_parser = subparsers.add_parser("graph", help="Load an airway feed and show its size")
    graph_parser.add_argument("ats_file", type=str, help="Path to ats.txt")

    tracks_parser = subparsers.add_parser("tracks", help="Download or read track messages")
    tracks_parser.add_argument(
        "--system",
        type=str,
        choices=[s.value.lower() for s in TrackSystem],
        help="Only this track system",
    )
    tracks_parser.add_argument("--file", type=str, help="Read the message from an XML file")
    tracks_parser.add_argument(
        "--ats", type=str, help="Apply the tracks to the graph of this airway feed, then undo"
    )

    route_parser = subparsers.add_parser("route", help="Build a route and print its text")
    route_parser.add_argument("ats_file", type=str, help="Path to ats.txt")
    route_parser.add_argument(
        "tokens", nargs="+", help="IDENT AIRWAY IDENT ... (AIRWAY may be DCT)"
    )

    return parser.parse_args(argv)


def build_route(graph: WaypointGraph, tokens: list[str]) -> Route:
    """Build a route from alternating waypoint identifiers and airways.

    The waypoint reached through an airway is the candidate connected to
    the previous waypoint by that airway; otherwise the closest candidate.
    Segment distances come from the graph edge when there is one and from
    the great circle otherwise.

    Raises:
        RouteError: If the tokens are malformed or an identifier is unknown.
    """
    if len(tokens) % 2 == 0:
        raise RouteError("Route must alternate waypoints and airways, ending with a waypoint")

    candidates = graph.find_by_ident(tokens[0])
    if not candidates:
        raise RouteError(f"Unknown waypoint: {tokens[0]}")

    route = Route()
    current = candidates[0]
    route.add_last_waypoint(graph.waypoint(current))

    for airway, ident in zip(tokens[1::2], tokens[2::2]):
        edge = None
        if airway != DIRECT:
            edge = next(
                (
                    e
                    for e in graph.edges_from(current)
                    if e.neighbor.airway == airway and graph.waypoint(e.target).ident == ident
                ),
                None,
            )

        if edge is not None:
            current = edge.target
            route.add_last_waypoint(graph.waypoint(current), airway, edge.neighbor.distance)
            continue

        previous = graph.waypoint(current)
        nearest = graph.find_nearest_by_ident(ident, previous.lat, previous.lon)
        if nearest is None:
            raise RouteError(f"Unknown waypoint: {ident}")
        current = nearest
        route.add_last_waypoint(graph.waypoint(current), airway)

    return route


def _load_graph(path: str) -> WaypointGraph | None:
    try:
        return load_ats_file(path)
    except WaypointFileReadError as e:
        logger.error("%s", e)
        return None


def run_graph(args: argparse.Namespace) -> int:
    graph = _load_graph(args.ats_file)
    if graph is None:
        return 1
    print(f"Waypoints: {len(graph)}")
    print(f"Edges: {graph.edge_count}")
    return 0


def run_tracks(args: argparse.Namespace, config: ConfigLoader) -> int:
    graph = WaypointGraph()
    if args.ats:
        loaded = _load_graph(args.ats)
        if loaded is None:
            return 1
        graph = loaded

    if args.file:
        provider = FileTrackMessageProvider(args.file)
        if args.system:
            system = TrackSystem.from_name(args.system)
        else:
            system = provider.get_message().system
        manager = TrackManager(graph, [TrackHandler(system, graph, provider)])
    else:
        manager = TrackManager.from_config(graph, config)
        if args.system:
            wanted = TrackSystem.from_name(args.system)
            manager.handlers = {s: h for s, h in manager.handlers.items() if s is wanted}

    fetched = manager.fetch_all()
    if not fetched:
        logger.error("No track messages could be obtained")
        return 1

    for system in fetched:
        print(manager.handlers[system].raw_data)
        print()

    if args.ats:
        before = (len(graph), graph.edge_count)
        manager.apply_all()
        print(f"With tracks: {len(graph)} waypoints, {graph.edge_count} edges")
        manager.undo_all()
        print(f"Tracks removed: {len(graph)} waypoints, {graph.edge_count} edges")
        if (len(graph), graph.edge_count) != before:
            logger.error("Graph was not restored after removing tracks")
            return 1
    return 0


def run_route(args: argparse.Namespace) -> int:
    graph = _load_graph(args.ats_file)
    if graph is None:
        return 1
    try:
        route = build_route(graph, args.tokens)
        print(route.to_text(show_first=True, show_last=True))
        print(f"Distance: {route.total_distance():.1f} NM")
    except RouteError as e:
        logger.error("%s", e)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)
    try:
        initialize_logging(
            args.log_config,
            use_platform_dir=args.log_config is None,
            console_level="DEBUG" if args.verbose else None,
        )
        config = ConfigLoader.load_with_defaults(args.config)
    except (LoggingError, ConfigError) as e:
        print(f"skyroute: {e}", file=sys.stderr)
        return 1

    match args.command:
        case "graph":
            return run_graph(args)
        case "tracks":
            try:
                return run_tracks(args, config)
            except TrackError as e:
                logger.error("%s", e)
                return 1
        case "route":
            return run_route(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
