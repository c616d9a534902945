"""SkyRoute - airway graph, oceanic track overlays and great-circle geometry.

Typical usage:
    from skyroute.navigation import Route, load_ats_file
    from skyroute.tracks import TrackManager

    graph = load_ats_file("data/navdata/ats.txt")
"""

__version__ = "0.1.0"
