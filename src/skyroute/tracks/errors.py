"""Exceptions raised by the track overlay subsystem."""


class TrackError(Exception):
    """Base class for track download, parse and overlay errors."""


class TrackFetchError(TrackError):
    """Raised when a track message cannot be downloaded or read."""


class TrackParseError(TrackError):
    """Raised when a track message document is malformed."""


class InvalidOverlayTransitionError(TrackError):
    """Raised when an overlay operation is called in the wrong state."""
