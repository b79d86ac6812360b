"""Package-specific exception types."""

from __future__ import annotations


class TocError(Exception):
    """Base class for errors raised while producing a table of contents."""


class MissingMarkerError(TocError, ValueError):
    """Raised when the document has no start marker line.

    Nothing is written to the destination when this error is raised.

    Args:
        marker: Start marker that could not be found.
    """

    def __init__(self, marker: str):
        self.marker = marker
        super().__init__(f"Start marker {marker!r} not found in document")


class WriteFailureError(TocError, OSError):
    """Raised when the destination rejects a write.

    The original error is chained as ``__cause__``. No retry is attempted and
    whatever reached the destination before the failure is left as is.
    """
