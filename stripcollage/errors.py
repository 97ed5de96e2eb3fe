"""Exception hierarchy for the collage core.

Geometry and catalog errors are contract violations and are raised as soon
as they are detected. Capture and export errors are surfaced to the calling
application, which decides whether to retry or prompt the user.
"""

from __future__ import annotations


class CollageError(Exception):
    """Base class for all collage core errors."""


class FrameUnavailableError(CollageError):
    """Raised when a source frame is missing or has no pixels."""


class InvalidGeometryError(CollageError, ValueError):
    """Raised for non-positive dimensions or an out-of-range step."""


class UnknownFilterError(CollageError, LookupError):
    """Raised when a filter id is not present in the catalog."""


class AssemblyFailedError(CollageError):
    """Raised when assembly is requested before base dimensions exist."""


class ExportFailedError(CollageError):
    """Raised when a finished raster cannot be encoded or written."""


class OperationCancelledError(CollageError):
    """Raised when a cancellation check fires between composite steps."""


class SessionStateError(CollageError, RuntimeError):
    """Raised when a session transition is not valid in the current state."""


class CaptureOrderError(SessionStateError):
    """Raised when capturing a step other than the current one."""


class UndoUnavailableError(SessionStateError):
    """Raised when an undo is requested with no captured parts."""
