"""Capture session state as immutable snapshots.

Every transition is a plain function taking a :class:`CollageSession` and
returning a new one, so the state machine can be driven and tested without
any UI wiring:

``Idle`` (step 1, no parts) -> ``Capturing`` (step k, parts 1..k-1) ->
``Complete`` (all parts present).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import logging
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .. import config
from ..errors import CaptureOrderError, InvalidGeometryError, UndoUnavailableError
from ..filters import FilterCatalog
from ..layouts import CollageFormat
from ..raster import RasterSurface

LOGGER = logging.getLogger(__name__)


class SessionStatus(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    COMPLETE = "complete"


def _frozen(parts: Mapping[int, RasterSurface]) -> Mapping[int, RasterSurface]:
    return MappingProxyType(dict(sorted(parts.items())))


@dataclass(frozen=True)
class CollageSession:
    """Snapshot of capture progress.

    ``step`` is the next step to capture; it equals ``total_steps + 1`` once
    the session is complete.
    """

    format: CollageFormat
    step: int = 1
    base_size: Optional[Tuple[int, int]] = None
    parts: Mapping[int, RasterSurface] = field(default_factory=lambda: _frozen({}))
    live_filter: str = config.DEFAULT_FILTER
    result_filter: str = config.DEFAULT_FILTER

    @property
    def total_steps(self) -> int:
        return self.format.total_steps

    @property
    def captured_steps(self) -> Tuple[int, ...]:
        return tuple(self.parts)

    @property
    def status(self) -> SessionStatus:
        if len(self.parts) == self.total_steps:
            return SessionStatus.COMPLETE
        if self.parts:
            return SessionStatus.CAPTURING
        return SessionStatus.IDLE

    @property
    def is_complete(self) -> bool:
        return self.status is SessionStatus.COMPLETE


def new_session(fmt: Optional[CollageFormat] = None) -> CollageSession:
    """Return an idle session for ``fmt`` (the configured default if omitted)."""
    return CollageSession(format=fmt or CollageFormat.from_id(config.DEFAULT_FORMAT))


def capture(
    session: CollageSession,
    step: int,
    part: RasterSurface,
    base_size: Optional[Tuple[int, int]] = None,
) -> CollageSession:
    """Store ``part`` for ``step`` and advance.

    ``base_size`` is the full frame size and is required on the first
    capture; later values are ignored.

    Raises:
        InvalidGeometryError: If ``step`` is outside ``[1, total_steps]``,
            or ``base_size`` is missing on the first capture
        CaptureOrderError: If the session is complete or ``step`` is not
            the current step
    """
    if session.is_complete:
        raise CaptureOrderError("Session is complete; undo or reset before capturing")
    if not 1 <= step <= session.total_steps:
        raise InvalidGeometryError(f"Step {step} outside [1, {session.total_steps}]")
    if step != session.step:
        raise CaptureOrderError(f"Expected step {session.step}, got {step}")

    established = session.base_size
    if established is None:
        if not base_size:
            raise InvalidGeometryError("First capture needs the frame size as base_size")
        established = tuple(base_size)

    parts = dict(session.parts)
    parts[step] = part
    LOGGER.debug("Captured step %s/%s", step, session.total_steps)
    return replace(session, step=step + 1, base_size=established, parts=_frozen(parts))


def undo(session: CollageSession) -> CollageSession:
    """Drop the highest captured part and rewind the step.

    Base dimensions are kept.

    Raises:
        UndoUnavailableError: If nothing has been captured
    """
    if not session.parts:
        raise UndoUnavailableError("No captured part to undo")
    parts = dict(session.parts)
    removed = max(parts)
    del parts[removed]
    step = max(parts) + 1 if parts else 1
    LOGGER.debug("Undid step %s; next step %s", removed, step)
    return replace(session, step=step, parts=_frozen(parts))


def change_format(session: CollageSession, fmt: CollageFormat) -> CollageSession:
    """Switch formats.

    Without captured parts only the format changes. With progress, all
    parts and the base size are discarded and capture restarts at step 1.
    Filter selections are kept either way.
    """
    if fmt is session.format:
        # same format keeps progress
        return session
    if not session.parts:
        return replace(session, format=fmt, step=1)
    LOGGER.info(
        "Format changed %s -> %s; discarding %s captured parts",
        session.format.format_id, fmt.format_id, len(session.parts),
    )
    return replace(session, format=fmt, step=1, base_size=None, parts=_frozen({}))


def _checked_filter(filter_id: str, catalog: Optional[FilterCatalog]) -> str:
    if catalog is not None:
        catalog.lookup(filter_id)
    return filter_id


def set_live_filter(
    session: CollageSession, filter_id: str, catalog: Optional[FilterCatalog] = None
) -> CollageSession:
    """Select the preview filter; captured pixel data is unaffected."""
    return replace(session, live_filter=_checked_filter(filter_id, catalog))


def set_result_filter(
    session: CollageSession, filter_id: str, catalog: Optional[FilterCatalog] = None
) -> CollageSession:
    return replace(session, result_filter=_checked_filter(filter_id, catalog))


def reset(session: CollageSession) -> CollageSession:
    """Return a fresh default session (the restart button)."""
    return new_session()
