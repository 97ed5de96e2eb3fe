"""Capture controller wiring the compositor to session snapshots.

:class:`CaptureController` is the seam the surrounding application talks
to: it feeds camera frames through :class:`~stripcollage.compositor.Compositor`
and keeps the current :class:`~stripcollage.controllers.session.CollageSession`.
It holds no pixel state of its own beyond that snapshot.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..compositor import CancelCheck, Compositor
from ..errors import AssemblyFailedError, CaptureOrderError
from ..layouts import CollageFormat, slice_fraction
from ..raster import RasterSurface
from . import session as transitions
from .session import CollageSession

LOGGER = logging.getLogger(__name__)


class CaptureController:
    """Drive a collage session from frames to a finished raster."""

    def __init__(
        self,
        compositor: Compositor,
        *,
        fmt: Optional[CollageFormat] = None,
        mirror: bool = True,
    ) -> None:
        self.compositor = compositor
        self.mirror = mirror
        self._session = transitions.new_session(fmt)

    @property
    def session(self) -> CollageSession:
        """Return the current immutable snapshot."""
        return self._session

    def mask(self) -> Optional[Tuple[float, float, float, float]]:
        """Viewport fractions of the slice awaiting capture, ``None`` when complete."""
        if self._session.is_complete:
            return None
        return slice_fraction(self._session.format, self._session.step)

    def capture(self, frame: Optional[RasterSurface]) -> CollageSession:
        """Slice ``frame`` for the current step and advance the session."""
        state = self._session
        if state.is_complete:
            raise CaptureOrderError("Session is complete; undo or reset before capturing")
        if frame is not None and self.mirror:
            frame = frame.mirrored()
        part = self.compositor.capture_slice(frame, state.step, state.format, state.base_size)
        self._session = transitions.capture(state, state.step, part, state.base_size or frame.size)
        if self._session.is_complete:
            LOGGER.info("All %s parts captured", self._session.total_steps)
        return self._session

    def undo(self) -> CollageSession:
        self._session = transitions.undo(self._session)
        return self._session

    def change_format(self, fmt: CollageFormat) -> CollageSession:
        self._session = transitions.change_format(self._session, fmt)
        return self._session

    def cycle_format(self) -> CollageSession:
        """Switch to the next format (the format toggle)."""
        return self.change_format(self._session.format.next())

    def set_live_filter(self, filter_id: str) -> CollageSession:
        self._session = transitions.set_live_filter(self._session, filter_id, self.compositor.catalog)
        return self._session

    def set_result_filter(self, filter_id: str) -> CollageSession:
        self._session = transitions.set_result_filter(self._session, filter_id, self.compositor.catalog)
        return self._session

    def reset(self) -> CollageSession:
        self._session = transitions.reset(self._session)
        return self._session

    def preview(self, frame: Optional[RasterSurface]) -> RasterSurface:
        """Live preview of ``frame`` with the live filter applied."""
        if frame is not None and self.mirror:
            frame = frame.mirrored()
        return self.compositor.preview_frame(frame, self._session.live_filter)

    def result(
        self,
        output_width: int,
        output_height: int,
        *,
        cancel: Optional[CancelCheck] = None,
    ) -> RasterSurface:
        """Render the collage with the result filter at the output size.

        Raises:
            AssemblyFailedError: If nothing has been captured yet
        """
        state = self._session
        if state.base_size is None:
            raise AssemblyFailedError("Capture at least one slice before rendering a result")
        return self.compositor.compose_result(
            state.parts,
            state.base_size,
            state.format,
            state.result_filter,
            output_width,
            output_height,
            cancel=cancel,
        )
