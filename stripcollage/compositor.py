"""Slice capture, collage assembly, result filtering and output rendering."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from PIL import Image

from . import config
from .errors import (
    AssemblyFailedError,
    FrameUnavailableError,
    InvalidGeometryError,
    OperationCancelledError,
)
from .filters import FilterCatalog
from .layouts import CollageFormat, compute_crop_window, compute_slices, slice_for_step
from .pixel_ops import apply_filter
from .raster import RasterSurface
from .watermark import Watermark

LOGGER = logging.getLogger(__name__)

Size = Tuple[int, int]
Parts = Mapping[int, Optional[RasterSurface]]
CancelCheck = Callable[[], bool]


def _check_cancel(cancel: Optional[CancelCheck], where: str) -> None:
    if cancel is not None and cancel():
        LOGGER.info("Composite cancelled %s", where)
        raise OperationCancelledError(f"Cancelled {where}")


class Compositor:
    """Turns captured frames into a finished collage raster.

    The filter catalog is injected; the compositor keeps no per-session
    state, so one instance can serve several sessions or threads as long as
    each surface is owned by a single caller.
    """

    def __init__(
        self,
        catalog: FilterCatalog,
        *,
        background: Sequence[int] = config.BACKGROUND_COLOR,
        watermark: Optional[Watermark] = None,
        resampling: str = config.RESAMPLING,
    ) -> None:
        self.catalog = catalog
        self.background = tuple(background)
        self.watermark = watermark if watermark is not None else Watermark()
        self._resample = Image.Resampling[resampling]

    def _scaled(self, surface: RasterSurface, size: Size) -> RasterSurface:
        if surface.size == size:
            return surface
        return RasterSurface.from_image(surface.to_image().resize(size, self._resample))

    @staticmethod
    def _base_size(base_size: Optional[Size]) -> Size:
        if not base_size or base_size[0] <= 0 or base_size[1] <= 0:
            LOGGER.error("Base dimensions not established: %s", base_size)
            raise AssemblyFailedError("Base dimensions have not been established")
        return int(base_size[0]), int(base_size[1])

    def capture_slice(
        self,
        frame: Optional[RasterSurface],
        step: int,
        fmt: CollageFormat,
        base_size: Optional[Size] = None,
    ) -> RasterSurface:
        """
        Copy the slice for ``step`` out of ``frame``.

        No filter is applied; filters are only applied at result time.

        Args:
            frame: Full camera frame
            step: 1-based capture step
            fmt: Session format
            base_size: Established base dimensions, or ``None`` on first
                capture (the frame size is used)

        Raises:
            FrameUnavailableError: If ``frame`` is missing or empty
            InvalidGeometryError: If ``step`` is out of range or the slice
                has no area
        """
        if frame is None or frame.is_empty:
            raise FrameUnavailableError("No frame available for capture")

        width, height = base_size if base_size else frame.size
        piece = slice_for_step(fmt, step, width, height)
        if piece.area == 0:
            raise InvalidGeometryError(
                f"Slice {step} of {fmt.format_id} is degenerate for base {width}x{height}"
            )

        if frame.size != (width, height):
            LOGGER.warning(
                "Frame %sx%s differs from base %sx%s; rescaling",
                frame.width, frame.height, width, height,
            )
            frame = self._scaled(frame, (width, height))

        LOGGER.debug("Captured step %s of %s: %s", step, fmt.format_id, piece)
        return frame.crop(piece.x, piece.y, piece.width, piece.height)

    def assemble(
        self,
        parts: Parts,
        base_size: Optional[Size],
        fmt: CollageFormat,
        *,
        cancel: Optional[CancelCheck] = None,
    ) -> RasterSurface:
        """Draw captured parts into their slices over the background.

        Missing parts leave the background visible.

        Raises:
            AssemblyFailedError: If base dimensions are not established
            OperationCancelledError: If ``cancel`` fires between slices
        """
        width, height = self._base_size(base_size)
        canvas = RasterSurface.blank(width, height, self.background)
        pixels = canvas.pixels

        for step, piece in enumerate(compute_slices(fmt, width, height), start=1):
            _check_cancel(cancel, f"before slice {step}")
            part = parts.get(step)
            if part is None or part.is_empty or piece.area == 0:
                continue
            part = self._scaled(part, (piece.width, piece.height))
            pixels[piece.y:piece.y + piece.height, piece.x:piece.x + piece.width] = part.pixels

        return canvas

    def apply_result_filter(
        self,
        parts: Parts,
        base_size: Optional[Size],
        fmt: CollageFormat,
        filter_id: str,
        *,
        cancel: Optional[CancelCheck] = None,
    ) -> RasterSurface:
        """Assemble ``parts`` and run the result filter over the picture."""
        filter_ = self.catalog.lookup(filter_id)
        assembled = self.assemble(parts, base_size, fmt, cancel=cancel)
        _check_cancel(cancel, "before filtering")
        return apply_filter(assembled, filter_)

    def render_output(
        self,
        composed: RasterSurface,
        base_size: Optional[Size],
        output_width: int,
        output_height: int,
        *,
        watermark: bool = True,
    ) -> RasterSurface:
        """
        Crop ``composed`` to the output aspect ratio, scale it to fill the
        output and overlay the watermark.

        Raises:
            InvalidGeometryError: If the output dimensions are not positive
        """
        if output_width <= 0 or output_height <= 0:
            raise InvalidGeometryError(
                f"Output must have positive dimensions, got {output_width}x{output_height}"
            )
        base_width, base_height = base_size if base_size else composed.size
        window = compute_crop_window(base_width, base_height, output_width, output_height)

        source = self._scaled(composed, (base_width, base_height)).to_image()
        scaled = source.resize((output_width, output_height), self._resample, box=window.box)

        output = Image.new("RGBA", (output_width, output_height), self.background)
        output.paste(scaled, (0, 0))
        result = RasterSurface.from_image(output)

        if watermark:
            result = self.watermark.render(result)
        LOGGER.info("Rendered %sx%s output", output_width, output_height)
        return result

    def compose_result(
        self,
        parts: Parts,
        base_size: Optional[Size],
        fmt: CollageFormat,
        filter_id: str,
        output_width: int,
        output_height: int,
        *,
        cancel: Optional[CancelCheck] = None,
    ) -> RasterSurface:
        """Assemble, filter and render the final collage in one call."""
        filtered = self.apply_result_filter(parts, base_size, fmt, filter_id, cancel=cancel)
        _check_cancel(cancel, "before rendering")
        return self.render_output(filtered, base_size, output_width, output_height)

    def preview_frame(self, frame: Optional[RasterSurface], filter_id: str) -> RasterSurface:
        """Return a filtered copy of a live frame for display only."""
        if frame is None or frame.is_empty:
            raise FrameUnavailableError("No frame available for preview")
        return apply_filter(frame, self.catalog.lookup(filter_id))

    def render_filter_previews(
        self,
        surface: RasterSurface,
        filter_ids: Optional[Iterable[str]] = None,
        *,
        max_workers: int = config.PREVIEW_MAX_WORKERS,
    ) -> Dict[str, RasterSurface]:
        """
        Render ``surface`` through several filters in parallel.

        Filters are looked up before any work starts, so an unknown id fails
        fast. Each worker reads the shared source and writes only its own
        result.

        Returns:
            Dict[str, RasterSurface]: Previews keyed by filter id, in the
            order requested (catalog order by default)
        """
        ids = list(filter_ids) if filter_ids is not None else self.catalog.ids()
        filters = [self.catalog.lookup(filter_id) for filter_id in ids]

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [(f.id, pool.submit(apply_filter, surface, f)) for f in filters]
            return {filter_id: future.result() for filter_id, future in futures}
