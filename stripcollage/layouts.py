"""Collage formats and slice geometry.

Pure geometry helpers: partition a base raster into capture slices for a
format and compute aspect-ratio-correct crop windows. Nothing here touches
pixel data, so everything is deterministic and cheap to test.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import List, Tuple

from .errors import InvalidGeometryError

LOGGER = logging.getLogger(__name__)


class CollageFormat(Enum):
    """Row/column partition scheme for a collage session."""

    TWO_STRIPS = ("2x1", 2, 1, 2 / 3, "2 Strips", "Two horizontal strips")
    THREE_STRIPS = ("3x1", 3, 1, 3 / 4, "3 Strips", "Three horizontal strips")
    GRID = ("2x2", 2, 2, 3 / 4, "Grid", "Two by two grid")
    COLUMNS = ("1x3", 1, 3, 4 / 3, "3 Columns", "Three vertical columns")

    def __init__(
        self,
        format_id: str,
        rows: int,
        cols: int,
        aspect_ratio: float,
        label: str,
        description: str,
    ) -> None:
        self.format_id = format_id
        self.rows = rows
        self.cols = cols
        self.aspect_ratio = aspect_ratio
        self.label = label
        self.description = description

    @property
    def total_steps(self) -> int:
        """Number of capture steps (one per slice)."""
        return self.rows * self.cols

    @classmethod
    def from_id(cls, format_id: str) -> "CollageFormat":
        """Get a format by its id (e.g. ``"3x1"``)."""
        for fmt in cls:
            if fmt.format_id == format_id:
                return fmt
        LOGGER.error("Format '%s' not found", format_id)
        raise InvalidGeometryError(f"Format '{format_id}' not found")

    @classmethod
    def ids(cls) -> List[str]:
        return [fmt.format_id for fmt in cls]

    def next(self) -> "CollageFormat":
        """Return the following format in declaration order, wrapping around."""
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]


@dataclass(frozen=True, slots=True)
class Slice:
    """Rectangular region of the base raster assigned to one capture step."""

    row: int
    col: int
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """Return ``(left, top, right, bottom)`` for PIL crop/paste calls."""
        return self.x, self.y, self.x + self.width, self.y + self.height


@dataclass(frozen=True, slots=True)
class CropWindow:
    """Centered sub-rectangle of a source, in source coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def box(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.x + self.width, self.y + self.height


def _require_positive(**dims: float) -> None:
    for name, value in dims.items():
        if value <= 0:
            LOGGER.error("Invalid %s: %s", name, value)
            raise InvalidGeometryError(f"{name} must be positive, got {value}")


def compute_slices(fmt: CollageFormat, width: int, height: int) -> List[Slice]:
    """
    Partition a ``width`` x ``height`` base raster into slices for ``fmt``.

    Slices are returned in row-major order. Boundaries are placed at
    ``col * width // cols`` and ``row * height // rows`` so the slices tile
    the base exactly even when the dimensions are not divisible.

    Raises:
        InvalidGeometryError: If ``width`` or ``height`` is not positive
    """
    _require_positive(width=width, height=height)

    x_edges = [col * width // fmt.cols for col in range(fmt.cols + 1)]
    y_edges = [row * height // fmt.rows for row in range(fmt.rows + 1)]

    slices = []
    for row in range(fmt.rows):
        for col in range(fmt.cols):
            slices.append(
                Slice(
                    row=row,
                    col=col,
                    x=x_edges[col],
                    y=y_edges[row],
                    width=x_edges[col + 1] - x_edges[col],
                    height=y_edges[row + 1] - y_edges[row],
                )
            )
    return slices


def slice_for_step(fmt: CollageFormat, step: int, width: int, height: int) -> Slice:
    """Return the slice captured at 1-based ``step``."""
    if not 1 <= step <= fmt.total_steps:
        LOGGER.error("Step %s outside [1, %s] for %s", step, fmt.total_steps, fmt.format_id)
        raise InvalidGeometryError(
            f"Step {step} outside [1, {fmt.total_steps}] for format {fmt.format_id}"
        )
    return compute_slices(fmt, width, height)[step - 1]


def slice_fraction(fmt: CollageFormat, step: int) -> Tuple[float, float, float, float]:
    """
    Return the active slice for ``step`` as viewport fractions.

    The tuple is ``(left, top, width, height)`` with every value in
    ``[0, 1]``; used to position the live capture mask.
    """
    if not 1 <= step <= fmt.total_steps:
        raise InvalidGeometryError(
            f"Step {step} outside [1, {fmt.total_steps}] for format {fmt.format_id}"
        )
    row, col = divmod(step - 1, fmt.cols)
    return col / fmt.cols, row / fmt.rows, 1 / fmt.cols, 1 / fmt.rows


def compute_crop_window(
    source_width: float,
    source_height: float,
    target_width: float,
    target_height: float,
) -> CropWindow:
    """
    Compute the centered crop of a source matching the target aspect ratio.

    A source wider than the target is cropped symmetrically on width,
    otherwise symmetrically on height. The window is always contained in
    the source rectangle.

    Raises:
        InvalidGeometryError: If any dimension is not positive
    """
    _require_positive(
        source_width=source_width,
        source_height=source_height,
        target_width=target_width,
        target_height=target_height,
    )

    if source_width / source_height > target_width / target_height:
        width = min(source_height * target_width / target_height, source_width)
        window = CropWindow((source_width - width) / 2, 0.0, width, float(source_height))
    else:
        height = min(source_width * target_height / target_width, source_height)
        window = CropWindow(0.0, (source_height - height) / 2, float(source_width), height)

    LOGGER.debug(
        "Crop %sx%s -> %sx%s: %s", source_width, source_height, target_width, target_height, window
    )
    return window
