"""Photo-strip collage compositing and color-filter core."""

from .compositor import Compositor
from .errors import (
    AssemblyFailedError,
    CaptureOrderError,
    CollageError,
    ExportFailedError,
    FrameUnavailableError,
    InvalidGeometryError,
    OperationCancelledError,
    SessionStateError,
    UndoUnavailableError,
    UnknownFilterError,
)
from .filters import Adjustments, Filter, FilterCatalog, default_catalog
from .layouts import CollageFormat, CropWindow, Slice, compute_crop_window, compute_slices
from .raster import RasterSurface

__all__ = [
    "Compositor",
    "Adjustments",
    "Filter",
    "FilterCatalog",
    "default_catalog",
    "CollageFormat",
    "CropWindow",
    "Slice",
    "compute_crop_window",
    "compute_slices",
    "RasterSurface",
    "CollageError",
    "FrameUnavailableError",
    "InvalidGeometryError",
    "UnknownFilterError",
    "AssemblyFailedError",
    "ExportFailedError",
    "OperationCancelledError",
    "SessionStateError",
    "CaptureOrderError",
    "UndoUnavailableError",
]
