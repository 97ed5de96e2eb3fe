"""Encoding and file glue around finished rasters.

The compositing core never touches the filesystem; these helpers are the
export side used by host applications and tests.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union
from urllib.parse import urlparse

from PIL import Image, ImageOps, UnidentifiedImageError

from . import config
from .errors import ExportFailedError, FrameUnavailableError
from .raster import RasterSurface

LOGGER = logging.getLogger(__name__)

_FORMAT_ALIASES = {"JPG": "JPEG"}


def _normalize_format(image_format: str) -> str:
    fmt = image_format.upper().lstrip(".")
    return _FORMAT_ALIASES.get(fmt, fmt)


def _save_params(fmt: str, quality: int) -> Dict[str, Any]:
    params: Dict[str, Any] = {"format": fmt}
    if fmt == "JPEG":
        params.update({"quality": quality, "optimize": True, "progressive": True})
    elif fmt == "WEBP":
        params.update({"quality": quality, "method": 6})
    elif fmt == "PNG":
        params.update({"optimize": True, "compress_level": 6})
    return params


def _pillow_format(path: Path, allowed_exts: Iterable[str], *, for_writing: bool) -> str:
    """Map ``path``'s suffix to the Pillow format that handles it.

    The suffix must be in ``allowed_exts`` and the installed Pillow must be
    able to open (or, with ``for_writing``, save) that format.
    """
    suffix = path.suffix.lower()
    fmt = Image.registered_extensions().get(suffix)
    if suffix not in {ext.lower() for ext in allowed_exts} or fmt is None:
        raise ValueError(f"Unsupported file extension: {path.suffix or '(none)'}")
    available = Image.SAVE if for_writing else Image.OPEN
    if fmt not in available:
        raise ValueError(f"Pillow cannot {'encode' if for_writing else 'decode'} {fmt} files")
    return fmt


def _local_path(path: Union[str, Path]) -> Path:
    # one-letter schemes are Windows drive letters
    scheme = urlparse(str(path)).scheme
    if len(scheme) > 1:
        raise ValueError(f"Expected a local path, got a {scheme} URL")
    return Path(path).expanduser()


def resolve_export_target(path: Union[str, Path]) -> Tuple[Path, str]:
    """Return the resolved export path and the image format its suffix selects.

    Raises:
        ExportFailedError: For URLs, missing directories or suffixes that
            cannot be encoded
    """
    try:
        target = _local_path(path).resolve()
        if not target.parent.is_dir():
            raise ValueError(f"Directory does not exist: {target.parent}")
        fmt = _pillow_format(target, config.EXPORT_EXTENSIONS, for_writing=True)
    except ValueError as exc:
        LOGGER.error("Rejected export path %s: %s", path, exc)
        raise ExportFailedError(str(exc)) from exc
    return target, fmt


def encode_surface(
    surface: RasterSurface,
    image_format: str = config.EXPORT_FORMAT,
    quality: int = config.EXPORT_QUALITY,
) -> bytes:
    """
    Encode ``surface`` into image file bytes.

    JPEG output drops the alpha channel.

    Raises:
        ExportFailedError: If the format is unknown or encoding fails
    """
    if surface.is_empty:
        raise ExportFailedError("Cannot export an empty surface")
    fmt = _normalize_format(image_format)
    image = surface.to_image()
    if fmt == "JPEG":
        image = image.convert("RGB")

    buffer = io.BytesIO()
    try:
        image.save(buffer, **_save_params(fmt, quality))
    except (KeyError, ValueError, OSError) as exc:
        LOGGER.error("Failed to encode %sx%s surface as %s: %s", surface.width, surface.height, fmt, exc)
        raise ExportFailedError(f"Failed to encode image as {fmt}: {exc}") from exc
    return buffer.getvalue()


def save_surface(
    surface: RasterSurface,
    path: Union[str, Path] = config.EXPORT_FILENAME,
    quality: int = config.EXPORT_QUALITY,
) -> Path:
    """Encode ``surface`` and write it to ``path``; the suffix picks the format.

    Without a path the collage is written to the default export file name in
    the working directory.
    """
    target, fmt = resolve_export_target(path)
    data = encode_surface(surface, fmt, quality)
    try:
        target.write_bytes(data)
    except OSError as exc:
        LOGGER.error("Failed to write %s: %s", target, exc)
        raise ExportFailedError(f"Failed to write {target}: {exc}") from exc
    LOGGER.info("Saved collage to %s", target)
    return target


def load_frame(path: Union[str, Path], *, max_dimension: Optional[int] = None) -> RasterSurface:
    """Load a still image as a frame, honoring EXIF orientation.

    The path must be a local file whose suffix is one of the frame
    extensions Pillow can decode.

    Raises:
        FrameUnavailableError: If the path is invalid or the file is not an
            image
    """
    try:
        source = _local_path(path).resolve(strict=True)
        if not source.is_file():
            raise ValueError(f"Not a file: {source}")
        _pillow_format(source, config.FRAME_EXTENSIONS, for_writing=False)
        with Image.open(source) as img:
            img = ImageOps.exif_transpose(img)
            if max_dimension:
                img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
            return RasterSurface.from_image(img)
    except (ValueError, UnidentifiedImageError, OSError) as exc:
        LOGGER.warning("Invalid frame file %s: %s", path, exc)
        raise FrameUnavailableError(f"Failed to load frame: {exc}") from exc
