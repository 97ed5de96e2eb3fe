"""Named color filters and the read-only catalog that serves them."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping

from . import config
from .errors import UnknownFilterError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Adjustments:
    """
    Fixed-shape record of color adjustment parameters.

    Every field defaults to its identity value, so ``Adjustments()`` is a
    no-op.

    Attributes:
        brightness (float): Multiplier for all channels
        contrast (float): Scale around the 128 neutral point
        saturate (float): Blend factor away from luma (0 = gray)
        hue (float): R/G plane rotation in degrees
        grayscale (float): Blend toward luma, 0..100
        sepia (float): Blend toward sepia, 0..1 or a 0..100 percentage
        color_temp (float): Positive cools (blue), negative warms (orange)
        red_shift (float): Red channel multiplier
        green_shift (float): Green channel multiplier
        blue_shift (float): Blue channel multiplier
        blur (float): Gaussian blur radius in pixels
    """

    brightness: float = 1.0
    contrast: float = 1.0
    saturate: float = 1.0
    hue: float = 0.0
    grayscale: float = 0.0
    sepia: float = 0.0
    color_temp: float = 0.0
    red_shift: float = 1.0
    green_shift: float = 1.0
    blue_shift: float = 1.0
    blur: float = 0.0

    @property
    def is_identity(self) -> bool:
        return self == IDENTITY


IDENTITY = Adjustments()


@dataclass(frozen=True, slots=True)
class Filter:
    """A named look: an id plus its adjustments."""

    id: str
    adjustments: Adjustments = field(default_factory=Adjustments)
    name: str = ""
    description: str = ""


BUILTIN_FILTERS: tuple[Filter, ...] = (
    Filter("none", IDENTITY, "Original", "No filter"),
    Filter(
        "vintage",
        Adjustments(
            sepia=0.5,
            contrast=1.15,
            brightness=1.05,
            saturate=1.2,
            red_shift=1.05,
            green_shift=0.98,
            blue_shift=0.92,
        ),
        "Vintage",
        "Retro look",
    ),
    Filter(
        "blackwhite",
        Adjustments(grayscale=100, contrast=1.15, brightness=1.02),
        "Black & White",
        "Monochrome",
    ),
    Filter(
        "sepia",
        Adjustments(sepia=0.7, contrast=1.1, brightness=1.05),
        "Sepia",
        "Warm brown tones",
    ),
    Filter(
        "vibrant",
        Adjustments(saturate=1.4, contrast=1.12, brightness=1.03),
        "Vibrant",
        "Saturated colors",
    ),
    Filter(
        "cool",
        Adjustments(
            brightness=0.98,
            contrast=1.05,
            saturate=1.1,
            color_temp=0.15,
            red_shift=0.92,
            green_shift=0.98,
            blue_shift=1.08,
        ),
        "Cool",
        "Blue tones",
    ),
    Filter(
        "warm",
        Adjustments(
            brightness=1.05,
            contrast=1.08,
            saturate=1.15,
            color_temp=-0.15,
            red_shift=1.08,
            green_shift=1.02,
            blue_shift=0.92,
        ),
        "Warm",
        "Orange tones",
    ),
    Filter("blur", Adjustments(blur=2), "Soft", "Blur effect"),
    Filter(
        "sharpen",
        Adjustments(contrast=1.25, saturate=1.08, brightness=1.02),
        "Sharp",
        "Boosted contrast",
    ),
)


class FilterCatalog:
    """Immutable mapping from filter id to :class:`Filter`.

    Built once and passed explicitly to the components that need it; there
    is no mutation API.
    """

    def __init__(self, filters: Iterable[Filter] = BUILTIN_FILTERS) -> None:
        entries: Dict[str, Filter] = {}
        for item in filters:
            if item.id in entries:
                raise ValueError(f"Duplicate filter id '{item.id}'")
            entries[item.id] = item
        if config.DEFAULT_FILTER not in entries:
            raise ValueError(f"Catalog must contain the '{config.DEFAULT_FILTER}' filter")
        self._filters: Mapping[str, Filter] = MappingProxyType(entries)

    def lookup(self, filter_id: str) -> Filter:
        """Get a filter by id."""
        try:
            return self._filters[filter_id]
        except KeyError:
            LOGGER.error("Filter '%s' not found", filter_id)
            raise UnknownFilterError(f"Filter '{filter_id}' not found") from None

    def ids(self) -> List[str]:
        """Filter ids in catalog order."""
        return list(self._filters)

    def __contains__(self, filter_id: object) -> bool:
        return filter_id in self._filters

    def __iter__(self) -> Iterator[Filter]:
        return iter(self._filters.values())

    def __len__(self) -> int:
        return len(self._filters)


def default_catalog() -> FilterCatalog:
    """Return a catalog holding the built-in looks."""
    return FilterCatalog(BUILTIN_FILTERS)
