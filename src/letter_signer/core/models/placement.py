"""
Module: core.models.placement

Purpose:
    Resolution-independent description of where the overlay sits on a
    page, and the absolute pixel geometry it resolves to.

    Placement is authored bottom-anchored: y_pct is the distance from
    the page's bottom edge. OverlayGeometry is top-left-origin, the
    convention of the page images themselves.

Key Classes:
    - Placement: Normalized x/y/width fractions, clamped on construction
    - OverlayGeometry: Float pixel rectangle on a concrete page

Dependencies:
    - dataclasses (std)

Used By:
    - stamping.placement.geometry: resolve_geometry()
    - stamping.layout.compositor: Drawing overlays
    - stamping.config: Building placements from percentages
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Smallest overlay width as a fraction of page width
MIN_WIDTH_PCT = 0.01
DEFAULT_WIDTH_PERCENT = 20.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Placement:
    """
    Normalized overlay placement (immutable).

    Values outside the valid range are clamped, never rejected.

    Attributes:
        x_pct: Offset from the page's left edge as fraction of page width
        y_pct: Offset from the page's bottom edge as fraction of page height
        width_pct: Overlay width as fraction of page width (>= 0.01)

    Example:
        >>> Placement(x_pct=1.5, y_pct=-0.2, width_pct=0.2)
        Placement(x_pct=1.0, y_pct=0.0, width_pct=0.2)
    """

    x_pct: float = 0.0
    y_pct: float = 0.0
    width_pct: float = DEFAULT_WIDTH_PERCENT / 100

    def __post_init__(self) -> None:
        """Clamp fractions into range."""
        object.__setattr__(self, "x_pct", _clamp(float(self.x_pct), 0.0, 1.0))
        object.__setattr__(self, "y_pct", _clamp(float(self.y_pct), 0.0, 1.0))
        object.__setattr__(self, "width_pct", _clamp(float(self.width_pct), MIN_WIDTH_PCT, 1.0))

    @classmethod
    def from_percent(
        cls,
        x: Optional[float] = None,
        y: Optional[float] = None,
        width: Optional[float] = None,
    ) -> "Placement":
        """
        Build a placement from 0..100 percentages.

        Missing values default to 0% offset and 20% width.

        Example:
            >>> Placement.from_percent(10, 5, 20)
            Placement(x_pct=0.1, y_pct=0.05, width_pct=0.2)
        """
        x = 0.0 if x is None else x
        y = 0.0 if y is None else y
        width = DEFAULT_WIDTH_PERCENT if width is None else width
        return cls(
            x_pct=_clamp(x, 0.0, 100.0) / 100,
            y_pct=_clamp(y, 0.0, 100.0) / 100,
            width_pct=_clamp(width, 1.0, 100.0) / 100,
        )

    def to_percent(self) -> Tuple[float, float, float]:
        """Return (x, y, width) as 0..100 percentages."""
        return self.x_pct * 100, self.y_pct * 100, self.width_pct * 100


@dataclass(frozen=True)
class OverlayGeometry:
    """
    Overlay rectangle in page pixels, top-left origin.

    Attributes:
        x: Left edge
        y: Top edge
        width: Overlay width
        height: Overlay height (width / overlay aspect)
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_box(self) -> Tuple[int, int, int, int]:
        """
        Round to an integer (left, top, width, height) box.

        Width and height are at least one pixel so the overlay can
        always be resized into the box.
        """
        left = int(round(self.x))
        top = int(round(self.y))
        width = max(1, int(round(self.width)))
        height = max(1, int(round(self.height)))
        return left, top, width, height
