"""
Module: stamping.layout.config

Purpose:
    Page geometry used to slice the document raster into pages.

Key Classes:
    - PageFormat: Immutable page aspect and background fill

Dependencies:
    - dataclasses (std)

Used By:
    - stamping.layout.paginator: Page height and padding colour
    - stamping.config: SignerConfig.page_format
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


# A4 at 96 DPI is 794 x 1123 CSS pixels
A4_WIDTH_PX_96DPI = 794
A4_HEIGHT_PX_96DPI = 1123
A4_ASPECT = A4_HEIGHT_PX_96DPI / A4_WIDTH_PX_96DPI

WHITE: Tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True)
class PageFormat:
    """
    Target page geometry (immutable).

    Attributes:
        aspect: Page height divided by page width
        background: RGB fill for padding below the last page's content

    Example:
        >>> PageFormat().page_height_for(1588)
        2246
    """

    aspect: float = A4_ASPECT
    background: Tuple[int, int, int] = WHITE

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.aspect <= 0:
            raise ValueError(f"aspect must be positive: {self.aspect}")
        if len(self.background) != 3 or any(not 0 <= c <= 255 for c in self.background):
            raise ValueError(f"background must be an RGB triple: {self.background!r}")

    def page_height_for(self, page_width: int) -> int:
        """Page height in pixels for a given page width."""
        return page_height_for(page_width, self.aspect)


def page_height_for(page_width: int, aspect: float) -> int:
    """Round page_width * aspect to whole pixels (at least one)."""
    return max(1, int(round(page_width * aspect)))
