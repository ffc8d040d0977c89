"""
Module: core.models.rasters

Purpose:
    Pixel buffer models for the signing pipeline. Wraps PIL images in
    frozen dataclasses so the document, its pages and the overlay are
    passed around as values. Any stage that needs to draw works on a
    copy, never on the buffer it was handed.

Key Classes:
    - DocumentRaster: The whole flowed document as one tall image
    - PageRaster: One fixed-size page (1-indexed)
    - OverlayAsset: Decoded overlay image plus its original bytes

Key Functions:
    - pixels_equal(): Exact pixel comparison of two images

Dependencies:
    - PIL: Image buffers
    - numpy: Pixel comparison

Used By:
    - stamping.layout.paginator: Produces PageRasters
    - stamping.layout.compositor: Copies and draws on PageRasters
    - rendering: Produces DocumentRaster and OverlayAsset
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from PIL import Image


def pixels_equal(
    a: Image.Image,
    b: Image.Image,
    box: Optional[Tuple[int, int, int, int]] = None,
) -> bool:
    """
    Compare two images pixel by pixel.

    Args:
        a: First image
        b: Second image
        box: Optional (left, top, right, bottom) region to compare

    Returns:
        True if sizes, modes and every pixel in the region match
    """
    if a.size != b.size or a.mode != b.mode:
        return False
    if box is not None:
        a = a.crop(box)
        b = b.crop(box)
    return bool(np.array_equal(np.asarray(a), np.asarray(b)))


@dataclass(frozen=True)
class DocumentRaster:
    """
    Entire source document rendered as one continuous image (immutable).

    Produced once per document load and replaced wholesale when the
    document is reloaded.

    Attributes:
        image: RGB image, width W and height H (both positive)

    Example:
        >>> raster = DocumentRaster(Image.new("RGB", (794, 4000), "white"))
        >>> raster.height
        4000
    """

    image: Image.Image

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        width, height = self.image.size
        if width <= 0 or height <= 0:
            raise ValueError(f"Document raster must be non-empty: {width}x{height}")

    @property
    def width(self) -> int:
        """Width in pixels."""
        return self.image.width

    @property
    def height(self) -> int:
        """Height in pixels."""
        return self.image.height


@dataclass(frozen=True)
class PageRaster:
    """
    A single output page (immutable).

    Attributes:
        number: Page number (1-indexed)
        image: Page pixels; identical size for every page of a document

    Example:
        >>> page = PageRaster(1, Image.new("RGB", (794, 1123), "white"))
        >>> page.size
        (794, 1123)
    """

    number: int
    image: Image.Image

    def __post_init__(self) -> None:
        """Validate page number on construction."""
        if self.number < 1:
            raise ValueError(f"Page number must be >= 1: {self.number}")

    @property
    def width(self) -> int:
        """Width in pixels."""
        return self.image.width

    @property
    def height(self) -> int:
        """Height in pixels."""
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return self.image.size

    def copy(self) -> "PageRaster":
        """Return a page holding a clone of this page's pixel buffer."""
        return PageRaster(number=self.number, image=self.image.copy())

    def with_image(self, image: Image.Image) -> "PageRaster":
        """Return a page with the same number and a new image."""
        if image.size != self.image.size:
            raise ValueError(
                f"Replacement image size {image.size} differs from page size {self.image.size}"
            )
        return PageRaster(number=self.number, image=image)


@dataclass(frozen=True)
class OverlayAsset:
    """
    Decoded overlay image, typically a signature (immutable).

    Attributes:
        image: Decoded RGBA image
        data: Original encoded bytes
        media_type: Declared or inferred media type, e.g. "image/png"
    """

    image: Image.Image
    data: bytes
    media_type: str

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        width, height = self.image.size
        if width <= 0 or height <= 0:
            raise ValueError(f"Overlay image must be non-empty: {width}x{height}")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def aspect(self) -> float:
        """Width divided by height."""
        return self.image.width / self.image.height
