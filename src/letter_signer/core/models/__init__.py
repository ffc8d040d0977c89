"""
Module: core.models

Purpose:
    Immutable data models for the signing pipeline.

Key Classes:
    - DocumentRaster, PageRaster, OverlayAsset: Pixel buffers
    - Placement, OverlayGeometry: Overlay position and size
    - PageSelectionMode, PageSelection: Which pages get the overlay
"""

from .rasters import DocumentRaster, PageRaster, OverlayAsset, pixels_equal
from .placement import Placement, OverlayGeometry, MIN_WIDTH_PCT
from .selection import PageSelectionMode, PageSelection

__all__ = [
    "DocumentRaster",
    "PageRaster",
    "OverlayAsset",
    "pixels_equal",
    "Placement",
    "OverlayGeometry",
    "MIN_WIDTH_PCT",
    "PageSelectionMode",
    "PageSelection",
]
