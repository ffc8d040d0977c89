"""
Module: stamping.placement.geometry

Purpose:
    Resolve a normalized Placement into absolute pixel geometry for a
    given page size and overlay aspect ratio. Pure functions, called
    with identical results at preview time and at generation time.

Key Functions:
    - resolve_geometry(): Placement + page size + aspect -> geometry
    - geometry_for(): Same, evaluated against a PageRaster and overlay

Algorithm:
    width  = page_width * width_pct
    height = width / overlay_aspect          (aspect always preserved)
    x      = page_width * x_pct
    y      = page_height - page_height * y_pct - height
    The y input is bottom-anchored; the returned y is top-left-origin.

Dependencies:
    - core.models: Placement, OverlayGeometry, PageRaster, OverlayAsset
    - core.errors: PreconditionError

Used By:
    - stamping.layout.compositor: Drawing overlays onto pages
"""

from __future__ import annotations

from typing import Optional

from letter_signer.core.errors import PreconditionError
from letter_signer.core.models import OverlayAsset, OverlayGeometry, PageRaster, Placement


def resolve_geometry(
    placement: Placement,
    page_width: float,
    page_height: float,
    overlay_aspect: Optional[float],
) -> OverlayGeometry:
    """
    Convert a placement into page-pixel geometry.

    Args:
        placement: Normalized placement
        page_width: Page width in pixels
        page_height: Page height in pixels
        overlay_aspect: Overlay width / height, or None if no overlay loaded

    Returns:
        OverlayGeometry in top-left-origin page pixels

    Raises:
        PreconditionError: If no overlay aspect is available

    Example:
        >>> g = resolve_geometry(Placement(0.1, 0.05, 0.2), 1588, 2244, 3.0)
        >>> round(g.y, 2)
        2025.93
    """
    if overlay_aspect is None:
        raise PreconditionError("Overlay image not loaded.")
    if overlay_aspect <= 0:
        raise PreconditionError(f"Overlay aspect ratio must be positive: {overlay_aspect}")

    width = page_width * placement.width_pct
    height = width / overlay_aspect
    x = page_width * placement.x_pct
    y = page_height - (page_height * placement.y_pct) - height

    return OverlayGeometry(x=x, y=y, width=width, height=height)


def geometry_for(
    placement: Placement,
    page: PageRaster,
    overlay: Optional[OverlayAsset],
) -> OverlayGeometry:
    """Resolve geometry against a page's own size and an overlay asset."""
    if overlay is None:
        raise PreconditionError("Overlay image not loaded.")
    return resolve_geometry(placement, page.width, page.height, overlay.aspect)
