"""
Module: stamping.output.preview

Purpose:
    Render a single preview page with the overlay drawn on it.
    If the preview page is not among the selected pages the overlay
    is drawn as a translucent "ghost" so it can still be aligned.

Key Functions:
    - render_preview(): Preview image for one page

Used By:
    - stamping.session: SignerSession.preview()
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Optional, Sequence

from PIL import Image

from letter_signer.core.errors import PreconditionError
from letter_signer.core.models import OverlayAsset, PageRaster, Placement
from letter_signer.stamping.layout import draw_overlay
from letter_signer.stamping.placement import geometry_for

logger = logging.getLogger(__name__)

DEFAULT_GHOST_OPACITY = 0.35


def render_preview(
    pages: Sequence[PageRaster],
    overlay: Optional[OverlayAsset],
    placement: Placement,
    selected: AbstractSet[int],
    *,
    page_number: int = 1,
    ghost_opacity: float = DEFAULT_GHOST_OPACITY,
) -> Image.Image:
    """
    Render the preview of one page.

    Args:
        pages: Paginated pages (left unmodified)
        overlay: Overlay asset
        placement: Normalized placement
        selected: Page numbers that receive the overlay
        page_number: Page to preview, clamped to the document (default 1)
        ghost_opacity: Overlay opacity when the page is not selected

    Returns:
        New image of the preview page

    Raises:
        PreconditionError: If there are no pages or no overlay
    """
    if not pages:
        raise PreconditionError("No pages to preview.")
    if overlay is None:
        raise PreconditionError("Overlay image not loaded.")

    page = pages[max(1, min(page_number, len(pages))) - 1]
    geometry = geometry_for(placement, page, overlay)
    opacity = 1.0 if page.number in selected else ghost_opacity

    logger.debug(f"Preview of page {page.number} with opacity {opacity}")
    return draw_overlay(page.image, overlay, geometry, opacity=opacity)
