"""
Module: stamping.layout.compositor

Purpose:
    Apply the overlay to the selected pages of a paginated document.
    Every page is duplicated before anything is drawn, so the cached
    page sequence from pagination can be composed again and again
    (preview, then generation, with different placements) without
    the overlay ever being applied twice.

Key Functions:
    - compose(): Overlay selected pages, return new page sequence
    - draw_overlay(): Draw the overlay onto a copy of one image

Dependencies:
    - PIL: Resizing and alpha compositing
    - numpy: Alpha channel scaling for translucent overlays
    - stamping.placement.geometry: Placement -> pixel geometry

Used By:
    - stamping.session: Generation
    - stamping.output.preview: Preview rendering
"""

from __future__ import annotations

import logging
from typing import AbstractSet, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from letter_signer.core.errors import PreconditionError
from letter_signer.core.models import OverlayAsset, OverlayGeometry, PageRaster, Placement
from letter_signer.stamping.placement import geometry_for

logger = logging.getLogger(__name__)


def _scale_alpha(stamp: Image.Image, opacity: float) -> Image.Image:
    """Multiply an RGBA image's alpha channel by opacity."""
    alpha = np.asarray(stamp.getchannel("A"), dtype=np.float32) * opacity
    stamp.putalpha(Image.fromarray(np.clip(np.rint(alpha), 0, 255).astype(np.uint8), "L"))
    return stamp


def draw_overlay(
    image: Image.Image,
    overlay: OverlayAsset,
    geometry: OverlayGeometry,
    *,
    opacity: float = 1.0,
) -> Image.Image:
    """
    Draw the overlay onto a copy of an image.

    The overlay is resized into the rounded geometry box and
    alpha-composited; parts of the box outside the image are clipped.

    Args:
        image: Source image (will be copied, not modified)
        overlay: Decoded overlay asset
        geometry: Target rectangle in image pixels
        opacity: 0..1 multiplier for the overlay's alpha

    Returns:
        New image with the overlay drawn
    """
    result = image.copy()
    opacity = max(0.0, min(1.0, opacity))
    if opacity == 0.0:
        return result

    left, top, width, height = geometry.to_box()
    stamp = overlay.image.convert("RGBA").resize((width, height), Image.Resampling.LANCZOS)
    if opacity < 1.0:
        stamp = _scale_alpha(stamp, opacity)

    result.paste(stamp, (left, top), stamp)

    logger.debug(f"Drew overlay at ({left}, {top}) size {width}x{height} opacity {opacity:.2f}")
    return result


def compose(
    pages: Sequence[PageRaster],
    overlay: Optional[OverlayAsset],
    placement: Placement,
    selection: AbstractSet[int],
    *,
    opacity: float = 1.0,
) -> Tuple[PageRaster, ...]:
    """
    Overlay the selected pages of a page sequence.

    Args:
        pages: Paginated pages (left unmodified)
        overlay: Overlay asset to draw
        placement: Normalized placement, evaluated per page
        selection: Page numbers (1-indexed) that receive the overlay
        opacity: 0..1 multiplier for the overlay's alpha

    Returns:
        New tuple of pages, same order and numbering as the input

    Raises:
        PreconditionError: If overlay is None

    Example:
        >>> signed = compose(pages, overlay, Placement(0.1, 0.05, 0.2), {2})
        >>> signed[0] is pages[0]
        False
    """
    if overlay is None:
        raise PreconditionError("Overlay image not loaded.")

    composed: List[PageRaster] = []
    for page in pages:
        if page.number in selection:
            geometry = geometry_for(placement, page, overlay)
            composed.append(page.with_image(
                draw_overlay(page.image, overlay, geometry, opacity=opacity)
            ))
        else:
            composed.append(page.copy())

    stamped = sum(1 for page in pages if page.number in selection)
    logger.info(f"Composed {len(composed)} pages, overlay applied to {stamped}")
    return tuple(composed)
