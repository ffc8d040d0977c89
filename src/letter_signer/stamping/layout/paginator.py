"""
Module: stamping.layout.paginator

Purpose:
    Slice one tall document raster into an ordered sequence of
    fixed-size page rasters.

Key Functions:
    - paginate(): Main pagination function
    - page_count_for(): Number of pages for a raster height

Algorithm:
    1. Page width is the raster width (no horizontal scaling)
    2. Page height is round(page width * aspect)
    3. Page i copies rows [i*H, min((i+1)*H, raster height))
       onto a background-filled page buffer at the origin
    4. Shortfall on the last page stays background-filled

Dependencies:
    - PIL: Cropping and pasting
    - stamping.layout.config: PageFormat, A4_ASPECT

Used By:
    - stamping.session: Slicing on demand
"""

from __future__ import annotations

import logging
import math
from typing import List, Tuple

from PIL import Image

from letter_signer.core.models import DocumentRaster, PageRaster

from .config import A4_ASPECT, WHITE, page_height_for

logger = logging.getLogger(__name__)


def _flatten(image: Image.Image, background: Tuple[int, int, int]) -> Image.Image:
    """Return an RGB image; transparent areas take the background colour."""
    if image.mode == "RGB":
        return image
    if "A" not in image.getbands() and "transparency" not in image.info:
        return image.convert("RGB")

    rgba = image.convert("RGBA")
    flat = Image.new("RGB", rgba.size, background)
    flat.paste(rgba, (0, 0), rgba)
    return flat


def page_count_for(raster_height: int, page_height: int) -> int:
    """
    Number of pages needed for a raster height.

    Example:
        >>> page_count_for(4000, 2244)
        2
    """
    if page_height <= 0:
        raise ValueError(f"page_height must be positive: {page_height}")
    return math.ceil(raster_height / page_height)


def paginate(
    raster: DocumentRaster,
    target_aspect: float = A4_ASPECT,
    *,
    background: Tuple[int, int, int] = WHITE,
) -> Tuple[PageRaster, ...]:
    """
    Slice a document raster into pages.

    Deterministic: the same raster and aspect always produce
    bit-identical pages.

    Args:
        raster: Continuous document raster
        target_aspect: Page height / page width (default A4)
        background: RGB fill for the padded tail of the last page

    Returns:
        Tuple of PageRasters in flow order; index 0 is page 1

    Raises:
        ValueError: If target_aspect is not positive

    Example:
        >>> pages = paginate(DocumentRaster(Image.new("RGB", (1588, 4000))), 2244 / 1588)
        >>> len(pages), pages[-1].size
        (2, (1588, 2244))
    """
    if target_aspect <= 0:
        raise ValueError(f"target_aspect must be positive: {target_aspect}")

    page_width = raster.width
    page_height = page_height_for(page_width, target_aspect)
    count = page_count_for(raster.height, page_height)

    source = _flatten(raster.image, background)

    pages: List[PageRaster] = []
    for index in range(count):
        top = index * page_height
        bottom = min(top + page_height, raster.height)

        page = Image.new("RGB", (page_width, page_height), background)
        page.paste(source.crop((0, top, page_width, bottom)), (0, 0))
        pages.append(PageRaster(number=index + 1, image=page))

        if bottom - top < page_height:
            logger.debug(
                f"Padded page {index + 1}: {bottom - top}px content, "
                f"{page_height - (bottom - top)}px background"
            )

    logger.info(f"Paginated {raster.width}x{raster.height} raster onto {len(pages)} pages")
    return tuple(pages)
