"""
Module: stamping.layout

Purpose:
    Page slicing and overlay compositing.
    Turns a document raster into pages and stamps the overlay on them.

Key Functions:
    - paginate(): Slice a document raster into pages
    - compose(): Apply the overlay to selected pages
    - draw_overlay(): Draw the overlay onto one image

Key Classes:
    - PageFormat: Page aspect and background fill

Dependencies:
    - PIL: Image manipulation
    - numpy: Alpha scaling

Used By:
    - stamping.session: Pipeline stages
    - stamping.output.preview: Preview rendering
"""

from .config import PageFormat, A4_ASPECT, WHITE, page_height_for
from .paginator import paginate, page_count_for
from .compositor import compose, draw_overlay

__all__ = [
    # Config
    "PageFormat",
    "A4_ASPECT",
    "WHITE",
    "page_height_for",
    # Functions
    "paginate",
    "page_count_for",
    "compose",
    "draw_overlay",
]
