"""
Module: stamping.output.assembler

Purpose:
    Serialize composed page rasters into the output document.
    Encodes each page losslessly and hands it, in order, to a
    PageWriter.

Key Functions:
    - assemble(): Pages -> document bytes
    - encode_png(): Lossless page encoding

Dependencies:
    - PIL: PNG encoding
    - stamping.output.writer: PageWriter, ReportLabPageWriter

Used By:
    - stamping.session: Generation
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Sequence

from PIL import Image

from letter_signer.core.models import PageRaster

from .writer import PageWriter, ReportLabPageWriter

logger = logging.getLogger(__name__)


def encode_png(image: Image.Image) -> bytes:
    """
    Encode an image as PNG.

    Args:
        image: PIL Image

    Returns:
        PNG bytes
    """
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def assemble(
    pages: Sequence[PageRaster],
    writer: Optional[PageWriter] = None,
) -> bytes:
    """
    Write composed pages to an output document.

    One output page per raster, in input order, each sized exactly
    to its raster with the image placed at the origin.

    Args:
        pages: Composed pages
        writer: Output writer (default: in-memory ReportLab PDF)

    Returns:
        Document bytes

    Raises:
        ValueError: If pages is empty

    Example:
        >>> pdf_bytes = assemble(signed_pages)
        >>> pdf_bytes[:5]
        b'%PDF-'
    """
    if not pages:
        raise ValueError("Cannot assemble a document with no pages")

    if writer is None:
        writer = ReportLabPageWriter()

    for page in pages:
        writer.add_page(encode_png(page.image), page.width, page.height)

    data = writer.finish()
    logger.info(f"Assembled {len(pages)} pages ({len(data)} bytes)")
    return data
