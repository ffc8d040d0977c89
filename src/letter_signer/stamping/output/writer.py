"""
Module: stamping.output.writer

Purpose:
    Output-document writers. A writer receives one request per page
    (encoded image plus pixel size) and produces the final document
    bytes. Pages are sized 1:1 to the raster (one pixel per PDF point)
    and the image covers the whole page from the origin.

Key Classes:
    - PageWriter: Abstract writer interface
    - ReportLabPageWriter: In-memory PDF writer using ReportLab

Dependencies:
    - reportlab: PDF generation

Used By:
    - stamping.output.assembler: assemble()
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from typing import Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from letter_signer import __version__

logger = logging.getLogger(__name__)


class PageWriter(ABC):
    """
    Abstract output-document writer.

    Implementations must keep pages in the order add_page() is called.
    """

    @abstractmethod
    def add_page(self, image_data: bytes, width: int, height: int) -> None:
        """
        Append a page showing an encoded image.

        Args:
            image_data: Losslessly encoded page image (PNG)
            width: Page width, equal to the image width in pixels
            height: Page height, equal to the image height in pixels
        """

    @abstractmethod
    def finish(self) -> bytes:
        """
        Close the document.

        Returns:
            Complete document bytes
        """


class ReportLabPageWriter(PageWriter):
    """
    Writes pages into an in-memory PDF with a ReportLab canvas.

    Each page's media box is exactly (width, height) points and the
    image is drawn at (0, 0) with the same size.

    Example:
        >>> writer = ReportLabPageWriter(title="Signed letter")
        >>> writer.add_page(png_bytes, 794, 1123)
        >>> pdf = writer.finish()
    """

    def __init__(self, *, title: Optional[str] = None, invariant: bool = False) -> None:
        """
        Initialize writer.

        Args:
            title: Optional document title metadata
            invariant: If True, omit timestamps so output is reproducible
        """
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, invariant=1 if invariant else 0)
        if title:
            self._canvas.setTitle(title)
        self._canvas.setCreator(f"letter-signer {__version__}")
        self._page_count = 0
        self._finished = False

    @property
    def page_count(self) -> int:
        """Pages written so far."""
        return self._page_count

    def add_page(self, image_data: bytes, width: int, height: int) -> None:
        """Append a page sized to the image, image covering the page."""
        if self._finished:
            raise RuntimeError("Writer already finished")

        c = self._canvas
        c.setPageSize((width, height))
        c.drawImage(
            ImageReader(io.BytesIO(image_data)),
            0,
            0,
            width=width,
            height=height,
        )
        c.showPage()
        self._page_count += 1

    def finish(self) -> bytes:
        """Save the canvas and return the PDF bytes."""
        if not self._finished:
            self._canvas.save()
            self._finished = True
            logger.debug(f"Wrote PDF with {self._page_count} pages")
        return self._buffer.getvalue()
