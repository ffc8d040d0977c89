"""
Module: rendering.document

Purpose:
    Turn source document bytes into one continuous DocumentRaster.
    Layout is delegated: word-processing documents are laid out by
    headless LibreOffice into a PDF, and PDF pages are rasterized with
    PyMuPDF and stacked top to bottom.

Key Classes:
    - DocumentRenderer: Abstract renderer interface
    - PdfDocumentRenderer: PDF bytes -> continuous raster
    - DocxDocumentRenderer: DOCX (ODT, RTF, DOC) -> PDF -> raster

Key Functions:
    - renderer_for(): Pick a renderer by file name or content

Dependencies:
    - fitz (PyMuPDF): PDF rasterization
    - PIL: Raster stacking
    - LibreOffice (soffice binary, runtime only): DOCX layout

Used By:
    - stamping.session: SignerSession.load_document()
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

import fitz
from PIL import Image

from letter_signer.core.errors import RenderError
from letter_signer.core.models import DocumentRaster

logger = logging.getLogger(__name__)

# CSS pixel density; raster_scale multiplies it
BASE_DPI = 96
DEFAULT_SCALE = 2.0

PDF_SUFFIXES = frozenset({".pdf"})
WORD_SUFFIXES = frozenset({".docx", ".doc", ".odt", ".rtf"})
SOFFICE_CANDIDATES = ("soffice", "libreoffice")
DEFAULT_CONVERT_TIMEOUT_S = 120


class DocumentRenderer(ABC):
    """
    Abstract interface for rasterizing a source document.

    Implementations return the whole document as a single tall image.
    """

    @abstractmethod
    def render(self, data: bytes, *, scale: float = DEFAULT_SCALE) -> DocumentRaster:
        """
        Render document bytes to a continuous raster.

        Args:
            data: Source document bytes
            scale: Multiplier on the 96 DPI base resolution

        Returns:
            DocumentRaster of the whole document

        Raises:
            RenderError: If the document cannot be rendered
        """


def _check_scale(scale: float) -> None:
    if scale <= 0:
        raise ValueError(f"scale must be positive: {scale}")


def stack_vertically(images: Sequence[Image.Image], background=(255, 255, 255)) -> Image.Image:
    """
    Stack images top to bottom into one image.

    Narrower images are left-aligned; the remainder is background.
    """
    width = max(img.width for img in images)
    height = sum(img.height for img in images)
    stacked = Image.new("RGB", (width, height), background)
    y = 0
    for img in images:
        stacked.paste(img, (0, y))
        y += img.height
    return stacked


class PdfDocumentRenderer(DocumentRenderer):
    """
    Rasterizes every PDF page and stacks them into one raster.

    Example:
        >>> raster = PdfDocumentRenderer().render(pdf_bytes, scale=1)
        >>> raster.width   # A4 at 96 DPI
        794
    """

    def render(self, data: bytes, *, scale: float = DEFAULT_SCALE) -> DocumentRaster:
        """Render PDF bytes to a continuous raster."""
        _check_scale(scale)
        if not data:
            raise RenderError("Document is empty.")

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise RenderError(f"Could not open PDF: {e}") from e

        zoom = BASE_DPI * scale / 72.0
        matrix = fitz.Matrix(zoom, zoom)

        with doc:
            if doc.page_count == 0:
                raise RenderError("PDF has no pages.")

            images: List[Image.Image] = []
            for page in doc:
                pix = page.get_pixmap(matrix=matrix, alpha=False, colorspace=fitz.csRGB)
                images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))

        raster = DocumentRaster(stack_vertically(images))
        logger.info(
            f"Rasterized {len(images)} PDF pages at {BASE_DPI * scale:.0f} DPI "
            f"into {raster.width}x{raster.height}"
        )
        return raster


class DocxDocumentRenderer(PdfDocumentRenderer):
    """
    Lays out a word-processing document with headless LibreOffice,
    then rasterizes the resulting PDF.

    Attributes:
        source_suffix: Extension the input bytes are saved under
        soffice: Path to the LibreOffice binary (None = search PATH)
        timeout: Conversion timeout in seconds
    """

    def __init__(
        self,
        *,
        source_suffix: str = ".docx",
        soffice: Optional[str] = None,
        timeout: float = DEFAULT_CONVERT_TIMEOUT_S,
    ) -> None:
        self.source_suffix = source_suffix if source_suffix.startswith(".") else f".{source_suffix}"
        self.soffice = soffice
        self.timeout = timeout

    def render(self, data: bytes, *, scale: float = DEFAULT_SCALE) -> DocumentRaster:
        """Convert to PDF with LibreOffice, then rasterize."""
        _check_scale(scale)
        if not data:
            raise RenderError("Document is empty.")
        return super().render(self.convert_to_pdf(data), scale=scale)

    def convert_to_pdf(self, data: bytes) -> bytes:
        """
        Convert document bytes to PDF bytes.

        Runs in a private temp directory with its own LibreOffice
        profile so concurrent conversions do not collide.

        Raises:
            RenderError: If LibreOffice is missing or conversion fails
        """
        binary = self._find_soffice()

        with tempfile.TemporaryDirectory(prefix="letter_signer_") as tmp:
            work_dir = Path(tmp)
            source = work_dir / f"document{self.source_suffix}"
            source.write_bytes(data)
            profile = (work_dir / "profile").as_uri()

            cmd = [
                binary,
                f"-env:UserInstallation={profile}",
                "--headless",
                "--convert-to",
                "pdf",
                "--outdir",
                str(work_dir),
                str(source),
            ]
            logger.debug(f"Running {' '.join(cmd)}")

            try:
                subprocess.run(cmd, check=True, capture_output=True, timeout=self.timeout)
            except subprocess.TimeoutExpired as e:
                raise RenderError(f"Document conversion timed out after {self.timeout}s") from e
            except subprocess.CalledProcessError as e:
                stderr = (e.stderr or b"").decode(errors="replace").strip()
                raise RenderError(f"Document conversion failed: {stderr or e}") from e
            except OSError as e:
                raise RenderError(f"Could not run {binary}: {e}") from e

            generated = work_dir / "document.pdf"
            if not generated.exists():
                raise RenderError("Document conversion produced no PDF.")
            return generated.read_bytes()

    def _find_soffice(self) -> str:
        if self.soffice:
            return self.soffice
        for name in SOFFICE_CANDIDATES:
            found = shutil.which(name)
            if found:
                return found
        raise RenderError("LibreOffice (soffice) not found on PATH; needed to render DOCX files.")


def renderer_for(filename: Optional[str] = None, data: Optional[bytes] = None) -> DocumentRenderer:
    """
    Pick a renderer for a document.

    Uses the file extension when a name is given, otherwise sniffs
    the PDF magic bytes and assumes DOCX for anything else.

    Raises:
        RenderError: If the extension is not supported
    """
    if filename:
        suffix = Path(filename).suffix.lower()
        if suffix in PDF_SUFFIXES:
            return PdfDocumentRenderer()
        if suffix in WORD_SUFFIXES:
            return DocxDocumentRenderer(source_suffix=suffix)
        raise RenderError(f"Unsupported document type: {filename}")

    if data is not None and data.lstrip()[:5] == b"%PDF-":
        return PdfDocumentRenderer()
    return DocxDocumentRenderer()
