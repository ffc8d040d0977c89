"""
Module: rendering

Purpose:
    External collaborators of the signing pipeline: document
    rasterization and overlay image decoding.

Key Classes:
    - DocumentRenderer, PdfDocumentRenderer, DocxDocumentRenderer

Key Functions:
    - renderer_for(): Pick a renderer by file name or content
    - decode_overlay(): Decode overlay image bytes

Dependencies:
    - fitz (PyMuPDF): PDF rasterization
    - PIL: Decoding and raster stacking
"""

from .document import (
    DocumentRenderer,
    PdfDocumentRenderer,
    DocxDocumentRenderer,
    renderer_for,
    BASE_DPI,
    DEFAULT_SCALE,
)
from .decoder import decode_overlay

__all__ = [
    "DocumentRenderer",
    "PdfDocumentRenderer",
    "DocxDocumentRenderer",
    "renderer_for",
    "BASE_DPI",
    "DEFAULT_SCALE",
    "decode_overlay",
]
