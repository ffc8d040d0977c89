"""
Module: stamping.output

Purpose:
    Output generation: PDF assembly and preview rendering.

Key Functions:
    - assemble(): Write composed pages to PDF bytes
    - render_preview(): Preview image for one page

Key Classes:
    - PageWriter: Output writer interface
    - ReportLabPageWriter: ReportLab PDF writer

Dependencies:
    - reportlab: PDF generation
    - PIL: Image encoding
"""

from .writer import PageWriter, ReportLabPageWriter
from .assembler import assemble, encode_png
from .preview import render_preview, DEFAULT_GHOST_OPACITY

__all__ = [
    "PageWriter",
    "ReportLabPageWriter",
    "assemble",
    "encode_png",
    "render_preview",
    "DEFAULT_GHOST_OPACITY",
]
