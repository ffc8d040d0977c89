"""
Module: stamping

Purpose:
    Signing pipeline: slices a rendered document into pages, stamps
    the overlay on the selected pages and writes the result as PDF.

Key Functions:
    - sign_document(): Main entry point for signing a document
    - resolve_geometry(): Placement -> pixel geometry
    - resolve_selection(): Selection mode -> page numbers

Key Classes:
    - SignerConfig: Configuration for signing
    - SignerSession: Session state and async pipeline operations
    - SignResult / SignError: Pipeline result and failure

Dependencies:
    - PIL: Image manipulation
    - reportlab: PDF generation
    - fitz (PyMuPDF): Document rasterization

Used By:
    - letter_signer.cli: Command line interface
"""

from .config import SignerConfig, StampParameters
from .placement import resolve_geometry, geometry_for
from .selection import resolve_selection, resolve_page_selection
from .session import SignerSession, SessionPhase
from .controller import (
    sign_document,
    sign_document_async,
    build_output_filename,
    SignResult,
    SignError,
)

__all__ = [
    # Config
    "SignerConfig",
    "StampParameters",
    # Core functions
    "resolve_geometry",
    "geometry_for",
    "resolve_selection",
    "resolve_page_selection",
    # Session
    "SignerSession",
    "SessionPhase",
    # Controller
    "sign_document",
    "sign_document_async",
    "build_output_filename",
    "SignResult",
    "SignError",
]
