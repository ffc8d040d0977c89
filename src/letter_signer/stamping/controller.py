"""
Module: stamping.controller

Purpose:
    Orchestrate the complete signing pipeline.
    Read -> Render -> Decode -> Paginate -> Compose -> Assemble -> Write

Key Functions:
    - sign_document(): Main entry point (blocking)
    - sign_document_async(): Same, as a coroutine
    - build_output_filename(): Sanitized, timestamped output name

Key Classes:
    - SignResult: Complete signing result
    - SignError: Exception for pipeline failures

Dependencies:
    - stamping.session: SignerSession
    - stamping.config: SignerConfig

Used By:
    - cli: Command line entry point
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

from letter_signer import __version__
from letter_signer.core.errors import SignerError
from letter_signer.core.models import PageSelectionMode
from letter_signer.rendering import DocumentRenderer, decode_overlay

from .config import DEFAULT_OUTPUT_BASE_NAME, SignerConfig
from .session import OverlayDecoder, SignerSession

logger = logging.getLogger(__name__)


class SignError(SignerError):
    """Error during signing pipeline."""
    pass


@dataclass(frozen=True)
class SignResult:
    """
    Complete signing result (immutable).

    Attributes:
        output_path: Path to the written PDF
        page_count: Number of pages in the output
        signed_pages: Page numbers that received the overlay
        page_size: (width, height) of every page in pixels
        metadata: Run metadata dictionary
        metadata_path: Path to the JSON sidecar (if written)

    Example:
        >>> result = sign_document(config)
        >>> print(f"Signed pages {result.signed_pages} of {result.page_count}")
    """

    output_path: Path
    page_count: int
    signed_pages: Tuple[int, ...]
    page_size: Tuple[int, int]
    metadata: dict
    metadata_path: Optional[Path] = None


def build_output_filename(base_name: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Build the output file name "<base>_<YYYYMMDDHHMMSS>.pdf".

    Runs of characters other than letters, digits, "_" and "-" become
    a single "_". An empty base falls back to the default name.

    Example:
        >>> build_output_filename("Offer letter (final)", datetime(2026, 1, 2, 3, 4, 5))
        'Offer_letter_final__20260102030405.pdf'
    """
    base = re.sub(r"[^\w\-]+", "_", (base_name or "").strip())
    if not base:
        base = DEFAULT_OUTPUT_BASE_NAME
    if now is None:
        now = datetime.now(timezone.utc)
    return f"{base}_{now.strftime('%Y%m%d%H%M%S')}.pdf"


async def sign_document_async(
    config: SignerConfig,
    *,
    renderer: Optional[DocumentRenderer] = None,
    decoder: OverlayDecoder = decode_overlay,
    now: Optional[datetime] = None,
) -> SignResult:
    """
    Sign a document from start to finish.

    Pipeline:
    1. Read document and overlay files
    2. Render the document to a continuous raster
    3. Decode the overlay
    4. Paginate
    5. Compose the overlay onto the selected pages and assemble the PDF
    6. Write the PDF (and optional metadata sidecar)

    Args:
        config: Signing configuration
        renderer: Document renderer (None = pick by file extension)
        decoder: Overlay decoder
        now: Timestamp for the output name (default: current UTC time)

    Returns:
        SignResult with output path and metadata

    Raises:
        SignError: If any step fails
    """
    start_time = time.perf_counter()
    logger.info(f"Signing {config.document_path.name} with {config.overlay_path.name}")

    # 1. Read inputs
    try:
        document_bytes = await asyncio.to_thread(config.document_path.read_bytes)
        overlay_bytes = await asyncio.to_thread(config.overlay_path.read_bytes)
    except OSError as e:
        raise SignError(f"Failed to read input: {e}") from e

    session = SignerSession(
        renderer=renderer,
        decoder=decoder,
        page_format=config.page_format,
        raster_scale=config.raster_scale,
        parameters=config.parameters,
    )

    # 2-3. Render and decode
    try:
        await session.load_document(document_bytes, filename=config.document_path.name)
    except SignerError as e:
        raise SignError(f"Failed to render document: {e}") from e
    try:
        await session.load_overlay(overlay_bytes, config.overlay_media_type)
    except SignerError as e:
        raise SignError(f"Failed to load signature image: {e}") from e

    # 4-5. Paginate, compose, assemble
    try:
        pages = await session.paginate()
        logger.info(f"Paginated onto {len(pages)} pages")
        pdf_bytes = await session.generate()
    except SignerError as e:
        raise SignError(f"Failed to generate PDF: {e}") from e

    signed_pages = tuple(sorted(session.selected_pages))
    logger.info(f"Signature applied to pages {list(signed_pages)}")

    # 6. Write output
    output_dir = config.output_dir if config.output_dir is not None else config.document_path.parent
    output_path = output_dir / build_output_filename(config.output_base_name, now)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(output_path.write_bytes, pdf_bytes)
    except OSError as e:
        raise SignError(f"Failed to write {output_path}: {e}") from e
    logger.info(f"Wrote {output_path} ({len(pdf_bytes)} bytes)")

    elapsed = time.perf_counter() - start_time
    logger.info(f"Signing completed in {elapsed:.2f}s")

    metadata = _build_metadata(config, session, output_path, elapsed)
    metadata_path = None
    if config.write_metadata:
        metadata_path = _write_metadata(output_path, metadata)

    return SignResult(
        output_path=output_path,
        page_count=session.page_count,
        signed_pages=signed_pages,
        page_size=session.pages[0].size,
        metadata=metadata,
        metadata_path=metadata_path,
    )


def sign_document(
    config: SignerConfig,
    *,
    renderer: Optional[DocumentRenderer] = None,
    decoder: OverlayDecoder = decode_overlay,
    now: Optional[datetime] = None,
) -> SignResult:
    """
    Blocking wrapper around sign_document_async().

    Example:
        >>> config = SignerConfig(Path("letter.docx"), Path("signature.png"))
        >>> result = sign_document(config)
        >>> result.output_path.name
        'SIGNED_OCR_LETTER_20260102030405.pdf'
    """
    return asyncio.run(sign_document_async(config, renderer=renderer, decoder=decoder, now=now))


def _build_metadata(
    config: SignerConfig,
    session: SignerSession,
    output_path: Path,
    elapsed: float,
) -> dict:
    """
    Build metadata dictionary for a signed document.

    Contains the inputs, the resolved selection and page geometry,
    and the placement that was used.
    """
    x, y, width = session.parameters.placement.to_percent()
    selection = session.resolved_selection
    page_width, page_height = session.pages[0].size
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "signer_version": __version__,
        "document": str(config.document_path),
        "overlay": str(config.overlay_path),
        "overlay_media_type": session.overlay.media_type if session.overlay else None,
        "output": str(output_path),
        "page_count": session.page_count,
        "page_size_px": [page_width, page_height],
        "raster_scale": config.raster_scale,
        "placement": {"x_percent": x, "y_percent": y, "width_percent": width},
        "page_mode": selection.mode.value,
        "range": (
            [selection.range_from, selection.range_to]
            if selection.mode is PageSelectionMode.RANGE
            else None
        ),
        "signed_pages": sorted(session.selected_pages),
        "elapsed_s": round(elapsed, 3),
    }


def _write_metadata(output_path: Path, metadata: dict) -> Path:
    """
    Write metadata JSON next to the output PDF.

    Raises:
        SignError: If writing fails
    """
    metadata_path = output_path.with_suffix(".json")
    try:
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        raise SignError(f"Failed to write metadata: {e}") from e
    return metadata_path
