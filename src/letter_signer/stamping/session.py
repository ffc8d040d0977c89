"""
Module: stamping.session

Purpose:
    Owns all mutable state of one signing session: the source
    document and its raster, the overlay asset, the derived pages and
    the current stamp parameters. Lifecycle transitions are explicit:

        EMPTY -> LOADED -> PAGINATED -> COMPOSED
          ^__________________ reset() ______|

    Slow collaborator calls (rendering, decoding, PDF assembly) run in
    worker threads and suspend the event loop task. Pipeline operations
    are serialized by a lock, and reset() bumps a generation token so a
    result arriving after a reset is discarded (StaleSessionError)
    instead of being written into a session that moved on.

Key Classes:
    - SessionPhase: Lifecycle states
    - SignerSession: Session state and pipeline operations

Dependencies:
    - asyncio (std): Lock and worker-thread offloading
    - stamping.layout, stamping.selection, stamping.output
    - rendering: Document renderer and overlay decoder

Used By:
    - stamping.controller: sign_document()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from enum import Enum, auto
from typing import Callable, FrozenSet, Optional, Tuple

from PIL import Image

from letter_signer.core.errors import PreconditionError, StaleSessionError
from letter_signer.core.models import (
    DocumentRaster,
    OverlayAsset,
    PageRaster,
    PageSelection,
    PageSelectionMode,
)
from letter_signer.rendering import DocumentRenderer, decode_overlay, renderer_for

from .config import DEFAULT_RASTER_SCALE, StampParameters
from .layout import PageFormat, compose, paginate
from .output import PageWriter, assemble, render_preview
from .selection import resolve_page_selection

logger = logging.getLogger(__name__)

OverlayDecoder = Callable[[bytes, Optional[str]], OverlayAsset]


class SessionPhase(Enum):
    """
    Lifecycle state of a SignerSession.

    Attributes:
        EMPTY: Nothing loaded
        LOADED: Document and/or overlay loaded, no pages derived
        PAGINATED: Pages derived from the current document
        COMPOSED: Output generated from the current pages and parameters
    """

    EMPTY = auto()
    LOADED = auto()
    PAGINATED = auto()
    COMPOSED = auto()


class SignerSession:
    """
    State and operations for one editing session.

    Example:
        >>> session = SignerSession()
        >>> await session.load_document(docx_bytes, filename="letter.docx")
        >>> await session.load_overlay(png_bytes, "image/png")
        >>> pdf_bytes = await session.generate()
    """

    def __init__(
        self,
        *,
        renderer: Optional[DocumentRenderer] = None,
        decoder: OverlayDecoder = decode_overlay,
        page_format: Optional[PageFormat] = None,
        raster_scale: float = DEFAULT_RASTER_SCALE,
        parameters: Optional[StampParameters] = None,
    ) -> None:
        """
        Initialize an empty session.

        Args:
            renderer: Document renderer (None = pick per document)
            decoder: Overlay decoder
            page_format: Page aspect and padding colour
            raster_scale: Multiplier on the 96 DPI capture resolution
            parameters: Initial placement and selection
        """
        if raster_scale <= 0:
            raise ValueError(f"raster_scale must be positive: {raster_scale}")
        self._renderer = renderer
        self._decoder = decoder
        self.page_format = page_format or PageFormat()
        self.raster_scale = raster_scale
        self._parameters = parameters or StampParameters()
        self._lock = asyncio.Lock()
        self._generation = 0
        self._clear()

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    def _clear(self) -> None:
        self._source: Optional[bytes] = None
        self._source_name: Optional[str] = None
        self._raster: Optional[DocumentRaster] = None
        self._overlay: Optional[OverlayAsset] = None
        self._pages: Tuple[PageRaster, ...] = ()
        self._composed: Tuple[PageRaster, ...] = ()
        self._phase = SessionPhase.EMPTY

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def source_name(self) -> Optional[str]:
        return self._source_name

    @property
    def raster(self) -> Optional[DocumentRaster]:
        return self._raster

    @property
    def overlay(self) -> Optional[OverlayAsset]:
        return self._overlay

    @property
    def pages(self) -> Tuple[PageRaster, ...]:
        """Cached paginated pages (empty until paginated)."""
        return self._pages

    @property
    def composed_pages(self) -> Tuple[PageRaster, ...]:
        """Pages of the last generated output (empty until generated)."""
        return self._composed

    @property
    def page_count(self) -> int:
        """Number of paginated pages (0 until paginated)."""
        return len(self._pages)

    @property
    def parameters(self) -> StampParameters:
        return self._parameters

    @property
    def selected_pages(self) -> FrozenSet[int]:
        """Pages the overlay goes on, under the current parameters."""
        return resolve_page_selection(self._parameters.selection, self.page_count)

    @property
    def resolved_selection(self) -> PageSelection:
        """
        Selection with range endpoints clamped to the current pages.

        The stored request is left as given, so an open range keeps
        meaning "first to last page" for every document loaded later.
        Missing endpoints resolve to 1 and the page count.
        """
        selection = self._parameters.selection
        count = self.page_count
        if selection.mode is not PageSelectionMode.RANGE or count == 0:
            return selection
        range_from = 1 if selection.range_from is None else max(1, min(count, selection.range_from))
        range_to = count if selection.range_to is None else max(1, min(count, selection.range_to))
        return replace(selection, range_from=range_from, range_to=range_to)

    def set_parameters(self, parameters: StampParameters) -> None:
        """
        Replace placement and selection.

        Pages stay cached; a previous output is marked stale.
        """
        self._parameters = parameters
        if self._phase is SessionPhase.COMPOSED:
            self._composed = ()
            self._phase = SessionPhase.PAGINATED

    def reset(self) -> None:
        """
        Discard all loaded and derived state.

        Operations suspended at the time of the reset fail with
        StaleSessionError when they resume. Parameters are kept.
        """
        self._generation += 1
        self._clear()
        logger.info("Session reset")

    def _ensure_current(self, token: int) -> None:
        if token != self._generation:
            raise StaleSessionError("Session was reset while the operation was running.")

    def _require_document(self) -> DocumentRaster:
        if self._raster is None:
            raise PreconditionError("Document not loaded.")
        return self._raster

    def _require_overlay(self) -> OverlayAsset:
        if self._overlay is None:
            raise PreconditionError("Overlay image not loaded.")
        return self._overlay

    # ─────────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────────

    async def load_document(self, data: bytes, *, filename: Optional[str] = None) -> DocumentRaster:
        """
        Render a source document and make it the session's document.

        Replaces any previous document and drops derived pages.

        Args:
            data: Document bytes
            filename: Original file name, used to pick a renderer

        Returns:
            The rendered DocumentRaster

        Raises:
            RenderError: If the document cannot be rendered
            StaleSessionError: If the session was reset meanwhile
        """
        async with self._lock:
            token = self._generation
            renderer = self._renderer or renderer_for(filename, data)
            raster = await asyncio.to_thread(renderer.render, data, scale=self.raster_scale)
            self._ensure_current(token)

            self._source = data
            self._source_name = filename
            self._raster = raster
            self._pages = ()
            self._composed = ()
            self._phase = SessionPhase.LOADED

            logger.info(f"Loaded document {filename or '<bytes>'}: {raster.width}x{raster.height}")
            return raster

    async def load_overlay(self, data: bytes, media_type: Optional[str] = None) -> OverlayAsset:
        """
        Decode and store the overlay image.

        On failure the previous overlay (if any) is left untouched.

        Raises:
            DecodeError: If the image cannot be decoded
            StaleSessionError: If the session was reset meanwhile
        """
        async with self._lock:
            token = self._generation
            overlay = await asyncio.to_thread(self._decoder, data, media_type)
            self._ensure_current(token)

            self._overlay = overlay
            self._composed = ()
            if self._phase is SessionPhase.EMPTY:
                self._phase = SessionPhase.LOADED
            elif self._phase is SessionPhase.COMPOSED:
                self._phase = SessionPhase.PAGINATED

            return overlay

    # ─────────────────────────────────────────────────────────────────────────
    # Pipeline
    # ─────────────────────────────────────────────────────────────────────────

    def _paginate_locked(self) -> Tuple[PageRaster, ...]:
        raster = self._require_document()
        pages = paginate(raster, self.page_format.aspect, background=self.page_format.background)

        self._pages = pages
        self._composed = ()
        self._phase = SessionPhase.PAGINATED
        return pages

    async def paginate(self) -> Tuple[PageRaster, ...]:
        """
        Slice the document raster into pages and cache them.

        Raises:
            PreconditionError: If no document is loaded
        """
        async with self._lock:
            return self._paginate_locked()

    async def preview(self, *, page_number: int = 1) -> Image.Image:
        """
        Render a preview page (page 1 by default).

        The overlay is drawn solid if the page is selected, otherwise
        as a translucent ghost. Paginates first if needed.

        Raises:
            PreconditionError: If document or overlay is missing
        """
        async with self._lock:
            self._require_document()
            overlay = self._require_overlay()
            if not self._pages:
                self._paginate_locked()
            return render_preview(
                self._pages,
                overlay,
                self._parameters.placement,
                self.selected_pages,
                page_number=page_number,
            )

    async def generate(self, *, writer: Optional[PageWriter] = None) -> bytes:
        """
        Compose the selected pages and assemble the output PDF.

        Cached pages are never modified, so generate() can be called
        repeatedly with different parameters.

        Args:
            writer: Output writer (default: in-memory ReportLab PDF)

        Returns:
            PDF bytes

        Raises:
            PreconditionError: If document or overlay is missing
            StaleSessionError: If the session was reset meanwhile
        """
        async with self._lock:
            token = self._generation
            self._require_document()
            overlay = self._require_overlay()
            if not self._pages:
                self._paginate_locked()

            composed = compose(
                self._pages,
                overlay,
                self._parameters.placement,
                self.selected_pages,
            )
            data = await asyncio.to_thread(assemble, composed, writer)
            self._ensure_current(token)

            self._composed = composed
            self._phase = SessionPhase.COMPOSED
            return data
