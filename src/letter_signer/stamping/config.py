"""
Module: stamping.config

Purpose:
    Configuration dataclasses for the signing pipeline. Immutable
    configuration with validation on construction, plus dict
    round-tripping for JSON config files.

Key Classes:
    - StampParameters: Placement + page selection (what the session holds)
    - SignerConfig: Full pipeline configuration

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - stamping.controller: sign_document()
    - stamping.session: SignerSession
    - cli: Argument parsing
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

from letter_signer.core.models import PageSelection, PageSelectionMode, Placement
from letter_signer.core.models.placement import DEFAULT_WIDTH_PERCENT

from .layout.config import PageFormat

DEFAULT_OUTPUT_BASE_NAME = "SIGNED_OCR_LETTER"
DEFAULT_RASTER_SCALE = 2.0


@dataclass(frozen=True)
class StampParameters:
    """
    Placement and page selection for one stamping run (immutable).

    Attributes:
        placement: Where and how large the overlay appears
        selection: Which pages receive it
    """

    placement: Placement = field(default_factory=Placement)
    selection: PageSelection = field(default_factory=PageSelection)


@dataclass(frozen=True)
class SignerConfig:
    """
    Configuration for signing a document (immutable).

    Percentages are 0..100 and clamped when turned into a Placement;
    range endpoints are clamped to the document when resolved.

    Attributes:
        document_path: Source document (.docx, .pdf, ...)
        overlay_path: Signature image
        overlay_media_type: Declared media type (None = infer)
        x_percent: Overlay offset from the left edge (% of page width)
        y_percent: Overlay offset from the bottom edge (% of page height)
        width_percent: Overlay width (% of page width)
        page_mode: Which pages receive the overlay
        range_from: First page of a range selection
        range_to: Last page of a range selection
        raster_scale: Multiplier on the 96 DPI capture resolution
        output_base_name: Base of the output file name
        output_dir: Output directory (None = next to the document)
        page_format: Page aspect and padding colour
        write_metadata: Also write a JSON metadata sidecar

    Example:
        >>> config = SignerConfig(
        ...     document_path=Path("letter.docx"),
        ...     overlay_path=Path("signature.png"),
        ...     page_mode="range",
        ...     range_from=2,
        ... )
    """

    # Required
    document_path: Path
    overlay_path: Path
    overlay_media_type: Optional[str] = None

    # Placement
    x_percent: float = 10.0
    y_percent: float = 10.0
    width_percent: float = DEFAULT_WIDTH_PERCENT

    # Page selection
    page_mode: PageSelectionMode = PageSelectionMode.LAST
    range_from: Optional[int] = None
    range_to: Optional[int] = None

    # Capture
    raster_scale: float = DEFAULT_RASTER_SCALE
    page_format: PageFormat = field(default_factory=PageFormat)

    # Output
    output_base_name: str = DEFAULT_OUTPUT_BASE_NAME
    output_dir: Optional[Path] = None
    write_metadata: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(self, "document_path", Path(self.document_path))
        object.__setattr__(self, "overlay_path", Path(self.overlay_path))
        if self.output_dir is not None:
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "page_mode", PageSelectionMode.parse(self.page_mode))

        for name in ("x_percent", "y_percent", "width_percent"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or math.isnan(value):
                raise ValueError(f"{name} must be a number: {value!r}")
        if not self.raster_scale > 0:
            raise ValueError(f"raster_scale must be positive: {self.raster_scale}")
        for name in ("range_from", "range_to"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, int):
                raise ValueError(f"{name} must be an integer: {value!r}")

    @property
    def placement(self) -> Placement:
        """Normalized placement built from the percentages."""
        return Placement.from_percent(self.x_percent, self.y_percent, self.width_percent)

    @property
    def selection(self) -> PageSelection:
        """Page selection request."""
        return PageSelection(self.page_mode, self.range_from, self.range_to)

    @property
    def parameters(self) -> StampParameters:
        """Placement and selection together."""
        return StampParameters(placement=self.placement, selection=self.selection)

    def with_overrides(self, **changes: Any) -> "SignerConfig":
        """Return a copy with non-None changes applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "document_path": str(self.document_path),
            "overlay_path": str(self.overlay_path),
            "overlay_media_type": self.overlay_media_type,
            "x_percent": self.x_percent,
            "y_percent": self.y_percent,
            "width_percent": self.width_percent,
            "page_mode": self.page_mode.value,
            "range_from": self.range_from,
            "range_to": self.range_to,
            "raster_scale": self.raster_scale,
            "page_format": {
                "aspect": self.page_format.aspect,
                "background": list(self.page_format.background),
            },
            "output_base_name": self.output_base_name,
            "output_dir": str(self.output_dir) if self.output_dir is not None else None,
            "write_metadata": self.write_metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignerConfig":
        """
        Deserialize from a dict (e.g. a loaded JSON config file).

        Unknown keys are rejected so typos do not pass silently.

        Raises:
            ValueError: On unknown keys, missing paths or invalid values
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        for required in ("document_path", "overlay_path"):
            if not data.get(required):
                raise ValueError(f"Config is missing {required}")

        kwargs = {k: v for k, v in data.items() if v is not None}
        page_format = kwargs.pop("page_format", None)
        if page_format is not None:
            kwargs["page_format"] = PageFormat(
                aspect=float(page_format.get("aspect", PageFormat().aspect)),
                background=tuple(page_format.get("background", PageFormat().background)),
            )
        return cls(**kwargs)
