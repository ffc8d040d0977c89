"""
Module: core.models.selection

Purpose:
    Page selection request: which pages receive the overlay.

Key Classes:
    - PageSelectionMode: ALL / RANGE / LAST
    - PageSelection: Mode plus optional range endpoints

Used By:
    - stamping.selection.selector: resolve_selection()
    - stamping.config: SignerConfig.page_mode
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class PageSelectionMode(Enum):
    """
    Which pages the overlay is applied to.

    Attributes:
        ALL: Every page
        RANGE: Pages between two endpoints (inclusive, either order)
        LAST: Only the final page

    Example:
        >>> PageSelectionMode.parse("Range")
        <PageSelectionMode.RANGE: 'range'>
    """

    ALL = "all"
    RANGE = "range"
    LAST = "last"

    @classmethod
    def parse(cls, value: Union[str, "PageSelectionMode"]) -> "PageSelectionMode":
        """Parse a mode name (case-insensitive) or pass a mode through."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown page mode {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class PageSelection:
    """
    Page selection request (immutable).

    Endpoints only matter for RANGE. None means "first page" for
    range_from and "last page" for range_to.

    Attributes:
        mode: Selection mode
        range_from: First endpoint (1-indexed), unclamped
        range_to: Second endpoint (1-indexed), unclamped
    """

    mode: PageSelectionMode = PageSelectionMode.LAST
    range_from: Optional[int] = None
    range_to: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", PageSelectionMode.parse(self.mode))
