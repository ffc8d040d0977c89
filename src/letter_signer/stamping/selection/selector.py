"""
Module: stamping.selection.selector

Purpose:
    Resolve a page selection mode and bounds into the concrete set of
    1-indexed page numbers that receive the overlay.

    Total function: out-of-range endpoints are clamped, never rejected,
    and a document with no pages always resolves to the empty set.

Key Functions:
    - resolve_selection(): mode + bounds + page count -> page numbers
    - resolve_page_selection(): Same, from a PageSelection request

Used By:
    - stamping.session: Generation and preview
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Optional, Tuple, Union

from letter_signer.core.models import PageSelection, PageSelectionMode

logger = logging.getLogger(__name__)

RangeBounds = Tuple[Optional[int], Optional[int]]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def resolve_selection(
    mode: Union[PageSelectionMode, str],
    bounds: Optional[RangeBounds],
    page_count: int,
) -> FrozenSet[int]:
    """
    Resolve which pages get the overlay.

    Args:
        mode: Selection mode (enum or "all" / "range" / "last")
        bounds: (from, to) endpoints, only used for RANGE; None entries
            default to the first and last page
        page_count: Number of pages in the document

    Returns:
        Frozen set of page numbers, always a subset of [1, page_count]

    Example:
        >>> sorted(resolve_selection("range", (4, 2), 5))
        [2, 3, 4]
    """
    mode = PageSelectionMode.parse(mode)
    if page_count <= 0:
        return frozenset()

    if mode is PageSelectionMode.ALL:
        return frozenset(range(1, page_count + 1))

    if mode is PageSelectionMode.RANGE:
        range_from, range_to = bounds if bounds is not None else (None, None)
        start = _clamp(range_from if range_from is not None else 1, 1, page_count)
        end = _clamp(range_to if range_to is not None else page_count, 1, page_count)
        low, high = min(start, end), max(start, end)
        logger.debug(f"Range selection {range_from}..{range_to} resolved to {low}..{high}")
        return frozenset(range(low, high + 1))

    return frozenset({page_count})


def resolve_page_selection(selection: PageSelection, page_count: int) -> FrozenSet[int]:
    """Resolve a PageSelection request against a page count."""
    return resolve_selection(
        selection.mode,
        (selection.range_from, selection.range_to),
        page_count,
    )
