"""
Tests for stamping.selection.selector

Test Coverage:
- ALL / RANGE / LAST resolution
- Range endpoint clamping and order normalization
- Empty documents
"""

import pytest

from letter_signer.core.models import PageSelection, PageSelectionMode
from letter_signer.stamping.selection import resolve_page_selection, resolve_selection


class TestResolveSelection:
    """Tests for resolve_selection()."""

    def test_all_selects_every_page(self):
        assert resolve_selection(PageSelectionMode.ALL, None, 5) == {1, 2, 3, 4, 5}

    def test_last_selects_final_page(self):
        assert resolve_selection(PageSelectionMode.LAST, None, 5) == {5}

    def test_range_when_reversed_then_normalizes_order(self):
        assert resolve_selection(PageSelectionMode.RANGE, (4, 2), 5) == {2, 3, 4}

    def test_range_when_out_of_bounds_then_clamps(self):
        """Endpoints are clamped to [1, page_count], never rejected."""
        assert resolve_selection(PageSelectionMode.RANGE, (-3, 99), 4) == {1, 2, 3, 4}

    def test_range_when_both_beyond_end_then_selects_last_page(self):
        assert resolve_selection(PageSelectionMode.RANGE, (10, 12), 3) == {3}

    def test_range_when_endpoints_missing_then_defaults_to_whole_document(self):
        assert resolve_selection(PageSelectionMode.RANGE, (None, None), 3) == {1, 2, 3}
        assert resolve_selection(PageSelectionMode.RANGE, None, 3) == {1, 2, 3}

    def test_range_when_only_from_given_then_runs_to_end(self):
        assert resolve_selection(PageSelectionMode.RANGE, (2, None), 4) == {2, 3, 4}

    @pytest.mark.parametrize("mode", list(PageSelectionMode))
    def test_when_no_pages_then_empty_for_every_mode(self, mode):
        assert resolve_selection(mode, (1, 3), 0) == frozenset()

    def test_accepts_mode_names(self):
        assert resolve_selection("all", None, 2) == {1, 2}

    def test_result_is_frozenset(self):
        assert isinstance(resolve_selection("last", None, 2), frozenset)


def test_resolve_page_selection_uses_request_endpoints():
    selection = PageSelection(PageSelectionMode.RANGE, 3, 1)
    assert resolve_page_selection(selection, 5) == {1, 2, 3}
