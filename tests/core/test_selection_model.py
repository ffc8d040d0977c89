"""
Unit Tests for page selection models.
"""

import pytest

from letter_signer.core.models import PageSelection, PageSelectionMode


@pytest.mark.parametrize("value, expected", [
    ("all", PageSelectionMode.ALL),
    ("Range", PageSelectionMode.RANGE),
    (" LAST ", PageSelectionMode.LAST),
    (PageSelectionMode.RANGE, PageSelectionMode.RANGE),
])
def test_parse_accepts_names_and_members(value, expected):
    assert PageSelectionMode.parse(value) is expected


def test_parse_when_unknown_then_raises_error():
    with pytest.raises(ValueError, match="Unknown page mode"):
        PageSelectionMode.parse("odd")


def test_page_selection_parses_string_mode():
    """PageSelection accepts mode names."""
    selection = PageSelection("range", 2, 4)
    assert selection.mode is PageSelectionMode.RANGE
    assert (selection.range_from, selection.range_to) == (2, 4)


def test_page_selection_default_is_last_page():
    assert PageSelection().mode is PageSelectionMode.LAST
