"""
Tests for stamping.layout.compositor

Test Coverage:
- compose(): Overlay on selected pages only
- Non-mutation of the cached page sequence
- Idempotence across repeated compose calls
- draw_overlay(): Opacity, clipping, copying
"""

import numpy as np
import pytest
from PIL import Image

from letter_signer.core.errors import PreconditionError
from letter_signer.core.models import OverlayGeometry, Placement, pixels_equal
from letter_signer.stamping.layout import compose, draw_overlay
from letter_signer.stamping.placement import geometry_for

RED = (200, 0, 0)
WHITE = (255, 255, 255)


@pytest.fixture
def placement():
    """Overlay 60x20 at (20, 240) on a 200x280 page."""
    return Placement(x_pct=0.1, y_pct=20 / 280, width_pct=0.3)


class TestCompose:
    """Tests for compose()."""

    def test_when_page_selected_then_overlay_drawn_at_geometry(self, make_pages, overlay, placement):
        # Arrange
        pages = make_pages(3)

        # Act
        result = compose(pages, overlay, placement, {2})

        # Assert
        left, top, width, height = geometry_for(placement, pages[1], overlay).to_box()
        stamped = result[1].image
        assert stamped.getpixel((left + width // 2, top + height // 2)) == RED
        assert stamped.getpixel((left - 1, top)) == WHITE

    def test_when_page_not_selected_then_passes_through_unchanged(self, make_pages, overlay, placement):
        pages = make_pages(3)

        result = compose(pages, overlay, placement, {2})

        assert pixels_equal(result[0].image, pages[0].image)
        assert pixels_equal(result[2].image, pages[2].image)

    def test_returns_copies_in_same_order(self, make_pages, overlay, placement):
        pages = make_pages(3)

        result = compose(pages, overlay, placement, set())

        assert [p.number for p in result] == [1, 2, 3]
        assert all(r.image is not p.image for r, p in zip(result, pages))

    def test_original_pages_are_not_mutated(self, make_pages, overlay, placement):
        """The cached page sequence stays bit-identical."""
        pages = make_pages(3)
        before = [p.image.copy() for p in pages]

        compose(pages, overlay, placement, {1, 2, 3})

        assert all(pixels_equal(p.image, b) for p, b in zip(pages, before))

    def test_repeated_compose_does_not_double_apply(self, make_pages, make_overlay, placement):
        """Composing twice gives the same overlay pixels as composing once."""
        # Arrange: semi-transparent overlay would darken on a second application
        pages = make_pages(2)
        translucent = make_overlay(color=(0, 0, 255, 128))

        # Act
        once = compose(pages, translucent, placement, {1})
        again = compose(pages, translucent, placement, {1})

        # Assert
        box = geometry_for(placement, pages[0], translucent).to_box()
        region = (box[0], box[1], box[0] + box[2], box[1] + box[3])
        assert pixels_equal(once[0].image, again[0].image, box=region)

    def test_compose_of_composed_pages_keeps_overlay_pixels(self, make_pages, overlay, placement):
        """compose(compose(p)) overlay region equals compose(p) for an opaque overlay."""
        pages = make_pages(2)

        once = compose(pages, overlay, placement, {1, 2})
        twice = compose(once, overlay, placement, {1, 2})

        box = geometry_for(placement, pages[0], overlay).to_box()
        region = (box[0], box[1], box[0] + box[2], box[1] + box[3])
        for a, b in zip(once, twice):
            assert pixels_equal(a.image, b.image, box=region)

    def test_cached_pages_reusable_with_different_placements(self, make_pages, overlay):
        """Preview then generation with another placement leaves no trace of the first."""
        pages = make_pages(1)

        compose(pages, overlay, Placement(0.0, 0.0, 0.3), {1})
        result = compose(pages, overlay, Placement(0.6, 0.8, 0.3), {1})

        # Bottom-left corner (first placement) is untouched
        assert result[0].image.getpixel((5, 275)) == WHITE

    def test_when_overlay_missing_then_raises_precondition_error(self, make_pages, placement):
        with pytest.raises(PreconditionError):
            compose(make_pages(1), None, placement, {1})

    def test_selection_outside_document_is_ignored(self, make_pages, overlay, placement):
        pages = make_pages(2)
        result = compose(pages, overlay, placement, {7})
        assert all(pixels_equal(r.image, p.image) for r, p in zip(result, pages))


class TestDrawOverlay:
    """Tests for draw_overlay()."""

    def test_does_not_modify_input_image(self, overlay):
        image = Image.new("RGB", (100, 100), "white")
        draw_overlay(image, overlay, OverlayGeometry(10, 10, 30, 10))
        assert image.getpixel((20, 15)) == WHITE

    def test_opacity_blends_with_page(self, overlay):
        image = Image.new("RGB", (100, 100), "white")

        result = draw_overlay(image, overlay, OverlayGeometry(10, 10, 30, 10), opacity=0.5)

        r, g, b = result.getpixel((20, 15))
        assert 200 < r < 255
        assert 100 < g < 160
        assert g == b

    def test_zero_opacity_draws_nothing(self, overlay):
        image = Image.new("RGB", (100, 100), "white")
        result = draw_overlay(image, overlay, OverlayGeometry(10, 10, 30, 10), opacity=0.0)
        assert pixels_equal(result, image)

    def test_transparent_pixels_keep_page_content(self, make_overlay):
        clear = make_overlay(color=(0, 0, 0, 0))
        image = Image.new("RGB", (50, 50), (10, 20, 30))
        result = draw_overlay(image, clear, OverlayGeometry(0, 0, 30, 10))
        assert pixels_equal(result, image)

    def test_overlay_partly_outside_page_is_clipped(self, overlay):
        image = Image.new("RGB", (50, 50), "white")

        result = draw_overlay(image, overlay, OverlayGeometry(40, -5, 30, 10))

        assert result.size == (50, 50)
        assert result.getpixel((45, 2)) == RED
        arr = np.asarray(result)
        assert (arr[10:] == 255).all()
