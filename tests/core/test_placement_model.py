"""
Unit Tests for Placement and OverlayGeometry models.
"""

import pytest

from letter_signer.core.models import MIN_WIDTH_PCT, OverlayGeometry, Placement


class TestPlacement:
    """Tests for Placement clamping."""

    def test_init_when_out_of_range_then_clamps(self):
        """Fractions are clamped, never rejected."""
        p = Placement(x_pct=1.5, y_pct=-0.2, width_pct=2.0)
        assert p.x_pct == 1.0
        assert p.y_pct == 0.0
        assert p.width_pct == 1.0

    def test_init_when_width_zero_then_floors_to_minimum(self):
        """The overlay never shrinks to nothing."""
        assert Placement(width_pct=0.0).width_pct == MIN_WIDTH_PCT

    def test_from_percent_converts_to_fractions(self):
        p = Placement.from_percent(10, 5, 20)
        assert p.x_pct == pytest.approx(0.1)
        assert p.y_pct == pytest.approx(0.05)
        assert p.width_pct == pytest.approx(0.2)

    def test_from_percent_when_missing_then_uses_defaults(self):
        """Missing values: 0% offsets, 20% width."""
        p = Placement.from_percent()
        assert (p.x_pct, p.y_pct) == (0.0, 0.0)
        assert p.width_pct == pytest.approx(0.2)

    def test_from_percent_clamps_percentages(self):
        p = Placement.from_percent(150, -10, 0)
        assert p.x_pct == 1.0
        assert p.y_pct == 0.0
        assert p.width_pct == pytest.approx(0.01)

    def test_to_percent_round_trips(self):
        x, y, w = Placement.from_percent(12.5, 7, 30).to_percent()
        assert (x, y, w) == pytest.approx((12.5, 7, 30))


class TestOverlayGeometry:
    """Tests for OverlayGeometry helpers."""

    def test_to_box_rounds_coordinates(self):
        g = OverlayGeometry(x=158.8, y=2025.93, width=317.6, height=105.87)
        assert g.to_box() == (159, 2026, 318, 106)

    def test_to_box_keeps_at_least_one_pixel(self):
        g = OverlayGeometry(x=0, y=0, width=0.2, height=0.1)
        assert g.to_box()[2:] == (1, 1)

    def test_edges(self):
        g = OverlayGeometry(x=10, y=20, width=30, height=5)
        assert g.right == 40
        assert g.bottom == 25
