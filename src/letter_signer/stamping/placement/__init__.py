"""
Module: stamping.placement

Purpose:
    Placement model: normalized placement -> pixel geometry.
"""

from .geometry import resolve_geometry, geometry_for

__all__ = [
    "resolve_geometry",
    "geometry_for",
]
