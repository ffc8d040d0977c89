"""
Module: stamping.selection

Purpose:
    Page selector: selection mode + bounds -> page numbers.
"""

from .selector import resolve_selection, resolve_page_selection

__all__ = [
    "resolve_selection",
    "resolve_page_selection",
]
