"""
Module: core

Purpose:
    Core data models and the error taxonomy shared by every stage of
    the signing pipeline.
"""

from .errors import (
    SignerError,
    PreconditionError,
    DecodeError,
    RenderError,
    StaleSessionError,
)

__all__ = [
    "SignerError",
    "PreconditionError",
    "DecodeError",
    "RenderError",
    "StaleSessionError",
]
