"""
Module: core.errors

Purpose:
    Exception hierarchy for the signing pipeline. Every error raised
    on purpose by letter_signer derives from SignerError so callers
    can report failures without catching unrelated exceptions.

Key Classes:
    - SignerError: Base class
    - PreconditionError: Required input (document or overlay) not loaded
    - DecodeError: Overlay image bytes could not be decoded
    - RenderError: Source document could not be rasterized
    - StaleSessionError: Session operation overtaken by reset()

Used By:
    - stamping.placement.geometry, stamping.layout.compositor
    - stamping.session, stamping.controller
    - rendering.document, rendering.decoder
"""


class SignerError(Exception):
    """Base class for all letter_signer errors."""
    pass


class PreconditionError(SignerError):
    """A required input has not been loaded yet."""
    pass


class DecodeError(SignerError):
    """Overlay image could not be decoded."""
    pass


class RenderError(SignerError):
    """Source document could not be rendered to a raster."""
    pass


class StaleSessionError(SignerError):
    """
    A session operation finished after the session moved on.

    Raised when reset() happened while the operation was suspended;
    its result is discarded instead of being stored.
    """
    pass
