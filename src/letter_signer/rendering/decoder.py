"""
Module: rendering.decoder

Purpose:
    Decode uploaded overlay image bytes into an OverlayAsset.
    Failures are reported as DecodeError rather than leaving the
    overlay silently unset.

Key Functions:
    - decode_overlay(): Bytes + media type -> OverlayAsset

Dependencies:
    - PIL: Image decoding

Used By:
    - stamping.session: SignerSession.load_overlay()
"""

from __future__ import annotations

import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from letter_signer.core.errors import DecodeError
from letter_signer.core.models import OverlayAsset

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/png"


def decode_overlay(data: bytes, media_type: Optional[str] = None) -> OverlayAsset:
    """
    Decode overlay image bytes.

    Args:
        data: Encoded image bytes (PNG, JPEG, ...)
        media_type: Declared media type; inferred from the decoded
            format when missing, falling back to image/png

    Returns:
        OverlayAsset holding an RGBA image and the original bytes

    Raises:
        DecodeError: If data is empty, not an image, too large to decode
            safely, or has zero size

    Example:
        >>> asset = decode_overlay(Path("signature.png").read_bytes(), "image/png")
        >>> asset.aspect
        3.0
    """
    if not data:
        raise DecodeError("Overlay image is empty.")
    if media_type and not media_type.lower().startswith("image/"):
        raise DecodeError(f"Unsupported overlay media type: {media_type}")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            fmt = img.format
            decoded = img.convert("RGBA")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise DecodeError(f"Could not decode overlay image: {e}") from e

    if decoded.width == 0 or decoded.height == 0:
        raise DecodeError(f"Overlay image has no pixels: {decoded.width}x{decoded.height}")

    if not media_type:
        media_type = Image.MIME.get(fmt or "", DEFAULT_MEDIA_TYPE)

    logger.info(f"Decoded overlay {decoded.width}x{decoded.height} ({media_type})")
    return OverlayAsset(image=decoded, data=bytes(data), media_type=media_type)
