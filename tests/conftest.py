import io
import sys
from pathlib import Path

import fitz
import numpy as np
import pytest
from PIL import Image

# Add src to sys.path so we can import letter_signer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from letter_signer.core.models import DocumentRaster, OverlayAsset, PageRaster


def gradient_image(width: int, height: int) -> Image.Image:
    """RGB image whose every row has a distinct colour (row index encoded in R/G)."""
    rows = np.arange(height, dtype=np.uint32)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = (rows % 256)[:, None]
    arr[:, :, 1] = ((rows // 256) % 256)[:, None]
    arr[:, :, 2] = 7
    return Image.fromarray(arr, "RGB")


def png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


# Common test fixtures
@pytest.fixture
def make_raster():
    """Factory for document rasters with row-unique content."""
    def _create(width: int = 100, height: int = 300) -> DocumentRaster:
        return DocumentRaster(gradient_image(width, height))
    return _create


@pytest.fixture
def make_pages():
    """Factory for plain white page sequences."""
    def _create(count: int = 3, size=(200, 280), color="white"):
        return tuple(
            PageRaster(number=i + 1, image=Image.new("RGB", size, color=color))
            for i in range(count)
        )
    return _create


@pytest.fixture
def make_overlay():
    """Factory for opaque overlay assets."""
    def _create(width: int = 30, height: int = 10, color=(200, 0, 0, 255)) -> OverlayAsset:
        img = Image.new("RGBA", (width, height), color=color)
        return OverlayAsset(image=img, data=png_bytes(img), media_type="image/png")
    return _create


@pytest.fixture
def overlay(make_overlay):
    """Opaque red 30x10 overlay (aspect 3.0)."""
    return make_overlay()


@pytest.fixture
def signature_png(tmp_path: Path) -> Path:
    """Write a 60x20 signature PNG with a transparent background."""
    img = Image.new("RGBA", (60, 20), color=(0, 0, 0, 0))
    for x in range(5, 55):
        img.putpixel((x, 10), (0, 0, 160, 255))
    path = tmp_path / "signature.png"
    img.save(path)
    return path


@pytest.fixture
def make_pdf():
    """Factory for in-memory PDFs with A4 pages."""
    def _create(page_count: int = 2) -> bytes:
        doc = fitz.open()
        for i in range(page_count):
            page = doc.new_page(width=595, height=842)  # A4 size
            page.insert_text((72, 72), f"Page {i + 1} of the letter", fontsize=12)
        data = doc.tobytes()
        doc.close()
        return data
    return _create
