"""
Tests for stamping.output.assembler and stamping.output.writer

Test Coverage:
- assemble(): One output page per raster, in order
- Page media box equals raster pixel size
- Writer requests: lossless image, exact size
- Empty input rejected
"""

import io

import fitz
import pytest
from PIL import Image
from pypdf import PdfReader

from letter_signer.core.models import PageRaster
from letter_signer.stamping.output import PageWriter, ReportLabPageWriter, assemble, encode_png

COLORS = [(220, 30, 30), (30, 200, 30), (30, 30, 220)]


class RecordingWriter(PageWriter):
    """Captures add_page() calls instead of writing a document."""

    def __init__(self):
        self.requests = []
        self.finished = False

    def add_page(self, image_data, width, height):
        self.requests.append((image_data, width, height))

    def finish(self):
        self.finished = True
        return b"recorded"


@pytest.fixture
def colored_pages():
    return tuple(
        PageRaster(number=i + 1, image=Image.new("RGB", (120, 170), color=c))
        for i, c in enumerate(COLORS)
    )


class TestAssemble:
    """Tests for assemble() with the ReportLab writer."""

    def test_output_is_pdf_with_one_page_per_raster(self, colored_pages):
        # Act
        data = assemble(colored_pages)

        # Assert
        assert data.startswith(b"%PDF-")
        reader = PdfReader(io.BytesIO(data))
        assert len(reader.pages) == 3

    def test_page_size_matches_raster_pixels(self, colored_pages):
        reader = PdfReader(io.BytesIO(assemble(colored_pages)))

        for page in reader.pages:
            assert float(page.mediabox.width) == pytest.approx(120)
            assert float(page.mediabox.height) == pytest.approx(170)

    def test_page_order_is_preserved(self, colored_pages):
        """Each output page shows its raster's colour, in input order."""
        data = assemble(colored_pages)

        with fitz.open(stream=data, filetype="pdf") as doc:
            for page, expected in zip(doc, COLORS):
                pix = page.get_pixmap(alpha=False)
                actual = pix.pixel(pix.width // 2, pix.height // 2)
                assert all(abs(a - e) <= 2 for a, e in zip(actual, expected))

    def test_image_covers_whole_page(self, colored_pages):
        data = assemble(colored_pages[:1])

        with fitz.open(stream=data, filetype="pdf") as doc:
            pix = doc[0].get_pixmap(alpha=False)
            for x, y in [(1, 1), (pix.width - 2, 1), (1, pix.height - 2)]:
                assert all(abs(a - e) <= 2 for a, e in zip(pix.pixel(x, y), COLORS[0]))

    def test_when_no_pages_then_raises_value_error(self):
        with pytest.raises(ValueError):
            assemble(())


class TestAssembleWriterRequests:
    """Tests for what assemble() hands to a writer."""

    def test_one_request_per_page_in_order(self, colored_pages):
        writer = RecordingWriter()

        result = assemble(colored_pages, writer)

        assert result == b"recorded"
        assert writer.finished
        assert [(w, h) for _, w, h in writer.requests] == [(120, 170)] * 3

    def test_images_are_lossless_png(self, colored_pages):
        writer = RecordingWriter()

        assemble(colored_pages, writer)

        for (data, _, _), color in zip(writer.requests, COLORS):
            assert data.startswith(b"\x89PNG")
            with Image.open(io.BytesIO(data)) as img:
                assert img.getpixel((60, 85)) == color

    def test_mixed_page_sizes_each_sized_to_raster(self):
        pages = (
            PageRaster(1, Image.new("RGB", (100, 140), "white")),
            PageRaster(2, Image.new("RGB", (80, 50), "white")),
        )
        writer = RecordingWriter()

        assemble(pages, writer)

        assert [(w, h) for _, w, h in writer.requests] == [(100, 140), (80, 50)]


class TestReportLabPageWriter:
    """Tests for ReportLabPageWriter."""

    def test_counts_pages(self):
        writer = ReportLabPageWriter()
        png = encode_png(Image.new("RGB", (10, 20), "white"))

        writer.add_page(png, 10, 20)
        writer.add_page(png, 10, 20)

        assert writer.page_count == 2

    def test_add_after_finish_raises(self):
        writer = ReportLabPageWriter()
        png = encode_png(Image.new("RGB", (10, 20), "white"))
        writer.add_page(png, 10, 20)
        writer.finish()

        with pytest.raises(RuntimeError):
            writer.add_page(png, 10, 20)

    def test_finish_is_repeatable(self):
        writer = ReportLabPageWriter(invariant=True)
        writer.add_page(encode_png(Image.new("RGB", (10, 20), "white")), 10, 20)

        assert writer.finish() == writer.finish()

    def test_title_is_written(self):
        writer = ReportLabPageWriter(title="Signed letter")
        writer.add_page(encode_png(Image.new("RGB", (10, 20), "white")), 10, 20)

        reader = PdfReader(io.BytesIO(writer.finish()))

        assert reader.metadata.title == "Signed letter"
