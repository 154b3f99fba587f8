"""Tests for document preparation and image downscaling."""

import base64
import io

import pytest
from PIL import Image

from resume_critic.errors import DocumentReadError
from resume_critic.preparer import (
    DocumentFile,
    DocumentPreparer,
    compute_target_size,
)


def _decode(payload: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(payload)))


class TestComputeTargetSize:
    @pytest.mark.parametrize(
        "size",
        [(3000, 2000), (2000, 3000), (1501, 10), (10, 1501), (4000, 4000), (1600, 1599)],
    )
    def test_large_images_fit_bounding_box(self, size):
        width, height = size
        new_w, new_h = compute_target_size(width, height, 1500)

        assert max(new_w, new_h) == 1500
        assert new_w / new_h == pytest.approx(width / height, rel=0.01, abs=0.2)

    @pytest.mark.parametrize("size", [(1500, 1500), (800, 600), (1, 1), (1500, 20)])
    def test_images_within_bounds_are_unchanged(self, size):
        assert compute_target_size(*size, 1500) == size

    def test_extreme_aspect_ratio_keeps_one_pixel(self):
        assert compute_target_size(30000, 2, 1500) == (1500, 1)


class TestDocumentFile:
    def test_from_path_guesses_mime_type(self, tmp_path):
        path = tmp_path / "resume.pdf"
        path.write_bytes(b"%PDF-1.4")
        doc = DocumentFile.from_path(path)
        assert doc.mime_type == "application/pdf"
        assert doc.name == "resume.pdf"
        assert not doc.is_image

    def test_read_missing_file_raises_document_read_error(self, tmp_path):
        doc = DocumentFile.from_path(tmp_path / "gone.png")
        with pytest.raises(DocumentReadError):
            doc.read()


class TestPrepare:
    @pytest.mark.asyncio
    async def test_pdf_is_passed_through_verbatim(self):
        raw = b"%PDF-1.4\n%binary\x00\xff content"
        prepared = await DocumentPreparer().prepare(DocumentFile.from_bytes("cv.pdf", "application/pdf", raw))

        assert prepared.mime_type == "application/pdf"
        assert base64.b64decode(prepared.payload) == raw
        assert not prepared.payload.startswith("data:")

    @pytest.mark.asyncio
    async def test_large_png_is_downscaled_to_jpeg(self, make_image):
        doc = DocumentFile.from_bytes("scan.png", "image/png", make_image(3000, 1200))
        prepared = await DocumentPreparer().prepare(doc)

        assert prepared.mime_type == "image/jpeg"
        assert ";base64," not in prepared.payload
        with _decode(prepared.payload) as img:
            assert img.format == "JPEG"
            assert img.size == (1500, 600)
        assert (prepared.width, prepared.height) == (1500, 600)

    @pytest.mark.asyncio
    async def test_tall_image_is_bounded_by_height(self, make_image):
        doc = DocumentFile.from_bytes("tall.jpg", "image/jpeg", make_image(1000, 2500, fmt="JPEG"))
        prepared = await DocumentPreparer().prepare(doc)

        with _decode(prepared.payload) as img:
            assert img.size == (600, 1500)

    @pytest.mark.asyncio
    async def test_small_image_keeps_dimensions(self, make_image):
        doc = DocumentFile.from_bytes("small.png", "image/png", make_image(640, 480))
        prepared = await DocumentPreparer().prepare(doc)

        assert prepared.mime_type == "image/jpeg"
        with _decode(prepared.payload) as img:
            assert img.size == (640, 480)

    @pytest.mark.asyncio
    async def test_transparent_png_is_flattened(self, make_image):
        doc = DocumentFile.from_bytes("logo.png", "image/png", make_image(200, 100, mode="RGBA"))
        prepared = await DocumentPreparer().prepare(doc)

        with _decode(prepared.payload) as img:
            assert img.mode == "RGB"

    @pytest.mark.asyncio
    async def test_custom_bounding_box(self, make_image):
        doc = DocumentFile.from_bytes("scan.png", "image/png", make_image(400, 200))
        prepared = await DocumentPreparer(max_dimension=100).prepare(doc)

        with _decode(prepared.payload) as img:
            assert img.size == (100, 50)

    @pytest.mark.asyncio
    async def test_corrupt_image_raises_document_read_error(self):
        doc = DocumentFile.from_bytes("broken.png", "image/png", b"not really a png")
        with pytest.raises(DocumentReadError, match="broken.png"):
            await DocumentPreparer().prepare(doc)

    @pytest.mark.asyncio
    async def test_unreadable_path_raises_document_read_error(self, tmp_path):
        doc = DocumentFile(name="cv.pdf", mime_type="application/pdf", path=tmp_path / "missing.pdf")
        with pytest.raises(DocumentReadError):
            await DocumentPreparer().prepare(doc)
