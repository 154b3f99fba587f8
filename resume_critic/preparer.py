"""Document preparation: turn an uploaded file into a base64 payload."""

from __future__ import annotations

import asyncio
import base64
import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from .config import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_DIMENSION
from .errors import DocumentReadError

logger = logging.getLogger(__name__)

JPEG_MIME_TYPE = "image/jpeg"

SUPPORTED_MIME_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/bmp",
)


@dataclass
class DocumentFile:
    """A user-selected file with its declared MIME type."""

    name: str
    mime_type: str
    path: Optional[Path] = None
    content: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "DocumentFile":
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, mime_type=mime_type or guessed or "application/octet-stream", path=path)

    @classmethod
    def from_bytes(cls, name: str, mime_type: str, content: bytes) -> "DocumentFile":
        return cls(name=name, mime_type=mime_type, content=content)

    @property
    def is_image(self) -> bool:
        return is_image_mime(self.mime_type)

    def read(self) -> bytes:
        if self.content is not None:
            return self.content
        if self.path is None:
            raise DocumentReadError(f"No content available for {self.name}")
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise DocumentReadError(f"Cannot read {self.name}: {exc}") from exc


@dataclass
class PreparedDocument:
    """Transport-ready payload: raw base64 (no data-URL prefix) and its MIME type."""

    payload: str
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None


def is_image_mime(mime_type: str) -> bool:
    return (mime_type or "").lower().startswith("image/")


def compute_target_size(width: int, height: int, max_dimension: int = DEFAULT_MAX_DIMENSION) -> Tuple[int, int]:
    """Fit (width, height) inside a square bounding box, keeping the aspect ratio.

    The larger side becomes exactly ``max_dimension`` when it exceeds it;
    smaller images are returned unchanged.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width >= height:
        return max_dimension, max(1, round(height * max_dimension / width))
    return max(1, round(width * max_dimension / height)), max_dimension


class DocumentPreparer:
    """Reads documents and downscales images before upload."""

    def __init__(self, max_dimension: int = DEFAULT_MAX_DIMENSION, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        self.max_dimension = max_dimension
        self.jpeg_quality = jpeg_quality

    async def prepare(self, file: DocumentFile) -> PreparedDocument:
        """Read ``file`` and encode it for transport.

        Decoding runs in a worker thread so the event loop stays responsive.

        Raises:
            DocumentReadError: If the file cannot be read or decoded.
        """
        return await asyncio.to_thread(self.prepare_sync, file)

    def prepare_sync(self, file: DocumentFile) -> PreparedDocument:
        raw = file.read()

        if not file.is_image:
            return PreparedDocument(payload=_b64(raw), mime_type=file.mime_type)

        data, width, height = self._compress_image(raw, file.name)
        return PreparedDocument(payload=_b64(data), mime_type=JPEG_MIME_TYPE, width=width, height=height)

    def _compress_image(self, raw: bytes, name: str) -> Tuple[bytes, int, int]:
        try:
            with Image.open(io.BytesIO(raw)) as img:
                img.load()
                oriented = ImageOps.exif_transpose(img)
                try:
                    return self._encode_jpeg(oriented, name)
                finally:
                    if oriented is not img:
                        oriented.close()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise DocumentReadError(f"Cannot decode image {name}: {exc}") from exc

    def _encode_jpeg(self, img: Image.Image, name: str) -> Tuple[bytes, int, int]:
        width, height = compute_target_size(img.width, img.height, self.max_dimension)

        frame = _flatten_to_rgb(img)
        try:
            if (width, height) != frame.size:
                logger.info(f"Downscaling {name} from {frame.width}x{frame.height} to {width}x{height}")
                resized = frame.resize((width, height), Image.Resampling.LANCZOS)
                if frame is not img:
                    frame.close()
                frame = resized

            buffer = io.BytesIO()
            frame.save(buffer, format="JPEG", quality=self.jpeg_quality)
            return buffer.getvalue(), width, height
        finally:
            if frame is not img:
                frame.close()


def _flatten_to_rgb(img: Image.Image) -> Image.Image:
    """JPEG has no alpha channel; composite transparent images onto white."""
    if img.mode == "RGB":
        return img
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        rgba.close()
        return background
    return img.convert("RGB")


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
