"""Turns one selected file into an inline data URL."""

from __future__ import annotations

import asyncio
import base64
import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from wardrobe_ingest.ingestion.errors import DecodeFailed
from wardrobe_ingest.ingestion.files import DEFAULT_MEDIA_TYPE, EncodedImage, RawFile

logger = logging.getLogger(__name__)


class ImageEncoder:
    """Reads raw file bytes off the event loop and encodes them as a data URL."""

    def __init__(self, *, verify_images: bool = True) -> None:
        self._verify_images = verify_images

    async def encode(self, raw: RawFile) -> EncodedImage:
        """Return ``data:<media-type>;base64,<payload>`` for the given file.

        Raises ``DecodeFailed`` when the file cannot be read, is empty, or is
        not an image Pillow recognises (when verification is enabled).
        """

        data = await self._read(raw)
        if not data:
            raise DecodeFailed(raw.name, "file is empty")

        media_type = raw.media_type
        if self._verify_images:
            media_type = await asyncio.to_thread(self._verify, raw.name, data, media_type)

        return self.to_data_url(data, media_type or DEFAULT_MEDIA_TYPE)

    @staticmethod
    def to_data_url(data: bytes, media_type: str) -> EncodedImage:
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{media_type};base64,{encoded}"

    async def _read(self, raw: RawFile) -> bytes:
        if raw.content is not None:
            return raw.content
        try:
            return await asyncio.to_thread(raw.path.read_bytes)
        except OSError as exc:
            raise DecodeFailed(raw.name, f"unable to read {raw.path}: {exc}") from exc

    @staticmethod
    def _verify(name: str, data: bytes, media_type: str | None) -> str | None:
        try:
            with Image.open(BytesIO(data)) as img:
                detected = Image.MIME.get(img.format or "")
                img.verify()
        except UnidentifiedImageError as exc:
            raise DecodeFailed(name, "not a supported image format") from exc
        except Image.DecompressionBombError as exc:
            raise DecodeFailed(name, "image too large") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            raise DecodeFailed(name, f"corrupt image data: {exc}") from exc

        if detected and (not media_type or not media_type.startswith("image/")):
            logger.debug("Using detected media type %s for %s", detected, name)
            return detected
        return media_type or detected
