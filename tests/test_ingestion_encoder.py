"""Tests for converting raw files into data URLs."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest
from PIL import Image

from conftest import make_png
from wardrobe_ingest.ingestion import DecodeFailed, ImageEncoder, RawFile


@pytest.mark.asyncio
async def test_encodes_png_bytes_as_data_url(png_bytes: bytes) -> None:
    encoder = ImageEncoder()

    result = await encoder.encode(RawFile.from_bytes("shirt.png", png_bytes))

    prefix, payload = result.split(",", 1)
    assert prefix == "data:image/png;base64"
    assert base64.b64decode(payload) == png_bytes


@pytest.mark.asyncio
async def test_reads_path_backed_file(tmp_path: Path, png_bytes: bytes) -> None:
    path = tmp_path / "jacket.png"
    path.write_bytes(png_bytes)

    result = await ImageEncoder().encode(RawFile.from_path(path))

    assert result.startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_detected_type_replaces_generic_media_type(png_bytes: bytes) -> None:
    raw = RawFile(name="upload", content=png_bytes, media_type="application/octet-stream")

    result = await ImageEncoder().encode(raw)

    assert result.startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_non_image_bytes_fail() -> None:
    with pytest.raises(DecodeFailed) as excinfo:
        await ImageEncoder().encode(RawFile.from_bytes("notes.jpg", b"definitely not a picture"))

    assert excinfo.value.file_name == "notes.jpg"


@pytest.mark.asyncio
async def test_empty_file_fails() -> None:
    with pytest.raises(DecodeFailed, match="empty"):
        await ImageEncoder().encode(RawFile.from_bytes("empty.png", b""))


@pytest.mark.asyncio
async def test_missing_path_fails(tmp_path: Path) -> None:
    with pytest.raises(DecodeFailed, match="unable to read"):
        await ImageEncoder().encode(RawFile.from_path(tmp_path / "gone.png"))


@pytest.mark.asyncio
async def test_verification_can_be_disabled() -> None:
    encoder = ImageEncoder(verify_images=False)

    result = await encoder.encode(RawFile(name="blob", content=b"\x00\x01"))

    assert result == "data:application/octet-stream;base64,AAE="


def test_raw_file_requires_content_or_path() -> None:
    with pytest.raises(ValueError):
        RawFile(name="nothing")


@pytest.mark.asyncio
async def test_oversized_image_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    with pytest.raises(DecodeFailed, match="image too large"):
        await ImageEncoder().encode(RawFile.from_bytes("huge.png", make_png((8, 8))))
