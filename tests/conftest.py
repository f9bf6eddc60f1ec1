"""Shared fixtures for ingestion tests."""

from __future__ import annotations

import asyncio
from io import BytesIO
from pathlib import Path
from typing import Iterator

import pytest
from PIL import Image

from wardrobe_ingest.config.settings import get_settings
from wardrobe_ingest.ingestion import DecodeFailed, RawFile


class GatedEncoder:
    """Encoder whose per-file completion is released explicitly by the test."""

    def __init__(self) -> None:
        self.started: list[str] = []
        self.finished: list[str] = []
        self.failing: set[str] = set()
        self.hanging: set[str] = set()
        self.exploding: set[str] = set()
        self._gates: dict[str, asyncio.Event] = {}

    def gate(self, name: str) -> asyncio.Event:
        return self._gates.setdefault(name, asyncio.Event())

    def release(self, *names: str) -> None:
        for name in names:
            self.gate(name).set()

    async def encode(self, raw: RawFile) -> str:
        self.started.append(raw.name)
        if raw.name in self.hanging:
            await asyncio.Event().wait()
        await self.gate(raw.name).wait()
        self.finished.append(raw.name)
        if raw.name in self.exploding:
            raise ValueError(f"encoder crashed on {raw.name}")
        if raw.name in self.failing:
            raise DecodeFailed(raw.name, "broken file")
        return f"enc:{raw.name}"


async def settle(rounds: int = 20) -> None:
    """Give pending tasks a chance to run."""

    for _ in range(rounds):
        await asyncio.sleep(0)


def make_png(size: tuple[int, int] = (4, 4)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def raw_files(*names: str) -> list[RawFile]:
    return [RawFile.from_bytes(name, name.encode(), "image/jpeg") for name in names]


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for key in ("INGEST_MAX_IMAGES", "INGEST_ENCODE_TIMEOUT", "INGEST_VERIFY_IMAGES", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def encoder() -> GatedEncoder:
    return GatedEncoder()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()
