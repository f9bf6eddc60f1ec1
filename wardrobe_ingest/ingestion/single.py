"""Single-image uploader: one photo per wardrobe item, replaced on reselect."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from wardrobe_ingest.config.settings import get_settings
from wardrobe_ingest.ingestion.collection import ImageCollection
from wardrobe_ingest.ingestion.controller import BatchController, Encoder
from wardrobe_ingest.ingestion.encoder import ImageEncoder
from wardrobe_ingest.ingestion.files import EncodedImage, IngestReport, RawFile, SelectionSource
from wardrobe_ingest.ingestion.sink import BatchSink, RejectionSink, SelectionHandle

logger = logging.getLogger(__name__)


class SingleImageIngester:
    """Same pipeline as the bulk uploader with a cap of one.

    A new selection replaces the current image instead of being dropped for
    lack of room. Only the first selected file is used.
    """

    def __init__(
        self,
        sink: BatchSink,
        *,
        on_rejected: Optional[RejectionSink] = None,
        selection: Optional[SelectionHandle] = None,
        initial: Optional[EncodedImage] = None,
        encode_timeout: Optional[float] = None,
        encoder: Optional[Encoder] = None,
    ) -> None:
        settings = get_settings()
        self._controller = BatchController(
            encoder or ImageEncoder(verify_images=settings.verify_images),
            max_images=1,
            encode_timeout=settings.encode_timeout if encode_timeout is None else encode_timeout,
        )
        self._collection = ImageCollection(
            sink,
            max_images=1,
            selection=selection,
            initial=[initial] if initial else [],
        )
        self._on_rejected = on_rejected
        self._lock = asyncio.Lock()
        self._pending_calls = 0

    @property
    def image(self) -> Optional[EncodedImage]:
        items = self._collection.items
        return items[0] if items else None

    @property
    def is_loading(self) -> bool:
        return self._pending_calls > 0

    async def select(
        self,
        files: Sequence[RawFile],
        *,
        source: SelectionSource = SelectionSource.PICKER,
    ) -> IngestReport:
        """Encode the first selected file and make it the current image."""

        self._pending_calls += 1
        try:
            async with self._lock:
                # capacity is measured against an empty slot since the result replaces
                report = await self._controller.accept(files, 0, source=source)
                if report.accepted:
                    self._collection.replace(report.accepted)
        finally:
            self._pending_calls -= 1

        if report.has_rejections and self._on_rejected is not None:
            self._on_rejected(report)
        return report

    def set_url(self, url: str) -> None:
        """Use an image URL typed by the user as the current image."""

        url = url.strip()
        if not url:
            return
        logger.debug("Using image URL provided by the user")
        self._collection.replace([url])

    def remove(self) -> None:
        self._collection.clear()
