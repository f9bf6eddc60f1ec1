"""Multi-image uploader used when attaching several photos to a wardrobe item."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from wardrobe_ingest.config.settings import get_settings
from wardrobe_ingest.ingestion.collection import ImageCollection
from wardrobe_ingest.ingestion.controller import BatchController, Encoder
from wardrobe_ingest.ingestion.encoder import ImageEncoder
from wardrobe_ingest.ingestion.files import Batch, IngestReport, RawFile, SelectionSource
from wardrobe_ingest.ingestion.sink import BatchSink, RejectionSink, SelectionHandle

logger = logging.getLogger(__name__)


class BulkImageIngester:
    """Accepts selections of many files into a capped, ordered batch.

    Accept calls run one at a time in the order they were made: each call
    computes its capacity against the batch left by the previous one, so two
    quick selections can never overwrite each other's additions.
    """

    def __init__(
        self,
        sink: BatchSink,
        *,
        on_rejected: Optional[RejectionSink] = None,
        selection: Optional[SelectionHandle] = None,
        max_images: Optional[int] = None,
        encode_timeout: Optional[float] = None,
        encoder: Optional[Encoder] = None,
    ) -> None:
        settings = get_settings()
        max_images = settings.max_images if max_images is None else max_images
        self._controller = BatchController(
            encoder or ImageEncoder(verify_images=settings.verify_images),
            max_images=max_images,
            encode_timeout=settings.encode_timeout if encode_timeout is None else encode_timeout,
        )
        self._collection = ImageCollection(sink, max_images=max_images, selection=selection)
        self._on_rejected = on_rejected
        self._lock = asyncio.Lock()
        self._pending_calls = 0

    @property
    def images(self) -> Batch:
        return self._collection.items

    @property
    def max_images(self) -> int:
        return self._collection.max_images

    @property
    def remaining_capacity(self) -> int:
        return self._controller.capacity_for(len(self._collection))

    @property
    def can_add_more(self) -> bool:
        return self.remaining_capacity > 0

    @property
    def is_loading(self) -> bool:
        """True while any accept call is queued or encoding."""

        return self._pending_calls > 0

    @property
    def in_flight(self) -> int:
        return self._controller.in_flight

    async def add_files(
        self,
        files: Sequence[RawFile],
        *,
        source: SelectionSource = SelectionSource.MULTI_PICKER,
    ) -> IngestReport:
        """Encode the selection and append whatever fits, publishing once."""

        self._pending_calls += 1
        try:
            async with self._lock:
                report = await self._controller.accept(files, len(self._collection), source=source)
                if report.accepted:
                    self._collection.append_batch(report.accepted)
        finally:
            self._pending_calls -= 1

        logger.debug(
            "Accept call from %s: %d accepted, %d rejected",
            source.value,
            len(report.accepted),
            len(report.rejected),
        )
        if report.has_rejections and self._on_rejected is not None:
            self._on_rejected(report)
        return report

    def remove_at(self, index: int) -> None:
        self._collection.remove_at(index)

    def clear(self) -> None:
        self._collection.clear()
