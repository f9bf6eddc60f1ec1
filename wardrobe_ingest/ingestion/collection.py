"""Ordered, capped image collection that publishes every change."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from wardrobe_ingest.ingestion.errors import CapacityError
from wardrobe_ingest.ingestion.files import Batch, EncodedImage
from wardrobe_ingest.ingestion.sink import BatchSink, SelectionHandle
from wardrobe_ingest.metrics.prometheus_exporter import ingest_publish_total

logger = logging.getLogger(__name__)


class ImageCollection:
    """Sole owner of the batch; each mutation publishes exactly once."""

    def __init__(
        self,
        sink: BatchSink,
        *,
        max_images: int,
        selection: Optional[SelectionHandle] = None,
        initial: Iterable[EncodedImage] = (),
    ) -> None:
        if max_images <= 0:
            raise ValueError(f"max_images must be positive, got {max_images}")
        items = list(initial)
        if len(items) > max_images:
            raise CapacityError(len(items), max_images)
        self._sink = sink
        self._max_images = max_images
        self._selection = selection
        self._items: list[EncodedImage] = items

    @property
    def items(self) -> Batch:
        return tuple(self._items)

    @property
    def max_images(self) -> int:
        return self._max_images

    def __len__(self) -> int:
        return len(self._items)

    def append_batch(self, new_items: Iterable[EncodedImage]) -> None:
        """Append images after the existing ones and publish."""

        combined = [*self._items, *new_items]
        if len(combined) > self._max_images:
            raise CapacityError(len(combined), self._max_images)
        self._items = combined
        self._publish("append")

    def remove_at(self, index: int) -> None:
        """Remove the image at ``index`` and publish.

        Negative indexes are rejected rather than counted from the end.
        """

        if not 0 <= index < len(self._items):
            raise IndexError(f"index {index} out of range for {len(self._items)} images")
        del self._items[index]
        self._publish("remove")

    def clear(self) -> None:
        """Drop every image, publish the empty batch and reset the picker."""

        self._items = []
        self._publish("clear")
        if self._selection is not None:
            self._selection.reset()

    def replace(self, items: Iterable[EncodedImage]) -> None:
        replacement = list(items)
        if len(replacement) > self._max_images:
            raise CapacityError(len(replacement), self._max_images)
        self._items = replacement
        self._publish("replace")

    def _publish(self, operation: str) -> None:
        snapshot = self.items
        logger.info("Publishing %d images after %s", len(snapshot), operation)
        ingest_publish_total.labels(operation=operation).inc()
        self._sink(snapshot)
