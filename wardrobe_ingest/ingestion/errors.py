"""Exceptions raised by the ingestion core."""

from __future__ import annotations


class IngestionError(RuntimeError):
    """Base class for ingestion failures."""


class DecodeFailed(IngestionError):
    """Raised when a selected file cannot be read or encoded."""

    def __init__(self, file_name: str, detail: str) -> None:
        self.file_name = file_name
        self.detail = detail
        super().__init__(f"Could not encode {file_name!r}: {detail}")


class CapacityError(IngestionError, ValueError):
    """Raised when a mutation would push the batch above its cap."""

    def __init__(self, requested: int, max_images: int) -> None:
        self.requested = requested
        self.max_images = max_images
        super().__init__(f"Batch of {requested} images exceeds the limit of {max_images}.")
