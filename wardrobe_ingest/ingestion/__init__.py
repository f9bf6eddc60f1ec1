"""Image ingestion pipeline for wardrobe item uploads."""

from .bulk import BulkImageIngester
from .collection import ImageCollection
from .controller import BatchController
from .encoder import ImageEncoder
from .errors import CapacityError, DecodeFailed, IngestionError
from .files import (
    Batch,
    EncodedImage,
    IngestReport,
    RawFile,
    Rejection,
    RejectionReason,
    SelectionSource,
)
from .single import SingleImageIngester
from .sink import BatchSink, RejectionSink, SelectionHandle

__all__ = [
    "Batch",
    "BatchController",
    "BatchSink",
    "BulkImageIngester",
    "CapacityError",
    "DecodeFailed",
    "EncodedImage",
    "ImageCollection",
    "ImageEncoder",
    "IngestReport",
    "IngestionError",
    "RawFile",
    "Rejection",
    "RejectionReason",
    "RejectionSink",
    "SelectionHandle",
    "SelectionSource",
    "SingleImageIngester",
]
