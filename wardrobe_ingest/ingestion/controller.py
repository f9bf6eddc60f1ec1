"""Batch controller: clips a selection to capacity and encodes it concurrently."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Sequence

from wardrobe_ingest.ingestion.errors import DecodeFailed
from wardrobe_ingest.ingestion.files import (
    EncodedImage,
    IngestReport,
    RawFile,
    Rejection,
    RejectionReason,
    SelectionSource,
)
from wardrobe_ingest.ingestion.slots import SlotTable
from wardrobe_ingest.metrics.prometheus_exporter import ingest_files_total, ingest_in_flight

logger = logging.getLogger(__name__)


class Encoder(Protocol):
    async def encode(self, raw: RawFile) -> EncodedImage: ...


class BatchController:
    """Starts one encode per accepted file and joins them for a single settlement."""

    def __init__(self, encoder: Encoder, *, max_images: int, encode_timeout: float) -> None:
        if max_images <= 0:
            raise ValueError(f"max_images must be positive, got {max_images}")
        if encode_timeout <= 0:
            raise ValueError(f"encode_timeout must be positive, got {encode_timeout}")
        self._encoder = encoder
        self._max_images = max_images
        self._encode_timeout = encode_timeout
        self._in_flight = 0

    @property
    def max_images(self) -> int:
        return self._max_images

    @property
    def in_flight(self) -> int:
        """Encodes started by the running accept call that have not settled yet."""

        return self._in_flight

    def capacity_for(self, current_size: int) -> int:
        return max(self._max_images - current_size, 0)

    async def accept(
        self,
        files: Sequence[RawFile],
        current_size: int,
        *,
        source: SelectionSource = SelectionSource.PICKER,
    ) -> IngestReport:
        """Encode as many files as fit next to ``current_size`` existing images.

        The returned report lists successful images in selection order regardless
        of the order in which the encodes finished.
        """

        accepted = min(len(files), self.capacity_for(current_size))
        report = IngestReport()

        for dropped in files[accepted:]:
            report.rejected.append(
                Rejection(
                    file_name=dropped.name,
                    reason=RejectionReason.CAPACITY_EXCEEDED,
                    detail=f"limit of {self._max_images} images reached",
                ),
            )
        if len(files) > accepted:
            ingest_files_total.labels(outcome=RejectionReason.CAPACITY_EXCEEDED.value).inc(len(files) - accepted)
            logger.warning(
                "Dropping %d of %d %s files: limit of %d images reached.",
                len(files) - accepted,
                len(files),
                source.value,
                self._max_images,
            )

        if accepted == 0:
            return report

        slots = SlotTable(accepted)
        self._in_flight = accepted
        ingest_in_flight.inc(accepted)
        try:
            await asyncio.gather(
                *(self._encode_into(slots, index, raw) for index, raw in enumerate(files[:accepted])),
            )
        finally:
            ingest_in_flight.dec(self._in_flight)
            self._in_flight = 0

        for index, outcome in slots.outcomes():
            if outcome.ok:
                report.accepted.append(outcome.image)  # type: ignore[arg-type]
            else:
                report.rejected.append(
                    Rejection(
                        file_name=files[index].name,
                        reason=RejectionReason.DECODE_FAILED,
                        detail=outcome.error or "",
                    ),
                )
        return report

    async def _encode_into(self, slots: SlotTable, index: int, raw: RawFile) -> None:
        logger.debug("Encoding %s into slot %d", raw.name, index)
        try:
            image = await asyncio.wait_for(self._encoder.encode(raw), timeout=self._encode_timeout)
        except DecodeFailed as exc:
            logger.warning("Failed to encode %s: %s", raw.name, exc.detail)
            slots.fail(index, exc.detail)
            ingest_files_total.labels(outcome=RejectionReason.DECODE_FAILED.value).inc()
        except asyncio.TimeoutError:
            logger.warning("Encoding %s timed out after %.1fs", raw.name, self._encode_timeout)
            slots.fail(index, f"timed out after {self._encode_timeout:g}s")
            ingest_files_total.labels(outcome=RejectionReason.DECODE_FAILED.value).inc()
        except Exception as exc:
            logger.exception("Unexpected error while encoding %s", raw.name)
            slots.fail(index, f"unexpected error: {exc}")
            ingest_files_total.labels(outcome=RejectionReason.DECODE_FAILED.value).inc()
        else:
            slots.fill(index, image)
            ingest_files_total.labels(outcome="accepted").inc()
        finally:
            self._in_flight -= 1
            ingest_in_flight.dec()
