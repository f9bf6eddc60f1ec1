"""Fixed-length result table for one accept call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from wardrobe_ingest.ingestion.files import EncodedImage


@dataclass(slots=True)
class SlotOutcome:
    """Terminal state of a reserved slot: either an image or a failure detail."""

    image: Optional[EncodedImage] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.image is not None


class SlotTable:
    """One reserved slot per accepted file, addressed by selection index.

    Every slot is written at most once, by the task that owns its index.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must be non-negative")
        self._slots: list[Optional[SlotOutcome]] = [None] * size

    def __len__(self) -> int:
        return len(self._slots)

    def fill(self, index: int, image: EncodedImage) -> None:
        self._set(index, SlotOutcome(image=image))

    def fail(self, index: int, error: str) -> None:
        self._set(index, SlotOutcome(error=error))

    def _set(self, index: int, outcome: SlotOutcome) -> None:
        if self._slots[index] is not None:
            raise RuntimeError(f"slot {index} already settled")
        self._slots[index] = outcome

    @property
    def pending(self) -> int:
        return sum(1 for slot in self._slots if slot is None)

    @property
    def settled(self) -> bool:
        return self.pending == 0

    def outcomes(self) -> Iterator[tuple[int, SlotOutcome]]:
        """Yield ``(index, outcome)`` in selection order once every slot settled."""

        if not self.settled:
            raise RuntimeError(f"{self.pending} slots still pending")
        for index, slot in enumerate(self._slots):
            yield index, slot  # type: ignore[misc]

