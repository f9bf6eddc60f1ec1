"""Interfaces the ingestion core exposes to UI and state collaborators."""

from __future__ import annotations

from typing import Callable, Protocol

from wardrobe_ingest.ingestion.files import Batch, IngestReport

BatchSink = Callable[[Batch], None]
"""Receives the full ordered batch after every mutation. Not awaited."""

RejectionSink = Callable[[IngestReport], None]
"""Receives the report of any accept call that dropped at least one file."""


class SelectionHandle(Protocol):
    """File-picker affordance whose remembered selection is reset on clear."""

    def reset(self) -> None: ...
