"""Value objects passed in and out of the ingestion core."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

EncodedImage = str
"""A self-contained ``data:<media-type>;base64,<payload>`` string."""

Batch = tuple[EncodedImage, ...]

DEFAULT_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class RawFile:
    """Caller-owned file handle selected by the user.

    Holds either the raw bytes or a path to read them from. The ingestion core
    only ever reads it.
    """

    name: str
    content: Optional[bytes] = None
    media_type: Optional[str] = None
    path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.content is None and self.path is None:
            raise ValueError(f"RawFile {self.name!r} needs either content or a path.")

    @classmethod
    def from_path(cls, path: Path | str, media_type: Optional[str] = None) -> "RawFile":
        """Build a path-backed handle, guessing the media type from the suffix."""

        resolved = Path(path)
        guessed, _ = mimetypes.guess_type(resolved.name)
        return cls(name=resolved.name, path=resolved, media_type=media_type or guessed)

    @classmethod
    def from_bytes(cls, name: str, content: bytes, media_type: Optional[str] = None) -> "RawFile":
        guessed, _ = mimetypes.guess_type(name)
        return cls(name=name, content=content, media_type=media_type or guessed)


class SelectionSource(str, Enum):
    """How the files reached the uploader."""

    PICKER = "picker"
    MULTI_PICKER = "multi_picker"
    CAMERA = "camera"


class RejectionReason(str, Enum):
    """Why a selected file did not end up in the batch."""

    CAPACITY_EXCEEDED = "capacity_exceeded"
    DECODE_FAILED = "decode_failed"


class Rejection(BaseModel):
    """One selected file that was dropped from an accept call."""

    file_name: str
    reason: RejectionReason
    detail: str = ""


class IngestReport(BaseModel):
    """Outcome of a single accept call.

    ``accepted`` lists the encoded images appended by the call in selection
    order; ``rejected`` lists every file that was dropped and why.
    """

    accepted: list[EncodedImage] = Field(default_factory=list)
    rejected: list[Rejection] = Field(default_factory=list)

    @property
    def has_rejections(self) -> bool:
        return bool(self.rejected)

    def rejected_for(self, reason: RejectionReason) -> list[Rejection]:
        """Return rejections with the given reason, preserving order."""

        return [item for item in self.rejected if item.reason == reason]
