"""Feed local image files through the bulk uploader and print every publish."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from wardrobe_ingest.ingestion import Batch, BulkImageIngester, IngestReport, RawFile, SelectionSource
from wardrobe_ingest.monitoring.logging import configure_logging

logger = logging.getLogger(__name__)


def _format_batch(images: Batch) -> str:
    previews = ", ".join(image[:40] + "..." for image in images)
    return f"📦 {len(images)} image(s): [{previews}]"


def _print_rejections(report: IngestReport) -> None:
    for rejection in report.rejected:
        print(f"❌ {rejection.file_name}: {rejection.reason.value} {rejection.detail}".rstrip())


async def run(paths: Sequence[Path], max_images: int | None) -> IngestReport:
    ingester = BulkImageIngester(
        lambda images: print(_format_batch(images)),
        on_rejected=_print_rejections,
        max_images=max_images,
    )
    files = [RawFile.from_path(path) for path in paths]
    return await ingester.add_files(files, source=SelectionSource.MULTI_PICKER)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", type=Path, help="image files to ingest")
    parser.add_argument("--max-images", type=int, default=None, help="override INGEST_MAX_IMAGES")
    parser.add_argument("--json", action="store_true", help="print the final report as JSON")
    args = parser.parse_args(argv)

    configure_logging()
    report = asyncio.run(run(args.paths, args.max_images))
    if args.json:
        print(report.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
