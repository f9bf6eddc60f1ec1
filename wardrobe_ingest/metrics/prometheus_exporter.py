"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge


ingest_files_total = Counter(
    "ingest_files_total",
    "Selected files by ingestion outcome.",
    ["outcome"],
)

ingest_publish_total = Counter(
    "ingest_publish_total",
    "Batch snapshots delivered to the sink, by mutation.",
    ["operation"],
)

ingest_in_flight = Gauge(
    "ingest_in_flight",
    "Number of image encodes currently in progress.",
)
