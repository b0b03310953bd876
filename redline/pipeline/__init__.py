"""Entity alignment, redaction and aggregation pipeline."""

from redline.pipeline.aggregation import (
    aggregate_documents,
    build_document_row,
    suggest_columns,
)
from redline.pipeline.alignment import compute_drift_offset
from redline.pipeline.enrichment import enrich_entities
from redline.pipeline.exceptions import (
    ColumnExistsError,
    ColumnNotFoundError,
    IngestionError,
    RowNotFoundError,
    TableError,
)
from redline.pipeline.export import export_csv
from redline.pipeline.ingestion import ingest_transcription
from redline.pipeline.processor import process_transcription
from redline.pipeline.redaction import mask_text
from redline.pipeline.table import TableStore
from redline.pipeline.timestamps import format_timestamp

__all__ = [
    "aggregate_documents",
    "build_document_row",
    "compute_drift_offset",
    "enrich_entities",
    "export_csv",
    "format_timestamp",
    "ingest_transcription",
    "mask_text",
    "process_transcription",
    "suggest_columns",
    "TableStore",
    "ColumnExistsError",
    "ColumnNotFoundError",
    "IngestionError",
    "RowNotFoundError",
    "TableError",
]
