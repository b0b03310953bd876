"""Per-transcript processing: ingest, align, map timestamps, enrich."""

from collections.abc import Iterable
from typing import Any

import structlog

from redline.common.models import ProcessedTranscript
from redline.pipeline.alignment import build_word_spans, compute_drift_offset
from redline.pipeline.enrichment import enrich_entities
from redline.pipeline.ingestion import ingest_transcription
from redline.pipeline.timestamps import align_entities

logger = structlog.get_logger()


def process_transcription(
    payload: Any,
    key_terms: str | Iterable[str] | None = None,
) -> ProcessedTranscript:
    """Turn a raw transcription result into time-anchored entities.

    Jobs are independent of each other; this function holds no shared
    state and may run concurrently for different transcripts.

    Args:
        payload: Decoded transcription result (``text``, ``words``, ``entities``)
        key_terms: Comma-separated string or iterable of user key terms

    Returns:
        ProcessedTranscript with annotator entities followed by key terms

    Raises:
        IngestionError: If the payload has an invalid structure
    """
    result = ingest_transcription(payload)
    full_text = result.transcript.full_text

    offset = compute_drift_offset(full_text, result.words)
    spans = build_word_spans(result.words)
    aligned = align_entities(result.entities, spans, offset)
    entities = enrich_entities(aligned, full_text, key_terms)

    logger.info(
        "transcription_processed",
        words=len(result.words),
        entities=len(result.entities),
        key_terms=len(entities) - len(aligned),
        unlocated=sum(1 for e in aligned if not e.located),
        drift_offset=offset,
    )

    return ProcessedTranscript(
        transcript=result.transcript,
        words=result.words,
        entities=entities,
        drift_offset=offset,
    )
