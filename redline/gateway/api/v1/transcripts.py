"""Transcript processing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from redline.gateway.dependencies import get_table_store
from redline.gateway.models.requests import AlignRequest
from redline.gateway.models.responses import AlignResponse
from redline.pipeline.aggregation import suggest_columns
from redline.pipeline.processor import process_transcription
from redline.pipeline.table import TableStore

router = APIRouter(prefix="/transcripts", tags=["transcripts"])


@router.post(
    "/align",
    response_model=AlignResponse,
    summary="Align entities to the media timeline",
    description=(
        "Ingests a transcription result, corrects offset drift, maps every "
        "entity to a timestamp and appends key-term entities."
    ),
)
def align_transcript(
    body: AlignRequest,
    store: Annotated[TableStore, Depends(get_table_store)],
) -> AlignResponse:
    processed = process_transcription(body.result, key_terms=body.key_terms)
    transcript = processed.transcript
    return AlignResponse(
        transcript=transcript.full_text,
        language_code=transcript.language_code,
        language_probability=transcript.language_probability,
        drift_offset=processed.drift_offset,
        entities=processed.entities,
        suggested_columns=suggest_columns(processed.entities, store.columns),
    )
