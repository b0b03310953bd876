"""Ingestion of transcription collaborator payloads.

Validates the overall shape before any pipeline stage runs and normalizes
the two field-naming conventions into the canonical models.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from redline.common.models import RawEntity, Transcript, TranscriptionResult, Word
from redline.pipeline.exceptions import IngestionError

logger = structlog.get_logger()


def _require_list(payload: Mapping[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise IngestionError(
            f"'{key}' must be a list, got {type(value).__name__}",
            errors=[{"loc": [key], "msg": "must be a list", "type": "list_type"}],
        )
    return value


def ingest_transcription(payload: Any) -> TranscriptionResult:
    """Validate and normalize a raw transcription result.

    Args:
        payload: Decoded JSON object from the transcription collaborator,
            with ``text``, ``words`` and ``entities`` keys.

    Returns:
        TranscriptionResult with canonical field names

    Raises:
        IngestionError: If the payload or any of its items has an invalid shape
    """
    if not isinstance(payload, Mapping):
        raise IngestionError(
            f"Transcription payload must be an object, got {type(payload).__name__}"
        )

    text = payload.get("text")
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise IngestionError(
            "'text' must be a string",
            errors=[{"loc": ["text"], "msg": "must be a string", "type": "string_type"}],
        )

    raw_words = _require_list(payload, "words")
    raw_entities = _require_list(payload, "entities")

    try:
        transcript = Transcript.model_validate({**payload, "text": text})
        words = [Word.model_validate(item) for item in raw_words]
        entities = [RawEntity.model_validate(item) for item in raw_entities]
    except ValidationError as e:
        logger.warning("transcription_payload_invalid", error_count=e.error_count())
        raise IngestionError(
            "Invalid transcription payload",
            errors=e.errors(include_url=False, include_context=False),
        ) from e

    return TranscriptionResult(transcript=transcript, words=words, entities=entities)
