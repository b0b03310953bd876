"""Data contracts for the alignment, redaction and aggregation pipeline.

The transcription collaborator reports field names in two casing
conventions (``start_char`` / ``startChar``). Both are accepted here via
validation aliases so nothing downstream branches on field presence;
serialization always uses the snake_case field names.
"""

from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from redline.common.constants import KEY_TERM_ENTITY_TYPE, UNLOCATED_TIMESTAMP

# =============================================================================
# Enums
# =============================================================================


class WordKind(str, Enum):
    """Word stream item kind. Spacing, audio events etc. collapse to OTHER."""

    WORD = "word"
    OTHER = "other"


class DocumentStatus(str, Enum):
    """Processing status of a source document feeding the aggregator."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


# =============================================================================
# Transcription input
# =============================================================================


class Transcript(BaseModel):
    """Full transcript text as reported by the transcription collaborator."""

    model_config = ConfigDict(frozen=True)

    full_text: str = Field(
        default="", validation_alias=AliasChoices("full_text", "text")
    )
    language_code: str | None = Field(
        default=None, validation_alias=AliasChoices("language_code", "languageCode")
    )
    language_probability: float | None = Field(
        default=None,
        validation_alias=AliasChoices("language_probability", "languageProbability"),
    )


class Word(BaseModel):
    """Timed item of the word stream. Times are seconds from media start."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    start_time: float = Field(
        default=0.0, validation_alias=AliasChoices("start_time", "start", "startTime")
    )
    end_time: float = Field(
        default=0.0, validation_alias=AliasChoices("end_time", "end", "endTime")
    )
    kind: WordKind = Field(
        default=WordKind.WORD, validation_alias=AliasChoices("kind", "type")
    )

    @field_validator("text", mode="before")
    @classmethod
    def _none_text_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _none_time_to_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> WordKind:
        if isinstance(value, WordKind):
            return value
        if isinstance(value, str) and value.lower() == WordKind.WORD.value:
            return WordKind.WORD
        return WordKind.OTHER


class RawEntity(BaseModel):
    """Entity span reported by the external annotator.

    Offsets index into the annotator's ``full_text``. They are optional:
    records without offsets are still masked by the fuzzy-pattern pass.
    """

    model_config = ConfigDict(frozen=True)

    entity_type: str = Field(
        ..., validation_alias=AliasChoices("entity_type", "entityType")
    )
    text: str = ""
    start_char: int | None = Field(
        default=None, validation_alias=AliasChoices("start_char", "startChar")
    )
    end_char: int | None = Field(
        default=None, validation_alias=AliasChoices("end_char", "endChar")
    )

    @field_validator("text", mode="before")
    @classmethod
    def _none_text_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class AlignedEntity(RawEntity):
    """Entity anchored to the media timeline.

    ``located`` is False when no word could be matched and the timestamp
    fell back to zero, so a genuine ``0:00.000`` stays distinguishable.
    """

    corrected_start_char: int | None = None
    timestamp: float = 0.0
    formatted_timestamp: str = UNLOCATED_TIMESTAMP
    located: bool = False


class KeyTermEntity(AlignedEntity):
    """Synthetic entity for a user-declared key term found in the transcript."""

    entity_type: Literal["key_term"] = Field(
        default=KEY_TERM_ENTITY_TYPE,
        validation_alias=AliasChoices("entity_type", "entityType"),
    )


class TranscriptionResult(BaseModel):
    """Normalized transcription collaborator payload."""

    model_config = ConfigDict(frozen=True)

    transcript: Transcript
    words: list[Word] = Field(default_factory=list)
    entities: list[RawEntity] = Field(default_factory=list)


class ProcessedTranscript(BaseModel):
    """Pipeline output for one transcript."""

    transcript: Transcript
    words: list[Word] = Field(default_factory=list)
    entities: list[AlignedEntity] = Field(default_factory=list)
    drift_offset: int = 0


# =============================================================================
# Table
# =============================================================================


class TableColumn(BaseModel):
    """User-defined table column."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("column name must not be blank")
        return stripped


class TableRow(BaseModel):
    """Table row. Rows with a ``source_id`` are owned by the aggregator."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    source_id: str | None = None
    timestamp: str = UNLOCATED_TIMESTAMP
    cells: dict[str, str] = Field(default_factory=dict)


class SourceDocument(BaseModel):
    """One processed file offered to the aggregator."""

    source_id: str = Field(..., validation_alias=AliasChoices("source_id", "id"))
    title: str | None = None
    status: DocumentStatus = DocumentStatus.COMPLETED
    entities: list[AlignedEntity] = Field(default_factory=list)
