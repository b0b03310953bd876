"""Request models for the v1 API."""

from typing import Any

from pydantic import BaseModel, Field

from redline.common.models import RawEntity, SourceDocument


class AlignRequest(BaseModel):
    """Raw transcription result plus user key terms."""

    result: dict[str, Any] = Field(
        ...,
        description="Transcription collaborator payload with text, words and entities",
    )
    key_terms: str | list[str] | None = Field(
        default=None,
        description="Comma-separated string or list of key terms to search for",
    )


class RedactRequest(BaseModel):
    """Text to mask and the entities reported for it."""

    text: str = Field(..., description="Text to make display-safe")
    entities: list[RawEntity] = Field(default_factory=list)
    include_person_names: bool | None = Field(
        default=None,
        description="Override REDLINE_REDACT_PERSON_NAMES for this request",
    )


class ColumnCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)


class ColumnRenameRequest(BaseModel):
    name: str = Field(..., min_length=1, description="New column name")


class RowCreateRequest(BaseModel):
    """User-authored row."""

    timestamp: str | None = Field(default=None, description="Display timestamp")
    cells: dict[str, str] = Field(default_factory=dict)


class CellUpdateRequest(BaseModel):
    column: str
    value: str


class AggregateRequest(BaseModel):
    """Documents to consolidate into the table."""

    documents: list[SourceDocument] = Field(default_factory=list)
    safe_mode: bool | None = Field(
        default=None,
        description="Override REDLINE_SAFE_MODE for this run",
    )
    include_person_names: bool | None = Field(
        default=None,
        description="Override REDLINE_REDACT_PERSON_NAMES for this run",
    )
