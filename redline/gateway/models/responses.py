"""Response models for the v1 API."""

from pydantic import BaseModel, Field

from redline.common.models import AlignedEntity, TableRow


class AlignResponse(BaseModel):
    transcript: str
    language_code: str | None = None
    language_probability: float | None = None
    drift_offset: int = 0
    entities: list[AlignedEntity] = Field(default_factory=list)
    suggested_columns: list[str] = Field(default_factory=list)


class RedactResponse(BaseModel):
    text: str


class SensitiveTypesResponse(BaseModel):
    entity_types: list[str]
    include_person_names: bool


class TableResponse(BaseModel):
    columns: list[str] = Field(default_factory=list)
    rows: list[TableRow] = Field(default_factory=list)
