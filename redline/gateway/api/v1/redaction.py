"""Redaction endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from redline.common.constants import sensitive_types
from redline.config import Settings
from redline.gateway.dependencies import get_settings
from redline.gateway.models.requests import RedactRequest
from redline.gateway.models.responses import RedactResponse, SensitiveTypesResponse
from redline.pipeline.redaction import mask_text

router = APIRouter(tags=["redaction"])


@router.get(
    "/sensitive-types",
    response_model=SensitiveTypesResponse,
    summary="List entity types treated as sensitive",
)
def list_sensitive_types(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SensitiveTypesResponse:
    types = sensitive_types(settings.redact_person_names)
    return SensitiveTypesResponse(
        entity_types=sorted(types),
        include_person_names=settings.redact_person_names,
    )


@router.post(
    "/redact",
    response_model=RedactResponse,
    summary="Mask sensitive entity values in text",
    description=(
        "Masks sensitive entities by exact offset where the offsets still "
        "match, and by a separator-tolerant pattern everywhere else."
    ),
)
def redact_text(
    body: RedactRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> RedactResponse:
    include_names = (
        settings.redact_person_names
        if body.include_person_names is None
        else body.include_person_names
    )
    return RedactResponse(
        text=mask_text(body.text, body.entities, sensitive_types(include_names))
    )
