"""V1 API router - aggregates all v1 routes."""

from fastapi import APIRouter

from redline.gateway.api.v1 import redaction, table, transcripts

router = APIRouter(prefix="/v1")

# Alignment, timestamp mapping and key-term enrichment
router.include_router(transcripts.router)

# Display-safe masking
router.include_router(redaction.router)

# Shared table: columns, rows, aggregation, CSV export
router.include_router(table.router)
