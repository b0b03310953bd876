"""FastAPI dependency injection functions."""

from __future__ import annotations

from fastapi import Request

from redline.config import Settings
from redline.config import get_settings as _get_settings
from redline.pipeline.table import TableStore


def get_settings() -> Settings:
    """Get application settings."""
    return _get_settings()


def get_table_store(request: Request) -> TableStore:
    """Get the process-wide table store created by the app factory."""
    return request.app.state.table_store
