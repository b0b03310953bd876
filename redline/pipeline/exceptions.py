"""Exceptions raised by the pipeline and the table store."""

from __future__ import annotations

from typing import Any


class IngestionError(ValueError):
    """Raised when a transcription payload has an invalid structure.

    This is the only error the pipeline stages surface for malformed
    input; everything downstream of ingestion degrades to defaults.
    """

    code = "invalid_transcription"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON error response."""
        result: dict[str, Any] = {"code": self.code, "message": str(self)}
        if self.errors:
            result["details"] = self.errors
        return result


class TableError(Exception):
    """Base class for table store errors."""

    code = "table_error"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON error response."""
        return {"code": self.code, "message": str(self)}


class RowNotFoundError(TableError):
    """Raised when a row id does not exist in the table."""

    code = "row_not_found"

    def __init__(self, row_id: str) -> None:
        super().__init__(f"Row not found: {row_id}")
        self.row_id = row_id


class ColumnNotFoundError(TableError):
    """Raised when a column name does not exist in the table."""

    code = "column_not_found"

    def __init__(self, name: str) -> None:
        super().__init__(f"Column not found: {name}")
        self.name = name


class ColumnExistsError(TableError):
    """Raised when adding or renaming to a column name already in use."""

    code = "column_exists"

    def __init__(self, name: str) -> None:
        super().__init__(f"Column already exists: {name}")
        self.name = name
