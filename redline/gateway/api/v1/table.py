"""Shared table endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from redline.common.constants import UNLOCATED_TIMESTAMP, sensitive_types
from redline.common.models import TableRow
from redline.config import Settings
from redline.gateway.dependencies import get_settings, get_table_store
from redline.gateway.models.requests import (
    AggregateRequest,
    CellUpdateRequest,
    ColumnCreateRequest,
    ColumnRenameRequest,
    RowCreateRequest,
)
from redline.gateway.models.responses import TableResponse
from redline.pipeline.export import export_csv
from redline.pipeline.table import TableStore

router = APIRouter(prefix="/table", tags=["table"])

Store = Annotated[TableStore, Depends(get_table_store)]


def _table_response(store: TableStore) -> TableResponse:
    columns, rows = store.snapshot()
    return TableResponse(columns=columns, rows=rows)


@router.get("", response_model=TableResponse, summary="Get columns and rows")
def get_table(store: Store) -> TableResponse:
    return _table_response(store)


@router.post(
    "/columns",
    response_model=TableResponse,
    status_code=201,
    summary="Add a column",
)
def add_column(body: ColumnCreateRequest, store: Store) -> TableResponse:
    store.add_column(body.name)
    return _table_response(store)


@router.patch(
    "/columns/{name}",
    response_model=TableResponse,
    summary="Rename a column",
)
def rename_column(name: str, body: ColumnRenameRequest, store: Store) -> TableResponse:
    store.rename_column(name, body.name)
    return _table_response(store)


@router.delete("/columns/{name}", status_code=204, summary="Remove a column")
def remove_column(name: str, store: Store) -> Response:
    store.remove_column(name)
    return Response(status_code=204)


@router.post(
    "/rows",
    response_model=TableRow,
    status_code=201,
    summary="Add a manual row",
)
def add_row(body: RowCreateRequest, store: Store) -> TableRow:
    return store.add_manual_row(
        cells=body.cells, timestamp=body.timestamp or UNLOCATED_TIMESTAMP
    )


@router.patch("/rows/{row_id}", response_model=TableRow, summary="Set a cell value")
def update_cell(row_id: str, body: CellUpdateRequest, store: Store) -> TableRow:
    return store.set_cell(row_id, body.column, body.value)


@router.delete("/rows/{row_id}", status_code=204, summary="Remove a row")
def remove_row(row_id: str, store: Store) -> Response:
    store.remove_row(row_id)
    return Response(status_code=204)


@router.post(
    "/aggregate",
    response_model=TableResponse,
    summary="Consolidate document entities into the table",
    description=(
        "Builds one row per completed document over the current columns. "
        "Re-running updates those rows in place; manual rows are untouched."
    ),
)
def aggregate(
    body: AggregateRequest,
    store: Store,
    settings: Annotated[Settings, Depends(get_settings)],
) -> TableResponse:
    store.aggregate(
        body.documents,
        safe_mode=settings.safe_mode if body.safe_mode is None else body.safe_mode,
        types=sensitive_types(
            settings.redact_person_names
            if body.include_person_names is None
            else body.include_person_names
        ),
        max_workers=settings.aggregation_workers,
    )
    return _table_response(store)


@router.get("/export", summary="Export the table as CSV")
def export_table(store: Store) -> Response:
    columns, rows = store.snapshot()
    return Response(
        content=export_csv(columns, rows),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="table.csv"'},
    )
