"""Shared table of user-defined columns and rows.

Aggregation computes rows without touching shared state; publishing them
here is the single-writer critical section. Rows without a ``source_id``
are user-authored and never modified by aggregation.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

import structlog

from redline.common.constants import SENSITIVE_TYPES, UNLOCATED_TIMESTAMP
from redline.common.models import SourceDocument, TableColumn, TableRow
from redline.pipeline.aggregation import TextCleaner, aggregate_documents
from redline.pipeline.cleaning import clean_entity_text
from redline.pipeline.exceptions import (
    ColumnExistsError,
    ColumnNotFoundError,
    RowNotFoundError,
)

logger = structlog.get_logger()


class TableStore:
    """In-memory table guarded by a lock.

    Readers get copies; no caller ever holds a reference into the live
    row list.
    """

    def __init__(
        self,
        columns: Sequence[str] | None = None,
        rows: Sequence[TableRow] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._columns: list[TableColumn] = []
        for name in columns or []:
            self.add_column(name)
        self._rows: list[TableRow] = [row.model_copy(deep=True) for row in rows or []]

    @property
    def columns(self) -> list[str]:
        with self._lock:
            return [column.name for column in self._columns]

    @property
    def rows(self) -> list[TableRow]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._rows]

    def snapshot(self) -> tuple[list[str], list[TableRow]]:
        """Consistent copy of columns and rows."""
        with self._lock:
            return (
                [column.name for column in self._columns],
                [row.model_copy(deep=True) for row in self._rows],
            )

    def _column_index(self, name: str) -> int:
        for index, column in enumerate(self._columns):
            if column.name == name:
                return index
        raise ColumnNotFoundError(name)

    def _row_index(self, row_id: str) -> int:
        for index, row in enumerate(self._rows):
            if row.id == row_id:
                return index
        raise RowNotFoundError(row_id)

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def add_column(self, name: str) -> str:
        """Append a column; the stored name is trimmed."""
        column = TableColumn(name=name)
        with self._lock:
            if any(c.name == column.name for c in self._columns):
                raise ColumnExistsError(column.name)
            self._columns.append(column)
        return column.name

    def rename_column(self, old: str, new: str) -> str:
        """Rename a column and move its cell values in every row."""
        column = TableColumn(name=new)
        with self._lock:
            index = self._column_index(old)
            if column.name == old:
                return old
            if any(c.name == column.name for c in self._columns):
                raise ColumnExistsError(column.name)
            self._columns[index] = column
            for row in self._rows:
                if old in row.cells:
                    row.cells[column.name] = row.cells.pop(old)
        return column.name

    def remove_column(self, name: str) -> None:
        """Remove a column and drop its cell values."""
        with self._lock:
            del self._columns[self._column_index(name)]
            for row in self._rows:
                row.cells.pop(name, None)

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    def add_manual_row(
        self,
        cells: dict[str, str] | None = None,
        timestamp: str = UNLOCATED_TIMESTAMP,
    ) -> TableRow:
        """Append a user-authored row (no ``source_id``)."""
        row = TableRow(timestamp=timestamp, cells=dict(cells or {}))
        with self._lock:
            for name in row.cells:
                self._column_index(name)
            self._rows.append(row)
        return row.model_copy(deep=True)

    def set_cell(self, row_id: str, column: str, value: str) -> TableRow:
        """Set one cell of any row."""
        with self._lock:
            self._column_index(column)
            row = self._rows[self._row_index(row_id)]
            row.cells[column] = value
            return row.model_copy(deep=True)

    def remove_row(self, row_id: str) -> None:
        with self._lock:
            del self._rows[self._row_index(row_id)]

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def apply_aggregation(
        self, rows: Sequence[TableRow], source_ids: Sequence[str]
    ) -> list[TableRow]:
        """Insert or replace aggregated rows by id.

        Owned rows whose ``source_id`` is not among ``source_ids`` belong
        to withdrawn documents and are removed. Manual rows are kept as is.
        Cells for columns removed or renamed since the rows were computed
        are dropped.

        Args:
            rows: Rows produced by :func:`aggregate_documents`
            source_ids: Ids of every document submitted to that run

        Returns:
            Copy of the resulting rows
        """
        active = set(source_ids)
        with self._lock:
            before = len(self._rows)
            self._rows = [
                row for row in self._rows if row.source_id is None or row.source_id in active
            ]
            removed = before - len(self._rows)

            current = {column.name for column in self._columns}
            positions = {row.id: index for index, row in enumerate(self._rows)}
            inserted = 0
            for row in rows:
                copy = row.model_copy(deep=True)
                # Columns may have changed since the cells were computed.
                copy.cells = {k: v for k, v in copy.cells.items() if k in current}
                if copy.id in positions:
                    self._rows[positions[copy.id]] = copy
                else:
                    positions[copy.id] = len(self._rows)
                    self._rows.append(copy)
                    inserted += 1

            result = [row.model_copy(deep=True) for row in self._rows]

        logger.info(
            "table_aggregation_applied",
            updated=len(rows) - inserted,
            inserted=inserted,
            removed=removed,
        )
        return result

    def aggregate(
        self,
        documents: Sequence[SourceDocument],
        safe_mode: bool = True,
        types: frozenset[str] = SENSITIVE_TYPES,
        cleaner: TextCleaner = clean_entity_text,
        max_workers: int | None = None,
    ) -> list[TableRow]:
        """Aggregate documents over the current columns and publish the rows.

        Cell computation runs outside the lock. Without columns this is a
        no-op and the current rows are returned unchanged.
        """
        columns = self.columns
        if not columns:
            return self.rows

        rows = aggregate_documents(
            documents,
            columns,
            safe_mode=safe_mode,
            types=types,
            cleaner=cleaner,
            max_workers=max_workers,
        )
        return self.apply_aggregation(rows, [d.source_id for d in documents])
