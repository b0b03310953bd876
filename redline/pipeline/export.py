"""CSV export of the aggregated table."""

import csv
import io
from collections.abc import Sequence

from redline.common.models import TableRow

TIMESTAMP_HEADER = "Timestamp"


def export_csv(columns: Sequence[str], rows: Sequence[TableRow]) -> str:
    """Render the table as CSV.

    Header is ``Timestamp,<col1>,<col2>,...``; every row value is
    double-quoted with embedded quotes doubled, and missing cells export
    as empty strings.

    Args:
        columns: Ordered column names
        rows: Table rows

    Returns:
        CSV text with ``\\n`` line endings, or "" when there are no columns
    """
    if not columns:
        return ""

    buffer = io.StringIO()
    header = csv.writer(buffer, lineterminator="\n")
    header.writerow([TIMESTAMP_HEADER, *columns])

    body = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        body.writerow([row.timestamp, *(row.cells.get(name, "") for name in columns)])

    return buffer.getvalue().rstrip("\n")
