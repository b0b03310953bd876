"""Cross-document entity aggregation into one table row per document.

For every completed document and every user-defined column, matching
entities are cleansed, optionally redacted, deduplicated and stripped of
values contained in longer ones, then joined into the cell value.

Everything here is a pure function of its inputs. Publishing the rows into
the shared table happens in :mod:`redline.pipeline.table`.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

import structlog

from redline.common.constants import (
    AGGREGATE_MASK,
    SENSITIVE_TYPES,
    UNLOCATED_TIMESTAMP,
    is_sensitive,
)
from redline.common.models import (
    AlignedEntity,
    DocumentStatus,
    SourceDocument,
    TableColumn,
    TableRow,
)
from redline.pipeline.cleaning import clean_entity_text

logger = structlog.get_logger()

TextCleaner = Callable[[str], str]

CELL_SEPARATOR = ", "

# Column name -> entity type phrases it also matches.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "dob": ("date of birth", "birth date"),
    "date": ("date of birth", "dob"),
    "card": ("credit card", "card number"),
    "name": ("person", "full name"),
}

DIGIT_WORDS: dict[str, str] = {
    "zero": "0",
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
}

_WHITESPACE_RUN = re.compile(r"\s+")
_DASH_WORD = re.compile(r"\bdash\b", re.IGNORECASE)
_HYPHEN_SPACING = re.compile(r"\s*-\s*")
_DIGIT_WORD = re.compile(r"\b(?:" + "|".join(DIGIT_WORDS) + r")\b", re.IGNORECASE)


def normalize_label(value: str) -> str:
    """Case-fold, treat underscores as spaces, then drop all whitespace."""
    return _WHITESPACE_RUN.sub("", value.casefold().replace("_", " "))


def column_matches(column: str, entity_type: str) -> bool:
    """Whether an entity type feeds a column.

    Either normalized label containing the other is a match, as is a
    column alias contained in the entity type. Blank labels never match.
    """
    column_label = normalize_label(column)
    type_label = normalize_label(entity_type)
    if not column_label or not type_label:
        return False
    if column_label in type_label or type_label in column_label:
        return True
    aliases = COLUMN_ALIASES.get(column.strip().casefold(), ())
    return any(normalize_label(alias) in type_label for alias in aliases)


def normalize_value(text: str) -> str:
    """Spoken-form normalization: ``dash`` to hyphen, digit words to digits."""
    value = _DASH_WORD.sub("-", text)
    value = _HYPHEN_SPACING.sub("-", value)
    value = _DIGIT_WORD.sub(lambda m: DIGIT_WORDS[m.group(0).lower()], value)
    return value.strip()


def cleanse_value(
    entity: AlignedEntity,
    safe_mode: bool,
    types: frozenset[str] = SENSITIVE_TYPES,
    cleaner: TextCleaner = clean_entity_text,
) -> str:
    """Cell value for one entity; sensitive values are masked in safe mode."""
    if safe_mode and is_sensitive(entity.entity_type, types):
        return AGGREGATE_MASK
    return normalize_value(cleaner(entity.text))


def suppress_substrings(values: Sequence[str]) -> list[str]:
    """Drop values contained (case-insensitively) in a different value.

    Values equal ignoring case keep only their first spelling. Order is
    preserved: "Randall" is dropped when "Randall Thomas" is present.
    """
    folded = [v.casefold() for v in values]
    survivors: list[str] = []
    kept: set[str] = set()
    for value, key in zip(values, folded):
        if key in kept:
            continue
        if any(key != other and key in other for other in folded):
            continue
        kept.add(key)
        survivors.append(value)
    return survivors


def column_values(
    entities: Iterable[AlignedEntity],
    column: str,
    safe_mode: bool,
    types: frozenset[str] = SENSITIVE_TYPES,
    cleaner: TextCleaner = clean_entity_text,
) -> list[tuple[str, AlignedEntity]]:
    """Surviving values of one column with the entity that first produced each."""
    first_seen: dict[str, AlignedEntity] = {}
    for entity in entities:
        if not column_matches(column, entity.entity_type):
            continue
        value = cleanse_value(entity, safe_mode, types, cleaner)
        if value and value not in first_seen:
            first_seen[value] = entity
    return [(value, first_seen[value]) for value in suppress_substrings(list(first_seen))]


def row_id_for(source_id: str) -> str:
    """Stable id of the aggregated row owned by a document."""
    return f"{source_id}_main"


def _column_name(column: str | TableColumn) -> str:
    return column.name if isinstance(column, TableColumn) else column


def build_document_row(
    document: SourceDocument,
    columns: Sequence[str | TableColumn],
    safe_mode: bool,
    types: frozenset[str] = SENSITIVE_TYPES,
    cleaner: TextCleaner = clean_entity_text,
) -> TableRow:
    """Compute the single row owned by one document.

    Columns without any surviving value are left out of ``cells``. The row
    timestamp is that of the earliest located contributing entity.
    """
    cells: dict[str, str] = {}
    contributors: list[AlignedEntity] = []
    for column in columns:
        name = _column_name(column)
        values = column_values(document.entities, name, safe_mode, types, cleaner)
        if not values:
            continue
        cells[name] = CELL_SEPARATOR.join(value for value, _ in values)
        contributors.extend(entity for _, entity in values)

    located = [e for e in contributors if e.located]
    timestamp = (
        min(located, key=lambda e: e.timestamp).formatted_timestamp
        if located
        else UNLOCATED_TIMESTAMP
    )
    return TableRow(
        id=row_id_for(document.source_id),
        source_id=document.source_id,
        timestamp=timestamp,
        cells=cells,
    )


def aggregate_documents(
    documents: Sequence[SourceDocument],
    columns: Sequence[str | TableColumn],
    safe_mode: bool = True,
    types: frozenset[str] = SENSITIVE_TYPES,
    cleaner: TextCleaner = clean_entity_text,
    max_workers: int | None = None,
) -> list[TableRow]:
    """Build one row per completed document.

    Per-document work shares no mutable state and runs on a thread pool
    when ``max_workers`` is greater than one. Output order follows input
    order, so identical inputs always produce identical rows.

    Args:
        documents: Processed documents; only completed ones produce rows
        columns: Ordered user-defined columns
        safe_mode: Mask sensitive values with a fixed string
        types: Sensitive type set
        cleaner: Text-cleaning collaborator applied before normalization
        max_workers: Thread pool size, or None/1 for sequential work

    Returns:
        Rows keyed by ``source_id``; empty when there are no columns
    """
    if not columns:
        return []

    completed = [d for d in documents if d.status == DocumentStatus.COMPLETED]

    def build(document: SourceDocument) -> TableRow:
        return build_document_row(document, columns, safe_mode, types, cleaner)

    if max_workers and max_workers > 1 and len(completed) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            rows = list(pool.map(build, completed))
    else:
        rows = [build(document) for document in completed]

    logger.info(
        "documents_aggregated",
        documents=len(documents),
        rows=len(rows),
        columns=len(columns),
        safe_mode=safe_mode,
    )
    return rows


def suggest_columns(
    entities: Iterable[AlignedEntity],
    existing: Iterable[str],
    limit: int = 5,
) -> list[str]:
    """Propose column names from entity types not yet used as columns."""
    taken = set(existing)
    suggestions: list[str] = []
    for entity in entities:
        words = entity.entity_type.replace("_", " ").split(" ")
        name = " ".join(word[:1].upper() + word[1:] for word in words)
        if name in taken or name in suggestions:
            continue
        suggestions.append(name)
        if len(suggestions) >= limit:
            break
    return suggestions
