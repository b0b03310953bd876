from redline.common.constants import (
    SENSITIVE_TYPES,
    SENSITIVE_TYPES_WITH_NAMES,
    sensitive_types,
)
from redline.common.models import (
    AlignedEntity,
    DocumentStatus,
    KeyTermEntity,
    ProcessedTranscript,
    RawEntity,
    SourceDocument,
    TableColumn,
    TableRow,
    Transcript,
    TranscriptionResult,
    Word,
    WordKind,
)

__all__ = [
    "SENSITIVE_TYPES",
    "SENSITIVE_TYPES_WITH_NAMES",
    "sensitive_types",
    "AlignedEntity",
    "DocumentStatus",
    "KeyTermEntity",
    "ProcessedTranscript",
    "RawEntity",
    "SourceDocument",
    "TableColumn",
    "TableRow",
    "Transcript",
    "TranscriptionResult",
    "Word",
    "WordKind",
]
