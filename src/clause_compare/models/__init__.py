"""Data models for the Clause Compare Relay."""

from .enums import AuditSource, ChangeType, SUMMARY_ORDER
from .comparison import (
    AlignedResult,
    ClauseDiff,
    ClauseText,
    ClauseTexts,
    ComparedDocument,
    ComparisonResponse,
    DiffPair,
    DocumentMeta,
    SemanticFlag,
)
from .upload import ParsedUpload, UploadedDocument

__all__ = [
    "AuditSource",
    "ChangeType",
    "SUMMARY_ORDER",
    "AlignedResult",
    "ClauseDiff",
    "ClauseText",
    "ClauseTexts",
    "ComparedDocument",
    "ComparisonResponse",
    "DiffPair",
    "DocumentMeta",
    "SemanticFlag",
    "ParsedUpload",
    "UploadedDocument",
]
