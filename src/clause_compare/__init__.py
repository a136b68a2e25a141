"""
Clause Compare Relay

An upload proxy and a server-rendered viewer in front of an external
document-comparison backend.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import AuditSource, ChangeType
from .models.comparison import (
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
from .models.upload import ParsedUpload, UploadedDocument
from .parsers import (
    ComparisonResponseParser,
    RelayError,
    UploadParser,
    UploadValidationError,
)
from .backend import BackendClient, UpstreamResponse
from .proxy import UploadProxy
from .viewer import ComparisonViewer, ViewRenderer
from .audit import ComparisonAuditEvent, ComparisonAuditLogger, DatabaseManager
from .config import (
    ConfigurationError,
    ConfigurationManager,
    RelaySettings,
    ValidationResult,
)

__all__ = [
    "AuditSource",
    "ChangeType",
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
    "ComparisonResponseParser",
    "RelayError",
    "UploadParser",
    "UploadValidationError",
    "BackendClient",
    "UpstreamResponse",
    "UploadProxy",
    "ComparisonViewer",
    "ViewRenderer",
    "ComparisonAuditEvent",
    "ComparisonAuditLogger",
    "DatabaseManager",
    "ConfigurationError",
    "ConfigurationManager",
    "RelaySettings",
    "ValidationResult",
]
