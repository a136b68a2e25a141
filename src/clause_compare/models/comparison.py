"""Data models for the structured comparison returned by the backend."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import ChangeType


@dataclass
class ClauseText:
    """Text of one clause as found in a single document."""
    clause_id: str
    text: str
    position: Optional[int] = None
    hash: Optional[str] = None


@dataclass
class DiffPair:
    """
    Diff of the baseline clause against one compared document.

    ``blocks`` is carried as received; the backend owns its structure.
    """
    change_type: ChangeType = ChangeType.UNCHANGED
    word_delta: int = 0
    word_delta_display: str = ""
    location_change: Optional[str] = None
    blocks: Optional[List[Any]] = None


@dataclass
class ClauseDiff:
    """Diffs of an aligned clause against document B and, optionally, C."""
    against_b: Optional[DiffPair] = None
    against_c: Optional[DiffPair] = None


@dataclass
class SemanticFlag:
    """A backend-raised flag on a clause change."""
    flag: str
    reason: str = ""


@dataclass
class ClauseTexts:
    """Clause text per document slot; a slot is None when absent."""
    baseline: Optional[ClauseText] = None
    compare_b: Optional[ClauseText] = None
    compare_c: Optional[ClauseText] = None


@dataclass
class AlignedResult:
    """One aligned clause row of the comparison."""
    clause_id: str
    clauses: ClauseTexts = field(default_factory=ClauseTexts)
    diff: ClauseDiff = field(default_factory=ClauseDiff)
    flags: List[SemanticFlag] = field(default_factory=list)

    @property
    def primary_diff(self) -> Optional[DiffPair]:
        """Diff against document B."""
        return self.diff.against_b

    @property
    def secondary_diff(self) -> Optional[DiffPair]:
        """Diff against document C, if a third document was compared."""
        return self.diff.against_c


@dataclass
class DocumentMeta:
    """Backend metadata for one compared document."""
    document_id: str = ""
    hash: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    clause_count: int = 0


@dataclass
class ComparedDocument(DocumentMeta):
    """Metadata for a non-baseline document, keyed by its slot."""
    key: str = ""


@dataclass
class ComparisonResponse:
    """
    Complete comparison payload.

    Mirrors the JSON contract of the backend compare endpoint. Hash
    values are displayed for traceability only; nothing here recomputes
    them.
    """
    disclaimer: str = ""
    comparison_version: str = ""
    baseline: DocumentMeta = field(default_factory=DocumentMeta)
    comparisons: List[ComparedDocument] = field(default_factory=list)
    aligned_clause_rows: int = 0
    results: List[AlignedResult] = field(default_factory=list)
    comparison_output_hash: str = ""

    @property
    def has_third_document(self) -> bool:
        """Check whether a document C took part in the comparison."""
        return len(self.comparisons) >= 2
