"""Audit event records for relayed comparisons."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..models.comparison import ComparisonResponse
from ..models.enums import AuditSource


@dataclass
class ComparisonAuditEvent:
    """
    Audit record of one comparison round trip.

    Hashes and version are copied from the backend response; they are
    never computed here.
    """
    source: AuditSource
    status_code: Optional[int] = None
    success: bool = False
    filenames: List[str] = field(default_factory=list)
    baseline_hash: Optional[str] = None
    compare_hashes: List[str] = field(default_factory=list)
    output_hash: Optional[str] = None
    comparison_version: Optional[str] = None
    error: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_payload(
        cls,
        source: AuditSource,
        filenames: List[str],
        status_code: Optional[int],
        payload: Any,
    ) -> "ComparisonAuditEvent":
        """Build an event from a raw backend JSON payload."""
        data = payload if isinstance(payload, dict) else {}
        success = status_code is not None and 200 <= status_code < 300
        baseline = data.get("baseline") if isinstance(data.get("baseline"), dict) else {}
        comparisons = data.get("comparisons") if isinstance(data.get("comparisons"), list) else []
        error = data.get("error")

        return cls(
            source=source,
            status_code=status_code,
            success=success,
            filenames=list(filenames),
            baseline_hash=baseline.get("hash"),
            compare_hashes=[
                c.get("hash") for c in comparisons
                if isinstance(c, dict) and c.get("hash")
            ],
            output_hash=data.get("comparison_output_hash"),
            comparison_version=data.get("comparison_version"),
            error=None if success or error is None else str(error),
        )

    @classmethod
    def from_comparison(
        cls,
        source: AuditSource,
        filenames: List[str],
        response: ComparisonResponse,
        status_code: int = 200,
    ) -> "ComparisonAuditEvent":
        """Build an event from a parsed, successful comparison."""
        return cls(
            source=source,
            status_code=status_code,
            success=True,
            filenames=list(filenames),
            baseline_hash=response.baseline.hash or None,
            compare_hashes=[c.hash for c in response.comparisons if c.hash],
            output_hash=response.comparison_output_hash or None,
            comparison_version=response.comparison_version or None,
        )

    @classmethod
    def from_error(
        cls,
        source: AuditSource,
        filenames: List[str],
        error: str,
        status_code: Optional[int] = None,
    ) -> "ComparisonAuditEvent":
        """Build an event for a failed comparison."""
        return cls(
            source=source,
            status_code=status_code,
            success=False,
            filenames=list(filenames),
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "status_code": self.status_code,
            "success": self.success,
            "filenames": self.filenames,
            "baseline_hash": self.baseline_hash,
            "compare_hashes": self.compare_hashes,
            "output_hash": self.output_hash,
            "comparison_version": self.comparison_version,
            "error": self.error,
        }
