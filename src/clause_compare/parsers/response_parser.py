"""Deserialization of backend comparison payloads."""

import json
import logging
from typing import Any, Optional

from ..models.comparison import (
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
from ..models.enums import ChangeType
from .exceptions import ResponseFormatError

logger = logging.getLogger(__name__)


class ComparisonResponseParser:
    """
    Converts the backend's comparison JSON into ``ComparisonResponse``.

    The backend owns the contract, so parsing is lenient: missing or null
    fields fall back to empty defaults instead of failing the page. Only a
    payload that is not a JSON object at all is rejected.
    """

    @staticmethod
    def parse_json(json_str: str) -> ComparisonResponse:
        """
        Parse a JSON string into a ComparisonResponse.

        Raises:
            ResponseFormatError: If the string is not valid JSON or not an object.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ResponseFormatError(f"Invalid JSON: {str(e)}")
        return ComparisonResponseParser.parse(data)

    @staticmethod
    def parse(data: Any) -> ComparisonResponse:
        """
        Parse a decoded JSON payload into a ComparisonResponse.

        Raises:
            ResponseFormatError: If ``data`` is not a dictionary.
        """
        if not isinstance(data, dict):
            raise ResponseFormatError(
                "Expected a JSON object for the comparison response",
                details={"received_type": type(data).__name__},
            )

        return ComparisonResponse(
            disclaimer=_as_str(data.get("disclaimer")),
            comparison_version=_as_str(data.get("comparison_version")),
            baseline=ComparisonResponseParser._dict_to_meta(data.get("baseline")),
            comparisons=[
                ComparisonResponseParser._dict_to_compared(c)
                for c in _as_list(data.get("comparisons"))
                if isinstance(c, dict)
            ],
            aligned_clause_rows=_as_int(data.get("aligned_clause_rows")),
            results=[
                ComparisonResponseParser._dict_to_result(r)
                for r in _as_list(data.get("results"))
                if isinstance(r, dict)
            ],
            comparison_output_hash=_as_str(data.get("comparison_output_hash")),
        )

    @staticmethod
    def parse_change_type(value: Any) -> ChangeType:
        """Map a change type string to ``ChangeType``; unknown values become Unchanged."""
        if isinstance(value, ChangeType):
            return value
        try:
            return ChangeType(value)
        except ValueError:
            if value is not None:
                logger.warning(f"Unknown change type from backend: {value!r}")
            return ChangeType.UNCHANGED

    @staticmethod
    def _dict_to_meta(data: Any) -> DocumentMeta:
        data = data if isinstance(data, dict) else {}
        return DocumentMeta(
            document_id=_as_str(data.get("document_id")),
            hash=_as_str(data.get("hash")),
            metadata=data.get("metadata") if isinstance(data.get("metadata"), dict) else {},
            clause_count=_as_int(data.get("clause_count")),
        )

    @staticmethod
    def _dict_to_compared(data: dict[str, Any]) -> ComparedDocument:
        meta = ComparisonResponseParser._dict_to_meta(data)
        return ComparedDocument(
            document_id=meta.document_id,
            hash=meta.hash,
            metadata=meta.metadata,
            clause_count=meta.clause_count,
            key=_as_str(data.get("key")),
        )

    @staticmethod
    def _dict_to_result(data: dict[str, Any]) -> AlignedResult:
        clauses = data.get("clauses") if isinstance(data.get("clauses"), dict) else {}
        diff = data.get("diff") if isinstance(data.get("diff"), dict) else {}

        return AlignedResult(
            clause_id=_as_str(data.get("clause_id")),
            clauses=ClauseTexts(
                baseline=ComparisonResponseParser._dict_to_clause(clauses.get("baseline")),
                compare_b=ComparisonResponseParser._dict_to_clause(clauses.get("compare_b")),
                compare_c=ComparisonResponseParser._dict_to_clause(clauses.get("compare_c")),
            ),
            diff=ClauseDiff(
                against_b=ComparisonResponseParser._dict_to_diff(diff.get("against_b")),
                against_c=ComparisonResponseParser._dict_to_diff(diff.get("against_c")),
            ),
            flags=[
                SemanticFlag(flag=_as_str(f.get("flag")), reason=_as_str(f.get("reason")))
                for f in _as_list(data.get("flags"))
                if isinstance(f, dict)
            ],
        )

    @staticmethod
    def _dict_to_clause(data: Any) -> Optional[ClauseText]:
        if not isinstance(data, dict):
            return None
        position = data.get("position")
        return ClauseText(
            clause_id=_as_str(data.get("clause_id")),
            text=_as_str(data.get("text")),
            position=position if isinstance(position, int) else None,
            hash=data.get("hash"),
        )

    @staticmethod
    def _dict_to_diff(data: Any) -> Optional[DiffPair]:
        if not isinstance(data, dict):
            return None
        blocks = data.get("blocks")
        return DiffPair(
            change_type=ComparisonResponseParser.parse_change_type(data.get("change_type")),
            word_delta=_as_int(data.get("word_delta")),
            word_delta_display=_as_str(data.get("word_delta_display")),
            location_change=data.get("location_change") or None,
            blocks=blocks if isinstance(blocks, list) else None,
        )


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def parse_comparison_response(data: Any) -> ComparisonResponse:
    """Convenience function to parse a decoded comparison payload."""
    return ComparisonResponseParser.parse(data)
