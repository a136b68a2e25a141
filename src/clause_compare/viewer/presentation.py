"""Display rules for comparison results.

Pure functions turning a ``ComparisonResponse`` into labels, badges and
counters. Templates only lay these values out.
"""

from typing import Dict, List, Optional, Tuple

from ..models.comparison import AlignedResult, ComparisonResponse, DiffPair, SemanticFlag
from ..models.enums import SUMMARY_ORDER, ChangeType

FLAGS_DISCLAIMER = (
    "These flags highlight changes commonly associated with legal impact "
    "and do not constitute legal advice."
)

HASH_PREFIX_LENGTH = 16

CHANGE_BORDER: Dict[ChangeType, str] = {
    ChangeType.ADDED: "row-added",
    ChangeType.REMOVED: "row-removed",
    ChangeType.MODIFIED: "row-modified",
    ChangeType.RELOCATED: "row-relocated",
    ChangeType.UNCHANGED: "row-unchanged",
}

CHANGE_BADGE: Dict[ChangeType, str] = {
    ChangeType.ADDED: "badge-added",
    ChangeType.REMOVED: "badge-removed",
    ChangeType.MODIFIED: "badge-modified",
    ChangeType.RELOCATED: "badge-relocated",
    ChangeType.UNCHANGED: "badge-unchanged",
}


def document_letter(index: int) -> str:
    """Letter of the compared document at ``index`` (0 -> B, 1 -> C, ...)."""
    return chr(66 + index)


def effective_change_type(result: AlignedResult, has_third_doc: bool) -> ChangeType:
    """
    Change type shown on a clause row.

    The diff against B wins. When three documents were compared and B is
    unchanged, a change against C is surfaced instead.
    """
    primary = result.primary_diff
    secondary = result.secondary_diff
    change_type = primary.change_type if primary else ChangeType.UNCHANGED

    if has_third_doc and change_type == ChangeType.UNCHANGED:
        if secondary is not None and secondary.change_type != ChangeType.UNCHANGED:
            return secondary.change_type
    return change_type


def word_delta_label(diff: Optional[DiffPair], letter: str) -> Optional[str]:
    """Return e.g. ``"vs B: +12 words"``; None when there is no delta to show."""
    if diff is None:
        return None
    display = diff.word_delta_display
    if not display or display == "0":
        return None
    return f"vs {letter}: {display} words"


def flag_badge(flags: List[SemanticFlag]) -> Optional[str]:
    if not flags:
        return None
    return f"{len(flags)} flag{'s' if len(flags) > 1 else ''}"


def location_shifts(result: AlignedResult) -> List[str]:
    """Location-shift notes against B and C, in that order."""
    shifts = []
    primary = result.primary_diff
    secondary = result.secondary_diff
    if primary is not None and primary.location_change:
        shifts.append(f"Location shift (vs B): {primary.location_change}")
    if secondary is not None and secondary.location_change:
        shifts.append(f"Location shift (vs C): {secondary.location_change}")
    return shifts


def summary_counts(results: List[AlignedResult]) -> List[Tuple[ChangeType, int]]:
    """
    Count clause rows per change type against B.

    Rows without a diff count as Unchanged. Every change type is listed,
    in display order, including those with a zero count.
    """
    counts = {change_type: 0 for change_type in ChangeType}
    for result in results:
        primary = result.primary_diff
        counts[primary.change_type if primary else ChangeType.UNCHANGED] += 1
    return [(change_type, counts[change_type]) for change_type in SUMMARY_ORDER]


def short_hash(value: Optional[str]) -> str:
    """First 16 characters of an audit hash, followed by an ellipsis."""
    if not value:
        return "(no hash)"
    return f"{value[:HASH_PREFIX_LENGTH]}…"


def audit_lines(response: ComparisonResponse) -> List[str]:
    """Audit trail lines: per-document clause counts and hashes, output hash, version."""
    lines = [
        f"Baseline: {response.baseline.clause_count} clauses · {short_hash(response.baseline.hash)}"
    ]
    for i, doc in enumerate(response.comparisons):
        lines.append(
            f"Document {document_letter(i)}: {doc.clause_count} clauses · {short_hash(doc.hash)}"
        )
    lines.append(f"Output hash: {short_hash(response.comparison_output_hash)}")
    lines.append(f"Version: {response.comparison_version}")
    return lines
