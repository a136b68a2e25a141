"""Enumerations for the Clause Compare Relay."""

from enum import Enum


class ChangeType(Enum):
    """Diff status of an aligned clause, as classified by the backend."""
    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"
    RELOCATED = "Relocated"
    UNCHANGED = "Unchanged"


# Display order of the summary counters.
SUMMARY_ORDER = [
    ChangeType.MODIFIED,
    ChangeType.ADDED,
    ChangeType.REMOVED,
    ChangeType.RELOCATED,
    ChangeType.UNCHANGED,
]


class AuditSource(Enum):
    """Client path through which a comparison was relayed."""
    PROXY = "proxy"
    VIEWER = "viewer"
