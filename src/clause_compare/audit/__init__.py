"""Audit trail for relayed comparisons."""

from .audit_logger import ComparisonAuditLogger
from .database import DatabaseManager
from .events import ComparisonAuditEvent
from .models import Base, ComparisonAuditModel

__all__ = [
    "ComparisonAuditLogger",
    "DatabaseManager",
    "ComparisonAuditEvent",
    "Base",
    "ComparisonAuditModel",
]
