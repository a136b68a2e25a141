"""SQLAlchemy models for the comparison audit trail."""

from datetime import datetime, timezone
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JSONType(TypeDecorator):
    """List columns (filenames, compare hashes): JSONB on PostgreSQL, JSON on SQLite."""
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        native = JSONB() if dialect.name == "postgresql" else JSON()
        return dialect.type_descriptor(native)


class Base(DeclarativeBase):
    """Declarative base of the audit schema."""


class ComparisonAuditModel(Base):
    """One relayed comparison, with the audit hashes reported by the backend."""
    __tablename__ = "comparison_audit_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    source = Column(String(16), nullable=False)
    timestamp = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    status_code = Column(Integer)
    success = Column(Boolean, nullable=False, default=False)
    filenames = Column(JSONType)
    baseline_hash = Column(String(128))
    compare_hashes = Column(JSONType)
    output_hash = Column(String(128))
    comparison_version = Column(String(64))
    error = Column(Text)

    __table_args__ = (
        CheckConstraint("source IN ('proxy', 'viewer')", name="check_audit_source"),
        Index("idx_comparison_audit_timestamp", "timestamp"),
        Index("idx_comparison_audit_source", "source"),
    )
