"""Audit logger for relayed comparisons."""

import csv
import io
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from ..models.enums import AuditSource
from .database import DatabaseManager
from .events import ComparisonAuditEvent
from .models import ComparisonAuditModel

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "id",
    "source",
    "timestamp",
    "status_code",
    "success",
    "filenames",
    "baseline_hash",
    "compare_hashes",
    "output_hash",
    "comparison_version",
    "error",
]


class ComparisonAuditLogger:
    """
    Audit logger with a SQLAlchemy backend.

    Records every comparison relayed through the proxy or the viewer so
    the backend's audit hashes can be traced later. Recording failures
    are logged and swallowed so auditing never blocks a comparison.
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        database_url: Optional[str] = None,
    ):
        """
        Initialize the audit logger.

        Args:
            db_manager: Optional DatabaseManager instance. If not provided,
                       a new one will be created.
            database_url: Database URL for creating a new DatabaseManager.
        """
        if db_manager is not None:
            self._db_manager = db_manager
            self._owns_db_manager = False
        else:
            self._db_manager = DatabaseManager(database_url=database_url)
            self._owns_db_manager = True

    def init_storage(self) -> None:
        """Create the audit tables if needed."""
        self._db_manager.init_database()

    def _to_model(self, event: ComparisonAuditEvent) -> ComparisonAuditModel:
        """Convert ComparisonAuditEvent dataclass to SQLAlchemy model."""
        return ComparisonAuditModel(
            id=event.id,
            source=event.source.value,
            timestamp=event.timestamp,
            status_code=event.status_code,
            success=event.success,
            filenames=event.filenames or [],
            baseline_hash=event.baseline_hash,
            compare_hashes=event.compare_hashes or [],
            output_hash=event.output_hash,
            comparison_version=event.comparison_version,
            error=event.error,
        )

    def _from_model(self, model: ComparisonAuditModel) -> ComparisonAuditEvent:
        """Convert SQLAlchemy model to ComparisonAuditEvent dataclass."""
        timestamp = model.timestamp
        if timestamp is not None and timestamp.tzinfo is None:
            # SQLite returns naive datetimes
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return ComparisonAuditEvent(
            id=model.id,
            source=AuditSource(model.source),
            timestamp=timestamp,
            status_code=model.status_code,
            success=bool(model.success),
            filenames=model.filenames or [],
            baseline_hash=model.baseline_hash,
            compare_hashes=model.compare_hashes or [],
            output_hash=model.output_hash,
            comparison_version=model.comparison_version,
            error=model.error,
        )

    def record(self, event: ComparisonAuditEvent) -> bool:
        """
        Record an audit event.

        Returns:
            True if the event was stored, False if storage failed.
        """
        try:
            with self._db_manager.get_session() as session:
                session.add(self._to_model(event))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to record comparison audit event {event.id}: {e}")
            return False
        return True

    def get_events(
        self,
        source: Optional[AuditSource] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ComparisonAuditEvent]:
        """
        Query audit events with optional filters, newest first.

        Args:
            source: Filter by relay path.
            start_time: Filter events at or after this time.
            end_time: Filter events at or before this time.
            limit: Maximum number of events to return.
        """
        with self._db_manager.get_session() as session:
            query = select(ComparisonAuditModel)

            conditions = []
            if source:
                conditions.append(ComparisonAuditModel.source == source.value)
            if start_time:
                conditions.append(ComparisonAuditModel.timestamp >= start_time)
            if end_time:
                conditions.append(ComparisonAuditModel.timestamp <= end_time)

            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(ComparisonAuditModel.timestamp.desc())
            if limit:
                query = query.limit(limit)

            result = session.execute(query)
            models = result.scalars().all()

            return [self._from_model(m) for m in models]

    def export_log(
        self,
        format: str = "json",
        source: Optional[AuditSource] = None,
    ) -> str:
        """
        Export the audit log.

        Args:
            format: Export format ("json" or "csv").
            source: Optional relay path filter.

        Returns:
            Exported log content as a string.

        Raises:
            ValueError: If format is not supported.
        """
        if format not in ("json", "csv"):
            raise ValueError(f"Unsupported export format: {format}. Use 'json' or 'csv'.")

        events = self.get_events(source=source)

        if format == "json":
            return self._export_json(events)
        else:
            return self._export_csv(events)

    def _export_json(self, events: List[ComparisonAuditEvent]) -> str:
        data = {
            "export_timestamp": datetime.now(timezone.utc).isoformat(),
            "event_count": len(events),
            "failed_count": sum(1 for e in events if not e.success),
            "events": [e.to_dict() for e in events],
        }
        return json.dumps(data, ensure_ascii=False, indent=2)

    def _export_csv(self, events: List[ComparisonAuditEvent]) -> str:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for e in events:
            row = e.to_dict()
            row["filenames"] = ";".join(e.filenames)
            row["compare_hashes"] = ";".join(e.compare_hashes)
            writer.writerow(row)
        return output.getvalue()

    def health_check(self) -> bool:
        """Check that the audit database answers."""
        return self._db_manager.health_check()

    def close(self) -> None:
        """Release the database connection if this logger owns it."""
        if self._owns_db_manager:
            self._db_manager.close()
