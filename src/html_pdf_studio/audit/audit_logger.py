"""Audit logger implementation for the HTML PDF Studio."""

import csv
import io
import json
import uuid
from collections import Counter
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, select

from ..interfaces.audit import AuditEvent, AuditEventType, IAuditLogger
from .database import DatabaseManager
from .models import SessionEventModel


class AuditLogger(IAuditLogger):
    """
    Audit logger implementation with a SQLAlchemy backend.

    Records editing session events (mode switches, exports, assist round
    trips, suggestion decisions) and supports querying and exporting them.
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
        self._db_manager.init_database()

    def _to_model(self, event: AuditEvent) -> SessionEventModel:
        """Convert AuditEvent dataclass to SQLAlchemy model."""
        return SessionEventModel(
            id=event.id or str(uuid.uuid4()),
            event_type=event.event_type.value if isinstance(event.event_type, AuditEventType) else event.event_type,
            timestamp=event.timestamp,
            session_id=event.session_id,
            details=event.details or {},
        )

    def _from_model(self, model: SessionEventModel) -> AuditEvent:
        """Convert SQLAlchemy model to AuditEvent dataclass."""
        return AuditEvent(
            id=model.id,
            event_type=AuditEventType(model.event_type),
            timestamp=model.timestamp,
            session_id=model.session_id,
            details=model.details or {},
        )

    def log_event(self, event: AuditEvent) -> None:
        """
        Record an audit event to the database.

        Args:
            event: The audit event to record.
        """
        model = self._to_model(event)
        with self._db_manager.get_session() as session:
            session.add(model)

    def get_events(
        self,
        session_id: Optional[str] = None,
        event_type: Optional[AuditEventType] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[AuditEvent]:
        """
        Query audit events with optional filters, oldest first.

        Args:
            session_id: Filter by editing session ID.
            event_type: Filter by event type.
            start_time: Filter events after this time.
            end_time: Filter events before this time.

        Returns:
            List of matching audit events.
        """
        with self._db_manager.get_session() as session:
            query = select(SessionEventModel)

            conditions = []
            if session_id:
                conditions.append(SessionEventModel.session_id == session_id)
            if event_type:
                event_type_value = event_type.value if isinstance(event_type, AuditEventType) else event_type
                conditions.append(SessionEventModel.event_type == event_type_value)
            if start_time:
                conditions.append(SessionEventModel.timestamp >= start_time)
            if end_time:
                conditions.append(SessionEventModel.timestamp <= end_time)

            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(SessionEventModel.timestamp.asc())

            result = session.execute(query)
            models = result.scalars().all()

            return [self._from_model(m) for m in models]

    def export_log(
        self,
        session_id: str,
        format: str = "json",
    ) -> str:
        """
        Export the audit log of an editing session.

        Args:
            session_id: The session ID to export events for.
            format: Export format ("json" or "csv").

        Returns:
            Exported log content as a string.

        Raises:
            ValueError: If format is not supported.
        """
        if format not in ("json", "csv"):
            raise ValueError(f"Unsupported export format: {format}. Use 'json' or 'csv'.")

        events = self.get_events(session_id=session_id)

        if format == "json":
            return self._export_json(session_id, events)
        else:
            return self._export_csv(events)

    def _export_json(self, session_id: str, events: List[AuditEvent]) -> str:
        """Export events to JSON with per-type counts."""
        counts = Counter(e.event_type.value for e in events)
        data = {
            "export_timestamp": datetime.utcnow().isoformat(),
            "session_id": session_id,
            "event_count": len(events),
            "event_counts": dict(counts),
            "events": [
                {
                    "id": e.id,
                    "event_type": e.event_type.value,
                    "timestamp": e.timestamp.isoformat() if e.timestamp else None,
                    "session_id": e.session_id,
                    "details": e.details,
                }
                for e in events
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def _export_csv(self, events: List[AuditEvent]) -> str:
        """Export events to CSV format."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(["id", "event_type", "timestamp", "session_id", "details"])

        for e in events:
            writer.writerow([
                e.id,
                e.event_type.value,
                e.timestamp.isoformat() if e.timestamp else "",
                e.session_id or "",
                json.dumps(e.details, ensure_ascii=False),
            ])

        return output.getvalue()

    def close(self) -> None:
        """Release the database manager if this logger created it."""
        if self._owns_db_manager:
            self._db_manager.close()
