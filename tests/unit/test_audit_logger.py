"""Unit tests for the Audit Logger."""

import csv
import io
import json
import uuid
from datetime import datetime, timedelta

import pytest

from html_pdf_studio.audit import AuditLogger, DatabaseManager
from html_pdf_studio.interfaces.audit import AuditEvent, AuditEventType


class MockSession:
    """Mock SQLAlchemy session for testing."""

    def __init__(self):
        self.added = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def add(self, obj):
        self.added.append(obj)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class MockContextManager:
    """Mock context manager for session."""

    def __init__(self, session):
        self._session = session

    def __enter__(self):
        return self._session

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self._session.commit()
        else:
            self._session.rollback()
        self._session.close()
        return False


class MockDatabaseManager:
    """Mock DatabaseManager for testing."""

    def __init__(self):
        self._session = MockSession()
        self.initialized = False
        self.closed = False

    def get_session(self):
        return MockContextManager(self._session)

    def init_database(self):
        self.initialized = True

    def close(self):
        self.closed = True


def make_event(event_type, session_id="session-1", timestamp=None, **details):
    return AuditEvent(
        id=str(uuid.uuid4()),
        event_type=event_type,
        timestamp=timestamp or datetime.utcnow(),
        session_id=session_id,
        details=details,
    )


@pytest.fixture
def audit_logger(tmp_path):
    db_manager = DatabaseManager(f"sqlite:///{tmp_path / 'audit.db'}")
    logger = AuditLogger(db_manager=db_manager)
    yield logger
    db_manager.close()


class TestAuditLogger:
    """Tests for AuditLogger class."""

    def test_log_event_adds_to_session(self):
        """Test that log_event adds an event to the database session."""
        db_manager = MockDatabaseManager()
        logger = AuditLogger(db_manager=db_manager)

        logger.log_event(make_event(AuditEventType.EXPORT_REQUESTED, page_format="A4"))

        assert db_manager.initialized
        assert len(db_manager._session.added) == 1
        added_model = db_manager._session.added[0]
        assert added_model.event_type == "export_requested"
        assert added_model.details == {"page_format": "A4"}
        assert db_manager._session.committed

    def test_shared_manager_not_closed(self):
        """Test that close leaves an injected manager alone."""
        db_manager = MockDatabaseManager()
        logger = AuditLogger(db_manager=db_manager)

        logger.close()

        assert db_manager.closed is False

    def test_round_trip(self, audit_logger):
        """Test that stored events are returned unchanged."""
        event = make_event(AuditEventType.MODE_SWITCHED, **{"from": "combined", "to": "separated"})

        audit_logger.log_event(event)
        events = audit_logger.get_events()

        assert len(events) == 1
        assert events[0].id == event.id
        assert events[0].event_type == AuditEventType.MODE_SWITCHED
        assert events[0].details == {"from": "combined", "to": "separated"}

    def test_filters(self, audit_logger):
        """Test filtering by session, type and time range."""
        now = datetime.utcnow()
        audit_logger.log_event(make_event(AuditEventType.EXPORT_REQUESTED, timestamp=now - timedelta(hours=2)))
        audit_logger.log_event(make_event(AuditEventType.EXPORT_COMPLETED, timestamp=now - timedelta(hours=1)))
        audit_logger.log_event(make_event(AuditEventType.EXPORT_REQUESTED, session_id="session-2", timestamp=now))

        by_session = audit_logger.get_events(session_id="session-1")
        by_type = audit_logger.get_events(event_type=AuditEventType.EXPORT_REQUESTED)
        recent = audit_logger.get_events(start_time=now - timedelta(minutes=90))

        assert [e.event_type for e in by_session] == [
            AuditEventType.EXPORT_REQUESTED,
            AuditEventType.EXPORT_COMPLETED,
        ]
        assert {e.session_id for e in by_type} == {"session-1", "session-2"}
        assert len(recent) == 2

    def test_events_ordered_oldest_first(self, audit_logger):
        """Test that events come back in chronological order."""
        now = datetime.utcnow()
        audit_logger.log_event(make_event(AuditEventType.ASSIST_COMPLETED, timestamp=now))
        audit_logger.log_event(make_event(AuditEventType.ASSIST_REQUESTED, timestamp=now - timedelta(seconds=5)))

        events = audit_logger.get_events(session_id="session-1")

        assert [e.event_type for e in events] == [
            AuditEventType.ASSIST_REQUESTED,
            AuditEventType.ASSIST_COMPLETED,
        ]


class TestAuditLoggerExport:
    """Tests for audit log export functionality."""

    def test_export_json_format(self, audit_logger):
        """Test exporting audit log in JSON format."""
        audit_logger.log_event(make_event(AuditEventType.ASSIST_REQUESTED, model="llama3.2:3b"))
        audit_logger.log_event(make_event(AuditEventType.ASSIST_FAILED, error="Cannot connect"))
        audit_logger.log_event(make_event(AuditEventType.ASSIST_REQUESTED, model="llama3.2:3b"))

        data = json.loads(audit_logger.export_log("session-1", format="json"))

        assert "export_timestamp" in data
        assert data["session_id"] == "session-1"
        assert data["event_count"] == 3
        assert data["event_counts"] == {"assist_requested": 2, "assist_failed": 1}
        assert data["events"][1]["details"] == {"error": "Cannot connect"}

    def test_export_csv_format(self, audit_logger):
        """Test exporting audit log in CSV format."""
        audit_logger.log_event(make_event(AuditEventType.SUGGESTION_ACCEPTED, mode="combined"))

        rows = list(csv.reader(io.StringIO(audit_logger.export_log("session-1", format="csv"))))

        assert rows[0] == ["id", "event_type", "timestamp", "session_id", "details"]
        assert len(rows) == 2
        assert rows[1][1] == "suggestion_accepted"
        assert json.loads(rows[1][4]) == {"mode": "combined"}

    def test_export_empty_session(self, audit_logger):
        """Test exporting a session without events."""
        data = json.loads(audit_logger.export_log("unknown"))

        assert data["event_count"] == 0
        assert data["events"] == []

    def test_export_invalid_format_raises_error(self, audit_logger):
        """Test that invalid export format raises ValueError."""
        with pytest.raises(ValueError) as exc_info:
            audit_logger.export_log("session-1", format="xml")

        assert "Unsupported export format" in str(exc_info.value)


class TestDatabaseManager:
    """Tests for the database manager."""

    def test_reopens_after_close(self, tmp_path):
        """Test that a closed manager creates a new engine on next use."""
        db_manager = DatabaseManager(f"sqlite:///{tmp_path / 'audit.db'}")
        logger = AuditLogger(db_manager=db_manager)
        logger.log_event(make_event(AuditEventType.EXPORT_REQUESTED))

        db_manager.close()

        assert len(logger.get_events(session_id="session-1")) == 1
        db_manager.close()

    def test_url_from_environment(self, monkeypatch):
        """Test that the URL falls back to STUDIO_DATABASE_URL."""
        monkeypatch.setenv("STUDIO_DATABASE_URL", "sqlite:///env.db")

        assert DatabaseManager().database_url == "sqlite:///env.db"
