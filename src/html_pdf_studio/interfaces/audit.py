"""Audit logger interface for the HTML PDF Studio."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class AuditEventType(Enum):
    """Types of audit events tracked by the system."""
    MODE_SWITCHED = "mode_switched"
    DECORATION_UPDATED = "decoration_updated"
    MARGINS_UPDATED = "margins_updated"
    EXPORT_REQUESTED = "export_requested"
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"
    ASSIST_REQUESTED = "assist_requested"
    ASSIST_COMPLETED = "assist_completed"
    ASSIST_FAILED = "assist_failed"
    SUGGESTION_ACCEPTED = "suggestion_accepted"
    SUGGESTION_REJECTED = "suggestion_rejected"


@dataclass
class AuditEvent:
    """
    Audit event record.

    Represents a single auditable event of an editing session.
    """
    id: str
    event_type: AuditEventType
    timestamp: datetime
    session_id: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}


class IAuditLogger(ABC):
    """
    Abstract interface for audit logging.

    Implementations of this interface handle recording and
    querying of session events.
    """

    @abstractmethod
    def log_event(self, event: AuditEvent) -> None:
        """
        Record an audit event.

        Args:
            event: The audit event to record.
        """
        pass

    @abstractmethod
    def get_events(
        self,
        session_id: Optional[str] = None,
        event_type: Optional[AuditEventType] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[AuditEvent]:
        """
        Query audit events with optional filters.

        Args:
            session_id: Filter by editing session ID.
            event_type: Filter by event type.
            start_time: Filter events after this time.
            end_time: Filter events before this time.

        Returns:
            List of matching audit events.
        """
        pass

    @abstractmethod
    def export_log(
        self,
        session_id: str,
        format: str = "json",
    ) -> str:
        """
        Export the audit log of a session.

        Args:
            session_id: The session ID to export events for.
            format: Export format ("json" or "csv").

        Returns:
            Exported log content as a string.

        Raises:
            ValueError: If format is not supported.
        """
        pass
