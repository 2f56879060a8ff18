"""Abstract interfaces for the HTML PDF Studio."""

from .paginator import IPaginator, IPdfRenderer
from .assistant import IAssistant
from .audit import AuditEvent, AuditEventType, IAuditLogger

__all__ = [
    "IPaginator",
    "IPdfRenderer",
    "IAssistant",
    "AuditEvent",
    "AuditEventType",
    "IAuditLogger",
]
