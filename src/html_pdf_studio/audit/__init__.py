"""Audit module for the HTML PDF Studio."""

from .audit_logger import AuditLogger
from .database import DatabaseManager, get_database_url
from .models import (
    SessionEventModel,
    Base,
)

__all__ = [
    "AuditLogger",
    "DatabaseManager",
    "get_database_url",
    "SessionEventModel",
    "Base",
]
