"""Data models for the HTML PDF Studio."""

from .enums import (
    Alignment,
    AssistStatus,
    DecorationTarget,
    EditorMode,
    EditorTab,
    ExportStatus,
    MarginUnit,
    MessageRole,
    SuggestionStatus,
    Theme,
)
from .document import DEFAULT_COMBINED_DOCUMENT, DocumentState, SeparatedDocument
from .decoration import (
    DEFAULT_FOOTER,
    DEFAULT_HEADER,
    MARGIN_LIMITS,
    MM_PER_UNIT,
    DecorationConfig,
    MarginSpec,
)
from .conversation import AssistRequest, AssistResponse, ChatMessage
from .export import ExportArtifact, ExportRequest, PageOptions

__all__ = [
    "Alignment",
    "AssistStatus",
    "DecorationTarget",
    "EditorMode",
    "EditorTab",
    "ExportStatus",
    "MarginUnit",
    "MessageRole",
    "SuggestionStatus",
    "Theme",
    "DEFAULT_COMBINED_DOCUMENT",
    "DocumentState",
    "SeparatedDocument",
    "DEFAULT_FOOTER",
    "DEFAULT_HEADER",
    "MARGIN_LIMITS",
    "MM_PER_UNIT",
    "DecorationConfig",
    "MarginSpec",
    "AssistRequest",
    "AssistResponse",
    "ChatMessage",
    "ExportArtifact",
    "ExportRequest",
    "PageOptions",
]
