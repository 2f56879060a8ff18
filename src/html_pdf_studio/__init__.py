"""
HTML PDF Studio

Edit a web document as one file or as separate markup, style and script,
decorate its pages and export it as a paginated PDF, with suggestions from
a local language model.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
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
from .models.document import DocumentState, SeparatedDocument
from .models.decoration import DecorationConfig, MarginSpec
from .models.conversation import AssistRequest, AssistResponse, ChatMessage
from .models.export import ExportArtifact, ExportRequest
from .composition import build_preview_html, compose, extract, get_combined_html
from .decoration import build_templates, normalize_margins
from .session import EditorSession, SessionSerializer, SessionState
from .rendering import PdfRenderService, WeasyPrintRenderer
from .assist import OllamaAssistant
from .audit import AuditLogger, DatabaseManager
from .config import ConfigurationManager, StudioConfiguration
from .exceptions import StudioError

__all__ = [
    "__version__",
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
    "DocumentState",
    "SeparatedDocument",
    "DecorationConfig",
    "MarginSpec",
    "AssistRequest",
    "AssistResponse",
    "ChatMessage",
    "ExportArtifact",
    "ExportRequest",
    "build_preview_html",
    "compose",
    "extract",
    "get_combined_html",
    "build_templates",
    "normalize_margins",
    "EditorSession",
    "SessionSerializer",
    "SessionState",
    "PdfRenderService",
    "WeasyPrintRenderer",
    "OllamaAssistant",
    "AuditLogger",
    "DatabaseManager",
    "ConfigurationManager",
    "StudioConfiguration",
    "StudioError",
]
