"""Editing session state machine."""

from .editor_session import EditorSession
from .serialization import SessionSerializer
from .state import AssistState, ExportState, SessionState, SuggestionState

__all__ = [
    "EditorSession",
    "SessionSerializer",
    "AssistState",
    "ExportState",
    "SessionState",
    "SuggestionState",
]
