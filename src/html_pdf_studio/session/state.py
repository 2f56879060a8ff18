"""Session state models."""

from dataclasses import dataclass, field
from typing import Optional

from ..models.conversation import ChatMessage
from ..models.decoration import DEFAULT_FOOTER, DEFAULT_HEADER, DecorationConfig, MarginSpec
from ..models.document import DocumentState
from ..models.enums import AssistStatus, ExportStatus, SuggestionStatus
from ..models.export import ExportArtifact


DEFAULT_ASSIST_ENDPOINT = "http://localhost:11434"
DEFAULT_ASSIST_MODEL = "llama3.2:3b"


@dataclass(frozen=True)
class ExportState:
    """Export lifecycle plus the last artifact and error."""
    status: ExportStatus = ExportStatus.IDLE
    artifact: Optional[ExportArtifact] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class AssistState:
    """Assist lifecycle and endpoint settings."""
    status: AssistStatus = AssistStatus.IDLE
    error: Optional[str] = None
    endpoint: str = DEFAULT_ASSIST_ENDPOINT
    model: str = DEFAULT_ASSIST_MODEL


@dataclass(frozen=True)
class SuggestionState:
    """A suggested document waiting for accept or reject."""
    status: SuggestionStatus = SuggestionStatus.NONE
    candidate: Optional[str] = None
    visible: bool = False


@dataclass(frozen=True)
class SessionState:
    """
    Complete state of an editing session.

    Instances are immutable; transitions return new instances.
    """
    document: DocumentState = field(default_factory=DocumentState)
    header: DecorationConfig = DEFAULT_HEADER
    footer: DecorationConfig = DEFAULT_FOOTER
    margins: MarginSpec = field(default_factory=MarginSpec)
    export: ExportState = field(default_factory=ExportState)
    assist: AssistState = field(default_factory=AssistState)
    suggestion: SuggestionState = field(default_factory=SuggestionState)
    conversation: tuple[ChatMessage, ...] = ()
