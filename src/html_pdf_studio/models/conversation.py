"""Conversation models for the assist workflow."""

from dataclasses import dataclass

from .enums import MessageRole


@dataclass(frozen=True)
class ChatMessage:
    """A single entry of the conversation log."""
    role: MessageRole
    text: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the ``{role, content}`` shape used by chat endpoints."""
        return {"role": self.role.value, "content": self.text}


@dataclass(frozen=True)
class AssistRequest:
    """
    Request sent to the assist collaborator.

    ``conversation_history`` holds the log as it was before ``message``
    was appended.
    """
    message: str
    current_document: str
    conversation_history: tuple[ChatMessage, ...] = ()
    endpoint: str = "http://localhost:11434"
    model: str = "llama3.2:3b"


@dataclass(frozen=True)
class AssistResponse:
    """Reply of the assist collaborator."""
    assistant_text: str
    suggested_document: str = ""
