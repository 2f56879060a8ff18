"""Custom exceptions for the HTML PDF Studio."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class StudioError(Exception):
    """
    Base exception for studio errors.

    Carries a human-readable message plus optional details that are safe
    to return to API clients.

    Attributes:
        message: Human-readable error description.
        details: Additional error details.
    """
    message: str
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class ExportInProgressError(StudioError):
    """Raised when an export is requested while another one is running."""


@dataclass
class AssistInProgressError(StudioError):
    """Raised when an assist message is sent while a reply is pending."""


@dataclass
class NoArtifactError(StudioError):
    """Raised when downloading before any export has succeeded."""


@dataclass
class PaginatorError(StudioError):
    """
    Raised when the paginator rejects a request or fails to render.

    ``status_code`` mirrors the HTTP status the API layer should use.
    """
    status_code: int = 500


@dataclass
class AssistError(StudioError):
    """
    Base exception for assist collaborator failures.

    The message is shown to the user as an assistant-role log entry.
    """
    status_code: int = 500


@dataclass
class AssistConnectionError(AssistError):
    """Raised when the assist endpoint cannot be reached."""
    status_code: int = 503


@dataclass
class AssistModelNotFoundError(AssistError):
    """Raised when the requested model is not installed on the endpoint."""
    status_code: int = 404
    model: Optional[str] = None

    def get_recovery_suggestions(self) -> list[str]:
        """Return suggestions for recovering from this error."""
        if not self.model:
            return ["Use a model that is already installed on the endpoint"]
        return [
            f"Install the model with: ollama pull {self.model}",
            "Or use a different model that's already installed",
        ]


@dataclass
class AssistResponseError(AssistError):
    """Raised when the assist endpoint returns a body that cannot be read."""
    status_code: int = 502
