"""Enumerations for the HTML PDF Studio."""

from enum import Enum


class EditorMode(Enum):
    """Which document representation is the edit target."""
    COMBINED = "combined"
    SEPARATED = "separated"


class EditorTab(Enum):
    """Sub-tabs of the separated editor."""
    MARKUP = "markup"
    STYLE = "style"
    SCRIPT = "script"


class Alignment(Enum):
    """Horizontal alignment of a header or footer."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class MarginUnit(Enum):
    """Physical units accepted for page margins."""
    MM = "mm"
    CM = "cm"
    IN = "in"


class DecorationTarget(Enum):
    """Page decoration slots."""
    HEADER = "header"
    FOOTER = "footer"


class MessageRole(Enum):
    """Author of a conversation entry."""
    USER = "user"
    ASSISTANT = "assistant"


class ExportStatus(Enum):
    """Lifecycle of the export request."""
    IDLE = "idle"
    RUNNING = "running"
    ERROR = "error"
    READY = "ready"


class AssistStatus(Enum):
    """Lifecycle of the assist request."""
    IDLE = "idle"
    WAITING = "waiting"
    ERROR = "error"


class SuggestionStatus(Enum):
    """Whether a suggested document is waiting for a decision."""
    NONE = "none"
    PENDING = "pending"


class Theme(Enum):
    """Preview color scheme."""
    LIGHT = "light"
    DARK = "dark"
