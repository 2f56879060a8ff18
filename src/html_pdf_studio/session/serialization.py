"""Serialization utilities for session state."""

from typing import Any, Optional

from ..models.conversation import ChatMessage
from ..models.decoration import DecorationConfig, MarginSpec
from ..models.enums import Alignment, MarginUnit
from .state import SessionState


class SessionSerializer:
    """
    Converts session state and its parts to and from plain dictionaries.

    Used by the configuration loader and the HTTP surface. Artifact bytes
    are never inlined; only their size and page count are reported.
    """

    @staticmethod
    def to_dict(state: SessionState) -> dict[str, Any]:
        """Convert a SessionState to a dictionary."""
        document = state.document
        artifact = state.export.artifact
        return {
            "document": {
                "mode": document.mode.value,
                "active_tab": document.active_tab.value,
                "combined": document.combined,
                "separated": {
                    "markup": document.separated.markup,
                    "style": document.separated.style,
                    "script": document.separated.script,
                },
            },
            "header": SessionSerializer.decoration_to_dict(state.header),
            "footer": SessionSerializer.decoration_to_dict(state.footer),
            "margins": SessionSerializer.margins_to_dict(state.margins),
            "export": {
                "status": state.export.status.value,
                "error": state.export.error,
                "artifact": None if artifact is None else {
                    "filename": artifact.filename,
                    "size": len(artifact),
                    "page_count": artifact.page_count,
                },
            },
            "assist": {
                "status": state.assist.status.value,
                "error": state.assist.error,
                "endpoint": state.assist.endpoint,
                "model": state.assist.model,
            },
            "suggestion": {
                "status": state.suggestion.status.value,
                "candidate": state.suggestion.candidate,
                "visible": state.suggestion.visible,
            },
            "conversation": [
                SessionSerializer.message_to_dict(m) for m in state.conversation
            ],
        }

    @staticmethod
    def decoration_to_dict(config: DecorationConfig) -> dict[str, Any]:
        """Convert a DecorationConfig to a dictionary."""
        return {
            "text": config.text,
            "is_rich_content": config.is_rich_content,
            "show_page_number": config.show_page_number,
            "show_date": config.show_date,
            "alignment": config.alignment.value,
        }

    @staticmethod
    def decoration_from_dict(
        data: Optional[dict[str, Any]],
        default: Optional[DecorationConfig] = None,
    ) -> DecorationConfig:
        """
        Build a DecorationConfig from a dictionary.

        Missing keys fall back to ``default``.

        Raises:
            ValueError: If the data is not a dictionary or the alignment is unknown.
        """
        base = default or DecorationConfig()
        if data is None:
            return base
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for decoration")

        return DecorationConfig(
            text=str(data.get("text", base.text) or ""),
            is_rich_content=bool(data.get("is_rich_content", base.is_rich_content)),
            show_page_number=bool(data.get("show_page_number", base.show_page_number)),
            show_date=bool(data.get("show_date", base.show_date)),
            alignment=Alignment(data.get("alignment", base.alignment.value)),
        )

    @staticmethod
    def margins_to_dict(margins: MarginSpec) -> dict[str, Any]:
        """Convert a MarginSpec to a dictionary."""
        return {
            "top": margins.top,
            "right": margins.right,
            "bottom": margins.bottom,
            "left": margins.left,
            "unit": margins.unit.value,
        }

    @staticmethod
    def margins_from_dict(
        data: Optional[dict[str, Any]],
        default: Optional[MarginSpec] = None,
    ) -> MarginSpec:
        """
        Build a MarginSpec from a dictionary. Values are not clamped here.

        Raises:
            ValueError: If a value is not numeric or the unit is unknown.
        """
        base = default or MarginSpec()
        if data is None:
            return base
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for margins")

        values = {}
        for side in ("top", "right", "bottom", "left"):
            raw = data.get(side, getattr(base, side))
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"Margin '{side}' must be a number")
            values[side] = float(raw)

        return MarginSpec(unit=MarginUnit(data.get("unit", base.unit.value)), **values)

    @staticmethod
    def message_to_dict(message: ChatMessage) -> dict[str, str]:
        """Convert a conversation entry to a dictionary."""
        return {"role": message.role.value, "text": message.text}
