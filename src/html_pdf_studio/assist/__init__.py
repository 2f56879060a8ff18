"""Code assistance through a local language model."""

from .ollama_client import (
    OllamaAssistant,
    build_messages,
    render_system_prompt,
    strip_code_fences,
)

__all__ = [
    "OllamaAssistant",
    "build_messages",
    "render_system_prompt",
    "strip_code_fences",
]
