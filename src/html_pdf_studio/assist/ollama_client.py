"""Ollama chat client for code assistance.

Sends the current document, the conversation so far and the user's message
to an Ollama ``/api/chat`` endpoint and turns the reply into a suggested
document.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import httpx
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..exceptions import (
    AssistConnectionError,
    AssistError,
    AssistModelNotFoundError,
    AssistResponseError,
)
from ..interfaces.assistant import IAssistant
from ..models.conversation import AssistRequest, AssistResponse


logger = logging.getLogger(__name__)


TEMPLATE_DIR = Path(__file__).parent / "templates"
CHAT_PATH = "/api/chat"
CONNECTION_ERROR_MESSAGE = (
    "Cannot connect to Ollama. Make sure Ollama is running and the endpoint is correct."
)

_HTML_FENCE_OPEN = re.compile(r"^```html\n?")
_FENCE_OPEN = re.compile(r"^```\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


@lru_cache(maxsize=1)
def _env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_system_prompt(current_document: str) -> str:
    """Render the system prompt that embeds the current document."""
    return _env().get_template("system_prompt.j2").render(current_document=current_document)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```html or ``` markdown fence from a reply."""
    cleaned = text.strip()
    if cleaned.startswith("```html"):
        return _FENCE_CLOSE.sub("", _HTML_FENCE_OPEN.sub("", cleaned))
    if cleaned.startswith("```"):
        return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned))
    return cleaned


def build_messages(request: AssistRequest) -> list[dict[str, str]]:
    """Build the chat messages: system prompt, history, then the new message."""
    return [
        {"role": "system", "content": render_system_prompt(request.current_document)},
        *(entry.to_dict() for entry in request.conversation_history),
        {"role": "user", "content": request.message},
    ]


class OllamaAssistant(IAssistant):
    """
    Assist collaborator backed by a local Ollama server.

    One HTTP request per call, no streaming and no retry. The endpoint and
    model come from each request, so one instance serves any number of
    sessions.
    """

    def __init__(
        self,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            timeout: Seconds to wait for the endpoint.
            transport: Optional httpx transport, e.g. a MockTransport in tests.
        """
        self.timeout = timeout
        self._transport = transport

    async def assist(self, request: AssistRequest) -> AssistResponse:
        if not request.message or not request.message.strip():
            raise ValueError("Message is required")

        payload = {
            "model": request.model,
            "messages": build_messages(request),
            "stream": False,
        }
        url = request.endpoint.rstrip("/") + CHAT_PATH
        logger.debug(
            f"Sending assist request to {url} with model {request.model} "
            f"({len(request.conversation_history)} history entries)"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            logger.warning(f"Assist request timed out: {e}")
            raise AssistError(
                f"Ollama did not respond within {self.timeout:g} seconds",
                details={"details": str(e)},
                status_code=504,
            ) from e
        except httpx.TransportError as e:
            logger.warning(f"Cannot reach assist endpoint {url}: {e}")
            raise AssistConnectionError(
                CONNECTION_ERROR_MESSAGE,
                details={"details": str(e)},
            ) from e

        if response.is_error:
            raise self._map_error(response, request.model)

        try:
            data = response.json()
        except ValueError as e:
            raise AssistResponseError(
                "Ollama returned a response that is not valid JSON",
                details={"details": response.text[:200]},
            ) from e

        return self._parse_reply(data)

    @staticmethod
    def _map_error(response: httpx.Response, model: str) -> AssistError:
        """Map a non-2xx response to an assist error."""
        body = response.text
        message = f"Ollama API error: {response.status_code} - {body}"

        if response.status_code == 404 and "not found" in body:
            logger.warning(f"Assist model {model} is not installed")
            tip = (
                f"\n\nTip: Make sure the model \"{model}\" is installed. "
                f"You can install it by running:\n  ollama pull {model}\n\n"
                "Or use a different model that's already installed."
            )
            return AssistModelNotFoundError(message + tip, model=model)

        logger.warning(f"Assist endpoint returned {response.status_code}")
        return AssistError(message, details={"status": response.status_code})

    @staticmethod
    def _parse_reply(data: Any) -> AssistResponse:
        """Extract reply text and the suggested document from a chat reply."""
        if not isinstance(data, dict):
            raise AssistResponseError("Ollama returned an unexpected response shape")

        message = data.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        reply = content or data.get("response") or ""
        if not isinstance(reply, str):
            raise AssistResponseError("Ollama reply content is not text")

        suggested = strip_code_fences(reply)
        logger.info(f"Received assist reply ({len(reply)} chars)")
        return AssistResponse(assistant_text=reply, suggested_document=suggested)

