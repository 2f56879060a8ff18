"""Pure state transitions of an editing session.

Every function takes a SessionState and returns a new one. Transitions that
start a network round trip also return the request to send; the caller
performs it and feeds the outcome back through the matching
``*_succeeded``/``*_failed`` transition.
"""

import logging
from dataclasses import replace
from typing import Optional

from ..composition.code_parser import compose, extract, get_combined_html
from ..decoration.margins import clamp_margins, normalize_margins
from ..decoration.template_builder import is_present
from ..exceptions import AssistInProgressError, ExportInProgressError
from ..models.conversation import AssistRequest, AssistResponse, ChatMessage
from ..models.decoration import DecorationConfig, MarginSpec
from ..models.document import SeparatedDocument
from ..models.enums import (
    AssistStatus,
    DecorationTarget,
    EditorMode,
    EditorTab,
    ExportStatus,
    MessageRole,
    SuggestionStatus,
)
from ..models.export import ExportArtifact, ExportRequest
from .state import ExportState, SessionState, SuggestionState


logger = logging.getLogger(__name__)


DEFAULT_ASSISTANT_REPLY = "I've generated a code suggestion for you."


# =========================================================================
# Document
# =========================================================================

def switch_mode(state: SessionState, mode: EditorMode) -> SessionState:
    """
    Switch the edited representation.

    Entering separated mode extracts the combined document and selects the
    markup tab; entering combined mode composes the separated fields.
    """
    document = state.document
    if mode == document.mode:
        return state

    if mode == EditorMode.SEPARATED:
        extracted = extract(document.combined)
        document = replace(
            document,
            mode=mode,
            separated=SeparatedDocument(
                markup=extracted.markup,
                style=extracted.style,
                script=extracted.script,
            ),
            active_tab=EditorTab.MARKUP,
        )
    else:
        separated = document.separated
        document = replace(
            document,
            mode=mode,
            combined=compose(separated.markup, separated.style, separated.script),
        )

    logger.debug(f"Switched editor mode to {mode.value}")
    return replace(state, document=document)


def select_tab(state: SessionState, tab: EditorTab) -> SessionState:
    """Select the separated-mode fragment that edits apply to."""
    return replace(state, document=replace(state.document, active_tab=tab))


def edit_active_representation(
    state: SessionState,
    text: str,
    tab: Optional[EditorTab] = None,
) -> SessionState:
    """
    Replace the content of the representation being edited.

    In separated mode the fragment of ``tab`` (default: the active tab) is
    replaced; the other representation is left alone until the next mode
    switch.
    """
    document = state.document
    if document.mode == EditorMode.COMBINED:
        return replace(state, document=replace(document, combined=text))

    target = tab or document.active_tab
    field_name = target.value
    separated = replace(document.separated, **{field_name: text})
    return replace(state, document=replace(document, separated=separated))


# =========================================================================
# Export configuration
# =========================================================================

def update_decoration_config(
    state: SessionState,
    target: DecorationTarget,
    config: DecorationConfig,
) -> SessionState:
    """Commit a header or footer configuration."""
    if target == DecorationTarget.HEADER:
        return replace(state, header=config)
    return replace(state, footer=config)


def update_margins(state: SessionState, margins: MarginSpec) -> SessionState:
    """Commit margins, clamped to the bounds of their unit."""
    return replace(state, margins=clamp_margins(margins))


# =========================================================================
# Export
# =========================================================================

def build_export_request(state: SessionState) -> ExportRequest:
    """Build the paginator payload for the current state."""
    return ExportRequest(
        html=get_combined_html(state.document),
        header=state.header if is_present(state.header) else None,
        footer=state.footer if is_present(state.footer) else None,
        margins=normalize_margins(state.margins),
    )


def begin_export(state: SessionState) -> tuple[SessionState, ExportRequest]:
    """
    Start an export.

    Raises:
        ExportInProgressError: If an export is already running.
    """
    if state.export.status == ExportStatus.RUNNING:
        raise ExportInProgressError("An export is already running")

    request = build_export_request(state)
    export = replace(state.export, status=ExportStatus.RUNNING, error=None)
    return replace(state, export=export), request


def export_succeeded(state: SessionState, artifact: ExportArtifact) -> SessionState:
    """Store the artifact of a finished export."""
    return replace(
        state,
        export=ExportState(status=ExportStatus.READY, artifact=artifact, error=None),
    )


def export_failed(state: SessionState, message: str) -> SessionState:
    """Record a failed export; the previous artifact stays downloadable."""
    export = replace(state.export, status=ExportStatus.ERROR, error=message)
    return replace(state, export=export)


# =========================================================================
# Assist
# =========================================================================

def update_assist_settings(
    state: SessionState,
    endpoint: Optional[str] = None,
    model: Optional[str] = None,
) -> SessionState:
    """Change the assist endpoint address and/or model identifier."""
    assist = state.assist
    if endpoint is not None:
        assist = replace(assist, endpoint=endpoint)
    if model is not None:
        assist = replace(assist, model=model)
    return replace(state, assist=assist)


def begin_assist(state: SessionState, message: str) -> tuple[SessionState, AssistRequest]:
    """
    Send a message to the assist collaborator.

    The user entry is appended immediately and any pending suggestion is
    dropped before the reply arrives.

    Raises:
        ValueError: If the message is blank.
        AssistInProgressError: If a reply is still pending.
    """
    if not message or not message.strip():
        raise ValueError("Message is required")
    if state.assist.status == AssistStatus.WAITING:
        raise AssistInProgressError("Waiting for the previous assist reply")

    request = AssistRequest(
        message=message,
        current_document=get_combined_html(state.document),
        conversation_history=state.conversation,
        endpoint=state.assist.endpoint,
        model=state.assist.model,
    )
    new_state = replace(
        state,
        assist=replace(state.assist, status=AssistStatus.WAITING, error=None),
        suggestion=SuggestionState(),
        conversation=state.conversation + (ChatMessage(MessageRole.USER, message),),
    )
    return new_state, request


def assist_succeeded(state: SessionState, response: AssistResponse) -> SessionState:
    """
    Record the assistant reply and evaluate the suggested document.

    A suggestion is only created when it differs, after trimming, from the
    document as it is now.
    """
    reply = ChatMessage(MessageRole.ASSISTANT, response.assistant_text or DEFAULT_ASSISTANT_REPLY)
    new_state = replace(
        state,
        assist=replace(state.assist, status=AssistStatus.IDLE, error=None),
        conversation=state.conversation + (reply,),
    )

    candidate = response.suggested_document or response.assistant_text
    current = get_combined_html(state.document)
    if candidate and candidate.strip() != current.strip():
        new_state = replace(
            new_state,
            suggestion=SuggestionState(
                status=SuggestionStatus.PENDING,
                candidate=candidate,
                visible=True,
            ),
        )
    return new_state


def assist_failed(state: SessionState, message: str) -> SessionState:
    """Record a failed assist request in state and in the conversation."""
    entry = ChatMessage(MessageRole.ASSISTANT, f"Error: {message}")
    return replace(
        state,
        assist=replace(state.assist, status=AssistStatus.ERROR, error=message),
        conversation=state.conversation + (entry,),
    )


# =========================================================================
# Suggestion
# =========================================================================

def accept_suggestion(state: SessionState) -> SessionState:
    """Apply the pending suggestion to the representation being edited."""
    suggestion = state.suggestion
    if suggestion.status != SuggestionStatus.PENDING or suggestion.candidate is None:
        return state

    document = state.document
    if document.mode == EditorMode.COMBINED:
        document = replace(document, combined=suggestion.candidate)
    else:
        extracted = extract(suggestion.candidate)
        document = replace(
            document,
            separated=SeparatedDocument(
                markup=extracted.markup,
                style=extracted.style,
                script=extracted.script,
            ),
        )
    return replace(state, document=document, suggestion=SuggestionState())


def reject_suggestion(state: SessionState) -> SessionState:
    """Discard the pending suggestion."""
    if state.suggestion.status != SuggestionStatus.PENDING:
        return state
    return replace(state, suggestion=SuggestionState())


def set_suggestion_visible(state: SessionState, visible: bool) -> SessionState:
    """Show or hide the pending suggestion without deciding on it."""
    if state.suggestion.status != SuggestionStatus.PENDING:
        return state
    return replace(state, suggestion=replace(state.suggestion, visible=visible))
