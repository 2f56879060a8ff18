"""Unit tests for the session state transitions."""

from dataclasses import replace

import pytest

from html_pdf_studio.composition.code_parser import get_combined_html
from html_pdf_studio.exceptions import AssistInProgressError, ExportInProgressError
from html_pdf_studio.models.conversation import AssistResponse, ChatMessage
from html_pdf_studio.models.decoration import DecorationConfig, MarginSpec
from html_pdf_studio.models.document import DocumentState, SeparatedDocument
from html_pdf_studio.models.enums import (
    AssistStatus,
    DecorationTarget,
    EditorMode,
    EditorTab,
    ExportStatus,
    MarginUnit,
    MessageRole,
    SuggestionStatus,
)
from html_pdf_studio.models.export import ExportArtifact
from html_pdf_studio.session import transitions
from html_pdf_studio.session.state import SessionState, SuggestionState


DOCUMENT = """<!DOCTYPE html>
<html>
<head>
    <style>
        p { color: red; }
    </style>
</head>
<body>
    <p>Hello</p>
</body>
</html>"""


@pytest.fixture
def state():
    return SessionState(document=DocumentState(combined=DOCUMENT))


@pytest.fixture
def separated_state(state):
    return transitions.switch_mode(state, EditorMode.SEPARATED)


class TestModeSwitching:
    """Test combined/separated transitions."""

    def test_switch_to_separated_extracts(self, state):
        """Test that entering separated mode fills the fragments."""
        result = transitions.switch_mode(state, EditorMode.SEPARATED)

        assert result.document.mode == EditorMode.SEPARATED
        assert result.document.separated.style == "p { color: red; }"
        assert "<p>Hello</p>" in result.document.separated.markup
        assert result.document.active_tab == EditorTab.MARKUP

    def test_switch_to_separated_resets_tab(self, state):
        """Test that the markup tab is selected on entry."""
        state = transitions.select_tab(state, EditorTab.SCRIPT)

        result = transitions.switch_mode(state, EditorMode.SEPARATED)

        assert result.document.active_tab == EditorTab.MARKUP

    def test_switch_back_composes(self, separated_state):
        """Test that returning to combined mode composes the fragments."""
        edited = transitions.edit_active_representation(separated_state, "h1 {}", EditorTab.STYLE)

        result = transitions.switch_mode(edited, EditorMode.COMBINED)

        assert result.document.mode == EditorMode.COMBINED
        assert "h1 {}" in result.document.combined
        assert "p { color: red; }" not in result.document.combined

    def test_same_mode_is_noop(self, state):
        """Test that switching to the current mode returns the same state."""
        assert transitions.switch_mode(state, EditorMode.COMBINED) is state


class TestEditing:
    """Test editing the active representation."""

    def test_edit_combined(self, state):
        """Test that combined edits replace the combined document."""
        result = transitions.edit_active_representation(state, "<p>new</p>")

        assert result.document.combined == "<p>new</p>"

    def test_edit_active_tab(self, separated_state):
        """Test that separated edits go to the active tab."""
        state = transitions.select_tab(separated_state, EditorTab.SCRIPT)

        result = transitions.edit_active_representation(state, "go();")

        assert result.document.separated.script == "go();"
        assert result.document.separated.style == "p { color: red; }"

    def test_separated_edit_leaves_combined(self, separated_state):
        """Test that the combined field is only refreshed on a mode switch."""
        result = transitions.edit_active_representation(separated_state, "<p>x</p>")

        assert result.document.combined == DOCUMENT
        assert "<p>x</p>" in get_combined_html(result.document)


class TestExportTransitions:
    """Test the export lifecycle."""

    def test_begin_export_builds_request(self, state):
        """Test the request payload: present decorations and mm margins."""
        state = replace(
            state,
            header=DecorationConfig(),
            footer=DecorationConfig(text="Co", show_page_number=True),
            margins=MarginSpec(1, 1, 1, 1, MarginUnit.IN),
        )

        new_state, request = transitions.begin_export(state)

        assert new_state.export.status == ExportStatus.RUNNING
        assert request.html == DOCUMENT
        assert request.header is None
        assert request.footer.text == "Co"
        assert request.margins.unit == MarginUnit.MM
        assert request.margins.top == pytest.approx(25.4)

    def test_second_export_rejected(self, state):
        """Test that only one export may run."""
        running, _ = transitions.begin_export(state)

        with pytest.raises(ExportInProgressError):
            transitions.begin_export(running)

    def test_export_success(self, state):
        """Test that success stores the artifact."""
        running, _ = transitions.begin_export(state)
        artifact = ExportArtifact(pdf_bytes=b"%PDF-1.4")

        result = transitions.export_succeeded(running, artifact)

        assert result.export.status == ExportStatus.READY
        assert result.export.artifact is artifact
        assert result.export.error is None

    def test_export_failure_keeps_previous_artifact(self, state):
        """Test that failure records the message and keeps the last artifact."""
        artifact = ExportArtifact(pdf_bytes=b"%PDF-1.4")
        ready = transitions.export_succeeded(state, artifact)
        running, _ = transitions.begin_export(ready)

        result = transitions.export_failed(running, "boom")

        assert result.export.status == ExportStatus.ERROR
        assert result.export.error == "boom"
        assert result.export.artifact is artifact

    def test_export_allowed_after_error(self, state):
        """Test that a failed export can be retried."""
        running, _ = transitions.begin_export(state)
        failed = transitions.export_failed(running, "boom")

        retried, _ = transitions.begin_export(failed)

        assert retried.export.status == ExportStatus.RUNNING
        assert retried.export.error is None


class TestExportSettings:
    """Test decoration and margin updates."""

    def test_update_header_and_footer(self, state):
        """Test that each target is updated independently."""
        header = DecorationConfig(text="Top")
        footer = DecorationConfig(show_date=True)

        result = transitions.update_decoration_config(state, DecorationTarget.HEADER, header)
        result = transitions.update_decoration_config(result, DecorationTarget.FOOTER, footer)

        assert result.header == header
        assert result.footer == footer

    def test_update_margins_clamps(self, state):
        """Test that margins are clamped when written."""
        result = transitions.update_margins(state, MarginSpec(9, 1, 1, 1, MarginUnit.CM))

        assert result.margins.top == 5
        assert result.margins.unit == MarginUnit.CM


class TestAssistTransitions:
    """Test the assist lifecycle and suggestions."""

    def test_begin_assist_appends_user_entry(self, state):
        """Test that the user entry is logged at send time."""
        state = replace(state, conversation=(ChatMessage(MessageRole.USER, "earlier"),))

        new_state, request = transitions.begin_assist(state, "make it blue")

        assert new_state.assist.status == AssistStatus.WAITING
        assert new_state.conversation[-1] == ChatMessage(MessageRole.USER, "make it blue")
        assert request.conversation_history == (ChatMessage(MessageRole.USER, "earlier"),)
        assert request.current_document == DOCUMENT
        assert request.model == state.assist.model

    def test_begin_assist_resets_suggestion(self, state):
        """Test that a pending suggestion is dropped by a new request."""
        state = replace(state, suggestion=SuggestionState(SuggestionStatus.PENDING, "<p/>", True))

        new_state, _ = transitions.begin_assist(state, "again")

        assert new_state.suggestion.status == SuggestionStatus.NONE
        assert new_state.suggestion.candidate is None

    def test_blank_message_rejected(self, state):
        """Test that blank messages are not sent."""
        with pytest.raises(ValueError):
            transitions.begin_assist(state, "   ")

    def test_second_request_rejected(self, state):
        """Test that only one assist request may be pending."""
        waiting, _ = transitions.begin_assist(state, "one")

        with pytest.raises(AssistInProgressError):
            transitions.begin_assist(waiting, "two")

    def test_success_creates_suggestion(self, state):
        """Test that a different document becomes a pending suggestion."""
        waiting, _ = transitions.begin_assist(state, "change")
        response = AssistResponse(assistant_text="<p>New</p>", suggested_document="<p>New</p>")

        result = transitions.assist_succeeded(waiting, response)

        assert result.assist.status == AssistStatus.IDLE
        assert result.suggestion.status == SuggestionStatus.PENDING
        assert result.suggestion.candidate == "<p>New</p>"
        assert result.suggestion.visible is True
        assert result.conversation[-1] == ChatMessage(MessageRole.ASSISTANT, "<p>New</p>")

    def test_identical_response_creates_no_suggestion(self, state):
        """Test that a reply equal to the document after trimming is ignored."""
        waiting, _ = transitions.begin_assist(state, "nothing")
        response = AssistResponse(assistant_text="same", suggested_document=f"\n  {DOCUMENT}  \n")

        result = transitions.assist_succeeded(waiting, response)

        assert result.suggestion.status == SuggestionStatus.NONE

    def test_empty_reply_uses_default_text(self, state):
        """Test the fallback assistant entry."""
        waiting, _ = transitions.begin_assist(state, "hi")

        result = transitions.assist_succeeded(waiting, AssistResponse(assistant_text=""))

        assert result.conversation[-1].text == transitions.DEFAULT_ASSISTANT_REPLY
        assert result.suggestion.status == SuggestionStatus.NONE

    def test_reply_text_used_as_candidate(self, state):
        """Test that the reply text is the candidate when no document is suggested."""
        waiting, _ = transitions.begin_assist(state, "hi")

        result = transitions.assist_succeeded(waiting, AssistResponse(assistant_text="<p>B</p>"))

        assert result.suggestion.candidate == "<p>B</p>"

    def test_failure_logs_error_entry(self, state):
        """Test that failures are shown as assistant entries."""
        waiting, _ = transitions.begin_assist(state, "hi")

        result = transitions.assist_failed(waiting, "Cannot connect")

        assert result.assist.status == AssistStatus.ERROR
        assert result.assist.error == "Cannot connect"
        assert result.conversation[-1] == ChatMessage(MessageRole.ASSISTANT, "Error: Cannot connect")

    def test_update_assist_settings(self, state):
        """Test that endpoint and model can be changed separately."""
        result = transitions.update_assist_settings(state, model="qwen2.5:7b")

        assert result.assist.model == "qwen2.5:7b"
        assert result.assist.endpoint == state.assist.endpoint


class TestSuggestionTransitions:
    """Test accepting and rejecting suggestions."""

    def _pending(self, state, candidate):
        return replace(state, suggestion=SuggestionState(SuggestionStatus.PENDING, candidate, True))

    def test_accept_in_combined_mode(self, state):
        """Test that accepting replaces the combined document."""
        result = transitions.accept_suggestion(self._pending(state, "<p>New</p>"))

        assert result.document.combined == "<p>New</p>"
        assert result.suggestion.status == SuggestionStatus.NONE

    def test_accept_in_separated_mode_extracts(self, separated_state):
        """Test that accepting in separated mode re-extracts the fragments."""
        candidate = "<html><head><style>b {}</style></head><body>N</body></html>"

        result = transitions.accept_suggestion(self._pending(separated_state, candidate))

        assert result.document.separated.style == "b {}"
        assert "<body>N</body>" in result.document.separated.markup
        assert result.document.mode == EditorMode.SEPARATED

    def test_reject_discards(self, state):
        """Test that rejecting leaves the document unchanged."""
        result = transitions.reject_suggestion(self._pending(state, "<p>New</p>"))

        assert result.document.combined == DOCUMENT
        assert result.suggestion == SuggestionState()

    def test_accept_and_reject_without_suggestion_are_noops(self, state):
        """Test that deciding with nothing pending changes nothing."""
        assert transitions.accept_suggestion(state) is state
        assert transitions.reject_suggestion(state) is state

    def test_set_visibility(self, state):
        """Test that visibility only applies to pending suggestions."""
        pending = self._pending(state, "<p>New</p>")

        hidden = transitions.set_suggestion_visible(pending, False)

        assert hidden.suggestion.visible is False
        assert hidden.suggestion.status == SuggestionStatus.PENDING
        assert transitions.set_suggestion_visible(state, True) is state
