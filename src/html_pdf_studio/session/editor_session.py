"""Editing session: runs state transitions and their effects."""

import asyncio
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import anyio

from ..exceptions import AssistError, NoArtifactError, PaginatorError
from ..interfaces.assistant import IAssistant
from ..interfaces.audit import AuditEvent, AuditEventType, IAuditLogger
from ..interfaces.paginator import IPaginator
from ..models.conversation import AssistResponse
from ..models.decoration import DecorationConfig, MarginSpec
from ..models.enums import DecorationTarget, EditorMode, EditorTab
from ..models.export import ExportArtifact
from . import transitions
from .state import SessionState


logger = logging.getLogger(__name__)


EXPORT_CANCELLED_MESSAGE = "Export was cancelled"
ASSIST_CANCELLED_MESSAGE = "Request was cancelled"


class EditorSession:
    """
    A single editing session.

    Holds the current SessionState and applies transitions to it. Export
    and assist round trips are awaited here; their outcomes are applied to
    whatever the state is when they resolve, so edits made in the meantime
    are kept.
    """

    def __init__(
        self,
        paginator: IPaginator,
        assistant: IAssistant,
        audit_logger: Optional[IAuditLogger] = None,
        initial_state: Optional[SessionState] = None,
        session_id: Optional[str] = None,
    ):
        """
        Initialize the session.

        Args:
            paginator: Collaborator that renders export requests.
            assistant: Collaborator that answers assist messages.
            audit_logger: Optional audit logger for tracking session events.
            initial_state: State to start from, defaults to a fresh state.
            session_id: Identifier used in audit events.
        """
        self.paginator = paginator
        self.assistant = assistant
        self.audit_logger = audit_logger
        self.session_id = session_id or str(uuid.uuid4())
        self._state = initial_state or SessionState()

    def get_state(self) -> SessionState:
        """Get the current state."""
        return self._state

    # =========================================================================
    # Document
    # =========================================================================

    def switch_mode(self, mode: EditorMode) -> SessionState:
        """Switch between the combined and separated representations."""
        previous = self._state.document.mode
        self._state = transitions.switch_mode(self._state, mode)
        if previous != mode:
            self._log_event(
                AuditEventType.MODE_SWITCHED,
                {"from": previous.value, "to": mode.value},
            )
        return self._state

    def select_tab(self, tab: EditorTab) -> SessionState:
        """Select the fragment edited in separated mode."""
        self._state = transitions.select_tab(self._state, tab)
        return self._state

    def edit_active_representation(self, text: str, tab: Optional[EditorTab] = None) -> SessionState:
        """Replace the content of the active representation."""
        self._state = transitions.edit_active_representation(self._state, text, tab)
        return self._state

    # =========================================================================
    # Export settings
    # =========================================================================

    def update_decoration_config(self, target: DecorationTarget, config: DecorationConfig) -> SessionState:
        """Commit a header or footer configuration."""
        self._state = transitions.update_decoration_config(self._state, target, config)
        self._log_event(
            AuditEventType.DECORATION_UPDATED,
            {"target": target.value, "present": config.is_present},
        )
        return self._state

    def update_margins(self, margins: MarginSpec) -> SessionState:
        """Commit margins; values are clamped to their unit's bounds."""
        self._state = transitions.update_margins(self._state, margins)
        committed = self._state.margins
        self._log_event(
            AuditEventType.MARGINS_UPDATED,
            {"unit": committed.unit.value, "values": list(committed.values())},
        )
        return self._state

    # =========================================================================
    # Export
    # =========================================================================

    async def request_export(self) -> Optional[ExportArtifact]:
        """
        Export the current document.

        Returns:
            The artifact, or None when the paginator failed. The failure is
            recorded in the export state.

        Raises:
            ExportInProgressError: If an export is already running.
        """
        self._state, request = transitions.begin_export(self._state)

        try:
            await self._record_event(
                AuditEventType.EXPORT_REQUESTED,
                {
                    "size": len(request.html),
                    "header": request.header is not None,
                    "footer": request.footer is not None,
                },
            )
            artifact = await self.paginator.paginate(request)
        except PaginatorError as e:
            await self._fail_export(e.message, e.details)
            return None
        except Exception as e:
            logger.error(f"Unexpected export failure: {e}", exc_info=True)
            await self._fail_export(str(e) or "Failed to generate PDF", {})
            return None
        except asyncio.CancelledError:
            logger.warning("Export cancelled before the paginator replied")
            self._state = transitions.export_failed(self._state, EXPORT_CANCELLED_MESSAGE)
            raise

        self._state = transitions.export_succeeded(self._state, artifact)
        logger.info(f"Export finished ({len(artifact)} bytes)")
        await self._record_event(
            AuditEventType.EXPORT_COMPLETED,
            {"size": len(artifact), "page_count": artifact.page_count},
        )
        return artifact

    async def _fail_export(self, message: str, details: Optional[dict]) -> None:
        logger.warning(f"Export failed: {message}")
        self._state = transitions.export_failed(self._state, message)
        await self._record_event(AuditEventType.EXPORT_FAILED, {"error": message, **(details or {})})

    def download_last_artifact(
        self,
        destination: Optional[Union[str, Path]] = None,
    ) -> ExportArtifact:
        """
        Get the last exported artifact, optionally writing it to disk.

        Args:
            destination: File path, or a directory to write the artifact's
                filename into.

        Returns:
            The last artifact.

        Raises:
            NoArtifactError: If no export has succeeded yet.
        """
        artifact = self._state.export.artifact
        if artifact is None:
            raise NoArtifactError("No exported document is available")

        if destination is not None:
            path = Path(destination)
            if path.is_dir():
                path = path / artifact.filename
            path.write_bytes(artifact.pdf_bytes)
            logger.info(f"Wrote {len(artifact)} bytes to {path}")

        return artifact

    # =========================================================================
    # Assist
    # =========================================================================

    def update_assist_settings(
        self,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
    ) -> SessionState:
        """Change the assist endpoint and/or model."""
        self._state = transitions.update_assist_settings(self._state, endpoint, model)
        return self._state

    async def send_assist_message(self, message: str) -> Optional[AssistResponse]:
        """
        Send a message to the assist collaborator.

        Returns:
            The response, or None when the request failed. The failure is
            recorded in the assist state and the conversation.

        Raises:
            ValueError: If the message is blank.
            AssistInProgressError: If a reply is still pending.
        """
        self._state, request = transitions.begin_assist(self._state, message)

        try:
            await self._record_event(
                AuditEventType.ASSIST_REQUESTED,
                {"model": request.model, "history": len(request.conversation_history)},
            )
            response = await self.assistant.assist(request)
        except AssistError as e:
            await self._fail_assist(e.message)
            return None
        except Exception as e:
            logger.error(f"Unexpected assist failure: {e}", exc_info=True)
            await self._fail_assist(str(e) or "Failed to get AI assistance")
            return None
        except asyncio.CancelledError:
            logger.warning("Assist request cancelled before the assistant replied")
            self._state = transitions.assist_failed(self._state, ASSIST_CANCELLED_MESSAGE)
            raise

        self._state = transitions.assist_succeeded(self._state, response)
        await self._record_event(
            AuditEventType.ASSIST_COMPLETED,
            {"suggestion": self._state.suggestion.status.value},
        )
        return response

    async def _fail_assist(self, message: str) -> None:
        logger.warning(f"Assist request failed: {message}")
        self._state = transitions.assist_failed(self._state, message)
        await self._record_event(AuditEventType.ASSIST_FAILED, {"error": message})

    # =========================================================================
    # Suggestion
    # =========================================================================

    def accept_suggestion(self) -> SessionState:
        """Apply the pending suggestion; no-op when none is pending."""
        pending = self._state.suggestion.candidate is not None
        self._state = transitions.accept_suggestion(self._state)
        if pending:
            self._log_event(
                AuditEventType.SUGGESTION_ACCEPTED,
                {"mode": self._state.document.mode.value},
            )
        return self._state

    def reject_suggestion(self) -> SessionState:
        """Discard the pending suggestion; no-op when none is pending."""
        pending = self._state.suggestion.candidate is not None
        self._state = transitions.reject_suggestion(self._state)
        if pending:
            self._log_event(AuditEventType.SUGGESTION_REJECTED, {})
        return self._state

    def set_suggestion_visible(self, visible: bool) -> SessionState:
        """Show or hide the pending suggestion."""
        self._state = transitions.set_suggestion_visible(self._state, visible)
        return self._state

    # =========================================================================
    # Audit
    # =========================================================================

    def _log_event(self, event_type: AuditEventType, details: dict) -> None:
        """Record an audit event; audit failures never interrupt editing."""
        if self.audit_logger is None:
            return
        event = AuditEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            timestamp=datetime.utcnow(),
            session_id=self.session_id,
            details=details,
        )
        try:
            self.audit_logger.log_event(event)
        except Exception as e:
            logger.warning(f"Could not record audit event {event_type.value}: {e}")

    async def _record_event(self, event_type: AuditEventType, details: dict) -> None:
        """Record an audit event from a coroutine; the write runs in a worker thread."""
        if self.audit_logger is None:
            return
        await anyio.to_thread.run_sync(self._log_event, event_type, details)
