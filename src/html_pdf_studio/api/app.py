"""FastAPI application for the HTML PDF Studio.

This module exposes the paginator and the assist client over HTTP, plus a
single process-wide editing session.

Usage (from project root, after installing the package):

    uvicorn html_pdf_studio.api.app:app --reload

Then POST a document to /api/generate-pdf, or drive the session through
the /api/session routes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from ..assist.ollama_client import OllamaAssistant
from ..audit.audit_logger import AuditLogger
from ..composition.code_parser import get_combined_html
from ..composition.preview import build_preview_html
from ..config.config_manager import ConfigurationManager
from ..decoration.margins import clamp_margins, normalize_margins
from ..exceptions import (
    AssistError,
    AssistInProgressError,
    AssistModelNotFoundError,
    ExportInProgressError,
    NoArtifactError,
    PaginatorError,
)
from ..interfaces.assistant import IAssistant
from ..interfaces.audit import IAuditLogger
from ..interfaces.paginator import IPaginator
from ..models.conversation import AssistRequest, ChatMessage
from ..models.decoration import DecorationConfig, MarginSpec
from ..models.enums import (
    Alignment,
    DecorationTarget,
    EditorMode,
    EditorTab,
    MarginUnit,
    MessageRole,
    Theme,
)
from ..models.export import ExportArtifact, ExportRequest
from ..rendering.pdf_service import PdfRenderService
from ..session.editor_session import EditorSession
from ..session.serialization import SessionSerializer
from ..session.state import DEFAULT_ASSIST_ENDPOINT, DEFAULT_ASSIST_MODEL


logger = logging.getLogger(__name__)


# =========================================================================
# Request bodies
# =========================================================================

class DecorationPayload(BaseModel):
    """Header or footer settings; accepts camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    is_rich_content: bool = Field(False, alias="isRichContent")
    show_page_number: bool = Field(False, alias="showPageNumber")
    show_date: bool = Field(False, alias="showDate")
    alignment: Alignment = Alignment.CENTER

    def to_config(self) -> DecorationConfig:
        return DecorationConfig(
            text=self.text,
            is_rich_content=self.is_rich_content,
            show_page_number=self.show_page_number,
            show_date=self.show_date,
            alignment=self.alignment,
        )


class MarginsPayload(BaseModel):
    top: float = 20.0
    right: float = 20.0
    bottom: float = 20.0
    left: float = 20.0
    unit: MarginUnit = MarginUnit.MM

    def to_spec(self) -> MarginSpec:
        return MarginSpec(
            top=self.top,
            right=self.right,
            bottom=self.bottom,
            left=self.left,
            unit=self.unit,
        )


class GeneratePdfPayload(BaseModel):
    html: Optional[str] = None
    header: Optional[DecorationPayload] = None
    footer: Optional[DecorationPayload] = None
    margins: Optional[MarginsPayload] = None


class HistoryEntry(BaseModel):
    role: MessageRole
    content: str = ""


class AiAssistPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    current_code: str = Field("", alias="currentCode")
    conversation_history: list[HistoryEntry] = Field(default_factory=list, alias="conversationHistory")
    endpoint: Optional[str] = None
    model: Optional[str] = None


class ModePayload(BaseModel):
    mode: EditorMode
    tab: Optional[EditorTab] = None


class ContentPayload(BaseModel):
    text: str
    tab: Optional[EditorTab] = None


class AssistMessagePayload(BaseModel):
    message: str = ""


class AssistSettingsPayload(BaseModel):
    endpoint: Optional[str] = None
    model: Optional[str] = None


class VisibilityPayload(BaseModel):
    visible: bool


# =========================================================================
# Helpers
# =========================================================================

def _pdf_response(artifact: ExportArtifact) -> Response:
    return Response(
        content=artifact.pdf_bytes,
        media_type=artifact.content_type,
        headers={"Content-Disposition": f"inline; filename={artifact.filename}"},
    )


def _assist_error_response(error: AssistError) -> JSONResponse:
    """Map an assist error to the JSON body returned to clients."""
    if isinstance(error, AssistModelNotFoundError):
        content = {"error": error.message, "suggestions": error.get_recovery_suggestions()}
    elif error.status_code == 503:
        content = {"error": error.message, "details": error.details.get("details")}
    else:
        content = {"error": "Failed to get AI assistance", "details": error.message}
    return JSONResponse(status_code=error.status_code, content=content)


def _state_payload(session: EditorSession) -> dict:
    payload = SessionSerializer.to_dict(session.get_state())
    payload["session_id"] = session.session_id
    return payload


def get_session(request: Request) -> EditorSession:
    """Dependency returning the process-wide editing session."""
    return request.app.state.session


# =========================================================================
# Application factory
# =========================================================================

def create_app(
    config_manager: Optional[ConfigurationManager] = None,
    paginator: Optional[IPaginator] = None,
    assistant: Optional[IAssistant] = None,
    audit_logger: Optional[IAuditLogger] = None,
) -> FastAPI:
    """
    Build the application and its editing session.

    Collaborators not given are created from the configuration, which in
    turn picks up ``STUDIO_*`` environment overrides.
    """
    if config_manager is None:
        config_manager = ConfigurationManager()
        config_manager.apply_environment()
    configuration = config_manager.configuration

    paginator = paginator or PdfRenderService(page_format=configuration.page_format)
    assistant = assistant or OllamaAssistant(timeout=configuration.assist_timeout)
    if audit_logger is None and configuration.enable_audit:
        audit_logger = AuditLogger(database_url=configuration.database_url)

    app = FastAPI(title="HTML PDF Studio API", version="0.1.0")
    app.state.paginator = paginator
    app.state.assistant = assistant
    app.state.session = EditorSession(
        paginator=paginator,
        assistant=assistant,
        audit_logger=audit_logger,
        initial_state=config_manager.create_initial_state(),
    )

    @app.post("/api/generate-pdf")
    async def generate_pdf(payload: GeneratePdfPayload) -> Response:
        """Render a document with optional header, footer and margins."""
        if not payload.html:
            return JSONResponse(status_code=400, content={"error": "HTML content is required"})

        header = payload.header.to_config() if payload.header else None
        footer = payload.footer.to_config() if payload.footer else None
        request = ExportRequest(
            html=payload.html,
            header=header if header is not None and header.is_present else None,
            footer=footer if footer is not None and footer.is_present else None,
            margins=normalize_margins(clamp_margins(payload.margins.to_spec())) if payload.margins else None,
        )

        try:
            artifact = await app.state.paginator.paginate(request)
        except PaginatorError as e:
            return JSONResponse(
                status_code=e.status_code,
                content={"error": e.message, "details": e.details.get("details")},
            )
        return _pdf_response(artifact)

    @app.post("/api/ai-assist")
    async def ai_assist(payload: AiAssistPayload) -> JSONResponse:
        """Ask the language model for a suggested document."""
        if not payload.message or not payload.message.strip():
            return JSONResponse(status_code=400, content={"error": "Message is required"})

        request = AssistRequest(
            message=payload.message,
            current_document=payload.current_code,
            conversation_history=tuple(
                ChatMessage(entry.role, entry.content) for entry in payload.conversation_history
            ),
            endpoint=payload.endpoint or DEFAULT_ASSIST_ENDPOINT,
            model=payload.model or DEFAULT_ASSIST_MODEL,
        )

        try:
            response = await app.state.assistant.assist(request)
        except AssistError as e:
            return _assist_error_response(e)

        return JSONResponse(content={
            "suggestedCode": response.suggested_document,
            "message": response.assistant_text,
        })

    @app.get("/api/session")
    async def read_session(session: EditorSession = Depends(get_session)) -> dict:
        return _state_payload(session)

    @app.post("/api/session/mode")
    async def switch_mode(payload: ModePayload, session: EditorSession = Depends(get_session)) -> dict:
        session.switch_mode(payload.mode)
        if payload.tab is not None:
            session.select_tab(payload.tab)
        return _state_payload(session)

    @app.put("/api/session/content")
    async def edit_content(payload: ContentPayload, session: EditorSession = Depends(get_session)) -> dict:
        session.edit_active_representation(payload.text, payload.tab)
        return _state_payload(session)

    @app.put("/api/session/header")
    async def update_header(payload: DecorationPayload, session: EditorSession = Depends(get_session)) -> dict:
        session.update_decoration_config(DecorationTarget.HEADER, payload.to_config())
        return _state_payload(session)

    @app.put("/api/session/footer")
    async def update_footer(payload: DecorationPayload, session: EditorSession = Depends(get_session)) -> dict:
        session.update_decoration_config(DecorationTarget.FOOTER, payload.to_config())
        return _state_payload(session)

    @app.put("/api/session/margins")
    async def update_margins(payload: MarginsPayload, session: EditorSession = Depends(get_session)) -> dict:
        session.update_margins(payload.to_spec())
        return _state_payload(session)

    @app.put("/api/session/assist-settings")
    async def update_assist_settings(
        payload: AssistSettingsPayload,
        session: EditorSession = Depends(get_session),
    ) -> dict:
        session.update_assist_settings(payload.endpoint, payload.model)
        return _state_payload(session)

    @app.post("/api/session/export")
    async def export_document(session: EditorSession = Depends(get_session)) -> JSONResponse:
        """Export the session document; the artifact is kept for download."""
        try:
            artifact = await session.request_export()
        except ExportInProgressError as exc:
            raise HTTPException(status_code=409, detail=exc.message) from exc

        if artifact is None:
            return JSONResponse(
                status_code=500,
                content={"error": session.get_state().export.error},
            )
        return JSONResponse(content=_state_payload(session))

    @app.get("/api/session/export/download")
    async def download_export(session: EditorSession = Depends(get_session)) -> Response:
        try:
            artifact = session.download_last_artifact()
        except NoArtifactError as exc:
            raise HTTPException(status_code=404, detail=exc.message) from exc
        return _pdf_response(artifact)

    @app.post("/api/session/assist")
    async def send_assist_message(
        payload: AssistMessagePayload,
        session: EditorSession = Depends(get_session),
    ) -> dict:
        """Send a message; failures appear in the conversation, not as errors."""
        try:
            await session.send_assist_message(payload.message)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except AssistInProgressError as exc:
            raise HTTPException(status_code=409, detail=exc.message) from exc
        return _state_payload(session)

    @app.post("/api/session/suggestion/accept")
    async def accept_suggestion(session: EditorSession = Depends(get_session)) -> dict:
        session.accept_suggestion()
        return _state_payload(session)

    @app.post("/api/session/suggestion/reject")
    async def reject_suggestion(session: EditorSession = Depends(get_session)) -> dict:
        session.reject_suggestion()
        return _state_payload(session)

    @app.post("/api/session/suggestion/visibility")
    async def set_suggestion_visibility(
        payload: VisibilityPayload,
        session: EditorSession = Depends(get_session),
    ) -> dict:
        session.set_suggestion_visible(payload.visible)
        return _state_payload(session)

    @app.get("/api/session/preview", response_class=HTMLResponse)
    async def preview(
        theme: Theme = Theme.LIGHT,
        session: EditorSession = Depends(get_session),
    ) -> HTMLResponse:
        """Preview page of the document as it would be exported."""
        document = get_combined_html(session.get_state().document)
        return HTMLResponse(content=build_preview_html(document, theme))

    return app


app = create_app()
