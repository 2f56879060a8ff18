"""
Core PDF Render Service

Turns export requests into paginated PDF artifacts.
"""

import io
import logging
from datetime import date
from typing import Optional

import anyio
from PyPDF2 import PdfReader

from ..decoration.margins import format_margins
from ..decoration.template_builder import build_templates, clear_document_title
from ..exceptions import PaginatorError
from ..interfaces.paginator import IPaginator, IPdfRenderer
from ..models.decoration import MarginSpec
from ..models.export import ExportArtifact, ExportRequest, PageOptions
from .weasyprint_renderer import WeasyPrintRenderer


logger = logging.getLogger(__name__)


class PdfRenderService(IPaginator):
    """
    Core service for the export pipeline.

    Responsibilities:
    1. Validate the request and default the margins
    2. Build header/footer fragments and apply the title rule
    3. Delegate PDF rendering to an IPdfRenderer implementation
    4. Return an ExportArtifact with the page count

    Usage:
        service = PdfRenderService()
        artifact = service.render(ExportRequest(html=document))
    """

    def __init__(
        self,
        renderer: Optional[IPdfRenderer] = None,
        page_format: str = "A4",
        filename: str = "document.pdf",
    ):
        """
        Initialize the service.

        Args:
            renderer: PDF renderer implementation. If None, uses WeasyPrint.
            page_format: Paper size passed to the renderer.
            filename: Filename reported on produced artifacts.
        """
        self.renderer = renderer or WeasyPrintRenderer()
        self.page_format = page_format
        self.filename = filename

    def build_page_options(
        self,
        request: ExportRequest,
        today: Optional[date] = None,
    ) -> tuple[str, PageOptions]:
        """
        Prepare the document and page options for the renderer.

        Returns:
            Tuple of the document to render and its PageOptions.
        """
        html = request.html
        margins = request.margins or MarginSpec()
        templates = build_templates(request.header, request.footer, today)

        if templates.clear_title:
            html = clear_document_title(html)

        options = PageOptions(
            margin=format_margins(margins),
            format=self.page_format,
            print_background=True,
            display_header_footer=templates.display_header_footer,
            header_template=templates.header_template,
            footer_template=templates.footer_template,
        )
        return html, options

    def render(self, request: ExportRequest, today: Optional[date] = None) -> ExportArtifact:
        """
        Render an export request to PDF.

        Args:
            request: Document, present decorations and margins.
            today: Date printed by date fields, defaults to the current date.

        Returns:
            ExportArtifact with PDF bytes and metadata.

        Raises:
            PaginatorError: 400 when the document is missing, 500 when
                rendering fails.
        """
        if not request.html or not request.html.strip():
            raise PaginatorError("HTML content is required", status_code=400)

        html, options = self.build_page_options(request, today)
        logger.debug(
            f"Rendering document ({len(html)} chars, "
            f"header_footer={options.display_header_footer})"
        )

        try:
            pdf_bytes = self.renderer.render_html_to_pdf(html, options)
        except Exception as e:
            logger.error(f"Failed to generate PDF: {e}", exc_info=True)
            raise PaginatorError(
                "Failed to generate PDF",
                details={"details": str(e)},
            ) from e

        artifact = ExportArtifact(
            pdf_bytes=pdf_bytes,
            filename=self.filename,
            content_type="application/pdf",
            page_count=self.count_pages(pdf_bytes),
        )

        logger.info(
            f"Successfully generated PDF: {artifact.filename} "
            f"({len(artifact)} bytes, {artifact.page_count} pages)"
        )
        return artifact

    async def paginate(self, request: ExportRequest) -> ExportArtifact:
        """Render in a worker thread so the event loop stays responsive."""
        return await anyio.to_thread.run_sync(self.render, request)

    @staticmethod
    def count_pages(pdf_bytes: bytes) -> Optional[int]:
        """Read the page count of a PDF, or None if it cannot be parsed."""
        try:
            return len(PdfReader(io.BytesIO(pdf_bytes)).pages)
        except Exception as e:
            logger.warning(f"Could not read page count: {e}")
            return None
