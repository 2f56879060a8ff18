"""Paginator interfaces for the HTML PDF Studio."""

from abc import ABC, abstractmethod

from ..models.export import ExportArtifact, ExportRequest, PageOptions


class IPaginator(ABC):
    """
    Abstract interface for the paginator collaborator.

    Implementations turn a composed document plus decoration and margin
    settings into a paginated PDF. They receive raw decoration configs and
    build the header/footer fragments themselves.
    """

    @abstractmethod
    async def paginate(self, request: ExportRequest) -> ExportArtifact:
        """
        Render a document to a paginated artifact.

        Args:
            request: Document, present decorations and millimetre margins.

        Returns:
            ExportArtifact with the PDF bytes.

        Raises:
            PaginatorError: If the request is invalid or rendering fails.
        """
        pass


class IPdfRenderer(ABC):
    """
    Interface for PDF rendering engines.

    Implementations convert a document to PDF bytes using their engine.
    """

    @abstractmethod
    def render_html_to_pdf(self, html: str, options: PageOptions) -> bytes:
        """
        Render a document to PDF.

        Args:
            html: Document to render.
            options: Page size, margins and decoration fragments.

        Returns:
            PDF content as bytes.
        """
        pass
