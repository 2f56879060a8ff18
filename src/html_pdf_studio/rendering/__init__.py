"""PDF rendering for the HTML PDF Studio."""

from .pdf_service import PdfRenderService
from .weasyprint_renderer import WeasyPrintRenderer

__all__ = [
    "PdfRenderService",
    "WeasyPrintRenderer",
]
