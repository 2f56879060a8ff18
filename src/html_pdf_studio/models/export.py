"""Export request and artifact models."""

from dataclasses import dataclass
from typing import Optional

from .decoration import DecorationConfig, MarginSpec


@dataclass(frozen=True)
class ExportRequest:
    """
    Payload handed to the paginator.

    Header and footer are only set when present; margins are already
    normalized to millimetres.
    """
    html: str
    header: Optional[DecorationConfig] = None
    footer: Optional[DecorationConfig] = None
    margins: Optional[MarginSpec] = None


@dataclass(frozen=True)
class ExportArtifact:
    """
    Result of an export.

    Contains the PDF bytes and metadata for HTTP responses and downloads.
    """
    pdf_bytes: bytes
    filename: str = "document.pdf"
    content_type: str = "application/pdf"
    page_count: Optional[int] = None

    def __len__(self) -> int:
        """Return the size of the PDF in bytes."""
        return len(self.pdf_bytes)


@dataclass(frozen=True)
class PageOptions:
    """Page setup passed from the paginator to a PDF renderer."""
    margin: dict
    format: str = "A4"
    print_background: bool = True
    display_header_footer: bool = False
    header_template: Optional[str] = None
    footer_template: Optional[str] = None
