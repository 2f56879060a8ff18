"""Page decoration templates and margin handling."""

from .template_builder import (
    EMPTY_HEADER_TEMPLATE,
    DecorationTemplates,
    build_footer_template,
    build_header_template,
    build_template,
    build_templates,
    clear_document_title,
    format_date,
    is_present,
)
from .margins import (
    clamp_margin,
    clamp_margins,
    convert_margin_unit,
    format_margin,
    format_margins,
    normalize_margins,
)

__all__ = [
    "EMPTY_HEADER_TEMPLATE",
    "DecorationTemplates",
    "build_footer_template",
    "build_header_template",
    "build_template",
    "build_templates",
    "clear_document_title",
    "format_date",
    "is_present",
    "clamp_margin",
    "clamp_margins",
    "convert_margin_unit",
    "format_margin",
    "format_margins",
    "normalize_margins",
]
