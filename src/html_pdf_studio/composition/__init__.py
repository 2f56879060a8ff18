"""Composition and extraction of web documents."""

from .code_parser import ExtractedCode, compose, extract, get_combined_html
from .preview import build_preview_html

__all__ = [
    "ExtractedCode",
    "compose",
    "extract",
    "get_combined_html",
    "build_preview_html",
]
