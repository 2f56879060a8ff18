"""Conversion between combined documents and separated fragments.

Uses structural pattern matching instead of a markup parser so that
partially written documents never make extraction or composition fail.
"""

import logging
import re
import textwrap
from typing import NamedTuple

from ..models.document import DocumentState
from ..models.enums import EditorMode


logger = logging.getLogger(__name__)


STYLE_BLOCK_PATTERN = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)
SCRIPT_BLOCK_PATTERN = re.compile(r"<script[^>]*>([\s\S]*?)</script>", re.IGNORECASE)

DOCUMENT_ROOT_PATTERN = re.compile(r"<!DOCTYPE|<html", re.IGNORECASE)
HEAD_OPEN_PATTERN = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
HEAD_CLOSE_PATTERN = re.compile(r"</head>", re.IGNORECASE)
BODY_OPEN_PATTERN = re.compile(r"<body(?:\s[^>]*)?>", re.IGNORECASE)
BODY_CLOSE_PATTERN = re.compile(r"</body>", re.IGNORECASE)
HTML_CLOSE_PATTERN = re.compile(r"</html>", re.IGNORECASE)

BLOCK_SEPARATOR = "\n\n"

DOCUMENT_SKELETON = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Document</title>
</head>
<body>
{markup}
</body>
</html>"""


class ExtractedCode(NamedTuple):
    """The three fragments of a separated document."""
    markup: str
    style: str
    script: str


def _collect_blocks(pattern: re.Pattern, html: str) -> str:
    """Join the inner content of every block matched by pattern."""
    parts = []
    for match in pattern.finditer(html):
        content = textwrap.dedent(match.group(1)).strip()
        if content:
            parts.append(content)
    return BLOCK_SEPARATOR.join(parts)


def extract(combined: str) -> ExtractedCode:
    """
    Split a combined document into markup, style and script.

    Every style and script block is removed from the markup and its inner
    content collected in document order. Unterminated blocks stay in the
    markup. Never raises: on failure the original content is returned as
    markup with empty style and script.

    Args:
        combined: Full document with embedded style/script blocks.

    Returns:
        ExtractedCode with the trimmed markup and the joined blocks.
    """
    try:
        style = _collect_blocks(STYLE_BLOCK_PATTERN, combined)
        script = _collect_blocks(SCRIPT_BLOCK_PATTERN, combined)

        markup = STYLE_BLOCK_PATTERN.sub("", combined)
        markup = SCRIPT_BLOCK_PATTERN.sub("", markup)

        return ExtractedCode(markup=markup.strip(), style=style, script=script)
    except Exception as e:  # noqa: BLE001
        logger.warning(f"Failed to extract code from document: {e}")
        return ExtractedCode(markup=combined, style="", script="")


def _indent_block(tag: str, content: str) -> str:
    """Wrap content in an indented tag block."""
    body = "\n".join(f"        {line}" for line in content.split("\n"))
    return f"    <{tag}>\n{body}\n    </{tag}>"


def _insert_before(pattern: re.Pattern, html: str, block: str) -> str:
    """Insert block on its own line before the first match of pattern."""
    return pattern.sub(lambda m: f"{block}\n{m.group(0)}", html, count=1)


def _insert_style(html: str, block: str) -> str:
    if HEAD_CLOSE_PATTERN.search(html):
        return _insert_before(HEAD_CLOSE_PATTERN, html, block)
    if HEAD_OPEN_PATTERN.search(html):
        return HEAD_OPEN_PATTERN.sub(lambda m: f"{m.group(0)}\n{block}", html, count=1)
    if BODY_OPEN_PATTERN.search(html):
        return BODY_OPEN_PATTERN.sub(
            lambda m: f"<head>\n{block}\n</head>\n{m.group(0)}", html, count=1
        )
    if HTML_CLOSE_PATTERN.search(html):
        return _insert_before(HTML_CLOSE_PATTERN, html, f"<head>\n{block}\n</head>")
    logger.debug("No structural markers found, appending style block")
    return f"{html}\n{block}"


def _insert_script(html: str, block: str) -> str:
    if BODY_CLOSE_PATTERN.search(html):
        return _insert_before(BODY_CLOSE_PATTERN, html, block)
    if HTML_CLOSE_PATTERN.search(html):
        return _insert_before(HTML_CLOSE_PATTERN, html, block)
    logger.debug("No structural markers found, appending script block")
    return f"{html}\n{block}"


def compose(markup: str, style: str = "", script: str = "") -> str:
    """
    Combine separated fragments into a single document.

    Markup without a document-root declaration is wrapped in a minimal
    skeleton. A non-blank style is injected into the head and a non-blank
    script before the end of the body. When no structural markers exist
    the blocks are appended at the end, which may yield a document that is
    not well-formed.

    Args:
        markup: Document markup, with or without a document root.
        style: Style sheet content.
        script: Script content.

    Returns:
        The combined document.
    """
    combined = markup
    try:
        if not DOCUMENT_ROOT_PATTERN.search(combined):
            combined = DOCUMENT_SKELETON.format(markup=combined)

        if style and style.strip():
            combined = _insert_style(combined, _indent_block("style", style))

        if script and script.strip():
            combined = _insert_script(combined, _indent_block("script", script))
    except Exception as e:  # noqa: BLE001
        logger.warning(f"Failed to compose document: {e}")

    return combined


def get_combined_html(document: DocumentState) -> str:
    """Get the combined form of the representation currently edited."""
    if document.mode == EditorMode.COMBINED:
        return document.combined
    separated = document.separated
    return compose(separated.markup, separated.style, separated.script)
