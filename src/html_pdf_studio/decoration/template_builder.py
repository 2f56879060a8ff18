"""Header and footer template building for the paginator.

Fragments use the paginator's placeholder classes: ``pageNumber`` for the
current page and ``totalPages`` for the page count.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from jinja2 import DictLoader, Environment, select_autoescape
from markupsafe import Markup

from ..models.decoration import DecorationConfig
from ..models.enums import DecorationTarget


logger = logging.getLogger(__name__)


FIELD_SEPARATOR = Markup(" | ")
EMPTY_HEADER_TEMPLATE = "<div></div>"

PAGE_NUMBER_PLACEHOLDERS = {
    DecorationTarget.HEADER: Markup('<span class="pageNumber"></span>'),
    DecorationTarget.FOOTER: Markup(
        'Page <span class="pageNumber"></span> of <span class="totalPages"></span>'
    ),
}

_env = Environment(
    loader=DictLoader({
        "rich.html": '<div style="font-size: 10px; padding: 10px; width: 100%;">{{ content }}</div>',
        "plain.html": (
            '<div style="font-size: 10px; padding: 10px; '
            'text-align: {{ alignment }}; width: 100%;">{{ content }}</div>'
        ),
    }),
    autoescape=select_autoescape(["html"]),
)

_TITLE_PATTERN = re.compile(r"(<title[^>]*>)[\s\S]*?(</title>)", re.IGNORECASE)


@dataclass(frozen=True)
class DecorationTemplates:
    """
    Header and footer fragments ready for the paginator.

    ``clear_title`` is set when the document title has to be emptied
    before rendering so the paginator does not print its default header.
    """
    header_template: Optional[str] = None
    footer_template: Optional[str] = None
    clear_title: bool = False

    @property
    def display_header_footer(self) -> bool:
        """Whether the paginator should draw page decorations at all."""
        return self.header_template is not None or self.footer_template is not None


def format_date(today: Optional[date] = None) -> str:
    """Format a date as month/day/year with a four-digit year, e.g. ``3/9/2024``."""
    today = today or date.today()
    return f"{today.month}/{today.day}/{today.year}"


def is_present(config: Optional[DecorationConfig]) -> bool:
    """Check whether a decoration should be sent to the paginator."""
    return config is not None and config.is_present


def _auto_fields(
    config: DecorationConfig,
    target: DecorationTarget,
    today: Optional[date],
) -> list:
    fields = []
    if config.show_page_number:
        fields.append(PAGE_NUMBER_PLACEHOLDERS[target])
    if config.show_date:
        fields.append(format_date(today))
    return fields


def build_template(
    config: Optional[DecorationConfig],
    target: DecorationTarget,
    today: Optional[date] = None,
) -> str:
    """
    Build the markup fragment for a header or footer.

    Rich content is emitted verbatim followed by the requested auto-fields.
    Plain text is escaped and joined with the auto-fields, aligned as
    configured.

    Args:
        config: Decoration configuration, or None for no decoration.
        target: Whether the fragment is a header or a footer.
        today: Date to print, defaults to the current date.

    Returns:
        The fragment, or an empty string when there is no configuration.
    """
    if config is None:
        return ""

    fields = _auto_fields(config, target, today)

    if config.is_rich_content and config.text:
        content = Markup(config.text)
        if fields:
            content = content + FIELD_SEPARATOR + FIELD_SEPARATOR.join(fields)
        return _env.get_template("rich.html").render(content=content)

    parts = ([config.text] if config.text else []) + fields
    return _env.get_template("plain.html").render(
        content=FIELD_SEPARATOR.join(parts),
        alignment=config.alignment.value,
    )


def build_header_template(config: Optional[DecorationConfig], today: Optional[date] = None) -> str:
    """Build the header fragment; page numbers show the current page only."""
    return build_template(config, DecorationTarget.HEADER, today)


def build_footer_template(config: Optional[DecorationConfig], today: Optional[date] = None) -> str:
    """Build the footer fragment; page numbers show ``Page N of M``."""
    return build_template(config, DecorationTarget.FOOTER, today)


def build_templates(
    header: Optional[DecorationConfig],
    footer: Optional[DecorationConfig],
    today: Optional[date] = None,
) -> DecorationTemplates:
    """
    Build both fragments and apply the paginator coupling rule.

    When a footer is present without a header, an explicit empty header
    fragment is emitted and the document title must be cleared, otherwise
    the paginator prints its own default header.

    Args:
        header: Header configuration, if any.
        footer: Footer configuration, if any.
        today: Date to print, defaults to the current date.

    Returns:
        DecorationTemplates for the paginator.
    """
    header_template = build_header_template(header, today) if is_present(header) else ""
    footer_template = build_footer_template(footer, today) if is_present(footer) else ""

    has_header = bool(header_template.strip())
    has_footer = bool(footer_template.strip())

    if has_footer and not has_header:
        logger.debug("Footer without header, suppressing default header")
        return DecorationTemplates(
            header_template=EMPTY_HEADER_TEMPLATE,
            footer_template=footer_template,
            clear_title=True,
        )

    return DecorationTemplates(
        header_template=header_template if has_header else None,
        footer_template=footer_template if has_footer else None,
    )


def clear_document_title(html: str) -> str:
    """Empty every title element of the document."""
    return _TITLE_PATTERN.sub(lambda m: m.group(1) + m.group(2), html)
