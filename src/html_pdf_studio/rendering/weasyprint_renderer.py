"""
WeasyPrint Renderer Implementation

Adapter for rendering documents to PDF using the WeasyPrint engine.
Page setup and the header/footer fragments are expressed as CSS paged
media: an ``@page`` rule for size and margins, running elements for the
fragments and page counters for their placeholders.
"""

import logging
import re
from typing import Optional

from jinja2 import DictLoader, Environment, select_autoescape
from markupsafe import Markup

from ..interfaces.paginator import IPdfRenderer
from ..models.export import PageOptions


logger = logging.getLogger(__name__)


HEADER_ELEMENT_ID = "studio-page-header"
FOOTER_ELEMENT_ID = "studio-page-footer"

_BODY_OPEN_PATTERN = re.compile(r"<body(?:\s[^>]*)?>", re.IGNORECASE)

_env = Environment(
    loader=DictLoader({
        "page.css": """@page {
    size: {{ format }};
    margin: {{ margin.top }} {{ margin.right }} {{ margin.bottom }} {{ margin.left }};
{%- if header %}
    @top-center { content: element({{ header_id }}); width: 100%; }
{%- endif %}
{%- if footer %}
    @bottom-center { content: element({{ footer_id }}); width: 100%; }
{%- endif %}
}
{%- if header %}
#{{ header_id }} { position: running({{ header_id }}); }
{%- endif %}
{%- if footer %}
#{{ footer_id }} { position: running({{ footer_id }}); }
{%- endif %}
.pageNumber::after { content: counter(page); }
.totalPages::after { content: counter(pages); }
""",
        "running.html": '<div id="{{ element_id }}">{{ fragment }}</div>',
    }),
    autoescape=select_autoescape(["html"]),
)


class WeasyPrintRenderer(IPdfRenderer):
    """
    PDF renderer using WeasyPrint engine.

    Supports:
    - Page size and margins via ``@page``
    - Header/footer fragments as running elements
    - ``pageNumber``/``totalPages`` placeholders via page counters
    - Extra print stylesheets
    """

    def __init__(self, stylesheets: Optional[list] = None, base_url: Optional[str] = None):
        """
        Initialize the renderer.

        Args:
            stylesheets: Optional list of CSS file paths to include
            base_url: Base URL for resolving relative URLs in documents
        """
        self.stylesheets = stylesheets or []
        self.base_url = base_url

    def build_page_css(self, options: PageOptions) -> str:
        """Build the paged media stylesheet for the given options."""
        show = options.display_header_footer
        return _env.get_template("page.css").render(
            format=options.format,
            margin=options.margin,
            header=show and bool(options.header_template),
            footer=show and bool(options.footer_template),
            header_id=HEADER_ELEMENT_ID,
            footer_id=FOOTER_ELEMENT_ID,
        )

    def inject_running_elements(self, html: str, options: PageOptions) -> str:
        """
        Place the header/footer fragments at the start of the body.

        Documents without a body element get the fragments prepended.
        """
        if not options.display_header_footer:
            return html

        running = _env.get_template("running.html")
        blocks = []
        if options.header_template:
            blocks.append(running.render(
                element_id=HEADER_ELEMENT_ID,
                fragment=Markup(options.header_template),
            ))
        if options.footer_template:
            blocks.append(running.render(
                element_id=FOOTER_ELEMENT_ID,
                fragment=Markup(options.footer_template),
            ))
        if not blocks:
            return html

        fragment = "\n".join(blocks)
        match = _BODY_OPEN_PATTERN.search(html)
        if match:
            return html[:match.end()] + "\n" + fragment + html[match.end():]
        return fragment + "\n" + html

    def render_html_to_pdf(self, html: str, options: PageOptions) -> bytes:
        """
        Render a document to PDF using WeasyPrint.

        Backgrounds are always printed by WeasyPrint, so
        ``options.print_background`` needs no mapping.

        Args:
            html: Document to render
            options: Page size, margins and decoration fragments

        Returns:
            PDF content as bytes

        Raises:
            Exception: If rendering fails
        """
        from weasyprint import CSS, HTML

        try:
            document = HTML(
                string=self.inject_running_elements(html, options),
                base_url=self.base_url,
            )
            css_list = [CSS(string=self.build_page_css(options))]
            css_list.extend(CSS(filename=css) for css in self.stylesheets)

            pdf_bytes = document.write_pdf(stylesheets=css_list)

            logger.info(f"Successfully rendered PDF: {len(pdf_bytes)} bytes")
            return pdf_bytes

        except Exception as e:
            logger.error(f"Failed to render PDF: {e}", exc_info=True)
            raise
