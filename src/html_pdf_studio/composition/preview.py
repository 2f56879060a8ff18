"""Preview document rendering."""

import re

from jinja2 import DictLoader, Environment, select_autoescape

from ..models.enums import Theme


DARK_BODY_STYLE = "background-color: #1a1a1a; color: #e4e4e7;"

_TEMPLATES = {
    "placeholder.html": """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Preview</title>
</head>
<body{% if body_style %} style="{{ body_style }}"{% endif %}>
    <p style="padding: 20px; color: #666;">Start editing to see your preview...</p>
</body>
</html>""",
    "dark_theme.html": """
        <style id="theme-preview-styles">
            body {
                background-color: #1a1a1a !important;
                color: #e4e4e7 !important;
            }
            * {
                color-scheme: dark;
            }
        </style>""",
}

_env = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=select_autoescape(["html"]),
)

_HEAD_CLOSE = re.compile(r"</head>", re.IGNORECASE)
_BODY_OPEN = re.compile(r"<body(?:\s[^>]*)?>", re.IGNORECASE)


def build_preview_html(html: str, theme: Theme = Theme.LIGHT) -> str:
    """
    Build the document shown in the live preview.

    Blank documents are replaced with a placeholder page. The dark theme
    adds an override style block without touching the user's own styles.

    Args:
        html: Combined document being edited.
        theme: Preview color scheme.

    Returns:
        Document to load into the preview frame.
    """
    if not html or not html.strip():
        body_style = DARK_BODY_STYLE if theme == Theme.DARK else ""
        return _env.get_template("placeholder.html").render(body_style=body_style)

    if theme != Theme.DARK:
        return html

    theme_css = _env.get_template("dark_theme.html").render()
    if _HEAD_CLOSE.search(html):
        return _HEAD_CLOSE.sub(lambda m: f"{theme_css}\n{m.group(0)}", html, count=1)
    if _BODY_OPEN.search(html):
        return _BODY_OPEN.sub(lambda m: f"{theme_css}\n{m.group(0)}", html, count=1)
    return f"{theme_css}\n{html}"
