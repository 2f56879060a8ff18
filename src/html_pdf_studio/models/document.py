"""Document data models for the HTML PDF Studio."""

from dataclasses import dataclass, field

from .enums import EditorMode, EditorTab


DEFAULT_COMBINED_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Document</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            margin: 40px;
            color: #222;
        }
        h1 {
            color: #1d4ed8;
        }
    </style>
</head>
<body>
    <h1>Hello, PDF!</h1>
    <p>Edit this document and export it as a paginated PDF.</p>
    <script>
        console.log("Document loaded");
    </script>
</body>
</html>"""


@dataclass(frozen=True)
class SeparatedDocument:
    """
    The separated representation of a document.

    Holds the markup, style and script fragments as independent strings.
    """
    markup: str = ""
    style: str = ""
    script: str = ""


@dataclass(frozen=True)
class DocumentState:
    """
    Authoritative document state.

    Both representations are kept; ``mode`` selects which one is edited.
    They denote the same rendered content whenever the user is not editing.
    """
    mode: EditorMode = EditorMode.COMBINED
    combined: str = DEFAULT_COMBINED_DOCUMENT
    separated: SeparatedDocument = field(default_factory=SeparatedDocument)
    active_tab: EditorTab = EditorTab.MARKUP
