"""Unit tests for document composition and extraction."""

import pytest

from html_pdf_studio.composition.code_parser import (
    DOCUMENT_SKELETON,
    compose,
    extract,
    get_combined_html,
)
from html_pdf_studio.models.document import DocumentState, SeparatedDocument
from html_pdf_studio.models.enums import EditorMode


FULL_DOCUMENT = """<!DOCTYPE html>
<html>
<head>
    <title>Report</title>
    <style>
        h1 { color: red; }
    </style>
</head>
<body>
    <h1>Title</h1>
    <script>
        console.log("a");
    </script>
</body>
</html>"""


class TestExtract:
    """Test splitting a combined document."""

    def test_document_without_blocks_is_identity(self):
        """Test that markup without blocks comes back trimmed with empty fragments."""
        result = extract("  <p>Hello</p>\n")

        assert result.markup == "<p>Hello</p>"
        assert result.style == ""
        assert result.script == ""

    def test_extracts_style_and_script(self):
        """Test that block contents are moved out of the markup."""
        result = extract(FULL_DOCUMENT)

        assert result.style == "h1 { color: red; }"
        assert result.script == 'console.log("a");'
        assert "<style" not in result.markup
        assert "<script" not in result.markup
        assert "<h1>Title</h1>" in result.markup

    def test_multiple_blocks_joined_in_order(self):
        """Test that several blocks are joined with a blank line."""
        html = "<style>a{}</style><p>x</p><style>b{}</style>"

        result = extract(html)

        assert result.style == "a{}\n\nb{}"
        assert result.markup == "<p>x</p>"

    def test_blank_blocks_are_skipped(self):
        """Test that empty blocks contribute nothing."""
        result = extract("<style>   </style><style>p{}</style>")

        assert result.style == "p{}"

    def test_block_attributes_and_case(self):
        """Test that tags with attributes and any case are recognized."""
        html = '<SCRIPT type="module">run()</SCRIPT><div></div>'

        result = extract(html)

        assert result.script == "run()"
        assert result.markup == "<div></div>"

    def test_unterminated_block_stays_in_markup(self):
        """Test that a block without a closing tag is not extracted."""
        html = "<p>x</p><style>p { color: blue; }"

        result = extract(html)

        assert result.style == ""
        assert "<style>" in result.markup


class TestCompose:
    """Test combining separated fragments."""

    def test_fragment_is_wrapped_in_skeleton(self):
        """Test that markup without a root is wrapped in the skeleton."""
        result = compose("<p>Hi</p>")

        assert result == DOCUMENT_SKELETON.format(markup="<p>Hi</p>")
        assert result.startswith("<!DOCTYPE html>")

    def test_style_goes_before_head_close(self):
        """Test that style is injected at the end of the head."""
        result = compose("<p>Hi</p>", style="p { margin: 0; }")

        head_end = result.index("</head>")
        assert result.index("<style>") < head_end
        assert "        p { margin: 0; }" in result

    def test_script_goes_before_body_close(self):
        """Test that script is injected at the end of the body."""
        result = compose("<p>Hi</p>", script="go();")

        assert result.index("<p>Hi</p>") < result.index("<script>") < result.index("</body>")

    def test_blank_fragments_are_ignored(self):
        """Test that whitespace-only style and script add nothing."""
        result = compose("<p>Hi</p>", style="  ", script="\n")

        assert "<style>" not in result
        assert "<script>" not in result

    def test_head_created_before_body(self):
        """Test that a head is created when the document has only a body."""
        result = compose("<html><body><p>x</p></body></html>", style="p{}")

        assert "<head>\n    <style>" in result
        assert result.index("</head>") < result.index("<body>")

    def test_style_after_head_open_without_close(self):
        """Test insertion after an unclosed head."""
        result = compose("<html><head><title>t</title>", style="p{}")

        assert result.index("<head>") < result.index("<style>")

    def test_blocks_appended_without_markers(self):
        """Test the degraded case: no structural markers at all."""
        result = compose("<!DOCTYPE html><p>x</p>", style="p{}", script="go();")

        assert result.startswith("<!DOCTYPE html><p>x</p>\n    <style>")
        assert result.rstrip().endswith("</script>")

    def test_head_with_attributes_is_not_confused_with_header(self):
        """Test that a header element is not taken for the head."""
        markup = "<html><body><header>Top</header></body></html>"

        result = compose(markup, style="p{}")

        assert result.index("</head>") < result.index("<header>")


class TestRoundTrip:
    """Test composing and extracting together."""

    @pytest.mark.parametrize("style,script", [
        ("p { color: red; }", ""),
        ("", "console.log(1);"),
        ("a {}\n\nb {\n  margin: 0;\n}", "let x = 1;\nrun(x);"),
    ])
    def test_extract_recovers_composed_fragments(self, style, script):
        """Test that extracting a composed document yields the same fragments."""
        result = extract(compose("<main>Body</main>", style, script))

        assert result.style == style
        assert result.script == script
        assert "<main>Body</main>" in result.markup

    def test_combined_separated_combined_is_equivalent(self):
        """Test that a full document keeps its fragments through both conversions."""
        first = extract(FULL_DOCUMENT)
        second = extract(compose(*first))

        assert second.style == first.style
        assert second.script == first.script
        assert "<h1>Title</h1>" in second.markup


class TestGetCombinedHtml:
    """Test reading the active representation."""

    def test_combined_mode_returns_combined(self):
        """Test that combined mode returns the combined field untouched."""
        document = DocumentState(mode=EditorMode.COMBINED, combined="<p>x</p>")

        assert get_combined_html(document) == "<p>x</p>"

    def test_separated_mode_composes(self):
        """Test that separated mode composes the fragments."""
        document = DocumentState(
            mode=EditorMode.SEPARATED,
            combined="stale",
            separated=SeparatedDocument(markup="<p>x</p>", style="p{}"),
        )

        result = get_combined_html(document)

        assert "stale" not in result
        assert "<p>x</p>" in result
        assert "p{}" in result
