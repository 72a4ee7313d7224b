"""Tests for the HTML to Markdown entry points."""

from unittest.mock import MagicMock

import pytest
from website_scraper import (
    ConversionConfig,
    ConversionError,
    ExtractionFailed,
    HtmlToMarkdown,
    ParseFailed,
    convert,
    html_to_markdown,
)
from website_scraper.conversion.dom import Element, Text
from website_scraper.models.config import MarkdownConfig

EXAMPLE = (
    '<html><body><nav><ul><li><a href="/a">A</a></li></ul></nav>'
    "<article><h1>T</h1><p>Body <em>text</em>.</p></article></body></html>"
)

NO_CLASSIFY = ConversionConfig(extract_main_content=False, classify_code=False)


class TestConvert:
    """Tests for convert()."""

    def test_end_to_end_example(self):
        """Test the navigation-plus-article document."""
        assert convert(EXAMPLE, "https://ex.com") == "T\n=\n\nBody _text_."

    def test_accepts_bytes(self):
        """Test bytes input."""
        assert convert(EXAMPLE.encode("utf-8"), "https://ex.com") == "T\n=\n\nBody _text_."

    def test_script_and_style_never_in_output(self):
        """Test that script and style text never reaches the Markdown."""
        html = (
            "<html><head><style>.SECRETSTYLE{}</style></head><body><article>"
            "<script>var SECRETSCRIPT = 1;</script><p>Readable, real content here.</p>"
            "<script>SECRETSCRIPT()</script></article></body></html>"
        )
        for config in (ConversionConfig(), ConversionConfig(extract_main_content=False)):
            markdown = convert(html, config=config)
            assert "SECRET" not in markdown
            assert "Readable" in markdown

    def test_classifies_code(self):
        """Test language tagging in the full flow."""
        html = "<article><p>Example, with code:</p><pre><code>def f():\n  pass</code></pre></article>"
        assert "```python\ndef f():\n  pass\n```" in convert(html)

    def test_javascript_precedence(self):
        """Test that the JavaScript rule wins for class."""
        assert html_to_markdown("<pre><code>class X {}</code></pre>") == "```javascript\nclass X {}\n```"

    def test_classification_can_be_disabled(self):
        """Test classify_code=False."""
        assert convert("<pre><code>const x = 1;</code></pre>", config=NO_CLASSIFY) == "```\nconst x = 1;\n```"

    def test_no_content_raises(self):
        """Test that a page without readable content fails."""
        with pytest.raises(ExtractionFailed):
            convert("<html><body><p></p></body></html>")

    def test_deterministic(self):
        """Test that the same input always gives the same output."""
        assert convert(EXAMPLE, "https://ex.com") == convert(EXAMPLE, "https://ex.com")

    def test_markdown_config_flows_through(self):
        """Test that the Markdown flavour is applied."""
        config = ConversionConfig(markdown=MarkdownConfig(heading_style="atx", em_delimiter="*"))
        assert convert(EXAMPLE, "https://ex.com", config) == "# T\n\nBody *text*."


class TestHtmlToMarkdown:
    """Tests for whole-document conversion."""

    def test_empty_input(self):
        """Test empty input."""
        assert html_to_markdown("") == ""

    def test_headings(self):
        """Test setext headings."""
        assert html_to_markdown("<h1>Title</h1><h2>Subtitle</h2>") == "Title\n=====\n\nSubtitle\n--------"

    def test_paragraph_emphasis(self):
        """Test emphasis and strong in a paragraph."""
        html = "<p>This is <strong>bold</strong> and <em>italic</em> text.</p>"
        assert html_to_markdown(html) == "This is **bold** and _italic_ text."

    def test_list(self):
        """Test lists."""
        assert html_to_markdown("<ul><li>Item 1</li><li>Item 2</li></ul>") == "*   Item 1\n*   Item 2"

    def test_link(self):
        """Test links."""
        assert html_to_markdown('<a href="https://example.com">Example</a>') == "[Example](https://example.com)"

    def test_fragment_link(self):
        """Test in-page links."""
        html = '<a href="#section1">Section 1</a>'
        assert html_to_markdown(html, "https://example.com") == "[Section 1](#section1)"

    def test_table(self):
        """Test flattened tables."""
        html = (
            "<table><thead><tr><th>Header 1</th><th>Header 2</th></tr></thead>"
            "<tbody><tr><td>Cell 1</td><td>Cell 2</td></tr></tbody></table>"
        )
        assert html_to_markdown(html) == "Header 1\n\nHeader 2\n\nCell 1\n\nCell 2"

    def test_removes_script(self):
        """Test script removal."""
        assert html_to_markdown("<p>Hello</p><script>alert('x')</script>") == "Hello"

    def test_whole_document_kept(self):
        """Test that navigation survives when extraction is off."""
        assert html_to_markdown(EXAMPLE, "https://ex.com") == "*   [A](https://ex.com/a)\n\nT\n=\n\nBody _text_."

    def test_code_in_list_item_classified(self):
        """Test that an indented block inside a list item gets a language."""
        html = "<ul><li>Step<pre><code>def f():\n    pass</code></pre></li></ul>"
        assert html_to_markdown(html) == "*   Step\n    ```python\n    def f():\n        pass\n    ```"

    def test_code_in_blockquote_classified(self):
        """Test that a quoted block gets a language."""
        html = "<blockquote><pre><code>import os</code></pre></blockquote>"
        assert html_to_markdown(html) == "> ```javascript\n> import os\n> ```"


class TestHtmlToMarkdownClass:
    """Tests for the HtmlToMarkdown object."""

    def test_default_config(self):
        """Test the default configuration."""
        converter = HtmlToMarkdown()
        assert converter.config == ConversionConfig()

    def test_custom_extractor(self):
        """Test that a supplied extractor picks the content."""
        extractor = MagicMock()
        extractor.extract.return_value = Element("p", {}, (Text("Chosen"),))
        converter = HtmlToMarkdown(extractor=extractor)

        assert converter.convert("<p>Ignored</p>") == "Chosen"
        extractor.extract.assert_called_once()

    def test_extractor_skipped_for_whole_document(self):
        """Test that extract_main_content=False bypasses the extractor."""
        extractor = MagicMock()
        converter = HtmlToMarkdown(ConversionConfig(extract_main_content=False), extractor=extractor)

        assert converter.convert("<p>All</p>") == "All"
        extractor.extract.assert_not_called()

    def test_reusable(self):
        """Test converting several documents with one instance."""
        converter = HtmlToMarkdown(NO_CLASSIFY)
        assert converter.convert("<p>a</p>") == "a"
        assert converter.convert("<p>b</p>") == "b"

    def test_deeply_nested_inline_markup(self):
        """Test that hundreds of unclosed inline tags still convert."""
        html = "<p>Hello, there, friend" + "<b>x" * 300 + "</p>"
        markdown = convert(html)
        assert markdown.startswith("Hello, there, friend**x**x")
        assert markdown.count("x") == 300

    def test_recursion_error_becomes_parse_failed(self):
        """Test that running out of stack is reported as a conversion error."""
        extractor = MagicMock()
        extractor.extract.side_effect = RecursionError("maximum recursion depth exceeded")
        converter = HtmlToMarkdown(extractor=extractor)

        with pytest.raises(ParseFailed, match="nested too deeply") as exc_info:
            converter.convert("<p>Deep</p>")
        assert isinstance(exc_info.value, ConversionError)
        assert isinstance(exc_info.value.__cause__, RecursionError)
