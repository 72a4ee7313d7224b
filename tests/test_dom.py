"""Tests for the document tree, parser and sanitizer."""

from unittest.mock import patch

import pytest
from website_scraper.conversion import Comment, Element, Text, parse, sanitize
from website_scraper.conversion.dom import DOCUMENT_TAG, decode_html, detect_encoding
from website_scraper.errors import ParseFailed


class TestParse:
    """Tests for parse()."""

    def test_root_is_document(self):
        """Test that the root element is the document node."""
        tree = parse("<p>Hello</p>")
        assert tree.tag == DOCUMENT_TAG
        assert [child.tag for child in tree.element_children()] == ["p"]

    def test_empty_input(self):
        """Test that empty input gives an empty document."""
        tree = parse("")
        assert tree.children == ()

    def test_text_and_comments(self):
        """Test that text and comments become their own node types."""
        tree = parse("<p>Hi<!-- note --></p>")
        p = next(tree.element_children())
        assert p.children == (Text("Hi"), Comment(" note "))

    def test_doctype_is_dropped(self):
        """Test that the doctype does not appear in the tree."""
        tree = parse("<!DOCTYPE html><p>x</p>")
        assert all(not isinstance(child, Text) for child in tree.children)

    def test_tag_names_lower_cased(self):
        """Test that tag names are lower-cased."""
        tree = parse("<DIV><P>x</P></DIV>")
        assert [el.tag for el in tree.iter_elements()] == [DOCUMENT_TAG, "div", "p"]

    def test_class_list_joined(self):
        """Test that multi-valued class attributes are joined by spaces."""
        tree = parse('<div class="main  content">x</div>')
        div = next(tree.element_children())
        assert div.get("class") == "main content"
        assert div.classes == ["main", "content"]

    def test_resolves_relative_links(self):
        """Test that relative href and src are resolved against the base URL."""
        tree = parse('<a href="/other">x</a><img src="img/a.png">', "https://example.com/docs/page")
        a, img = tree.element_children()
        assert a.get("href") == "https://example.com/other"
        assert img.get("src") == "https://example.com/docs/img/a.png"

    def test_keeps_fragment_and_special_links(self):
        """Test that fragment, mailto and absolute links are left as written."""
        html = '<a href="#section1">a</a><a href="mailto:x@example.com">b</a><a href="https://other.org/">c</a>'
        tree = parse(html, "https://example.com")
        hrefs = [el.get("href") for el in tree.element_children()]
        assert hrefs == ["#section1", "mailto:x@example.com", "https://other.org/"]

    def test_no_base_url_leaves_links_relative(self):
        """Test that links stay relative without a base URL."""
        tree = parse('<a href="/other">x</a>')
        assert next(tree.element_children()).get("href") == "/other"

    def test_bytes_use_meta_charset(self):
        """Test that bytes are decoded with the declared charset."""
        html = '<meta charset="iso-8859-1"><p>café</p>'.encode("latin-1")
        tree = parse(html)
        assert "café" in tree.text_content()

    def test_parser_failure_raises_parse_failed(self):
        """Test that parser errors surface as ParseFailed."""
        with patch("website_scraper.conversion.dom.BeautifulSoup", side_effect=ValueError("boom")):
            with pytest.raises(ParseFailed) as exc_info:
                parse("<p>x</p>")
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestEncoding:
    """Tests for charset sniffing."""

    def test_detects_meta_charset(self):
        """Test detection from a meta charset tag."""
        assert detect_encoding(b'<meta charset="windows-1252">') == "windows-1252"

    def test_detects_http_equiv(self):
        """Test detection from an http-equiv content type."""
        html = b'<meta http-equiv="Content-Type" content="text/html; charset=ISO-8859-1">'
        assert detect_encoding(html) == "ISO-8859-1"

    def test_defaults_to_utf8(self):
        """Test the UTF-8 fallback."""
        assert detect_encoding(b"<p>no charset</p>") == "utf-8"

    def test_unknown_charset_falls_back(self):
        """Test that an unknown charset decodes as UTF-8."""
        html = '<meta charset="not-a-charset"><p>ü</p>'.encode("utf-8")
        assert "ü" in decode_html(html)


class TestElement:
    """Tests for Element helpers."""

    def test_iter_elements_document_order(self):
        """Test preorder traversal."""
        tree = parse("<div><p><em>x</em></p><ul><li>y</li></ul></div>")
        assert [el.tag for el in tree.iter_elements()][1:] == ["div", "p", "em", "ul", "li"]

    def test_text_content_is_verbatim(self):
        """Test that text_content keeps whitespace as written."""
        tree = parse("<p>a  <b>b</b>\n c</p>")
        assert tree.text_content() == "a  b\n c"

    def test_with_children_returns_copy(self):
        """Test that with_children leaves the original untouched."""
        element = Element("p", {}, (Text("a"),))
        copy = element.with_children(())
        assert element.children == (Text("a"),)
        assert copy.children == ()


class TestSanitize:
    """Tests for sanitize()."""

    def test_removes_script_and_style(self):
        """Test that scripts and styles are removed with their content."""
        tree = parse("<p>Good</p><script>alert('bad')</script><style>.bad{}</style>")
        cleaned = sanitize(tree)
        assert cleaned.text_content() == "Good"
        assert [el.tag for el in cleaned.iter_elements()] == [DOCUMENT_TAG, "p"]

    def test_removes_comments(self):
        """Test that comment nodes are dropped."""
        cleaned = sanitize(parse("<p>a<!-- hidden -->b</p>"))
        p = next(cleaned.element_children())
        assert p.children == (Text("a"), Text("b"))

    def test_removes_nested(self):
        """Test removal below the top level."""
        cleaned = sanitize(parse("<div><p>x<script>y</script></p></div>"))
        assert cleaned.text_content() == "x"

    def test_custom_strip_tags(self):
        """Test a custom tag list."""
        cleaned = sanitize(parse("<p>keep</p><form>drop</form><script>kept</script>"), ("FORM",))
        assert cleaned.text_content() == "keepkept"

    def test_input_not_modified(self):
        """Test that the input tree is left as it was."""
        tree = parse("<p>a</p><script>b</script>")
        sanitize(tree)
        assert tree.text_content() == "ab"
