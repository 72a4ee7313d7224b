"""Tests for code-block language tagging and Markdown normalization."""

import pytest
from website_scraper.conversion import classify_code_blocks, normalize


class TestClassifyCodeBlocks:
    """Tests for classify_code_blocks()."""

    def test_python_def(self):
        """Test a Python function."""
        markdown = "```\ndef f():\n  pass\n```"
        assert classify_code_blocks(markdown) == "```python\ndef f():\n  pass\n```"

    def test_python_from_import(self):
        """Test a keyword only the Python set has."""
        markdown = "```\nfrom os import path\n```"
        assert classify_code_blocks(markdown) == "```python\nfrom os import path\n```"

    def test_javascript(self):
        """Test a JavaScript declaration."""
        markdown = "```\nconst x = 1;\n```"
        assert classify_code_blocks(markdown) == "```javascript\nconst x = 1;\n```"

    def test_javascript_wins_shared_keywords(self):
        """Test that shared keywords go to JavaScript."""
        markdown = "```\nclass X {}\n```"
        assert classify_code_blocks(markdown) == "```javascript\nclass X {}\n```"

    def test_existing_info_string_untouched(self):
        """Test that tagged blocks are left alone."""
        markdown = "```rust\nconst X: u8 = 1;\n```"
        assert classify_code_blocks(markdown) == markdown

    def test_no_keyword_untouched(self):
        """Test blocks without a known keyword."""
        markdown = "```\nx = 1\n```"
        assert classify_code_blocks(markdown) == markdown

    def test_only_first_line_counts(self):
        """Test that keywords on later lines are ignored."""
        markdown = "```\n# setup\ndef f(): pass\n```"
        assert classify_code_blocks(markdown) == markdown

    def test_multiple_blocks(self):
        """Test several blocks in one document."""
        markdown = "Intro\n\n```\nlet a = 1;\n```\n\nText\n\n```\nwith open(p) as f:\n    pass\n```"
        expected = (
            "Intro\n\n```javascript\nlet a = 1;\n```\n\nText\n\n```python\nwith open(p) as f:\n    pass\n```"
        )
        assert classify_code_blocks(markdown) == expected

    def test_custom_fence(self):
        """Test the tilde fence."""
        assert classify_code_blocks("~~~\nimport os\n~~~", fence="~~~") == "~~~javascript\nimport os\n~~~"

    def test_text_without_fences(self):
        """Test Markdown with no code."""
        assert classify_code_blocks("def f(): plain text") == "def f(): plain text"

    def test_indented_block(self):
        """Test a block indented under a list item."""
        markdown = "*   Step\n    ```\n    def f():\n        pass\n    ```"
        expected = "*   Step\n    ```python\n    def f():\n        pass\n    ```"
        assert classify_code_blocks(markdown) == expected

    def test_quoted_block(self):
        """Test a block inside a blockquote."""
        assert classify_code_blocks("> ```\n> import os\n> ```") == "> ```javascript\n> import os\n> ```"

    def test_quoted_block_in_list(self):
        """Test a blockquote nested in a list item."""
        markdown = "*   Note\n\n    > ```\n    > from a import b\n    > ```"
        expected = "*   Note\n\n    > ```python\n    > from a import b\n    > ```"
        assert classify_code_blocks(markdown) == expected

    def test_closing_fence_needs_same_prefix(self):
        """Test that a fence at another indentation does not close the block."""
        markdown = "    ```\n    const x = 1;\n```"
        assert classify_code_blocks(markdown) == markdown

    def test_indented_keyword_on_later_line_ignored(self):
        """Test that only the first body line is read in nested blocks."""
        markdown = "> ```\n> # setup\n> def f(): pass\n> ```"
        assert classify_code_blocks(markdown) == markdown


class TestNormalize:
    """Tests for normalize()."""

    def test_collapses_blank_lines(self):
        """Test that runs of blank lines shrink to one."""
        assert normalize("a\n\n\n\nb") == "a\n\nb"

    def test_keeps_single_blank_line(self):
        """Test that a single blank line is kept."""
        assert normalize("a\n\nb") == "a\n\nb"

    def test_strips(self):
        """Test trimming of the whole document."""
        assert normalize("\n\n  a  \n\n") == "a"

    @pytest.mark.parametrize(
        "text",
        ["", "a", "\n\n\n", "a\n\n\n\n\nb\n\n\nc", "  x \n\n\n y  ", "```\n\n\n\n```"],
    )
    def test_idempotent(self, text):
        """Test that normalizing twice changes nothing more."""
        assert normalize(normalize(text)) == normalize(text)
