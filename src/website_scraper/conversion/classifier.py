"""Language tagging for fenced code blocks."""

from __future__ import annotations

import re

# Checked in order: JavaScript wins keywords both sets share
JAVASCRIPT_KEYWORDS = ("class", "function", "import", "const", "let", "var", "if", "for", "while")
PYTHON_KEYWORDS = ("def", "class", "import", "from", "with", "if", "for", "while")

_JAVASCRIPT_FIRST_LINE_RE = re.compile(r"(?:%s)" % "|".join(JAVASCRIPT_KEYWORDS))
_PYTHON_FIRST_LINE_RE = re.compile(r"(?:%s)\s" % "|".join(PYTHON_KEYWORDS))

# List indentation and blockquote markers a nested block carries on every line
_LINE_PREFIX = r"[ \t]*(?:>[ \t]?)*"


def _fenced_block_pattern(fence: str) -> re.Pattern[str]:
    """Match a whole fenced block: line prefix, opening fence + info string, body, closing fence."""
    fence = re.escape(fence)
    return re.compile(
        rf"^(?P<prefix>{_LINE_PREFIX})(?P<open>{fence})(?P<info>[^\n]*)\n"
        rf"(?P<body>.*?)^(?P=prefix){fence}[ \t]*$",
        re.MULTILINE | re.DOTALL,
    )


def _tag_blocks(markdown: str, block_re: re.Pattern[str], first_line_re: re.Pattern[str], language: str) -> str:
    def replace(match: re.Match[str]) -> str:
        if match.group("info").strip():
            return match.group(0)
        prefix = match.group("prefix")
        first_line = match.group("body").split("\n", 1)[0]
        first_line = first_line[len(prefix) :] if first_line.startswith(prefix) else ""
        if not first_line_re.match(first_line):
            return match.group(0)
        split = match.end("open") - match.start()
        return match.group(0)[:split] + language + match.group(0)[split:]

    return block_re.sub(replace, markdown)


def classify_code_blocks(markdown: str, fence: str = "```") -> str:
    """
    Add a language identifier to untagged fenced code blocks.

    Two passes in fixed order: blocks whose first line starts with a
    JavaScript keyword become ``javascript``; then blocks still untagged
    whose first line starts with a Python keyword followed by whitespace
    become ``python``. Blocks that already carry an info string are left
    alone. Blocks nested in list items or blockquotes are matched with
    their indentation or ``>`` prefix, which is ignored when reading the
    first line.

    Args:
        markdown: Serialized Markdown
        fence: Fence string used by the serializer

    Returns:
        Markdown with opening fences tagged where a keyword matched
    """
    block_re = _fenced_block_pattern(fence)
    markdown = _tag_blocks(markdown, block_re, _JAVASCRIPT_FIRST_LINE_RE, "javascript")
    return _tag_blocks(markdown, block_re, _PYTHON_FIRST_LINE_RE, "python")
