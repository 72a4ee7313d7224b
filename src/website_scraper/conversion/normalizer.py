"""Final whitespace normalization of Markdown output."""

import re

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")


def normalize(markdown: str) -> str:
    """Collapse runs of three or more newlines to a blank line and trim the result."""
    return _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", markdown).strip()
