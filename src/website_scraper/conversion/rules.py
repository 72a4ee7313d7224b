"""
Tag-to-transform rule table for the Markdown serializer.

Every tag maps to one of a fixed set of rule variants. Tables are
read-only and built once per MarkdownConfig, so they can be shared
freely between conversions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import ClassVar, Optional, Union

from ..models.config import MarkdownConfig


@dataclass(frozen=True)
class UnderlineHeading:
    """Setext heading: text with a line of `underline` characters below it."""

    block: ClassVar[bool] = True
    level: int
    underline: str


@dataclass(frozen=True)
class AtxHeading:
    """'#'-prefixed heading."""

    block: ClassVar[bool] = True
    level: int


@dataclass(frozen=True)
class Wrap:
    """Inline content between a prefix and a suffix, e.g. emphasis."""

    block: ClassVar[bool] = False
    prefix: str
    suffix: str


@dataclass(frozen=True)
class Link:
    block: ClassVar[bool] = False


@dataclass(frozen=True)
class Image:
    block: ClassVar[bool] = False


@dataclass(frozen=True)
class InlineCode:
    block: ClassVar[bool] = False


@dataclass(frozen=True)
class FencedCode:
    """Verbatim code between fences."""

    block: ClassVar[bool] = True
    fence: str


@dataclass(frozen=True)
class ListBlock:
    block: ClassVar[bool] = True


@dataclass(frozen=True)
class ListItem:
    block: ClassVar[bool] = True
    bullet: str


@dataclass(frozen=True)
class TableCell:
    """A table cell, flattened into its own paragraph."""

    block: ClassVar[bool] = True


@dataclass(frozen=True)
class Blockquote:
    block: ClassVar[bool] = True


@dataclass(frozen=True)
class HorizontalRule:
    block: ClassVar[bool] = True
    text: str


@dataclass(frozen=True)
class LineBreak:
    block: ClassVar[bool] = False


@dataclass(frozen=True)
class GenericBlock:
    """Children rendered as-is, separated from siblings by a blank line."""

    block: ClassVar[bool] = True


@dataclass(frozen=True)
class GenericInline:
    """Children rendered as-is with no added markup."""

    block: ClassVar[bool] = False


Rule = Union[
    UnderlineHeading,
    AtxHeading,
    Wrap,
    Link,
    Image,
    InlineCode,
    FencedCode,
    ListBlock,
    ListItem,
    TableCell,
    Blockquote,
    HorizontalRule,
    LineBreak,
    GenericBlock,
    GenericInline,
]

GENERIC_INLINE = GenericInline()

# Containers rendered as plain blocks
GENERIC_BLOCK_TAGS = (
    "p",
    "div",
    "section",
    "article",
    "main",
    "header",
    "footer",
    "nav",
    "aside",
    "figure",
    "figcaption",
    "form",
    "fieldset",
    "details",
    "summary",
    "address",
    "dl",
    "dt",
    "dd",
    "table",
    "thead",
    "tbody",
    "tfoot",
    "tr",
    "caption",
)


@lru_cache(maxsize=None)
def build_rule_table(config: MarkdownConfig) -> Mapping[str, Rule]:
    """
    Build the read-only rule table for a Markdown flavour.

    Tables are cached per config, so equal configs share one table.
    """
    rules: dict[str, Rule] = {}

    for level in range(1, 7):
        if config.heading_style == "setext" and level <= 2:
            rules[f"h{level}"] = UnderlineHeading(level=level, underline="=" if level == 1 else "-")
        else:
            rules[f"h{level}"] = AtxHeading(level=level)

    emphasis = Wrap(config.em_delimiter, config.em_delimiter)
    strong = Wrap(config.strong_delimiter, config.strong_delimiter)
    rules.update(
        {
            "em": emphasis,
            "i": emphasis,
            "strong": strong,
            "b": strong,
            "a": Link(),
            "img": Image(),
            "code": InlineCode(),
            "pre": FencedCode(fence=config.fence),
            "ul": ListBlock(),
            "ol": ListBlock(),
            "li": ListItem(bullet=config.bullet_marker + "   "),
            "td": TableCell(),
            "th": TableCell(),
            "blockquote": Blockquote(),
            "hr": HorizontalRule(text="* * *"),
            "br": LineBreak(),
        }
    )

    for tag in GENERIC_BLOCK_TAGS:
        rules[tag] = GenericBlock()

    return MappingProxyType(rules)


DEFAULT_RULES = build_rule_table(MarkdownConfig())


def rule_for(tag: str, rules: Optional[Mapping[str, Rule]] = None) -> Rule:
    """Look up the rule for a tag; unknown tags are inline pass-through."""
    return (rules if rules is not None else DEFAULT_RULES).get(tag, GENERIC_INLINE)


def is_block(tag: str) -> bool:
    """Whether the tag is rendered as a block (blank-line separated)."""
    return rule_for(tag).block
