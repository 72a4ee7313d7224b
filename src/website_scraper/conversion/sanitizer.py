"""Removal of non-content nodes before scoring."""

from __future__ import annotations

from collections.abc import Iterable

from .dom import Comment, DocumentNode, Element

DEFAULT_STRIP_TAGS = ("script", "style")


def sanitize(tree: Element, strip_tags: Iterable[str] = DEFAULT_STRIP_TAGS) -> Element:
    """
    Return a copy of tree without comments and without the given elements.

    Every other node is kept, in order. The input tree is not modified.

    Args:
        tree: Root of the document tree
        strip_tags: Tag names whose elements are dropped with their subtree

    Returns:
        The sanitized tree
    """
    return _sanitize(tree, frozenset(tag.lower() for tag in strip_tags))


def _sanitize(element: Element, strip: frozenset[str]) -> Element:
    children: list[DocumentNode] = []
    for child in element.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, Element):
            if child.tag in strip:
                continue
            child = _sanitize(child, strip)
        children.append(child)
    return element.with_children(tuple(children))
