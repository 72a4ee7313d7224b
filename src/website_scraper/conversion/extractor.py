"""Main content extraction from a document tree."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import ExtractionFailed
from ..models.config import ExtractionConfig
from .dom import DOCUMENT_TAG, Element, Text
from .rules import is_block

logger = logging.getLogger(__name__)

# Elements that may hold the main content
CANDIDATE_TAGS = frozenset(
    {
        "article",
        "main",
        "section",
        "div",
        "p",
        "td",
        "pre",
        "blockquote",
        "body",
    }
)

# Paragraph-level candidates score on text alone; class/id hints weight containers
LEAF_CANDIDATE_TAGS = frozenset({"p", "pre"})

# Semantic tags whose own name counts as a class/id hint
HINT_TAGS = frozenset({"article", "main", "nav", "aside", "footer"})

# Hints that remove an element and its subtree from consideration
EXCLUDE_HINTS = frozenset(
    {
        "nav",
        "navbar",
        "navigation",
        "menu",
        "sidebar",
        "footer",
        "breadcrumb",
        "breadcrumbs",
        "aside",
    }
)

# Hints that penalize an element
NEGATIVE_HINTS = frozenset(
    {
        "comment",
        "comments",
        "ad",
        "ads",
        "advert",
        "advertisement",
        "banner",
        "promo",
        "related",
        "share",
        "sharing",
        "social",
        "sponsor",
        "sponsored",
        "widget",
        "popup",
        "cookie",
        "newsletter",
        "subscribe",
    }
)

# Hints that favour an element
POSITIVE_HINTS = frozenset(
    {
        "article",
        "content",
        "main",
        "post",
        "entry",
        "story",
        "text",
        "blog",
    }
)

# Containers inside the chosen root that may be pruned as boilerplate
PRUNABLE_TAGS = frozenset(
    {
        "div",
        "section",
        "ul",
        "ol",
        "table",
        "form",
        "aside",
        "nav",
        "footer",
        "header",
    }
)

# Document-level elements that are never excluded by their hints
_STRUCTURAL_TAGS = frozenset({DOCUMENT_TAG, "html", "body"})

_TOKEN_SPLIT_RE = re.compile(r"[\s_\-]+")

# Length (in characters) worth one point, and the cap on length points
_LENGTH_UNIT = 100
_MAX_LENGTH_POINTS = 3.0


@dataclass
class Candidate:
    """
    An element under consideration as the content root.

    Attributes:
        element: The candidate element
        order: Position in document order (lower = earlier)
        content_score: Score from the element's own text
        hint_score: Bonus or penalty from class/id hints (zero for paragraphs and code blocks)
        propagated_score: Share of descendant candidates' content scores
    """

    element: Element
    order: int
    content_score: float = 0.0
    hint_score: float = 0.0
    propagated_score: float = 0.0

    @property
    def score(self) -> float:
        return self.content_score + self.hint_score + self.propagated_score

    def breakdown(self) -> dict[str, float]:
        """Score components, for debugging and tests."""
        return {
            "content": round(self.content_score, 3),
            "hint": round(self.hint_score, 3),
            "propagated": round(self.propagated_score, 3),
            "total": round(self.score, 3),
        }


def _collapse(text: str) -> str:
    return " ".join(text.split())


def hint_tokens(element: Element) -> frozenset[str]:
    """Lower-cased words from the element's class and id (plus semantic tag name)."""
    tokens: set[str] = set()
    for value in (element.get("class") or "", element.get("id") or ""):
        tokens.update(token for token in _TOKEN_SPLIT_RE.split(value.lower()) if token)
    if element.tag in HINT_TAGS:
        tokens.add(element.tag)
    return frozenset(tokens)


def is_excluded(element: Element) -> bool:
    if element.tag in _STRUCTURAL_TAGS:
        return False
    return bool(hint_tokens(element) & EXCLUDE_HINTS)


def direct_text(element: Element) -> tuple[str, int]:
    """
    Text belonging to the element itself.

    Includes text nodes and inline descendants but stops at block-level
    children, which are scored on their own.

    Returns:
        (collapsed text, length of the part inside links)
    """
    parts: list[str] = []
    link_parts: list[str] = []

    def visit(node: Element, in_link: bool) -> None:
        for child in node.children:
            if isinstance(child, Text):
                parts.append(child.content)
                if in_link:
                    link_parts.append(child.content)
            elif isinstance(child, Element) and not is_block(child.tag):
                visit(child, in_link or child.tag == "a")

    visit(element, element.tag == "a")
    return _collapse("".join(parts)), len(_collapse("".join(link_parts)))


def subtree_text(element: Element) -> tuple[str, int]:
    """Text of the whole subtree and the length of the part inside links."""
    text = _collapse(element.text_content())
    link_length = sum(len(_collapse(el.text_content())) for el in element.iter_elements() if el.tag == "a")
    return text, link_length


def link_density(text: str, link_length: int) -> float:
    if not text:
        return 0.0
    return min(link_length / len(text), 1.0)


def content_score(text: str, link_length: int) -> float:
    """
    Score a run of text.

    One point per comma-separated clause plus one per 100 characters
    (capped), scaled down by the share of the text that is links.
    """
    if not text:
        return 0.0
    clauses = text.count(",") + 1
    length_points = min(len(text) / _LENGTH_UNIT, _MAX_LENGTH_POINTS)
    return (clauses + length_points) * (1.0 - link_density(text, link_length))


class MainContentExtractor:
    """
    Selects the element holding a page's main content.

    Readability-style: every plausible container is scored from its own
    text, class/id hints add a bonus or penalty, and each score is passed
    up to the enclosing candidates so wrappers around dense content win.
    The winner is then cleaned of link-heavy leftovers.

    Example:
        extractor = MainContentExtractor()
        root = extractor.extract(sanitize(parse(html, url)))
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize the content extractor.

        Args:
            config: Scoring thresholds and weights (uses defaults if None)
        """
        self._config = config or ExtractionConfig()

    def _hint_score(self, element: Element) -> float:
        if element.tag in LEAF_CANDIDATE_TAGS:
            return 0.0
        tokens = hint_tokens(element)
        score = 0.0
        if tokens & POSITIVE_HINTS:
            score += self._config.hint_weight
        if tokens & NEGATIVE_HINTS:
            score -= self._config.hint_weight
        return score

    def score_candidates(self, tree: Element) -> list[Candidate]:
        """
        Score every candidate element in the tree.

        Returns:
            Candidates in document order
        """
        candidates: list[Candidate] = []
        self._collect(tree, (), candidates)
        return candidates

    def _collect(
        self,
        element: Element,
        chain: tuple[Candidate, ...],
        candidates: list[Candidate],
    ) -> None:
        if is_excluded(element):
            return

        if element.tag in CANDIDATE_TAGS:
            text, link_length = direct_text(element)
            candidate = Candidate(
                element=element,
                order=len(candidates),
                content_score=content_score(text, link_length),
                hint_score=self._hint_score(element),
            )
            candidates.append(candidate)

            if chain:
                chain[-1].propagated_score += candidate.content_score * self._config.parent_share
            if len(chain) > 1:
                chain[-2].propagated_score += candidate.content_score * self._config.grandparent_share
            chain = (*chain, candidate)

        for child in element.element_children():
            self._collect(child, chain, candidates)

    def extract(self, tree: Element) -> Element:
        """
        Find the main content element.

        Args:
            tree: Sanitized document tree

        Returns:
            The winning element, with boilerplate descendants pruned

        Raises:
            ExtractionFailed: If no candidate reaches the minimum score
        """
        candidates = self.score_candidates(tree)
        if not candidates:
            raise ExtractionFailed("No content candidates found in document")

        best = max(candidates, key=lambda c: (c.score, -c.order))
        logger.debug(f"Best candidate <{best.element.tag}> #{best.order}: {best.breakdown()}")

        if best.score < self._config.min_score:
            raise ExtractionFailed(
                f"No readable content: best candidate <{best.element.tag}> scored "
                f"{best.score:.2f}, minimum is {self._config.min_score:.2f}",
                best_score=best.score,
            )

        return self.prune(best.element)

    def prune(self, root: Element) -> Element:
        """Remove boilerplate descendants (the root itself is always kept)."""
        return root.with_children(self._prune_children(root))

    def _prune_children(self, element: Element) -> tuple:
        kept = []
        for child in element.children:
            if isinstance(child, Element):
                if self._is_boilerplate(child):
                    logger.debug(f"Pruned <{child.tag}> {sorted(hint_tokens(child))}")
                    continue
                child = child.with_children(self._prune_children(child))
            kept.append(child)
        return tuple(kept)

    def _is_boilerplate(self, element: Element) -> bool:
        if is_excluded(element):
            return True
        if element.tag not in PRUNABLE_TAGS:
            return False
        if hint_tokens(element) & NEGATIVE_HINTS:
            return True

        text, link_length = subtree_text(element)
        return (
            link_density(text, link_length) > self._config.link_density_threshold
            and len(text) < self._config.min_text_length
        )
