from __future__ import annotations

from typing import List, Sequence

from app.core.logging import get_logger
from services.html_document import HtmlDocument

logger = get_logger().bind(module="content_filter")

CONTENT_SELECTORS: Sequence[str] = (
    "article p",
    ".article-body p",
    ".article p",
    ".post-content p",
    ".entry-content p",
    ".story-content p",
    '[data-component="text-block"]',
)

BOILERPLATE_MARKERS: Sequence[str] = (
    "ADVERTISEMENT",
    "Click here",
    "Sign up",
    "Subscribe",
    "©",
    "Copyright",
)

MIN_SCOPED_LENGTH = 20
MIN_FALLBACK_LENGTH = 40
MIN_SCOPED_PARAGRAPHS = 4


def is_boilerplate(text: str) -> bool:
    return any(marker in text for marker in BOILERPLATE_MARKERS)


def _qualifies(text: str, min_length: int) -> bool:
    return bool(text) and not is_boilerplate(text) and len(text) > min_length


def _collect(document: HtmlDocument, selector: str, min_length: int) -> List[str]:
    paragraphs: List[str] = []
    for element in document.query_all(selector):
        text = element.text()
        if _qualifies(text, min_length):
            paragraphs.append(text)
    return paragraphs


def filter_paragraphs(document: HtmlDocument) -> List[str]:
    """
    Body paragraphs of an article page, in document order.

    The first article-scoped selector that yields at least four paragraphs
    wins. Failing that, every ``<p>`` on the page is scanned with a stricter
    length floor, because that pass also sees navigation and captions.
    """
    for selector in CONTENT_SELECTORS:
        paragraphs = _collect(document, selector, MIN_SCOPED_LENGTH)
        if len(paragraphs) >= MIN_SCOPED_PARAGRAPHS:
            logger.debug("content_selector_matched", selector=selector, paragraphs=len(paragraphs))
            return paragraphs

    paragraphs = _collect(document, "p", MIN_FALLBACK_LENGTH)
    logger.debug("content_generic_fallback", paragraphs=len(paragraphs))
    return paragraphs
