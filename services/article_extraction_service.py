"""
Field extraction for scraped article pages.

Each field has an ordered chain of strategies; the first one that finds a
non-empty value wins and later strategies are never consulted.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from app.core.logging import get_logger
from app.core.results import NotFound, Ok, StrategyResult, first_found, found
from app.models.article import ExtractedArticle
from app.utils.relative_dates import isoformat_utc, utc_now
from services.content_filter import filter_paragraphs
from services.html_document import HtmlDocument

logger = get_logger().bind(module="article_extraction_service")

Strategy = Callable[[HtmlDocument], StrategyResult]

AUTHOR_SELECTORS: Sequence[str] = (
    ".author-name",
    ".contributor-name",
    '[data-e2e-name="byline-author"]',
    ".story-meta .story-author",
)

DATE_SELECTORS: Sequence[str] = (
    "time[datetime]",
    'meta[property="article:published_time"]',
    'meta[name="published_time"]',
    'meta[itemprop="datePublished"]',
    ".byline-timestamp",
    ".published-date",
    ".date",
    '[data-testid="published-timestamp"]',
)

ARTICLE_IMAGE_SELECTOR = "article img, .article-body img, .article img"
TAG_META_SELECTOR = 'meta[property="article:tag"], meta[name="keywords"]'
TAG_ELEMENT_SELECTOR = '.category, .tag, [data-testid="tag"]'

MIN_SUMMARY_PARAGRAPH_LENGTH = 100
MIN_HERO_IMAGE_WIDTH = 300
MAX_CATEGORIES = 5

_RASTER_IMAGE_RE = re.compile(r"\.(jpeg|jpg|png|webp)", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


# -------- Strategy builders --------------------------------------------------

def text_of(selector: str) -> Strategy:
    def strategy(document: HtmlDocument) -> StrategyResult:
        element = document.query_first(selector)
        return found(element.text() if element is not None else None)

    strategy.__name__ = f"text_of({selector})"
    return strategy


def attr_of(selector: str, attribute: str = "content") -> Strategy:
    def strategy(document: HtmlDocument) -> StrategyResult:
        element = document.query_first(selector)
        return found(element.attr(attribute) if element is not None else None)

    strategy.__name__ = f"attr_of({selector}@{attribute})"
    return strategy


def byline_author(document: HtmlDocument) -> StrategyResult:
    element = document.query_first(".byline")
    if element is None:
        return NotFound()
    text = element.text()
    if "By" not in text:
        return NotFound()
    return found(text.split("By")[1].strip())


def first_long_article_paragraph(document: HtmlDocument) -> StrategyResult:
    for element in document.query_all("article p"):
        text = element.text()
        if len(text) > MIN_SUMMARY_PARAGRAPH_LENGTH:
            return Ok(text)
    return NotFound()


def _declared_width(value: Optional[str]) -> int:
    match = _LEADING_INT_RE.match(value or "")
    return int(match.group(1)) if match else 0


def article_scoped_image(document: HtmlDocument) -> StrategyResult:
    for element in document.query_all(ARTICLE_IMAGE_SELECTOR):
        src = element.attr("src") or element.attr("data-src")
        width = _declared_width(element.attr("width"))
        if src and (width > MIN_HERO_IMAGE_WIDTH or not width):
            return Ok(src)
    return NotFound()


def any_raster_image(document: HtmlDocument) -> StrategyResult:
    for element in document.query_all("img"):
        src = element.attr("src") or element.attr("data-src")
        if not src or "icon" in src or "logo" in src:
            continue
        if _RASTER_IMAGE_RE.search(src):
            return Ok(src)
    return NotFound()


def date_from(selector: str) -> Strategy:
    def strategy(document: HtmlDocument) -> StrategyResult:
        element = document.query_first(selector)
        if element is None:
            return NotFound()
        return found(element.attr("datetime") or element.attr("content") or element.text())

    strategy.__name__ = f"date_from({selector})"
    return strategy


TITLE_STRATEGIES: Sequence[Strategy] = (
    text_of("h1"),
    attr_of('meta[property="og:title"]'),
    attr_of('meta[name="twitter:title"]'),
    text_of("title"),
)

AUTHOR_STRATEGIES: Sequence[Strategy] = (
    text_of('a[rel="author"]'),
    attr_of('meta[name="author"]'),
    byline_author,
    *(text_of(selector) for selector in AUTHOR_SELECTORS),
)

DATE_STRATEGIES: Sequence[Strategy] = tuple(date_from(selector) for selector in DATE_SELECTORS)

SUMMARY_STRATEGIES: Sequence[Strategy] = (
    attr_of('meta[property="og:description"]'),
    attr_of('meta[name="description"]'),
    first_long_article_paragraph,
)

IMAGE_STRATEGIES: Sequence[Strategy] = (
    attr_of('meta[property="og:image"]'),
    attr_of('meta[name="twitter:image"]'),
    article_scoped_image,
    any_raster_image,
)


# -------- Extractor ----------------------------------------------------------

def _value_or(result: StrategyResult, default):
    return result.value if isinstance(result, Ok) else default


def extract_categories(document: HtmlDocument) -> List[str]:
    categories: List[str] = []

    def _add(value: str) -> None:
        value = value.strip()
        if value and value not in categories:
            categories.append(value)

    for element in document.query_all(TAG_META_SELECTOR):
        for tag in (element.attr("content") or "").split(","):
            _add(tag)
    for element in document.query_all(TAG_ELEMENT_SELECTOR):
        _add(element.text())

    return categories[:MAX_CATEGORIES]


class ArticleExtractor:
    """Builds an ``ExtractedArticle`` out of any ``HtmlDocument``."""

    def extract(
        self,
        document: HtmlDocument,
        request_url: str,
        *,
        now: Optional[datetime] = None,
    ) -> ExtractedArticle:
        published = _value_or(first_found("published_date", DATE_STRATEGIES, document), None)
        if published is None:
            published = isoformat_utc(now or utc_now())

        article = ExtractedArticle(
            title=_value_or(first_found("title", TITLE_STRATEGIES, document), ""),
            author=_value_or(first_found("author", AUTHOR_STRATEGIES, document), ""),
            published_date=published,
            summary=_value_or(first_found("summary", SUMMARY_STRATEGIES, document), ""),
            image_url=_value_or(first_found("image_url", IMAGE_STRATEGIES, document), None),
            content=filter_paragraphs(document),
            categories=extract_categories(document),
            source_url=request_url,
            read_more_url=request_url,
        )

        logger.info(
            "article_extracted",
            url=request_url,
            has_title=bool(article.title),
            has_author=bool(article.author),
            has_image=article.image_url is not None,
            paragraphs=len(article.content),
            categories=len(article.categories),
        )
        return article
