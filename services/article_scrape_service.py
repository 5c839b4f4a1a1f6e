from __future__ import annotations

from typing import Optional

from app.core.errors import DomainNotAllowedError, ExtractionEmptyResult, InputError
from app.core.logging import get_logger
from app.models.article import ExtractedArticle
from services.article_extraction_service import ArticleExtractor
from services.fetcher_service import ResilientFetcher
from services.html_document import SoupDocument

logger = get_logger().bind(module="article_scrape_service")

DEFAULT_ALLOWED_DOMAIN = "businessinsider.com"


def ensure_allowed_url(url: Optional[str], allowed_domain: str) -> str:
    """Reject blank URLs and URLs outside the one permitted source domain."""
    if not url or not url.strip():
        raise InputError("URL parameter is required")
    url = url.strip()
    if allowed_domain not in url:
        raise DomainNotAllowedError()
    return url


class ArticleScrapeService:
    """Fetch → parse → extract for a single article URL."""

    def __init__(
        self,
        fetcher: ResilientFetcher,
        *,
        extractor: Optional[ArticleExtractor] = None,
        allowed_domain: str = DEFAULT_ALLOWED_DOMAIN,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor or ArticleExtractor()
        self.allowed_domain = allowed_domain

    async def scrape(self, url: Optional[str]) -> ExtractedArticle:
        url = ensure_allowed_url(url, self.allowed_domain)
        logger.info("article_scrape_started", url=url)

        html = await self.fetcher.fetch_html(url)
        document = SoupDocument.from_html(html)
        article = self.extractor.extract(document, url)

        if not article.is_usable:
            logger.warning(
                "article_scrape_empty",
                url=url,
                has_title=bool(article.title),
                paragraphs=len(article.content),
            )
            raise ExtractionEmptyResult(details=f"No usable title or body text found at {url}")
        return article
