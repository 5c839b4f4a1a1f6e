"""
One article list out of two sources.

``indonesian-investment`` reads the regional feed, batch-translates it and
resolves its relative timestamps; every other category goes to the keyword
news search unchanged. The two paths share nothing.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from app.config import ProviderConfig
from app.core.errors import FeedUnavailableError
from app.core.logging import get_logger
from app.models.news import NewsArticle, NewsListResponse, NewsSource, RegionalFeed
from app.utils.relative_dates import normalize_relative_date, utc_now
from services.fetcher_service import FetchPolicy, ResilientFetcher
from services.news_search_service import NewsSearchService
from services.regional_feed_service import (
    FEED_TIMEOUT_S,
    SOURCE_ID,
    SOURCE_NAME,
    RegionalFeedService,
)
from services.translation_service import TranslationService

logger = get_logger().bind(module="news_aggregator_service")

REGIONAL_CATEGORY = "indonesian-investment"
TRANSLATION_MESSAGE = "Mengambil dan menerjemahkan berita dari Jakarta Post"
SEARCH_TIMEOUT_S = 10.0

Clock = Callable[[], datetime]


def is_regional_category(category: str) -> bool:
    return category.strip().lower() == REGIONAL_CATEGORY


def texts_to_translate(feed: RegionalFeed) -> List[str]:
    """``[title, headline]`` per feed item, featured item first."""
    texts: List[str] = []
    for post in feed.items():
        texts.extend((post.title, post.headline))
    return texts


def build_regional_articles(
    feed: RegionalFeed,
    translated: List[str],
    *,
    now: datetime,
) -> List[NewsArticle]:
    articles: List[NewsArticle] = []
    for index, post in enumerate(feed.items()):
        offset = index * 2
        title = translated[offset] or post.title
        description = translated[offset + 1] or post.headline
        articles.append(
            NewsArticle(
                source=NewsSource(id=SOURCE_ID, name=SOURCE_NAME),
                author=SOURCE_NAME,
                title=title,
                description=description,
                url=post.link,
                url_to_image=post.image,
                published_at=normalize_relative_date(post.published_at, now),
                content=description,
                original_title=post.title,
                original_description=post.headline,
            )
        )
    return articles


class NewsAggregator:
    def __init__(
        self,
        config: ProviderConfig,
        *,
        fetch_policy: Optional[FetchPolicy] = None,
        translation_pause_s: float = 0.1,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config
        self.fetch_policy = fetch_policy or FetchPolicy()
        self.translation_pause_s = translation_pause_s
        self.clock = clock

    async def aggregate(self, category: str, page_size: int) -> NewsListResponse:
        if is_regional_category(category):
            try:
                return await self.regional_news(page_size)
            except FeedUnavailableError:
                raise
            except Exception as exc:
                logger.exception("regional_news_failed", error=type(exc).__name__)
                raise FeedUnavailableError(details=str(exc)) from exc
        return await self.search_news(category, page_size)

    async def regional_news(self, page_size: int) -> NewsListResponse:
        async with ResilientFetcher(self.fetch_policy.with_timeout(FEED_TIMEOUT_S)) as fetcher:
            feed = await RegionalFeedService(self.config, fetcher).fetch_feed()

        texts = texts_to_translate(feed)
        logger.info("regional_translation_started", texts=len(texts))
        async with TranslationService(self.config, pause_s=self.translation_pause_s) as translator:
            translated = await translator.translate_batch(texts)

        articles = build_regional_articles(feed, translated, now=self.clock())[:page_size]
        logger.info("regional_news_ready", articles=len(articles))
        return NewsListResponse(
            status="ok",
            total_results=len(articles),
            articles=articles,
            is_translating=False,
            translation_message=TRANSLATION_MESSAGE,
        )

    async def search_news(self, category: str, page_size: int) -> NewsListResponse:
        policy = self.fetch_policy.with_timeout(SEARCH_TIMEOUT_S).single_attempt()
        async with ResilientFetcher(policy) as fetcher:
            return await NewsSearchService(self.config, fetcher).search(category, page_size)
