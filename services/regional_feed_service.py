from __future__ import annotations

from pydantic import ValidationError

from app.config import ProviderConfig
from app.core.errors import FeedUnavailableError, FetchError
from app.core.logging import get_logger
from app.models.news import RegionalFeed
from services.fetcher_service import ResilientFetcher

logger = get_logger().bind(module="regional_feed_service")

FEED_PATH = "/api/category/business/markets"
FEED_TIMEOUT_S = 15.0

SOURCE_ID = "jakarta-post"
SOURCE_NAME = "The Jakarta Post"


def build_feed_url(base_url: str) -> str:
    return base_url.rstrip("/") + FEED_PATH


class RegionalFeedService:
    """Reads the Jakarta Post business/markets JSON feed."""

    def __init__(self, config: ProviderConfig, fetcher: ResilientFetcher) -> None:
        self.config = config
        self.fetcher = fetcher

    async def fetch_feed(self) -> RegionalFeed:
        if not self.config.feed_base_url:
            raise FeedUnavailableError(details="Regional feed base URL is not configured")

        url = build_feed_url(self.config.feed_base_url)
        logger.info("regional_feed_fetching", url=url)
        try:
            payload = await self.fetcher.fetch_json(url)
            feed = RegionalFeed.model_validate(payload if isinstance(payload, dict) else {})
        except FetchError as exc:
            logger.warning("regional_feed_fetch_failed", url=url, error=type(exc).__name__, details=exc.details)
            raise FeedUnavailableError(details=str(exc)) from exc
        except ValidationError as exc:
            logger.warning("regional_feed_invalid", url=url, errors=exc.error_count())
            raise FeedUnavailableError(details="Regional feed returned an unexpected shape") from exc

        logger.info(
            "regional_feed_fetched",
            url=url,
            featured=feed.featured_post is not None,
            posts=len(feed.posts),
        )
        return feed
