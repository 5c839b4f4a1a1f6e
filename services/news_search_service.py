from __future__ import annotations

from datetime import date
from typing import Dict, Optional
from urllib.parse import urlencode

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from app.config import ProviderConfig
from app.core.errors import FetchError, SearchConfigError, UpstreamError
from app.core.logging import get_logger
from app.models.news import NewsListResponse
from services.fetcher_service import ResilientFetcher

logger = get_logger().bind(module="news_search_service")

NEWS_API_URL = "https://newsapi.org/v2/everything"
TRUSTED_SOURCES = "business-insider"

# Title-only queries: a synonym OR-group AND'ed with a finance word, so that
# generic "economy" stories without a market angle are filtered out.
CATEGORY_TITLE_QUERIES: Dict[str, str] = {
    "stock market": (
        '(("stock market" OR equities OR shares OR dow OR nasdaq OR "s&p") '
        "AND (finance OR investment OR market))"
    ),
    "cryptocurrency": (
        "((bitcoin OR ethereum OR crypto OR altcoin OR blockchain OR cryptocurrency OR stablecoin) "
        "AND (price OR exchange OR market))"
    ),
}
DEFAULT_TITLE_QUERY = "(finance OR investment OR economy OR market)"


def title_query_for(category: str) -> str:
    return CATEGORY_TITLE_QUERIES.get(category.strip().lower(), DEFAULT_TITLE_QUERY)


def build_search_url(category: str, page_size: int, *, api_key: str, today: date) -> str:
    params = {
        "qInTitle": title_query_for(category),
        "from": (today - relativedelta(months=1)).isoformat(),
        "to": today.isoformat(),
        "language": "en",
        "sortBy": "publishedAt",
        "pageSize": page_size,
        "sources": TRUSTED_SOURCES,
        "apiKey": api_key,
    }
    return f"{NEWS_API_URL}?{urlencode(params)}"


class NewsSearchService:
    """Keyword news search against NewsAPI, restricted to Business Insider."""

    def __init__(self, config: ProviderConfig, fetcher: ResilientFetcher) -> None:
        self.config = config
        self.fetcher = fetcher

    async def search(
        self,
        category: str,
        page_size: int,
        *,
        today: Optional[date] = None,
    ) -> NewsListResponse:
        if not self.config.search_api_key:
            raise SearchConfigError()

        url = build_search_url(
            category,
            page_size,
            api_key=self.config.search_api_key,
            today=today or date.today(),
        )
        logger.info("news_search_started", category=category, page_size=page_size)
        try:
            data = await self.fetcher.fetch_json(url)
        except UpstreamError as exc:
            raise UpstreamError(
                "Failed to fetch news from external API",
                status_code=exc.status_code,
                details=exc.details,
            ) from exc
        except FetchError as exc:
            raise FetchError("Failed to fetch news from external API", details=exc.details) from exc

        try:
            result = NewsListResponse(
                status=str(data.get("status") or "ok"),
                total_results=int(data.get("totalResults") or 0),
                articles=data.get("articles") or [],
            )
        except (AttributeError, TypeError, ValueError, ValidationError) as exc:
            raise FetchError(
                "Failed to fetch news from external API",
                details="Unexpected response shape from news search API",
            ) from exc

        logger.info("news_search_finished", category=category, articles=len(result.articles))
        return result
