from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.core.errors import FetchError, UpstreamError
from app.core.logging import get_logger
from app.deps.services import get_allowed_domain, get_fetch_policy
from app.models.article import ExtractedArticle
from services.article_scrape_service import ArticleScrapeService
from services.fetcher_service import FetchPolicy, ResilientFetcher

logger = get_logger().bind(module="scrape_router")

router = APIRouter(
    prefix="/scrape-article",
    tags=["scrape"],
)

SCRAPE_FAILED = "Failed to scrape article content"
ARTICLE_CACHE_CONTROL = "max-age=3600, s-maxage=3600"


@router.get("", response_model=ExtractedArticle)
async def scrape_article(
    url: Optional[str] = Query(default=None, description="Business Insider article URL."),
    policy: FetchPolicy = Depends(get_fetch_policy),
    allowed_domain: str = Depends(get_allowed_domain),
) -> JSONResponse:
    async with ResilientFetcher(policy) as fetcher:
        service = ArticleScrapeService(fetcher, allowed_domain=allowed_domain)
        try:
            article = await service.scrape(url)
        except FetchError as exc:
            status_code = exc.status_code if isinstance(exc, UpstreamError) else 500
            logger.error("article_scrape_failed", url=url, error=type(exc).__name__, status_code=status_code)
            return JSONResponse(
                status_code=status_code,
                content={"error": SCRAPE_FAILED, "details": str(exc), "statusCode": status_code},
            )

    return JSONResponse(
        content=article.model_dump(by_alias=True),
        headers={"Cache-Control": ARTICLE_CACHE_CONTROL},
    )
