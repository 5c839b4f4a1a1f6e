from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.config import ProviderConfig
from app.deps.services import get_fetch_policy, get_provider_config, get_translation_pause
from app.models.news import NewsListResponse
from services.fetcher_service import FetchPolicy
from services.news_aggregator_service import NewsAggregator, is_regional_category

router = APIRouter(
    prefix="/news",
    tags=["news"],
)

# Revalidation hint for the serving layer; nothing is cached in-process.
SEARCH_CACHE_CONTROL = "s-maxage=43200, stale-while-revalidate"


@router.get("", response_model=NewsListResponse)
async def get_news(
    category: str = Query(
        "financial",
        description="'indonesian-investment' for the translated regional feed; anything else is a keyword search.",
    ),
    page_size: int = Query(10, alias="pageSize", ge=1, le=100),
    config: ProviderConfig = Depends(get_provider_config),
    policy: FetchPolicy = Depends(get_fetch_policy),
    translation_pause_s: float = Depends(get_translation_pause),
) -> JSONResponse:
    aggregator = NewsAggregator(
        config,
        fetch_policy=policy,
        translation_pause_s=translation_pause_s,
    )
    result = await aggregator.aggregate(category, page_size)

    headers = {} if is_regional_category(category) else {"Cache-Control": SEARCH_CACHE_CONTROL}
    return JSONResponse(content=result.to_payload(), headers=headers)
