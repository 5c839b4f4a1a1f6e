from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from app.core.errors import FetchError, NewsCoreError, UpstreamError
from app.deps.services import get_fetch_policy
from services.fetcher_service import FetchPolicy, ResilientFetcher
from services.image_proxy_service import ImageProxyService

router = APIRouter(
    prefix="/proxy",
    tags=["proxy"],
)


@router.get("")
async def proxy_image(
    url: Optional[str] = Query(default=None),
    policy: FetchPolicy = Depends(get_fetch_policy),
) -> Response:
    async with ResilientFetcher(policy.single_attempt()) as fetcher:
        try:
            content, content_type = await ImageProxyService(fetcher).relay(url)
        except UpstreamError:
            raise
        except FetchError as exc:
            raise NewsCoreError(details=str(exc)) from exc
    return Response(content=content, media_type=content_type)
