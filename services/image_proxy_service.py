from __future__ import annotations

from typing import Optional, Tuple

from app.core.errors import InputError, UpstreamError
from app.core.logging import get_logger
from services.fetcher_service import ResilientFetcher

logger = get_logger().bind(module="image_proxy_service")

DEFAULT_CONTENT_TYPE = "image/jpeg"


class ImageProxyService:
    """Byte-for-byte relay for article images blocked by hotlink protection."""

    def __init__(self, fetcher: ResilientFetcher) -> None:
        self.fetcher = fetcher

    async def relay(self, url: Optional[str]) -> Tuple[bytes, str]:
        if not url or not url.strip():
            raise InputError("Image URL is required")
        try:
            response = await self.fetcher.fetch(url.strip())
        except UpstreamError as exc:
            raise UpstreamError(
                f"Failed to fetch image: {exc.status_code}",
                status_code=exc.status_code,
            ) from exc

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        logger.debug("image_relayed", url=url, content_type=content_type, size=len(response.content))
        return response.content, content_type
