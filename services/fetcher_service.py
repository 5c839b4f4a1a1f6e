from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from app.core.errors import FetchError, FetchTimeoutError, InputError, NewsCoreError, UpstreamError
from app.core.logging import get_logger

logger = get_logger().bind(module="fetcher_service")

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml",
    "Accept-Language": "en-US,en;q=0.9",
}

SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class FetchPolicy:
    timeout_s: float = 10.0
    max_attempts: int = 3
    retry_delay_s: float = 1.0

    def with_timeout(self, timeout_s: float) -> "FetchPolicy":
        return FetchPolicy(
            timeout_s=timeout_s,
            max_attempts=self.max_attempts,
            retry_delay_s=self.retry_delay_s,
        )

    def single_attempt(self) -> "FetchPolicy":
        return FetchPolicy(timeout_s=self.timeout_s, max_attempts=1, retry_delay_s=0.0)


def _ensure_http_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InputError(f"Invalid URL: {url}", details=str(exc)) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InputError(f"Invalid URL: {url}")


class ResilientFetcher:
    """
    HTTP GET with a browser identity, a per-call timeout and bounded retry.

    Use as an async context manager; the underlying ``httpx.AsyncClient`` lives
    for the duration of the block. The pause between attempts goes through
    ``sleep`` so tests can pass a no-op.
    """

    def __init__(
        self,
        policy: Optional[FetchPolicy] = None,
        *,
        sleep: SleepFn = asyncio.sleep,
        headers: Optional[dict] = None,
    ) -> None:
        self.policy = policy or FetchPolicy()
        self.max_attempts = max(1, self.policy.max_attempts)
        self._sleep = sleep
        self._headers = dict(BROWSER_HEADERS)
        if headers:
            self._headers.update(headers)
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ResilientFetcher":
        self._client = httpx.AsyncClient(
            timeout=self.policy.timeout_s,
            headers=self._headers,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()

    async def _get_once(self, url: str) -> httpx.Response:
        assert self._client is not None
        try:
            response = await self._client.get(url)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InputError(f"Invalid URL: {url}", details=str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(
                details=f"Request to {url} exceeded {self.policy.timeout_s}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(details=f"{type(exc).__name__}: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
                details=response.text[:500] or None,
            )
        return response

    async def fetch(self, url: str) -> httpx.Response:
        """
        Fetch ``url``, retrying transport errors, timeouts and non-2xx answers.

        Raises:
            InputError: the URL itself is unusable (not retried).
            FetchError: the last failure once all attempts are used up.
        """
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} HTTP client not initialized")
        _ensure_http_url(url)

        last_exc: Optional[NewsCoreError] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._get_once(url)
            except InputError:
                raise
            except FetchError as exc:
                last_exc = exc
                if attempt >= self.max_attempts:
                    break
                logger.info(
                    "fetch_retry",
                    url=url,
                    attempt=attempt,
                    attempts_left=self.max_attempts - attempt,
                    error=type(exc).__name__,
                )
                await self._sleep(self.policy.retry_delay_s)

        assert last_exc is not None
        logger.warning(
            "fetch_failed",
            url=url,
            attempts=self.max_attempts,
            error=type(last_exc).__name__,
            details=last_exc.details,
        )
        raise last_exc

    async def fetch_html(self, url: str) -> str:
        response = await self.fetch(url)
        return response.text

    async def fetch_json(self, url: str) -> Any:
        response = await self.fetch(url)
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError("Upstream returned invalid JSON", details=str(exc)) from exc
