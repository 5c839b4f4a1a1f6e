from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from app.config import ProviderConfig, settings
from app.core.errors import NewsCoreError
from app.core.logging import configure_logging, get_logger
from app.core.request_id import with_run_id
from services.article_scrape_service import ArticleScrapeService
from services.fetcher_service import FetchPolicy, ResilientFetcher
from services.news_aggregator_service import NewsAggregator

configure_logging(service_name="worker")
logger = get_logger().bind(worker="news_cli")


def _fetch_policy() -> FetchPolicy:
    return FetchPolicy(
        timeout_s=10.0,
        max_attempts=settings.FETCH_MAX_ATTEMPTS,
        retry_delay_s=settings.FETCH_RETRY_DELAY_S,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape one article or print a news listing as JSON.")
    sub = parser.add_subparsers(dest="command", required=True)

    scrape = sub.add_parser("scrape", help="Extract a Business Insider article.")
    scrape.add_argument("--url", required=True, help="Article URL.")

    news = sub.add_parser("news", help="Aggregate news for a category.")
    news.add_argument("--category", default="financial", help="Category, e.g. 'stock market' or 'indonesian-investment'.")
    news.add_argument("--page-size", type=int, default=10, help="Maximum number of articles.")
    return parser.parse_args(argv)


async def run_scrape(url: str) -> dict:
    async with ResilientFetcher(_fetch_policy()) as fetcher:
        service = ArticleScrapeService(fetcher, allowed_domain=settings.SCRAPE_ALLOWED_DOMAIN)
        article = await service.scrape(url)
    return article.model_dump(by_alias=True)


async def run_news(category: str, page_size: int) -> dict:
    aggregator = NewsAggregator(
        ProviderConfig.from_settings(settings),
        fetch_policy=_fetch_policy(),
        translation_pause_s=settings.TRANSLATION_PAUSE_S,
    )
    result = await aggregator.aggregate(category, page_size)
    return result.to_payload()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    with with_run_id():
        try:
            if args.command == "scrape":
                payload = asyncio.run(run_scrape(args.url))
            else:
                payload = asyncio.run(run_news(args.category, args.page_size))
        except NewsCoreError as exc:
            logger.error("news_cli_failed", command=args.command, error=type(exc).__name__, status_code=exc.status_code)
            print(json.dumps(exc.to_payload(), ensure_ascii=False), file=sys.stderr)
            return 1
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
