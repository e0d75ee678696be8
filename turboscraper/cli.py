"""Command-line entry point that crawls the book catalogue."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .book_spider import BookSpider
from .crawler import Crawler
from .errors import ScraperError
from .http_scraper import HttpScraper
from .retry import (
    CategoryConfig,
    ContentRetryCondition,
    ExponentialBackoff,
    RetryCategory,
    RetryConfig,
    StatusCodeCondition,
)
from .spider import SpiderConfig
from .storage import DiskStorageSpec, MongoStorageSpec, create_storage


def build_retry_config() -> RetryConfig:
    """Retry configuration that backs off on rate limiting."""
    config = RetryConfig()
    config.categories[RetryCategory.RATE_LIMIT] = CategoryConfig(
        max_retries=10,
        initial_delay=1.0,
        max_delay=10.0,
        conditions=[
            StatusCodeCondition(429),
            ContentRetryCondition(pattern="rate limit|too many requests", is_regex=True),
        ],
        backoff_policy=ExponentialBackoff(factor=2.0),
    )
    return config


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turboscraper", description="Crawl the book catalogue and store every book."
    )
    parser.add_argument("--data-dir", default="data", help="directory for disk storage")
    parser.add_argument("--mongo-uri", help="store items in MongoDB at this URI instead")
    parser.add_argument("--mongo-database", default="book_scraper", help="MongoDB database")
    parser.add_argument("--max-depth", type=int, default=999999)
    parser.add_argument("--max-concurrency", type=int, default=30)
    return parser


async def _run(args: argparse.Namespace) -> None:
    if args.mongo_uri:
        spec = MongoStorageSpec(args.mongo_uri, args.mongo_database)
    else:
        spec = DiskStorageSpec(args.data_dir)
    storage = await create_storage(spec)

    async with HttpScraper(build_retry_config()) as scraper:
        crawler = Crawler(scraper)
        spider = BookSpider(storage).with_config(
            SpiderConfig(max_depth=args.max_depth, max_concurrency=args.max_concurrency)
        )
        await crawler.run(spider)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING)
    try:
        asyncio.run(_run(args))
    except ScraperError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())