"""Runs a spider: fetches pages concurrently and follows new requests."""

import asyncio
import logging
from collections import deque
from typing import Deque, FrozenSet, Set

from .errors import ScraperError
from .http import Request
from .scraper import Scraper
from .spider import ParseAction, ParseResult, Spider, SpiderResponse
from .stats import StatsTracker

logger = logging.getLogger(__name__)


class Crawler:
    """Drives a spider with a scraper, visiting every URL at most once."""

    def __init__(self, scraper: Scraper) -> None:
        logger.info("Initializing crawler")
        self.stats = StatsTracker()
        self.scraper = scraper
        self.scraper.stats = self.stats
        self._visited: Set[str] = set()

    @property
    def visited_urls(self) -> FrozenSet[str]:
        """Every URL scheduled so far."""
        return frozenset(self._visited)

    async def _process(self, spider: Spider, request: Request) -> ParseResult:
        response = await self.scraper.fetch(request.url)
        spider_response = SpiderResponse(response=response, callback=request.callback)
        return await spider.parse(spider_response, request.url, request.depth)

    async def run(self, spider: Spider) -> None:
        """Crawl until no requests are left or the spider asks to stop."""
        config = spider.config()
        logger.info("Starting spider: %s", spider.name())
        logger.debug("Max depth: %s", config.max_depth)

        pending: Set["asyncio.Task[ParseResult]"] = set()
        finished: Deque["asyncio.Task[ParseResult]"] = deque()

        async def wait_for_one() -> None:
            done, _ = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            pending.difference_update(done)
            finished.extend(done)

        def spawn(request: Request) -> None:
            pending.add(asyncio.create_task(self._process(spider, request)))

        for request in spider.get_initial_requests():
            logger.info("Adding start URL: %s", request.url)
            self._visited.add(str(request.url))
            spawn(request)

        try:
            while pending or finished:
                if not finished:
                    await wait_for_one()
                task = finished.popleft()
                try:
                    result = task.result()
                except ScraperError as exc:
                    logger.warning("Error processing request: %s", exc)
                    continue
                except Exception as exc:  # noqa: BLE001 - a failed task must not end the crawl
                    logger.warning("Task error: %s", exc)
                    continue

                if result.action is ParseAction.STOP:
                    logger.info("Spider requested stop")
                    break
                if result.action is ParseAction.SKIP:
                    logger.debug("Skipping current URL")
                    continue

                logger.debug("Found %d new URLs to process", len(result.requests))
                for request in result.requests:
                    if request.depth >= config.max_depth:
                        logger.debug("Skipping URL %s - max depth reached", request.url)
                        continue
                    url = str(request.url)
                    if url in self._visited:
                        logger.debug("Skipping URL %s - already visited", url)
                        continue
                    logger.info("Processing new URL: %s at depth %s", url, request.depth)
                    if request.meta is not None:
                        logger.debug("Request metadata: %r", request.meta)
                    self._visited.add(url)

                    while len(pending) >= config.max_concurrency:
                        logger.debug(
                            "Reached concurrent request limit %s, waiting for slot",
                            config.max_concurrency,
                        )
                        await wait_for_one()
                    spawn(request)
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        logger.info(
            "Spider %s completed. Total URLs processed: %d",
            spider.name(),
            len(self._visited),
        )
        self.stats.finish()
        self.stats.print_summary()