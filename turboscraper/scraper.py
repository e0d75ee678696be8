"""The scraper interface: fetching pages with category-based retries."""

import abc
import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from .http import Response
from .retry import RetryConfig
from .stats import StatsTracker

logger = logging.getLogger(__name__)


class Scraper(abc.ABC):
    """Fetches pages, retrying them as its retry configuration dictates.

    Subclasses implement :meth:`fetch_single`; :meth:`fetch` wraps it with
    retry handling and statistics.  ``stats`` may be replaced by a crawler
    so that several components share one tracker.
    """

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        stats: Optional[StatsTracker] = None,
    ) -> None:
        self.retry_config = retry_config if retry_config is not None else RetryConfig()
        self.stats = stats if stats is not None else StatsTracker()

    @abc.abstractmethod
    async def fetch_single(self, url: str) -> Response:
        """Fetch ``url`` once, without any retries."""

    async def fetch(self, url: str) -> Response:
        """Fetch ``url``, retrying while a retry condition matches."""
        start = datetime.now(timezone.utc)
        while True:
            logger.info("Fetching URL: %s", url)
            response = await self.fetch_single(url)
            logger.debug(
                "Received response: status=%s, body_length=%s",
                response.status,
                len(response.body.encode("utf-8")),
            )

            decision = self.retry_config.should_retry(url, response.status, response.body)
            if decision is not None:
                category, delay = decision
                self.stats.record_retry(str(category))
                state = self.retry_config.get_retry_state(url)
                category_config = self.retry_config.categories.get(category)
                logger.warning(
                    "Retry triggered for URL: %s (category=%s, attempt=%s/%s, delay=%.3fs)",
                    url,
                    category,
                    state.counts.get(category, 0),
                    category_config.max_retries if category_config else 0,
                    delay,
                )
                await asyncio.sleep(delay)
                continue

            state = self.retry_config.get_retry_state(url)
            logger.info(
                "Request completed for URL: %s (total_retries=%s, status=%s)",
                url,
                state.total_retries,
                response.status,
            )
            logger.debug("Retry history for %s: %s", url, state.counts)

            duration = datetime.now(timezone.utc) - start
            self.stats.record_request(
                response.status, len(response.body.encode("utf-8")), duration
            )
            return replace(
                response,
                retry_count=state.total_retries,
                retry_history=state.counts,
            )