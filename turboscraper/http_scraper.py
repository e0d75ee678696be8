"""A scraper that fetches pages over HTTP."""

from datetime import datetime, timezone
from typing import Optional

import httpx

from .errors import HttpError, UrlError
from .http import Response, ResponseType
from .retry import RetryConfig
from .scraper import Scraper
from .stats import StatsTracker

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class HttpScraper(Scraper):
    """Fetches pages with an HTTP client that sends a fixed User-Agent.

    Redirects are followed and, unless ``timeout`` is given, requests
    never time out.
    """

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        stats: Optional[StatsTracker] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(retry_config, stats)
        self.user_agent = user_agent
        self._client = httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> "HttpScraper":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch_with_method(
        self, method: str, url: str, body: Optional[str] = None
    ) -> Response:
        """Send one request and wrap what came back, whatever its status."""
        method = method.upper()
        start = datetime.now(timezone.utc)
        try:
            reply = await self._client.request(method, str(url), content=body)
            text = reply.text
        except httpx.InvalidURL as exc:
            raise UrlError(exc) from exc
        except httpx.HTTPError as exc:
            raise HttpError(exc) from exc
        end = datetime.now(timezone.utc)

        elapsed_ms = int((end - start).total_seconds() * 1000)
        meta = {
            "request": {"method": method},
            "response": {
                "elapsed": elapsed_ms,
                "content_length": len(text.encode("utf-8")),
            },
        }
        return Response(
            url=str(url),
            status=reply.status_code,
            headers=dict(reply.headers.items()),
            body=text,
            timestamp=start,
            meta=meta,
            response_type=ResponseType.HTML,
        )

    async def get(self, url: str) -> Response:
        return await self.fetch_with_method("GET", url)

    async def post(self, url: str, body: str) -> Response:
        return await self.fetch_with_method("POST", url, body)

    async def put(self, url: str, body: str) -> Response:
        return await self.fetch_with_method("PUT", url, body)

    async def delete(self, url: str) -> Response:
        return await self.fetch_with_method("DELETE", url)

    async def fetch_single(self, url: str) -> Response:
        return await self.get(url)