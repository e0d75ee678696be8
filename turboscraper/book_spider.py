"""A spider that crawls a book catalogue and stores each book's details."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .http import CallbackKind, Request, Response, SpiderCallback
from .spider import ParseAction, ParseResult, Spider, SpiderConfig, SpiderResponse
from .storage import StorageBackend, StorageItem

logger = logging.getLogger(__name__)

START_URL = "https://books.toscrape.com/"


def _first_text(document: BeautifulSoup, selector: str) -> str:
    element = document.select_one(selector)
    return element.get_text() if element is not None else ""


class BookSpider(Spider):
    """Follows book listings and pagination, storing every book page."""

    def __init__(self, storage: StorageBackend) -> None:
        self._config = SpiderConfig()
        self._start_urls = [START_URL]
        self.storage = storage
        self.storage_config = storage.create_config("books")

    def with_config(self, config: SpiderConfig) -> "BookSpider":
        self._config = config
        return self

    def name(self) -> str:
        return "book_spider"

    def start_urls(self) -> List[str]:
        return list(self._start_urls)

    def config(self) -> SpiderConfig:
        return self._config

    async def parse(self, response: SpiderResponse, url: str, depth: int) -> ParseResult:
        kind = response.callback.kind
        if kind in (CallbackKind.BOOTSTRAP, CallbackKind.PARSE_PAGINATION):
            requests = self.parse_book_list(response.response, url, depth)
            requests.extend(self.next_page(response.response, url, depth))
            return ParseResult(ParseAction.CONTINUE, requests)
        if kind is CallbackKind.PARSE_ITEM:
            await self.parse_book(response.response, url, depth)
            return ParseResult(ParseAction.SKIP)
        logger.error("Unhandled custom callback: %s", response.callback.name)
        return ParseResult(ParseAction.SKIP)

    def parse_book_list(self, response: Response, url: str, depth: int) -> List[Request]:
        """Requests for every book linked from a listing page."""
        document = BeautifulSoup(response.body, "html.parser")
        requests = []
        for link in document.select("article.product_pod h3 a"):
            href = link.get("href")
            if href is None:
                continue
            request = Request(
                urljoin(url, href), SpiderCallback(CallbackKind.PARSE_ITEM), depth + 1
            ).with_meta({"parent_url": url, "title": link.get_text(), "depth": depth})
            requests.append(request)
        return requests

    def next_page(self, response: Response, url: str, depth: int) -> List[Request]:
        """A request for the next listing page, if there is one."""
        document = BeautifulSoup(response.body, "html.parser")
        link = document.select_one("li.next a")
        if link is None or link.get("href") is None:
            return []
        return [
            Request(
                urljoin(url, link["href"]),
                SpiderCallback(CallbackKind.PARSE_PAGINATION),
                depth,
            )
        ]

    async def parse_book(self, response: Response, url: str, depth: int) -> None:
        """Extract a book page's details and store them."""
        item = StorageItem(
            url=url,
            timestamp=datetime.now(timezone.utc),
            data=self.parse_book_details(response.body),
            metadata={
                "depth": depth,
                "parser": "book_details",
                "response": {"status": response.status, "headers": dict(response.headers)},
            },
        )
        await self.storage.store(item, self.storage_config)

    def parse_book_details(self, body: str) -> Dict[str, Any]:
        """Title, price, availability, UPC and description of a book page."""
        document = BeautifulSoup(body, "html.parser")
        return {
            "title": _first_text(document, "div.product_main h1").strip(),
            "price": _first_text(document, "p.price_color").strip(),
            "availability": _first_text(document, "p.availability").strip(),
            "upc": _first_text(document, "table.table tr:nth-of-type(1) td").strip(),
            "description": _first_text(document, "#product_description ~ p").strip(),
        }