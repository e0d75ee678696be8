"""The spider and parser interfaces and the values they exchange."""

import abc
import enum
from dataclasses import dataclass, field
from typing import List, Optional

from .http import CallbackKind, Request, Response, SpiderCallback


class ParseAction(enum.Enum):
    """What the crawler does after a page has been parsed."""

    CONTINUE = "continue"
    SKIP = "skip"
    STOP = "stop"


@dataclass
class ParseResult:
    """The outcome of parsing a page; only CONTINUE carries new requests."""

    action: ParseAction
    requests: List[Request] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.requests and self.action is not ParseAction.CONTINUE:
            raise ValueError(f"a {self.action.value} result carries no requests")


@dataclass
class SpiderResponse:
    """A response together with the callback that should handle it."""

    response: Response
    callback: SpiderCallback


@dataclass
class SpiderConfig:
    """Crawl limits for a spider."""

    max_depth: int = 2
    max_concurrency: int = 10


class Spider(abc.ABC):
    """A crawl definition: where to start and how to parse pages."""

    @abc.abstractmethod
    def name(self) -> str:
        """The spider's name."""

    @abc.abstractmethod
    def start_urls(self) -> List[str]:
        """URLs the crawl starts from."""

    @abc.abstractmethod
    def config(self) -> SpiderConfig:
        """The spider's crawl limits."""

    @abc.abstractmethod
    async def parse(self, response: SpiderResponse, url: str, depth: int) -> ParseResult:
        """Parse a fetched page and decide how the crawl goes on."""

    def get_initial_requests(self) -> List[Request]:
        return [Request(url, self.get_initial_callback(), 0) for url in self.start_urls()]

    def get_initial_callback(self) -> SpiderCallback:
        return SpiderCallback(CallbackKind.BOOTSTRAP)

    def allowed_domains(self) -> Optional[List[str]]:
        return None


class Parser(abc.ABC):
    """Turns a response into follow-up requests."""

    @abc.abstractmethod
    async def parse(self, response: Response, url: str, depth: int) -> List[Request]:
        """Parse ``response`` and return new requests."""