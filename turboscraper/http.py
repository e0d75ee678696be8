"""Requests and responses exchanged between crawler, scraper and spiders."""

import enum
import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import JsonError
from .retry import RetryCategory


class ResponseType(enum.Enum):
    """Kind of content held by a response."""

    HTML = "html"
    JSON = "json"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


class CallbackKind(enum.Enum):
    """Which spider routine a response is handed to."""

    BOOTSTRAP = "bootstrap"
    PARSE_ITEM = "parse_item"
    PARSE_PAGINATION = "parse_pagination"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SpiderCallback:
    """A callback kind; custom callbacks carry a name."""

    kind: CallbackKind
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is CallbackKind.CUSTOM and self.name is None:
            raise ValueError("a custom callback needs a name")
        if self.kind is not CallbackKind.CUSTOM and self.name is not None:
            raise ValueError(f"a {self.kind.value} callback takes no name")


@dataclass
class Request:
    """A URL to fetch, with the callback that handles it and its depth."""

    url: str
    callback: SpiderCallback
    depth: int = 0
    meta: Any = None

    def with_meta(self, meta: Any) -> "Request":
        """A copy of this request carrying ``meta`` as a JSON value."""
        try:
            value = json.loads(json.dumps(meta))
        except (TypeError, ValueError) as exc:
            raise JsonError(exc) from exc
        return replace(self, meta=value)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Response:
    """A fetched page with its retry history."""

    url: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    timestamp: datetime = field(default_factory=_now)
    retry_count: int = 0
    retry_history: Dict[RetryCategory, int] = field(default_factory=dict)
    meta: Any = None
    response_type: ResponseType = ResponseType.HTML