"""Retry categories, conditions, backoff policies and per-URL retry bookkeeping."""

import re
import threading
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class RetryCategory:
    """A reason for retrying a request; built-in names or a custom one."""

    name: str
    is_custom: bool = False

    RATE_LIMIT: ClassVar["RetryCategory"]
    SERVER_ERROR: ClassVar["RetryCategory"]
    BOT_DETECTION: ClassVar["RetryCategory"]
    NOT_FOUND: ClassVar["RetryCategory"]
    BLACKLISTED: ClassVar["RetryCategory"]
    AUTHENTICATION: ClassVar["RetryCategory"]

    def __str__(self) -> str:
        if self.is_custom:
            return f'Custom("{self.name}")'
        return self.name


RetryCategory.RATE_LIMIT = RetryCategory("RateLimit")
RetryCategory.SERVER_ERROR = RetryCategory("ServerError")
RetryCategory.BOT_DETECTION = RetryCategory("BotDetection")
RetryCategory.NOT_FOUND = RetryCategory("NotFound")
RetryCategory.BLACKLISTED = RetryCategory("Blacklisted")
RetryCategory.AUTHENTICATION = RetryCategory("Authentication")


@dataclass(frozen=True)
class StatusCodeCondition:
    """Matches responses with a given HTTP status code."""

    code: int

    def matches(self, status: int, content: str) -> bool:
        return status == self.code


@dataclass(frozen=True)
class ContentRetryCondition:
    """Matches responses whose body contains a pattern.

    Plain patterns match case-insensitively; regex patterns are searched
    as written, and an invalid regex never matches.
    """

    pattern: str
    is_regex: bool = False

    def matches(self, status: int, content: str) -> bool:
        if self.is_regex:
            try:
                return re.search(self.pattern, content) is not None
            except re.error:
                return False
        return self.pattern.lower() in content.lower()


RetryCondition = Union[StatusCodeCondition, ContentRetryCondition]


def _check_attempt(attempt: int) -> int:
    if attempt < 0:
        raise ValueError(f"attempt must not be negative, got {attempt}")
    return attempt


@dataclass(frozen=True)
class ConstantBackoff:
    """The delay stays at the initial delay."""

    def scale(self, attempt: int) -> float:
        _check_attempt(attempt)
        return 1.0


@dataclass(frozen=True)
class LinearBackoff:
    """The delay grows in proportion to the attempt number."""

    def scale(self, attempt: int) -> float:
        return float(_check_attempt(attempt))


@dataclass(frozen=True)
class ExponentialBackoff:
    """The delay is multiplied by ``factor`` on each attempt."""

    factor: float = 2.0

    def scale(self, attempt: int) -> float:
        return self.factor ** _check_attempt(attempt)


BackoffPolicy = Union[ConstantBackoff, LinearBackoff, ExponentialBackoff]


@dataclass
class CategoryConfig:
    """Retry limits, delays (in seconds) and trigger conditions for one category."""

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 60.0
    backoff_policy: BackoffPolicy = field(default_factory=ExponentialBackoff)
    conditions: List[RetryCondition] = field(default_factory=list)

    def calculate_delay(self, attempt: int) -> float:
        return calculate_delay(self, attempt)


def check_condition(condition: RetryCondition, status: int, content: str) -> bool:
    """Tell whether a response with ``status`` and ``content`` meets ``condition``."""
    return condition.matches(status, content)


def calculate_delay(config: CategoryConfig, attempt: int) -> float:
    """Delay in seconds before retry number ``attempt`` (zero-based)."""
    if attempt == 0:
        return config.initial_delay
    delay = config.initial_delay * config.backoff_policy.scale(attempt)
    return min(delay, config.max_delay)


@dataclass
class RetryState:
    """How often a URL has been retried, per category and in total."""

    counts: Dict[RetryCategory, int] = field(default_factory=dict)
    total_retries: int = 0

    def copy(self) -> "RetryState":
        return RetryState(dict(self.counts), self.total_retries)


@dataclass
class RetryConfig:
    """Retry categories plus the retry state of every URL seen so far."""

    categories: Dict[RetryCategory, CategoryConfig] = field(default_factory=dict)
    _states: Dict[str, RetryState] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def should_retry(
        self, url: object, status: int, content: str
    ) -> Optional[Tuple[RetryCategory, float]]:
        """Record and return the category and delay of a retry, or None."""
        with self._lock:
            state = self._states.setdefault(str(url), RetryState())
            for category, config in self.categories.items():
                current = state.counts.get(category, 0)
                if current >= config.max_retries:
                    continue
                if any(check_condition(c, status, content) for c in config.conditions):
                    state.counts[category] = current + 1
                    state.total_retries += 1
                    return category, calculate_delay(config, current)
        return None

    def get_retry_state(self, url: object) -> RetryState:
        """A snapshot of the retry state of ``url``."""
        with self._lock:
            state = self._states.get(str(url))
            return state.copy() if state is not None else RetryState()