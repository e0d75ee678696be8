"""Thread-safe collection of crawl statistics."""

import copy
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScrapingStats:
    """Counters gathered during a crawl; response times are in milliseconds."""

    start_time: datetime = field(default_factory=_now)
    end_time: Optional[datetime] = None
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    retry_count: int = 0
    bytes_downloaded: int = 0
    status_codes: Dict[int, int] = field(default_factory=dict)
    retry_reasons: Dict[str, int] = field(default_factory=dict)
    average_response_time: float = 0.0


class StatsTracker:
    """Records requests and retries and reports a summary."""

    def __init__(self) -> None:
        self._stats = ScrapingStats()
        self._lock = threading.Lock()

    def record_request(self, status: int, size: int, duration: timedelta) -> None:
        with self._lock:
            stats = self._stats
            stats.total_requests += 1
            if status < 400:
                stats.successful_requests += 1
            else:
                stats.failed_requests += 1
            stats.status_codes[status] = stats.status_codes.get(status, 0) + 1
            stats.bytes_downloaded += size

            millis = int(duration / timedelta(milliseconds=1))
            previous_total = stats.average_response_time * (stats.total_requests - 1)
            stats.average_response_time = (previous_total + millis) / stats.total_requests

    def record_retry(self, category: str) -> None:
        with self._lock:
            self._stats.retry_count += 1
            reasons = self._stats.retry_reasons
            reasons[category] = reasons.get(category, 0) + 1

    def finish(self) -> None:
        with self._lock:
            self._stats.end_time = _now()

    def get_stats(self) -> ScrapingStats:
        """A copy of the current statistics."""
        with self._lock:
            return copy.deepcopy(self._stats)

    def format_summary(self) -> str:
        stats = self.get_stats()
        end = stats.end_time or _now()
        seconds = int((end - stats.start_time).total_seconds())

        lines = [
            "",
            "Scraping Statistics:",
            "===================",
            f"Duration: {seconds} seconds",
            f"Total Requests: {stats.total_requests}",
            f"Successful Requests: {stats.successful_requests}",
            f"Failed Requests: {stats.failed_requests}",
            f"Retry Count: {stats.retry_count}",
            f"Data Downloaded: {stats.bytes_downloaded / 1_000_000:.2f} MB",
            f"Average Response Time: {stats.average_response_time:.2f}ms",
            "",
            "Status Codes:",
        ]
        lines.extend(f"  {code}: {count}" for code, count in stats.status_codes.items())
        if stats.retry_reasons:
            lines.extend(["", "Retry Reasons:"])
            lines.extend(f"  {reason}: {count}" for reason, count in stats.retry_reasons.items())
        return "\n".join(lines)

    def print_summary(self) -> None:
        """Write the summary to standard output."""
        out = sys.stdout
        out.write(self.format_summary())
        out.write("\n")
        out.flush()