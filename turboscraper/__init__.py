"""Asynchronous web crawling with spiders, retry policies, statistics and disk or MongoDB storage."""

__version__ = "0.1.0"