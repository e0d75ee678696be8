"""Exception hierarchy raised by the scraping framework."""


class ScraperError(Exception):
    """Base class for every error raised by the framework."""

    prefix = "Scraper error"

    def __init__(self, message: object = "") -> None:
        super().__init__(message)
        self.message = str(message)

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class HttpError(ScraperError):
    """A request could not be sent or its response could not be read."""

    prefix = "HTTP error"


class UrlError(ScraperError):
    """A URL could not be parsed or joined."""

    prefix = "URL parsing error"


class IoError(ScraperError):
    """A filesystem operation failed."""

    prefix = "IO error"


class JsonError(ScraperError):
    """A value could not be converted to or from JSON."""

    prefix = "JSON error"


class ExtractionError(ScraperError):
    """Data could not be extracted from a page."""

    prefix = "Extraction error"


class MiddlewareError(ScraperError):
    """A middleware step failed."""

    prefix = "Middleware error"


class StorageError(ScraperError):
    """A storage backend failed to persist an item."""

    prefix = "Storage error"