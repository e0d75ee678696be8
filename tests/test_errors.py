import pytest

from turboscraper.errors import (
    ExtractionError,
    HttpError,
    IoError,
    JsonError,
    MiddlewareError,
    ScraperError,
    StorageError,
    UrlError,
)


@pytest.mark.parametrize(
    ("cls", "prefix"),
    [
        (HttpError, "HTTP error"),
        (UrlError, "URL parsing error"),
        (IoError, "IO error"),
        (JsonError, "JSON error"),
        (ExtractionError, "Extraction error"),
        (MiddlewareError, "Middleware error"),
        (StorageError, "Storage error"),
    ],
)
def test_message_format(cls, prefix):
    err = cls("boom")
    assert str(err) == f"{prefix}: boom"
    assert err.message == "boom"


@pytest.mark.parametrize(
    "cls",
    [HttpError, UrlError, IoError, JsonError, ExtractionError, MiddlewareError, StorageError],
)
def test_all_errors_caught_by_base(cls):
    err = cls("failure")
    assert isinstance(err, ScraperError)
    assert err.message == "failure"
    assert str(err).endswith(": failure")


def test_wraps_other_exception_text():
    cause = ValueError("bad value")
    err = JsonError(cause)
    assert str(err) == "JSON error: bad value"