# turboscraper

An asynchronous crawling framework. You describe what to crawl in a
**spider**, a **scraper** fetches pages and retries them according to
per-category rules, the **crawler** schedules the requests with bounded
concurrency and depth, and extracted items go to a **storage** backend
(JSON files on disk or a MongoDB collection). At the end of a crawl a
summary of request statistics is printed to standard output.

## Installation

```
pip install turboscraper
```

For running the test suite:

```
pip install "turboscraper[test]"
```

## Command line

```
turboscraper
```

This runs the bundled `BookSpider` against `https://books.toscrape.com/`
with an `HttpScraper` whose retry configuration comes from
`turboscraper.cli.build_retry_config()`: up to 10 rate-limit retries when
the status is 429 or the body matches the regular expression
`rate limit|too many requests` (matched case-sensitively), with
exponential backoff (factor 2) starting at 1 s and capped at 10 s.

Options:

| Option | Default | Meaning |
| --- | --- | --- |
| `--data-dir` | `data` | directory for disk storage |
| `--mongo-uri` | none | store items in MongoDB at this URI instead of on disk |
| `--mongo-database` | `book_scraper` | MongoDB database used with `--mongo-uri` |
| `--max-depth` | `999999` | requests at this depth or deeper are not followed |
| `--max-concurrency` | `30` | maximum number of pages fetched at once |

With disk storage each book is written as a pretty-printed JSON file under
`<data-dir>/books/<host>/`. The command exits with status 1 and prints the
message to standard error when a `ScraperError` ends the run.

## Building blocks

- `turboscraper.spider`: `Spider` is the abstract base for crawl
  definitions. Implement `name()`, `start_urls()`, `config()` (a
  `SpiderConfig` with `max_depth`, default 2, and `max_concurrency`,
  default 10) and the async `parse(response, url, depth)`, which returns a
  `ParseResult`. A `ParseResult` has a `ParseAction` (`CONTINUE`, `SKIP`,
  `STOP`); only `CONTINUE` may carry new requests.
  `get_initial_requests()` builds depth-0 requests from the start URLs
  using `get_initial_callback()` (a bootstrap callback by default).
  `Parser` is an abstract interface whose async `parse` turns a `Response`
  into a list of `Request`s.
- `turboscraper.http`: `Request` (URL, `SpiderCallback`, depth, metadata;
  `with_meta(meta)` returns a copy carrying `meta` as a JSON value and
  raises `JsonError` if it cannot be serialised), `Response` (URL, status,
  headers, body, timestamp, retry count, per-category retry history,
  metadata, `ResponseType`), and `SpiderCallback`, made from a
  `CallbackKind` (`BOOTSTRAP`, `PARSE_ITEM`, `PARSE_PAGINATION`, or
  `CUSTOM` with a name).
- `turboscraper.retry`: `RetryConfig.categories` maps a `RetryCategory`
  (`RATE_LIMIT`, `SERVER_ERROR`, `BOT_DETECTION`, `NOT_FOUND`,
  `BLACKLISTED`, `AUTHENTICATION`, or `RetryCategory(name, is_custom=True)`)
  to a `CategoryConfig`: `max_retries` (default 3), `initial_delay` and
  `max_delay` in seconds (defaults 1 and 60), a backoff policy
  (`ConstantBackoff`, `LinearBackoff`, `ExponentialBackoff(factor)`, default
  factor 2) and the conditions that trigger it: `StatusCodeCondition(code)`
  or `ContentRetryCondition(pattern, is_regex)`, which matches plain
  patterns case-insensitively and regular expressions as written (an
  invalid expression never matches). `RetryConfig.should_retry` records
  retries per URL; `get_retry_state` returns a snapshot as a `RetryState`.
- `turboscraper.scraper`: `Scraper` is the abstract base; subclasses
  implement `fetch_single(url)`, and `fetch(url)` repeats it while a retry
  condition matches, sleeping for the computed delay, then records the
  request in its `StatsTracker` and returns the response with its retry
  count and history.
- `turboscraper.http_scraper`: `HttpScraper` performs real HTTP requests
  with `get`, `post`, `put`, `delete` and `fetch_with_method`, sending a
  configurable User-Agent (a desktop browser string by default) and
  following redirects. Responses of any status are returned; transport
  failures raise `HttpError` and malformed URLs `UrlError`. Use it as an
  async context manager or call `aclose()`. Requests have no timeout
  unless `timeout` is given.
- `turboscraper.crawler`: `Crawler(scraper).run(spider)` drives a spider
  to completion, scheduling every URL at most once, logging and skipping
  requests that fail, stopping when the spider returns `STOP`, and printing
  the statistics summary at the end. `visited_urls` holds every URL
  scheduled.
- `turboscraper.stats`: `StatsTracker` counts requests, successes (status
  below 400), failures, status codes, retries by reason, bytes downloaded
  and average response time; `get_stats()` returns a `ScrapingStats`
  copy, `format_summary()` the text that `print_summary()` writes.
- `turboscraper.storage`: `StorageBackend` with `create_config` and async
  `store`. `DiskStorage(base_path)` writes each `StorageItem` to
  `<base>/<subfolder>/<host>/<prefix><YYYYmmdd_HHMMSS>_<uuid7>.json` and
  returns the path; `MongoStorage(database)` or
  `MongoStorage.from_uri(uri, database)` inserts one document per item.
  `create_storage` builds either from a `DiskStorageSpec` or
  `MongoStorageSpec`. `uuid7()` produces the time-ordered IDs used in
  file names.
- `turboscraper.book_spider`: `BookSpider(storage)`, a complete spider
  that follows listing pages and pagination, visits every book page and
  stores its title, price, availability, UPC and description in the
  `books` collection.
- `turboscraper.errors`: `ScraperError` and its subclasses `HttpError`,
  `UrlError`, `IoError`, `JsonError`, `ExtractionError`,
  `MiddlewareError` and `StorageError`.

## Writing a spider

Subclass `Spider`, return your start URLs, and in `parse` dispatch on
`response.callback.kind`: list pages return
`ParseResult(ParseAction.CONTINUE, requests)` with follow-up `Request`s at
`depth + 1`, item pages store their data through a storage backend and
return `ParseResult(ParseAction.SKIP)`. Pass an instance to `Crawler.run`
together with a scraper such as `HttpScraper`; `BookSpider` is a working
reference.

## Limitations

- `Spider.allowed_domains()` exists but the crawler does not enforce it;
  filter URLs in your spider's `parse` if needed.
- There is no robots.txt handling, politeness delay or persistence of the
  visited-URL set between runs.
- `MongoStorage` uses the synchronous MongoDB driver in a worker thread.