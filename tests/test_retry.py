from turboscraper.retry import (
    CategoryConfig,
    ConstantBackoff,
    ContentRetryCondition,
    ExponentialBackoff,
    LinearBackoff,
    RetryCategory,
    RetryConfig,
    StatusCodeCondition,
    calculate_delay,
    check_condition,
)

URL = "https://example.com/"


def _config(**kwargs):
    base = dict(max_retries=3, initial_delay=0.1, max_delay=1.0)
    base.update(kwargs)
    return CategoryConfig(**base)


def test_category_config_defaults():
    cfg = CategoryConfig()
    assert cfg.max_retries == 3
    assert cfg.initial_delay == 1.0
    assert cfg.max_delay == 60.0
    assert cfg.backoff_policy == ExponentialBackoff(2.0)
    assert cfg.conditions == []


def test_category_str():
    assert str(RetryCategory.RATE_LIMIT) == "RateLimit"
    assert str(RetryCategory("CloudflareCheck", is_custom=True)) == 'Custom("CloudflareCheck")'
    assert RetryCategory("X", is_custom=True) == RetryCategory("X", is_custom=True)


def test_status_condition():
    cond = StatusCodeCondition(429)
    assert check_condition(cond, 429, "")
    assert not check_condition(cond, 200, "")


def test_plain_content_condition_case_insensitive():
    cond = ContentRetryCondition("bot detected")
    assert check_condition(cond, 200, "Bot detected, please try again")
    assert not check_condition(cond, 200, "Welcome user")


def test_regex_content_condition():
    cond = ContentRetryCondition(r"IP.*blocked", is_regex=True)
    assert cond.matches(200, "Your IP (1.2.3.4) has been blocked")
    assert not cond.matches(200, "Success")


def test_invalid_regex_never_matches():
    cond = ContentRetryCondition("(unclosed", is_regex=True)
    assert cond.matches(200, "(unclosed") is False


def test_delay_attempt_zero_is_initial():
    for policy in (ConstantBackoff(), LinearBackoff(), ExponentialBackoff(3.0)):
        cfg = _config(backoff_policy=policy)
        assert calculate_delay(cfg, 0) == cfg.initial_delay


def test_constant_delay_stays_initial():
    cfg = _config(backoff_policy=ConstantBackoff())
    assert {cfg.calculate_delay(n) for n in range(5)} == {cfg.initial_delay}


def test_linear_delay_proportional():
    cfg = _config(initial_delay=0.5, max_delay=100.0, backoff_policy=LinearBackoff())
    assert cfg.calculate_delay(4) == cfg.calculate_delay(2) * 2


def test_exponential_delay_capped_and_monotonic():
    cfg = _config(backoff_policy=ExponentialBackoff(2.0))
    delays = [cfg.calculate_delay(n) for n in range(10)]
    assert delays == sorted(delays)
    assert delays[-1] == cfg.max_delay


def test_should_retry_counts_and_limits():
    cfg = RetryConfig()
    cfg.categories[RetryCategory.RATE_LIMIT] = _config(
        max_retries=2, conditions=[StatusCodeCondition(429)], backoff_policy=ConstantBackoff()
    )
    first = cfg.should_retry(URL, 429, "Rate limited")
    assert first == (RetryCategory.RATE_LIMIT, 0.1)
    assert cfg.should_retry(URL, 429, "Rate limited") is not None
    assert cfg.should_retry(URL, 429, "Rate limited") is None
    state = cfg.get_retry_state(URL)
    assert state.counts == {RetryCategory.RATE_LIMIT: 2}
    assert state.total_retries == 2


def test_should_retry_no_match():
    cfg = RetryConfig()
    assert cfg.should_retry(URL, 404, "Not Found") is None
    state = cfg.get_retry_state(URL)
    assert state.total_retries == 0
    assert state.counts == {}


def test_retry_state_is_per_url_and_a_snapshot():
    cfg = RetryConfig()
    cfg.categories[RetryCategory.BOT_DETECTION] = _config(
        conditions=[ContentRetryCondition("Bot detected")]
    )
    cfg.should_retry(URL, 200, "Bot detected, please verify")
    snapshot = cfg.get_retry_state(URL)
    snapshot.counts.clear()
    assert cfg.get_retry_state(URL).counts == {RetryCategory.BOT_DETECTION: 1}
    assert cfg.get_retry_state("https://other.example.com/").total_retries == 0


def test_multiple_categories_tracked_separately():
    cfg = RetryConfig()
    cfg.categories[RetryCategory.RATE_LIMIT] = _config(conditions=[StatusCodeCondition(429)])
    cfg.categories[RetryCategory.BOT_DETECTION] = _config(
        conditions=[ContentRetryCondition("Bot detected")]
    )
    assert cfg.should_retry(URL, 429, "Rate limited")[0] == RetryCategory.RATE_LIMIT
    assert cfg.should_retry(URL, 200, "Bot detected, please verify")[0] == RetryCategory.BOT_DETECTION
    state = cfg.get_retry_state(URL)
    assert state.counts == {RetryCategory.RATE_LIMIT: 1, RetryCategory.BOT_DETECTION: 1}
    assert state.total_retries == 2