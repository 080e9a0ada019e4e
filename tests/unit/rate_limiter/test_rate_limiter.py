import time

from knowledge_manager.context import RequestContext
from knowledge_manager.rate_limiter import RateLimiter


def test_limit_is_exceeded_only_after_threshold(redis_client):
    limiter = RateLimiter(redis_client, "failed_attempts:1.2.3.4", limit=6, period=10)
    for _ in range(6):
        limiter.record_failure()
    assert limiter.count() == 6
    assert not limiter.limit_exceeded()

    limiter.record_failure()
    assert limiter.limit_exceeded()


def test_window_is_set_while_under_limit(redis_client):
    limiter = RateLimiter(redis_client, "failed_attempts:k", limit=3, period=10)
    limiter.record_failure()
    ttl = redis_client.ttl("failed_attempts:k")
    assert 0 < ttl <= 10


def test_window_is_not_extended_once_limit_is_reached(redis_client):
    limiter = RateLimiter(redis_client, "failed_attempts:k", limit=2, period=100)
    limiter.record_failure()
    limiter.record_failure()
    redis_client.expire("failed_attempts:k", 5)

    limiter.record_failure()
    limiter.record_failure()
    assert limiter.count() == 4
    assert redis_client.ttl("failed_attempts:k") <= 5


def test_counter_decays_after_window(redis_client):
    limiter = RateLimiter(redis_client, "failed_attempts:k", limit=6, period=1)
    for _ in range(7):
        limiter.record_failure()
    redis_client.expire("failed_attempts:k", 1)
    assert limiter.limit_exceeded()

    time.sleep(1.2)
    assert limiter.count() == 0
    assert not limiter.limit_exceeded()


def test_for_request_keys_on_client_and_scope(app):
    ctx = RequestContext(user_id=None, client_ip="10.0.0.1")
    assert RateLimiter.for_request(ctx, 6, 10).key == "failed_attempts:10.0.0.1"
    assert RateLimiter.for_request(ctx, 6, 10, scope="login").key == "failed_attempts:10.0.0.1:login"


def test_from_config_reads_endpoint_settings(app):
    ctx = RequestContext(user_id=None, client_ip="10.0.0.1")
    limiter = RateLimiter.from_config(ctx, "SIGNUP")
    assert (limiter.limit, limiter.period) == (8, 10)
    limiter = RateLimiter.from_config(ctx, "LOGIN")
    assert (limiter.limit, limiter.period) == (6, 10)


def test_clients_are_counted_separately(redis_client):
    a = RateLimiter(redis_client, "failed_attempts:a", limit=1, period=10)
    b = RateLimiter(redis_client, "failed_attempts:b", limit=1, period=10)
    a.record_failure()
    a.record_failure()
    assert a.limit_exceeded()
    assert not b.limit_exceeded()


def test_zero_limit_still_expires(redis_client):
    limiter = RateLimiter(redis_client, "failed_attempts:k", limit=0, period=10)
    limiter.record_failure()
    assert limiter.limit_exceeded()
    assert 0 < redis_client.ttl("failed_attempts:k") <= 10

    redis_client.expire("failed_attempts:k", 5)
    limiter.record_failure()
    assert redis_client.ttl("failed_attempts:k") <= 5
