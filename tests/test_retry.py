import pytest

from request_client import ClientConfig, RetryPolicy, TransportFailure, merge_options
from request_client.retry import is_retryable


@pytest.fixture
def policy() -> RetryPolicy:
    return RetryPolicy.from_options(ClientConfig())


def test_backoff_grows_linearly_within_default_bounds(policy: RetryPolicy) -> None:
    assert [policy.backoff_ms(n) for n in (1, 2, 3)] == [200, 400, 600]


def test_backoff_saturates_at_max(policy: RetryPolicy) -> None:
    assert policy.backoff_ms(4) == 750
    assert policy.backoff_ms(50) == 750


def test_backoff_respects_min_bound() -> None:
    policy = RetryPolicy(retry_max=3, min_backoff_ms=500, max_backoff_ms=1000)
    assert [policy.backoff_ms(n) for n in (1, 2, 3, 4, 5, 6)] == [500, 500, 600, 800, 1000, 1000]


def test_backoff_rejects_attempt_zero(policy: RetryPolicy) -> None:
    with pytest.raises(ValueError):
        policy.backoff_ms(0)


@pytest.mark.parametrize("status", [429, 500, 501, 502, 503, 504, 599])
def test_retryable_statuses(status: int) -> None:
    assert is_retryable(TransportFailure("x", status_code=status))


@pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 428, 430, 499])
def test_non_retryable_statuses(status: int) -> None:
    assert not is_retryable(TransportFailure("x", status_code=status))


def test_failures_without_status() -> None:
    assert is_retryable(TransportFailure("x", timed_out=True))
    assert is_retryable(TransportFailure("x", connection_error=True))
    assert not is_retryable(TransportFailure("x"))
    assert not is_retryable(RuntimeError("not a transport failure"))


def test_should_retry_honours_budget(policy: RetryPolicy) -> None:
    failure = TransportFailure("x", status_code=503)
    assert policy.should_retry(1, failure)
    assert policy.should_retry(2, failure)
    assert not policy.should_retry(3, failure)
    assert not policy.should_retry(1, TransportFailure("x", status_code=404))


def test_policy_from_merged_options() -> None:
    effective = merge_options(ClientConfig(retry_max=5, min_backoff_ms=10, max_backoff_ms=300))
    assert RetryPolicy.from_options(effective) == RetryPolicy(retry_max=5, min_backoff_ms=10, max_backoff_ms=300)
