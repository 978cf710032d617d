from unittest.mock import AsyncMock

import pytest

from mindspace.core.database import retry
from mindspace.core.database.retry import RetryConfig, with_retry
from mindspace.core.exceptions.store import ConnectionError, DuplicateError, QueryError


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    sleep = AsyncMock()
    monkeypatch.setattr(retry.asyncio, "sleep", sleep)
    return sleep


class TestRetryConfig:
    """Тесты параметров повторных попыток"""

    def test_exponential_delay(self):
        config = RetryConfig(base_delay=0.1, max_delay=1.0, jitter=0)

        assert config.calculate_delay(1) == pytest.approx(0.1)
        assert config.calculate_delay(2) == pytest.approx(0.2)
        assert config.calculate_delay(3) == pytest.approx(0.4)
        assert config.calculate_delay(10) == pytest.approx(1.0)

    def test_jitter_bounds(self):
        config = RetryConfig(base_delay=1.0, max_delay=1.0, jitter=0.1)
        for _ in range(20):
            assert 0.9 <= config.calculate_delay(1) <= 1.1

    @pytest.mark.parametrize("kwargs", [
        {"max_attempts": 0},
        {"base_delay": 0},
        {"base_delay": 1.0, "max_delay": 0.5},
        {"jitter": 1.5},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            RetryConfig(**kwargs)

    def test_should_retry(self):
        config = RetryConfig(max_attempts=3)

        assert config.should_retry(ConnectionError("down"), 1)
        assert config.should_retry(QueryError("bad"), 2)
        assert not config.should_retry(ConnectionError("down"), 3)
        assert not config.should_retry(DuplicateError("dup"), 1)
        assert not config.should_retry(ValueError("bug"), 1)


class TestWithRetry:
    """Тесты декоратора with_retry"""

    async def test_retries_until_success(self, no_retry_sleep):
        operation = AsyncMock(side_effect=[ConnectionError("down"), ConnectionError("down"), "ok"])

        @with_retry(max_attempts=3, base_delay=0.01, jitter=0)
        async def call():
            return await operation()

        assert await call() == "ok"
        assert operation.await_count == 3
        assert no_retry_sleep.await_count == 2

    async def test_non_retryable_error_is_raised_immediately(self):
        operation = AsyncMock(side_effect=DuplicateError("dup"))

        @with_retry
        async def call():
            return await operation()

        with pytest.raises(DuplicateError) as exc_info:
            await call()

        assert operation.await_count == 1
        assert exc_info.value.details["retry_attempts"] == 1

    async def test_gives_up_after_max_attempts(self):
        operation = AsyncMock(side_effect=QueryError("bad", collection="moods"))

        @with_retry(retry_config=RetryConfig(max_attempts=2, base_delay=0.01))
        async def call():
            return await operation()

        with pytest.raises(QueryError) as exc_info:
            await call()

        assert operation.await_count == 2
        assert exc_info.value.details["retry_attempts"] == 2

    async def test_preserves_function_metadata(self):
        @with_retry
        async def fetch_records():
            """docstring"""

        assert fetch_records.__name__ == "fetch_records"
        assert fetch_records.__doc__ == "docstring"
