"""
Повторные попытки операций хранилища.

Повторяются только временные сбои: недоступность сервера, отказ в
выполнении запроса и истечение таймаута. Нарушение уникального индекса
не повторяется, повтор дал бы тот же DuplicateError.
"""
import asyncio
import functools
import logging
import random
import time
from typing import Any, Callable, ClassVar, Optional, Sequence, Tuple, Type, TypeVar, Union, cast

from mindspace.config import RetrySettings, settings
from mindspace.core.exceptions.store import ConnectionError, QueryError, StoreError

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


class RetryConfig:
    """
    Политика повторов: число попыток, экспоненциальная задержка со
    случайным разбросом и общий таймаут.
    """

    DEFAULT_RETRY_EXCEPTIONS: ClassVar[Tuple[Type[Exception], ...]] = (
        ConnectionError,
        QueryError,
        asyncio.TimeoutError,
    )

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.1,
        max_delay: float = 10.0,
        jitter: float = 0.1,
        retry_exceptions: Optional[Sequence[Type[Exception]]] = None,
        timeout: Optional[float] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if max_delay < base_delay:
            raise ValueError("max_delay must not be less than base_delay")
        if not 0 <= jitter <= 1:
            raise ValueError("jitter must be within [0, 1]")

        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter
        self.retry_exceptions = tuple(retry_exceptions or self.DEFAULT_RETRY_EXCEPTIONS)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, retry_settings: RetrySettings) -> "RetryConfig":
        return cls(
            max_attempts=retry_settings.MAX_ATTEMPTS,
            base_delay=retry_settings.BASE_DELAY,
            max_delay=retry_settings.MAX_DELAY,
            jitter=retry_settings.JITTER,
            timeout=retry_settings.TIMEOUT,
        )

    def calculate_delay(self, attempt: int) -> float:
        """Задержка перед попыткой attempt + 1: base * 2^(attempt-1), не больше max_delay."""
        delay = min(self.base_delay * 2 ** (attempt - 1), self.max_delay)
        if self.jitter:
            delay *= 1 + random.uniform(-self.jitter, self.jitter)
        return max(0.0, delay)

    def should_retry(self, exception: Exception, attempt: int) -> bool:
        return attempt < self.max_attempts and isinstance(exception, self.retry_exceptions)


default_retry_config = RetryConfig.from_settings(settings.retry)


def with_retry(
    func: Optional[F] = None,
    *,
    retry_config: Optional[RetryConfig] = None,
    **config_kwargs: Any,
) -> Union[F, Callable[[F], F]]:
    """
    Повторяет асинхронную операцию хранилища при временных сбоях.

    Применяется как @with_retry или @with_retry(max_attempts=5). Число
    сделанных попыток записывается в details["retry_attempts"] исключения
    хранилища, которое в итоге пробрасывается наружу.
    """
    def decorator(operation: F) -> F:
        name = operation.__qualname__

        @functools.wraps(operation)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            config = retry_config or (RetryConfig(**config_kwargs) if config_kwargs else default_retry_config)
            deadline = time.monotonic() + config.timeout if config.timeout else None
            attempt = 1

            while True:
                try:
                    if deadline is not None and time.monotonic() >= deadline:
                        raise asyncio.TimeoutError(f"{name}: retry timeout of {config.timeout}s exceeded")
                    result = await operation(*args, **kwargs)
                except Exception as e:
                    if not config.should_retry(e, attempt):
                        if isinstance(e, StoreError):
                            e.details.setdefault("retry_attempts", attempt)
                        if attempt > 1:
                            logger.warning(f"{name} failed after {attempt} attempts: {e}")
                        raise

                    delay = config.calculate_delay(attempt)
                    logger.warning(
                        f"{name} attempt {attempt} failed with {type(e).__name__}, retrying in {delay:.3f}s"
                    )
                    attempt += 1
                    await asyncio.sleep(delay)
                    continue

                if attempt > 1:
                    logger.info(f"{name} succeeded on attempt {attempt}")
                return result

        return cast(F, wrapper)

    if func is None:
        return decorator
    return decorator(func)


__all__ = [
    "RetryConfig",
    "with_retry",
    "default_retry_config",
]
