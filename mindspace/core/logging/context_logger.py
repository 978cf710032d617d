"""
Модуль, содержащий классы для контекстно-зависимого логирования.
"""
import logging
import threading
from contextvars import ContextVar
from logging import LoggerAdapter
from typing import Any, Dict, Optional


# Контекстная переменная для хранения информации о запросе и пользователе
_request_context: ContextVar[Dict[str, Any]] = ContextVar("request_context", default={})


class ContextLoggerAdapter(LoggerAdapter):
    """
    Адаптер логгера, добавляющий контекстную информацию к записям лога.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})

        # Контекст адаптера не перекрывает явно переданные поля
        for key, value in (self.extra or {}).items():
            extra.setdefault(key, value)

        for key, value in _request_context.get().items():
            extra.setdefault(key, value)

        kwargs["extra"] = extra
        return msg, kwargs


class ContextLogger:
    """
    Логгер с поддержкой контекста запроса и пользователя (Singleton).
    """

    _instance: Optional["ContextLogger"] = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs) -> "ContextLogger":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super(ContextLogger, cls).__new__(cls)
            return cls._instance

    def __init__(self, logger_name: str = "mindspace", level: int = logging.INFO):
        # Инициализируем только один раз
        if not hasattr(self, "_initialized"):
            self.logger = logging.getLogger(logger_name)
            self.logger.setLevel(level)
            self._initialized = True

    @classmethod
    def get_instance(cls, logger_name: str = "mindspace", level: int = logging.INFO) -> "ContextLogger":
        return cls(logger_name, level)

    @classmethod
    def set_context(cls, **context) -> None:
        """
        Дополняет глобальный контекст для всех логгеров текущей задачи.
        """
        current_context = _request_context.get().copy()
        current_context.update(context)
        _request_context.set(current_context)

    @classmethod
    def clear_context(cls) -> None:
        _request_context.set({})

    @classmethod
    def get_context(cls) -> Dict[str, Any]:
        return dict(_request_context.get())

    def with_context(self, logger_name: Optional[str] = None, **context) -> LoggerAdapter:
        """
        Создает адаптер с дополнительным контекстом.

        Args:
            logger_name: Имя логгера (по умолчанию базовый логгер)
            **context: Ключи и значения контекста
        """
        logger = logging.getLogger(logger_name) if logger_name else self.logger
        return ContextLoggerAdapter(logger, context)
