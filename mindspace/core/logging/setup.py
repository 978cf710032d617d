"""
Модуль для настройки и инициализации системы логирования.
"""
import logging
import os
import sys
from typing import Any, Dict, Optional

from mindspace.config import settings
from mindspace.core.logging.json_formatter import JsonFormatter
from mindspace.core.logging.context_logger import ContextLogger, ContextLoggerAdapter


def _build_formatter(json_format: bool, additional_fields: Optional[Dict[str, Any]]) -> logging.Formatter:
    if json_format:
        return JsonFormatter(
            additional_fields=additional_fields or {
                "app_name": settings.APP_NAME,
                "app_version": settings.APP_VERSION,
                "environment": "development" if settings.DEBUG else "production"
            }
        )
    return logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    )


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
    console_output: bool = True,
    additional_fields: Optional[Dict[str, Any]] = None
) -> None:
    """
    Настраивает систему логирования с указанными параметрами.

    Args:
        log_level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Использовать ли JSON формат для логов
        log_file: Путь к файлу лога (если None, запись в файл не выполняется)
        console_output: Выводить ли логи в консоль
        additional_fields: Дополнительные поля для всех логов
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Удаляем существующие обработчики
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = _build_formatter(json_format, additional_fields)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Драйвер MongoDB пишет много отладочных сообщений
    for driver_logger in ("pymongo", "motor"):
        logging.getLogger(driver_logger).setLevel(max(level, logging.WARNING))

    ContextLogger.get_instance(level=level)

    logging.info(
        f"Система логирования инициализирована с уровнем {log_level}"
        f", формат {'JSON' if json_format else 'TEXT'}"
    )


def get_logger(name: str, **context) -> logging.LoggerAdapter:
    """
    Возвращает логгер с указанным именем и контекстом.

    Контекст запроса (request_id, user_id) из ContextLogger добавляется
    автоматически.
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def configure_from_settings() -> None:
    """
    Настраивает систему логирования из переменных окружения.
    """
    log_level = os.environ.get("LOG_LEVEL", "DEBUG" if settings.DEBUG else "INFO")
    json_format = os.environ.get("LOG_FORMAT", "json").lower() == "json"
    log_file = os.environ.get("LOG_FILE")
    console_output = os.environ.get("LOG_CONSOLE", "true").lower() == "true"

    configure_logging(
        log_level=log_level,
        json_format=json_format,
        log_file=log_file,
        console_output=console_output
    )
