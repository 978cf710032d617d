"""
Форматтер для структурированного логирования в формате JSON.
"""
import datetime
import json
import logging
import socket
import traceback
from typing import Any, Dict, List, Optional


# Атрибуты LogRecord, которые не попадают в блок extra
_STANDARD_ATTRS = {
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "module", "msecs",
    "message", "msg", "name", "pathname", "process", "processName",
    "relativeCreated", "stack_info", "thread", "threadName", "taskName",
}


class JsonFormatter(logging.Formatter):
    """
    Преобразует запись лога в JSON-объект.

    Базовые поля: timestamp, level, logger, message, module, line, function,
    hostname. Поля, переданные через extra (например, user_id или
    appointment_id), складываются в блок "extra". При исключении добавляется
    блок "exception_data" с типом, сообщением и трассировкой.
    """

    def __init__(
        self,
        include_traceback: bool = True,
        exclude_fields: Optional[List[str]] = None,
        additional_fields: Optional[Dict[str, Any]] = None,
        timestamp_format: str = "%Y-%m-%dT%H:%M:%S.%f",
    ):
        super().__init__()
        self.include_traceback = include_traceback
        self.exclude_fields = exclude_fields or []
        self.additional_fields = additional_fields or {}
        self.timestamp_format = timestamp_format
        self.hostname = socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).strftime(self.timestamp_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            "function": record.funcName,
            "hostname": self.hostname,
        }
        log_data.update(self.additional_fields)

        extra_fields = self._collect_extra(record)
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception_data"] = self._exception_info(record)

        for field in self.exclude_fields:
            log_data.pop(field, None)

        try:
            return json.dumps(log_data, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            # Упрощенная запись, если что-то не сериализуется
            return json.dumps({
                "timestamp": log_data["timestamp"],
                "level": "ERROR",
                "message": f"Ошибка форматирования лога: {e}",
                "original_message": str(record.msg),
            }, ensure_ascii=False)

    @staticmethod
    def _collect_extra(record: logging.LogRecord) -> Dict[str, Any]:
        extra_fields = {}
        for attr, value in record.__dict__.items():
            if attr in _STANDARD_ATTRS or attr.startswith("_"):
                continue
            try:
                json.dumps(value)
                extra_fields[attr] = value
            except (TypeError, ValueError):
                # date, Enum и прочие несериализуемые значения пишем строкой
                extra_fields[attr] = str(value)
        return extra_fields

    def _exception_info(self, record: logging.LogRecord) -> Dict[str, Any]:
        exc_type, exc_value, exc_tb = record.exc_info
        exception_data = {
            "exception": exc_type.__name__ if exc_type else None,
            "exception_message": str(exc_value),
        }
        if self.include_traceback and exc_tb:
            tb_lines = traceback.format_exception(exc_type, exc_value, exc_tb)
            exception_data["traceback"] = "".join(tb_lines).strip()
        return exception_data
