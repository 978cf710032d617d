"""
Иерархия исключений хранилища документов.

Ошибки драйвера MongoDB и встроенного хранилища приводятся к этим классам
на границе адаптера. Сервисы перехватывают их и возвращают результат
операции с причиной store_error или slot_taken.
"""
from typing import Any, Dict, List, Optional


class StoreError(Exception):
    """
    Базовое исключение хранилища.

    Атрибуты:
        message (str): Сообщение об ошибке
        code (Optional[str]): Код ошибки сервера, если он есть
        details (Dict[str, Any]): Коллекция, операция, число попыток и т.п.
        source (Optional[str]): Реализация хранилища ("memory", "mongodb")
        cause (Optional[Exception]): Исходное исключение
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.source = source
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        # details дополняется после создания (retry_attempts), поэтому собираем строку при выводе
        text = self.message
        if self.source:
            text += f" ({self.source})"
        if self.code:
            text += f" code={self.code}"
        if self.details:
            text += " " + " ".join(f"{key}={value}" for key, value in self.details.items())
        if self.cause:
            text += f" caused by {type(self.cause).__name__}: {self.cause}"
        return text

    @classmethod
    def from_exception(cls, exception: Exception, message: Optional[str] = None, **kwargs) -> "StoreError":
        return cls(message or str(exception), cause=exception, **kwargs)


class ConnectionError(StoreError):
    """
    Хранилище недоступно: нет соединения или истек таймаут выбора сервера.
    """


class QueryError(StoreError):
    """
    Сервер отклонил операцию над коллекцией.
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        self.collection = collection
        self.operation = operation
        details = kwargs.pop("details", None) or {}
        details.update({k: v for k, v in (("collection", collection), ("operation", operation)) if v})
        super().__init__(message, details=details, **kwargs)


class DuplicateError(StoreError):
    """
    Запись нарушает уникальный индекс коллекции.

    Для записей на прием это означает, что слот терапевта уже занят,
    для записей настроения - что на эту дату запись уже есть.
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        index_name: Optional[str] = None,
        fields: Optional[List[str]] = None,
        **kwargs
    ):
        self.collection = collection
        self.index_name = index_name
        self.fields = list(fields or [])
        details = kwargs.pop("details", None) or {}
        if collection:
            details["collection"] = collection
        if index_name:
            details["index_name"] = index_name
        super().__init__(message, details=details, **kwargs)


__all__ = [
    "StoreError",
    "ConnectionError",
    "QueryError",
    "DuplicateError",
]
