"""
Пакет исключений приложения MindSpace.

Содержит иерархию исключений хранилища документов. Ожидаемые бизнес-ошибки
(занятый слот, отсутствие связи с терапевтом и т.п.) исключениями не
являются и возвращаются как результаты операций.
"""

from mindspace.core.exceptions.store import (
    StoreError,
    ConnectionError,
    QueryError,
    DuplicateError
)

__all__ = [
    "StoreError",
    "ConnectionError",
    "QueryError",
    "DuplicateError"
]
