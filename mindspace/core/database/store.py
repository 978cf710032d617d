"""
Абстракция хранилища документов.

Ядро работает с хранилищем только через этот интерфейс: поиск по ключу,
выборка всей коллекции, поиск по полю, вставка, замена и удаление.
Каждая отдельная операция атомарна; последовательности операций - нет,
поэтому инварианты "один слот - одна активная запись" и "одна запись
настроения в день" дополнительно закрепляются уникальными индексами.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

# Имя поля с ключом документа во всех записях, которые возвращает хранилище
KEY_FIELD = "id"


class DocumentStore(ABC):
    """
    Асинхронное хранилище документов с коллекциями.

    Записи - словари с JSON-совместимыми значениями. Ключ записи хранится
    в поле "id" и генерируется хранилищем при вставке.
    """

    backend: str = "abstract"

    @abstractmethod
    async def get_by_key(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Возвращает запись по ключу или None."""

    @abstractmethod
    async def get_all(self, collection: str) -> List[Dict[str, Any]]:
        """Возвращает все записи коллекции."""

    @abstractmethod
    async def get_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Возвращает записи, у которых поле field равно value."""

    @abstractmethod
    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        """
        Вставляет запись и возвращает сгенерированный ключ.

        Raises:
            DuplicateError: запись нарушает уникальный индекс коллекции
        """

    @abstractmethod
    async def update(self, collection: str, record: Dict[str, Any]) -> bool:
        """
        Заменяет запись с ключом record["id"].

        Returns:
            bool: False, если записи с таким ключом нет

        Raises:
            DuplicateError: новая версия записи нарушает уникальный индекс
        """

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """Удаляет запись по ключу; False, если записи не было."""

    @abstractmethod
    async def create_unique_index(
        self,
        collection: str,
        fields: Sequence[str],
        name: str,
        partial_filter: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Объявляет уникальный индекс по набору полей.

        partial_filter ограничивает индекс записями, у которых все указанные
        поля равны заданным значениям (например, {"slot_active": True}).
        """

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
