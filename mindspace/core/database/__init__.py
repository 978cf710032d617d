from mindspace.core.database.store import DocumentStore, KEY_FIELD
from mindspace.core.database.memory import InMemoryDocumentStore
from mindspace.core.database.indexes import (
    APPOINTMENTS_COLLECTION, MOODS_COLLECTION, THERAPISTS_COLLECTION,
    USER_THERAPISTS_COLLECTION, setup_indexes
)
from mindspace.core.database.startup import (
    init_store, get_store, set_store, close_store, check_store_connection
)
from mindspace.core.database.retry import (
    RetryConfig, with_retry, default_retry_config
)

__all__ = [
    # Хранилище
    "DocumentStore", "KEY_FIELD", "InMemoryDocumentStore",
    "init_store", "get_store", "set_store", "close_store", "check_store_connection",

    # Коллекции и индексы
    "APPOINTMENTS_COLLECTION", "MOODS_COLLECTION", "THERAPISTS_COLLECTION",
    "USER_THERAPISTS_COLLECTION", "setup_indexes",

    # Повторные попытки
    "RetryConfig", "with_retry", "default_retry_config"
]
