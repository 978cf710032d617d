"""
Уникальные индексы коллекций.

Индексы объявляются одинаково для встроенного хранилища и для MongoDB и
закрепляют инварианты на уровне хранилища: вторая активная запись на тот же
слот терапевта или вторая запись настроения на ту же дату будет отклонена
с DuplicateError, даже если проверка в сервисе проиграла гонку.
"""
import logging

from mindspace.core.database.store import DocumentStore

logger = logging.getLogger(__name__)

APPOINTMENTS_COLLECTION = "appointments"
MOODS_COLLECTION = "moods"
THERAPISTS_COLLECTION = "therapists"
USER_THERAPISTS_COLLECTION = "user_therapists"

APPOINTMENT_SLOT_INDEX = "ux_appointments_active_slot"
MOOD_DAY_INDEX = "ux_moods_user_date"
CONNECTION_INDEX = "ux_user_therapists_pair"


async def create_appointments_indexes(store: DocumentStore) -> None:
    # Отмененные записи (slot_active=False) не занимают слот
    await store.create_unique_index(
        APPOINTMENTS_COLLECTION,
        ["therapist_id", "date", "time"],
        name=APPOINTMENT_SLOT_INDEX,
        partial_filter={"slot_active": True}
    )


async def create_moods_indexes(store: DocumentStore) -> None:
    await store.create_unique_index(
        MOODS_COLLECTION,
        ["user_id", "date"],
        name=MOOD_DAY_INDEX
    )


async def create_user_therapists_indexes(store: DocumentStore) -> None:
    await store.create_unique_index(
        USER_THERAPISTS_COLLECTION,
        ["user_id", "therapist_id"],
        name=CONNECTION_INDEX
    )


async def setup_indexes(store: DocumentStore) -> None:
    """
    Создает все индексы, необходимые ядру.
    """
    await create_appointments_indexes(store)
    await create_moods_indexes(store)
    await create_user_therapists_indexes(store)
    logger.info(f"Indexes for {store.backend} store are set up")
