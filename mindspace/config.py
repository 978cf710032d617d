from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional
from dotenv import load_dotenv

# Загружаем переменные окружения из .env файла
load_dotenv(override=True)


class MongoDBSettings(BaseSettings):
    """
    Настройки MongoDB
    """
    MONGODB_URL: str = Field(default="mongodb://localhost:27017")
    MONGODB_DB_NAME: str = Field(default="mindspace")
    MONGODB_TIMEOUT_MS: int = Field(default=5000)

    # Имена полей уже содержат префикс MONGODB_
    model_config = SettingsConfigDict(extra="ignore")


class SchedulingSettings(BaseSettings):
    """
    Настройки рабочего окна и длительности сессий
    (переменные окружения SCHEDULING_WORKDAY_START_HOUR и т.д.)
    """
    WORKDAY_START_HOUR: int = Field(default=9, ge=0, le=23)
    WORKDAY_END_HOUR: int = Field(default=17, ge=1, le=24)
    DEFAULT_DURATION_MINUTES: int = Field(default=50, gt=0)
    DEFAULT_SESSION_TYPE: str = Field(default="Regular Session")

    @field_validator("WORKDAY_END_HOUR")
    @classmethod
    def end_after_start(cls, v: int, info) -> int:
        start = info.data.get("WORKDAY_START_HOUR")
        if start is not None and v <= start:
            raise ValueError("WORKDAY_END_HOUR должен быть больше WORKDAY_START_HOUR")
        return v

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULING_",
        extra="ignore"
    )


class MoodSettings(BaseSettings):
    """
    Настройки аналитики настроения
    """
    TREND_WINDOW: int = Field(default=7, gt=0)
    TREND_THRESHOLD: float = Field(default=0.5, ge=0)
    INTENSITY_WINDOW_DAYS: int = Field(default=30, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="MOOD_",
        extra="ignore"
    )


class RetrySettings(BaseSettings):
    """
    Настройки механизма повторных попыток
    """
    MAX_ATTEMPTS: int = Field(default=3)
    BASE_DELAY: float = Field(default=0.1)
    MAX_DELAY: float = Field(default=10.0)
    JITTER: float = Field(default=0.1)
    TIMEOUT: Optional[float] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="RETRY_",
        extra="ignore"
    )


class Settings(BaseSettings):
    """
    Общие настройки приложения
    """
    APP_NAME: str = Field(default="MindSpace Records")
    APP_VERSION: str = Field(default="0.1.0")
    APP_DESCRIPTION: str = Field(default="Локальный менеджер записей, расписания и дневника настроения MindSpace")
    DEBUG: bool = Field(default=False)

    # "memory" - встроенное хранилище устройства, "mongodb" - MongoDB через motor
    STORE_BACKEND: str = Field(default="memory", pattern="^(memory|mongodb)$")

    # Вложенные настройки для различных компонентов
    mongodb: MongoDBSettings = Field(default_factory=MongoDBSettings)
    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)
    mood: MoodSettings = Field(default_factory=MoodSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


# Создаем экземпляр настроек
settings = Settings()
