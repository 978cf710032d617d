from fastapi import FastAPI

from mindspace.config import settings
from mindspace.core.database import check_store_connection, close_store, init_store
from mindspace.core.logging import add_logging_middleware, configure_from_settings, get_logger
from mindspace.modules.appointments.routes import router as appointments_router
from mindspace.modules.moods.routes import router as moods_router


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Добавляем middleware для логирования HTTP запросов
add_logging_middleware(
    app,
    log_all_requests=settings.DEBUG,
    exclude_paths=["/healthcheck", "/docs", "/openapi.json"],
    request_id_header="X-Request-ID"
)

# Подключаем маршруты
app.include_router(appointments_router, prefix="/api")
app.include_router(moods_router, prefix="/api")


@app.on_event("startup")
async def startup():
    """
    Инициализация приложения при запуске
    """
    configure_from_settings()
    logger = get_logger(__name__)

    try:
        logger.info(f"Initializing {settings.STORE_BACKEND} document store...")
        await init_store()
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Application startup failed: {e}")
        raise


@app.on_event("shutdown")
async def shutdown():
    """
    Закрытие соединений при остановке приложения
    """
    await close_store()


@app.get("/")
async def read_root():
    """
    Корневой эндпоинт для проверки работы API
    """
    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs_url": "/docs"
    }


@app.get("/healthcheck")
async def healthcheck():
    """
    Проверка работоспособности сервера
    """
    return {"status": "ok"}


@app.get("/api/status")
async def check_status():
    """
    Проверка статуса хранилища
    """
    store_success, store_message = await check_store_connection()
    return {
        "store": {
            "backend": settings.STORE_BACKEND,
            "success": store_success,
            "message": store_message
        }
    }
