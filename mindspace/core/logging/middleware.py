"""
Логирование HTTP запросов с контекстом.

Каждый запрос получает request_id (из заголовка или новый), а
идентификаторы пользователя и записи из пути попадают в контекст всех
логов, написанных во время обработки запроса.
"""
import re
import time
import uuid
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from mindspace.core.logging.context_logger import ContextLogger

_USER_PATH = re.compile(r"/user/(?P<user_id>[^/]+)")
_RESOURCE_PATH = re.compile(r"^/api/(?P<resource>appointments|moods)/(?P<resource_id>[^/]+)")
_COLLECTION_ROUTES = {"user", "slots", "categories"}


def path_context(path: str) -> Dict[str, str]:
    """Идентификаторы пользователя и записи, извлеченные из пути запроса."""
    context = {}
    user_match = _USER_PATH.search(path)
    if user_match:
        context["user_id"] = user_match.group("user_id")

    resource_match = _RESOURCE_PATH.match(path)
    if resource_match and resource_match.group("resource_id") not in _COLLECTION_ROUTES:
        key = "appointment_id" if resource_match.group("resource") == "appointments" else "mood_id"
        context[key] = resource_match.group("resource_id")
    return context


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Добавляет контекст запроса в логи и пишет итог обработки запроса.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_all_requests: bool = True,
        exclude_paths: Optional[List[str]] = None,
        request_id_header: str = "X-Request-ID",
    ):
        super().__init__(app)
        self.log_all_requests = log_all_requests
        self.exclude_paths = exclude_paths or ["/healthcheck", "/docs", "/openapi.json"]
        self.request_id_header = request_id_header
        self.logger = ContextLogger.get_instance().with_context(logger_name="mindspace.request")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return await call_next(request)

        request_id = request.headers.get(self.request_id_header) or uuid.uuid4().hex
        ContextLogger.set_context(request_id=request_id, method=request.method, path=path, **path_context(path))
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.exception(
                f"{request.method} {path} failed",
                extra={"duration_ms": self._elapsed_ms(started), "error_type": type(e).__name__}
            )
            raise
        else:
            status_code = response.status_code
            if status_code >= 500:
                log = self.logger.error
            elif status_code >= 400:
                log = self.logger.warning
            elif self.log_all_requests:
                log = self.logger.info
            else:
                log = None

            if log is not None:
                log(
                    f"{request.method} {path} -> {status_code}",
                    extra={"duration_ms": self._elapsed_ms(started), "status_code": status_code}
                )
            response.headers[self.request_id_header] = request_id
            return response
        finally:
            ContextLogger.clear_context()

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)


def add_logging_middleware(
    app: FastAPI,
    log_all_requests: bool = True,
    exclude_paths: Optional[List[str]] = None,
    request_id_header: str = "X-Request-ID",
) -> None:
    app.add_middleware(
        RequestLoggingMiddleware,
        log_all_requests=log_all_requests,
        exclude_paths=exclude_paths,
        request_id_header=request_id_header,
    )
