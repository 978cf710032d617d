import json
import logging
import sys
from datetime import date

import pytest

from mindspace.core.logging import ContextLogger, JsonFormatter, get_logger
from mindspace.core.logging.middleware import path_context


@pytest.fixture(autouse=True)
def clean_context():
    ContextLogger.clear_context()
    yield
    ContextLogger.clear_context()


def make_record(message: str = "appointment booked", **extra) -> logging.LogRecord:
    record = logging.LogRecord("mindspace.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Тесты JSON форматтера логов"""

    def test_base_fields(self):
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "mindspace.test"
        assert data["message"] == "appointment booked"
        assert "timestamp" in data

    def test_extra_and_additional_fields(self):
        formatter = JsonFormatter(additional_fields={"app_name": "MindSpace Records"})
        data = json.loads(formatter.format(make_record(appointment_id="a1")))

        assert data["app_name"] == "MindSpace Records"
        assert data["extra"] == {"appointment_id": "a1"}

    def test_non_serializable_extra_is_stringified(self):
        data = json.loads(JsonFormatter().format(make_record(day=date(2024, 3, 13))))
        assert data["extra"]["day"] == "2024-03-13"

    def test_exception_data(self):
        try:
            raise RuntimeError("store is gone")
        except RuntimeError:
            record = logging.LogRecord(
                "mindspace.test", logging.ERROR, __file__, 10, "failed", None, sys.exc_info()
            )

        data = json.loads(JsonFormatter().format(record))

        assert data["exception_data"]["exception"] == "RuntimeError"
        assert data["exception_data"]["exception_message"] == "store is gone"
        assert "Traceback" in data["exception_data"]["traceback"]

    def test_excluded_fields(self):
        data = json.loads(JsonFormatter(exclude_fields=["hostname"]).format(make_record()))
        assert "hostname" not in data


class TestContextLogger:
    """Тесты контекстного логирования"""

    def test_singleton(self):
        assert ContextLogger.get_instance() is ContextLogger.get_instance()

    def test_request_context_is_added(self, caplog):
        ContextLogger.set_context(request_id="req-1")
        logger = get_logger("mindspace.test", user_id="u1")

        with caplog.at_level(logging.INFO, logger="mindspace.test"):
            logger.info("mood logged")

        record = caplog.records[-1]
        assert record.request_id == "req-1"
        assert record.user_id == "u1"

    def test_explicit_extra_wins(self, caplog):
        logger = get_logger("mindspace.test", user_id="u1")

        with caplog.at_level(logging.INFO, logger="mindspace.test"):
            logger.info("mood logged", extra={"user_id": "u2"})

        assert caplog.records[-1].user_id == "u2"

    def test_context_is_cleared(self):
        ContextLogger.set_context(request_id="req-1")
        ContextLogger.clear_context()
        assert ContextLogger.get_context() == {}


class TestPathContext:
    """Тесты извлечения идентификаторов из пути запроса"""

    @pytest.mark.parametrize("path, expected", [
        ("/api/moods/user/u1/stats", {"user_id": "u1"}),
        ("/api/appointments/a1/cancel", {"appointment_id": "a1"}),
        ("/api/moods/m1", {"mood_id": "m1"}),
        ("/api/appointments/slots/t1", {}),
        ("/api/moods/categories", {}),
        ("/healthcheck", {}),
    ])
    def test_path_context(self, path, expected):
        assert path_context(path) == expected
