"""
日志配置测试
"""
import asyncio
import logging

import pytest
from starlette.requests import Request

from app.config import settings
from app.main import LOG_FORMAT, configure_logging
from app.responses import unhandled_exception_handler


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.setLevel(level)
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)


class TestConfigureLogging:

    def test_uses_log_level(self, root_logger, monkeypatch):
        monkeypatch.setattr(settings, "DEBUG", False)
        monkeypatch.setattr(settings, "LOG_LEVEL", "warning")
        assert configure_logging() == "WARNING"
        assert root_logger.level == logging.WARNING

    def test_debug_forces_debug_level(self, root_logger, monkeypatch):
        monkeypatch.setattr(settings, "DEBUG", True)
        monkeypatch.setattr(settings, "LOG_LEVEL", "ERROR")
        assert configure_logging() == "DEBUG"
        assert root_logger.level == logging.DEBUG

    def test_attaches_handler_when_none(self, root_logger, monkeypatch):
        monkeypatch.setattr(settings, "DEBUG", False)
        monkeypatch.setattr(root_logger, "handlers", [])
        configure_logging()
        assert len(root_logger.handlers) == 1
        assert root_logger.handlers[0].formatter._fmt == LOG_FORMAT


class TestUnhandledErrorLogging:

    @staticmethod
    def _handle(exc):
        request = Request({
            "type": "http",
            "method": "GET",
            "path": "/boom",
            "query_string": b"",
            "headers": [],
        })
        return asyncio.run(unhandled_exception_handler(request, exc))

    @pytest.mark.parametrize("debug", [False, True])
    def test_envelope_and_traceback(self, monkeypatch, caplog, debug):
        monkeypatch.setattr(settings, "DEBUG", debug)
        with caplog.at_level(logging.ERROR, logger="app.responses"):
            response = self._handle(RuntimeError("disk full"))

        assert response.status_code == 500
        assert b'"error":"disk full"' in response.body
        record = caplog.records[-1]
        assert "Unhandled error on GET /boom: disk full" in record.getMessage()
        assert bool(record.exc_info) is debug
