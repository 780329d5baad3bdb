"""structlog 配置测试"""

import logging

import pytest
import structlog
from taskboard.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    aiosqlite_level = logging.getLogger("aiosqlite").level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logging.getLogger("aiosqlite").setLevel(aiosqlite_level)


class TestSetupLogging:
    def test_dev_renderer(self):
        setup_logging("dev")
        formatter = logging.getLogger().handlers[0].formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(formatter.processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer(self):
        """json 模式：异常栈结构化后再渲染"""
        setup_logging("json")
        formatter = logging.getLogger().handlers[0].formatter
        assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)
        assert structlog.processors.dict_tracebacks in formatter.processors

    def test_log_level(self):
        setup_logging(log_level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(log_level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_single_handler(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_sql_chatter_suppressed_at_debug(self):
        setup_logging(log_level="debug")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("aiosqlite").level == logging.INFO

    def test_store_prefix_bound(self):
        setup_logging(key_prefix="team")
        assert structlog.contextvars.get_contextvars() == {"store": "team"}

    def test_no_prefix_no_context(self):
        setup_logging()
        assert structlog.contextvars.get_contextvars() == {}
