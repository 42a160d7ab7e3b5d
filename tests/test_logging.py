import logging

from loguru import logger

from ressly.core.logging import configure_logging


def test_configure_logging_sets_intercept_handler():
    configure_logging("INFO")
    assert logging.root.handlers, "expected root handlers to be configured"
    handler = logging.root.handlers[0]
    assert handler.__class__.__name__ == "_InterceptHandler"
    assert logging.root.level == logging.INFO


def test_stdlib_records_reach_loguru():
    configure_logging("DEBUG")
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        logging.getLogger("sqlalchemy.engine").warning("pool exhausted")
    finally:
        logger.remove(sink_id)
    assert any("pool exhausted" in str(message) for message in messages)


def test_uvicorn_loggers_propagate_to_root():
    configure_logging("INFO", json_logs=True)
    access = logging.getLogger("uvicorn.access")
    assert access.handlers == []
    assert access.propagate is True
