import logging

import pytest

from kubefluent._core.loggers import LogFormat, ObjectJsonFormatter, configure


@pytest.fixture(autouse=True)
def clean_root_logger():
    logger = logging.getLogger()
    handlers, level = logger.handlers[:], logger.level
    try:
        yield
    finally:
        logger.handlers[:] = handlers
        logger.setLevel(level)


def _own_handlers():
    return [h for h in logging.getLogger().handlers if type(h).__name__ == '_KubefluentStreamHandler']


@pytest.mark.parametrize('kwargs, level', [
    (dict(), logging.INFO),
    (dict(verbose=True), logging.DEBUG),
    (dict(debug=True), logging.DEBUG),
    (dict(quiet=True), logging.WARNING),
])
def test_levels(kwargs, level):
    configure(**kwargs)
    assert logging.getLogger().level == level


def test_handler_is_replaced_on_reconfiguration():
    configure()
    configure(log_format=LogFormat.JSON)
    handlers = _own_handlers()
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, ObjectJsonFormatter)


@pytest.mark.parametrize('debug', [False, True])
def test_asyncio_logs_are_muted_unless_debugging(debug):
    configure(debug=debug)
    assert logging.getLogger('asyncio').propagate is debug
