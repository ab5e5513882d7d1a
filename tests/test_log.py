import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from openai_sdk.utils.log import HTTP_LOGGER_NAME, DefaultLogger, EmptyLogger, SimpleLogger, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("openai_sdk")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_simple_logger_prints_prefixed_lines():
    buffer = io.StringIO()
    SimpleLogger(Console(file=buffer, width=200)).log("REQUEST: https://api.example.test/v1/models [x]")

    assert buffer.getvalue() == "HttpClient: REQUEST: https://api.example.test/v1/models [x]\n"


def test_default_logger_uses_http_logger_name(caplog):
    with caplog.at_level(logging.INFO, logger=HTTP_LOGGER_NAME):
        DefaultLogger().log("RESPONSE: 200 OK")

    assert [(r.name, r.levelno, r.getMessage()) for r in caplog.records] == [
        (HTTP_LOGGER_NAME, logging.INFO, "RESPONSE: 200 OK")
    ]


def test_empty_logger_writes_nothing(capsys):
    EmptyLogger().log("ignored")

    assert capsys.readouterr() == ("", "")


def test_setup_logging_installs_one_rich_handler(package_logger):
    buffer = io.StringIO()
    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG, console=Console(file=buffer, width=200))

    rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert logger is package_logger
    assert len(rich_handlers) == 1
    assert logger.level == logging.DEBUG

    logging.getLogger("openai_sdk.client").debug("worker started")
    assert "worker started" in buffer.getvalue()
