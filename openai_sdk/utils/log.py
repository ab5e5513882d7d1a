"""
Logging for HTTP exchanges.

``LogLevel`` decides how much of each request/response pair is written and a
``Logger`` decides where it goes. Loggers are plain objects with a
``log(message)`` method, so any sink can be plugged into ``OpenAIConfig``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

HTTP_LOGGER_NAME = "openai_sdk.http"
MASKED_HEADERS = ("authorization",)


class LogLevel(Enum):
    """How much of each HTTP exchange gets logged."""

    ALL = "all"
    HEADERS = "headers"
    BODY = "body"
    INFO = "info"
    NONE = "none"

    @property
    def info(self) -> bool:
        return self is not LogLevel.NONE

    @property
    def headers(self) -> bool:
        return self in (LogLevel.HEADERS, LogLevel.ALL)

    @property
    def body(self) -> bool:
        return self in (LogLevel.BODY, LogLevel.ALL)


class Logger:
    """A sink for exchange summaries."""

    def log(self, message: str) -> None:
        raise NotImplementedError


class DefaultLogger(Logger):
    """Forwards to the standard ``logging`` machinery."""

    def __init__(self, name: str = HTTP_LOGGER_NAME):
        self._logger = logging.getLogger(name)

    def log(self, message: str) -> None:
        self._logger.info(message)


class SimpleLogger(Logger):
    """Prints each message as a plain line on a rich console."""

    def __init__(self, console: Console = None):
        self.console = console or Console(stderr=True)

    def log(self, message: str) -> None:
        self.console.print(f"HttpClient: {message}", markup=False, highlight=False)


class EmptyLogger(Logger):
    """Discards everything."""

    def log(self, message: str) -> None:
        pass


Logger.DEFAULT = DefaultLogger()
Logger.SIMPLE = SimpleLogger()
Logger.EMPTY = EmptyLogger()


def setup_logging(level: Union[int, str] = logging.INFO, console: Console = None) -> logging.Logger:
    """Attach a ``RichHandler`` to the package logger and return it."""
    package_logger = logging.getLogger("openai_sdk")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    package_logger.addHandler(handler)
    return package_logger


def _format_headers(headers: Mapping[str, str]) -> str:
    lines = []
    for name, value in headers.items():
        if name.lower() in MASKED_HEADERS:
            value = "***"
        lines.append(f"-> {name}: {value}")
    return "\n".join(lines)


def _format_body(body: Union[bytes, str, None], content_type: Optional[str]) -> str:
    if body is None or body == b"" or body == "":
        return "<empty>"
    if content_type and content_type.startswith("multipart/"):
        return f"<multipart body, {len(body)} bytes>"
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


class HttpLogger:
    """Writes request/response summaries for a transport."""

    def __init__(self, logger: Logger, level: LogLevel):
        self.logger = logger
        self.level = level

    def request(self, request) -> None:
        """Log a ``requests.PreparedRequest``."""
        if not self.level.info:
            return
        lines = [f"REQUEST: {request.url}", f"METHOD: {request.method}"]
        if self.level.headers:
            lines.append("COMMON HEADERS")
            lines.append(_format_headers(request.headers))
        if self.level.body:
            lines.append("BODY START")
            lines.append(_format_body(request.body, request.headers.get("Content-Type")))
            lines.append("BODY END")
        self.logger.log("\n".join(lines))

    def response(self, response) -> None:
        """Log a ``requests.Response``."""
        if not self.level.info:
            return
        lines = [
            f"RESPONSE: {response.status_code} {response.reason or ''}".rstrip(),
            f"FROM: {response.url}",
        ]
        if self.level.headers:
            lines.append("COMMON HEADERS")
            lines.append(_format_headers(response.headers))
        if self.level.body:
            lines.append("BODY START")
            lines.append(_format_body(response.content, response.headers.get("Content-Type")))
            lines.append("BODY END")
        self.logger.log("\n".join(lines))

    def failure(self, method: str, url: str, error: BaseException) -> None:
        if not self.level.info:
            return
        self.logger.log(f"REQUEST {method} {url} failed with exception: {error}")
