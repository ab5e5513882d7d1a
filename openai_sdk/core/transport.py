"""HTTP transport built on ``requests``."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from .. import __version__
from ..config import OpenAIConfig
from ..utils.log import HttpLogger
from .errors import (
    APIConnectionError,
    APITimeoutError,
    TransportError,
    error_for_status,
)
from .payloads import WireModel, split_multipart

logger = logging.getLogger(__name__)


class HTTPTransport:
    """
    Sends requests for a single client configuration.

    Headers, credentials and timeouts come from the ``OpenAIConfig`` and are
    applied to every call. The underlying ``requests.Session`` is created once
    and reused, so one transport can serve many calls at the same time.
    """

    def __init__(self, config: OpenAIConfig, session: requests.Session = None):
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout.as_requests_timeout()
        self.session = session or requests.Session()
        self.session.headers.update(self._build_headers())
        self.http_logger = HttpLogger(config.logger, config.log_level)

    def _build_headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": f"openai-sdk/{__version__}",
            "Accept": "application/json",
            "Authorization": f"Bearer {self.config.token}",
        }
        if self.config.organization:
            headers["OpenAI-Organization"] = self.config.organization
        # Caller-supplied headers win on collision.
        headers.update(self.config.headers)
        return headers

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _handle_error(self, response: requests.Response):
        """Raise appropriate exception based on status code."""
        body = response.text
        error_type = param = code = None
        try:
            error_body = response.json()
            error = error_body.get("error") if isinstance(error_body, dict) else None
            if isinstance(error, dict):
                message = error.get("message") or body
                error_type = error.get("type")
                param = error.get("param")
                code = error.get("code")
            elif error is not None:
                message = str(error)
            else:
                message = body or f"HTTP {response.status_code}"
        except ValueError:
            message = body or f"HTTP {response.status_code}"

        error_class = error_for_status(response.status_code)
        raise error_class(
            message=message,
            status_code=response.status_code,
            type=error_type,
            param=param,
            code=code,
            body=body,
        )

    def send(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        data: Mapping[str, Any] = None,
        files: Mapping[str, Any] = None,
        stream: bool = False,
    ) -> requests.Response:
        """Send one request and return the successful response."""
        url = self.url(path)
        request = requests.Request(method.upper(), url, json=json_body, data=data, files=files)
        prepared = self.session.prepare_request(request)
        settings = self.session.merge_environment_settings(prepared.url, {}, stream, None, None)
        self.http_logger.request(prepared)

        try:
            response = self.session.send(prepared, timeout=self.timeout, **settings)
        except requests.Timeout as e:
            self.http_logger.failure(method, url, e)
            raise APITimeoutError(f"Request to {url} timed out (timeout={self.timeout})", cause=e) from e
        except requests.ConnectionError as e:
            self.http_logger.failure(method, url, e)
            raise APIConnectionError(f"Connection error: {e}", cause=e) from e
        except requests.RequestException as e:
            self.http_logger.failure(method, url, e)
            raise TransportError(f"Request failed: {e}", cause=e) from e

        self.http_logger.response(response)
        if not response.ok:
            logger.debug("%s %s returned %s", method.upper(), url, response.status_code)
            self._handle_error(response)
        return response

    def request_json(self, method: str, path: str, body: Any = None) -> Any:
        """Send a JSON body (if any) and decode the JSON answer."""
        response = self.send(method, path, json_body=body)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON in response from {path}: {e}", cause=e) from e

    def execute(
        self,
        method: str,
        path: str,
        payload: Optional[WireModel] = None,
        decode: Callable[[Any], Any] = None,
        extra: Mapping[str, Any] = None,
    ) -> Any:
        """Serialize ``payload``, send it and decode the answer with ``decode``."""
        body = None
        if payload is not None:
            body = payload.to_wire()
            if extra:
                body.update(extra)
        elif extra:
            body = dict(extra)
        data = self.request_json(method, path, body)
        return decode(data) if decode else data

    def execute_multipart(
        self,
        method: str,
        path: str,
        payload: WireModel,
        decode: Callable[[Any], Any] = None,
        extra: Mapping[str, Any] = None,
    ) -> Any:
        """Send ``payload`` as multipart/form-data."""
        form, files = split_multipart(payload)
        if extra:
            form.update({key: str(value) for key, value in extra.items()})
        response = self.send(method, path, data=form, files=files)
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON in response from {path}: {e}", cause=e) from e
        return decode(data) if decode else data

    def request_bytes(self, method: str, path: str) -> bytes:
        """Return the raw response body."""
        return self.send(method, path).content

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return f"HTTPTransport(base_url={self.base_url!r})"
