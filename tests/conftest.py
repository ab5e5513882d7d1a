"""Shared fixtures: a stub ``requests`` adapter so no test touches the network."""

import json

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from openai_sdk import OpenAI, OpenAIConfig
from openai_sdk.utils.log import Logger, LogLevel


class StubAdapter(BaseAdapter):
    """Answers requests from a queue and remembers what was sent."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.timeouts = []
        self._queue = []

    def reply(self, status=200, json_body=None, content=None, headers=None, reason="OK"):
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
            headers = {"Content-Type": "application/json", **(headers or {})}
        self._queue.append((status, content or b"", headers or {}, reason))
        return self

    def fail(self, error):
        self._queue.append(error)
        return self

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append(request)
        self.timeouts.append(timeout)
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        status, content, headers, reason = item
        response = requests.Response()
        response.status_code = status
        response._content = content
        response.headers = CaseInsensitiveDict(headers)
        response.encoding = "utf-8"
        response.reason = reason
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass

    @property
    def last(self):
        return self.sent[-1]

    def last_json(self):
        return json.loads(self.last.body)


class RecordingLogger(Logger):
    def __init__(self):
        self.messages = []

    def log(self, message):
        self.messages.append(message)


@pytest.fixture
def adapter():
    return StubAdapter()


@pytest.fixture
def session(adapter):
    s = requests.Session()
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


@pytest.fixture
def config():
    return OpenAIConfig(
        token="sk-test",
        log_level=LogLevel.NONE,
        logger=Logger.EMPTY,
        base_url="https://api.example.test/v1",
    )


@pytest.fixture
def client(config, session):
    with OpenAI(config, session=session) as c:
        yield c
