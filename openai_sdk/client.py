"""
Client facade.

Usage:
    from openai_sdk import OpenAI, ChatCompletionRequest

    client = OpenAI("sk-...")
    request = (
        ChatCompletionRequest.new_builder()
        .model("gpt-3.5-turbo")
        .messages(lambda m: m.user("Hello!"))
        .build()
    )
    completion = client.chat.create(request)
    print(completion.choices[0].message.content)
"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from typing import Any, Callable, Union

import requests

from .config import OpenAIConfig
from .core.resources import (
    Chat,
    Completions,
    Edits,
    Embeddings,
    Files,
    FineTunes,
    Images,
    Models,
    Moderations,
)
from .core.transport import HTTPTransport

logger = logging.getLogger(__name__)


class OpenAI:
    """
    Main API client: one attribute per resource family.

    ``config`` is either an ``OpenAIConfig`` or just the API token. The
    configuration and transport are read-only after construction, so a single
    client can be shared between threads.
    """

    def __init__(self, config: Union[OpenAIConfig, str], session: requests.Session = None):
        if not isinstance(config, OpenAIConfig):
            config = OpenAIConfig(token=config)
        self.config = config
        self._transport = HTTPTransport(config, session=session)

        self.chat = Chat(self._transport)
        self.completions = Completions(self._transport)
        self.edits = Edits(self._transport)
        self.embeddings = Embeddings(self._transport)
        self.files = Files(self._transport)
        self.fine_tunes = FineTunes(self._transport)
        self.images = Images(self._transport)
        self.models = Models(self._transport)
        self.moderations = Moderations(self._transport)
        logger.debug("Created client for %s", config.base_url)

    @classmethod
    def from_env(cls, env_file: str = None, **overrides) -> "OpenAI":
        """Create a client from ``OPENAI_*`` environment variables."""
        return cls(OpenAIConfig.from_env(env_file, **overrides))

    def __repr__(self):
        return f"OpenAI(base_url={self.config.base_url!r}, token='***')"

    def close(self):
        self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# =============================================================================
# Async Support (using threading)
# =============================================================================

class AsyncResult:
    """Result of a background call: block with ``.result()``, chain with ``.then()`` or ``await`` it."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._result = None
        self._error = None
        self._callbacks = []

    def _settle(self, result, error):
        with self._lock:
            self._result = result
            self._error = error
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            try:
                cb(result, error)
            except Exception:
                logger.exception("AsyncResult callback %r raised", cb)

    def _set_result(self, result):
        self._settle(result, None)

    def _set_error(self, error):
        self._settle(None, error)

    def result(self, timeout: float = None) -> Any:
        """Block until result is available."""
        if not self._event.wait(timeout=timeout):
            raise TimeoutError(f"Result not available after {timeout}s")
        if self._error:
            raise self._error
        return self._result

    def then(self, callback: Callable) -> "AsyncResult":
        """Add a callback: callback(result, error)."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return self
        callback(self._result, self._error)
        return self

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def __await__(self):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def resolve(result, error):
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        self.then(lambda result, error: loop.call_soon_threadsafe(resolve, result, error))
        return future.__await__()


def run_in_background(func: Callable, *args, **kwargs) -> AsyncResult:
    """Run ``func`` on a daemon thread and return its ``AsyncResult``."""
    result = AsyncResult()

    def run():
        try:
            value = func(*args, **kwargs)
        except Exception as e:
            result._set_error(e)
            return
        result._set_result(value)

    threading.Thread(target=run, daemon=True).start()
    return result


class AsyncResource:
    """Wraps a resource so every public method returns an ``AsyncResult``."""

    def __init__(self, resource):
        self._resource = resource

    def __getattr__(self, name: str):
        attr = getattr(self._resource, name)
        if name.startswith("_") or not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args, **kwargs) -> AsyncResult:
            return run_in_background(attr, *args, **kwargs)

        return call

    def __repr__(self):
        return f"Async{self._resource.__class__.__name__}()"


class AsyncOpenAI:
    """Non-blocking client: same resources as ``OpenAI``, each call runs on a worker thread."""

    def __init__(self, config: Union[OpenAIConfig, str], session: requests.Session = None):
        self._sync_client = OpenAI(config, session=session)
        self.config = self._sync_client.config
        self.chat = AsyncResource(self._sync_client.chat)
        self.completions = AsyncResource(self._sync_client.completions)
        self.edits = AsyncResource(self._sync_client.edits)
        self.embeddings = AsyncResource(self._sync_client.embeddings)
        self.files = AsyncResource(self._sync_client.files)
        self.fine_tunes = AsyncResource(self._sync_client.fine_tunes)
        self.images = AsyncResource(self._sync_client.images)
        self.models = AsyncResource(self._sync_client.models)
        self.moderations = AsyncResource(self._sync_client.moderations)

    @classmethod
    def from_env(cls, env_file: str = None, **overrides) -> "AsyncOpenAI":
        return cls(OpenAIConfig.from_env(env_file, **overrides))

    def close(self):
        self._sync_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
