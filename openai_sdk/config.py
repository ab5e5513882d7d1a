"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .core.errors import ConfigurationError
from .utils.log import Logger, LogLevel

DEFAULT_BASE_URL = "https://api.openai.com/v1"


@dataclass(frozen=True)
class Timeout:
    """Per-phase timeouts in seconds. ``None`` means "no limit for this phase"."""

    connect: Optional[float] = None
    read: Optional[float] = None
    write: Optional[float] = None
    socket: Optional[float] = None

    def as_requests_timeout(self) -> Tuple[Optional[float], Optional[float]]:
        """Convert to the ``(connect, read)`` pair accepted by ``requests``.

        ``requests`` keeps the connect timeout on the socket while the body is
        sent, so ``write`` is folded into the connect phase. ``socket`` fills
        whichever phase has no explicit value.
        """
        connect_phase = [t for t in (self.connect, self.write) if t is not None]
        connect = min(connect_phase) if connect_phase else self.socket
        read = self.read if self.read is not None else self.socket
        return connect, read


@dataclass(frozen=True)
class OpenAIConfig:
    """
    Immutable settings shared by every call a client makes.

    Args:
        token: secret API key, sent as a bearer credential.
        log_level: how much of each HTTP exchange to log.
        logger: where exchange summaries go.
        timeout: per-phase HTTP timeouts.
        organization: organization id, sent as ``OpenAI-Organization``.
        headers: extra headers added to every request. They win over the
            client's own headers when names collide.
        base_url: root URL of the service.
    """

    token: str
    log_level: LogLevel = LogLevel.HEADERS
    logger: Logger = Logger.SIMPLE
    timeout: Timeout = field(default_factory=lambda: Timeout(socket=30.0))
    organization: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self):
        if not isinstance(self.token, str) or not self.token.strip():
            raise ConfigurationError("token must be a non-empty string")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, env_file: str = None, **overrides) -> "OpenAIConfig":
        """Build a config from ``OPENAI_*`` environment variables (and a .env file)."""
        load_dotenv(dotenv_path=env_file)

        token = overrides.pop("token", None) or os.getenv("OPENAI_API_KEY")
        if not token:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        values = {"token": token}
        organization = os.getenv("OPENAI_ORG_ID")
        if organization:
            values["organization"] = organization
        base_url = os.getenv("OPENAI_BASE_URL")
        if base_url:
            values["base_url"] = base_url

        log_level = os.getenv("OPENAI_LOG_LEVEL")
        if log_level:
            try:
                values["log_level"] = LogLevel(log_level.strip().lower())
            except ValueError as exc:
                raise ConfigurationError(f"Unknown OPENAI_LOG_LEVEL: {log_level!r}") from exc

        timeout = os.getenv("OPENAI_TIMEOUT")
        if timeout:
            try:
                values["timeout"] = Timeout(socket=float(timeout))
            except ValueError as exc:
                raise ConfigurationError(f"OPENAI_TIMEOUT must be a number of seconds, got {timeout!r}") from exc

        values.update(overrides)
        return cls(**values)

    def __repr__(self):
        return (
            f"OpenAIConfig(token='***', log_level={self.log_level}, timeout={self.timeout!r}, "
            f"organization={self.organization!r}, base_url={self.base_url!r})"
        )
