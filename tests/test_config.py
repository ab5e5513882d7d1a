import dataclasses

import pytest

from openai_sdk import ConfigurationError, OpenAI, OpenAIConfig, Timeout
from openai_sdk.utils.log import Logger, LogLevel

ENV_KEYS = ("OPENAI_API_KEY", "OPENAI_ORG_ID", "OPENAI_BASE_URL", "OPENAI_LOG_LEVEL", "OPENAI_TIMEOUT")


@pytest.fixture
def clean_env(monkeypatch):
    # set-then-delete so monkeypatch restores whatever load_dotenv writes
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    return monkeypatch


def test_defaults():
    config = OpenAIConfig(token="sk-test")
    assert config.log_level is LogLevel.HEADERS
    assert config.logger is Logger.SIMPLE
    assert config.timeout == Timeout(socket=30.0)
    assert config.organization is None
    assert dict(config.headers) == {}
    assert config.base_url == "https://api.openai.com/v1"


@pytest.mark.parametrize("token", ["", "   ", None])
def test_empty_token_is_rejected(token):
    with pytest.raises(ConfigurationError):
        OpenAIConfig(token=token)


def test_empty_token_fails_before_any_client_exists(session, adapter):
    with pytest.raises(ConfigurationError):
        OpenAI("", session=session)
    assert adapter.sent == []


def test_config_is_immutable():
    source = {"X-Trace": "1"}
    config = OpenAIConfig(token="sk-test", headers=source)
    source["X-Trace"] = "2"

    assert config.headers["X-Trace"] == "1"
    with pytest.raises(TypeError):
        config.headers["X-Other"] = "3"
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.token = "other"


def test_repr_hides_token():
    assert "sk-secret" not in repr(OpenAIConfig(token="sk-secret"))


def test_base_url_trailing_slash_is_dropped():
    assert OpenAIConfig(token="t", base_url="http://localhost:8000/v1/").base_url == "http://localhost:8000/v1"


class TestTimeout:
    def test_socket_fills_both_phases(self):
        assert Timeout(socket=30.0).as_requests_timeout() == (30.0, 30.0)

    def test_explicit_phases_win(self):
        assert Timeout(connect=2.0, read=60.0, socket=30.0).as_requests_timeout() == (2.0, 60.0)

    def test_write_folds_into_connect(self):
        assert Timeout(connect=5.0, write=3.0).as_requests_timeout() == (3.0, None)
        assert Timeout(write=4.0, socket=30.0).as_requests_timeout() == (4.0, 30.0)

    def test_unset(self):
        assert Timeout().as_requests_timeout() == (None, None)


class TestFromEnv:
    def test_reads_environment(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("")
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("OPENAI_ORG_ID", "org-1")
        clean_env.setenv("OPENAI_LOG_LEVEL", "BODY")
        clean_env.setenv("OPENAI_TIMEOUT", "12.5")

        config = OpenAIConfig.from_env(str(env_file))

        assert config.token == "sk-env"
        assert config.organization == "org-1"
        assert config.log_level is LogLevel.BODY
        assert config.timeout == Timeout(socket=12.5)

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_API_KEY=sk-from-file\nOPENAI_BASE_URL=http://localhost:9000/v1\n")

        config = OpenAIConfig.from_env(str(env_file))

        assert config.token == "sk-from-file"
        assert config.base_url == "http://localhost:9000/v1"

    def test_overrides(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_API_KEY=sk-from-file\n")

        config = OpenAIConfig.from_env(str(env_file), organization="org-override")

        assert config.organization == "org-override"

    def test_missing_key(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("")
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            OpenAIConfig.from_env(str(env_file))

    def test_bad_log_level(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_API_KEY=sk\nOPENAI_LOG_LEVEL=loud\n")
        with pytest.raises(ConfigurationError, match="OPENAI_LOG_LEVEL"):
            OpenAIConfig.from_env(str(env_file))
