from autoshort_python_client.config import (
    DEFAULT_SESSION_FILE,
    ClientConfig,
    Credentials,
)
from autoshort_python_client.errors import ConfigError
from unittest.mock import patch
import pytest


BASE_ENV = {
    "USERNAME": "trader@example.com",
    "PASSWORD": "secret",
    "API_URL": "https://api.example.com/",
}


@patch.dict("os.environ", BASE_ENV, clear=True)
def test_from_env_strips_trailing_slash():
    config = ClientConfig.from_env(env_file=None)
    assert config.api_url == "https://api.example.com"
    assert config.username == "trader@example.com"
    assert config.session_file == DEFAULT_SESSION_FILE
    assert config.stream_endpoint is None
    assert config.login_timeout is None
    assert config.verbose is False


@patch.dict("os.environ", {
    **BASE_ENV,
    "WEBSOCKET": "wss://stream.example.com",
    "AUTOSHORT_SESSION_FILE": "/tmp/sessions.json",
    "AUTOSHORT_LOGIN_TIMEOUT": "12.5",
    "AUTOSHORT_VERBOSE": "true",
}, clear=True)
def test_from_env_optional_values():
    config = ClientConfig.from_env(env_file=None)
    assert config.stream_endpoint == "wss://stream.example.com"
    assert config.session_file == "/tmp/sessions.json"
    assert config.login_timeout == 12.5
    assert config.verbose is True


@pytest.mark.parametrize("missing", ["USERNAME", "PASSWORD", "API_URL"])
def test_from_env_missing_variable(missing):
    env = {k: v for k, v in BASE_ENV.items() if k != missing}
    with patch.dict("os.environ", env, clear=True):
        with pytest.raises(ConfigError, match=missing):
            ClientConfig.from_env(env_file=None)


@patch.dict("os.environ", {
    **BASE_ENV,
    "AUTOSHORT_LOGIN_TIMEOUT": "soon",
}, clear=True)
def test_from_env_invalid_timeout():
    with pytest.raises(ConfigError, match="AUTOSHORT_LOGIN_TIMEOUT"):
        ClientConfig.from_env(env_file=None)


def test_credentials_require_all_fields():
    with pytest.raises(ConfigError, match="password"):
        Credentials(username="u", password="", api_url="https://x")


def test_credentials_are_immutable():
    creds = Credentials(username="u", password="p", api_url="https://x")
    with pytest.raises(AttributeError):
        creds.username = "other"


def test_password_not_in_repr():
    config = ClientConfig(username="u", password="hunter2", api_url="x")
    assert "hunter2" not in repr(config)
    assert "hunter2" not in repr(config.credentials)


def test_poll_interval_must_be_positive():
    with pytest.raises(ConfigError, match="poll_interval"):
        ClientConfig(username="u", password="p", api_url="x", poll_interval=0)


@patch.dict("os.environ", {}, clear=True)
def test_from_env_reads_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text(
        "USERNAME=trader@example.com\n"
        "PASSWORD=secret\n"
        "API_URL=https://api.example.com/\n"
        "WEBSOCKET=wss://stream.example.com\n"
    )
    monkeypatch.chdir(tmp_path)

    config = ClientConfig.from_env()

    assert config.username == "trader@example.com"
    assert config.password == "secret"
    assert config.api_url == "https://api.example.com"
    assert config.stream_endpoint == "wss://stream.example.com"


def test_from_env_process_environment_wins(tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "USERNAME=from-file\nPASSWORD=file-pass\nAPI_URL=https://file\n"
    )

    with patch.dict("os.environ", {"USERNAME": "from-env"}, clear=True):
        config = ClientConfig.from_env(env_file=str(env_file))

    assert config.username == "from-env"
    assert config.password == "file-pass"
    assert config.api_url == "https://file"


@patch.dict("os.environ", {}, clear=True)
def test_from_env_missing_dotenv_file(tmp_path):
    with pytest.raises(ConfigError, match="USERNAME"):
        ClientConfig.from_env(env_file=str(tmp_path / "absent.env"))
