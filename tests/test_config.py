from pathlib import Path

import pytest

from bee_here.config import DEFAULT_TIMEOUT, ConfigError, ensure_env_file, load_config

SETTINGS = ("API_URL", "BEE_HERE_TOKEN", "REQUEST_TIMEOUT", "ENV_FILE")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    # setenv then delenv so anything load_dotenv writes is undone afterwards
    for key in SETTINGS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_load_config_reads_env_file(tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        'API_URL="https://attendance.example.edu/api"\nBEE_HERE_TOKEN="abc.def"\nREQUEST_TIMEOUT=5\n',
        encoding="utf-8",
    )

    config = load_config(env_file)

    assert config.API_URL == "https://attendance.example.edu/api/"
    assert config.BEE_HERE_TOKEN == "abc.def"
    assert config.REQUEST_TIMEOUT == 5.0


def test_arguments_override_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("API_URL", "https://env.example.edu/")
    monkeypatch.setenv("BEE_HERE_TOKEN", "from-env")

    config = load_config(tmp_path / "missing.env", api_url="http://localhost:8000/", token="from-cli")

    assert config.API_URL == "http://localhost:8000/"
    assert config.BEE_HERE_TOKEN == "from-cli"
    assert config.REQUEST_TIMEOUT == DEFAULT_TIMEOUT


def test_zero_timeout_disables_limit(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("API_URL", "https://env.example.edu/")
    monkeypatch.setenv("REQUEST_TIMEOUT", "0")

    assert load_config(tmp_path / "missing.env").REQUEST_TIMEOUT is None


@pytest.mark.parametrize(
    "settings",
    [
        {},
        {"API_URL": "attendance.example.edu"},
        {"API_URL": "https://attendance.example.edu/", "REQUEST_TIMEOUT": "soon"},
    ],
)
def test_invalid_settings_raise_config_error(tmp_path: Path, monkeypatch, settings):
    for key, value in settings.items():
        monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.env")


def test_ensure_env_file_does_not_overwrite(tmp_path: Path):
    env_file = tmp_path / ".env"

    ensure_env_file(env_file)
    assert "API_URL" in env_file.read_text(encoding="utf-8")

    env_file.write_text('API_URL="https://mine.example.edu/"\n', encoding="utf-8")
    ensure_env_file(env_file)
    assert env_file.read_text(encoding="utf-8") == 'API_URL="https://mine.example.edu/"\n'
