import pytest

from src.worklog.config import DEV_SECRET_KEY, Config
from src.worklog.exceptions import ConfigurationError


def test_from_yaml(tmp_path, monkeypatch):
    for name in ("OLLAMA_HOST", "OLLAMA_MODEL", "WORKLOG_SECRET_KEY", "WORKLOG_DB_PATH", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "app_config.yaml"
    path.write_text(
        "ollama:\n  host: http://ollama:11434\n  model: llama3\n"
        "auth:\n  secret_key: s3cret\n  token_ttl_days: 7\n"
        "storage:\n  db_path: /tmp/x.db\n"
        "log:\n  level: DEBUG\n",
        encoding="utf-8",
    )

    config = Config.from_yaml(path)

    assert config.ollama.host == "http://ollama:11434"
    assert config.ollama.model == "llama3"
    assert config.auth.secret_key == "s3cret"
    assert config.auth.token_ttl_days == 7
    assert config.db_path == "/tmp/x.db"
    assert config.log_level == "DEBUG"
    assert config.server.port == 4000


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "app_config.yaml"
    path.write_text("auth:\n  secret_key: from-yaml\n", encoding="utf-8")
    monkeypatch.setenv("WORKLOG_SECRET_KEY", "from-env")

    assert Config.from_yaml(path).auth.secret_key == "from-env"


def test_load_falls_back_to_env(tmp_path, monkeypatch):
    monkeypatch.delenv("WORKLOG_SECRET_KEY", raising=False)
    monkeypatch.setenv("OLLAMA_MODEL", "env-model")

    config = Config.load(tmp_path / "missing.yaml")

    assert config.ollama.model == "env-model"
    assert config.auth.secret_key == DEV_SECRET_KEY
    assert config.auth.token_ttl_days == 30


def test_invalid_yaml_and_ttl(tmp_path, monkeypatch):
    path = tmp_path / "broken.yaml"
    path.write_text("auth: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        Config.from_yaml(path)

    monkeypatch.setenv("WORKLOG_TOKEN_TTL_DAYS", "0")
    with pytest.raises(ConfigurationError):
        Config.from_env()
