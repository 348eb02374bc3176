from pathlib import Path

import pytest

from linewise.core.config import ConfigManager
from linewise.utils.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("LINEWISE_CONFIG", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_any_file() -> None:
    settings = ConfigManager().load()
    assert settings.provider.model == "gpt-4"
    assert settings.provider.temperature == 0.3
    assert settings.provider.max_tokens == 2000
    assert settings.provider.has_api_key is False
    assert settings.explain.validate_remote is False


def test_load_yaml_from_env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "custom.yml"
    config_path.write_text(
        "provider:\n  api_key: sk-file\n  model: gpt-4o-mini\nexplain:\n  validate_remote: true\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("LINEWISE_CONFIG", str(config_path))
    settings = ConfigManager().load()
    assert settings.provider.model == "gpt-4o-mini"
    assert settings.provider.api_key == "sk-file"
    assert settings.explain.validate_remote is True


def test_load_toml(tmp_path: Path) -> None:
    config_path = tmp_path / "linewise.toml"
    config_path.write_text('[provider]\nmodel = "gpt-3.5-turbo"\n\n[ui]\ntheme = "plain"\n', encoding="utf-8")
    settings = ConfigManager(config_path).load()
    assert settings.provider.model == "gpt-3.5-turbo"
    assert settings.ui.theme == "plain"


def test_environment_key_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "linewise.yml"
    config_path.write_text("provider:\n  api_key: sk-file\n", encoding="utf-8")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    settings = ConfigManager(config_path).load()
    assert settings.provider.api_key == "sk-env"
    assert settings.provider.has_api_key


def test_placeholder_key_is_not_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "your_openai_api_key_here")
    assert ConfigManager().load().provider.has_api_key is False


def test_api_key_is_hidden_from_repr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")
    assert "sk-secret" not in repr(ConfigManager().load())


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path / "absent.yml").load()


def test_unsupported_format_is_an_error(tmp_path: Path) -> None:
    config_path = tmp_path / "linewise.ini"
    config_path.write_text("[provider]\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        ConfigManager(config_path).load()


def test_invalid_values_are_an_error(tmp_path: Path) -> None:
    config_path = tmp_path / "linewise.yml"
    config_path.write_text("provider:\n  temperature: hot\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        ConfigManager(config_path).load()


def test_settings_are_cached(tmp_path: Path) -> None:
    manager = ConfigManager()
    assert manager.get_settings() is manager.get_settings()


def test_logging_section(tmp_path: Path) -> None:
    config_path = tmp_path / "linewise.yml"
    config_path.write_text(
        f"logging:\n  level: DEBUG\n  console_level: ERROR\n  file: false\n  directory: {tmp_path / 'logs'}\n",
        encoding="utf-8",
    )
    logging_settings = ConfigManager(config_path).load().logging
    assert logging_settings.level == "DEBUG"
    assert logging_settings.console_level == "ERROR"
    assert logging_settings.file is False
    assert logging_settings.directory == tmp_path / "logs"
    assert ConfigManager().load().logging.console_level == "WARNING"
