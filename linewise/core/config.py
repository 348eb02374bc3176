"""Configuration management for Linewise.

Settings are declared as Pydantic models and may be supplied as a YAML or
TOML file. Every field has a default, so Linewise runs without any file at
all; in that case the remote strategy is only enabled when
``OPENAI_API_KEY`` is present in the environment.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from linewise.utils.errors import ConfigurationError
from linewise.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config/linewise.yml")
PLACEHOLDER_API_KEY = "your_openai_api_key_here"


class ProviderSettings(BaseModel):
    """Configuration describing the remote model provider."""

    type: str = Field(default="openai", description="Provider implementation identifier")
    api_key: Optional[str] = Field(default=None, repr=False)
    base_url: Optional[str] = None
    model: str = "gpt-4"
    temperature: float = 0.3
    max_tokens: int = 2000
    timeout: float = 30.0

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY


class ExplainSettings(BaseModel):
    """Knobs for the explanation orchestrator."""

    validate_remote: bool = Field(
        default=False,
        description="Validate every element of the model reply instead of trusting it",
    )


class UISettings(BaseModel):
    """Settings for the terminal output."""

    enable_progress: bool = True
    theme: str = "default"


class LoggingSettings(BaseModel):
    """Where log records go; see :func:`linewise.utils.logging.configure_logging`."""

    level: str = "INFO"
    console_level: str = "WARNING"
    file: bool = True
    directory: Optional[Path] = None


class LinewiseSettings(BaseModel):
    """Root configuration schema."""

    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    explain: ExplainSettings = Field(default_factory=ExplainSettings)
    ui: UISettings = Field(default_factory=UISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class ConfigManager:
    """Load settings from disk and the environment.

    The path comes from the constructor, then ``$LINEWISE_CONFIG``, then
    :data:`DEFAULT_CONFIG_PATH`. Only the default path may be absent.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        env_path = os.environ.get("LINEWISE_CONFIG")
        self._explicit = config_path is not None or env_path is not None
        self.config_path = config_path or Path(env_path or DEFAULT_CONFIG_PATH)
        self._settings: Optional[LinewiseSettings] = None

    def load(self) -> LinewiseSettings:
        """Load configuration, apply environment overrides and validate it."""

        data: Dict[str, Any] = {}
        if self.config_path.exists() or self._explicit:
            logger.debug("loading configuration", extra={"path": str(self.config_path)})
            data = self._read_file(self.config_path)
        self._apply_environment(data)
        try:
            settings = LinewiseSettings(**data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
        self._settings = settings
        return settings

    def get_settings(self) -> LinewiseSettings:
        """Return the last loaded settings, loading them if necessary."""

        if self._settings is None:
            return self.load()
        return self._settings

    @staticmethod
    def _apply_environment(data: Dict[str, Any]) -> None:
        api_key = os.environ.get("OPENAI_API_KEY")
        if api_key:
            provider = data.get("provider") or {}
            if not isinstance(provider, dict):
                raise ConfigurationError("'provider' must be a mapping")
            provider["api_key"] = api_key
            data["provider"] = provider

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise ConfigurationError(f"Configuration file {path} does not exist")
        if path.suffix in {".yml", ".yaml"}:
            with path.open("r", encoding="utf-8") as handle:
                try:
                    data = yaml.safe_load(handle) or {}
                except yaml.YAMLError as exc:
                    raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        elif path.suffix == ".toml":
            import tomllib

            with path.open("rb") as handle:
                try:
                    data = tomllib.load(handle)
                except tomllib.TOMLDecodeError as exc:
                    raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc
        else:
            raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        return data


__all__ = [
    "ConfigManager",
    "LinewiseSettings",
    "ProviderSettings",
    "ExplainSettings",
    "UISettings",
    "LoggingSettings",
    "PLACEHOLDER_API_KEY",
]
