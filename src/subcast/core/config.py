"""Configuration system for subcast.

Layered config loading (lowest to highest priority):
1. Built-in defaults (the models below)
2. Environment variables (SUBCAST_ASSEMBLYAI__API_KEY, etc.)
3. ~/.config/subcast/config.toml (user-level)
4. ./subcast.toml (project-level)
5. CLI flags

TOML layers and CLI flags reach pydantic as init values, which outrank the
environment; credentials normally live only in the environment.

The resulting SubcastConfig is built once per process and passed explicitly
into each component.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from subcast.core.errors import ConfigError

_USER_CONFIG = Path.home() / ".config" / "subcast" / "config.toml"
_PROJECT_CONFIG = Path("subcast.toml")

_MB = 1024 * 1024


class AssemblyAIConfig(BaseModel):
    api_key: str | None = None
    base_url: str = "https://api.assemblyai.com"
    poll_interval: float = 2.5
    request_timeout: float = 30.0
    timeout: float | None = None  # Overall job deadline; None waits forever


class CloudinaryConfig(BaseModel):
    cloud_name: str | None = None
    api_key: str | None = None
    api_secret: str | None = None
    folder: str = "subcast/uploads"
    resource_type: str = "video"


class AcquisitionConfig(BaseModel):
    max_bytes: int = 800 * _MB
    download_timeout: float = 120.0
    connect_timeout: float = 30.0
    stream_attempts: int = 3
    stream_timeout: float = 300.0
    video_hosts: list[str] = ["youtube.com", "youtu.be"]
    user_agent: str = "Mozilla/5.0 (compatible; subcast/0.1)"
    download_format: str = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/mp4"
    temp_dir: Path | None = None
    delete_remote_after: bool = False


class TranslationConfig(BaseModel):
    mymemory_url: str = "https://api.mymemory.translated.net/get"
    primary_mirror: str | None = None  # Self-hosted LibreTranslate, tried first
    mirrors: list[str] = [
        "https://libretranslate.de/translate",
        "https://translate.terraprint.co/translate",
        "https://translate.argosopentech.com/translate",
    ]
    request_timeout: float = 9.0
    mirror_timeout: float = 8.0
    delay: float = 0.07
    sample_size: int = 8
    suspicious_sources: list[str] = ["en"]
    llm_model: str | None = None  # e.g. "ollama_chat/qwen3:8b"; enables the LLM mirror
    llm_api_base: str | None = None
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1024


class SubcastConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SUBCAST_",
        env_nested_delimiter="__",
    )

    assemblyai: AssemblyAIConfig = AssemblyAIConfig()
    cloudinary: CloudinaryConfig = CloudinaryConfig()
    acquisition: AcquisitionConfig = AcquisitionConfig()
    translation: TranslationConfig = TranslationConfig()
    output_dir: Path = Path("./subcast_output/subtitles")

    def missing_credentials(self) -> list[str]:
        """Return the environment variable names of unset required credentials."""
        required = {
            "SUBCAST_ASSEMBLYAI__API_KEY": self.assemblyai.api_key,
            "SUBCAST_CLOUDINARY__CLOUD_NAME": self.cloudinary.cloud_name,
            "SUBCAST_CLOUDINARY__API_KEY": self.cloudinary.api_key,
            "SUBCAST_CLOUDINARY__API_SECRET": self.cloudinary.api_secret,
        }
        return [name for name, value in required.items() if not value]

    def require_credentials(self) -> None:
        """Fail fast before any network call if credentials are missing."""
        missing = self.missing_credentials()
        if missing:
            raise ConfigError(
                f"Missing credentials: {', '.join(missing)}. "
                "Set them in the environment or a .env file and retry."
            )


def _load_toml(path: Path) -> dict:
    """Load a TOML file if it exists, return empty dict otherwise."""
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(**cli_overrides: object) -> SubcastConfig:
    """Load configuration from all layers and merge.

    Args:
        **cli_overrides: Direct overrides from CLI flags. Keys can be
            dot-separated (e.g. translation.delay=0.1).
    """
    config_data: dict = {}
    for path in (_USER_CONFIG, _PROJECT_CONFIG):
        layer = _load_toml(path)
        config_data = _deep_merge(config_data, layer)

    # Flatten 'general' section into top-level
    if "general" in config_data:
        general = config_data.pop("general")
        config_data = _deep_merge(config_data, general)

    for key, value in cli_overrides.items():
        if value is None:
            continue
        parts = key.split(".")
        target = config_data
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value

    # Env vars are handled by Pydantic BaseSettings
    return SubcastConfig(**config_data)
