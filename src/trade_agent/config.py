"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenServSettings(BaseSettings):
    """OpenServ platform settings (secret store access)."""

    model_config = SettingsConfigDict(env_prefix="OPENSERV_")

    api_key: SecretStr = SecretStr("")
    api_url: str = "https://api.openserv.ai"
    timeout_seconds: float = 30.0


class HyperliquidSettings(BaseSettings):
    """Hyperliquid network selection and transport budget."""

    model_config = SettingsConfigDict(env_prefix="HYPERLIQUID_")

    testnet: bool = False
    timeout_seconds: float = 30.0


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    host: str = "0.0.0.0"
    port: int = 7380
    openserv: OpenServSettings = OpenServSettings()
    hyperliquid: HyperliquidSettings = HyperliquidSettings()
