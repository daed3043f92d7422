from functools import lru_cache
from typing import Optional

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    # Genesis anchor used when creating a page without an explicit one
    genesis_hash: str = "MA=="
    log_level: str = "INFO"
    metrics_enabled: bool = False
    metrics_port: int = 8000
    metrics_addr: str = "0.0.0.0"
    # Indentation for CLI display output; canonical JSON is always compact
    json_indent: Optional[int] = None

    model_config = SettingsConfigDict(env_prefix="HASHLEDGER_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type["Settings"],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables take highest priority, then init, dotenv, file secrets
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_package_version() -> str:
    """
    Returns the installed hashledger version, or "0.0.0" when not installed.
    """
    import importlib.metadata

    try:
        return importlib.metadata.version("hashledger")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"
