from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def config_file_path() -> Path:
    return Path.home() / ".config/alfanumrik/config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for alfanumrik.
    Supports loading from:
    1. Environment variables (ALFANUMRIK_*)
    2. Config file (~/.config/alfanumrik/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="ALFANUMRIK_",
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/alfanumrik")
    backend: Literal["json", "memory"] = "json"

    # Content
    question_pool: Path | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8780

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Precedence: init (CLI) > env > toml file
        config_file = config_file_path()
        if config_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=config_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("question_pool", mode="before")
    @classmethod
    def resolve_question_pool(cls, v: Any) -> Path | None:
        if v:
            return Path(v).expanduser().resolve()
        return None


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/alfanumrik/config.toml (if exists)
    3. Environment variables (ALFANUMRIK_*)
    4. cli_overrides (None values are dropped so they don't mask lower layers)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
