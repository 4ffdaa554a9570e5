from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashdeck.application.weighting import WeightPolicy
from flashdeck.domain.constants import DEFAULT_BLOB_KEY, FADE_DURATION, FADE_FPS


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/flashdeck/config.toml",
        Path.home() / ".flashdeck.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for flashdeck.
    Supports loading from:
    1. Environment variables (FLASHDECK_*)
    2. Config file (~/.config/flashdeck/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHDECK_",
        extra="ignore",
    )

    # Storage
    backend: Literal["file", "memory", "http"] = "file"
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/flashdeck")
    blob_key: str = DEFAULT_BLOB_KEY
    blob_url: str | None = None

    # Credentials (http backend only)
    keys_source: str | None = None
    password: str | None = None

    # Session
    tag: str = ""
    weight_policy: WeightPolicy = WeightPolicy.EXPONENTIAL

    # Transitions
    transition: Literal["fade", "instant"] = "instant"
    fade_duration: float = Field(default=FADE_DURATION, gt=0)
    fade_fps: float = Field(default=FADE_FPS, gt=0)

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

        # Find the first existing file
        toml_file = None
        for f in config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: CLI overrides, then env, then the file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("tag", mode="before")
    @classmethod
    def strip_tag(cls, v: Any) -> str:
        return (v or "").strip()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/flashdeck/config.toml (if exists)
    3. Environment variables (FLASHDECK_*)
    4. cli_overrides (passed from Typer), None values dropped
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
