"""Configuration settings and loading."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from walnut.errors import ConfigValidationError


class WalnutConfig(BaseSettings):
    """Configuration for running custom methods."""

    model_config = SettingsConfigDict(
        env_prefix="WALNUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = ""
    request_timeout: float = 30.0
    wait_timeout_ms: int = 30_000
    verify_timeout_ms: int = 5_000
    poll_interval_ms: int = 100
    placeholder_precedence: Literal["variables", "params"] = "variables"
    stop_on_failure: bool = True
    run_timeout: float | None = None
    methods_paths: list[str] = Field(default_factory=list)
    log_level: str = "INFO"

    @field_validator("request_timeout", "wait_timeout_ms", "verify_timeout_ms", "poll_interval_ms")
    @classmethod
    def validate_positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ConfigValidationError(
                message=f"{info.field_name} must be positive",
                field=info.field_name,
                value=v,
            )
        return v

    @field_validator("run_timeout")
    @classmethod
    def validate_run_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ConfigValidationError(
                message="run_timeout must be positive when set",
                field="run_timeout",
                value=v,
            )
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigValidationError(
                message=f"Unknown log level: {v}",
                field="log_level",
                value=v,
            )
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_config(config_path: str | Path | None = None) -> WalnutConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults
    """
    if config_path is None:
        return WalnutConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        return WalnutConfig()

    class FileConfig(WalnutConfig):
        model_config = SettingsConfigDict(yaml_file=config_path)

    return FileConfig()
