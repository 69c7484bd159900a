from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cadence.domain import constants as c
from cadence.domain.models import SchedulingParameters


def _config_files() -> list[Path]:
    # Re-evaluated per call so a patched HOME is honoured.
    return [
        Path.home() / ".config/cadence/config.toml",
        Path.home() / ".cadence.toml",
    ]


class SrsConfig(BaseSettings):
    """
    Configuration model for cadence.
    Supports loading from:
    1. Environment variables (CADENCE_*)
    2. Config file (~/.config/cadence/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        toml_file=_config_files(),
        extra="ignore",
    )

    # Storage
    store_path: Path = Field(default_factory=lambda: Path.home() / ".config/cadence/srs.json")

    # Behaviour
    auto_initialize: bool = True
    verbose: int = Field(default=0, ge=0)

    # Ease factor
    default_ease: float = c.DEFAULT_EASE_FACTOR
    min_ease: float = Field(default=c.MIN_EASE_FACTOR, gt=0)
    max_ease: float = c.MAX_EASE_FACTOR
    again_ease_delta: float = c.AGAIN_EASE_DELTA
    hard_ease_delta: float = c.HARD_EASE_DELTA
    good_ease_delta: float = c.GOOD_EASE_DELTA
    easy_ease_delta: float = c.EASY_EASE_DELTA

    # Intervals
    relearn_interval_days: int = Field(default=c.RELEARN_INTERVAL_DAYS, ge=0)
    first_interval_days: int = Field(default=c.FIRST_INTERVAL_DAYS, ge=1)
    second_interval_days: int = Field(default=c.SECOND_INTERVAL_DAYS, ge=1)
    hard_interval_multiplier: float = Field(default=c.HARD_INTERVAL_MULTIPLIER, gt=0)
    easy_interval_multiplier: float = Field(default=c.EASY_INTERVAL_MULTIPLIER, gt=0)
    max_interval_days: int = Field(default=c.MAX_INTERVAL_DAYS, ge=1)

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

        # First existing file wins
        toml_file = None
        for f in _config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources take precedence: CLI > env > file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("store_path", mode="before")
    @classmethod
    def resolve_store_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @model_validator(mode="after")
    def check_ease_bounds(self) -> "SrsConfig":
        if not (self.min_ease <= self.default_ease <= self.max_ease):
            raise ValueError(
                "Expected min_ease <= default_ease <= max_ease, got "
                f"{self.min_ease} / {self.default_ease} / {self.max_ease}"
            )
        return self

    def scheduling_parameters(self) -> SchedulingParameters:
        return SchedulingParameters(
            default_ease=self.default_ease,
            min_ease=self.min_ease,
            max_ease=self.max_ease,
            again_ease_delta=self.again_ease_delta,
            hard_ease_delta=self.hard_ease_delta,
            good_ease_delta=self.good_ease_delta,
            easy_ease_delta=self.easy_ease_delta,
            relearn_interval_days=self.relearn_interval_days,
            first_interval_days=self.first_interval_days,
            second_interval_days=self.second_interval_days,
            hard_interval_multiplier=self.hard_interval_multiplier,
            easy_interval_multiplier=self.easy_interval_multiplier,
            max_interval_days=self.max_interval_days,
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> SrsConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in SrsConfig
    2. ~/.config/cadence/config.toml (if exists)
    3. Environment variables (CADENCE_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return SrsConfig(**overrides)
