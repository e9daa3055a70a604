"""
Engine configuration using pydantic-settings.

Environment variables (prefix: MONOPOLY_):
    MONOPOLY_STARTING_CASH - Cash each player starts with (default: 1500)
    MONOPOLY_GO_SALARY     - Salary for passing or landing on GO (default: 200)
    MONOPOLY_JAIL_FINE     - Fine to leave jail (default: 50)
    MONOPOLY_SEED          - Optional RNG seed for dice and deck shuffles
    MONOPOLY_LOG_LEVEL     - Logging level name (default: INFO)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from monopoly_engine.config import GameConfig


class EngineSettings(BaseSettings):
    """Environment-backed defaults for new games."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="MONOPOLY_",
    )

    starting_cash: int = Field(default=1500, ge=0, description="Cash each player starts with.")
    go_salary: int = Field(default=200, ge=0, description="Salary for passing or landing on GO.")
    jail_fine: int = Field(default=50, ge=0, description="Fine paid to leave jail.")
    seed: Optional[int] = Field(default=None, description="Seed for dice rolls and deck shuffles.")
    log_level: str = Field(default="INFO", description="Logging level name.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept any standard logging level name, case-insensitively."""
        name = value.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {value}")
        return name

    def to_game_config(self) -> GameConfig:
        """Build a GameConfig from these settings."""
        return GameConfig(
            starting_cash=self.starting_cash,
            go_salary=self.go_salary,
            jail_fine=self.jail_fine,
            seed=self.seed,
        )


@lru_cache
def get_engine_settings() -> EngineSettings:
    """Return cached engine settings instance."""
    return EngineSettings()


def apply_log_level(settings: EngineSettings) -> None:
    """Set the package logger to the configured level."""
    logging.getLogger("monopoly_engine").setLevel(settings.log_level)
