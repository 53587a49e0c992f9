from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Architecture
from .type_table import parse_architecture


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAYOUTOPT_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    architecture: Architecture = Field(
        default=Architecture.amd64,
        description="Target architecture when none is given on the command line.",
    )
    cache_line_size: int = Field(
        default=64,
        gt=0,
        description="Cache line size in bytes.",
    )
    strict_types: bool = Field(
        default=False,
        description="Fail on unknown field types instead of skipping them.",
    )
    output_dir: Path = Field(
        default=Path("./outputs"),
        description="Directory for analysis outputs.",
    )

    @field_validator("architecture", mode="before")
    @classmethod
    def normalize_architecture(cls, value):
        return parse_architecture(value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
