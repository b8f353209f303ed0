from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nesthunt.core.jurisdictions import (
    DEFAULT_JURISDICTION,
    JurisdictionConfig,
    get_jurisdiction,
    list_jurisdictions,
)

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


class Settings(BaseModel):
    jurisdiction: str = Field(
        default_factory=lambda: os.getenv("NESTHUNT_JURISDICTION", DEFAULT_JURISDICTION)
    )
    default_budget_min: int = Field(default_factory=lambda: int(os.getenv("DEFAULT_BUDGET_MIN", "1500")))
    default_budget_max: int = Field(default_factory=lambda: int(os.getenv("DEFAULT_BUDGET_MAX", "2500")))
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))
    log_dir: str = Field(default_factory=lambda: os.getenv("LOG_DIR", "logs"))
    telemetry_enabled: bool = Field(default_factory=lambda: _env_bool("TELEMETRY_ENABLED", False))

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def _normalize_jurisdiction(cls, value: str) -> str:
        code = (value or DEFAULT_JURISDICTION).strip().upper()
        supported = list_jurisdictions()
        if code not in supported:
            raise ValueError(
                f"NESTHUNT_JURISDICTION must be one of {', '.join(supported)}, got {code}"
            )
        return code

    @field_validator("default_budget_min", "default_budget_max")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Budget defaults must be non-negative")
        return value

    @model_validator(mode="after")
    def _budget_range(self) -> "Settings":
        if self.default_budget_max < self.default_budget_min:
            raise ValueError("DEFAULT_BUDGET_MAX must be >= DEFAULT_BUDGET_MIN")
        return self

    def jurisdiction_config(self) -> JurisdictionConfig:
        return get_jurisdiction(self.jurisdiction)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
