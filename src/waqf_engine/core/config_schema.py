"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``EngineConfig``
instance.  Existing dict-based access continues to work unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LimitsConfig(BaseModel):
    """Submission and contribution floors, in currency units."""

    min_portfolio_amount: float = Field(default=100.0, ge=0)
    min_contribution: float = Field(default=10.0, ge=0)


class ImpactConfig(BaseModel):
    """Impact projection model constants."""

    average_beneficiary_cost: float = Field(default=100.0, gt=0)
    consumable_deployment_months: int = Field(default=24, gt=0)
    permanent_annual_return: float = Field(default=0.07, ge=0, le=1)
    revolving_annual_return: float = Field(default=0.05, ge=0, le=1)
    revolving_lock_years: int = Field(default=5, gt=0)
    lifetime_horizon_years: int = Field(default=100, gt=10)


class LoggingConfig(BaseModel):
    """Log sink settings, consumed by ``setup_logging``."""

    level: str = "WARNING"
    file: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.upper()
            if v not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
                raise ValueError(f"unknown log level {v!r}")
        return v


class EngineConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so host applications can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    limits: LimitsConfig = LimitsConfig()
    impact: ImpactConfig = ImpactConfig()
    logging: LoggingConfig = LoggingConfig()
