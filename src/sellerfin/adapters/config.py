# src/sellerfin/adapters/config.py
import json
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sellerfin.domain.assumptions import (
    CalculatorConfig,
    default_calculator_config,
    percent_like_to_fraction,
)


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # Optional JSON file holding a full calculator config (wins over the fields below)
    CALCULATOR_CONFIG_PATH: str | None = Field(default=None)

    # -----------------------------
    # Global calculator constants
    # -----------------------------
    ANNUAL_INTEREST_RATE: float = Field(default=0.0)
    ASSIGNMENT_FEE: float = Field(default=5000.0)
    CLOSING_COST_PCT: float = Field(default=0.02)
    MAINTENANCE_RATE: float = Field(default=0.10)
    PROPERTY_MGMT_RATE: float = Field(default=0.10)
    APPRECIATION_RATE: float = Field(default=0.045)
    MAX_AMORTIZATION_YEARS: float = Field(default=40.0)

    # Dollar cap on the entry fee; unset means uncapped
    ENTRY_FEE_CAP: float | None = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="SELLERFIN_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "ANNUAL_INTEREST_RATE",
        "CLOSING_COST_PCT",
        "MAINTENANCE_RATE",
        "PROPERTY_MGMT_RATE",
        "APPRECIATION_RATE",
        mode="before",
    )
    @classmethod
    def _to_non_negative_fraction(cls, v: Any) -> Any:
        return percent_like_to_fraction(v)

    @field_validator("MAX_AMORTIZATION_YEARS", mode="before")
    @classmethod
    def _years_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("MAX_AMORTIZATION_YEARS must be > 0")
        return f

    @field_validator("ASSIGNMENT_FEE", "ENTRY_FEE_CAP", mode="before")
    @classmethod
    def _dollars(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("$", "").replace(",", "")
            if not v:
                return None
        f = float(v)
        if f < 0:
            raise ValueError("dollar amounts must be non-negative")
        return f


def load_calculator_config(settings: AppConfig | None = None) -> CalculatorConfig:
    """
    Build the read-only calculator config once at startup.

    A JSON file named by CALCULATOR_CONFIG_PATH is taken as-is; otherwise the
    built-in offer profiles are combined with the global constants from the
    environment.
    """
    settings = settings or config

    if settings.CALCULATOR_CONFIG_PATH:
        path = Path(settings.CALCULATOR_CONFIG_PATH)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return CalculatorConfig.model_validate(data)

    # env overrides pass the same validators as a config file
    defaults = default_calculator_config()
    return CalculatorConfig.model_validate(
        {
            **defaults.model_dump(),
            "annual_interest_rate": settings.ANNUAL_INTEREST_RATE,
            "assignment_fee": settings.ASSIGNMENT_FEE,
            "closing_cost_percent_of_offer": settings.CLOSING_COST_PCT,
            "monthly_maintenance_rate": settings.MAINTENANCE_RATE,
            "monthly_prop_mgmt_rate": settings.PROPERTY_MGMT_RATE,
            "appreciation_per_year": settings.APPRECIATION_RATE,
            "max_amortization_years": settings.MAX_AMORTIZATION_YEARS,
            "entry_fee_cap": settings.ENTRY_FEE_CAP,
        }
    )


config = AppConfig()
