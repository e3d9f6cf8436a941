# src/sellerfin/domain/assumptions.py
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sellerfin.domain.offers import OfferType


def percent_like_to_fraction(v: Any) -> Any:
    """
    Accept 0.225, 22.5 or "22.5%" and return 0.225.
    """
    if v is None:
        return v
    if isinstance(v, str):
        v = v.strip().replace("%", "")
    try:
        f = float(v)
    except (TypeError, ValueError) as err:
        raise ValueError("rate must be numeric or percent-like") from err
    if f > 1.0:
        f = f / 100.0
    if f < 0:
        raise ValueError("rate must be non-negative")
    return f


class OfferProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    appreciation_profit_fixed: float = Field(..., description="Appreciation profit the buyer should capture by the balloon")
    entry_fee_max_percent: float = Field(..., description="Fraction of listed price taken as entry fee, e.g. 0.20")
    net_rental_yield_range: Tuple[float, float] = Field(..., description="Target net rental yield, percent points, inclusive")
    balloon_period: float = Field(..., gt=0, description="Years until the balloon payment is due")

    @field_validator("entry_fee_max_percent", mode="before")
    @classmethod
    def _entry_fee_fraction(cls, v: Any) -> Any:
        return percent_like_to_fraction(v)

    @field_validator("net_rental_yield_range")
    @classmethod
    def _ordered_range(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        low, high = v
        if low > high:
            raise ValueError("net_rental_yield_range lower bound must not exceed upper bound")
        return v

    @property
    def min_yield(self) -> float:
        return self.net_rental_yield_range[0]


class OfferProfiles(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner_favored: OfferProfile
    balanced: OfferProfile
    buyer_favored: OfferProfile


class CalculatorConfig(BaseModel):
    """
    Read-only inputs shared by every offer calculation.

    Rates are fractions (0.08 == 8%); percent-like values (8, "8%") are
    normalized on the way in.
    """
    model_config = ConfigDict(frozen=True)

    annual_interest_rate: float = 0.0
    assignment_fee: float = Field(default=5000.0, ge=0)
    closing_cost_percent_of_offer: float = 0.02
    monthly_maintenance_rate: float = 0.10
    monthly_prop_mgmt_rate: float = 0.10
    appreciation_per_year: float = 0.045
    max_amortization_years: float = Field(default=40.0, gt=0)

    # Dollar cap applied on top of each profile's entry_fee_max_percent
    entry_fee_cap: float | None = Field(default=None, ge=0)

    offers: OfferProfiles

    @field_validator(
        "annual_interest_rate",
        "closing_cost_percent_of_offer",
        "monthly_maintenance_rate",
        "monthly_prop_mgmt_rate",
        "appreciation_per_year",
        mode="before",
    )
    @classmethod
    def _rates(cls, v: Any) -> Any:
        return percent_like_to_fraction(v)

    @model_validator(mode="after")
    def _expense_rates_below_rent(self) -> "CalculatorConfig":
        if self.monthly_maintenance_rate + self.monthly_prop_mgmt_rate > 1.0:
            raise ValueError("maintenance + management rates cannot exceed 100% of rent")
        return self

    def profile_for(self, offer_type: OfferType) -> OfferProfile:
        if offer_type is OfferType.OWNER_FAVORED:
            return self.offers.owner_favored
        if offer_type is OfferType.BALANCED:
            return self.offers.balanced
        if offer_type is OfferType.BUYER_FAVORED:
            return self.offers.buyer_favored
        raise ValueError(f"unknown offer type: {offer_type!r}")


def default_calculator_config() -> CalculatorConfig:
    return CalculatorConfig(
        annual_interest_rate=0.0,
        assignment_fee=5000.0,
        closing_cost_percent_of_offer=0.02,
        monthly_maintenance_rate=0.10,
        monthly_prop_mgmt_rate=0.10,
        appreciation_per_year=0.045,
        max_amortization_years=40.0,
        offers=OfferProfiles(
            owner_favored=OfferProfile(
                appreciation_profit_fixed=30000.0,
                entry_fee_max_percent=0.225,
                net_rental_yield_range=(15.0, 17.0),
                balloon_period=5,
            ),
            balanced=OfferProfile(
                appreciation_profit_fixed=40000.0,
                entry_fee_max_percent=0.20,
                net_rental_yield_range=(17.0, 20.0),
                balloon_period=6,
            ),
            buyer_favored=OfferProfile(
                appreciation_profit_fixed=60000.0,
                entry_fee_max_percent=0.20,
                net_rental_yield_range=(20.0, 30.0),
                balloon_period=7,
            ),
        ),
    )
