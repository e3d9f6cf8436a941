# src/sellerfin/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from sellerfin.domain.offers import OfferType


class CalculateOffersRequest(BaseModel):
    """
    Request for /calculate-offers.

    Kept permissive: every field is validated by services.validation so that
    missing or non-positive values come back as a 400 with a readable message.
    """
    model_config = ConfigDict(extra="allow")

    listed_price: Any = None
    monthly_rent: Any = None
    monthly_property_tax: Any = None
    monthly_insurance: Any = None
    monthly_hoa_fee: Any = None
    monthly_other_fees: Any = None


class OfferItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    offer_type: OfferType
    offer_label: str

    is_buyable: bool
    unbuyable_reason: str = ""
    deal_viability: str
    viability_reasons: list[str] = []

    final_offer_price: float
    rehab_cost: float
    entry_fee_percent: float
    entry_fee_amount: float
    down_payment: float
    down_payment_percent: float

    loan_amount: float
    monthly_payment: float | None = None
    # null when the loan is never paid off
    amortization_years: float | None = None

    monthly_cash_flow: float | None = None
    cash_on_cash_percent: float | None = None
    net_rental_yield: float | None = None

    balloon_period: float
    principal_paid: float | None = None
    balloon_payment: float | None = None
    appreciation_profit: float | None = None
    appreciation_profit_target: float = 0.0
    meets_appreciation_target: bool = False


class CalculateOffersResponse(BaseModel):
    offers: list[OfferItem]


class DynamicOfferCreate(BaseModel):
    property_data: CalculateOffersRequest
    offer_type: OfferType


class DynamicOfferUpdate(BaseModel):
    property_data: CalculateOffersRequest
    offer: dict[str, Any]
    field: str
    value: float
