from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from sellerfin.domain.assumptions import CalculatorConfig
from sellerfin.domain.finance import (
    REHAB_COST,
    annuity_payment,
    appreciated_value,
    net_rental_yield,
    non_debt_expenses,
    remaining_balance,
    solve_amortization_years,
)
from sellerfin.domain.offers import DealViability, OfferType
from sellerfin.domain.property import PropertyData
from sellerfin.domain.rules import MIN_MONTHLY_CASH_FLOW, evaluate_viability

# Starting point for a freshly opened offer
OFFER_PRICE_MARKUP = {
    OfferType.OWNER_FAVORED: 0.10,
    OfferType.BALANCED: 0.05,
    OfferType.BUYER_FAVORED: 0.0,
}
DEFAULT_DOWN_PAYMENT_PERCENT = 5.0
DEFAULT_AMORTIZATION_YEARS = 20.0

# Editor guard rails
DOWN_PAYMENT_PERCENT_MIN = 5.0
DOWN_PAYMENT_PERCENT_MAX = 10.0
ENTRY_FEE_PERCENT_MAX = 20.0
AMORTIZATION_YEARS_MIN = 1.0
AMORTIZATION_YEARS_MAX = 40.0
BALLOON_PERIOD_MIN = 1.0
BALLOON_PERIOD_MAX = 10.0


@dataclass
class DynamicOffer:
    offer_type: OfferType

    # Primary inputs (editable)
    offer_price: float
    down_payment_percent: float
    entry_fee_percent: float
    amortization_years: float
    balloon_period: float

    # Derived from the primaries
    down_payment: float
    entry_fee_amount: float
    loan_amount: float
    monthly_payment: float

    # Fixed costs
    rehab_cost: float
    closing_cost: float
    assignment_fee: float

    # Cash flow
    monthly_rent: float = 0.0
    monthly_expenses: float = 0.0
    monthly_cash_flow: float = 0.0
    annual_net_income: float = 0.0
    net_rental_yield: float = 0.0

    # Balloon
    principal_paid: float = 0.0
    balloon_payment: float = 0.0
    appreciation_profit: float = 0.0

    # Validation
    is_valid: bool = True
    validation_errors: list[str] = field(default_factory=list)
    deal_viability: DealViability = DealViability.GOOD
    viability_reasons: list[str] = field(default_factory=list)


def _pct(part: float, whole: float) -> float:
    return part / whole * 100 if whole else 0.0


def _payment_for_term(offer: DynamicOffer, config: CalculatorConfig) -> float:
    if offer.amortization_years <= 0:
        return math.inf
    return annuity_payment(config.annual_interest_rate / 12, offer.amortization_years * 12, offer.loan_amount)


def _entry_fee_from_down_payment(offer: DynamicOffer) -> None:
    offer.entry_fee_amount = offer.down_payment + offer.closing_cost + offer.assignment_fee
    offer.entry_fee_percent = _pct(offer.entry_fee_amount, offer.offer_price)


def _down_payment_from_entry_fee(offer: DynamicOffer) -> None:
    offer.down_payment = offer.entry_fee_amount - offer.closing_cost - offer.assignment_fee
    offer.down_payment_percent = _pct(offer.down_payment, offer.offer_price)


# -----------------------------
# Per-field recalculation
# -----------------------------
def _from_offer_price(offer: DynamicOffer, config: CalculatorConfig) -> None:
    # keep the down payment percentage, rescale everything priced off the offer
    offer.closing_cost = offer.offer_price * config.closing_cost_percent_of_offer
    offer.down_payment = offer.offer_price * offer.down_payment_percent / 100
    offer.loan_amount = offer.offer_price - offer.down_payment
    _entry_fee_from_down_payment(offer)
    offer.monthly_payment = _payment_for_term(offer, config)


def _from_down_payment_percent(offer: DynamicOffer, config: CalculatorConfig) -> None:
    offer.down_payment = offer.offer_price * offer.down_payment_percent / 100
    offer.loan_amount = offer.offer_price - offer.down_payment
    _entry_fee_from_down_payment(offer)
    offer.monthly_payment = _payment_for_term(offer, config)


def _from_down_payment(offer: DynamicOffer, config: CalculatorConfig) -> None:
    offer.down_payment_percent = _pct(offer.down_payment, offer.offer_price)
    offer.loan_amount = offer.offer_price - offer.down_payment
    _entry_fee_from_down_payment(offer)
    offer.monthly_payment = _payment_for_term(offer, config)


def _from_entry_fee_percent(offer: DynamicOffer, config: CalculatorConfig) -> None:
    offer.entry_fee_amount = offer.offer_price * offer.entry_fee_percent / 100
    _down_payment_from_entry_fee(offer)
    offer.loan_amount = offer.offer_price - offer.down_payment
    offer.monthly_payment = _payment_for_term(offer, config)


def _from_entry_fee_amount(offer: DynamicOffer, config: CalculatorConfig) -> None:
    offer.entry_fee_percent = _pct(offer.entry_fee_amount, offer.offer_price)
    _down_payment_from_entry_fee(offer)
    offer.loan_amount = offer.offer_price - offer.down_payment
    offer.monthly_payment = _payment_for_term(offer, config)


def _from_amortization(offer: DynamicOffer, config: CalculatorConfig) -> None:
    offer.monthly_payment = _payment_for_term(offer, config)


def _from_monthly_payment(offer: DynamicOffer, config: CalculatorConfig) -> None:
    offer.amortization_years = solve_amortization_years(
        offer.loan_amount, config.annual_interest_rate / 12, offer.monthly_payment
    )


def _from_balloon_period(offer: DynamicOffer, config: CalculatorConfig) -> None:
    # balloon economics are refreshed for every edit
    return None


_RECALCULATORS: dict[str, Callable[[DynamicOffer, CalculatorConfig], None]] = {
    "offer_price": _from_offer_price,
    "down_payment_percent": _from_down_payment_percent,
    "down_payment": _from_down_payment,
    "entry_fee_percent": _from_entry_fee_percent,
    "entry_fee_amount": _from_entry_fee_amount,
    "amortization_years": _from_amortization,
    "monthly_payment": _from_monthly_payment,
    "balloon_period": _from_balloon_period,
}


def _validate(offer: DynamicOffer) -> list[str]:
    errors: list[str] = []

    if offer.down_payment_percent < DOWN_PAYMENT_PERCENT_MIN:
        errors.append(f"Down payment must be at least {DOWN_PAYMENT_PERCENT_MIN:g}%")
    if offer.down_payment_percent > DOWN_PAYMENT_PERCENT_MAX:
        errors.append(f"Down payment cannot exceed {DOWN_PAYMENT_PERCENT_MAX:g}%")

    if offer.entry_fee_percent > ENTRY_FEE_PERCENT_MAX:
        errors.append(f"Entry fee cannot exceed {ENTRY_FEE_PERCENT_MAX:g}%")

    if offer.amortization_years < AMORTIZATION_YEARS_MIN:
        errors.append(f"Amortization must be at least {AMORTIZATION_YEARS_MIN:g} year")
    if offer.amortization_years > AMORTIZATION_YEARS_MAX:
        errors.append(f"Amortization cannot exceed {AMORTIZATION_YEARS_MAX:g} years")

    if offer.balloon_period < BALLOON_PERIOD_MIN:
        errors.append(f"Balloon period must be at least {BALLOON_PERIOD_MIN:g} year")
    if offer.balloon_period > BALLOON_PERIOD_MAX:
        errors.append(f"Balloon period cannot exceed {BALLOON_PERIOD_MAX:g} years")

    if offer.monthly_cash_flow < MIN_MONTHLY_CASH_FLOW:
        errors.append(f"Monthly cash flow must be at least ${MIN_MONTHLY_CASH_FLOW:,.0f}")

    if offer.down_payment < 0:
        errors.append("Down payment cannot be negative")

    return errors


def _refresh(offer: DynamicOffer, property_data: PropertyData, config: CalculatorConfig) -> None:
    """
    Cash flow, returns, balloon economics, validation and viability;
    recomputed after every edit.
    """
    rate_monthly = config.annual_interest_rate / 12

    offer.monthly_rent = property_data.monthly_rent
    offer.monthly_expenses = non_debt_expenses(property_data, config)
    offer.monthly_cash_flow = offer.monthly_rent - offer.monthly_expenses - offer.monthly_payment
    offer.annual_net_income = offer.monthly_cash_flow * 12
    offer.net_rental_yield = net_rental_yield(offer.annual_net_income, offer.entry_fee_amount)

    offer.balloon_payment = remaining_balance(
        offer.loan_amount, rate_monthly, offer.monthly_payment, offer.balloon_period * 12
    )
    offer.principal_paid = offer.loan_amount - offer.balloon_payment
    future_value = appreciated_value(property_data.listed_price, config.appreciation_per_year, offer.balloon_period)
    offer.appreciation_profit = future_value - offer.offer_price - offer.principal_paid

    offer.validation_errors = _validate(offer)
    offer.is_valid = not offer.validation_errors

    viability, reasons = evaluate_viability(
        down_payment=offer.down_payment,
        down_payment_percent=offer.down_payment_percent,
        monthly_cash_flow=offer.monthly_cash_flow,
        net_rental_yield=offer.net_rental_yield,
        amortization_years=offer.amortization_years,
        min_yield=config.profile_for(offer.offer_type).min_yield,
    )
    offer.deal_viability = viability
    offer.viability_reasons = reasons


def create_dynamic_offer(
    property_data: PropertyData,
    offer_type: OfferType,
    config: CalculatorConfig,
) -> DynamicOffer:
    offer_price = property_data.listed_price * (1 + OFFER_PRICE_MARKUP[offer_type])
    down_payment = offer_price * DEFAULT_DOWN_PAYMENT_PERCENT / 100
    closing_cost = offer_price * config.closing_cost_percent_of_offer
    entry_fee_amount = down_payment + closing_cost + config.assignment_fee

    offer = DynamicOffer(
        offer_type=offer_type,
        offer_price=offer_price,
        down_payment_percent=DEFAULT_DOWN_PAYMENT_PERCENT,
        entry_fee_percent=_pct(entry_fee_amount, offer_price),
        amortization_years=DEFAULT_AMORTIZATION_YEARS,
        balloon_period=config.profile_for(offer_type).balloon_period,
        down_payment=down_payment,
        entry_fee_amount=entry_fee_amount,
        loan_amount=offer_price - down_payment,
        monthly_payment=0.0,
        rehab_cost=REHAB_COST,
        closing_cost=closing_cost,
        assignment_fee=config.assignment_fee,
    )
    offer.monthly_payment = _payment_for_term(offer, config)
    _refresh(offer, property_data, config)
    return offer


def update_field(
    offer: DynamicOffer,
    field_name: str,
    value: float,
    property_data: PropertyData,
    config: CalculatorConfig,
) -> DynamicOffer:
    """
    Apply one edit and re-derive everything that depends on it.
    The offer passed in is left untouched.
    """
    recalc = _RECALCULATORS.get(field_name)
    if recalc is None:
        raise ValueError(f"field is not editable: {field_name}")
    if field_name == "balloon_period" and not 0 < value <= AMORTIZATION_YEARS_MAX:
        raise ValueError(f"balloon_period must be between 0 and {AMORTIZATION_YEARS_MAX:g} years")

    updated = replace(
        offer,
        validation_errors=list(offer.validation_errors),
        viability_reasons=list(offer.viability_reasons),
        **{field_name: float(value)},
    )
    recalc(updated, config)
    _refresh(updated, property_data, config)
    return updated


def editable_fields() -> list[str]:
    return list(_RECALCULATORS)


_FIELD_METADATA: dict[str, dict[str, Any]] = {
    "offer_price": {"label": "Offer Price", "format": "currency", "step": 1000},
    "down_payment_percent": {
        "label": "Down Payment %",
        "format": "percent",
        "min": DOWN_PAYMENT_PERCENT_MIN,
        "max": DOWN_PAYMENT_PERCENT_MAX,
        "step": 0.5,
    },
    "down_payment": {"label": "Down Payment", "format": "currency", "step": 100},
    "entry_fee_percent": {"label": "Entry Fee %", "format": "percent", "max": ENTRY_FEE_PERCENT_MAX, "step": 0.5},
    "entry_fee_amount": {"label": "Entry Fee", "format": "currency", "step": 100},
    "amortization_years": {
        "label": "Amortization",
        "format": "years",
        "min": AMORTIZATION_YEARS_MIN,
        "max": AMORTIZATION_YEARS_MAX,
        "step": 1,
    },
    "monthly_payment": {"label": "Monthly Payment", "format": "currency", "step": 10},
    "balloon_period": {
        "label": "Balloon Period",
        "format": "years",
        "min": BALLOON_PERIOD_MIN,
        "max": BALLOON_PERIOD_MAX,
        "step": 1,
    },
}


def field_metadata(field_name: str) -> dict[str, Any]:
    return dict(_FIELD_METADATA.get(field_name, {"label": field_name, "format": "currency"}))
