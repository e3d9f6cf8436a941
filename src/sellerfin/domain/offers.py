from dataclasses import dataclass
from enum import Enum
from typing import List


class OfferType(str, Enum):
    OWNER_FAVORED = "owner_favored"
    BALANCED = "balanced"
    BUYER_FAVORED = "buyer_favored"

    @property
    def label(self) -> str:
        return _OFFER_LABELS[self]


_OFFER_LABELS = {
    OfferType.OWNER_FAVORED: "Max Owner Favored",
    OfferType.BALANCED: "Balanced",
    OfferType.BUYER_FAVORED: "Max Buyer Favored",
}


class DealViability(str, Enum):
    NOT_VIABLE = "not_viable"
    MARGINAL = "marginal"
    GOOD = "good"


@dataclass(frozen=True)
class OfferResult:
    offer_type: OfferType
    offer_label: str

    # Buyability & viability
    is_buyable: bool
    unbuyable_reason: str
    deal_viability: DealViability
    viability_reasons: List[str]

    # Price & upfront cash
    final_offer_price: float
    rehab_cost: float
    entry_fee_percent: float      # percent points, e.g. 22.5
    entry_fee_amount: float
    down_payment: float
    down_payment_percent: float   # percent points of offer price

    # Financing
    loan_amount: float
    monthly_payment: float
    amortization_years: float     # inf when the payment never retires the loan

    # Returns
    monthly_cash_flow: float
    cash_on_cash_percent: float
    net_rental_yield: float

    # Balloon
    balloon_period: float
    principal_paid: float
    balloon_payment: float
    appreciation_profit: float
    appreciation_profit_target: float = 0.0
    meets_appreciation_target: bool = False
