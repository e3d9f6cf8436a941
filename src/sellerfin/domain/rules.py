import math
from typing import List, Tuple

from sellerfin.domain.offers import DealViability

MIN_MONTHLY_CASH_FLOW = 100.0
RECOMMENDED_MONTHLY_CASH_FLOW = 200.0
YIELD_TOLERANCE_POINTS = 5.0
MIN_DOWN_PAYMENT_PERCENT = 3.0
MAX_COMFORTABLE_AMORTIZATION_YEARS = 35.0


def evaluate_viability(
    *,
    down_payment: float,
    down_payment_percent: float,
    monthly_cash_flow: float,
    net_rental_yield: float,
    amortization_years: float,
    min_yield: float,
) -> Tuple[DealViability, List[str]]:
    """
    Classify one offer.

    Red flags are checked in order and the first one wins; yellow warnings
    are only collected when no red flag fired, and all of them are kept.
    """
    # 1. Not viable (first match wins)
    if down_payment < 0:
        return DealViability.NOT_VIABLE, [
            "Negative down payment - deal requires more cash than available"
        ]

    if monthly_cash_flow < MIN_MONTHLY_CASH_FLOW:
        return DealViability.NOT_VIABLE, [
            f"Monthly cash flow too low (${monthly_cash_flow:,.0f}) - "
            f"minimum ${MIN_MONTHLY_CASH_FLOW:,.0f} required"
        ]

    if net_rental_yield < min_yield - YIELD_TOLERANCE_POINTS:
        return DealViability.NOT_VIABLE, [
            f"Net rental yield ({net_rental_yield:.1f}%) is "
            f"{min_yield - net_rental_yield:.1f}% below minimum threshold"
        ]

    # 2. Marginal (accumulate)
    warnings: List[str] = []

    if down_payment_percent < MIN_DOWN_PAYMENT_PERCENT:
        warnings.append(
            f"Low down payment ({down_payment_percent:.1f}%) - less than "
            f"{MIN_DOWN_PAYMENT_PERCENT:.0f}% of offer price"
        )

    if MIN_MONTHLY_CASH_FLOW <= monthly_cash_flow < RECOMMENDED_MONTHLY_CASH_FLOW:
        warnings.append(
            f"Marginal cash flow (${monthly_cash_flow:,.0f}/month) - "
            f"minimum ${RECOMMENDED_MONTHLY_CASH_FLOW:,.0f} recommended"
        )

    # only below the minimum counts, being near it is fine
    if min_yield - YIELD_TOLERANCE_POINTS <= net_rental_yield < min_yield:
        warnings.append(
            f"Net rental yield ({net_rental_yield:.1f}%) is below minimum threshold ({min_yield:g}%)"
        )

    if amortization_years > MAX_COMFORTABLE_AMORTIZATION_YEARS:
        warnings.append(
            f"Very long amortization ({amortization_years:.1f} years) - payoff takes over "
            f"{MAX_COMFORTABLE_AMORTIZATION_YEARS:.0f} years"
        )

    if warnings:
        return DealViability.MARGINAL, warnings

    return DealViability.GOOD, ["All metrics meet or exceed target thresholds"]


def check_buyability(
    *,
    down_payment: float,
    monthly_payment: float,
    entry_fee_amount: float,
) -> Tuple[bool, str]:
    if down_payment < 0:
        return False, "Negative down payment: entry fee does not cover assignment fee and closing costs"
    if not math.isfinite(monthly_payment):
        return False, "Monthly payment is not finite"
    if entry_fee_amount <= 0:
        return False, "Entry fee must be greater than zero"
    return True, ""
