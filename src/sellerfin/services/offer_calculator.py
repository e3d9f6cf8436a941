from __future__ import annotations

from sellerfin.adapters.logging_utils import get_logger
from sellerfin.domain.assumptions import CalculatorConfig, default_calculator_config
from sellerfin.domain.finance import (
    REHAB_COST,
    amortization_period_years,
    annuity_payment,
    appreciated_value,
    cash_on_cash_percent,
    net_rental_yield,
    operating_expenses,
    remaining_balance,
)
from sellerfin.domain.offers import OfferResult, OfferType
from sellerfin.domain.property import PropertyData
from sellerfin.domain.rules import check_buyability, evaluate_viability

logger = get_logger(__name__)


class SellerFinanceCalculator:
    """
    Builds the three seller-finance offers for a property.

    The config is injected once and never mutated, so one calculator can be
    shared across requests.
    """

    def __init__(self, config: CalculatorConfig | None = None) -> None:
        self.config = config or default_calculator_config()

    def calculate_offer(self, property_data: PropertyData, offer_type: OfferType) -> OfferResult:
        cfg = self.config
        profile = cfg.profile_for(offer_type)
        listed_price = property_data.listed_price
        rent = property_data.monthly_rent

        # --- entry fee: profile maximum, optionally capped in dollars ---
        entry_fee_amount = listed_price * profile.entry_fee_max_percent
        if cfg.entry_fee_cap is not None:
            entry_fee_amount = min(entry_fee_amount, cfg.entry_fee_cap)
        entry_fee_percent = entry_fee_amount / listed_price * 100 if listed_price > 0 else 0.0

        # --- down payment & loan ---
        closing_cost = listed_price * cfg.closing_cost_percent_of_offer
        down_payment = entry_fee_amount - cfg.assignment_fee - closing_cost
        down_payment_percent = down_payment / listed_price * 100 if listed_price > 0 else 0.0
        loan_amount = listed_price - down_payment

        # --- debt service ---
        rate_monthly = cfg.annual_interest_rate / 12
        max_months = cfg.max_amortization_years * 12
        monthly_payment = annuity_payment(rate_monthly, max_months, loan_amount)

        # --- cash flow & returns ---
        monthly_cash_flow = rent - operating_expenses(property_data, cfg, monthly_payment)
        annual_cash_flow = monthly_cash_flow * 12
        amortization_years = amortization_period_years(loan_amount, monthly_payment)
        nry = net_rental_yield(annual_cash_flow, entry_fee_amount)
        coc = cash_on_cash_percent(annual_cash_flow, down_payment)

        # --- balloon ---
        balloon_period = profile.balloon_period
        balloon_payment = remaining_balance(loan_amount, rate_monthly, monthly_payment, balloon_period * 12)
        principal_paid = loan_amount - balloon_payment
        future_value = appreciated_value(listed_price, cfg.appreciation_per_year, balloon_period)
        appreciation_profit = future_value - listed_price - principal_paid

        is_buyable, unbuyable_reason = check_buyability(
            down_payment=down_payment,
            monthly_payment=monthly_payment,
            entry_fee_amount=entry_fee_amount,
        )
        viability, reasons = evaluate_viability(
            down_payment=down_payment,
            down_payment_percent=down_payment_percent,
            monthly_cash_flow=monthly_cash_flow,
            net_rental_yield=nry,
            amortization_years=amortization_years,
            min_yield=profile.min_yield,
        )

        logger.debug(
            "offer calculated",
            extra={
                "context": {
                    "offer_type": offer_type.value,
                    "viability": viability.value,
                    "is_buyable": is_buyable,
                    "monthly_cash_flow": round(monthly_cash_flow, 2),
                }
            },
        )

        return OfferResult(
            offer_type=offer_type,
            offer_label=offer_type.label,
            is_buyable=is_buyable,
            unbuyable_reason=unbuyable_reason,
            deal_viability=viability,
            viability_reasons=reasons,
            final_offer_price=listed_price,
            rehab_cost=REHAB_COST,
            entry_fee_percent=entry_fee_percent,
            entry_fee_amount=entry_fee_amount,
            down_payment=down_payment,
            down_payment_percent=down_payment_percent,
            loan_amount=loan_amount,
            monthly_payment=monthly_payment,
            amortization_years=amortization_years,
            monthly_cash_flow=monthly_cash_flow,
            cash_on_cash_percent=coc,
            net_rental_yield=nry,
            balloon_period=balloon_period,
            principal_paid=principal_paid,
            balloon_payment=balloon_payment,
            appreciation_profit=appreciation_profit,
            appreciation_profit_target=profile.appreciation_profit_fixed,
            meets_appreciation_target=appreciation_profit >= profile.appreciation_profit_fixed,
        )

    def calculate_all_offers(self, property_data: PropertyData) -> list[OfferResult]:
        """
        One offer per profile, in declaration order:
        owner-favored, balanced, buyer-favored.
        """
        offers = [self.calculate_offer(property_data, t) for t in OfferType]
        logger.info(
            "offers calculated",
            extra={
                "context": {
                    "listed_price": property_data.listed_price,
                    "monthly_rent": property_data.monthly_rent,
                    "viability": [o.deal_viability.value for o in offers],
                }
            },
        )
        return offers
