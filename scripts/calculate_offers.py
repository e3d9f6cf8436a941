import argparse
import math

from sellerfin.adapters.config import load_calculator_config
from sellerfin.services.offer_calculator import SellerFinanceCalculator
from sellerfin.services.validation import validate_property_payload


def _money(v: float) -> str:
    if not math.isfinite(v):
        return "n/a"
    return f"${v:,.2f}"


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Print the three seller-finance offers for one property.")
    # defaults: the 87k sample property
    p.add_argument("--listed-price", type=float, default=87000.0)
    p.add_argument("--monthly-rent", type=float, default=1150.0)
    p.add_argument("--tax", type=float, default=95.0, help="monthly property tax")
    p.add_argument("--insurance", type=float, default=80.0, help="monthly insurance")
    p.add_argument("--hoa", type=float, default=0.0, help="monthly HOA fee")
    p.add_argument("--other", type=float, default=25.0, help="other monthly fees")
    return p.parse_args()


def main() -> None:
    args = parse_args()

    prop = validate_property_payload(
        {
            "listed_price": args.listed_price,
            "monthly_rent": args.monthly_rent,
            "monthly_property_tax": args.tax,
            "monthly_insurance": args.insurance,
            "monthly_hoa_fee": args.hoa,
            "monthly_other_fees": args.other,
        }
    )
    calculator = SellerFinanceCalculator(load_calculator_config())

    print(f"Listed ${prop.listed_price:,.0f}  rent ${prop.monthly_rent:,.0f}/mo")

    for offer in calculator.calculate_all_offers(prop):
        print(f"\n--- {offer.offer_label} ---")
        status = "buyable" if offer.is_buyable else f"unbuyable ({offer.unbuyable_reason})"
        print(f"Status:            {status}")
        print(f"Viability:         {offer.deal_viability.value}")
        for reason in offer.viability_reasons:
            print(f"  - {reason}")
        print(f"Offer price:       {_money(offer.final_offer_price)}")
        print(f"Entry fee:         {offer.entry_fee_percent:.2f}% ({_money(offer.entry_fee_amount)})")
        print(f"Down payment:      {offer.down_payment_percent:.2f}% ({_money(offer.down_payment)})")
        print(f"Monthly payment:   {_money(offer.monthly_payment)}")
        print(f"Monthly cash flow: {_money(offer.monthly_cash_flow)}")
        print(f"Net rental yield:  {offer.net_rental_yield:.2f}%")
        print(f"Cash on cash:      {offer.cash_on_cash_percent:.2f}%")
        print(f"Amortization:      {offer.amortization_years:.1f} years")
        print(f"Balloon ({offer.balloon_period:g}y):      {_money(offer.balloon_payment)}")
        print(f"Appreciation:      {_money(offer.appreciation_profit)} (target {_money(offer.appreciation_profit_target)})")


if __name__ == "__main__":
    main()
