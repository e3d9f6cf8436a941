import argparse
import time
from pathlib import Path

import pandas as pd

from sellerfin.adapters.config import load_calculator_config
from sellerfin.analysis.offers_batch import compute_offers_df
from sellerfin.services.offer_calculator import SellerFinanceCalculator


def main() -> None:
    p = argparse.ArgumentParser(description="Compute seller-finance offers for a CSV of properties.")
    p.add_argument("input", type=Path, help="CSV with listed_price, monthly_rent and expense columns")
    p.add_argument("--output", type=Path, default=Path("data/derived/offers.csv"))
    args = p.parse_args()

    df = pd.read_csv(args.input)
    calculator = SellerFinanceCalculator(load_calculator_config())

    print(f"Scoring {len(df)} properties...")

    t0 = time.perf_counter()
    offers = compute_offers_df(df, calculator)
    dt = time.perf_counter() - t0

    print(f"Computed {len(offers)} offers in {dt:.3f}s.")

    if not offers.empty:
        counts = offers.groupby(["offer_type", "deal_viability"]).size()
        print(counts.to_string())

    args.output.parent.mkdir(parents=True, exist_ok=True)
    offers.to_csv(args.output, index=False)
    print(f"Wrote offers to {args.output}")


if __name__ == "__main__":
    main()
