# src/sellerfin/analysis/offers_batch.py

from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from sellerfin.adapters.logging_utils import get_logger
from sellerfin.services.offer_calculator import SellerFinanceCalculator
from sellerfin.services.validation import (
    OPTIONAL_EXPENSE_FIELDS,
    REQUIRED_POSITIVE_FIELDS,
    InvalidInputError,
    validate_property_payload,
)

logger = get_logger(__name__)


def compute_offers_df(df: pd.DataFrame, calculator: SellerFinanceCalculator) -> pd.DataFrame:
    """
    Run the offer calculator over every row of a property DataFrame.

    Expected columns on df:
      - listed_price
      - monthly_rent
      - monthly_property_tax, monthly_insurance, monthly_hoa_fee,
        monthly_other_fees (optional, NaN -> 0)

    Returns one row per property x offer, keyed by `property_index`
    (the input row label). Rows that fail validation are skipped.
    """
    missing = [c for c in REQUIRED_POSITIVE_FIELDS if c not in df.columns]
    if missing:
        raise ValueError(f"missing required columns: {missing}")

    columns = [c for c in REQUIRED_POSITIVE_FIELDS + OPTIONAL_EXPENSE_FIELDS if c in df.columns]
    inputs = df[columns]

    rows: list[dict] = []
    skipped = 0
    for idx, rec in inputs.iterrows():
        try:
            payload = {k: (None if pd.isna(v) else v) for k, v in rec.items()}
            prop = validate_property_payload(payload)
        except InvalidInputError as e:
            skipped += 1
            logger.warning(
                "skipping property row",
                extra={"context": {"property_index": str(idx), "reason": str(e)}},
            )
            continue

        for offer in calculator.calculate_all_offers(prop):
            row = asdict(offer)
            row["offer_type"] = offer.offer_type.value
            row["deal_viability"] = offer.deal_viability.value
            row["viability_reasons"] = "; ".join(offer.viability_reasons)
            rows.append({"property_index": idx, **row})

    logger.info(
        "batch offers computed",
        extra={"context": {"properties": len(df), "skipped": skipped, "offers": len(rows)}},
    )
    return pd.DataFrame(rows)
