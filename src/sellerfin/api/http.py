# src/sellerfin/api/http.py
from __future__ import annotations

import math
from dataclasses import asdict, fields
from typing import Any

from fastapi import FastAPI, HTTPException

from sellerfin.adapters.config import load_calculator_config
from sellerfin.adapters.logging_utils import get_logger
from sellerfin.domain.offers import DealViability, OfferResult, OfferType
from sellerfin.services.dynamic_offer import DynamicOffer, create_dynamic_offer, update_field
from sellerfin.services.offer_calculator import SellerFinanceCalculator
from sellerfin.services.validation import InvalidInputError, validate_property_payload
from .schemas import (
    CalculateOffersRequest,
    CalculateOffersResponse,
    DynamicOfferCreate,
    DynamicOfferUpdate,
    OfferItem,
)

logger = get_logger(__name__)

app = FastAPI(title="sellerfin")

# -------------------------------------------------------------------
# Calculator config is built once at startup and shared read-only
# -------------------------------------------------------------------
_calculator_config = load_calculator_config()
_calculator = SellerFinanceCalculator(_calculator_config)


def _finite_or_none(value: Any) -> Any:
    # JSON has no inf/nan
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _jsonable(record: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in record.items():
        if isinstance(v, (OfferType, DealViability)):
            out[k] = v.value
        else:
            out[k] = _finite_or_none(v)
    return out


def _offer_item(offer: OfferResult) -> OfferItem:
    return OfferItem(**_jsonable(asdict(offer)))


def _dynamic_offer_from_payload(payload: dict[str, Any]) -> DynamicOffer:
    known = {f.name for f in fields(DynamicOffer)}
    data = {k: v for k, v in payload.items() if k in known}
    # null comes back for values that were infinite
    for k, v in list(data.items()):
        if v is None:
            data[k] = math.inf
    data["offer_type"] = OfferType(data["offer_type"])
    if "deal_viability" in data:
        data["deal_viability"] = DealViability(data["deal_viability"])
    return DynamicOffer(**data)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/config")
def get_config() -> dict[str, Any]:
    return _calculator_config.model_dump()


@app.post("/calculate-offers", response_model=CalculateOffersResponse)
def calculate_offers(payload: CalculateOffersRequest) -> CalculateOffersResponse:
    try:
        property_data = validate_property_payload(payload.model_dump())
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        offers = _calculator.calculate_all_offers(property_data)
        return CalculateOffersResponse(offers=[_offer_item(o) for o in offers])
    except Exception as e:
        logger.exception("calculation failed", extra={"context": {"payload": payload.model_dump()}})
        raise HTTPException(status_code=500, detail="Calculation failed") from e


@app.post("/dynamic-offers")
def dynamic_offer_create(body: DynamicOfferCreate) -> dict[str, Any]:
    try:
        property_data = validate_property_payload(body.property_data.model_dump())
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    offer = create_dynamic_offer(property_data, body.offer_type, _calculator_config)
    return _jsonable(asdict(offer))


@app.post("/dynamic-offers/update")
def dynamic_offer_update(body: DynamicOfferUpdate) -> dict[str, Any]:
    try:
        property_data = validate_property_payload(body.property_data.model_dump())
        current = _dynamic_offer_from_payload(body.offer)
        updated = update_field(current, body.field, body.value, property_data, _calculator_config)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return _jsonable(asdict(updated))
