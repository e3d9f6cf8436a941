import math

import pytest

from sellerfin.domain.offers import DealViability, OfferType
from sellerfin.domain.property import PropertyData
from sellerfin.services.dynamic_offer import (
    create_dynamic_offer,
    editable_fields,
    field_metadata,
    update_field,
)


@pytest.fixture
def prop():
    return PropertyData(
        listed_price=100_000,
        monthly_rent=1_500,
        monthly_property_tax=100,
        monthly_insurance=80,
        monthly_hoa_fee=0,
        monthly_other_fees=20,
    )


@pytest.fixture
def owner_offer(prop, default_config):
    return create_dynamic_offer(prop, OfferType.OWNER_FAVORED, default_config)


def test_create_owner_offer(owner_offer):
    o = owner_offer

    assert o.offer_price == pytest.approx(110_000.0)        # 10% markup
    assert o.down_payment_percent == pytest.approx(5.0)
    assert o.down_payment == pytest.approx(5_500.0)
    assert o.closing_cost == pytest.approx(2_200.0)
    assert o.entry_fee_amount == pytest.approx(12_700.0)    # 5,500 + 2,200 + 5,000
    assert o.entry_fee_percent == pytest.approx(11.5454545)
    assert o.loan_amount == pytest.approx(104_500.0)
    assert o.amortization_years == pytest.approx(20.0)
    assert o.monthly_payment == pytest.approx(435.4166667)
    assert o.monthly_expenses == pytest.approx(500.0)
    assert o.monthly_cash_flow == pytest.approx(564.5833333)
    assert o.net_rental_yield == pytest.approx(53.3464567)
    assert o.balloon_period == 5
    assert o.principal_paid == pytest.approx(26_125.0)
    assert o.balloon_payment == pytest.approx(78_375.0)
    assert o.is_valid is True
    assert o.validation_errors == []
    assert o.deal_viability is DealViability.GOOD


@pytest.mark.parametrize(
    "offer_type, price, balloon",
    [
        (OfferType.OWNER_FAVORED, 110_000.0, 5),
        (OfferType.BALANCED, 105_000.0, 6),
        (OfferType.BUYER_FAVORED, 100_000.0, 7),
    ],
)
def test_markup_and_balloon_per_offer_type(prop, default_config, offer_type, price, balloon):
    o = create_dynamic_offer(prop, offer_type, default_config)
    assert o.offer_price == pytest.approx(price)
    assert o.balloon_period == balloon


def test_offer_price_edit_keeps_down_payment_percent(owner_offer, prop, default_config):
    o = update_field(owner_offer, "offer_price", 120_000, prop, default_config)

    assert o.down_payment_percent == pytest.approx(5.0)
    assert o.down_payment == pytest.approx(6_000.0)
    assert o.closing_cost == pytest.approx(2_400.0)
    assert o.entry_fee_amount == pytest.approx(13_400.0)
    assert o.loan_amount == pytest.approx(114_000.0)
    assert o.monthly_payment == pytest.approx(475.0)


def test_entry_fee_edit_back_solves_down_payment(owner_offer, prop, default_config):
    o = update_field(owner_offer, "entry_fee_amount", 20_000, prop, default_config)

    assert o.down_payment == pytest.approx(12_800.0)        # 20,000 - 2,200 - 5,000
    assert o.down_payment_percent == pytest.approx(11.6363636)
    assert o.loan_amount == pytest.approx(97_200.0)
    assert o.is_valid is False
    assert "Down payment cannot exceed 10%" in o.validation_errors


def test_entry_fee_percent_edit(owner_offer, prop, default_config):
    o = update_field(owner_offer, "entry_fee_percent", 25, prop, default_config)

    assert o.entry_fee_amount == pytest.approx(27_500.0)
    assert "Entry fee cannot exceed 20%" in o.validation_errors


def test_down_payment_amount_edit(owner_offer, prop, default_config):
    o = update_field(owner_offer, "down_payment", 8_800, prop, default_config)

    assert o.down_payment_percent == pytest.approx(8.0)
    assert o.entry_fee_amount == pytest.approx(16_000.0)
    assert o.loan_amount == pytest.approx(101_200.0)
    assert o.is_valid is True


def test_monthly_payment_edit_solves_amortization(owner_offer, prop, default_config):
    o = update_field(owner_offer, "monthly_payment", 522.5, prop, default_config)

    assert o.amortization_years == pytest.approx(16.6666667)   # 104,500 / 6,270
    assert o.monthly_cash_flow == pytest.approx(477.5)


def test_monthly_payment_round_trip_with_interest(prop, default_config):
    cfg = default_config.model_copy(update={"annual_interest_rate": 0.06})
    offer = create_dynamic_offer(prop, OfferType.BUYER_FAVORED, cfg)

    o = update_field(offer, "monthly_payment", offer.monthly_payment, prop, cfg)
    assert o.amortization_years == pytest.approx(20.0)

    # less than the interest never retires the loan
    o = update_field(offer, "monthly_payment", offer.loan_amount * 0.06 / 12 - 1, prop, cfg)
    assert math.isinf(o.amortization_years)
    assert "Amortization cannot exceed 40 years" in o.validation_errors


def test_zero_amortization_is_flagged(owner_offer, prop, default_config):
    o = update_field(owner_offer, "amortization_years", 0, prop, default_config)

    assert math.isinf(o.monthly_payment)
    assert o.is_valid is False
    assert "Amortization must be at least 1 year" in o.validation_errors
    assert o.deal_viability is DealViability.NOT_VIABLE


def test_balloon_period_edit(owner_offer, prop, default_config):
    o = update_field(owner_offer, "balloon_period", 10, prop, default_config)

    assert o.principal_paid == pytest.approx(52_250.0)
    assert o.balloon_payment == pytest.approx(52_250.0)


@pytest.mark.parametrize("value", [0, -3, 100_000, float("nan")])
def test_balloon_period_outside_loan_life_is_rejected(owner_offer, prop, default_config, value):
    with pytest.raises(ValueError, match="balloon_period"):
        update_field(owner_offer, "balloon_period", value, prop, default_config)


@pytest.mark.parametrize(
    "value, message",
    [
        (0.5, "Balloon period must be at least 1 year"),
        (15, "Balloon period cannot exceed 10 years"),
    ],
)
def test_balloon_period_guard_rails(owner_offer, prop, default_config, value, message):
    o = update_field(owner_offer, "balloon_period", value, prop, default_config)

    assert o.is_valid is False
    assert message in o.validation_errors


def test_update_does_not_mutate_input(owner_offer, prop, default_config):
    before = owner_offer.offer_price
    update_field(owner_offer, "offer_price", 200_000, prop, default_config)
    assert owner_offer.offer_price == before


def test_unknown_field_is_rejected(owner_offer, prop, default_config):
    with pytest.raises(ValueError):
        update_field(owner_offer, "monthly_rent", 3_000, prop, default_config)


def test_field_descriptions():
    fields = editable_fields()
    assert fields[0] == "offer_price"
    assert len(fields) == 8

    meta = field_metadata("down_payment_percent")
    assert meta["format"] == "percent"
    assert (meta["min"], meta["max"]) == (5.0, 10.0)

    assert field_metadata("nope") == {"label": "nope", "format": "currency"}
