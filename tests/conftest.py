# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from sellerfin.api.http import app  # ensures imports resolve; run tests from repo root
from sellerfin.domain.assumptions import (
    CalculatorConfig,
    OfferProfile,
    OfferProfiles,
    default_calculator_config,
)
from sellerfin.domain.property import PropertyData


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def default_config() -> CalculatorConfig:
    return default_calculator_config()


@pytest.fixture
def interest_config() -> CalculatorConfig:
    """
    8% interest, 30 year max term; the owner-favored profile is the
    87k walkthrough deal (10% entry fee, 8-15% yield target, 5y balloon).
    """
    return CalculatorConfig(
        annual_interest_rate=0.08,
        assignment_fee=2000.0,
        closing_cost_percent_of_offer=0.02,
        monthly_maintenance_rate=0.1,
        monthly_prop_mgmt_rate=0.1,
        appreciation_per_year=0.03,
        max_amortization_years=30,
        offers=OfferProfiles(
            owner_favored=OfferProfile(
                appreciation_profit_fixed=10000.0,
                entry_fee_max_percent=0.10,
                net_rental_yield_range=(8.0, 15.0),
                balloon_period=5,
            ),
            balanced=OfferProfile(
                appreciation_profit_fixed=15000.0,
                entry_fee_max_percent=0.15,
                net_rental_yield_range=(10.0, 18.0),
                balloon_period=6,
            ),
            buyer_favored=OfferProfile(
                appreciation_profit_fixed=20000.0,
                entry_fee_max_percent=0.20,
                net_rental_yield_range=(12.0, 20.0),
                balloon_period=7,
            ),
        ),
    )


@pytest.fixture
def sample_87k() -> PropertyData:
    return PropertyData(
        listed_price=87000,
        monthly_rent=1150,
        monthly_property_tax=95,
        monthly_insurance=80,
        monthly_hoa_fee=0,
        monthly_other_fees=150,
    )


@pytest.fixture
def sample_150k() -> PropertyData:
    return PropertyData(
        listed_price=150_000,
        monthly_rent=2000,
        monthly_property_tax=150,
        monthly_insurance=100,
        monthly_hoa_fee=0,
        monthly_other_fees=50,
    )
