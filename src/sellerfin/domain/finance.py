import math

from sellerfin.domain.assumptions import CalculatorConfig
from sellerfin.domain.property import PropertyData

# Fixed rehab allowance per deal
REHAB_COST = 6000.0


def annuity_payment(rate_monthly: float, n_months: float, principal: float) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * r / (1 - (1 + r)^-n)
    Straight line (P / n) when r == 0.
    """
    r = rate_monthly
    if r == 0:
        return principal / n_months
    return principal * r / (1 - (1 + r) ** -n_months)


def remaining_balance(principal: float, rate_monthly: float, payment: float, n_paid: float) -> float:
    """
    Loan balance left after n_paid monthly payments; never negative.
    """
    r = rate_monthly
    if r == 0:
        balance = principal - payment * n_paid
    else:
        growth = (1 + r) ** n_paid
        balance = principal * growth - payment * (growth - 1) / r
    return max(balance, 0.0)


def amortization_period_years(loan_amount: float, monthly_payment: float) -> float:
    if monthly_payment <= 0:
        return math.inf
    return loan_amount / (monthly_payment * 12)


def solve_amortization_years(loan_amount: float, rate_monthly: float, monthly_payment: float) -> float:
    """
    Years needed to retire loan_amount at monthly_payment.
    inf when the payment does not even cover the interest.
    """
    if monthly_payment <= 0:
        return math.inf
    r = rate_monthly
    if r == 0:
        return loan_amount / (monthly_payment * 12)
    interest_only = loan_amount * r
    if monthly_payment <= interest_only:
        return math.inf
    n_months = -math.log(1 - interest_only / monthly_payment) / math.log(1 + r)
    return n_months / 12


def appreciated_value(base_price: float, annual_rate: float, years: float) -> float:
    return base_price * (1 + annual_rate) ** years


def non_debt_expenses(property_data: PropertyData, config: CalculatorConfig) -> float:
    """
    Monthly expenses that exist regardless of financing
    (tax, insurance, HOA, other, maintenance and management reserves).
    """
    rent = property_data.monthly_rent
    return (
        property_data.monthly_property_tax
        + property_data.monthly_insurance
        + property_data.monthly_hoa_fee
        + property_data.monthly_other_fees
        + rent * config.monthly_maintenance_rate
        + rent * config.monthly_prop_mgmt_rate
    )


def operating_expenses(property_data: PropertyData, config: CalculatorConfig, monthly_payment: float) -> float:
    # P&I + everything else
    return monthly_payment + non_debt_expenses(property_data, config)


def net_rental_yield(annual_net_income: float, entry_fee: float) -> float:
    if entry_fee <= 0:
        return 0.0
    return annual_net_income / entry_fee * 100


def cash_on_cash_percent(annual_cash_flow: float, cash_invested: float) -> float:
    if cash_invested <= 0:
        return 0.0
    return annual_cash_flow / cash_invested * 100
