"""Fixed-payment mortgage amortization."""

import math
from dataclasses import dataclass

from manoeuvre_sim.params import MORTGAGE_TYPES, InvalidParameterError

# Canadian fixed-rate mortgages compound semi-annually (Interest Act)
FIXED_COMPOUNDING_PERIODS = 2


@dataclass(frozen=True)
class MortgagePayment:
    monthly: float
    annual: float
    monthly_rate: float
    months: int


def effective_monthly_rate(annual_rate: float, mortgage_type: str = "variable") -> float:
    """Monthly rate for the given compounding convention."""
    if mortgage_type == "variable":
        return annual_rate / 12
    if mortgage_type == "fixed":
        per_period = annual_rate / FIXED_COMPOUNDING_PERIODS
        return (1 + per_period) ** (FIXED_COMPOUNDING_PERIODS / 12) - 1
    raise InvalidParameterError(f"mortgage_type must be one of {MORTGAGE_TYPES} (got {mortgage_type!r})")


def annual_interest_rate(annual_rate: float, mortgage_type: str = "variable") -> float:
    """Rate applied to a beginning-of-year balance to get that year's interest.

    Variable mortgages use the nominal rate; fixed mortgages use the effective
    annual rate of semi-annual compounding.
    """
    if mortgage_type == "fixed":
        return (1 + annual_rate / FIXED_COMPOUNDING_PERIODS) ** FIXED_COMPOUNDING_PERIODS - 1
    if mortgage_type == "variable":
        return annual_rate
    raise InvalidParameterError(f"mortgage_type must be one of {MORTGAGE_TYPES} (got {mortgage_type!r})")


def calc_equal_payment(principal: float, monthly_rate: float, months: int) -> float:
    """Level monthly payment (annuity formula); principal / months at a zero rate."""
    if monthly_rate == 0:
        return principal / months
    growth = (1 + monthly_rate) ** months
    return principal * monthly_rate * growth / (growth - 1)


def solve_payment(
    principal: float,
    annual_rate: float,
    years: int,
    mortgage_type: str = "variable",
) -> MortgagePayment:
    """Solve the constant payment that retires ``principal`` over ``years``."""
    if not math.isfinite(principal) or principal <= 0:
        raise InvalidParameterError(f"principal must be positive (got {principal})")
    if not math.isfinite(annual_rate) or annual_rate < 0:
        raise InvalidParameterError(f"mortgage rate must not be negative (got {annual_rate})")
    if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
        raise InvalidParameterError(f"amortization term must be a positive integer (got {years!r})")
    months = years * 12
    rate = effective_monthly_rate(annual_rate, mortgage_type)
    monthly = calc_equal_payment(principal, rate, months)
    return MortgagePayment(monthly=monthly, annual=monthly * 12, monthly_rate=rate, months=months)


def split_payment(balance: float, payment: float, monthly_rate: float) -> tuple[float, float]:
    """Split one monthly payment into (interest, principal).

    The principal part never exceeds the outstanding balance.
    """
    interest = balance * monthly_rate
    principal = min(payment - interest, balance)
    return interest, principal
