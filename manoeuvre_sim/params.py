"""Simulation parameters, percentage conversion and validation."""

import dataclasses
import math
from dataclasses import dataclass

MORTGAGE_TYPES = ("variable", "fixed")

# Fields supplied as whole-number percentages by callers (5.0 → 0.05)
PERCENT_FIELDS = (
    "mortgage_rate",
    "heloc_rate",
    "tax_rate",
    "investment_return",
    "growth_rate",
    "dividend_yield",
    "retirement_tax_rate",
    "inflation_rate",
)


class InvalidParameterError(ValueError):
    """Raised when a parameter is missing, non-finite or out of range."""


@dataclass(frozen=True)
class ManoeuvreParams:

    # Mortgage
    principal: float = 1_091_000.0
    mortgage_rate: float = 0.0365
    amortization_years: int = 30
    mortgage_type: str = "variable"  # variable: monthly compounding, fixed: semi-annual

    # Line of credit
    heloc_rate: float = 0.047
    initial_heloc_headroom: float = 300_000.0

    # Tax
    tax_rate: float = 0.535
    retirement_tax_rate: float = 0.20  # applied to RRSP withdrawals

    # Market
    investment_return: float = 0.07  # TFSA / RRSP
    growth_rate: float = 0.07  # non-registered price growth
    dividend_yield: float = 0.04
    inflation_rate: float = 0.0

    # Registered accounts
    initial_tax_free: float = 38_015.45
    tax_free_room_year1: float = 42_000.0
    tax_free_annual_increase: float = 7_000.0
    tax_deferred_year1: float = 50_000.0
    tax_deferred_ongoing: float = 25_000.0

    @classmethod
    def from_percentages(cls, **kwargs) -> "ManoeuvreParams":
        """Build params where every rate field is a whole-number percentage."""
        converted = {}
        for key, value in kwargs.items():
            if key in PERCENT_FIELDS and isinstance(value, (int, float)) and not isinstance(value, bool):
                value = value / 100
            converted[key] = value
        return cls(**converted)

    def with_overrides(self, overrides: dict | None) -> "ManoeuvreParams":
        """Return a copy with ``overrides`` merged in. ``self`` is untouched."""
        if not overrides:
            return self
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidParameterError(f"unknown parameter override: {', '.join(unknown)}")
        return dataclasses.replace(self, **overrides)

    @property
    def credit_limit(self) -> float:
        """Combined mortgage + line-of-credit ceiling."""
        return self.principal + self.initial_heloc_headroom

    def as_percentages(self) -> dict:
        """Caller-facing dict with rate fields as whole-number percentages."""
        out = dataclasses.asdict(self)
        for key in PERCENT_FIELDS:
            out[key] = out[key] * 100
        return out


def _check_number(errors: list[str], name: str, value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(f"{name} must be a number (got {value!r})")
        return False
    if not math.isfinite(value):
        errors.append(f"{name} must be finite (got {value})")
        return False
    return True


def validate_params(params: ManoeuvreParams) -> list[str]:
    """Return a list of validation error messages (empty if valid)."""
    errors: list[str] = []

    def positive(name):
        v = getattr(params, name)
        if _check_number(errors, name, v) and v <= 0:
            errors.append(f"{name} must be positive (got {v})")

    def non_negative(name):
        v = getattr(params, name)
        if _check_number(errors, name, v) and v < 0:
            errors.append(f"{name} must not be negative (got {v})")

    def above_minus_one(name):
        v = getattr(params, name)
        if _check_number(errors, name, v) and v <= -1:
            errors.append(f"{name} must be greater than -100% (got {v})")

    positive("principal")
    non_negative("mortgage_rate")
    non_negative("heloc_rate")
    non_negative("initial_heloc_headroom")
    for name in (
        "initial_tax_free",
        "tax_free_room_year1",
        "tax_free_annual_increase",
        "tax_deferred_year1",
        "tax_deferred_ongoing",
    ):
        non_negative(name)
    for name in ("investment_return", "growth_rate", "inflation_rate"):
        above_minus_one(name)

    years = params.amortization_years
    if isinstance(years, bool) or not isinstance(years, int):
        errors.append(f"amortization_years must be an integer (got {years!r})")
    elif years <= 0:
        errors.append(f"amortization_years must be positive (got {years})")

    if _check_number(errors, "tax_rate", params.tax_rate) and not 0 <= params.tax_rate < 1:
        errors.append(f"tax_rate must be in [0, 1) (got {params.tax_rate})")
    rt = params.retirement_tax_rate
    if _check_number(errors, "retirement_tax_rate", rt) and not 0 <= rt <= 1:
        errors.append(f"retirement_tax_rate must be in [0, 1] (got {rt})")
    dy = params.dividend_yield
    if _check_number(errors, "dividend_yield", dy) and not 0 <= dy <= 1:
        errors.append(f"dividend_yield must be in [0, 1] (got {dy})")

    if params.mortgage_type not in MORTGAGE_TYPES:
        errors.append(f"mortgage_type must be one of {MORTGAGE_TYPES} (got {params.mortgage_type!r})")
    return errors


def ensure_valid(params: ManoeuvreParams) -> ManoeuvreParams:
    """Raise InvalidParameterError listing every problem with ``params``."""
    errors = validate_params(params)
    if errors:
        raise InvalidParameterError("; ".join(errors))
    return params
