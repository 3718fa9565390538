"""Year-by-year debt-recycling simulation.

Each year re-borrows the mortgage principal repaid in that year through the
line of credit and invests it in the taxable account. The year's principal
payment P depends on itself: the tax refund on deductible interest and the
dividends on the taxable account are both paid on half-year average balances
that include part of P. ``simulate_year`` resolves that in closed form and
``simulate`` folds it across the horizon.
"""

from dataclasses import dataclass
from typing import Callable

from manoeuvre_sim.amortization import annual_interest_rate, solve_payment
from manoeuvre_sim.params import InvalidParameterError, ManoeuvreParams, ensure_valid
from manoeuvre_sim.tax import (
    calc_after_tax_withdrawal,
    calc_capital_gains_tax,
    calc_tax_refund,
    calc_unrealized_gain,
    real_value,
)

DEFAULT_YEARS = 30
HORIZON_CHOICES = (20, 30)

# (year, base params) -> partial params for that year only
OverrideHook = Callable[[int, ManoeuvreParams], dict]


class NumericInstabilityError(ValueError):
    """Raised when the closed-form solve for P has a non-positive denominator."""


@dataclass(frozen=True)
class Balances:
    mortgage: float
    line_of_credit: float
    tax_free: float
    tax_deferred: float
    taxable: float
    deductible_debt: float
    non_deductible_debt: float = 0.0
    adjusted_cost_base: float = 0.0  # taxable account book value
    cumulative_deductible_interest: float = 0.0

    @property
    def portfolio(self) -> float:
        return self.tax_free + self.tax_deferred + self.taxable

    @property
    def net_wealth(self) -> float:
        return self.portfolio - self.line_of_credit


@dataclass(frozen=True)
class Contributions:
    tax_free_room: float  # funded from the year-1 draw
    tax_free_savings: float  # funded from savings in later years
    tax_deferred: float
    non_deductible_consumption: float  # part of P not invested in the taxable account
    initial_draw: float
    initial_taxable: float

    @property
    def tax_free(self) -> float:
        return self.tax_free_room + self.tax_free_savings


@dataclass(frozen=True)
class PercentChanges:
    tax_free: float
    tax_deferred: float
    taxable: float
    portfolio: float
    mortgage_decrease: float
    heloc_increase: float


@dataclass(frozen=True)
class YearState:
    year: int
    params: ManoeuvreParams
    beginning: Balances
    contributions: Contributions

    # Solver terms
    standard_principal: float
    a: float
    b: float
    left: float
    right_add: float
    constant: float

    accelerated_principal: float
    principal_clamped: bool
    additional_deductible: float
    average_deductible_debt: float
    deductible_interest: float
    non_deductible_interest: float
    mortgage_interest: float
    tax_refund: float
    average_taxable: float
    dividends: float

    ending: Balances
    heloc_capped: bool
    percent_changes: PercentChanges

    @property
    def heloc_interest(self) -> float:
        return self.deductible_interest + self.non_deductible_interest

    @property
    def portfolio_value(self) -> float:
        return self.ending.portfolio

    @property
    def net_wealth(self) -> float:
        return self.ending.net_wealth

    @property
    def tax_deferred_after_tax(self) -> float:
        return calc_after_tax_withdrawal(self.ending.tax_deferred, self.params.retirement_tax_rate)

    @property
    def inflation_adjusted_portfolio(self) -> float:
        return real_value(self.ending.portfolio, self.params.inflation_rate, self.year)

    @property
    def unrealized_gain(self) -> float:
        return calc_unrealized_gain(self.ending.taxable, self.ending.adjusted_cost_base)

    @property
    def potential_capital_gains_tax(self) -> float:
        return calc_capital_gains_tax(
            self.ending.taxable, self.ending.adjusted_cost_base, self.params.tax_rate,
        )

    def to_row(self) -> dict:
        """Reported values: currency rounded to the dollar, percentages to 0.01."""
        pc = self.percent_changes
        return {
            "year": self.year,
            "mortgage": round(self.ending.mortgage),
            "line_of_credit": round(self.ending.line_of_credit),
            "tax_free": round(self.ending.tax_free),
            "tax_deferred": round(self.ending.tax_deferred),
            "taxable": round(self.ending.taxable),
            "portfolio": round(self.ending.portfolio),
            "net_wealth": round(self.ending.net_wealth),
            "deductible_debt": round(self.ending.deductible_debt),
            "accelerated_principal": round(self.accelerated_principal),
            "standard_principal": round(self.standard_principal),
            "tax_refund": round(self.tax_refund),
            "dividends": round(self.dividends),
            "deductible_interest": round(self.deductible_interest),
            "non_deductible_interest": round(self.non_deductible_interest),
            "mortgage_interest": round(self.mortgage_interest),
            "tax_deferred_after_tax": round(self.tax_deferred_after_tax),
            "inflation_adjusted_portfolio": round(self.inflation_adjusted_portfolio),
            "adjusted_cost_base": round(self.ending.adjusted_cost_base),
            "potential_capital_gains_tax": round(self.potential_capital_gains_tax),
            "principal_clamped": self.principal_clamped,
            "heloc_capped": self.heloc_capped,
            "pct_tax_free": round(pc.tax_free, 2),
            "pct_tax_deferred": round(pc.tax_deferred, 2),
            "pct_taxable": round(pc.taxable, 2),
            "pct_portfolio": round(pc.portfolio, 2),
            "pct_mortgage_decrease": round(pc.mortgage_decrease, 2),
            "pct_heloc_increase": round(pc.heloc_increase, 2),
        }


Ledger = tuple[YearState, ...]


def initial_balances(params: ManoeuvreParams) -> Balances:
    return Balances(
        mortgage=params.principal,
        line_of_credit=0.0,
        tax_free=params.initial_tax_free,
        tax_deferred=0.0,
        taxable=0.0,
        deductible_debt=0.0,
    )


def _contributions(params: ManoeuvreParams, year: int) -> Contributions:
    """Year 1 is funded by the initial draw; later years from savings and P."""
    if year == 1:
        tax_deferred = params.tax_deferred_year1
        room = params.tax_free_room_year1
        draw = params.initial_heloc_headroom
        return Contributions(
            tax_free_room=room,
            tax_free_savings=0.0,
            tax_deferred=tax_deferred,
            non_deductible_consumption=0.0,
            initial_draw=draw,
            initial_taxable=max(0.0, draw - room - tax_deferred),
        )
    return Contributions(
        tax_free_room=0.0,
        tax_free_savings=params.tax_free_annual_increase,
        tax_deferred=params.tax_deferred_ongoing,
        non_deductible_consumption=params.tax_deferred_ongoing,
        initial_draw=0.0,
        initial_taxable=0.0,
    )


def _pct(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def simulate_year(beginning: Balances, params: ManoeuvreParams, year: int) -> YearState:
    """Advance one year from ``beginning`` under ``params``.

    ``params`` are the effective parameters for this year (overrides already
    merged). The payment is always solved from the original principal and
    term at this year's mortgage rate.
    """
    c = _contributions(params, year)
    ndc = c.non_deductible_consumption
    tax = params.tax_rate
    loc_rate = params.heloc_rate
    dy = params.dividend_yield

    # Initial draw: registered contributions first, remainder into taxable
    loc = beginning.line_of_credit + c.initial_draw
    taxable = beginning.taxable + c.initial_taxable
    deductible = beginning.deductible_debt + c.initial_taxable
    non_deductible_debt = beginning.non_deductible_debt + (c.initial_draw - c.initial_taxable)

    mortgage_rate = annual_interest_rate(params.mortgage_rate, params.mortgage_type)
    payment = solve_payment(
        params.principal, params.mortgage_rate, params.amortization_years, params.mortgage_type,
    )
    mortgage_interest = beginning.mortgage * mortgage_rate
    standard_principal = payment.annual - mortgage_interest

    a = dy / 2
    b = tax * loc_rate / 2
    left = 1 - a - b
    right_add = a + b
    if left <= 0:
        raise NumericInstabilityError(
            f"year {year}: solver denominator is {left:.6f} "
            f"(dividend_yield={dy}, tax_rate={tax}, heloc_rate={loc_rate})"
        )
    constant = standard_principal + dy * taxable + ndc * tax + tax * loc_rate * deductible
    p = (constant + right_add * ndc) / left

    clamped = p > beginning.mortgage or p < 0
    p = max(0.0, min(p, beginning.mortgage))

    # Floored so deductible debt never shrinks once P falls below ndc
    additional = max(0.0, p - ndc)
    average_deductible = deductible + additional / 2
    deductible_interest = loc_rate * average_deductible
    non_deductible_interest = loc_rate * min(non_deductible_debt, loc + p)
    refund = calc_tax_refund(ndc, deductible_interest, tax)
    average_taxable = taxable + additional / 2
    dividends = dy * taxable

    tax_free_end = (beginning.tax_free + c.tax_free) * (1 + params.investment_return)
    tax_deferred_end = (beginning.tax_deferred + c.tax_deferred) * (1 + params.investment_return)
    taxable_end = taxable * (1 + params.growth_rate) + additional * (1 + params.growth_rate / 2)

    loc_end = loc + p
    capped = loc_end > params.credit_limit
    if capped:
        loc_end = params.credit_limit

    ending = Balances(
        mortgage=max(0.0, beginning.mortgage - p),
        line_of_credit=loc_end,
        tax_free=tax_free_end,
        tax_deferred=tax_deferred_end,
        taxable=taxable_end,
        deductible_debt=deductible + additional,
        non_deductible_debt=non_deductible_debt + min(p, ndc),
        adjusted_cost_base=beginning.adjusted_cost_base + c.initial_taxable + additional + dividends,
        cumulative_deductible_interest=beginning.cumulative_deductible_interest + deductible_interest,
    )

    # Each field keeps its own denominator convention
    percent_changes = PercentChanges(
        tax_free=_pct(
            tax_free_end - beginning.tax_free - c.tax_free,
            beginning.tax_free + c.tax_free,
        ),
        tax_deferred=_pct(
            tax_deferred_end - beginning.tax_deferred - c.tax_deferred,
            beginning.tax_deferred + c.tax_deferred,
        ),
        taxable=_pct(
            taxable_end - beginning.taxable - c.initial_taxable - additional,
            beginning.taxable + c.initial_taxable + additional / 2,
        ),
        portfolio=_pct(
            ending.portfolio - beginning.portfolio
            - (c.tax_free + c.tax_deferred + c.initial_taxable + additional),
            beginning.portfolio,
        ),
        mortgage_decrease=_pct(p, beginning.mortgage),
        heloc_increase=_pct(p, beginning.line_of_credit),
    )

    return YearState(
        year=year,
        params=params,
        beginning=beginning,
        contributions=c,
        standard_principal=standard_principal,
        a=a,
        b=b,
        left=left,
        right_add=right_add,
        constant=constant,
        accelerated_principal=p,
        principal_clamped=clamped,
        additional_deductible=additional,
        average_deductible_debt=average_deductible,
        deductible_interest=deductible_interest,
        non_deductible_interest=non_deductible_interest,
        mortgage_interest=mortgage_interest,
        tax_refund=refund,
        average_taxable=average_taxable,
        dividends=dividends,
        ending=ending,
        heloc_capped=capped,
        percent_changes=percent_changes,
    )


def validate_years(years: int) -> None:
    """Raise InvalidParameterError unless ``years`` is a positive integer."""
    if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
        raise InvalidParameterError(f"years must be a positive integer (got {years!r})")


def simulate(
    params: ManoeuvreParams,
    years: int = DEFAULT_YEARS,
    overrides: OverrideHook | None = None,
) -> Ledger:
    """Run the manoeuvre for ``years`` years and return one YearState per year.

    ``overrides(year, params)`` may return a partial dict of parameter values
    that apply to that year only. Any invalid parameter or unstable solve
    aborts the whole run; no partial ledger is returned.
    """
    ensure_valid(params)
    validate_years(years)

    ledger: list[YearState] = []
    balances = initial_balances(params)
    for year in range(1, years + 1):
        effective = params
        if overrides is not None:
            effective = ensure_valid(params.with_overrides(overrides(year, params)))
        state = simulate_year(balances, effective, year)
        ledger.append(state)
        balances = state.ending
    return tuple(ledger)
