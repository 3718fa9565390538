"""Traditional payoff reference and summary metrics for a simulated ledger."""

from dataclasses import dataclass

from manoeuvre_sim.amortization import annual_interest_rate, solve_payment, split_payment
from manoeuvre_sim.params import ManoeuvreParams, ensure_valid
from manoeuvre_sim.simulation import Ledger, YearState, validate_years
from manoeuvre_sim.tax import calc_interest_tax_saving

# Remaining balance treated as fully repaid
PAYOFF_TOLERANCE = 0.01


@dataclass(frozen=True)
class TraditionalPayoff:
    months: int
    years: float
    monthly_payment: float
    total_interest: float


@dataclass(frozen=True)
class ManoeuvrePayoff:
    year: int
    paid_off: bool
    remaining_mortgage: float
    portfolio_value: float
    line_of_credit: float
    net_wealth: float


@dataclass(frozen=True)
class InterestBreakdown:
    years: int
    mortgage_interest: float
    heloc_interest: float
    deductible_interest: float
    non_deductible_interest: float
    tax_savings: float

    @property
    def net_interest_cost(self) -> float:
        """Mortgage interest less the refund generated by deductible HELOC interest."""
        return self.mortgage_interest - self.tax_savings

    @property
    def personal_interest_cost(self) -> float:
        """Net cost plus interest on the non-deductible part of the HELOC."""
        return self.net_interest_cost + self.non_deductible_interest

    @property
    def after_tax_interest_cost(self) -> float:
        """All interest paid, including investment-loan interest, less refunds."""
        return self.mortgage_interest + self.heloc_interest - self.tax_savings


@dataclass(frozen=True)
class BaselineYear:
    """One year of the same household without the manoeuvre."""
    year: int
    mortgage: float
    tax_free: float
    tax_deferred: float

    @property
    def portfolio(self) -> float:
        return self.tax_free + self.tax_deferred

    @property
    def net_wealth(self) -> float:
        return self.portfolio - self.mortgage


@dataclass(frozen=True)
class ComparisonSummary:
    traditional: TraditionalPayoff
    manoeuvre: ManoeuvrePayoff
    interest: InterestBreakdown
    baseline: tuple[BaselineYear, ...]

    @property
    def years_saved(self) -> float:
        """Payoff acceleration in years (0 if the mortgage is never cleared)."""
        if not self.manoeuvre.paid_off:
            return 0.0
        return self.traditional.years - self.manoeuvre.year

    @property
    def interest_saved(self) -> float:
        return self.traditional.total_interest - self.interest.net_interest_cost

    @property
    def baseline_at_payoff(self) -> BaselineYear:
        return self.baseline[min(self.manoeuvre.year, len(self.baseline)) - 1]

    @property
    def wealth_advantage(self) -> float:
        """Net of all debt, manoeuvre minus baseline, at the payoff year."""
        m = self.manoeuvre
        manoeuvre_net = m.portfolio_value - m.line_of_credit - m.remaining_mortgage
        return manoeuvre_net - self.baseline_at_payoff.net_wealth


def calc_traditional_payoff(
    principal: float,
    annual_rate: float,
    years: int,
    mortgage_type: str = "variable",
) -> TraditionalPayoff:
    """Amortize month by month with no prepayments."""
    payment = solve_payment(principal, annual_rate, years, mortgage_type)
    balance = principal
    total_interest = 0.0
    months = 0
    while balance > PAYOFF_TOLERANCE and months < payment.months:
        interest, principal_paid = split_payment(balance, payment.monthly, payment.monthly_rate)
        balance -= principal_paid
        total_interest += interest
        months += 1
    return TraditionalPayoff(
        months=months,
        years=round(months / 12, 1),
        monthly_payment=payment.monthly,
        total_interest=total_interest,
    )


def find_payoff_state(ledger: Ledger) -> YearState:
    """First year whose reported mortgage balance is zero, else the final year."""
    if not ledger:
        raise ValueError("ledger is empty")
    for state in ledger:
        if round(state.ending.mortgage) == 0:
            return state
    return ledger[-1]


def calc_manoeuvre_payoff(ledger: Ledger) -> ManoeuvrePayoff:
    state = find_payoff_state(ledger)
    return ManoeuvrePayoff(
        year=state.year,
        paid_off=round(state.ending.mortgage) == 0,
        remaining_mortgage=state.ending.mortgage,
        portfolio_value=state.ending.portfolio,
        line_of_credit=state.ending.line_of_credit,
        net_wealth=state.ending.net_wealth,
    )


def calc_scheduled_mortgage_interest(states: list[YearState]) -> float:
    """Mortgage interest priced month by month, like calc_traditional_payoff.

    The regular payment is made every month and
    ``accelerated_principal - standard_principal`` is prepaid at year end,
    so the balance never exceeds the traditional schedule's balance.
    """
    if not states:
        return 0.0
    balance = states[0].beginning.mortgage
    total = 0.0
    for s in states:
        p = s.params
        payment = solve_payment(p.principal, p.mortgage_rate, p.amortization_years, p.mortgage_type)
        for _ in range(12):
            if balance <= 0:
                break
            interest, principal_paid = split_payment(balance, payment.monthly, payment.monthly_rate)
            total += interest
            balance -= principal_paid
        extra = max(0.0, s.accelerated_principal - s.standard_principal)
        balance = max(0.0, balance - extra)
    return total


def calc_interest_breakdown(ledger: Ledger) -> InterestBreakdown:
    """Sum interest components from year 1 through the payoff year."""
    payoff_year = find_payoff_state(ledger).year
    states = [s for s in ledger if s.year <= payoff_year]
    deductible = sum(s.deductible_interest for s in states)
    non_deductible = sum(s.non_deductible_interest for s in states)
    return InterestBreakdown(
        years=payoff_year,
        mortgage_interest=calc_scheduled_mortgage_interest(states),
        heloc_interest=deductible + non_deductible,
        deductible_interest=deductible,
        non_deductible_interest=non_deductible,
        tax_savings=sum(
            calc_interest_tax_saving(s.deductible_interest, s.params.tax_rate) for s in states
        ),
    )


def simulate_baseline(params: ManoeuvreParams, years: int) -> tuple[BaselineYear, ...]:
    """Regular amortization with the same registered contributions paid from savings."""
    ensure_valid(params)
    validate_years(years)
    payment = solve_payment(
        params.principal, params.mortgage_rate, params.amortization_years, params.mortgage_type,
    )
    rate = annual_interest_rate(params.mortgage_rate, params.mortgage_type)
    growth = 1 + params.investment_return

    mortgage = params.principal
    tax_free = params.initial_tax_free
    tax_deferred = 0.0
    out = []
    for year in range(1, years + 1):
        if year == 1:
            tax_free_contrib = params.tax_free_room_year1
            tax_deferred_contrib = params.tax_deferred_year1
        else:
            tax_free_contrib = params.tax_free_annual_increase
            tax_deferred_contrib = params.tax_deferred_ongoing
        principal_paid = min(payment.annual - mortgage * rate, mortgage)
        mortgage = max(0.0, mortgage - principal_paid)
        tax_free = (tax_free + tax_free_contrib) * growth
        tax_deferred = (tax_deferred + tax_deferred_contrib) * growth
        out.append(BaselineYear(year, mortgage, tax_free, tax_deferred))
    return tuple(out)


def compare(params: ManoeuvreParams, ledger: Ledger) -> ComparisonSummary:
    """Build the full comparison for a ledger produced from ``params``."""
    return ComparisonSummary(
        traditional=calc_traditional_payoff(
            params.principal, params.mortgage_rate, params.amortization_years, params.mortgage_type,
        ),
        manoeuvre=calc_manoeuvre_payoff(ledger),
        interest=calc_interest_breakdown(ledger),
        baseline=simulate_baseline(params, len(ledger)),
    )
