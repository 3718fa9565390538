"""Smith Manoeuvre (debt recycling) Simulation Package."""

from manoeuvre_sim.params import (
    ManoeuvreParams,
    InvalidParameterError,
    validate_params,
    ensure_valid,
    PERCENT_FIELDS,
    MORTGAGE_TYPES,
)
from manoeuvre_sim.amortization import (
    MortgagePayment,
    calc_equal_payment,
    solve_payment,
    effective_monthly_rate,
    annual_interest_rate,
    split_payment,
)
from manoeuvre_sim.simulation import (
    Balances,
    Contributions,
    PercentChanges,
    YearState,
    Ledger,
    NumericInstabilityError,
    initial_balances,
    simulate_year,
    simulate,
    DEFAULT_YEARS,
    HORIZON_CHOICES,
)
from manoeuvre_sim.comparison import (
    TraditionalPayoff,
    ManoeuvrePayoff,
    InterestBreakdown,
    BaselineYear,
    ComparisonSummary,
    calc_traditional_payoff,
    calc_manoeuvre_payoff,
    calc_scheduled_mortgage_interest,
    calc_interest_breakdown,
    simulate_baseline,
    compare,
)
from manoeuvre_sim.scenarios import Scenario, SCENARIOS, get_scenario, run_scenario
from manoeuvre_sim.tax import (
    CAPITAL_GAINS_INCLUSION_RATE,
    calc_tax_refund,
    calc_interest_tax_saving,
    calc_after_tax_withdrawal,
    calc_capital_gains_tax,
)

__all__ = [
    "ManoeuvreParams",
    "InvalidParameterError",
    "validate_params",
    "ensure_valid",
    "PERCENT_FIELDS",
    "MORTGAGE_TYPES",
    "MortgagePayment",
    "calc_equal_payment",
    "solve_payment",
    "effective_monthly_rate",
    "annual_interest_rate",
    "split_payment",
    "Balances",
    "Contributions",
    "PercentChanges",
    "YearState",
    "Ledger",
    "NumericInstabilityError",
    "initial_balances",
    "simulate_year",
    "simulate",
    "DEFAULT_YEARS",
    "HORIZON_CHOICES",
    "TraditionalPayoff",
    "ManoeuvrePayoff",
    "InterestBreakdown",
    "BaselineYear",
    "ComparisonSummary",
    "calc_traditional_payoff",
    "calc_manoeuvre_payoff",
    "calc_scheduled_mortgage_interest",
    "calc_interest_breakdown",
    "simulate_baseline",
    "compare",
    "Scenario",
    "SCENARIOS",
    "get_scenario",
    "run_scenario",
    "CAPITAL_GAINS_INCLUSION_RATE",
    "calc_tax_refund",
    "calc_interest_tax_saving",
    "calc_after_tax_withdrawal",
    "calc_capital_gains_tax",
]
