"""Stress scenarios expressed as per-year parameter overrides.

A scenario never touches the engine: it is a pure function
``(year, base params) -> partial params`` passed to ``simulate``.
"""

from dataclasses import dataclass

from manoeuvre_sim.params import ManoeuvreParams
from manoeuvre_sim.simulation import DEFAULT_YEARS, Ledger, OverrideHook, simulate


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    description: str
    year_overrides: OverrideHook


def _no_overrides(year: int, base: ManoeuvreParams) -> dict:
    return {}


def _crash_2008(year: int, base: ManoeuvreParams) -> dict:
    # GFC-style drawdown in year 3, recovery through year 6
    if year == 3:
        return {"investment_return": -0.38, "growth_rate": -0.38, "dividend_yield": base.dividend_yield * 0.7}
    if year == 4:
        return {"investment_return": -0.05, "growth_rate": -0.05, "dividend_yield": base.dividend_yield * 0.8}
    if year == 5:
        return {"investment_return": 0.15, "growth_rate": 0.15}
    if year == 6:
        return {"investment_return": 0.12, "growth_rate": 0.12}
    return {}


def _rate_shock(year: int, base: ManoeuvreParams) -> dict:
    overrides = {}
    if year >= 2:
        overrides["heloc_rate"] = base.heloc_rate + 0.02
    # Renewal at year 5
    if year >= 5:
        overrides["mortgage_rate"] = base.mortgage_rate + 0.015
    return overrides


def _stagflation(year: int, base: ManoeuvreParams) -> dict:
    if year > 10:
        return {}
    return {
        "investment_return": base.investment_return / 2,
        "growth_rate": base.growth_rate / 2,
        "heloc_rate": base.heloc_rate + 0.015,
        "mortgage_rate": base.mortgage_rate + 0.01,
        "inflation_rate": 0.04,
    }


def _lost_decade(year: int, base: ManoeuvreParams) -> dict:
    if year > 10:
        return {}
    return {"investment_return": 0.02, "growth_rate": 0.02, "dividend_yield": 0.01}


SCENARIOS = {
    s.id: s
    for s in (
        Scenario("base", "Base case", "No shocks, inputs used as-is", _no_overrides),
        Scenario("crash-2008", "2008 crash", "-38% crash in year 3, four-year recovery", _crash_2008),
        Scenario("rate-shock", "Rate shock", "HELOC +2% from year 2, mortgage +1.5% at renewal (year 5)", _rate_shock),
        Scenario("stagflation", "Stagflation", "Returns halved and rates up 1-1.5% for 10 years", _stagflation),
        Scenario("lost-decade", "Lost decade", "2% returns for years 1-10, then normal", _lost_decade),
    )
}


def get_scenario(scenario_id: str) -> Scenario:
    try:
        return SCENARIOS[scenario_id]
    except KeyError:
        valid = ", ".join(SCENARIOS)
        raise KeyError(f"unknown scenario {scenario_id!r} (choose from: {valid})") from None


def run_scenario(params: ManoeuvreParams, scenario_id: str, years: int = DEFAULT_YEARS) -> Ledger:
    """Simulate ``params`` under one named scenario."""
    return simulate(params, years, overrides=get_scenario(scenario_id).year_overrides)
