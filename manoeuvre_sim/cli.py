"""CLI entry point: year-by-year table and payoff comparison."""

import argparse
import sys

from manoeuvre_sim.comparison import ComparisonSummary, compare
from manoeuvre_sim.config import parse_args
from manoeuvre_sim.params import ManoeuvreParams
from manoeuvre_sim.scenarios import get_scenario
from manoeuvre_sim.simulation import Ledger, YearState, simulate

TABLE_COLUMNS = [
    ("Year", "year", "{:>4}"),
    ("Mortgage", "mortgage", "{:>13,}"),
    ("HELOC", "line_of_credit", "{:>13,}"),
    ("P", "accelerated_principal", "{:>11,}"),
    ("Refund", "tax_refund", "{:>9,}"),
    ("TFSA", "tax_free", "{:>12,}"),
    ("RRSP", "tax_deferred", "{:>12,}"),
    ("Non-reg", "taxable", "{:>13,}"),
    ("Portfolio", "portfolio", "{:>13,}"),
    ("Net wealth", "net_wealth", "{:>13,}"),
]
TABLE_WIDTH = 130


def _print_header(r: dict, params: ManoeuvreParams, scenario_name: str):
    print("=" * 80)
    print(f"Smith Manoeuvre simulation ({r['years']} years, scenario: {scenario_name})")
    print(f"  Mortgage: ${params.principal:,.0f} at {params.mortgage_rate * 100:.2f}% "
          f"({params.mortgage_type}), {params.amortization_years}-year amortization")
    print(f"  HELOC: {params.heloc_rate * 100:.2f}%, year-1 draw ${params.initial_heloc_headroom:,.0f}, "
          f"limit ${params.credit_limit:,.0f}")
    print(f"  Marginal tax: {params.tax_rate * 100:.1f}% / retirement tax: {params.retirement_tax_rate * 100:.1f}%")
    print(f"  Returns: registered {params.investment_return * 100:.1f}%, non-registered growth "
          f"{params.growth_rate * 100:.1f}% + dividends {params.dividend_yield * 100:.1f}%")
    print(f"  TFSA: ${params.initial_tax_free:,.0f} initial, ${params.tax_free_room_year1:,.0f} year 1, "
          f"${params.tax_free_annual_increase:,.0f}/year after")
    print(f"  RRSP: ${params.tax_deferred_year1:,.0f} year 1, ${params.tax_deferred_ongoing:,.0f}/year after")
    print("=" * 80)
    print()


def _print_year_table(ledger: Ledger):
    print("[Year-by-year]")
    print("-" * TABLE_WIDTH)
    header = " ".join(f"{label:>{len(fmt.format(0))}}" for label, _, fmt in TABLE_COLUMNS)
    print(header)
    print("-" * TABLE_WIDTH)
    for state in ledger:
        row = state.to_row()
        line = " ".join(fmt.format(row[key]) for _, key, fmt in TABLE_COLUMNS)
        flags = []
        if state.principal_clamped:
            flags.append("P clamped")
        if state.heloc_capped:
            flags.append("HELOC capped")
        if flags:
            line += "  (" + ", ".join(flags) + ")"
        print(line)
    print("-" * TABLE_WIDTH)


def _print_summary(summary: ComparisonSummary):
    t = summary.traditional
    m = summary.manoeuvre
    i = summary.interest
    print("\n" + "=" * 80)
    print("[Comparison]")
    print("=" * 80)
    print(f"  Traditional payoff: {t.years:.1f} years ({t.months} months), "
          f"payment ${t.monthly_payment:,.2f}/month, total interest ${t.total_interest:,.0f}")
    if m.paid_off:
        print(f"  Manoeuvre payoff:   year {m.year} ({summary.years_saved:.1f} years sooner)")
    else:
        print(f"  Manoeuvre payoff:   not reached; ${m.remaining_mortgage:,.0f} left after year {m.year}")
    print(f"  At year {m.year}: portfolio ${m.portfolio_value:,.0f}, HELOC ${m.line_of_credit:,.0f}, "
          f"net wealth ${m.net_wealth:,.0f}")
    base = summary.baseline_at_payoff
    print(f"  Without the manoeuvre at year {base.year}: mortgage ${base.mortgage:,.0f}, "
          f"portfolio ${base.portfolio:,.0f} (advantage ${summary.wealth_advantage:,.0f})")
    print(f"\n  Interest through year {i.years}:")
    print(f"    Mortgage interest           ${i.mortgage_interest:>14,.0f}")
    print(f"    HELOC interest (deductible) ${i.deductible_interest:>14,.0f}")
    print(f"    HELOC interest (personal)   ${i.non_deductible_interest:>14,.0f}")
    print(f"    Tax savings                 ${i.tax_savings:>14,.0f}")
    print(f"    Net mortgage interest       ${i.net_interest_cost:>14,.0f}")
    print(f"    Plus personal HELOC         ${i.personal_interest_cost:>14,.0f}")
    print(f"    After-tax interest, all-in  ${i.after_tax_interest_cost:>14,.0f}")
    print(f"    Saved vs traditional        ${summary.interest_saved:>14,.0f}")


def _print_year_detail(state: YearState):
    c = state.contributions
    b = state.beginning
    e = state.ending
    print(f"\n[Year {state.year} detail]")
    print(f"  Beginning: mortgage ${b.mortgage:,.0f}, HELOC ${b.line_of_credit:,.0f}, "
          f"deductible debt ${b.deductible_debt:,.0f}, portfolio ${b.portfolio:,.0f}")
    print(f"  Contributions: TFSA ${c.tax_free:,.0f}, RRSP ${c.tax_deferred:,.0f}, "
          f"initial non-reg ${c.initial_taxable:,.0f}, non-deductible ${c.non_deductible_consumption:,.0f}")
    print(f"  Solve: standard principal ${state.standard_principal:,.2f}, a={state.a:.6f}, b={state.b:.6f}, "
          f"left={state.left:.6f}, constant ${state.constant:,.2f}")
    print(f"  P = ${state.accelerated_principal:,.2f}" + (" (clamped)" if state.principal_clamped else ""))
    print(f"  Deductible interest ${state.deductible_interest:,.2f} on average debt ${state.average_deductible_debt:,.0f}")
    print(f"  Refund ${state.tax_refund:,.2f}, dividends ${state.dividends:,.2f}")
    print(f"  Ending: mortgage ${e.mortgage:,.0f}, HELOC ${e.line_of_credit:,.0f}, portfolio ${e.portfolio:,.0f}")
    print(f"  Non-reg book value ${e.adjusted_cost_base:,.0f}, unrealized gain ${state.unrealized_gain:,.0f}, "
          f"tax if sold ${state.potential_capital_gains_tax:,.0f}")
    print(f"  RRSP after retirement tax ${state.tax_deferred_after_tax:,.0f}")
    if state.params.inflation_rate > 0:
        print(f"  Portfolio in today's dollars ${state.inflation_adjusted_portfolio:,.0f}")
    pc = state.percent_changes
    print(f"  Changes: TFSA {pc.tax_free:+.2f}%, RRSP {pc.tax_deferred:+.2f}%, non-reg {pc.taxable:+.2f}%, "
          f"portfolio {pc.portfolio:+.2f}%, mortgage -{pc.mortgage_decrease:.2f}%, HELOC +{pc.heloc_increase:.2f}%")


def _add_cli_args(parser: argparse.ArgumentParser):
    parser.add_argument("--detail", type=int, default=None, metavar="YEAR", help="print the full breakdown for one year")


def main():
    """Run one simulation and print the ledger and comparison."""
    r, params, args = parse_args("Smith Manoeuvre debt-recycling simulation", _add_cli_args)
    print(f"simulating {r['years']} years ({r['scenario']})...", file=sys.stderr)
    try:
        scenario = get_scenario(r["scenario"])
        ledger = simulate(params, r["years"], overrides=scenario.year_overrides)
        summary = compare(params, ledger)
    except (KeyError, ValueError) as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        raise SystemExit(1)

    _print_header(r, params, scenario.name)
    _print_year_table(ledger)
    _print_summary(summary)
    if args.detail is not None:
        if not 1 <= args.detail <= len(ledger):
            print(f"error: --detail must be between 1 and {len(ledger)}", file=sys.stderr)
            raise SystemExit(1)
        _print_year_detail(ledger[args.detail - 1])


if __name__ == "__main__":
    main()
