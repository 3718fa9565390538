"""TOML config loader with CLI > config > default resolution.

Rates are whole-number percentages in both the config file and on the
command line (``mortgage_rate = 3.65``).
"""

import argparse
import sys
import tomllib
from pathlib import Path

from manoeuvre_sim.params import ManoeuvreParams, MORTGAGE_TYPES
from manoeuvre_sim.scenarios import SCENARIOS
from manoeuvre_sim.simulation import DEFAULT_YEARS, HORIZON_CHOICES

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULTS = {
    "principal": 1_091_000.0,
    "mortgage_rate": 3.65,
    "amortization_years": 30,
    "mortgage_type": "variable",
    "heloc_rate": 4.70,
    "initial_heloc_headroom": 300_000.0,
    "tax_rate": 53.5,
    "retirement_tax_rate": 20.0,
    "investment_return": 7.0,
    "growth_rate": 7.0,
    "dividend_yield": 4.0,
    "inflation_rate": 0.0,
    "initial_tax_free": 38_015.45,
    "tax_free_room_year1": 42_000.0,
    "tax_free_annual_increase": 7_000.0,
    "tax_deferred_year1": 50_000.0,
    "tax_deferred_ongoing": 25_000.0,
    "years": DEFAULT_YEARS,
    "scenario": "base",
}

# Keys that are run settings rather than ManoeuvreParams fields
_RUN_KEYS = ("years", "scenario")

# Friendlier aliases accepted in config files
_ALIASES = {
    "tfsa_room_year1": "tax_free_room_year1",
    "tfsa_annual_increase": "tax_free_annual_increase",
    "initial_tfsa": "initial_tax_free",
    "rrsp_year1": "tax_deferred_year1",
    "rrsp_ongoing": "tax_deferred_ongoing",
    "annual_return": "investment_return",
    "heloc_headroom": "initial_heloc_headroom",
}


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"failed to read config file: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    for alias, key in _ALIASES.items():
        if alias in raw:
            value = raw.pop(alias)
            raw.setdefault(key, value)
    unknown = sorted(set(raw) - set(DEFAULTS))
    if unknown:
        print(f"warning: ignoring unknown config keys in {path}: {', '.join(unknown)}", file=sys.stderr)
        for key in unknown:
            raw.pop(key)
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared simulation flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="config file path (default: config.toml)")
    parser.add_argument("--principal", type=float, default=None, help=f"mortgage principal (default: {d['principal']:,.0f})")
    parser.add_argument("--mortgage-rate", type=float, default=None, help=f"mortgage rate %% (default: {d['mortgage_rate']})")
    parser.add_argument("--amortization-years", type=int, default=None, help=f"amortization term in years (default: {d['amortization_years']})")
    parser.add_argument("--mortgage-type", choices=MORTGAGE_TYPES, default=None, help="variable: monthly compounding, fixed: semi-annual (default: variable)")
    parser.add_argument("--heloc-rate", type=float, default=None, help=f"HELOC rate %% (default: {d['heloc_rate']})")
    parser.add_argument("--initial-heloc-headroom", type=float, default=None, help=f"HELOC room drawn in year 1 (default: {d['initial_heloc_headroom']:,.0f})")
    parser.add_argument("--tax-rate", type=float, default=None, help=f"marginal tax rate %% (default: {d['tax_rate']})")
    parser.add_argument("--retirement-tax-rate", type=float, default=None, help=f"tax rate on RRSP withdrawals %% (default: {d['retirement_tax_rate']})")
    parser.add_argument("--investment-return", type=float, default=None, help=f"TFSA/RRSP return %% (default: {d['investment_return']})")
    parser.add_argument("--growth-rate", type=float, default=None, help=f"non-registered growth %% (default: {d['growth_rate']})")
    parser.add_argument("--dividend-yield", type=float, default=None, help=f"non-registered dividend yield %% (default: {d['dividend_yield']})")
    parser.add_argument("--inflation-rate", type=float, default=None, help=f"inflation %% for real values (default: {d['inflation_rate']})")
    parser.add_argument("--initial-tax-free", type=float, default=None, help=f"initial TFSA value (default: {d['initial_tax_free']:,.2f})")
    parser.add_argument("--tax-free-room-year1", type=float, default=None, help=f"TFSA room funded in year 1 (default: {d['tax_free_room_year1']:,.0f})")
    parser.add_argument("--tax-free-annual-increase", type=float, default=None, help=f"TFSA room added each later year (default: {d['tax_free_annual_increase']:,.0f})")
    parser.add_argument("--tax-deferred-year1", type=float, default=None, help=f"RRSP contribution in year 1 (default: {d['tax_deferred_year1']:,.0f})")
    parser.add_argument("--tax-deferred-ongoing", type=float, default=None, help=f"RRSP contribution in later years (default: {d['tax_deferred_ongoing']:,.0f})")
    parser.add_argument("--years", type=int, choices=HORIZON_CHOICES, default=None, help=f"simulation horizon (default: {d['years']})")
    parser.add_argument("--scenario", choices=list(SCENARIOS), default=None, help="stress scenario (default: base)")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def build_params(r: dict) -> ManoeuvreParams:
    """Build ManoeuvreParams from resolved config dict (percentages → decimals)."""
    fields = {k: v for k, v in r.items() if k not in _RUN_KEYS}
    return ManoeuvreParams.from_percentages(**fields)


def parse_args(
    description: str,
    add_args_fn=None,
) -> tuple[dict, ManoeuvreParams, argparse.Namespace]:
    """Parse CLI args, load config, resolve values.

    Returns (resolved_dict, params, namespace). The namespace carries any
    extra flags added via ``add_args_fn``.
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args()
    config = load_config(args.config)
    r = resolve(args, config)
    return r, build_params(r), args
