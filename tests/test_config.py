"""Tests for config loading and CLI > config > default resolution."""

import argparse

import pytest
from manoeuvre_sim.config import DEFAULTS, build_params, create_parser, load_config, resolve


def _args(**kwargs) -> argparse.Namespace:
    ns = argparse.Namespace(**{k: None for k in DEFAULTS})
    for k, v in kwargs.items():
        setattr(ns, k, v)
    return ns


class TestLoadConfig:

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "nope.toml") == {}

    def test_reads_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('principal = 500000\nmortgage_rate = 4.5\nscenario = "rate-shock"\n')
        assert load_config(path) == {"principal": 500000, "mortgage_rate": 4.5, "scenario": "rate-shock"}

    def test_aliases(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("rrsp_year1 = 30000\ntfsa_annual_increase = 6500\n")
        raw = load_config(path)
        assert raw == {"tax_deferred_year1": 30000, "tax_free_annual_increase": 6500}

    def test_unknown_keys_dropped(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text("principal = 500000\nprovince = \"ON\"\n")
        assert load_config(path) == {"principal": 500000}
        assert "province" in capsys.readouterr().err

    def test_malformed_toml_exits(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("principal = = 1\n")
        with pytest.raises(SystemExit):
            load_config(path)


class TestResolve:

    def test_defaults(self):
        r = resolve(_args(), {})
        assert r == DEFAULTS

    def test_config_overrides_default(self):
        r = resolve(_args(), {"heloc_rate": 6.0})
        assert r["heloc_rate"] == 6.0

    def test_cli_overrides_config(self):
        r = resolve(_args(heloc_rate=5.5), {"heloc_rate": 6.0})
        assert r["heloc_rate"] == 5.5

    def test_parser_flags_map_to_keys(self):
        parser = create_parser("test")
        args = parser.parse_args(["--tax-free-room-year1", "10000", "--years", "20", "--mortgage-type", "fixed"])
        r = resolve(args, {})
        assert r["tax_free_room_year1"] == 10000.0
        assert r["years"] == 20
        assert r["mortgage_type"] == "fixed"

    def test_parser_rejects_other_horizons(self):
        parser = create_parser("test")
        with pytest.raises(SystemExit):
            parser.parse_args(["--years", "25"])


class TestBuildParams:

    def test_percentages_converted(self):
        p = build_params(dict(DEFAULTS))
        assert p.mortgage_rate == pytest.approx(0.0365)
        assert p.heloc_rate == pytest.approx(0.047)
        assert p.tax_rate == pytest.approx(0.535)
        assert p.dividend_yield == pytest.approx(0.04)
        assert p.retirement_tax_rate == pytest.approx(0.20)
        assert p.principal == 1_091_000

    def test_run_keys_excluded(self):
        p = build_params(dict(DEFAULTS))
        assert not hasattr(p, "scenario")
        assert not hasattr(p, "years")
