"""Tests for ManoeuvreParams construction, overrides and validation."""

import dataclasses

import pytest
from manoeuvre_sim import InvalidParameterError, ManoeuvreParams, ensure_valid, validate_params


class TestFromPercentages:

    def test_rates_divided_by_100(self):
        p = ManoeuvreParams.from_percentages(mortgage_rate=3.65, heloc_rate=4.7, tax_rate=53.5)
        assert p.mortgage_rate == pytest.approx(0.0365)
        assert p.heloc_rate == pytest.approx(0.047)
        assert p.tax_rate == pytest.approx(0.535)

    def test_amounts_unchanged(self):
        p = ManoeuvreParams.from_percentages(principal=500_000, tax_deferred_year1=10_000)
        assert p.principal == 500_000
        assert p.tax_deferred_year1 == 10_000

    def test_round_trip_with_as_percentages(self):
        p = ManoeuvreParams()
        again = ManoeuvreParams.from_percentages(**p.as_percentages())
        assert again.dividend_yield == pytest.approx(p.dividend_yield)
        assert again.principal == p.principal


class TestWithOverrides:

    def setup_method(self):
        self.base = ManoeuvreParams()

    def test_partial_override(self):
        p = self.base.with_overrides({"dividend_yield": 0.02})
        assert p.dividend_yield == 0.02
        assert p.heloc_rate == self.base.heloc_rate

    def test_base_not_mutated(self):
        self.base.with_overrides({"heloc_rate": 0.09})
        assert self.base.heloc_rate == 0.047

    def test_empty_override_returns_same(self):
        assert self.base.with_overrides({}) is self.base
        assert self.base.with_overrides(None) is self.base

    def test_unknown_key(self):
        with pytest.raises(InvalidParameterError, match="helocRate"):
            self.base.with_overrides({"helocRate": 0.09})

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            self.base.principal = 1.0

    def test_credit_limit(self):
        assert self.base.credit_limit == 1_391_000


class TestValidateParams:

    def test_defaults_valid(self):
        assert validate_params(ManoeuvreParams()) == []

    def test_zero_mortgage_rate_valid(self):
        assert validate_params(ManoeuvreParams(mortgage_rate=0.0)) == []

    @pytest.mark.parametrize("field,value", [
        ("principal", 0),
        ("principal", -1.0),
        ("principal", float("nan")),
        ("mortgage_rate", -0.01),
        ("heloc_rate", float("inf")),
        ("amortization_years", 0),
        ("amortization_years", 25.5),
        ("tax_rate", 1.0),
        ("tax_rate", -0.1),
        ("dividend_yield", 1.5),
        ("investment_return", -1.0),
        ("initial_heloc_headroom", -5.0),
        ("tax_deferred_ongoing", "25000"),
        ("mortgage_type", "adjustable"),
    ])
    def test_invalid(self, field, value):
        p = dataclasses.replace(ManoeuvreParams(), **{field: value})
        errors = validate_params(p)
        assert len(errors) == 1
        assert field in errors[0]

    def test_ensure_valid_lists_all_errors(self):
        p = ManoeuvreParams(principal=0, heloc_rate=-1)
        with pytest.raises(InvalidParameterError) as exc:
            ensure_valid(p)
        assert "principal" in str(exc.value)
        assert "heloc_rate" in str(exc.value)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            ensure_valid(ManoeuvreParams(amortization_years=-3))
