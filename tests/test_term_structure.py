"""Tests for the market term structure."""

import math

import pytest

from shortrate.core.errors import InvalidParameterError, NotFoundError
from shortrate.rates.term_structure import TermStructure

YIELDS = {0.25: 0.010, 0.5: 0.012, 1.0: 0.015, 2.0: 0.020, 5.0: 0.025, 10.0: 0.030}


class TestSetLookup:
    def test_lookup_exact(self):
        ts = TermStructure({1.0: 0.98, 2.0: 0.95})
        assert ts.lookup(1.0) == 0.98
        assert ts.lookup(2.0) == 0.95

    def test_overwrite(self):
        ts = TermStructure({1.0: 0.98})
        ts.set(1.0, 0.97)
        assert ts.lookup(1.0) == 0.97
        assert len(ts) == 1

    def test_missing_maturity_raises(self):
        ts = TermStructure({1.0: 0.98})
        with pytest.raises(NotFoundError):
            ts.lookup(1.5)

    def test_not_found_is_lookup_error(self):
        ts = TermStructure()
        with pytest.raises(LookupError):
            ts.lookup(1.0)

    def test_no_interpolation(self):
        ts = TermStructure({1.0: 0.98, 2.0: 0.95})
        assert 1.5 not in ts
        with pytest.raises(NotFoundError):
            ts.lookup(1.5)

    def test_float_arithmetic_hits_literal_key(self):
        ts = TermStructure()
        ts.set(0.1 + 0.2, 0.99)
        assert ts.lookup(0.3) == 0.99
        assert 0.3 in ts

    def test_maturities_sorted(self):
        ts = TermStructure({5.0: 0.9, 0.5: 0.99, 2.0: 0.95})
        assert ts.maturities() == [0.5, 2.0, 5.0]
        assert list(ts) == [0.5, 2.0, 5.0]
        assert [p for _, p in ts.items()] == [0.99, 0.95, 0.9]

    def test_last_entry(self):
        ts = TermStructure({5.0: 0.9, 0.5: 0.99, 2.0: 0.95})
        assert ts.last_entry() == (5.0, 0.9)

    def test_last_entry_empty(self):
        with pytest.raises(NotFoundError):
            TermStructure().last_entry()

    @pytest.mark.parametrize("maturity, price", [(-1.0, 0.9), (1.0, 0.0), (1.0, -0.5), (float("nan"), 0.9)])
    def test_invalid_points_rejected(self, maturity, price):
        with pytest.raises(InvalidParameterError):
            TermStructure().set(maturity, price)

    def test_zero_maturity_allowed(self):
        ts = TermStructure({0.0: 1.0})
        assert ts.lookup(0.0) == 1.0


class TestFromYields:
    def test_prices_from_yields(self):
        ts = TermStructure.from_yields(YIELDS)
        assert ts.lookup(1.0) == pytest.approx(math.exp(-0.015))
        assert ts.lookup(1.0) == pytest.approx(0.98511194, abs=1e-8)
        assert ts.lookup(10.0) == pytest.approx(math.exp(-0.3))

    def test_anchor_and_helper_points(self):
        ts = TermStructure.from_yields(YIELDS)
        assert ts.lookup(0.0) == 1.0
        assert ts.lookup(0.001) == pytest.approx(math.exp(-0.010 * 0.001))
        assert len(ts) == len(YIELDS) + 2

    def test_without_anchor(self):
        ts = TermStructure.from_yields(YIELDS, helper_points=(), anchor=False)
        assert ts.maturities() == sorted(YIELDS)

    def test_arbitrage_free_curve(self):
        assert TermStructure.from_yields(YIELDS).is_arbitrage_free()

    def test_increasing_prices_reported(self):
        ts = TermStructure({1.0: 0.95, 2.0: 0.97})
        assert not ts.is_arbitrage_free()

    def test_empty_yields_rejected(self):
        with pytest.raises(InvalidParameterError):
            TermStructure.from_yields({})

    def test_zero_rate_round_trip(self):
        ts = TermStructure.from_yields(YIELDS)
        assert ts.zero_rate(5.0) == pytest.approx(0.025)
        assert ts.zero_rate(0.0) == 0.0


class TestForward:
    def test_forward_difference_flat_curve(self):
        y = 0.02
        ts = TermStructure({1.0: math.exp(-y), 1.001: math.exp(-y * 1.001), 3.0: math.exp(-3 * y)})
        assert ts.instantaneous_forward(1.0) == pytest.approx(y, rel=1e-9)

    def test_forward_at_zero_uses_helper(self):
        ts = TermStructure.from_yields(YIELDS)
        assert ts.instantaneous_forward(0.0) == pytest.approx(0.010, rel=1e-9)

    def test_fallback_to_last_entry(self):
        ts = TermStructure.from_yields(YIELDS)
        # no point at 2.001
        assert ts.instantaneous_forward(2.0) == pytest.approx(0.030, rel=1e-12)

    def test_fallback_without_anchor_at_zero(self):
        ts = TermStructure.from_yields(YIELDS, anchor=False)
        assert ts.instantaneous_forward(0.0) == pytest.approx(-math.log(math.exp(-0.3)) / 10.0)

    def test_fallback_on_empty_structure(self):
        with pytest.raises(NotFoundError):
            TermStructure().instantaneous_forward(1.0)

    def test_custom_forward_dt(self):
        ts = TermStructure.from_yields({1.0: 0.02}, forward_dt=0.01)
        assert 0.01 in ts
        assert ts.helper_points == frozenset({0.01})
        assert ts.is_helper(0.01)
        assert not ts.is_helper(1.0)
        assert ts.instantaneous_forward(0.0) == pytest.approx(0.02, rel=1e-9)

    def test_invalid_forward_dt(self):
        with pytest.raises(InvalidParameterError):
            TermStructure(forward_dt=0.0)
