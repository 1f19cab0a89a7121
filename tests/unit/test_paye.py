"""Unit tests for progressive PAYE.

Bands used throughout are the stock configuration:
0-60000 @0%, 60001-100000 @10%, 100001-200000 @20%, 200001+ @30%.
"""

from decimal import Decimal

import pytest

from payrollcalc.sdk.schemas import PayeBand
from payrollcalc.sdk.taxes import (
    calculate_paye,
    calculate_paye_legacy,
    check_paye_bands,
    default_tax_settings,
)


@pytest.fixture
def bands():
    return default_tax_settings().paye_bands


class TestCanonicalPaye:
    """calculate_paye: inclusive band widths, rounded to the whole unit."""

    @pytest.mark.parametrize("income,expected", [
        (0, 0),
        (50000, 0),
        (60000, 0),
        (60001, 0),
        (80000, 2000),
        (150000, 14000),
        (500000, 114000),
    ])
    def test_known_values(self, bands, income, expected):
        assert calculate_paye(income, bands) == Decimal(expected)

    def test_rounds_half_up(self, bands):
        """5 units into the 10% band is 0.5, which rounds up to 1."""
        assert calculate_paye(60006, bands) == Decimal("1")
        assert calculate_paye(60005, bands) == Decimal("0")

    def test_negative_income_is_zero(self, bands):
        assert calculate_paye(-1000, bands) == Decimal("0")

    def test_non_numeric_income_is_zero(self, bands):
        assert calculate_paye("not a number", bands) == Decimal("0")

    def test_no_bands_is_zero(self):
        assert calculate_paye(1_000_000, []) == Decimal("0")

    def test_monotonic_in_income(self, bands):
        previous = Decimal("0")
        for income in range(0, 400001, 2500):
            tax = calculate_paye(income, bands)
            assert tax >= previous, f"PAYE dropped at income {income}"
            previous = tax

    def test_unbounded_top_band_taxes_everything_above(self, bands):
        low = calculate_paye(1_000_000, bands)
        high = calculate_paye(1_100_000, bands)
        assert high - low == Decimal("30000")

    def test_band_max_as_string_marker(self):
        band_list = [
            PayeBand(min=0, max=1000, rate=0),
            PayeBand.model_validate({"min": 1001, "max": "inf", "rate": 50}),
        ]
        assert band_list[1].max is None
        # 1001 in band one (width 1001), the other 1000 at 50%
        assert calculate_paye(2001, band_list) == Decimal("500")


class TestLegacyPaye:
    """calculate_paye_legacy: exclusive widths, capped slice, no rounding."""

    def test_known_values(self, bands):
        assert calculate_paye_legacy(80000, bands) == Decimal("1999.9")
        assert calculate_paye_legacy(150000, bands) == Decimal("13999.7")

    def test_within_one_unit_of_canonical(self, bands):
        for income in (65000, 80000, 99999, 150000, 250000, 500000):
            diff = abs(calculate_paye(income, bands) - calculate_paye_legacy(income, bands))
            assert diff <= 1, f"variants differ by {diff} at {income}"

    def test_zero_below_first_taxed_band(self, bands):
        assert calculate_paye_legacy(60000, bands) == Decimal("0")


class TestCheckPayeBands:
    """Band list consistency checks."""

    def test_stock_bands_are_clean(self, bands):
        assert check_paye_bands(bands) == []

    def test_empty(self):
        assert check_paye_bands([]) == ["No PAYE bands configured"]

    def test_gap_reported(self):
        problems = check_paye_bands([
            PayeBand(min=0, max=60000, rate=0),
            PayeBand(min=60010, max=None, rate=10),
        ])
        assert len(problems) == 1
        assert "gap" in problems[0]

    def test_exclusive_style_bounds_reported_as_overlap(self):
        problems = check_paye_bands([
            PayeBand(min=0, max=60000, rate=0),
            PayeBand(min=60000, max=None, rate=10),
        ])
        assert any("overlap" in p for p in problems)

    def test_unsorted_and_bounded_last(self):
        problems = check_paye_bands([
            PayeBand(min=100001, max=200000, rate=20),
            PayeBand(min=0, max=100000, rate=10),
        ])
        assert any("not sorted" in p for p in problems)
        assert any("should be unbounded" in p for p in problems)

    def test_negative_rate_and_inverted_bounds(self):
        problems = check_paye_bands([
            PayeBand(min=500, max=100, rate=-5),
        ])
        assert any("negative rate" in p for p in problems)
        assert any("max is below min" in p for p in problems)

    def test_band_after_unbounded(self):
        problems = check_paye_bands([
            PayeBand(min=0, max=None, rate=0),
            PayeBand(min=100, max=None, rate=10),
        ])
        assert any("follows an unbounded band" in p for p in problems)
