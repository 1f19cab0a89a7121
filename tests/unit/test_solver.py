"""Unit tests for the net-to-gross bisection solver."""

import logging
from decimal import Decimal

import pytest

from payrollcalc.sdk.payroll import solve_gross_increment
from payrollcalc.sdk.schemas import TaxExemptions, TaxSettings
from payrollcalc.sdk.taxes import compute_statutory, default_tax_settings


def net_delta(settings, base, increment, basic=0, transport=0, component=None):
    """Net pay gained by adding `increment` gross on top of `base`."""
    before = compute_statutory(base, basic, transport, settings).net_after_cbhi
    trial_basic = Decimal(basic) + increment if component == "basic" else Decimal(basic)
    trial_transport = Decimal(transport) + increment if component == "transport" else Decimal(transport)
    after = compute_statutory(Decimal(base) + increment, trial_basic, trial_transport, settings).net_after_cbhi
    return after - before


class TestSolverBasics:

    def test_zero_rates_is_identity(self):
        result = solve_gross_increment(0, 1000, TaxSettings())
        assert abs(result - Decimal("1000")) <= Decimal("0.01")

    @pytest.mark.parametrize("target", [0, -500, "", None, "abc"])
    def test_non_positive_or_invalid_target_is_zero(self, target):
        assert solve_gross_increment(100000, target, default_tax_settings()) == Decimal("0")

    def test_deterministic(self):
        settings = default_tax_settings()
        first = solve_gross_increment(300000, 50000, settings, basic_pay=300000)
        second = solve_gross_increment(300000, 50000, settings, basic_pay=300000)
        assert first == second

    def test_gross_exceeds_net_when_taxed(self):
        assert solve_gross_increment(0, 10000, default_tax_settings()) > Decimal("10000")


class TestSolverAccuracy:
    """Where net pay is continuous in gross, the solution hits the target."""

    def test_within_zero_rate_paye_band(self):
        settings = default_tax_settings()
        increment = solve_gross_increment(0, 10000, settings)
        # pension 6%, maternity 0.3%, then CBHI 0.5% of the rest
        assert abs(net_delta(settings, 0, increment) - Decimal("10000")) <= Decimal("0.01")

    def test_with_basic_component_moves_rama_base(self):
        settings = TaxSettings(rama_employee_rate=10)
        plain = solve_gross_increment(0, 9000, settings)
        as_basic = solve_gross_increment(0, 9000, settings, component="basic")
        assert abs(plain - Decimal("9000")) <= Decimal("0.01")
        # 10% RAMA on the increment itself: 9000 / 0.9
        assert abs(as_basic - Decimal("10000")) <= Decimal("0.01")

    def test_transport_component_escapes_maternity(self):
        settings = TaxSettings(maternity_employee_rate=10)
        plain = solve_gross_increment(0, 9000, settings)
        as_transport = solve_gross_increment(0, 9000, settings, component="transport")
        assert abs(plain - Decimal("10000")) <= Decimal("0.01")
        assert abs(as_transport - Decimal("9000")) <= Decimal("0.01")

    def test_exemptions_apply(self):
        settings = TaxSettings(pension_employee_rate=10)
        exempt = TaxExemptions(pension_exempt=True)
        result = solve_gross_increment(0, 5000, settings, exemptions=exempt)
        assert abs(result - Decimal("5000")) <= Decimal("0.01")


class TestSolverLimits:

    def test_iteration_cap_returns_midpoint(self):
        # Two halvings of [0, 3000] leave [750, 1500]
        result = solve_gross_increment(0, 1000, TaxSettings(), max_iterations=2)
        assert result == Decimal("1125")

    def test_non_convergence_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="payrollcalc.sdk.payroll.solver"):
            solve_gross_increment(0, 1000, TaxSettings(), max_iterations=3)
        assert any("did not converge" in r.getMessage() for r in caplog.records)

    def test_out_of_range_when_deductions_exceed_two_thirds(self):
        """Bracket [0, 3 * target] is too small; the result saturates at its top."""
        settings = TaxSettings(pension_employee_rate=80)
        result = solve_gross_increment(0, 1000, settings)
        assert Decimal("2999.9") <= result <= Decimal("3000")
