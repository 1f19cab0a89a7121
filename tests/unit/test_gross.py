"""Unit tests for gross salary calculation."""

from decimal import Decimal

import pytest

from payrollcalc.sdk.payroll import compute_gross, sort_payment_types
from payrollcalc.sdk.schemas import (
    PaymentTypeDefinition,
    StaffPaymentAmount,
    TaxSettings,
)
from payrollcalc.sdk.taxes import compute_statutory, default_tax_settings


def ptype(id, name, kind="gross", order=0):
    return PaymentTypeDefinition(id=id, name=name, kind=kind, order=order)


def amount(payment_type_id, value):
    return StaffPaymentAmount(payment_type_id=payment_type_id, amount=value)


@pytest.fixture
def settings():
    return default_tax_settings()


class TestGrossOnly:

    def test_components_are_tagged(self, settings):
        types = [
            ptype("basic", "Basic Pay", order=1),
            ptype("transport", "Transport Allowance", order=2),
            ptype("housing", "Housing", order=3),
        ]
        result = compute_gross(types, [
            amount("basic", 300000),
            amount("transport", 50000),
            amount("housing", 150000),
        ], settings)

        assert result.total_gross == Decimal("500000")
        assert result.basic_pay == Decimal("300000")
        assert result.transport_allowance == Decimal("50000")
        assert result.other_payments == {"Housing": Decimal("150000")}
        assert result.warnings == []

    def test_zero_and_missing_amounts_skipped(self, settings):
        types = [ptype("basic", "Basic Pay"), ptype("bonus", "Bonus"), ptype("meal", "Meal")]
        result = compute_gross(types, [amount("basic", 1000), amount("bonus", 0)], settings)
        assert result.total_gross == Decimal("1000")
        assert result.other_payments == {}

    def test_non_numeric_amount_is_zero(self, settings):
        types = [ptype("basic", "Basic Pay")]
        result = compute_gross(types, [amount("basic", "twelve")], settings)
        assert result.total_gross == 0
        assert result.basic_pay == 0

    def test_amount_for_unknown_type_ignored(self, settings):
        result = compute_gross([ptype("basic", "Basic Pay")], [amount("ghost", 5000)], settings)
        assert result.total_gross == 0

    def test_first_amount_for_type_wins(self, settings):
        types = [ptype("basic", "Basic Pay")]
        result = compute_gross(types, [amount("basic", 1000), amount("basic", 9999)], settings)
        assert result.total_gross == Decimal("1000")

    def test_name_collision_overwrites_breakdown_with_warning(self, settings):
        types = [
            ptype("b1", "Bonus", order=1),
            ptype("b2", "Bonus", order=2),
        ]
        result = compute_gross(types, [amount("b1", 100), amount("b2", 250)], settings)
        assert result.total_gross == Decimal("350")
        assert result.other_payments == {"Bonus": Decimal("250")}
        assert len(result.warnings) == 1
        assert "Bonus" in result.warnings[0]


class TestNetTypes:

    def test_net_type_is_grossed_up(self, settings):
        types = [ptype("bonus", "Bonus", kind="net")]
        result = compute_gross(types, [amount("bonus", 10000)], settings)
        assert result.total_gross > Decimal("10000")
        net = compute_statutory(result.total_gross, 0, 0, settings).net_after_cbhi
        assert abs(net - Decimal("10000")) <= Decimal("0.01")

    def test_net_basic_pay_counts_toward_rama(self):
        settings = TaxSettings(rama_employee_rate=10)
        types = [ptype("basic", "Basic Pay", kind="net")]
        result = compute_gross(types, [amount("basic", 9000)], settings)
        assert abs(result.basic_pay - Decimal("10000")) <= Decimal("0.01")
        assert result.basic_pay == result.total_gross

    def test_negative_net_amount_skipped(self, settings):
        types = [ptype("bonus", "Bonus", kind="net")]
        result = compute_gross(types, [amount("bonus", -500)], settings)
        assert result.total_gross == 0
        assert result.other_payments == {}

    def test_negative_net_basic_pay_keeps_earlier_basic(self, settings):
        types = [
            ptype("b1", "Basic Pay", order=1),
            ptype("b2", "Basic Pay", kind="net", order=2),
            ptype("t1", "Transport Allowance", kind="net", order=3),
        ]
        result = compute_gross(types, [amount("b1", 1000), amount("b2", -500), amount("t1", -20)], settings)
        assert result.total_gross == Decimal("1000")
        assert result.basic_pay == Decimal("1000")
        assert result.transport_allowance == 0
        assert result.other_payments == {}

    def test_order_changes_net_gross_up(self, settings):
        """A net bonus evaluated before basic pay sits in a lower PAYE band."""
        amounts = [amount("basic", 300000), amount("bonus", 50000)]

        bonus_first = compute_gross([
            ptype("basic", "Basic Pay", order=2),
            ptype("bonus", "Bonus", kind="net", order=1),
        ], amounts, settings)
        bonus_last = compute_gross([
            ptype("basic", "Basic Pay", order=1),
            ptype("bonus", "Bonus", kind="net", order=2),
        ], amounts, settings)

        assert bonus_first.other_payments["Bonus"] < bonus_last.other_payments["Bonus"]


class TestSortPaymentTypes:

    def test_sorted_by_order_stable(self):
        types = [ptype("c", "C", order=2), ptype("a", "A", order=1), ptype("b", "B", order=1)]
        assert [p.id for p in sort_payment_types(types)] == ["a", "b", "c"]

    def test_input_not_reordered(self):
        types = [ptype("c", "C", order=2), ptype("a", "A", order=1)]
        sort_payment_types(types)
        assert [p.id for p in types] == ["c", "a"]

    def test_legacy_type_key_accepted(self):
        p = PaymentTypeDefinition.model_validate({"id": 7, "name": "Bonus", "type": "NET", "order": "3"})
        assert p.id == "7"
        assert p.kind == "net"
        assert p.order == 3
