"""Payroll Calc MCP Server - FastMCP implementation for payroll tools."""

import logging
from decimal import Decimal
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from payrollcalc.sdk import (
    PayrollCalculationInput,
    PaymentTypeDefinition,
    StaffPayrollRecord,
    TaxSettings,
    calculate_paye,
    calculate_paye_legacy,
    calculate_payroll,
    load_payment_types,
    load_tax_exemptions,
    load_tax_settings,
    solve_gross_increment,
)
from payrollcalc.sdk.money import to_money, to_number

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("payroll-calc")


def _plain(value: Any) -> Any:
    """Replace Decimals with numbers throughout a dumped model."""
    if isinstance(value, Decimal):
        return to_number(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _tax_settings(data: Optional[dict]) -> TaxSettings:
    if data is not None:
        return TaxSettings.model_validate(data)
    return load_tax_settings()


# --- Tools ---

@mcp.tool(name="calculate_payroll")
async def calculate_payroll_tool(
    staff_record: dict = Field(description=(
        "Staff record: {staff_member_id, amounts: [{payment_type_id, amount}], "
        "deductions: [{id, original_amount, monthly_deduction, deducted_so_far}]}"
    )),
    payment_types: Optional[list[dict]] = Field(default=None, description=(
        "Payment types [{id, name, kind: gross|net, order}]. Defaults to the profile's payment types."
    )),
    tax_settings: Optional[dict] = Field(default=None, description=(
        "Tax settings (rates in percent, paye_bands). Defaults to the profile's tax_settings."
    )),
) -> dict[str, Any]:
    """Calculate one staff member's payslip: gross, statutory deductions, company deductions and net pay."""
    try:
        settings = _tax_settings(tax_settings)
        if payment_types is None:
            types = load_payment_types()
        else:
            types = [PaymentTypeDefinition.model_validate(p) for p in payment_types]

        # Extra columns on the record are ignored, as in a payroll run
        record = StaffPayrollRecord.model_validate(staff_record)
        calc_input = PayrollCalculationInput(
            staff_member_id=record.staff_member_id,
            payment_types=types,
            amounts=record.amounts,
            deductions=record.deductions,
            tax_settings=settings,
            tax_exemptions=load_tax_exemptions(),
        )
        result = calculate_payroll(calc_input)
        return _plain(result.model_dump())
    except Exception as e:
        logger.error(f"calculate_payroll failed: {e}")
        return {"error": str(e)}


@mcp.tool(name="calculate_paye")
async def calculate_paye_tool(
    income: float = Field(description="Taxable monthly income"),
    variant: str = Field(default="canonical", description="'canonical' (default) or 'legacy' band arithmetic"),
    tax_settings: Optional[dict] = Field(default=None, description="Tax settings; defaults to the profile"),
) -> dict[str, Any]:
    """Calculate PAYE for a taxable income using the progressive bands."""
    try:
        settings = _tax_settings(tax_settings)
        amount = to_money(income)
        if variant == "legacy":
            paye = calculate_paye_legacy(amount, settings.paye_bands)
        elif variant == "canonical":
            paye = calculate_paye(amount, settings.paye_bands)
        else:
            return {"error": f"Unknown variant '{variant}'. Use 'canonical' or 'legacy'."}
        return {"income": to_number(amount), "variant": variant, "paye": to_number(paye)}
    except Exception as e:
        logger.error(f"calculate_paye failed: {e}")
        return {"error": str(e)}


@mcp.tool()
async def solve_gross_up(
    base_gross: float = Field(description="Gross already accumulated"),
    net_increment: float = Field(description="Extra take-home pay wanted"),
    basic_pay: float = Field(default=0, description="Basic Pay within base_gross"),
    transport_allowance: float = Field(default=0, description="Transport Allowance within base_gross"),
    component: Optional[str] = Field(default=None, description="'basic' or 'transport' if the increment is that component"),
    tax_settings: Optional[dict] = Field(default=None, description="Tax settings; defaults to the profile"),
) -> dict[str, Any]:
    """Find the gross increment that adds a given amount to net pay after all statutory deductions."""
    try:
        if component not in (None, "basic", "transport"):
            return {"error": f"Unknown component '{component}'. Use 'basic' or 'transport'."}
        settings = _tax_settings(tax_settings)
        base = to_money(base_gross)
        increment = solve_gross_increment(
            base, net_increment, settings,
            basic_pay=basic_pay,
            transport_allowance=transport_allowance,
            component=component,
            exemptions=load_tax_exemptions(),
        )
        return {
            "base_gross": to_number(base),
            "net_increment": to_number(to_money(net_increment)),
            "gross_increment": to_number(increment),
            "new_gross": to_number(base + increment),
        }
    except Exception as e:
        logger.error(f"solve_gross_up failed: {e}")
        return {"error": str(e)}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
