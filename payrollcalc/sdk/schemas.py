"""Pydantic schemas for payroll-calc data validation.

Configuration schemas (tax settings, exemptions) use extra='forbid' so typos
in profile.yaml cause clear errors rather than silent ignoring. Record
schemas (payment types, staff amounts, deduction balances) use
extra='ignore' because the application that stores them keeps extra columns
(descriptions, timestamps, status) the engine does not read.

Monetary fields are coerced leniently: missing or non-numeric amounts
become zero instead of failing validation.
"""

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .money import MAX_EXPONENT, ZERO, to_money


BASIC_PAY = "Basic Pay"
TRANSPORT_ALLOWANCE = "Transport Allowance"

_UNBOUNDED_MARKERS = {"", "inf", "infinity", "none", "null", "unbounded"}


# =============================================================================
# Tax configuration
# =============================================================================


class PayeBand(BaseModel):
    """Single PAYE bracket. Bounds are inclusive; max=None is unbounded."""

    model_config = ConfigDict(extra="forbid")

    min: Decimal = Field(default=ZERO, description="Lower bound (inclusive)")
    max: Optional[Decimal] = Field(default=None, description="Upper bound (inclusive), None if unbounded")
    rate: Decimal = Field(default=ZERO, description="Tax rate as a percentage (10 = 10%)")

    @field_validator("min", "rate", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("max", mode="before")
    @classmethod
    def _coerce_max(cls, v: Any) -> Optional[Decimal]:
        if v is None:
            return None
        if isinstance(v, str) and v.strip().lower() in _UNBOUNDED_MARKERS:
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v >= 10 ** (MAX_EXPONENT + 1):
            return None
        return to_money(v)

    @property
    def width(self) -> Optional[Decimal]:
        """Inclusive band width: [60001, 100000] is 40000 wide."""
        if self.max is None:
            return None
        return self.max - self.min + 1


class TaxSettings(BaseModel):
    """Statutory rates and PAYE brackets for one calculation run.

    All rates are percentages. Missing rates default to zero; a missing
    TaxSettings object as a whole is an error (see engine).
    """

    model_config = ConfigDict(extra="forbid")

    pension_employer_rate: Decimal = Field(default=ZERO)
    pension_employee_rate: Decimal = Field(default=ZERO)
    maternity_employer_rate: Decimal = Field(default=ZERO)
    maternity_employee_rate: Decimal = Field(default=ZERO)
    rama_employer_rate: Decimal = Field(default=ZERO)
    rama_employee_rate: Decimal = Field(default=ZERO)
    cbhi_rate: Decimal = Field(default=ZERO, description="CBHI rate on net before CBHI")
    paye_bands: List[PayeBand] = Field(default_factory=list, description="PAYE brackets, ascending by min")

    @field_validator(
        "pension_employer_rate",
        "pension_employee_rate",
        "maternity_employer_rate",
        "maternity_employee_rate",
        "rama_employer_rate",
        "rama_employee_rate",
        "cbhi_rate",
        mode="before",
    )
    @classmethod
    def _coerce_rate(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("paye_bands", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class TaxExemptions(BaseModel):
    """Company tax exemption flags. An exempt stage outputs zero."""

    model_config = ConfigDict(extra="forbid")

    paye_exempt: bool = False
    pension_exempt: bool = False
    maternity_exempt: bool = False
    rama_exempt: bool = False
    cbhi_exempt: bool = False


# =============================================================================
# Payment and deduction records
# =============================================================================


class PaymentTypeDefinition(BaseModel):
    """A configured payment type (Basic Pay, allowances, bonuses)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Payment type identifier")
    name: str = Field(..., description="Display name; 'Basic Pay' and 'Transport Allowance' are special")
    kind: Literal["gross", "net"] = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="Whether the configured amount is gross or a desired net increment",
    )
    order: int = Field(default=0, description="Evaluation order (ascending)")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("order", mode="before")
    @classmethod
    def _coerce_order(cls, v: Any) -> int:
        try:
            return int(v)
        except (TypeError, ValueError):
            return 0


class StaffPaymentAmount(BaseModel):
    """Configured amount of one payment type for one staff member."""

    model_config = ConfigDict(extra="ignore")

    payment_type_id: str
    amount: Decimal = Field(default=ZERO)

    @field_validator("payment_type_id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> Decimal:
        return to_money(v)


class DeductionBalance(BaseModel):
    """Running ledger of an installment-style deduction (loan, advance)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    original_amount: Decimal = Field(default=ZERO)
    monthly_deduction: Decimal = Field(default=ZERO, description="Ceiling per period")
    deducted_so_far: Decimal = Field(default=ZERO)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("original_amount", "monthly_deduction", "deducted_so_far", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @property
    def remaining_balance(self) -> Decimal:
        return self.original_amount - self.deducted_so_far


class StaffPayrollRecord(BaseModel):
    """Per-staff inputs of a company payroll run."""

    model_config = ConfigDict(extra="ignore")

    staff_member_id: str
    amounts: List[StaffPaymentAmount] = Field(default_factory=list)
    deductions: List[DeductionBalance] = Field(default_factory=list)

    @field_validator("staff_member_id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class PayrollCalculationInput(BaseModel):
    """Everything needed to calculate payroll for one staff member."""

    model_config = ConfigDict(extra="forbid")

    staff_member_id: str = ""
    payment_types: List[PaymentTypeDefinition] = Field(default_factory=list)
    amounts: List[StaffPaymentAmount] = Field(default_factory=list)
    deductions: List[DeductionBalance] = Field(
        default_factory=list, description="Deduction balances in business priority order"
    )
    tax_settings: Optional[TaxSettings] = None
    tax_exemptions: Optional[TaxExemptions] = None


# =============================================================================
# Stage outputs
# =============================================================================


class GrossBreakdown(BaseModel):
    """Output of the gross salary calculator."""

    model_config = ConfigDict(extra="forbid")

    total_gross: Decimal = ZERO
    basic_pay: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    other_payments: Dict[str, Decimal] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)


class StatutoryDeductions(BaseModel):
    """Output of the statutory deduction calculator."""

    model_config = ConfigDict(extra="forbid")

    employer_pension: Decimal = ZERO
    employee_pension: Decimal = ZERO
    employer_maternity: Decimal = ZERO
    employee_maternity: Decimal = ZERO
    employer_rama: Decimal = ZERO
    employee_rama: Decimal = ZERO
    paye: Decimal = ZERO
    cbhi: Decimal = ZERO
    net_before_cbhi: Decimal = ZERO
    net_after_cbhi: Decimal = ZERO

    @property
    def total_employee(self) -> Decimal:
        """Everything withheld from the employee, CBHI included."""
        return (
            self.employee_pension
            + self.employee_maternity
            + self.employee_rama
            + self.paye
            + self.cbhi
        )


class DeductionAllocation(BaseModel):
    """Output of the deduction allocator."""

    model_config = ConfigDict(extra="forbid")

    breakdown: Dict[str, Decimal] = Field(default_factory=dict, description="Deduction id -> amount applied")
    total_applied: Decimal = ZERO
    warnings: List[str] = Field(default_factory=list)


class PayrollCalculationResult(BaseModel):
    """Fully itemized payroll result for one staff member and period."""

    model_config = ConfigDict(extra="forbid")

    staff_member_id: str = ""
    total_gross: Decimal = ZERO
    basic_pay: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    other_payments: Dict[str, Decimal] = Field(default_factory=dict)
    employer_pension: Decimal = ZERO
    employee_pension: Decimal = ZERO
    employer_maternity: Decimal = ZERO
    employee_maternity: Decimal = ZERO
    employer_rama: Decimal = ZERO
    employee_rama: Decimal = ZERO
    paye: Decimal = ZERO
    cbhi: Decimal = ZERO
    net_before_cbhi: Decimal = ZERO
    net_after_cbhi: Decimal = ZERO
    deductions: Dict[str, Decimal] = Field(default_factory=dict, description="Deduction id -> amount applied")
    total_applied_deductions: Decimal = ZERO
    final_net_pay: Decimal = Field(default=ZERO, ge=0)
    warnings: List[str] = Field(default_factory=list, description="Diagnostic warnings (clamping, collisions)")


# =============================================================================
# Company payroll run
# =============================================================================


class StaffError(BaseModel):
    """A staff record that could not be calculated."""

    model_config = ConfigDict(extra="forbid")

    staff_member_id: Optional[str] = None
    index: int = Field(..., description="Position of the record in the run input")
    error: str


class PayrollTotals(BaseModel):
    """Column totals over a payroll run."""

    model_config = ConfigDict(extra="forbid")

    staff_count: int = 0
    total_gross: Decimal = ZERO
    employer_pension: Decimal = ZERO
    employee_pension: Decimal = ZERO
    employer_maternity: Decimal = ZERO
    employee_maternity: Decimal = ZERO
    employer_rama: Decimal = ZERO
    employee_rama: Decimal = ZERO
    paye: Decimal = ZERO
    cbhi: Decimal = ZERO
    total_applied_deductions: Decimal = ZERO
    final_net_pay: Decimal = ZERO

    @classmethod
    def zero(cls) -> "PayrollTotals":
        return cls()


class PayrollRunResult(BaseModel):
    """Output of run_payroll: per-staff results, failures and totals."""

    model_config = ConfigDict(extra="forbid")

    results: List[PayrollCalculationResult] = Field(default_factory=list)
    errors: List[StaffError] = Field(default_factory=list)
    totals: PayrollTotals = Field(default_factory=PayrollTotals)
