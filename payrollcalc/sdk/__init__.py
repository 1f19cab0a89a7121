"""Payroll Calc SDK - Core functionality for monthly payroll calculation."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_output_format,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    init_profile,
    ProfileNotFoundError,
    TaxSettingsNotFoundError,
    # Typed profile sections
    load_tax_settings,
    load_tax_exemptions,
    load_payment_types,
    # Profile validation
    validate_profile,
    ProfileValidationResult,
)

from .inputs import (
    InputFileError,
    PayrollFile,
    load_payroll_file,
    load_tax_settings_file,
    read_structured_file,
    write_structured_file,
)

from .schemas import (
    PayeBand,
    TaxSettings,
    TaxExemptions,
    PaymentTypeDefinition,
    StaffPaymentAmount,
    DeductionBalance,
    StaffPayrollRecord,
    PayrollCalculationInput,
    PayrollCalculationResult,
    PayrollRunResult,
)

from .taxes import (
    calculate_paye,
    calculate_paye_legacy,
    check_paye_bands,
    compute_statutory,
    default_tax_settings,
    default_payment_types,
)

from .payroll import (
    calculate_payroll,
    compute_gross,
    solve_gross_increment,
    allocate_deductions,
    settle_deductions,
    run_payroll,
    summarize_results,
    PayrollCalculationError,
    TaxSettingsMissingError,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_output_format",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "init_profile",
    "ProfileNotFoundError",
    "TaxSettingsNotFoundError",
    "load_tax_settings",
    "load_tax_exemptions",
    "load_payment_types",
    "validate_profile",
    "ProfileValidationResult",
    # Input files
    "InputFileError",
    "PayrollFile",
    "load_payroll_file",
    "load_tax_settings_file",
    "read_structured_file",
    "write_structured_file",
    # Schemas
    "PayeBand",
    "TaxSettings",
    "TaxExemptions",
    "PaymentTypeDefinition",
    "StaffPaymentAmount",
    "DeductionBalance",
    "StaffPayrollRecord",
    "PayrollCalculationInput",
    "PayrollCalculationResult",
    "PayrollRunResult",
    # Taxes
    "calculate_paye",
    "calculate_paye_legacy",
    "check_paye_bands",
    "compute_statutory",
    "default_tax_settings",
    "default_payment_types",
    # Payroll engine
    "calculate_payroll",
    "compute_gross",
    "solve_gross_increment",
    "allocate_deductions",
    "settle_deductions",
    "run_payroll",
    "summarize_results",
    "PayrollCalculationError",
    "TaxSettingsMissingError",
]
