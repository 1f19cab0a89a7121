"""Payroll input files.

A payroll input file (YAML or JSON) describes one company run:

    payment_types:
      - {id: basic, name: Basic Pay, kind: gross, order: 1}
      - {id: housing, name: Housing Allowance, kind: net, order: 3}
    staff:
      - staff_member_id: S001
        amounts:
          - {payment_type_id: basic, amount: 300000}
        deductions:
          - {id: loan-1, original_amount: 100000, monthly_deduction: 20000, deducted_so_far: 0}
    tax_settings: {...}     # optional, overrides profile.yaml
    tax_exemptions: {...}   # optional, overrides profile.yaml

Staff entries are kept raw so one malformed record can be reported by the
payroll run without rejecting the whole file.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .schemas import PaymentTypeDefinition, TaxExemptions, TaxSettings


class InputFileError(Exception):
    """Raised when an input file is missing or unreadable."""
    pass


@dataclass
class PayrollFile:
    """Parsed payroll input file."""
    path: Path
    payment_types: List[PaymentTypeDefinition]
    staff: List[Dict[str, Any]]
    tax_settings: Optional[TaxSettings] = None
    tax_exemptions: Optional[TaxExemptions] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def read_structured_file(path: Path) -> Any:
    """Read a YAML or JSON file by extension (.json is JSON, anything else YAML)."""
    path = Path(path)
    if not path.exists():
        raise InputFileError(f"File not found: {path}")

    try:
        with open(path, "r") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InputFileError(f"Cannot parse {path}: {e}")


def write_structured_file(path: Path, data: Any) -> Path:
    """Write a YAML or JSON file by extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        if path.suffix.lower() == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    return path


def load_payroll_file(path: Path) -> PayrollFile:
    """Load a payroll input file.

    Raises:
        InputFileError: If the file is missing, unparseable or not a mapping
        pydantic.ValidationError: If payment types or tax sections are malformed
    """
    path = Path(path)
    data = read_structured_file(path)

    if not isinstance(data, dict):
        raise InputFileError(f"{path}: expected a mapping at top level, got {type(data).__name__}")

    staff = data.get("staff") or []
    if not isinstance(staff, list):
        raise InputFileError(f"{path}: 'staff' must be a list")

    payment_types = [PaymentTypeDefinition.model_validate(p) for p in data.get("payment_types") or []]

    tax_settings = None
    if data.get("tax_settings") is not None:
        tax_settings = TaxSettings.model_validate(data["tax_settings"])

    tax_exemptions = None
    if data.get("tax_exemptions") is not None:
        tax_exemptions = TaxExemptions.model_validate(data["tax_exemptions"])

    known = {"payment_types", "staff", "tax_settings", "tax_exemptions"}
    return PayrollFile(
        path=path,
        payment_types=payment_types,
        staff=staff,
        tax_settings=tax_settings,
        tax_exemptions=tax_exemptions,
        extra={k: v for k, v in data.items() if k not in known},
    )


def load_tax_settings_file(path: Path) -> TaxSettings:
    """Load tax settings from a file.

    The file may hold the settings mapping itself or any document with a
    top-level tax_settings key (a profile or a payroll input file).

    Raises:
        InputFileError: If the file is missing or unreadable
        pydantic.ValidationError: If the settings are malformed
    """
    data = read_structured_file(path)
    if not isinstance(data, dict):
        raise InputFileError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    if "tax_settings" in data:
        data = data["tax_settings"]
    return TaxSettings.model_validate(data)
