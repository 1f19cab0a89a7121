"""Payroll Calc CLI - Command-line interface for monthly payroll runs."""

import json
import logging
from decimal import Decimal
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console

from payrollcalc import __version__
from payrollcalc.sdk import (
    InputFileError,
    PayrollCalculationError,
    ProfileNotFoundError,
    TaxSettingsNotFoundError,
    DeductionBalance,
    calculate_paye,
    calculate_paye_legacy,
    compute_statutory,
    get_output_format,
    load_payment_types,
    load_payroll_file,
    load_tax_exemptions,
    load_tax_settings,
    read_structured_file,
    run_payroll,
    settle_deductions,
    solve_gross_increment,
    write_structured_file,
)
from payrollcalc.sdk.money import to_money, to_number

from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group
from .renderers.payroll_renderer import render_payroll_run

# Library errors that mean "fix your input or configuration", shown without traceback
USER_ERRORS = (
    InputFileError,
    PayrollCalculationError,
    ProfileNotFoundError,
    TaxSettingsNotFoundError,
    ValidationError,
)


def _json_default(value):
    if isinstance(value, Decimal):
        return to_number(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dump_json(data) -> str:
    return json.dumps(data, indent=2, default=_json_default)


def _resolve_format(output_format):
    return output_format or get_output_format()


def _resolve_tax_settings(tax_settings_path):
    try:
        return load_tax_settings(tax_settings_path)
    except USER_ERRORS as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="payroll-calc")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """Payroll Calc - Monthly payroll with statutory deductions.

    Computes gross pay, pension, maternity, RAMA, PAYE and CBHI for each
    staff member, then applies company deductions against outstanding
    balances.

    Tax settings are loaded from (in order):

    \b
    1. --tax-settings FILE option
    2. tax_settings section of the payroll input file (run only)
    3. profile.yaml in PAYROLL_CALC_CONFIG_PATH or ~/.config/payroll-calc/

    Run 'payroll-calc profile init' to create a profile with stock rates.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Add subcommand groups
cli.add_command(profile_group)
cli.add_command(settings_group)


@cli.command("run")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--staff", "staff_id", help="Only calculate this staff member.")
@click.option("--tax-settings", "tax_settings_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Tax settings file (overrides the input file and profile).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help="Output format (default: settings.json default_output_format, else text)")
@click.option("--write-balances", type=click.Path(dir_okay=False, path_type=Path),
              help="Write a copy of INPUT_FILE with deduction balances settled.")
def run_cmd(input_file, staff_id, tax_settings_path, output_format, write_balances):
    """Run payroll for every staff member in INPUT_FILE.

    INPUT_FILE is a YAML or JSON document with payment_types and staff
    sections. Payment types and exemptions fall back to the profile when
    the file does not define them.

    Staff records that fail validation are reported and skipped; the rest
    of the run still completes.

    Examples:
        payroll-calc run march.yaml
        payroll-calc run march.yaml --staff S001 --format json
        payroll-calc run march.yaml --write-balances april.yaml
    """
    try:
        payroll_file = load_payroll_file(input_file)

        if tax_settings_path is not None:
            tax_settings = load_tax_settings(tax_settings_path)
        elif payroll_file.tax_settings is not None:
            tax_settings = payroll_file.tax_settings
        else:
            tax_settings = load_tax_settings()

        exemptions = payroll_file.tax_exemptions
        if exemptions is None:
            exemptions = load_tax_exemptions()

        payment_types = payroll_file.payment_types or load_payment_types()
    except USER_ERRORS as e:
        raise click.ClickException(str(e))

    staff = payroll_file.staff
    if staff_id is not None:
        staff = [s for s in staff if isinstance(s, dict) and str(s.get("staff_member_id")) == staff_id]
        if not staff:
            raise click.ClickException(f"Staff member '{staff_id}' not found in {input_file}")

    if not payment_types:
        click.echo("Warning: no payment types defined; every gross will be zero.", err=True)

    run = run_payroll(payment_types, staff, tax_settings, exemptions)

    if _resolve_format(output_format) == "json":
        click.echo(_dump_json(run.model_dump()))
    else:
        render_payroll_run(Console(), run)

    if write_balances:
        path = _write_settled_balances(input_file, write_balances, run)
        click.echo(f"Settled balances written to: {path}", err=True)

    if run.errors and not run.results:
        raise click.ClickException("No staff member could be calculated.")


def _write_settled_balances(input_file: Path, output_file: Path, run) -> Path:
    """Copy the input document with each calculated staff member's balances advanced."""
    document = read_structured_file(input_file)
    applied_by_staff = {r.staff_member_id: r.deductions for r in run.results}

    for entry in document.get("staff") or []:
        if not isinstance(entry, dict):
            continue
        applied = applied_by_staff.get(str(entry.get("staff_member_id", "")))
        if applied is None:
            continue
        raw_deductions = entry.get("deductions") or []
        balances = [DeductionBalance.model_validate(d) for d in raw_deductions]
        # Only deducted_so_far moves; other columns are kept as written
        for raw, settled in zip(raw_deductions, settle_deductions(balances, applied)):
            raw["deducted_so_far"] = to_number(settled.deducted_so_far)

    return write_structured_file(output_file, document)


@cli.command("paye")
@click.argument("income")
@click.option("--variant", type=click.Choice(["canonical", "legacy"]), default="canonical",
              help="canonical: inclusive band widths, rounded. legacy: exclusive widths, unrounded.")
@click.option("--tax-settings", "tax_settings_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Tax settings file (default: profile)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None)
def paye_cmd(income, variant, tax_settings_path, output_format):
    """Calculate PAYE on a taxable INCOME using the configured bands.

    Examples:
        payroll-calc paye 150000
        payroll-calc paye 150000 --variant legacy
    """
    tax_settings = _resolve_tax_settings(tax_settings_path)
    amount = to_money(income)

    if variant == "legacy":
        paye = calculate_paye_legacy(amount, tax_settings.paye_bands)
    else:
        paye = calculate_paye(amount, tax_settings.paye_bands)

    if _resolve_format(output_format) == "json":
        click.echo(_dump_json({"income": amount, "variant": variant, "paye": paye}))
    else:
        click.echo(f"Income: {amount:>14,.2f}")
        click.echo(f"PAYE:   {paye:>14,.2f}  ({variant})")


@cli.command("statutory")
@click.argument("gross")
@click.option("--basic", default="0", help="Basic Pay component (RAMA base).")
@click.option("--transport", default="0", help="Transport Allowance component (excluded from maternity).")
@click.option("--tax-settings", "tax_settings_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Tax settings file (default: profile)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None)
def statutory_cmd(gross, basic, transport, tax_settings_path, output_format):
    """Show statutory deductions for a GROSS salary.

    Example:
        payroll-calc statutory 500000 --basic 300000 --transport 50000
    """
    tax_settings = _resolve_tax_settings(tax_settings_path)
    try:
        exemptions = load_tax_exemptions()
    except USER_ERRORS as e:
        raise click.ClickException(str(e))

    result = compute_statutory(to_money(gross), to_money(basic), to_money(transport), tax_settings, exemptions)

    if _resolve_format(output_format) == "json":
        click.echo(_dump_json(result.model_dump()))
        return

    rows = [
        ("Pension", result.employee_pension, result.employer_pension),
        ("Maternity", result.employee_maternity, result.employer_maternity),
        ("RAMA", result.employee_rama, result.employer_rama),
    ]
    click.echo(f"{'':<18} {'Employee':>14} {'Employer':>14}")
    for label, employee, employer in rows:
        click.echo(f"{label:<18} {employee:>14,.2f} {employer:>14,.2f}")
    click.echo(f"{'PAYE':<18} {result.paye:>14,.2f}")
    click.echo(f"{'Net before CBHI':<18} {result.net_before_cbhi:>14,.2f}")
    click.echo(f"{'CBHI':<18} {result.cbhi:>14,.2f}")
    click.echo(f"{'Net after CBHI':<18} {result.net_after_cbhi:>14,.2f}")


@cli.command("gross-up")
@click.argument("base_gross")
@click.argument("net_increment")
@click.option("--basic", default="0", help="Basic Pay within BASE_GROSS.")
@click.option("--transport", default="0", help="Transport Allowance within BASE_GROSS.")
@click.option("--component", type=click.Choice(["basic", "transport"]), default=None,
              help="Treat the increment as Basic Pay or Transport Allowance.")
@click.option("--tax-settings", "tax_settings_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Tax settings file (default: profile)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None)
def gross_up_cmd(base_gross, net_increment, basic, transport, component, tax_settings_path, output_format):
    """Find the gross increment that raises take-home pay by NET_INCREMENT.

    Example:
        payroll-calc gross-up 500000 50000 --basic 300000 --transport 50000
    """
    tax_settings = _resolve_tax_settings(tax_settings_path)
    try:
        exemptions = load_tax_exemptions()
    except USER_ERRORS as e:
        raise click.ClickException(str(e))

    base = to_money(base_gross)
    target = to_money(net_increment)
    increment = solve_gross_increment(
        base, target, tax_settings,
        basic_pay=to_money(basic),
        transport_allowance=to_money(transport),
        component=component,
        exemptions=exemptions,
    )

    if _resolve_format(output_format) == "json":
        click.echo(_dump_json({
            "base_gross": base,
            "net_increment": target,
            "gross_increment": increment,
            "new_gross": base + increment,
        }))
    else:
        click.echo(f"Net increment:   {target:>14,.2f}")
        click.echo(f"Gross increment: {increment:>14,.2f}")
        click.echo(f"New gross:       {base + increment:>14,.2f}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
