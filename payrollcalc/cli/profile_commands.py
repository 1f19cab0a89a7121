"""Profile CLI commands for Payroll Calc.

Manages company configuration (profile.yaml) - tax settings, exemptions,
payment types.
"""

import click
import yaml

from payrollcalc.sdk import (
    get_profile_path,
    get_profile_value,
    set_profile_value,
    init_profile,
    ProfileNotFoundError,
    validate_profile,
)


def _display_validation(validation, show_contents=True):
    """Display validation results consistently across commands.

    Args:
        validation: ProfileValidationResult from validate_profile()
        show_contents: Whether to show full profile YAML

    Returns:
        True if valid (no errors), False if has errors
    """
    if validation.errors:
        click.echo()
        click.echo("Validation Errors (profile is invalid):")
        for error in validation.errors:
            click.echo(f"  ! {error}")
        click.echo()
        click.echo(f"Profile path: {validation.location_path}")

    if validation.warnings:
        click.echo()
        click.echo("Warnings:")
        for warning in validation.warnings:
            click.echo(f"  - {warning}")

    if validation.ok and not validation.warnings:
        click.echo()
        click.echo("Profile is valid.")

    if show_contents:
        click.echo()
        click.echo("---")
        click.echo(yaml.dump(validation.profile, default_flow_style=False, sort_keys=False))

    return validation.ok


@click.group()
def profile():
    """Manage the company profile (profile.yaml).

    The profile holds the configuration every payroll run needs:
    - tax_settings: statutory rates and PAYE bands
    - tax_exemptions: exemption flags for the company
    - payment_types: payment types and their calculation order
    """
    pass


@profile.command("init")
@click.option("--company", default="", help="Company name to record in the profile.")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def profile_init(company, force):
    """Create a profile seeded with the stock tax settings.

    Examples:
        payroll-calc profile init --company "Acme Ltd"
        payroll-calc profile init --force
    """
    try:
        path = init_profile(company_name=company, force=force)
    except FileExistsError as e:
        raise click.ClickException(f"{e}\nUse --force to overwrite.")

    click.echo(f"Created profile: {path}")
    click.echo("Review tax_settings before running payroll.")


@profile.command("show")
def profile_show():
    """Show the active profile, its location, and validation status."""
    profile_path = get_profile_path(require_exists=False)
    click.echo(f"Profile: {profile_path}")

    if not profile_path.exists():
        click.echo()
        click.echo("Profile does not exist yet. Create with:")
        click.echo("  payroll-calc profile init")
        return

    try:
        validation = validate_profile()
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))
    _display_validation(validation, show_contents=True)


@profile.command("validate")
def profile_validate():
    """Validate the profile; exits non-zero if it has errors."""
    try:
        validation = validate_profile()
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))

    click.echo(f"Profile: {validation.location_path}")
    if not _display_validation(validation, show_contents=False):
        raise click.ClickException("Profile has validation errors.")


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get a profile configuration value.

    KEY is a dot-notation path like 'tax_settings.cbhi_rate'
    """
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"Key '{key}' not found in profile")

    if isinstance(value, (dict, list)):
        click.echo(yaml.dump(value, default_flow_style=False, sort_keys=False).rstrip())
    else:
        click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile configuration value.

    KEY is a dot-notation path like 'tax_settings.cbhi_rate'
    VALUE is parsed as YAML, so numbers, booleans and lists keep their type

    Examples:
        payroll-calc profile set company.name "Acme Ltd"
        payroll-calc profile set tax_settings.rama_employee_rate 7.5
        payroll-calc profile set tax_exemptions.cbhi_exempt true
        payroll-calc profile set tax_settings.paye_bands '[{min: 0, max: null, rate: 0}]'
    """
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed_value = value
    if parsed_value is None:
        parsed_value = value

    profile_file = set_profile_value(key, parsed_value)
    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to: {profile_file}")

    validation = validate_profile()
    if validation.errors:
        _display_validation(validation, show_contents=False)
