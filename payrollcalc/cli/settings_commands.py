"""Settings CLI commands for Payroll Calc.

Manages settings.json - profile location and output preferences.
"""

import click
from pathlib import Path

from payrollcalc.sdk import (
    load_settings,
    save_settings,
    set_setting,
    get_settings_path,
    get_profile_path,
    get_output_format,
)
from payrollcalc.sdk.config import OUTPUT_FORMATS


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - profile: path to an external profile.yaml
    - default_output_format: text or json
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  profile: {get_profile_path()}")
    click.echo(f"  default_output_format: {get_output_format()}")


@settings.command("profile")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom profile path, revert to default")
def settings_profile(path, clear):
    """Set or clear the path to an external profile.yaml.

    Examples:
        payroll-calc settings profile ~/company-config/profile.yaml
        payroll-calc settings profile --clear
    """
    if clear:
        current = load_settings()
        if "profile" in current:
            del current["profile"]
            save_settings(current)
            click.echo("Cleared profile setting.")
            click.echo(f"Profile is now: {get_profile_path()} (default)")
        else:
            click.echo("profile was not set.")
        return

    if not path:
        click.echo(f"profile: {get_profile_path()}")
        return

    profile_path = Path(path).expanduser().resolve()
    if not profile_path.exists():
        raise click.ClickException(f"Profile file not found: {profile_path}")

    settings_file = set_setting("profile", str(profile_path))
    click.echo(f"Set profile = {profile_path}")
    click.echo(f"Saved to: {settings_file}")


@settings.command("output-format")
@click.argument("output_format", required=False, type=click.Choice(OUTPUT_FORMATS))
def settings_output_format(output_format):
    """Show or set the default output format (text or json)."""
    if not output_format:
        click.echo(f"default_output_format: {get_output_format()}")
        return

    settings_file = set_setting("default_output_format", output_format)
    click.echo(f"Set default_output_format = {output_format}")
    click.echo(f"Saved to: {settings_file}")
