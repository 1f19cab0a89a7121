"""Configuration management for Payroll Calc.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - profile: path to profile.yaml (optional, if not colocated)
   - default_output_format: "text" or "json"

2. profile.yaml - Company configuration
   - company: name and other descriptive data
   - tax_settings: statutory rates and PAYE bands
   - tax_exemptions: company exemption flags
   - payment_types: company payment type definitions

Config directory resolution:
1. PAYROLL_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/payroll-calc/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError

from .inputs import load_tax_settings_file
from .schemas import PaymentTypeDefinition, TaxExemptions, TaxSettings
from .taxes.defaults import DEFAULT_PAYMENT_TYPES, DEFAULT_TAX_SETTINGS
from .taxes.paye import check_paye_bands

logger = logging.getLogger(__name__)

APP_NAME = "payroll-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"
OUTPUT_FORMATS = ("text", "json")


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


class TaxSettingsNotFoundError(Exception):
    """Raised when no tax settings are configured anywhere."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYROLL_CALC_CONFIG_PATH environment variable
    2. ~/.config/payroll-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("PAYROLL_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_output_format() -> str:
    """Get the preferred CLI output format ("text" unless configured)."""
    value = get_setting("default_output_format", "text")
    if value not in OUTPUT_FORMATS:
        logger.warning(f"Ignoring unknown default_output_format '{value}' in settings.json")
        return "text"
    return value


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    config_dir = get_config_dir()

    custom_profile = load_settings().get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: payroll-calc settings profile /path/to/profile.yaml"
            )
        return profile_path

    profile_path = config_dir / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Create a profile with: payroll-calc profile init"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load company profile from profile.yaml.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Profile dictionary (empty dict if not required and not found)
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save company profile to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value by dot-notation key (e.g., "tax_settings.cbhi_rate")."""
    value = load_profile(require_exists=False)

    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key, creating nested sections."""
    profile = load_profile(require_exists=False)

    parts = key.split(".")
    current = profile
    for part in parts[:-1]:
        if part not in current or not isinstance(current[part], dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


def init_profile(company_name: str = "", force: bool = False) -> Path:
    """Write a starter profile.yaml with the stock tax configuration.

    Args:
        company_name: Company name to record
        force: Overwrite an existing profile

    Returns:
        Path to the written profile

    Raises:
        FileExistsError: If a profile exists and force is False
    """
    path = get_profile_path(require_exists=False)
    if path.exists() and not force:
        raise FileExistsError(f"Profile already exists: {path}")

    profile = {
        "company": {"name": company_name},
        "tax_settings": DEFAULT_TAX_SETTINGS,
        "tax_exemptions": TaxExemptions().model_dump(),
        "payment_types": DEFAULT_PAYMENT_TYPES,
    }
    return save_profile(profile, path)


# =============================================================================
# Typed access to profile sections
# =============================================================================


def load_tax_settings(path: Optional[Path] = None) -> TaxSettings:
    """Load tax settings for a calculation run.

    Resolution order:
    1. Explicit file (tax settings mapping, or a file with a tax_settings key)
    2. tax_settings section of profile.yaml

    Per-field gaps default to zero, but there is no fallback for the whole
    configuration: running payroll without tax settings is an error.

    Raises:
        TaxSettingsNotFoundError: If no tax settings are configured
        pydantic.ValidationError: If the configured settings are malformed
    """
    if path is not None:
        return load_tax_settings_file(path)

    profile = load_profile(require_exists=False)
    data = profile.get("tax_settings")
    if data is None:
        raise TaxSettingsNotFoundError(
            f"No tax_settings configured in {get_profile_path()}.\n\n"
            f"Create a profile with: payroll-calc profile init\n"
            f"Or pass a file with: --tax-settings FILE"
        )
    return TaxSettings.model_validate(data)


def load_tax_exemptions() -> TaxExemptions:
    """Load company exemption flags from the profile (none if unset)."""
    profile = load_profile(require_exists=False)
    return TaxExemptions.model_validate(profile.get("tax_exemptions") or {})


def load_payment_types() -> List[PaymentTypeDefinition]:
    """Load company payment types from the profile (empty if unset)."""
    profile = load_profile(require_exists=False)
    return [PaymentTypeDefinition.model_validate(p) for p in profile.get("payment_types") or []]


# =============================================================================
# Profile validation
# =============================================================================


class ProfileValidationResult:
    """Result of profile validation."""

    def __init__(
        self,
        location_path: Path,
        profile: dict,
        errors: list = None,
        warnings: list = None,
    ):
        """
        Args:
            location_path: Path to the profile file
            profile: The loaded profile dict
            errors: Problems that make payroll results wrong or impossible
            warnings: Suspicious but allowed configuration
        """
        self.location_path = location_path
        self.profile = profile
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def ok(self) -> bool:
        return not self.errors


def _format_errors(section: str, e: ValidationError) -> List[str]:
    return [
        f"{section}.{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in e.errors()
    ]


def validate_profile(profile: Optional[dict] = None) -> ProfileValidationResult:
    """Validate the profile's tax configuration and payment types.

    Args:
        profile: Optional profile dict (loads from file if not provided)

    Raises:
        ProfileNotFoundError: If no profile exists and none was given
    """
    location_path = get_profile_path(require_exists=profile is None)
    if profile is None:
        profile = load_profile(require_exists=True)

    errors: List[str] = []
    warnings: List[str] = []

    if "tax_settings" not in profile:
        errors.append("tax_settings: missing (payroll cannot run without it)")
    else:
        try:
            settings = TaxSettings.model_validate(profile["tax_settings"])
            errors.extend(f"tax_settings.paye_bands: {p}" for p in check_paye_bands(settings.paye_bands))
        except ValidationError as e:
            errors.extend(_format_errors("tax_settings", e))

    try:
        TaxExemptions.model_validate(profile.get("tax_exemptions") or {})
    except ValidationError as e:
        errors.extend(_format_errors("tax_exemptions", e))

    try:
        payment_types = [PaymentTypeDefinition.model_validate(p) for p in profile.get("payment_types") or []]
        names = [p.name for p in payment_types]
        if "Basic Pay" not in names:
            warnings.append("payment_types: no 'Basic Pay' type; RAMA will be zero")
        duplicates = sorted({n for n in names if names.count(n) > 1})
        for name in duplicates:
            warnings.append(f"payment_types: name '{name}' is used more than once")
    except ValidationError as e:
        errors.extend(_format_errors("payment_types", e))

    if not (profile.get("company") or {}).get("name"):
        warnings.append("company.name: not set")

    return ProfileValidationResult(
        location_path=location_path,
        profile=profile,
        errors=errors,
        warnings=warnings,
    )
