"""Unit tests for settings, profile and input file loading."""

import json
from decimal import Decimal

import pytest
import yaml
from pydantic import ValidationError

from payrollcalc.sdk import (
    InputFileError,
    ProfileNotFoundError,
    TaxSettingsNotFoundError,
    default_payment_types,
    default_tax_settings,
    get_config_dir,
    get_output_format,
    get_profile_path,
    get_profile_value,
    init_profile,
    load_payment_types,
    load_payroll_file,
    load_tax_exemptions,
    load_tax_settings,
    set_profile_value,
    set_setting,
    validate_profile,
)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config directory at an empty temp dir."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAYROLL_CALC_CONFIG_PATH", str(config_dir))
    return config_dir


class TestConfigDir:

    def test_env_var_wins(self, isolated_config):
        assert get_config_dir() == isolated_config

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PAYROLL_CALC_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "payroll-calc"

    def test_custom_profile_path(self, isolated_config, tmp_path):
        custom = tmp_path / "elsewhere" / "profile.yaml"
        set_setting("profile", str(custom))
        assert get_profile_path() == custom
        with pytest.raises(ProfileNotFoundError):
            get_profile_path(require_exists=True)


class TestOutputFormat:

    def test_default_is_text(self, isolated_config):
        assert get_output_format() == "text"

    def test_configured(self, isolated_config):
        set_setting("default_output_format", "json")
        assert get_output_format() == "json"

    def test_unknown_value_falls_back(self, isolated_config):
        set_setting("default_output_format", "xml")
        assert get_output_format() == "text"


class TestProfile:

    def test_no_profile_means_no_tax_settings(self, isolated_config):
        with pytest.raises(TaxSettingsNotFoundError):
            load_tax_settings()

    def test_init_seeds_stock_configuration(self, isolated_config):
        path = init_profile(company_name="Acme Ltd")
        assert path == isolated_config / "profile.yaml"
        assert load_tax_settings() == default_tax_settings()
        assert load_payment_types() == default_payment_types()
        assert load_tax_exemptions().paye_exempt is False
        assert get_profile_value("company.name") == "Acme Ltd"

    def test_init_refuses_to_overwrite(self, isolated_config):
        init_profile()
        with pytest.raises(FileExistsError):
            init_profile()
        init_profile(company_name="Replaced", force=True)
        assert get_profile_value("company.name") == "Replaced"

    def test_set_profile_value_nested(self, isolated_config):
        init_profile()
        set_profile_value("tax_settings.cbhi_rate", 1)
        assert load_tax_settings().cbhi_rate == Decimal("1")

    def test_malformed_tax_settings_rejected(self, isolated_config):
        (isolated_config / "profile.yaml").write_text(yaml.dump({
            "tax_settings": {"cbhi_rat": 0.5},
        }))
        with pytest.raises(ValidationError):
            load_tax_settings()


class TestValidateProfile:

    def test_stock_profile_valid(self, isolated_config):
        init_profile(company_name="Acme Ltd")
        validation = validate_profile()
        assert validation.ok
        assert validation.errors == []
        assert validation.warnings == []

    def test_missing_company_name_warns(self, isolated_config):
        init_profile()
        validation = validate_profile()
        assert validation.ok
        assert "company.name: not set" in validation.warnings

    def test_no_profile_raises(self, isolated_config):
        with pytest.raises(ProfileNotFoundError):
            validate_profile()

    def test_problems_reported(self, isolated_config):
        profile = {
            "company": {"name": "Acme"},
            "tax_settings": {
                "paye_bands": [
                    {"min": 0, "max": 60000, "rate": 0},
                    {"min": 60000, "max": 100000, "rate": 10},
                ],
            },
            "tax_exemptions": {"vat_exempt": True},
            "payment_types": [
                {"id": "a", "name": "Bonus", "kind": "gross"},
                {"id": "b", "name": "Bonus", "kind": "net"},
            ],
        }
        validation = validate_profile(profile=profile)

        assert not validation.ok
        assert any("overlap" in e for e in validation.errors)
        assert any("should be unbounded" in e for e in validation.errors)
        assert any(e.startswith("tax_exemptions.vat_exempt") for e in validation.errors)
        assert any("Basic Pay" in w for w in validation.warnings)
        assert any("'Bonus' is used more than once" in w for w in validation.warnings)

    def test_missing_tax_settings_is_error(self, isolated_config):
        validation = validate_profile(profile={"company": {"name": "Acme"}})
        assert any(e.startswith("tax_settings") for e in validation.errors)


class TestInputFiles:

    def test_load_yaml_payroll_file(self, tmp_path):
        path = tmp_path / "march.yaml"
        path.write_text(yaml.dump({
            "period": "2026-03",
            "payment_types": [{"id": "basic", "name": "Basic Pay", "type": "gross", "order": 1}],
            "staff": [{"staff_member_id": "S001", "amounts": [{"payment_type_id": "basic", "amount": 1000}]}],
            "tax_exemptions": {"cbhi_exempt": True},
        }))
        payroll_file = load_payroll_file(path)

        assert payroll_file.payment_types[0].kind == "gross"
        assert payroll_file.staff[0]["staff_member_id"] == "S001"
        assert payroll_file.tax_settings is None
        assert payroll_file.tax_exemptions.cbhi_exempt is True
        assert payroll_file.extra == {"period": "2026-03"}

    def test_load_json_payroll_file(self, tmp_path):
        path = tmp_path / "march.json"
        path.write_text(json.dumps({"staff": []}))
        assert load_payroll_file(path).staff == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileError):
            load_payroll_file(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(InputFileError):
            load_payroll_file(path)

    def test_unparseable(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InputFileError):
            load_payroll_file(path)

    def test_tax_settings_file_bare_or_nested(self, isolated_config, tmp_path):
        bare = tmp_path / "rates.yaml"
        bare.write_text(yaml.dump({"cbhi_rate": 0.5}))
        nested = tmp_path / "other.yaml"
        nested.write_text(yaml.dump({"tax_settings": {"cbhi_rate": 0.5}}))

        assert load_tax_settings(bare).cbhi_rate == Decimal("0.5")
        assert load_tax_settings(nested).cbhi_rate == Decimal("0.5")
