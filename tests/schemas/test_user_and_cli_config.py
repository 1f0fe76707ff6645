"""Tests for user-facing and command-line config schemas."""

import pytest
from pydantic import ValidationError

from statcan_trends.schemas import UserConfig, CLIConfig

pytestmark = pytest.mark.unit


class TestUserConfig:

    def test_uppercase_aliases(self):
        user = UserConfig.model_validate({
            "BASE_DIR": "/data",
            "DATA_DIR": "/data/in",
            "DOWNLOAD": True,
            "LOG_LEVEL": "info",
            "RUN_DATASETS": "grain_exports",
        })
        assert user.base_dir == "/data"
        assert user.log_level == "INFO"
        assert user.selected_datasets == ["grain_exports"]

    def test_field_names_also_accepted(self):
        user = UserConfig(base_dir="/data")
        assert user.base_dir == "/data"

    def test_unknown_keys_ignored(self):
        user = UserConfig.model_validate({"BASE_DIR": "/data", "THEME": "dark"})
        assert user.to_internal_overrides() == {"base_dir": "/data"}

    def test_empty_user_has_no_overrides(self):
        assert UserConfig().to_internal_overrides() == {}

    def test_overrides_structure(self):
        user = UserConfig.model_validate({
            "LOG_LEVEL": "warning",
            "DATASETS": {"grain_exports": {"scale": 10}},
            "visualization": {"dpi": 72, "output_format": ".SVG"},
            "output": {"write_csv": False},
        })
        assert user.to_internal_overrides() == {
            "datasets": {"grain_exports": {"scale": 10}},
            "visualization": {"dpi": 72, "output_format": "svg"},
            "output": {"write_csv": False},
            "logging": {"level": "WARNING"},
        }

    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            UserConfig(LOG_LEVEL="loud")


class TestCLIConfig:

    def test_defaults_produce_no_overrides(self):
        assert CLIConfig().to_internal_overrides() == {}

    def test_single_dataset_coerced_to_list(self):
        assert CLIConfig(datasets="grain_exports").datasets == ["grain_exports"]

    def test_empty_dataset_list_means_no_selection(self):
        assert CLIConfig(datasets=[]).datasets is None

    def test_overrides_structure(self):
        cli = CLIConfig(base_dir="/out", datasets=["a"], download=True, plots=False, log_level="DEBUG")
        assert cli.to_internal_overrides() == {
            "base_dir": "/out",
            "selected_datasets": ["a"],
            "download": True,
            "visualization": {"enabled": False},
            "logging": {"level": "DEBUG"},
        }

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            CLIConfig(theme="dark")
