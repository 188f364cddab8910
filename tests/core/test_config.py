"""Tests for waqf_engine.core.config."""

import json
import os

import pytest
import yaml

from waqf_engine.core.config import Config, env_overrides, get_config, reset_config
from waqf_engine.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("limits.min_portfolio_amount") == 100.0
        assert config.get("limits.min_contribution") == 10.0
        assert config.get("impact.permanent_annual_return") == 0.07
        assert config.get("logging.level") == "WARNING"

    def test_yaml_config_file(self, tmp_config_file):
        config = Config(config_file=tmp_config_file)
        assert config.get("limits.min_contribution") == 25
        assert config.get("impact.average_beneficiary_cost") == 50
        # Untouched siblings keep their defaults
        assert config.get("limits.min_portfolio_amount") == 100.0

    def test_json_config_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.json")
        with open(config_path, "w") as f:
            json.dump({"impact": {"revolving_lock_years": 3}}, f)

        config = Config(config_file=config_path)
        assert config.get("impact.revolving_lock_years") == 3

    def test_env_overrides_file(self, tmp_config_file, monkeypatch):
        monkeypatch.setenv("WAQF_ENGINE_LIMITS__MIN_CONTRIBUTION", "40")
        config = Config(config_file=tmp_config_file)
        assert config.get("limits.min_contribution") == 40
        assert config.sources == ["defaults", tmp_config_file, "env WAQF_ENGINE_*"]
        assert config.validated().limits.min_contribution == 40.0

    def test_custom_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MYAPP_LOGGING__LEVEL", "debug")
        config = Config(env_prefix="MYAPP_")
        assert config.get("logging.level") == "debug"

    def test_extra_defaults(self):
        config = Config(defaults={"limits": {"min_contribution": 5}, "host": {"name": "mosque"}})
        assert config.get("limits.min_contribution") == 5
        assert config.get("limits.min_portfolio_amount") == 100.0
        assert config.get("host.name") == "mosque"

    def test_missing_file(self, tmp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            Config(config_file=os.path.join(tmp_dir, "nope.yaml"))

    def test_unsupported_extension(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.toml")
        with open(config_path, "w") as f:
            f.write("[limits]\n")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            Config(config_file=config_path)

    def test_unparseable_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            f.write("limits: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            Config(config_file=config_path)

    def test_get_missing_key(self):
        config = Config()
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set(self):
        config = Config()
        config.set("impact.average_beneficiary_cost", 75)
        config.set("new.nested.key", "value")
        assert config.get("impact.average_beneficiary_cost") == 75
        assert config.get("new.nested.key") == "value"

    def test_validated_rejects_bad_values(self):
        config = Config()
        config.set("impact.permanent_annual_return", 3)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            config.validated()


class TestSingleton:
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first

    def test_loads_file_on_first_call(self, tmp_config_file):
        config = get_config(config_file=tmp_config_file)
        assert config.get("limits.min_contribution") == 25


class TestLayers:
    def test_env_values_read_as_scalars(self):
        environ = {
            "WAQF_ENGINE_IMPACT__REVOLVING_LOCK_YEARS": "3",
            "WAQF_ENGINE_LOGGING__FILE": "null",
            "WAQF_ENGINE_LOGGING__LEVEL": "info",
            "OTHER_LIMITS__MIN_CONTRIBUTION": "1",
        }
        assert env_overrides("WAQF_ENGINE_", environ) == {
            "impact": {"revolving_lock_years": 3},
            "logging": {"file": None, "level": "info"},
        }

    def test_non_mapping_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            f.write("- just\n- a list\n")
        with pytest.raises(ConfigurationError, match="must hold a mapping"):
            Config(config_file=config_path)

    def test_empty_file_keeps_defaults(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        open(config_path, "w").close()
        assert Config(config_file=config_path).get("limits.min_contribution") == 10.0

    def test_section_is_a_copy(self):
        config = Config()
        limits = config.section("limits")
        limits["min_contribution"] = 0
        assert config.get("limits.min_contribution") == 10.0
        assert config.section("missing") == {}

    def test_defaults_not_shared_between_instances(self):
        first = Config()
        first.set("limits.min_contribution", 99)
        assert Config().get("limits.min_contribution") == 10.0
