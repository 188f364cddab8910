"""
Engine configuration: business floors, impact model constants and logging.

Sources are layered, later ones winning:
    1. ``DEFAULTS`` below (plus any host-supplied defaults)
    2. A YAML or JSON config file
    3. Environment variables ``WAQF_ENGINE_<SECTION>__<KEY>``

Env values are read as YAML scalars, so ``WAQF_ENGINE_LIMITS__MIN_CONTRIBUTION=25``
arrives as the number 25 and ``...__FILE=null`` as None.

Usage:
    config = Config(config_file="config/engine.yaml")
    config.get("limits.min_contribution")
    config.validated().impact.permanent_annual_return
"""

from __future__ import annotations

import copy
import json
import os
from typing import TYPE_CHECKING, Any

import yaml
from loguru import logger

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .config_schema import EngineConfig

ENV_PREFIX = "WAQF_ENGINE_"

# Submission and top-up floors, in currency units
MIN_PORTFOLIO_AMOUNT = 100.0
MIN_CONTRIBUTION_AMOUNT = 10.0

DEFAULTS: dict[str, Any] = {
    "limits": {
        "min_portfolio_amount": MIN_PORTFOLIO_AMOUNT,
        "min_contribution": MIN_CONTRIBUTION_AMOUNT,
    },
    "impact": {
        "average_beneficiary_cost": 100.0,
        "consumable_deployment_months": 24,
        "permanent_annual_return": 0.07,
        "revolving_annual_return": 0.05,
        "revolving_lock_years": 5,
        "lifetime_horizon_years": 100,
    },
    "logging": {
        "level": "WARNING",
        "file": None,
    },
}


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into ``target`` in place, section by section."""
    for key, value in source.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def read_config_file(path: str) -> dict[str, Any]:
    """Load a YAML or JSON mapping.

    Raises:
        ConfigurationError: if the file is missing, unreadable, of an
            unsupported type, or does not hold a mapping.
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Config file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext not in (".yaml", ".yml", ".json"):
        raise ConfigurationError(f"Unsupported config file type: {ext or path}")

    try:
        with open(path) as f:
            data = json.load(f) if ext == ".json" else yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a mapping, got {type(data).__name__}")
    return data


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Nested overrides from ``PREFIX_SECTION__KEY`` variables."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for env_key, raw in environ.items():
        if not env_key.startswith(prefix):
            continue
        *sections, key = env_key[len(prefix) :].lower().split("__")
        current = overrides
        for section in sections:
            current = current.setdefault(section, {})
        try:
            current[key] = yaml.safe_load(raw)
        except yaml.YAMLError:
            current[key] = raw
    return overrides


class Config:
    """
    Merged engine configuration.

    ``sources`` lists the layers that contributed, in load order, which is
    handy when a value is not what you expected.
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = ENV_PREFIX,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: Path to a YAML or JSON config file.
            env_prefix: Prefix for environment overrides; empty disables them.
            defaults: Host defaults layered over ``DEFAULTS``.
        """
        self.config_file = config_file
        self.env_prefix = env_prefix or ""
        self.sources: list[str] = ["defaults"]
        self.config_data: dict[str, Any] = copy.deepcopy(DEFAULTS)

        if defaults:
            deep_merge(self.config_data, copy.deepcopy(defaults))
            self.sources.append("host defaults")

        if config_file:
            deep_merge(self.config_data, read_config_file(config_file))
            self.sources.append(config_file)

        if self.env_prefix:
            overrides = env_overrides(self.env_prefix)
            if overrides:
                deep_merge(self.config_data, overrides)
                self.sources.append(f"env {self.env_prefix}*")

        logger.debug(f"Configuration loaded from: {', '.join(self.sources)}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """Value at a dot path such as ``"impact.revolving_lock_years"``, or ``default``."""
        current: Any = self.config_data
        for part in key_path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key_path: str, value: Any) -> None:
        *sections, key = key_path.split(".")
        current = self.config_data
        for section in sections:
            current = current.setdefault(section, {})
        current[key] = value

    def section(self, name: str) -> dict[str, Any]:
        """A copy of one top-level section; empty if absent."""
        value = self.config_data.get(name)
        return copy.deepcopy(value) if isinstance(value, dict) else {}

    def validated(self) -> EngineConfig:
        """Typed view of the merged configuration.

        Raises:
            ConfigurationError: if any value fails schema validation.
        """
        from pydantic import ValidationError

        from .config_schema import EngineConfig

        try:
            return EngineConfig.model_validate(self.config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


_config_instance: Config | None = None


def get_config(config_file: str | None = None, env_prefix: str = ENV_PREFIX) -> Config:
    """Process-wide Config, created on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix)
    return _config_instance


def reset_config() -> None:
    global _config_instance
    _config_instance = None
